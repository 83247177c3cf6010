"""Product repository: create (category upsert, SKU minting), lookup by id / SKU / barcode, cascading delete."""

from decimal import Decimal

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from stockroom.db import get_session
from stockroom.db.models.catalog import Category, Product
from stockroom.db.repositories import counter_repo
from stockroom.errors import DuplicateName, InvalidInput, NotFound
from stockroom.models.outputs import ProductDetailOut, ProductOut
from stockroom.utils.logger import get_logger

logger = get_logger("stockroom.products")


def _upsert_category(session: Session, name: str) -> Category:
    row = session.scalars(select(Category).where(Category.name == name)).first()
    if row is None:
        row = Category(name=name)
        session.add(row)
        session.flush()
        logger.info("category.created", category_id=row.id, name=name)
    return row


def create_product(
    name: str,
    category_name: str,
    sku: str | None = None,
    barcode: str | None = None,
    description: str | None = None,
    manufacturer: str | None = None,
    model: str | None = None,
    price: Decimal = Decimal("0"),
    minimum_stock: int = 0,
) -> ProductOut:
    """Create a product. Without an explicit ``sku`` one is minted from the SKU counter."""
    name = (name or "").strip()
    category_name = (category_name or "").strip()
    if not name or not category_name:
        raise InvalidInput("name and category_name are required")
    if minimum_stock < 0:
        raise InvalidInput("minimum_stock must not be negative", minimum_stock=minimum_stock)
    barcode = (barcode or "").strip() or None
    # Minted in its own transaction, before this one takes the write lock
    sku = (sku or "").strip() or counter_repo.next_sku()
    with get_session() as session:
        if session.scalar(select(Product.id).where(Product.sku == sku)) is not None:
            raise DuplicateName("product sku", sku)
        if barcode and session.scalar(select(Product.id).where(Product.barcode == barcode)) is not None:
            raise DuplicateName("product barcode", barcode)
        category = _upsert_category(session, category_name)
        row = Product(
            sku=sku,
            barcode=barcode,
            name=name,
            description=description,
            manufacturer=manufacturer,
            model=model,
            category=category,
            price=price,
            minimum_stock=minimum_stock,
        )
        session.add(row)
        session.flush()
        out = ProductOut.model_validate(row)
    logger.info("product.created", product_id=out.id, sku=out.sku)
    return out


def get_product(product_id: int) -> ProductDetailOut:
    """Product with all of its serial numbers."""
    with get_session() as session:
        row = session.get(Product, product_id)
        if row is None:
            raise NotFound("Product", product_id)
        return ProductDetailOut.model_validate(row)


def find_by_code(code: str) -> ProductDetailOut:
    """Look a product up by SKU or barcode (scanner input)."""
    code = (code or "").strip()
    if not code:
        raise InvalidInput("code must not be empty")
    with get_session() as session:
        row = session.scalars(
            select(Product).where(or_(Product.sku == code, Product.barcode == code))
        ).first()
        if row is None:
            raise NotFound("Product", code)
        return ProductDetailOut.model_validate(row)


def list_products() -> list[ProductOut]:
    with get_session() as session:
        rows = session.scalars(select(Product).order_by(Product.name, Product.id)).all()
        return [ProductOut.model_validate(r) for r in rows]


def delete_product(product_id: int) -> None:
    """Delete a product; its serial numbers and stock requests go with it."""
    with get_session() as session:
        row = session.get(Product, product_id)
        if row is None:
            raise NotFound("Product", product_id)
        session.delete(row)
    logger.info("product.deleted", product_id=product_id)
