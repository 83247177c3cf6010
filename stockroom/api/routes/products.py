"""Product and SKU settings routes."""

from fastapi import APIRouter, Depends, Response

from stockroom.api.deps import admin_user, current_user
from stockroom.db.repositories import counter_repo, product_repo
from stockroom.models.inputs import ProductCreate, SkuPrefixUpdate
from stockroom.models.outputs import CounterInfo, ProductDetailOut, ProductOut, UserOut

router = APIRouter(tags=["products"])


@router.post("/products", status_code=201)
def create_product(body: ProductCreate, admin: UserOut = Depends(admin_user)) -> ProductOut:
    return product_repo.create_product(**body.model_dump())


@router.get("/products")
def list_products(user: UserOut = Depends(current_user)) -> list[ProductOut]:
    return product_repo.list_products()


@router.get("/products/code/{code}")
def find_product_by_code(code: str, user: UserOut = Depends(current_user)) -> ProductDetailOut:
    """Scanner lookup: SKU or barcode."""
    return product_repo.find_by_code(code)


@router.get("/products/{product_id}")
def get_product(product_id: int, user: UserOut = Depends(current_user)) -> ProductDetailOut:
    return product_repo.get_product(product_id)


@router.delete("/products/{product_id}", status_code=204)
def delete_product(product_id: int, admin: UserOut = Depends(admin_user)) -> Response:
    """Deletes the product together with its serial numbers and requests."""
    product_repo.delete_product(product_id)
    return Response(status_code=204)


@router.get("/settings/sku")
def get_sku_settings(user: UserOut = Depends(current_user)) -> CounterInfo:
    return counter_repo.peek()


@router.post("/settings/sku/next")
def mint_sku(admin: UserOut = Depends(admin_user)) -> dict[str, str]:
    return {"sku": counter_repo.next_sku()}


@router.put("/settings/sku/prefix")
def set_sku_prefix(body: SkuPrefixUpdate, admin: UserOut = Depends(admin_user)) -> CounterInfo:
    return counter_repo.set_prefix(body.prefix)
