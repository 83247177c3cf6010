"""ORM model for a staff request to take one unit out of stock."""

from sqlalchemy import Enum, ForeignKey, Index, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stockroom.db.base import Base, TimestampMixin
from stockroom.models.enums import RequestStatus


class StockRequest(Base, TimestampMixin):
    """One request per unit; a multi-unit ask is N sibling rows."""

    __tablename__ = "stock_requests"

    __table_args__ = (
        # At most one open (PENDING) request may hold a given unit
        Index(
            "uq_stock_requests_pending_serial",
            "serial_number_id",
            unique=True,
            sqlite_where=text("status = 'PENDING'"),
            postgresql_where=text("status = 'PENDING'"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    requester_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    serial_number_id: Mapped[int | None] = mapped_column(
        ForeignKey("serial_numbers.id", ondelete="SET NULL"), nullable=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[RequestStatus] = mapped_column(
        Enum(RequestStatus, native_enum=False, length=16),
        nullable=False,
        default=RequestStatus.PENDING,
        index=True,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    approver_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)

    product: Mapped["Product"] = relationship("Product", lazy="joined")  # noqa: F821
    requester: Mapped["User"] = relationship("User", foreign_keys=[requester_id], lazy="joined")  # noqa: F821
    serial_number: Mapped["SerialNumber | None"] = relationship("SerialNumber", lazy="joined")  # noqa: F821
