"""ORM model for one physically tracked unit."""

from datetime import datetime

from sqlalchemy import Boolean, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stockroom.db.base import Base, TimestampMixin, utcnow
from stockroom.models.enums import AgingStatus, SerialStatus


class SerialNumber(Base, TimestampMixin):
    """Unit ledger row. ``status`` (where the unit is) and ``aging_status`` (how long it sat) are independent."""

    __tablename__ = "serial_numbers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    serial: Mapped[str] = mapped_column(String(128), unique=True, nullable=False, index=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[SerialStatus] = mapped_column(
        Enum(SerialStatus, native_enum=False, length=16),
        nullable=False,
        default=SerialStatus.IN_STOCK,
        index=True,
    )
    location_id: Mapped[int | None] = mapped_column(
        ForeignKey("storage_locations.id"), nullable=True, index=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    inventory_date: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    aging_status: Mapped[AgingStatus] = mapped_column(
        Enum(AgingStatus, native_enum=False, length=16),
        nullable=False,
        default=AgingStatus.FRESH,
    )
    needs_attention: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_alert_sent: Mapped[datetime | None] = mapped_column(nullable=True)

    product: Mapped["Product"] = relationship("Product", back_populates="serial_numbers")  # noqa: F821
    location: Mapped["StorageLocation | None"] = relationship("StorageLocation", lazy="joined")  # noqa: F821
