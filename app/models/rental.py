from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class RentLog(Base):
    """Rent received, one row per property per calendar month."""
    __tablename__ = "rent_log"
    __table_args__ = (
        UniqueConstraint("property_id", "month", "year", name="uq_rent_log_property_month_year"),
    )

    rent_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[int] = mapped_column(
        ForeignKey("properties.property_id", ondelete="CASCADE"), index=True
    )
    month: Mapped[str] = mapped_column(String(3))  # Jan .. Dec
    year: Mapped[int] = mapped_column(Integer)
    rent_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    date_deposited: Mapped[date] = mapped_column(Date)
    check_number: Mapped[int | None] = mapped_column(Integer)
    notes: Mapped[str | None] = mapped_column(Text)


class PaymentLog(Base):
    """Payments made on a property (mortgage, escrow), keyed like the rent log."""
    __tablename__ = "payment_log"
    __table_args__ = (
        UniqueConstraint("property_id", "month", "year", name="uq_payment_log_property_month_year"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[int] = mapped_column(
        ForeignKey("properties.property_id", ondelete="CASCADE"), index=True
    )
    year: Mapped[int] = mapped_column(Integer)
    month: Mapped[str] = mapped_column(String(3))
    payment_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    check_number: Mapped[int | None] = mapped_column(Integer)
    notes: Mapped[str | None] = mapped_column(Text)
    date_paid: Mapped[date | None] = mapped_column(Date)


class Tenant(Base):
    """Lease holder of a property. tenant_status is derived from the lease dates."""
    __tablename__ = "tenant"
    __table_args__ = (
        UniqueConstraint("property_id", "tenant_name", "lease_start", name="uq_tenant_property_name_start"),
    )

    tenant_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[int] = mapped_column(
        ForeignKey("properties.property_id", ondelete="CASCADE"), index=True
    )
    tenant_name: Mapped[str | None] = mapped_column(String(255))
    tenant_status: Mapped[str | None] = mapped_column(String(50), index=True)  # Current | Future | Past
    lease_start: Mapped[date | None] = mapped_column(Date)
    lease_end: Mapped[date | None] = mapped_column(Date)
    rent_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
