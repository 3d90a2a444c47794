from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, Date, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class PurchaseDetails(Base):
    """Acquisition record; exactly one per property."""
    __tablename__ = "purchase_details"

    purchase_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[int] = mapped_column(
        ForeignKey("properties.property_id", ondelete="CASCADE"), unique=True
    )
    closing_date: Mapped[date | None] = mapped_column(Date)
    purchase_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    financing_type: Mapped[str | None] = mapped_column(Text)  # Cash | Loan | Seller Financing | Private Money | Hard Money
    acquisition_type: Mapped[str | None] = mapped_column(Text)
    buyer: Mapped[str | None] = mapped_column(Text)
    seller: Mapped[str | None] = mapped_column(Text)
    closing_costs: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    earnest_money: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    down_payment: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    notes: Mapped[str | None] = mapped_column(Text)


class LoanDetails(Base):
    """Financing for a purchase. loan_id is the lender's loan number, entered by the user."""
    __tablename__ = "loan_details"
    __table_args__ = (
        UniqueConstraint("property_id", "purchase_id", name="uq_loan_details_property_purchase"),
    )

    loan_id: Mapped[str] = mapped_column(String(100), primary_key=True)
    property_id: Mapped[int] = mapped_column(
        ForeignKey("properties.property_id", ondelete="CASCADE"), index=True
    )
    purchase_id: Mapped[int] = mapped_column(
        ForeignKey("purchase_details.purchase_id", ondelete="CASCADE")
    )
    loan_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    lender: Mapped[str | None] = mapped_column(Text)
    interest_rate: Mapped[Decimal | None] = mapped_column(Numeric(6, 4))  # e.g. 6.8750 = 6.875%
    loan_term: Mapped[int | None] = mapped_column(Integer)  # months
    loan_start: Mapped[date | None] = mapped_column(Date)
    loan_end: Mapped[date | None] = mapped_column(Date)
    amortization_period: Mapped[int | None] = mapped_column(Integer)  # months
    monthly_payment: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    loan_type: Mapped[str | None] = mapped_column(Text)  # Conventional | FHA | VA | Commercial | ...
    balloon_payment: Mapped[bool | None] = mapped_column(Boolean)
    prepayment_penalty: Mapped[bool | None] = mapped_column(Boolean)
    refinanced: Mapped[bool | None] = mapped_column(Boolean)
    loan_status: Mapped[str | None] = mapped_column(Text)  # Active | Paid Off | ...
    notes: Mapped[str | None] = mapped_column(Text)
