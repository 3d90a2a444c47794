from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class Transaction(Base):
    """Ledger entry for a property. Append-only: every create is a new row."""
    __tablename__ = "transactions"

    transaction_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[int] = mapped_column(
        ForeignKey("properties.property_id", ondelete="CASCADE"), index=True
    )
    transaction_type: Mapped[str | None] = mapped_column(String(100))  # Income | Expense | Repair | ...
    notes: Mapped[str | None] = mapped_column(String(255))
    # Sign convention is the caller's: the ledger stores the amount as entered
    transaction_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    transaction_date: Mapped[date] = mapped_column(Date)
