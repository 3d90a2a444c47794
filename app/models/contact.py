from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base

CONTACT_TYPES = (
    "Personal",
    "Tenant",
    "Contractor",
    "Vendor",
    "Manager",
    "Emergency Contact",
    "Other",
)


class Contact(Base):
    """Address book entry. Not tied to a property."""
    __tablename__ = "contacts"

    contact_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    contact_name: Mapped[str] = mapped_column(String(255))
    contact_phone: Mapped[str] = mapped_column(String(20))  # 10 digits, no punctuation
    contact_email: Mapped[str | None] = mapped_column(String(255))
    contact_type: Mapped[str | None] = mapped_column(String(100))
    contact_notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
