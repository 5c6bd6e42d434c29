"""
Scholarship Models
"""

from datetime import date

from sqlalchemy import Boolean, Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.shared import BaseModel

# Country value for scholarships open to applicants from anywhere
GLOBAL_COUNTRY = "Global"


class Scholarship(BaseModel):
    __tablename__ = "scholarships"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    amount: Mapped[str | None] = mapped_column(String(100), nullable=True)
    level: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    field: Mapped[str | None] = mapped_column(String(100), nullable=True)
    eligibility: Mapped[str | None] = mapped_column(Text, nullable=True)
    deadline: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    link: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Scholarship(id={self.id}, name={self.name})>"
