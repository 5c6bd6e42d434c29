"""
University Models
"""

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.modules.shared import BaseModel


class University(BaseModel):
    __tablename__ = "universities"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    country: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    region: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    ranking: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    tuition_range: Mapped[str | None] = mapped_column(String(100), nullable=True)
    has_scholarships: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    programs = relationship(
        "Program",
        back_populates="university",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="noload",
    )

    def __repr__(self) -> str:
        return f"<University(id={self.id}, name={self.name})>"
