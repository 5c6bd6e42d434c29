"""
Program Models
"""

import enum
import uuid
from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.modules.shared import BaseModel
from app.modules.universities.models import University


class DegreeLevel(str, enum.Enum):
    BACHELOR = "bachelor"
    MASTER = "master"
    PHD = "phd"
    DIPLOMA = "diploma"
    CERTIFICATE = "certificate"


class Program(BaseModel):
    """
    A program at a university.

    `level` holds a DegreeLevel value; comparisons are case-insensitive so
    legacy rows like "Master" still match.
    """

    __tablename__ = "programs"

    university_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("universities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    field: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    level: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    duration: Mapped[str | None] = mapped_column(String(50), nullable=True)
    tuition_fee: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    language: Mapped[str | None] = mapped_column(String(50), nullable=True)
    intake: Mapped[str | None] = mapped_column(String(100), nullable=True)
    requirements: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    university: Mapped[University] = relationship(
        "University", back_populates="programs", lazy="joined"
    )
