"""
Scholarship Schemas
"""

from datetime import date
from uuid import UUID

from pydantic import AliasChoices, Field

from app.modules.shared import CamelModel, PaginationMeta


class ScholarshipResponse(CamelModel):
    id: UUID
    name: str
    country: str | None = None
    amount: str | None = None
    level: str | None = None
    field: str | None = None
    eligibility: str | None = None
    deadline: date | None = None
    description: str | None = None
    application_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("link", "applicationUrl", "application_url"),
    )


class ScholarshipListResponse(CamelModel):
    scholarships: list[ScholarshipResponse]
    pagination: PaginationMeta


class ScholarshipMatchResponse(CamelModel):
    scholarship: ScholarshipResponse
    match_score: int
    reasons: list[str]


class AutoMatchResponse(CamelModel):
    matches: list[ScholarshipMatchResponse]
    profile_complete: bool
