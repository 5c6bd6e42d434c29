"""
University Schemas
"""

from uuid import UUID

from app.modules.programs.schemas import ProgramSummary
from app.modules.shared import CamelModel, PaginationMeta


class UniversityResponse(CamelModel):
    id: UUID
    name: str
    country: str
    region: str | None = None
    description: str | None = None
    ranking: int | None = None
    tuition_range: str | None = None
    has_scholarships: bool
    website: str | None = None
    logo_url: str | None = None


class UniversityDetailResponse(UniversityResponse):
    contact_email: str | None = None
    programs: list[ProgramSummary] = []


class UniversitySearchResponse(CamelModel):
    universities: list[UniversityResponse]
    pagination: PaginationMeta
    notice: str | None = None


class CountryListResponse(CamelModel):
    countries: list[str]
