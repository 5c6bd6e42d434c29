"""
Program Schemas
"""

from uuid import UUID

from app.modules.shared import CamelModel, PaginationMeta


class ProgramSummary(CamelModel):
    id: UUID
    name: str
    field: str | None = None
    level: str | None = None
    duration: str | None = None
    tuition_fee: float | None = None
    language: str | None = None
    intake: str | None = None
    requirements: str | None = None


class ProgramResponse(ProgramSummary):
    university_id: UUID
    university_name: str
    university_country: str


class UniversityBrief(CamelModel):
    id: UUID
    name: str
    country: str
    ranking: int | None = None
    website: str | None = None


class ProgramDetailResponse(ProgramSummary):
    university: UniversityBrief


class ProgramListResponse(CamelModel):
    programs: list[ProgramResponse]
    pagination: PaginationMeta


class RequirementsResponse(CamelModel):
    program_id: UUID
    program_name: str
    university_name: str
    level: str | None = None
    requirements: list[str]
