"""
Application Schemas
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import Field

from app.core.sanitize import PlainText
from app.modules.applications.models import Application, ApplicationStatus
from app.modules.shared import CamelModel, PaginationMeta


class CreateApplicationRequest(CamelModel):
    university_id: UUID
    program_id: UUID
    personal_statement: Annotated[PlainText, Field(max_length=10000)] | None = None
    notes: Annotated[PlainText, Field(max_length=2000)] | None = None
    document_ids: list[UUID] = Field(default_factory=list, max_length=20)


class UpdateStatusRequest(CamelModel):
    status: ApplicationStatus
    notes: Annotated[PlainText, Field(max_length=2000)] | None = None


class ApplicationUniversity(CamelModel):
    id: UUID
    name: str
    country: str
    website: str | None = None


class ApplicationProgram(CamelModel):
    id: UUID
    name: str
    level: str | None = None
    duration: str | None = None


class AttachedDocument(CamelModel):
    document_id: UUID
    document_type: str
    file_name: str
    file_url: str


class ApplicationResponse(CamelModel):
    id: UUID
    user_id: UUID
    status: ApplicationStatus
    submitted_at: datetime | None = None
    last_updated: datetime | None = None
    decided_at: datetime | None = None
    university: ApplicationUniversity
    program: ApplicationProgram

    @classmethod
    def from_application(cls, application: Application) -> "ApplicationResponse":
        return cls(
            id=application.id,
            user_id=application.user_id,
            status=application.status,
            submitted_at=application.submitted_at,
            last_updated=application.updated_at,
            decided_at=application.decided_at,
            university=ApplicationUniversity.model_validate(application.university),
            program=ApplicationProgram.model_validate(application.program),
        )


class ApplicationDetailResponse(ApplicationResponse):
    personal_statement: str | None = None
    notes: str | None = None
    documents: list[AttachedDocument] = Field(default_factory=list)

    @classmethod
    def from_application(cls, application: Application) -> "ApplicationDetailResponse":
        base = ApplicationResponse.from_application(application)
        return cls(
            **base.model_dump(),
            personal_statement=application.personal_statement,
            notes=application.notes,
            documents=[AttachedDocument.model_validate(d) for d in application.documents or []],
        )


class ApplicationListResponse(CamelModel):
    applications: list[ApplicationResponse]
    pagination: PaginationMeta
