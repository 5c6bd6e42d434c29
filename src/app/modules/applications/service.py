"""
Application Service Layer

Submission rules, in order:
1. The plan in force must still allow another application
2. University and program must exist and belong together
3. No open application for the same program
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser
from app.core.email import send_application_submitted_email
from app.core.errors import AppError, ConflictError, NotFoundError, ValidationFailedError
from app.core.pagination import Pagination
from app.modules.applications import repository
from app.modules.applications.models import Application, ApplicationStatus
from app.modules.applications.schemas import (
    ApplicationListResponse,
    ApplicationResponse,
    CreateApplicationRequest,
)
from app.modules.programs import repository as program_repository
from app.modules.programs.service import ProgramNotFoundError
from app.modules.shared import PaginationMeta
from app.modules.subscriptions.plans import (
    SubscriptionPlan,
    can_submit_application,
    get_subscription_features,
)
from app.modules.universities import repository as university_repository
from app.modules.universities.service import UniversityNotFoundError
from app.modules.users.models import User
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


# ============================================
# Service Errors
# ============================================


class ApplicationNotFoundError(NotFoundError):
    def __init__(self, application_id: UUID | None = None):
        super().__init__("Application", application_id)


class ApplicationLimitReachedError(AppError):
    def __init__(self, limit: int, used: int):
        super().__init__(
            message=(
                f"You have reached your application limit ({limit}). "
                "Please upgrade your subscription."
            ),
            error_code="APPLICATION_LIMIT_REACHED",
            status_code=403,
            details={"limit": limit, "used": used},
        )


class ProgramMismatchError(ValidationFailedError):
    def __init__(self):
        super().__init__("Program is not offered by this university", "PROGRAM_MISMATCH")


class DuplicateApplicationError(ConflictError):
    def __init__(self):
        super().__init__(
            "You already have an open application for this program",
            "DUPLICATE_APPLICATION",
        )


class InvalidStatusTransitionError(ValidationFailedError):
    def __init__(self, current: ApplicationStatus, target: ApplicationStatus):
        super().__init__(
            f"Cannot change application status from {current.value} to {target.value}",
            "INVALID_STATUS_TRANSITION",
            details={"currentStatus": current.value, "requestedStatus": target.value},
        )


class DocumentNotFoundError(NotFoundError):
    def __init__(self, document_id: UUID | None = None):
        super().__init__("Document", document_id)


# ============================================
# Student operations
# ============================================


async def submit_application(
    db: AsyncSession,
    user: User,
    data: CreateApplicationRequest,
) -> Application:
    """
    Raises:
        ApplicationLimitReachedError: Plan allowance used up
        UniversityNotFoundError / ProgramNotFoundError: Unknown target
        ProgramMismatchError: Program belongs to another university
        DuplicateApplicationError: Open application for the same program
        DocumentNotFoundError: Attached document is not the user's
    """
    plan = user.current_plan
    used = await repository.count_counted_applications(db, user.id)
    if not can_submit_application(plan, used):
        limit = get_subscription_features(plan).applications
        logger.info(f"Application limit reached for user {user.id}: {used}/{limit} on {plan.value}")
        raise ApplicationLimitReachedError(limit, used)

    university = await university_repository.get_university(db, data.university_id)
    if university is None:
        raise UniversityNotFoundError(data.university_id)
    program = await program_repository.get_program(db, data.program_id)
    if program is None:
        raise ProgramNotFoundError(data.program_id)
    if program.university_id != university.id:
        raise ProgramMismatchError()

    if await repository.has_open_application(db, user.id, program.id):
        raise DuplicateApplicationError()

    documents = []
    for document_id in data.document_ids:
        document = await UserRepository.get_document(db, document_id, user.id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        documents.append(
            {
                "documentId": str(document.id),
                "documentType": document.document_type,
                "fileName": document.file_name,
                "fileUrl": document.file_url,
            }
        )

    application = await repository.create_application(
        db,
        user_id=user.id,
        university_id=university.id,
        program_id=program.id,
        personal_statement=data.personal_statement,
        notes=data.notes,
        documents=documents,
    )
    if plan is SubscriptionPlan.FREE:
        await UserRepository.increment_free_applications(db, user.id)
    await db.commit()
    await db.refresh(application)
    logger.info(f"Application {application.id} submitted by user {user.id} for program {program.id}")

    await send_application_submitted_email(user.email, user.full_name, university.name, program.name)
    return application


async def list_user_applications(
    db: AsyncSession,
    user_id: UUID,
    status: ApplicationStatus | None,
    pagination: Pagination,
) -> ApplicationListResponse:
    applications, total = await repository.list_applications(
        db, user_id=user_id, status=status, limit=pagination.limit, offset=pagination.offset
    )
    return ApplicationListResponse(
        applications=[ApplicationResponse.from_application(a) for a in applications],
        pagination=PaginationMeta.build(pagination.page, pagination.limit, total),
    )


async def get_user_application(db: AsyncSession, user_id: UUID, application_id: UUID) -> Application:
    """Owner-scoped: someone else's application is reported as not found."""
    application = await repository.get_user_application(db, application_id, user_id)
    if application is None:
        raise ApplicationNotFoundError(application_id)
    return application


async def withdraw_application(db: AsyncSession, user_id: UUID, application_id: UUID) -> Application:
    """
    Raises:
        ApplicationNotFoundError: Unknown, or not the caller's
        InvalidStatusTransitionError: Only submitted / under review applications can be withdrawn
    """
    application = await get_user_application(db, user_id, application_id)
    if application.status not in (ApplicationStatus.SUBMITTED, ApplicationStatus.UNDER_REVIEW):
        raise InvalidStatusTransitionError(application.status, ApplicationStatus.WITHDRAWN)
    application = await repository.set_status(db, application, ApplicationStatus.WITHDRAWN)
    logger.info(f"Application {application_id} withdrawn by user {user_id}")
    return application


# ============================================
# Admin operations
# ============================================


async def list_all_applications(
    db: AsyncSession,
    status: ApplicationStatus | None,
    pagination: Pagination,
) -> ApplicationListResponse:
    applications, total = await repository.list_applications(
        db, status=status, limit=pagination.limit, offset=pagination.offset
    )
    return ApplicationListResponse(
        applications=[ApplicationResponse.from_application(a) for a in applications],
        pagination=PaginationMeta.build(pagination.page, pagination.limit, total),
    )


async def update_status(
    db: AsyncSession,
    admin: CurrentUser,
    application_id: UUID,
    status: ApplicationStatus,
    notes: str | None = None,
) -> Application:
    """
    Move an application along VALID_STATUS_TRANSITIONS.

    Raises:
        ApplicationNotFoundError: Unknown application
        InvalidStatusTransitionError: Transition not allowed from the current status
    """
    application = await repository.get_application(db, application_id)
    if application is None:
        raise ApplicationNotFoundError(application_id)
    if not application.can_transition_to(status):
        raise InvalidStatusTransitionError(application.status, status)

    previous = application.status
    application = await repository.set_status(db, application, status, notes)
    logger.info(
        f"Admin {admin.id} changed application {application_id} from {previous.value} to {status.value}"
    )
    return application
