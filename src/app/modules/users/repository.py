"""
User Repository

Database operations for accounts and their documents.
"""

import logging
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.subscriptions.plans import SubscriptionPlan
from app.modules.users.models import Document, User, UserRole

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        password_hash: str,
        full_name: str,
        phone: str | None = None,
        country: str | None = None,
        academic_level: str | None = None,
        role: UserRole = UserRole.STUDENT,
        profile_complete: int = 0,
    ) -> User:
        """
        Create a new user record.

        Args:
            db: Database session
            email: User's email address (unique, stored lower-case)
            password_hash: bcrypt hash
            full_name: Display name
            role: STUDENT unless seeded as ADMIN
            profile_complete: Pre-computed completion percentage

        Returns:
            Created User instance
        """
        user = User(
            email=email.lower(),
            password_hash=password_hash,
            full_name=full_name,
            phone=phone,
            country=country,
            academic_level=academic_level,
            role=role,
            profile_complete=profile_complete,
            subscription_type=SubscriptionPlan.FREE,
            free_applications_used=0,
            is_active=True,
        )

        db.add(user)
        await db.commit()
        await db.refresh(user)

        logger.info(f"Created user: {user.id} ({user.role.value})")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: UUID) -> User | None:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """Case-insensitive lookup."""
        result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
        return result.scalar_one_or_none()

    @staticmethod
    async def email_exists(db: AsyncSession, email: str) -> bool:
        result = await db.execute(
            select(func.count()).select_from(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one() > 0

    @staticmethod
    async def update(db: AsyncSession, user: User, **fields: Any) -> User:
        """Apply field updates and persist."""
        for name, value in fields.items():
            setattr(user, name, value)
        await db.commit()
        await db.refresh(user)
        return user

    @staticmethod
    async def set_subscription(
        db: AsyncSession,
        user_id: UUID,
        plan: SubscriptionPlan,
        expires_at: datetime | None,
    ) -> None:
        """Mirror the active subscription onto the user row. Caller commits."""
        await db.execute(
            update(User)
            .where(User.id == user_id)
            .values(subscription_type=plan, subscription_expires_at=expires_at)
        )

    @staticmethod
    async def increment_free_applications(db: AsyncSession, user_id: UUID) -> None:
        """Caller commits."""
        await db.execute(
            update(User)
            .where(User.id == user_id)
            .values(free_applications_used=User.free_applications_used + 1)
        )

    @staticmethod
    async def downgrade_expired(db: AsyncSession, now: datetime | None = None) -> int:
        """
        Reset every user whose paid plan has expired to FREE.

        Returns:
            Number of users downgraded
        """
        now = now or datetime.now(UTC)
        result = await db.execute(
            update(User)
            .where(
                User.subscription_type != SubscriptionPlan.FREE,
                User.subscription_expires_at.is_not(None),
                User.subscription_expires_at <= now,
            )
            .values(subscription_type=SubscriptionPlan.FREE)
        )
        await db.commit()
        return result.rowcount or 0

    # ============================================
    # Documents
    # ============================================

    @staticmethod
    async def create_document(
        db: AsyncSession,
        *,
        user_id: UUID,
        document_type: str,
        file_url: str,
        file_name: str,
        file_size: int,
        content_type: str,
    ) -> Document:
        document = Document(
            user_id=user_id,
            document_type=document_type,
            file_url=file_url,
            file_name=file_name,
            file_size=file_size,
            content_type=content_type,
        )
        db.add(document)
        await db.commit()
        await db.refresh(document)
        return document

    @staticmethod
    async def list_documents(db: AsyncSession, user_id: UUID) -> list[Document]:
        result = await db.execute(
            select(Document)
            .where(Document.user_id == user_id)
            .order_by(Document.uploaded_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_document(db: AsyncSession, document_id: UUID, user_id: UUID) -> Document | None:
        """Owner-scoped lookup."""
        result = await db.execute(
            select(Document).where(Document.id == document_id, Document.user_id == user_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def delete_document(db: AsyncSession, document: Document) -> None:
        await db.delete(document)
        await db.commit()
