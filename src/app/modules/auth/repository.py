"""
Password reset token repository.
"""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.auth.models import PasswordResetToken


async def create_reset_token(
    db: AsyncSession,
    user_id: UUID,
    token_hash: str,
    expires_at: datetime,
) -> PasswordResetToken:
    """Store a new reset token, invalidating any earlier unused ones for the user."""
    await db.execute(
        delete(PasswordResetToken).where(
            PasswordResetToken.user_id == user_id,
            PasswordResetToken.used_at.is_(None),
        )
    )
    token = PasswordResetToken(user_id=user_id, token_hash=token_hash, expires_at=expires_at)
    db.add(token)
    await db.commit()
    await db.refresh(token)
    return token


async def get_valid_reset_token(
    db: AsyncSession,
    token_hash: str,
    now: datetime | None = None,
) -> PasswordResetToken | None:
    """Unused, unexpired token matching the hash."""
    now = now or datetime.now(UTC)
    result = await db.execute(
        select(PasswordResetToken).where(
            PasswordResetToken.token_hash == token_hash,
            PasswordResetToken.used_at.is_(None),
            PasswordResetToken.expires_at > now,
        )
    )
    return result.scalar_one_or_none()


async def mark_reset_token_used(db: AsyncSession, token: PasswordResetToken) -> None:
    """Caller commits."""
    token.used_at = datetime.now(UTC)
