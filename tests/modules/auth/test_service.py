"""
Unit tests for the authentication service layer.

These tests cover:
- Registration (duplicate email, profile completion, welcome email)
- Login (bad credentials, inactive accounts, expired plan downgrade)
- Refresh tokens
- Password reset tokens
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from pydantic import ValidationError

from app.core.errors import AuthenticationError
from app.core.security import create_access_token, create_refresh_token, decode_token, hash_token
from app.modules.auth.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
)
from app.modules.auth.service import (
    EmailExistsError,
    InvalidCredentialsError,
    InvalidResetTokenError,
    forgot_password,
    issue_tokens,
    login,
    refresh,
    register,
    reset_password,
)
from app.modules.subscriptions.plans import SubscriptionPlan

PASSWORD = "Passw0rdOK"

SERVICE = "app.modules.auth.service"


class TestRegisterRequest:
    def test_weak_password_rejected(self):
        with pytest.raises(ValidationError):
            RegisterRequest(full_name="Amina", email="amina@example.com", password="alllowercase1")

    def test_short_password_rejected(self):
        with pytest.raises(ValidationError):
            RegisterRequest(full_name="Amina", email="amina@example.com", password="Ab1")

    def test_accepts_camel_case(self):
        data = RegisterRequest.model_validate(
            {"fullName": " <b>Amina</b> ", "email": "amina@example.com", "password": PASSWORD}
        )
        assert data.full_name == "Amina"


class TestRegister:
    @pytest.mark.asyncio
    async def test_duplicate_email(self, mock_db):
        with patch(f"{SERVICE}.UserRepository") as mock_users:
            mock_users.email_exists = AsyncMock(return_value=True)

            with pytest.raises(EmailExistsError) as exc_info:
                await register(
                    mock_db,
                    RegisterRequest(full_name="Amina", email="amina@example.com", password=PASSWORD),
                )

        assert exc_info.value.status_code == 409
        assert exc_info.value.error_code == "EMAIL_EXISTS"

    @pytest.mark.asyncio
    async def test_success(self, mock_db, user):
        with (
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.send_welcome_email", new_callable=AsyncMock) as mock_email,
        ):
            mock_users.email_exists = AsyncMock(return_value=False)
            mock_users.create = AsyncMock(return_value=user)

            response = await register(
                mock_db,
                RegisterRequest(
                    full_name="Amina Rahman",
                    email="amina@example.com",
                    password=PASSWORD,
                    country="Bangladesh",
                    academic_level="bachelor",
                ),
            )

        kwargs = mock_users.create.call_args.kwargs
        assert kwargs["password_hash"] != PASSWORD
        assert kwargs["academic_level"] == "bachelor"
        # full_name, email, country, academic_level out of seven profile fields
        assert kwargs["profile_complete"] == 57
        mock_email.assert_awaited_once_with(user.email, user.full_name)

        assert response.user.email == user.email
        assert decode_token(response.token)["sub"] == str(user.id)
        assert decode_token(response.refresh_token)["type"] == "refresh"


class TestLogin:
    @pytest.mark.asyncio
    async def test_unknown_email(self, mock_db):
        with patch(f"{SERVICE}.UserRepository") as mock_users:
            mock_users.get_by_email = AsyncMock(return_value=None)

            with pytest.raises(InvalidCredentialsError) as exc_info:
                await login(mock_db, LoginRequest(email="nobody@example.com", password=PASSWORD))

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_wrong_password(self, mock_db, user):
        with patch(f"{SERVICE}.UserRepository") as mock_users:
            mock_users.get_by_email = AsyncMock(return_value=user)

            with pytest.raises(InvalidCredentialsError):
                await login(mock_db, LoginRequest(email=user.email, password="WrongPass1"))

    @pytest.mark.asyncio
    async def test_inactive_account(self, mock_db, user):
        user.is_active = False
        with patch(f"{SERVICE}.UserRepository") as mock_users:
            mock_users.get_by_email = AsyncMock(return_value=user)

            with pytest.raises(InvalidCredentialsError):
                await login(mock_db, LoginRequest(email=user.email, password=PASSWORD))

    @pytest.mark.asyncio
    async def test_success_records_login(self, mock_db, user):
        with patch(f"{SERVICE}.UserRepository") as mock_users:
            mock_users.get_by_email = AsyncMock(return_value=user)
            mock_users.update = AsyncMock(return_value=user)

            response = await login(mock_db, LoginRequest(email=user.email, password=PASSWORD))

        updates = mock_users.update.call_args.kwargs
        assert "last_login_at" in updates
        assert "subscription_type" not in updates
        assert decode_token(response.token)["role"] == "student"

    @pytest.mark.asyncio
    async def test_expired_plan_downgraded(self, mock_db, user):
        user.subscription_type = SubscriptionPlan.EUROPE
        user.subscription_expires_at = datetime.now(UTC) - timedelta(days=1)
        with patch(f"{SERVICE}.UserRepository") as mock_users:
            mock_users.get_by_email = AsyncMock(return_value=user)
            mock_users.update = AsyncMock(return_value=user)

            response = await login(mock_db, LoginRequest(email=user.email, password=PASSWORD))

        assert mock_users.update.call_args.kwargs["subscription_type"] is SubscriptionPlan.FREE
        assert decode_token(response.token)["subscriptionType"] == "free"


class TestRefresh:
    @pytest.mark.asyncio
    async def test_new_pair_for_valid_refresh_token(self, mock_db, user):
        with patch(f"{SERVICE}.UserRepository") as mock_users:
            mock_users.get_by_id = AsyncMock(return_value=user)

            tokens = await refresh(mock_db, create_refresh_token(str(user.id)))

        assert decode_token(tokens.token)["type"] == "access"
        mock_users.get_by_id.assert_awaited_once_with(mock_db, user.id)

    @pytest.mark.asyncio
    async def test_access_token_rejected(self, mock_db):
        with pytest.raises(AuthenticationError):
            await refresh(mock_db, create_access_token(str(uuid4())))

    @pytest.mark.asyncio
    async def test_deleted_user_rejected(self, mock_db):
        with patch(f"{SERVICE}.UserRepository") as mock_users:
            mock_users.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(AuthenticationError):
                await refresh(mock_db, create_refresh_token(str(uuid4())))


class TestPasswordReset:
    @pytest.mark.asyncio
    async def test_unknown_email_is_silent(self, mock_db):
        with (
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.send_password_reset_email", new_callable=AsyncMock) as mock_email,
        ):
            mock_users.get_by_email = AsyncMock(return_value=None)
            mock_repo.create_reset_token = AsyncMock()

            await forgot_password(mock_db, ForgotPasswordRequest(email="nobody@example.com"))

        mock_repo.create_reset_token.assert_not_awaited()
        mock_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stores_only_token_hash(self, mock_db, user):
        with (
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.send_password_reset_email", new_callable=AsyncMock) as mock_email,
        ):
            mock_users.get_by_email = AsyncMock(return_value=user)
            mock_repo.create_reset_token = AsyncMock()

            await forgot_password(mock_db, ForgotPasswordRequest(email=user.email))

        sent_token = mock_email.call_args.args[2]
        _, user_id, stored_hash, expires_at = mock_repo.create_reset_token.call_args.args
        assert user_id == user.id
        assert stored_hash == hash_token(sent_token)
        assert stored_hash != sent_token
        assert expires_at > datetime.now(UTC)

    @pytest.mark.asyncio
    async def test_invalid_token(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_valid_reset_token = AsyncMock(return_value=None)

            with pytest.raises(InvalidResetTokenError) as exc_info:
                await reset_password(
                    mock_db, ResetPasswordRequest(token="x" * 32, password="NewPassw0rd")
                )

        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_valid_token_sets_password_and_consumes_token(self, mock_db, user):
        reset_token = MagicMock(user_id=user.id)
        with (
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.repository") as mock_repo,
        ):
            mock_repo.get_valid_reset_token = AsyncMock(return_value=reset_token)
            mock_repo.mark_reset_token_used = AsyncMock()
            mock_users.get_by_id = AsyncMock(return_value=user)
            mock_users.update = AsyncMock(return_value=user)

            await reset_password(mock_db, ResetPasswordRequest(token="t" * 32, password="NewPassw0rd"))

        mock_repo.get_valid_reset_token.assert_awaited_once_with(mock_db, hash_token("t" * 32))
        mock_repo.mark_reset_token_used.assert_awaited_once_with(mock_db, reset_token)
        new_hash = mock_users.update.call_args.kwargs["password_hash"]
        assert new_hash.startswith("$2")


class TestIssueTokens:
    def test_claims(self, user):
        payload = decode_token(issue_tokens(user).token)
        assert payload["email"] == user.email
        assert payload["subscriptionType"] == "free"
