"""
Unit tests for profile updates, profile completion and uploads.
"""

import io
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from app.core.errors import NotFoundError
from app.core.uploads import (
    DOCUMENT_CONTENT_TYPES,
    DOCUMENT_EXTENSIONS,
    FileTooLargeError,
    InvalidFileTypeError,
    generate_filename,
    validate_upload,
)
from app.modules.users.helpers import calculate_profile_completion
from app.modules.users.models import User, UserRole
from app.modules.users.schemas import ProfileUpdateRequest
from app.modules.users.service import (
    NoUpdatesError,
    UserNotFoundError,
    delete_document,
    update_profile,
)

SERVICE = "app.modules.users.service"


def _upload(filename: str, content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(b""),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def user():
    return User(
        id=uuid4(),
        full_name="Demo Student",
        email="demo@example.com",
        password_hash="x",
        role=UserRole.STUDENT,
        is_active=True,
        country="Bangladesh",
    )


class TestProfileCompletion:
    def test_counts_filled_fields(self):
        assert calculate_profile_completion({"full_name": "A", "email": "a@b.co"}) == 29

    def test_empty_strings_are_missing(self):
        assert calculate_profile_completion({"full_name": "A", "email": "a@b.co", "phone": ""}) == 29

    def test_complete(self):
        profile = {
            "full_name": "A",
            "email": "a@b.co",
            "country": "Nepal",
            "academic_level": "master",
            "phone": "+8801700000000",
            "address": "Dhaka",
            "date_of_birth": "2000-01-01",
        }
        assert calculate_profile_completion(profile) == 100

    def test_model_instance(self, user):
        assert calculate_profile_completion(user) == 43


class TestUpdateProfile:
    @pytest.mark.asyncio
    async def test_nothing_sent(self):
        with pytest.raises(NoUpdatesError) as exc_info:
            await update_profile(AsyncMock(), uuid4(), ProfileUpdateRequest())
        assert exc_info.value.error_code == "NO_UPDATES"

    @pytest.mark.asyncio
    async def test_recomputes_completion(self, user):
        data = ProfileUpdateRequest(academicLevel="master", phone="+8801712345678")

        with patch(f"{SERVICE}.UserRepository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=user)
            mock_repo.update = AsyncMock(return_value=user)

            await update_profile(AsyncMock(), user.id, data)

        kwargs = mock_repo.update.call_args.kwargs
        assert kwargs["academic_level"] == "master"
        assert kwargs["phone"] == "+8801712345678"
        assert kwargs["profile_complete"] == 71

    @pytest.mark.asyncio
    async def test_deactivated_account(self, user):
        user.is_active = False
        with patch(f"{SERVICE}.UserRepository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=user)
            with pytest.raises(UserNotFoundError):
                await update_profile(AsyncMock(), user.id, ProfileUpdateRequest(country="Nepal"))


class TestDeleteDocument:
    @pytest.mark.asyncio
    async def test_removes_record_and_file(self):
        document = MagicMock(file_url="/uploads/documents/a.pdf")
        with (
            patch(f"{SERVICE}.UserRepository") as mock_repo,
            patch(f"{SERVICE}.delete_upload", new_callable=AsyncMock) as mock_delete,
        ):
            mock_repo.get_document = AsyncMock(return_value=document)
            mock_repo.delete_document = AsyncMock()

            await delete_document(AsyncMock(), uuid4(), uuid4())

        mock_repo.delete_document.assert_awaited_once()
        mock_delete.assert_awaited_once_with("/uploads/documents/a.pdf")

    @pytest.mark.asyncio
    async def test_foreign_document(self):
        with patch(f"{SERVICE}.UserRepository") as mock_repo:
            mock_repo.get_document = AsyncMock(return_value=None)
            with pytest.raises(NotFoundError) as exc_info:
                await delete_document(AsyncMock(), uuid4(), uuid4())
        assert exc_info.value.error_code == "DOCUMENT_NOT_FOUND"


class TestValidateUpload:
    def _validate(self, file: UploadFile, content: bytes, max_size: int = 100) -> None:
        validate_upload(file, content, DOCUMENT_CONTENT_TYPES, DOCUMENT_EXTENSIONS, max_size)

    def test_accepts_pdf(self):
        self._validate(_upload("transcript.PDF", "application/pdf"), b"%PDF-1.7")

    def test_rejects_mismatched_extension(self):
        with pytest.raises(InvalidFileTypeError):
            self._validate(_upload("transcript.exe", "application/pdf"), b"MZ")

    def test_rejects_unknown_content_type(self):
        with pytest.raises(InvalidFileTypeError):
            self._validate(_upload("notes.txt", "text/plain"), b"hi")

    def test_rejects_oversize(self):
        with pytest.raises(FileTooLargeError):
            self._validate(_upload("photo.png", "image/png"), b"x" * 101)

    def test_generated_filename_keeps_extension(self):
        name = generate_filename("My Passport.JPG")
        assert name.endswith(".jpg")
        assert "Passport" not in name
