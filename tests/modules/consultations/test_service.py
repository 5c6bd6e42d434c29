"""
Unit tests for consultation booking.

These tests cover:
- Slot overlap arithmetic
- Booking against existing reservations
- Reschedule / cancel rules
- Request validation of the scheduled time
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from pydantic import ValidationError

from app.modules.consultations.models import (
    MAX_DURATION_MINUTES,
    Consultation,
    ConsultationStatus,
    ConsultationType,
)
from app.modules.consultations.schemas import BookConsultationRequest
from app.modules.consultations.service import (
    CannotCancelError,
    CannotRescheduleError,
    ConsultationNotFoundError,
    SlotUnavailableError,
    book_consultation,
    cancel_consultation,
    ensure_slot_available,
    overlaps,
    reschedule_consultation,
)

SERVICE = "app.modules.consultations.service"
START = datetime(2030, 5, 1, 10, 0, tzinfo=UTC)


def _booking(start: datetime = START, duration: int = 60, status=ConsultationStatus.SCHEDULED) -> Consultation:
    return Consultation(
        id=uuid4(),
        user_id=uuid4(),
        consultation_type=ConsultationType.GENERAL,
        scheduled_at=start,
        duration_minutes=duration,
        status=status,
    )


class TestOverlaps:
    def test_same_slot(self):
        assert overlaps(START, 60, START, 60)

    def test_partial_overlap(self):
        assert overlaps(START, 60, START + timedelta(minutes=30), 60)

    def test_back_to_back_is_free(self):
        assert not overlaps(START, 60, START + timedelta(minutes=60), 30)
        assert not overlaps(START + timedelta(minutes=60), 30, START, 60)

    def test_contained(self):
        assert overlaps(START, 120, START + timedelta(minutes=15), 15)


class TestEnsureSlotAvailable:
    @pytest.mark.asyncio
    async def test_clash_raises_conflict(self):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.find_active_starting_between = AsyncMock(
                return_value=[_booking(START - timedelta(minutes=30), 60)]
            )
            with pytest.raises(SlotUnavailableError) as exc_info:
                await ensure_slot_available(AsyncMock(), START, 30)

        assert exc_info.value.status_code == 409
        assert exc_info.value.error_code == "SLOT_UNAVAILABLE"

    @pytest.mark.asyncio
    async def test_non_overlapping_candidates_pass(self):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.find_active_starting_between = AsyncMock(
                return_value=[_booking(START - timedelta(minutes=60), 60)]
            )
            await ensure_slot_available(AsyncMock(), START, 30)

    @pytest.mark.asyncio
    async def test_excluded_booking_forwarded(self):
        exclude_id = uuid4()
        db = AsyncMock()
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.find_active_starting_between = AsyncMock(return_value=[])
            await ensure_slot_available(db, START, 30, exclude_id=exclude_id)

        assert mock_repo.find_active_starting_between.call_args.kwargs == {"exclude_id": exclude_id}

    @pytest.mark.asyncio
    async def test_candidate_window_reaches_back_max_duration(self):
        db = AsyncMock()
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.find_active_starting_between = AsyncMock(return_value=[])
            await ensure_slot_available(db, START, 45)

        assert mock_repo.find_active_starting_between.call_args.args == (
            db,
            START - timedelta(minutes=MAX_DURATION_MINUTES),
            START + timedelta(minutes=45),
        )

    @pytest.mark.asyncio
    async def test_long_booking_starting_earlier_clashes(self):
        earlier = _booking(START - timedelta(minutes=90), 120)
        db = AsyncMock()
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.find_active_starting_between = AsyncMock(return_value=[earlier])
            with pytest.raises(SlotUnavailableError):
                await ensure_slot_available(db, START, 30)

        window_start = mock_repo.find_active_starting_between.call_args.args[1]
        assert window_start <= earlier.scheduled_at


class TestBookConsultation:
    @pytest.mark.asyncio
    async def test_books_and_notifies(self):
        user = MagicMock(id=uuid4(), email="s@example.com", full_name="Student")
        data = BookConsultationRequest(consultation_type=ConsultationType.VISA, scheduled_at=START)
        created = _booking()

        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.send_consultation_booked_email", new_callable=AsyncMock) as mock_email,
        ):
            mock_repo.find_active_starting_between = AsyncMock(return_value=[])
            mock_repo.create_consultation = AsyncMock(return_value=created)

            result = await book_consultation(AsyncMock(), user, data)

        assert result is created
        assert mock_repo.create_consultation.call_args.kwargs["consultation_type"] == ConsultationType.VISA
        mock_email.assert_awaited_once()


class TestReschedule:
    @pytest.mark.asyncio
    async def test_moves_booking(self):
        booking = _booking()
        new_start = START + timedelta(days=1)
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_user_consultation = AsyncMock(return_value=booking)
            mock_repo.find_active_starting_between = AsyncMock(return_value=[])
            mock_repo.save = AsyncMock(side_effect=lambda db, c: c)

            result = await reschedule_consultation(AsyncMock(), booking.user_id, booking.id, new_start)

        assert result.scheduled_at == new_start
        assert result.status == ConsultationStatus.RESCHEDULED

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [ConsultationStatus.COMPLETED, ConsultationStatus.CANCELLED])
    async def test_closed_booking(self, status):
        booking = _booking(status=status)
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_user_consultation = AsyncMock(return_value=booking)
            with pytest.raises(CannotRescheduleError):
                await reschedule_consultation(AsyncMock(), booking.user_id, booking.id, START)

    @pytest.mark.asyncio
    async def test_unknown_booking(self):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_user_consultation = AsyncMock(return_value=None)
            with pytest.raises(ConsultationNotFoundError):
                await reschedule_consultation(AsyncMock(), uuid4(), uuid4(), START)


class TestCancel:
    @pytest.mark.asyncio
    async def test_cancels_with_reason(self):
        booking = _booking(status=ConsultationStatus.CONFIRMED)
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_user_consultation = AsyncMock(return_value=booking)
            mock_repo.save = AsyncMock(side_effect=lambda db, c: c)

            result = await cancel_consultation(AsyncMock(), booking.user_id, booking.id, "Travel")

        assert result.status == ConsultationStatus.CANCELLED
        assert result.cancellation_reason == "Travel"

    @pytest.mark.asyncio
    async def test_already_cancelled(self):
        booking = _booking(status=ConsultationStatus.CANCELLED)
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_user_consultation = AsyncMock(return_value=booking)
            with pytest.raises(CannotCancelError) as exc_info:
                await cancel_consultation(AsyncMock(), booking.user_id, booking.id)

        assert exc_info.value.error_code == "CANNOT_CANCEL"


class TestBookingRequest:
    def test_past_time_rejected(self):
        with pytest.raises(ValidationError):
            BookConsultationRequest(
                consultation_type=ConsultationType.GENERAL,
                scheduled_at=datetime.now(UTC) - timedelta(hours=1),
            )

    def test_naive_time_taken_as_utc(self):
        request = BookConsultationRequest(
            consultationType="general", scheduledAt=datetime(2030, 1, 1, 9, 0)
        )
        assert request.scheduled_at.tzinfo is UTC

    def test_duration_bounds(self):
        with pytest.raises(ValidationError):
            BookConsultationRequest(consultation_type=ConsultationType.GENERAL, scheduled_at=START, duration_minutes=5)
