"""
Unit tests for program search and requirements parsing.
"""

from decimal import Decimal
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from app.core.errors import ValidationFailedError
from app.core.pagination import Pagination
from app.modules.programs.repository import ProgramFilters
from app.modules.programs.service import (
    ProgramNotFoundError,
    get_program_or_404,
    list_programs,
    split_requirements,
)


class TestSplitRequirements:
    def test_mixed_separators(self):
        assert split_requirements("Bachelor's degree, GRE; TOEFL 100+\nInterview") == [
            "Bachelor's degree",
            "GRE",
            "TOEFL 100+",
            "Interview",
        ]

    def test_blank_parts_dropped(self):
        assert split_requirements(" IELTS 7.0 ,, ;") == ["IELTS 7.0"]

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty(self, value):
        assert split_requirements(value) == []


class TestListPrograms:
    @pytest.mark.asyncio
    async def test_inverted_fee_range_rejected(self):
        db = AsyncMock()
        filters = ProgramFilters(min_fee=Decimal("50000"), max_fee=Decimal("10000"))

        with patch("app.modules.programs.service.repository") as mock_repo:
            mock_repo.find_programs = AsyncMock()
            with pytest.raises(ValidationFailedError) as exc_info:
                await list_programs(db, filters, Pagination())

        assert exc_info.value.error_code == "INVALID_FEE_RANGE"
        mock_repo.find_programs.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_pagination_passed_through(self):
        db = AsyncMock()
        filters = ProgramFilters(min_fee=Decimal("1000"), max_fee=Decimal("1000"))

        with patch("app.modules.programs.service.repository") as mock_repo:
            mock_repo.find_programs = AsyncMock(return_value=([], 0))
            result = await list_programs(db, filters, Pagination(page=3, limit=5), order_by_fee=True)

        mock_repo.find_programs.assert_awaited_once_with(db, filters, 5, 10, order_by_fee=True)
        assert result.programs == []
        assert result.pagination.total == 0


class TestGetProgram:
    @pytest.mark.asyncio
    async def test_missing_program(self):
        program_id = uuid4()
        with patch("app.modules.programs.service.repository") as mock_repo:
            mock_repo.get_program = AsyncMock(return_value=None)
            with pytest.raises(ProgramNotFoundError) as exc_info:
                await get_program_or_404(AsyncMock(), program_id)

        assert exc_info.value.status_code == 404
        assert exc_info.value.error_code == "PROGRAM_NOT_FOUND"
