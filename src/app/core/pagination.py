"""
Pagination dependency: page >= 1, 1 <= limit <= 100.
"""

from dataclasses import dataclass

from fastapi import Query

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 20


@dataclass
class Pagination:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def get_pagination(
    page: int = Query(default=1, ge=1, description="Page number, starting at 1"),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Items per page"),
) -> Pagination:
    return Pagination(page=page, limit=limit)
