"""
Response envelope and base schema.

Every JSON body leaves the API as `{"success": true, "data": ...}`; error
bodies are produced by `app.core.error_handlers`.
"""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Schema base: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[DataT]):
    """Success envelope."""

    success: bool = True
    data: DataT
    message: str | None = None


class MessageResponse(CamelModel):
    message: str


class PaginationMeta(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit) if limit else 0,
            has_more=page * limit < total,
        )
