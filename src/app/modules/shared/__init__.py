"""
Shared Module

Base ORM model and response schemas used by every domain module.
"""

from app.modules.shared.models import BaseModel
from app.modules.shared.schemas import ApiResponse, CamelModel, MessageResponse, PaginationMeta

__all__ = [
    "BaseModel",
    "ApiResponse",
    "CamelModel",
    "MessageResponse",
    "PaginationMeta",
]
