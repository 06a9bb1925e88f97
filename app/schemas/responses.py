"""Standardized API Response Schemas"""

import math
from typing import Generic, TypeVar
from pydantic import BaseModel, Field


T = TypeVar('T')


class SuccessResponse(BaseModel, Generic[T]):
    """
    Standard success response envelope.

    Example:
        {
            "success": true,
            "data": {...},
            "message": "Operation successful"
        }
    """
    success: bool = True
    data: T = None
    message: str = "Operation successful"


class ErrorDetail(BaseModel):
    """Error details structure"""
    code: str
    message: str


class ErrorResponse(BaseModel):
    """
    Standard error response envelope.

    Example:
        {
            "success": false,
            "error": {
                "code": "RESOURCE_NOT_FOUND",
                "message": "Bill not found"
            }
        }
    """
    success: bool = False
    error: ErrorDetail


class PaginationMeta(BaseModel):
    """Pagination metadata"""
    page: int = Field(..., ge=1, description="Current page number")
    page_size: int = Field(..., ge=1, le=100, description="Items per page")
    total: int = Field(..., ge=0, description="Total number of items")
    total_pages: int = Field(..., ge=0, description="Total number of pages")

    @classmethod
    def build(cls, page: int, page_size: int, total: int) -> "PaginationMeta":
        return cls(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=math.ceil(total / page_size) if page_size else 0,
        )


class PaginatedResponse(BaseModel, Generic[T]):
    """
    Paginated response with metadata.

    Example:
        {
            "success": true,
            "data": [...],
            "meta": {"page": 1, "page_size": 20, "total": 50, "total_pages": 3},
            "message": "Operation successful"
        }
    """
    success: bool = True
    data: list[T]
    meta: PaginationMeta
    message: str = "Operation successful"
