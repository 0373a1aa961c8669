"""
Common response models and utilities.

Error schema and pagination metadata shared by list endpoints.

Dependencies: pydantic
System role: Common API response structures
"""

import math

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response schema."""

    success: bool = False
    error: str = Field(description="Error message")
    details: dict | None = Field(default=None, description="Additional error context")


class PaginationMeta(BaseModel):
    """Page-number pagination metadata."""

    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total: int = Field(ge=0)
    total_pages: int = Field(ge=0)

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        """Compute total_pages as ceil(total / limit)."""
        return cls(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit))
