"""
Pagination schemas for page-based listings.
"""

from __future__ import annotations

from typing import Generic, List, TypeVar

from pydantic import Field, computed_field

from fleet_reports.schemas.common.base import CamelSchema

T = TypeVar("T")

__all__ = [
    "PaginationParams",
    "PaginationMeta",
    "PaginatedResponse",
]


class PaginationParams(CamelSchema):
    """Pagination query parameters."""

    page: int = Field(
        default=1,
        ge=1,
        description="Page number (1-indexed)",
    )
    limit: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Items per page",
    )

    @computed_field  # type: ignore[misc]
    @property
    def offset(self) -> int:
        """Calculate offset for database queries."""
        return (self.page - 1) * self.limit


class PaginationMeta(CamelSchema):
    """Pagination metadata."""

    page: int = Field(..., ge=1, description="Current page number")
    limit: int = Field(..., ge=1, description="Items per page")
    total: int = Field(..., ge=0, description="Total number of items")
    total_pages: int = Field(..., ge=0, description="Total number of pages")


class PaginatedResponse(CamelSchema, Generic[T]):
    """Generic paginated response."""

    data: List[T] = Field(..., description="Items of the current page")
    pagination: PaginationMeta = Field(..., description="Pagination metadata")

    @classmethod
    def create(
        cls,
        data: List[T],
        total: int,
        page: int,
        limit: int,
    ) -> "PaginatedResponse[T]":
        """
        Create paginated response with calculated metadata.

        Args:
            data: Items for current page.
            total: Total number of items across all pages.
            page: Current page number.
            limit: Number of items per page.

        Returns:
            PaginatedResponse with items and metadata.
        """
        total_pages = (total + limit - 1) // limit if limit > 0 else 0

        meta = PaginationMeta(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
        )
        return cls(data=data, pagination=meta)
