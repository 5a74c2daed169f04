"""
Pagination helpers for service layer listings.
"""
from __future__ import annotations

from typing import Callable, Optional, Sequence, Type, TypeVar

from fleet_reports.schemas.common.pagination import PaginatedResponse

from .errors import BadRequestError

TModel = TypeVar("TModel")
TItem = TypeVar("TItem")

MAX_PAGE_SIZE = 100


def validate_pagination(page: int, limit: int) -> None:
    """
    Validate pagination parameters.

    Raises:
        BadRequestError: If page < 1 or limit outside 1..MAX_PAGE_SIZE
    """
    if page < 1:
        raise BadRequestError(
            "Page number must be >= 1",
            field="page",
            details={"page": page},
        )
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise BadRequestError(
            f"Limit must be between 1 and {MAX_PAGE_SIZE}",
            field="limit",
            details={"limit": limit, "max": MAX_PAGE_SIZE},
        )


def paginate(
    *,
    items: Sequence[TModel],
    total: int,
    page: int,
    limit: int,
    mapper: Callable[[TModel], TItem],
    response_cls: Optional[Type[PaginatedResponse]] = None,
) -> PaginatedResponse[TItem]:
    """
    Build a paginated response from ORM rows.

    Args:
        items: Current page of ORM instances
        total: Total count across all pages
        page: Current page number
        limit: Page size
        mapper: Function converting one row to its schema
        response_cls: Parametrised response class (defaults to PaginatedResponse)

    Returns:
        PaginatedResponse with ``data`` and ``pagination``
    """
    validate_pagination(page, limit)
    return (response_cls or PaginatedResponse).create(
        data=[mapper(item) for item in items],
        total=total,
        page=page,
        limit=limit,
    )
