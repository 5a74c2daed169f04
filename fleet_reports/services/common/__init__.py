"""
Shared service-layer building blocks.
"""
from .errors import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    RenderError,
    RenderTimeoutError,
    ServiceError,
    TransactionError,
)
from .pagination import paginate, validate_pagination
from .unit_of_work import UnitOfWork

__all__ = [
    "ServiceError",
    "NotFoundError",
    "ForbiddenError",
    "BadRequestError",
    "RenderError",
    "RenderTimeoutError",
    "TransactionError",
    "UnitOfWork",
    "paginate",
    "validate_pagination",
]
