"""
Service-layer exceptions.

Every failure the engine reports to a caller is a ServiceError subclass;
transport layers map them onto their own status codes.
"""
from __future__ import annotations

from typing import Any, Optional


class ServiceError(Exception):
    """Base exception for all service-layer errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(ServiceError):
    """Raised when a requested resource does not exist."""

    def __init__(
        self,
        resource_type: str,
        identifier: str | int,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        message = f"{resource_type} with identifier '{identifier}' not found"
        super().__init__(message, details)
        self.resource_type = resource_type
        self.identifier = identifier


class ForbiddenError(ServiceError):
    """
    Raised when the requester may not see the requested scope.

    Non-admin requesters get this error for missing entities as well, so it
    never reveals whether an id exists.
    """

    def __init__(
        self,
        message: str = "Access to the requested resource is denied",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)


class BadRequestError(ServiceError):
    """Raised when request parameters are invalid."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field


class RenderError(ServiceError):
    """Raised when a report cannot be rendered into the requested format."""

    def __init__(
        self,
        message: str,
        export_format: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.export_format = export_format


class RenderTimeoutError(RenderError):
    """Raised when a render job does not finish within its deadline."""


class TransactionError(ServiceError):
    """Raised when a database transaction fails."""

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message, details={"error_type": type(original_error).__name__})
        self.original_error = original_error
