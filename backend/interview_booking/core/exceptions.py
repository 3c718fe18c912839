# backend/interview_booking/core/exceptions.py
"""
Domain-specific exceptions for the booking engine.

Each exception carries a business-facing message plus a stable code, and
knows which HTTP status it maps to when it reaches the API layer.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when input is malformed or out of range."""

    status_code = status.HTTP_400_BAD_REQUEST


class ForbiddenException(DomainException):
    """Raised when a bearer token does not grant access to the resource."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class GoneException(DomainException):
    """Raised when a booking can no longer be acted on (cancelled or past)."""

    status_code = status.HTTP_410_GONE


class ServiceException(DomainException):
    """Raised when a service operation fails unexpectedly."""

    def to_http_exception(self) -> HTTPException:
        # Internal detail never leaves the process
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": "An error occurred processing your request",
                "code": self.code,
                "details": {},
            },
        )


# Specific business exceptions


class SlotConflictException(ConflictException):
    """Raised when a slot is already held by a confirmed booking."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "This time slot is already booked",
            code="SLOT_CONFLICT",
            details=details or {},
        )


class InvalidTokenException(ForbiddenException):
    """Raised when a cancellation token does not match the booking."""

    def __init__(self) -> None:
        super().__init__(
            message="The provided token is not valid for this booking",
            code="INVALID_TOKEN",
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    Wraps data access failures such as connection issues, query failures,
    or constraint violations.
    """
