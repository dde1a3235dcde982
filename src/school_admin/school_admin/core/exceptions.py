from __future__ import annotations

from typing import Iterable, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when form input is invalid. No remote call is issued."""

    def __init__(self, message: str, fields: Iterable[str] = ()):
        super().__init__(message)
        self.fields = tuple(fields)


class AuthenticationError(DomainError):
    """Raised when login fails or the session token is missing/expired."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class RemoteServiceError(DomainError):
    """Raised when the REST service answers with an error or is unreachable."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
