from __future__ import annotations

from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400

    def __init__(self, message: str, errors: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class NotFoundError(DomainError):
    """Raised when a user, reason or open session does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """Raised when a user already has an open attendance session."""

    status_code = 409


class AuthenticationError(DomainError):
    """Raised when login credentials or a bearer token are invalid."""

    status_code = 401


class InternalError(DomainError):
    """Raised when persistence or a remote collaborator fails."""

    status_code = 500
