"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
helpers. Every error carries an :class:`ErrorKind`; the translation to an
HTTP status happens once, in ``vidtube/core/errors.py``.
"""

from __future__ import annotations

from enum import Enum

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError message mentions the constraint.
    """
    # PostgreSQL includes the constraint name; SQLite reports "table.column"
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


class ErrorKind(Enum):
    """Failure categories shared by every service, each bound to an HTTP status."""

    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL = 500

    @property
    def status(self) -> int:
        return int(self.value)


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors; ``kind`` is the only routing information.
    - ``str(err)`` is the client-safe message.
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    default_message: str = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class BadRequestError(ServiceError):
    """Raised when a caller supplied missing or invalid input."""

    kind = ErrorKind.BAD_REQUEST
    default_message = "Bad request"


class UnauthorizedError(ServiceError):
    """Raised when credentials or tokens fail verification."""

    kind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized request"


class NotFoundError(ServiceError):
    """Raised when an entity is not found in the repository."""

    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found"


class ConflictError(ServiceError):
    """Raised when a unique constraint or business rule conflict occurs."""

    kind = ErrorKind.CONFLICT
    default_message = "Resource conflict"


class InternalError(ServiceError):
    """Raised when a collaborator fails in a way the caller cannot fix."""

    kind = ErrorKind.INTERNAL


# --------------------------------------------------------------------------- #
# Token verification outcomes (raised by TokenProvider adapters)
# --------------------------------------------------------------------------- #


class TokenInvalidError(UnauthorizedError):
    """Signature, structure or token type mismatch."""

    default_message = "Invalid token"


class TokenExpiredError(TokenInvalidError):
    """Token was well formed but its ``exp`` is in the past."""

    default_message = "Token expired"


class ConfigError(InternalError):
    """Raised when a required setting (e.g. a signing secret) is missing."""

    default_message = "Server misconfiguration"
