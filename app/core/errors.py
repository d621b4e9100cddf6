"""Application-level exception types.

Domain errors raised by services and dependencies. The global exception
handlers map each subclass to an HTTP status code, so routes never build
error responses by hand.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    hint: str
    field: str
    max_length: int
    min_length: int
    limit: int
    remaining: int
    reset_at: int
    retry_after: int
    limit_class: str
    target_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class AuthenticationAppError(AppError):
    """Raised when authentication/authorization fails."""


class NotFoundAppError(AppError):
    """Raised when a requested resource does not exist."""


@dataclass
class RateLimitAppError(AppError):
    """Raised when a client exceeds a request limit class.

    Attributes:
        retry_after: Whole seconds until the client's window resets.
        headers: Extra response headers (X-RateLimit-*) to send with the 429.
    """

    retry_after: int = 0
    headers: dict[str, str] | None = None


class ReactionRejectedAppError(AppError):
    """Raised when the reaction ledger refuses a reaction.

    Covers both "already acknowledged" and "daily quota exceeded"; the
    ``code`` tells them apart.
    """
