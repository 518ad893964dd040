"""Summary: Exception types for the messaging subsystem.

Importance: Lets the service, CLI, and HTTP layer tell store, quota, and input failures apart.
Alternatives: Raise bare RuntimeError and ValueError everywhere.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from growthpro.models import RateLimitInfo


class MessagingError(RuntimeError):
    """Base error for messaging operations."""


class StoreError(MessagingError):
    """Summary: Raised when the persistent store fails or an RPC is unavailable.

    Importance: Gives callers one type to catch for network/store failures.
    Alternatives: Leak sqlite3 exceptions to callers.
    """


class NotAuthorized(MessagingError):
    """Raised when the viewer's role does not allow an operation."""


class RateLimitExceeded(MessagingError):
    """Summary: Raised when the hourly send quota is exhausted.

    Importance: Carries the quota snapshot so callers can show a wait time.
    Alternatives: Return a boolean from the send call.
    """

    def __init__(self, message: str, info: RateLimitInfo | None = None) -> None:
        super().__init__(message)
        self.info = info


class ValidationError(ValueError):
    """Summary: Raised when a compose request fails client-side checks.

    Importance: Reports per-field messages before any store call happens.
    Alternatives: Return an error dict and let callers check it.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("; ".join(f"{key}: {value}" for key, value in errors.items()))
        self.errors = dict(errors)
