"""Custom exceptions for call-cal-bot."""

from __future__ import annotations

from typing import Any, Optional


class CallCalError(Exception):
    """Base exception for call-cal-bot."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class StorageError(CallCalError):
    """The backing store failed to prepare, execute or read a statement."""

    pass


class InvalidInputError(CallCalError):
    """Caller supplied input the engine cannot interpret."""

    pass


class AuthenticationError(CallCalError):
    """Authentication failures."""

    pass


class MemberNotFoundError(CallCalError):
    """No registered member matches the given identity."""

    pass
