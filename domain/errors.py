"""Exception hierarchy shared by the bot layers."""

from __future__ import annotations

from typing import Optional


class KalimerosError(Exception):
    """Base exception for all bot errors."""


class ConfigError(KalimerosError):
    """Invalid or missing configuration."""


class IdentityError(KalimerosError):
    """A backend identity cannot be derived for the chat user."""


class AuthError(KalimerosError):
    """Neither sign-in nor sign-up produced a token."""

    def __init__(self, message: str, *, handle: str = "") -> None:
        self.handle = handle
        super().__init__(message)


class RemoteOperationError(KalimerosError):
    """The backend answered, but with an error payload."""

    def __init__(self, message: str, *, operation: str = "") -> None:
        self.operation = operation
        super().__init__(message)


class TransportError(KalimerosError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        operation: str = "",
    ) -> None:
        self.status_code = status_code
        self.operation = operation
        super().__init__(message)


class TokenRejectedError(TransportError):
    """The backend refused the bearer token (HTTP 401)."""


class DeliveryError(KalimerosError):
    """A reply could not be delivered through the messaging transport."""
