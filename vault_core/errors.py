"""
errors.py — Typed errors for the TOTP vault core.

All of these are recoverable input errors: callers report them back to the
user (HTTP 400, CLI message) instead of aborting. A failure inside the HMAC
primitive itself is NOT represented here; it propagates as-is.
"""

import enum
from typing import Optional


class VaultError(ValueError):
    """Base class for every expected-input error raised by the core."""


class InvalidEncoding(VaultError):
    """Secret text is not valid Base32, or decodes to zero bytes."""


class InvalidUri(VaultError):
    """Provisioning URI is malformed, or not an otpauth://totp URI."""


class Reason(str, enum.Enum):
    """Why the validation gate rejected an entry."""

    EMPTY_NAME = "EmptyName"
    EMPTY_SECRET = "EmptySecret"
    INVALID_ENCODING = "InvalidEncoding"


_REASON_MESSAGES = {
    Reason.EMPTY_NAME: "Missing name",
    Reason.EMPTY_SECRET: "Missing secret",
    Reason.INVALID_ENCODING: "key format error",
}


class ValidationError(VaultError):
    """
    Aggregate rejection raised by the validation gate.

    Attributes:
        reason: one of the Reason values
        cause: the underlying InvalidEncoding, when there is one
    """

    def __init__(self, reason: Reason, cause: Optional[VaultError] = None) -> None:
        self.reason = Reason(reason)
        self.cause = cause
        message = _REASON_MESSAGES[self.reason]
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
