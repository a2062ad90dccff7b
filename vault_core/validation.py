"""
validation.py — Gate run before a new entry is persisted.

The check is pure: it builds a generator to prove the secret is usable and
throws it away. Nothing is stored or mutated here.

Order (pinned):
  1. empty / whitespace name    -> ValidationError(EmptyName)
  2. empty / whitespace secret  -> ValidationError(EmptySecret)
  3. build_generator() failure  -> ValidationError(InvalidEncoding)
     (covers malformed Base32 AND text like "====" that decodes to 0 bytes)
"""

from .errors import Reason, ValidationError
from .otp_core import build_generator


def validate(name: str, secret_text: str) -> None:
    """
    Raise ValidationError if (name, secret_text) must not be stored.
    """
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(Reason.EMPTY_NAME)
    # non-text secrets fall through to the decoder and fail as InvalidEncoding
    if not secret_text or (isinstance(secret_text, str) and not secret_text.strip()):
        raise ValidationError(Reason.EMPTY_SECRET)

    result = build_generator(secret_text)
    if not result.ok:
        raise ValidationError(Reason.INVALID_ENCODING, cause=result.error)
