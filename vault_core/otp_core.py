"""
otp_core.py — TOTP code generator (RFC 6238 on top of RFC 4226).

Goals:
- Pure functions / value objects only: no file I/O, no timers, no globals
  that change behaviour. `now` is always passed in by the caller.
- One TOTP instance owns one immutable secret; generation never mutates it,
  so instances are safe to use from any number of threads.

Core algorithm
--------------
- HOTP (HMAC-based One-Time Password):
  code = Truncate(HMAC-SHA1(key=secret, msg=counter)) mod 10^digits
- TOTP (Time-based One-Time Password):
  HOTP with counter = floor(unix_time / period), period = 30 seconds.
- Dynamic Truncation:
  offset = last byte & 0x0F, take 4 bytes from offset, clear the top bit
  -> 31-bit unsigned integer.

Example (RFC 6238 appendix B key, T = 59):
    >>> from vault_core.otp_core import TOTP
    >>> TOTP.from_bytes(b"12345678901234567890").generate(59)
    '287082'
"""

import datetime
import hashlib
import hmac
import logging
import struct
from typing import NamedTuple, Optional, Union

from . import base32
from .errors import InvalidEncoding

logger = logging.getLogger(__name__)

# --- Config / constants ----------------------------------------------------
DEFAULT_DIGITS = 6          # standard: 6 digits
DEFAULT_TIME_STEP = 30      # TOTP step (seconds)
DEFAULT_DIGEST = "sha1"     # what every authenticator app expects
SUPPORTED_DIGESTS = {
    "sha1": hashlib.sha1,
    "sha256": hashlib.sha256,
    "sha512": hashlib.sha512,
}

Instant = Union[datetime.datetime, int, float]


class TOTPConfig(NamedTuple):
    """
    Immutable generator parameters.

    Fields:
        period: time step in seconds (X in RFC 6238)
        digits: length of the decimal code
        digest: HMAC hash name, one of SUPPORTED_DIGESTS
    """

    period: int = DEFAULT_TIME_STEP
    digits: int = DEFAULT_DIGITS
    digest: str = DEFAULT_DIGEST

    def check(self) -> "TOTPConfig":
        """Return self, or raise ValueError if a field is out of range."""
        if self.period < 1:
            raise ValueError("period must be at least 1 second")
        if not 1 <= self.digits <= 10:
            raise ValueError("digits must be between 1 and 10")
        if self.digest not in SUPPORTED_DIGESTS:
            raise ValueError("digest must be one of: " + ", ".join(sorted(SUPPORTED_DIGESTS)))
        return self


DEFAULT_CONFIG = TOTPConfig()


# --- RFC helpers -----------------------------------------------------------
def int_to_bytes(i: int) -> bytes:
    """
    Encode a counter as the 8-byte big-endian message RFC 4226 requires.

    Example: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    return struct.pack(">Q", i)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    Apply RFC 4226 dynamic truncation.

    - offset = last_byte & 0x0F
    - take 4 bytes starting at offset, clear the MSB of the first one
    - return the 31-bit unsigned integer

    Arguments:
        hmac_digest: HMAC digest (SHA1 -> 20 bytes)
    """
    offset = hmac_digest[-1] & 0x0F
    code = (
        ((hmac_digest[offset] & 0x7F) << 24)
        | ((hmac_digest[offset + 1] & 0xFF) << 16)
        | ((hmac_digest[offset + 2] & 0xFF) << 8)
        | (hmac_digest[offset + 3] & 0xFF)
    )
    return code


def unix_seconds(now: Instant) -> float:
    """
    Convert an instant into Unix seconds.

    Aware datetimes are converted through UTC; naive datetimes are read as
    local time (same as datetime.timestamp()).
    """
    if isinstance(now, datetime.datetime):
        return now.timestamp()
    if isinstance(now, bool) or not isinstance(now, (int, float)):
        raise TypeError("now must be a datetime or a number of Unix seconds")
    return now


# --- Generator -------------------------------------------------------------
class TOTP(object):
    """
    Time-based one-time password generator for a single secret.
    """

    def __init__(self, secret_text: str, config: TOTPConfig = DEFAULT_CONFIG) -> None:
        """
        Arguments:
            secret_text: Base32 secret as stored / pasted by the user
            config: generator parameters (defaults: 30s, 6 digits, SHA-1)

        Raises:
            InvalidEncoding: secret_text is not Base32 or decodes to zero bytes
        """
        self._init(base32.decode(secret_text), config)

    @classmethod
    def from_bytes(cls, key: bytes, config: TOTPConfig = DEFAULT_CONFIG) -> "TOTP":
        """Build a generator from an already-decoded key."""
        instance = cls.__new__(cls)
        instance._init(bytes(key), config)
        return instance

    def _init(self, key: bytes, config: TOTPConfig) -> None:
        if not key:
            raise InvalidEncoding("Secret decodes to zero bytes")
        self._key = key
        self._config = TOTPConfig(*config).check()

    @property
    def config(self) -> TOTPConfig:
        return self._config

    def __repr__(self) -> str:
        # never show the key
        return "<TOTP period={0.period} digits={0.digits} digest={0.digest}>".format(self._config)

    @staticmethod
    def _seconds_since_epoch(now: Instant) -> float:
        seconds = unix_seconds(now)
        if seconds < 0:
            raise ValueError("time must not be before the Unix epoch")
        return seconds

    def timecode(self, now: Instant) -> int:
        """counter = floor(unix_seconds / period)"""
        return int(self._seconds_since_epoch(now) // self._config.period)

    def at_counter(self, counter: int) -> str:
        """
        Generate the code for an explicit time-step counter.

        Steps:
        1. message = 8-byte big-endian counter
        2. HMAC(key, message) with the configured digest
        3. dynamic truncation -> 31-bit integer
        4. mod 10^digits, zero-padded to exactly `digits` characters
        """
        if counter < 0:
            raise ValueError("counter must be a non-negative integer")
        digest = hmac.new(self._key, int_to_bytes(counter), SUPPORTED_DIGESTS[self._config.digest]).digest()
        code_value = dynamic_truncate(digest) % (10 ** self._config.digits)
        return "{:0{width}d}".format(code_value, width=self._config.digits)

    def generate(self, now: Instant) -> str:
        """Return the code valid at `now`."""
        return self.at_counter(self.timecode(now))

    def remaining(self, now: Instant) -> int:
        """Whole seconds left before the code for `now` expires (1..period)."""
        seconds = int(self._seconds_since_epoch(now))
        return self._config.period - (seconds % self._config.period)

    def verify(self, code: str, now: Instant, window: int = 1) -> bool:
        """
        Check a user-supplied code against `now` +/- `window` time steps.

        The comparison is constant-time (hmac.compare_digest).
        """
        if window < 0:
            raise ValueError("window must be non-negative")
        counter = self.timecode(now)
        candidate = str(code).strip().encode("ascii", "replace")
        for offset in range(-window, window + 1):
            test_counter = counter + offset
            if test_counter < 0:
                continue
            if hmac.compare_digest(self.at_counter(test_counter).encode("ascii"), candidate):
                return True
        return False


# --- Non-raising construction ----------------------------------------------
class GeneratorResult(NamedTuple):
    """Outcome of build_generator: exactly one of generator / error is set."""

    generator: Optional[TOTP]
    error: Optional[InvalidEncoding]

    @property
    def ok(self) -> bool:
        return self.error is None


def build_generator(secret_text: str, config: TOTPConfig = DEFAULT_CONFIG) -> GeneratorResult:
    """
    Try to construct a TOTP generator without raising.

    Validation and rendering share this path: an invalid secret comes back as
    GeneratorResult(None, InvalidEncoding(...)) instead of an exception.
    """
    try:
        return GeneratorResult(TOTP(secret_text, config), None)
    except InvalidEncoding as e:
        logger.debug("Secret rejected: %s", e)
        return GeneratorResult(None, e)
