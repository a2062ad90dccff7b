"""
base32.py — RFC 4648 Base32 codec for shared secrets.

Authenticator apps show secrets as Base32 text ("JBSWY3DPEHPK3PXP"), often
lower-cased, grouped with spaces and without '=' padding. `decode` accepts
all of these forms; the stdlib `base64.b32decode` does not (it insists on
padding to a multiple of 8), so the bit-buffer decoder lives here.

Algorithm (decode):
  - normalize: drop whitespace, upper-case, strip trailing '='
  - each symbol contributes 5 bits to a buffer
  - whenever the buffer holds >= 8 bits, emit the top 8 bits as one byte
  - left-over bits (< 8) at the end are padding and are discarded
"""

import base64
import logging
import os
import re

from .errors import InvalidEncoding

logger = logging.getLogger(__name__)

# --- Config / constants ----------------------------------------------------
ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
SECRET_BYTES = 20           # 160-bit secret (RFC 4226 recommendation)

_SYMBOL_VALUES = {symbol: value for value, symbol in enumerate(ALPHABET)}
_WHITESPACE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """
    Normalize secret text the way users paste it.

    Example: " jbsw y3dp ehpk 3pxp== " -> "JBSWY3DPEHPK3PXP"
    """
    return _WHITESPACE.sub("", text).upper().rstrip("=")


def decode(text: str) -> bytes:
    """
    Decode Base32 secret text into raw key bytes.

    Arguments:
        text: Base32 text, case-insensitive, whitespace and trailing '=' allowed

    Returns:
        bytes: decoded key (may be empty when the normalized text is empty)

    Raises:
        InvalidEncoding: a symbol is not in A-Z / 2-7 (this includes '0', '1',
            '8', '9', an interior '=', and any non-ASCII character)
    """
    if not isinstance(text, str):
        raise InvalidEncoding("Secret must be text")

    if not text.isascii():
        # str.upper() maps some non-ASCII letters onto the alphabet ("ß" -> "SS")
        position = next(i for i, char in enumerate(text) if not char.isascii())
        logger.debug("Base32 decode rejected non-ASCII symbol at position %d", position)
        raise InvalidEncoding(f"Invalid base32 character at position {position}")

    clean = normalize(text)
    out = bytearray()
    buffer = 0
    bits = 0
    for position, symbol in enumerate(clean):
        value = _SYMBOL_VALUES.get(symbol)
        if value is None:
            logger.debug("Base32 decode rejected symbol at position %d", position)
            raise InvalidEncoding(f"Invalid base32 character at position {position}")
        buffer = (buffer << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append((buffer >> bits) & 0xFF)
            # keep only the bits not yet emitted
            buffer &= (1 << bits) - 1
    return bytes(out)


def encode(data: bytes, padding: bool = False) -> str:
    """
    Encode raw bytes as Base32 text (upper-case).

    The otpauth ecosystem omits '=' padding, so it is off by default.
    """
    text = base64.b32encode(bytes(data)).decode("ascii")
    return text if padding else text.rstrip("=")


def generate_secret(num_bytes: int = SECRET_BYTES) -> str:
    """
    Generate a random Base32 secret (no padding).

    - num_bytes bytes come from os.urandom (CSPRNG).
    - Encoded as Base32 so it can be typed into Google Authenticator / Authy.
    """
    if num_bytes < 10:
        raise ValueError("Secrets should be at least 80 bits")
    return encode(os.urandom(num_bytes))
