"""
vault_core package
==================

TOTP code generation (RFC 6238 / RFC 4226, HMAC-SHA1, 30s, 6 digits),
Base32 secret decoding, otpauth:// URI parsing, and the validation gate used
before an entry is stored.

──────────────────────────────────────────────
Usage by collaborators
──────────────────────────────────────────────

1. Storage layer
   - Run the gate before writing:
        from vault_core import resolve_entry
        name, secret = resolve_entry(form_name, pasted_text)
        db_manager.add_account(name, secret)

2. Display layer
   - Recompute every code on each refresh; pass the clock in:
        from vault_core import render_entries
        rows = render_entries(db_manager.list_accounts(), time.time())

3. Direct use
        from vault_core import TOTP
        code = TOTP("JBSWY3DPEHPK3PXP").generate(time.time())
"""

from .base32 import decode as decode_base32, encode as encode_base32, generate_secret
from .entries import EntryCode, render_entries, render_entry, resolve_entry
from .errors import InvalidEncoding, InvalidUri, Reason, ValidationError, VaultError
from .otp_core import (
    DEFAULT_CONFIG,
    GeneratorResult,
    TOTP,
    TOTPConfig,
    build_generator,
)
from .provisioning import ProvisioningUri, build_uri, parse_uri
from .validation import validate

__all__ = [
    "DEFAULT_CONFIG",
    "EntryCode",
    "GeneratorResult",
    "InvalidEncoding",
    "InvalidUri",
    "ProvisioningUri",
    "Reason",
    "TOTP",
    "TOTPConfig",
    "ValidationError",
    "VaultError",
    "build_generator",
    "build_uri",
    "decode_base32",
    "encode_base32",
    "generate_secret",
    "parse_uri",
    "render_entries",
    "render_entry",
    "resolve_entry",
    "validate",
]
