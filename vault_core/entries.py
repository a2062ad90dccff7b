"""
entries.py — Glue between the core and its collaborators.

- resolve_entry(): what the "add" form does with pasted text. otpauth:// URIs
  are parsed first; anything else is taken as a Base32 candidate.
- render_entry() / render_entries(): what a display does on every refresh.
  Codes are recomputed from the stored text each time; nothing is cached.
  A broken entry is reported with its error, never silently skipped.
"""

import logging
from typing import Iterable, List, Mapping, NamedTuple, Optional, Tuple, Union

from .errors import Reason, ValidationError
from .otp_core import Instant, build_generator
from .provisioning import is_provisioning_uri, parse_uri
from .validation import validate

logger = logging.getLogger(__name__)

UNNAMED = "Unnamed"


def resolve_entry(name: Optional[str], raw_text: str) -> Tuple[str, str]:
    """
    Turn user input into a validated (name, secret_text) pair.

    Arguments:
        name: display name typed by the user (may be empty for URIs)
        raw_text: Base32 secret or otpauth://totp URI

    Returns:
        (name, secret_text) ready for storage

    Raises:
        InvalidUri: raw_text looks like a URI but cannot be parsed
        ValidationError: the gate rejected the entry
    """
    if name is not None and not isinstance(name, str):
        raise ValidationError(Reason.EMPTY_NAME)
    name = (name or "").strip()
    secret_text = raw_text.strip() if isinstance(raw_text, str) else raw_text

    if isinstance(secret_text, str) and is_provisioning_uri(secret_text):
        parsed = parse_uri(secret_text)
        if not name:
            name = parsed.label or parsed.issuer or UNNAMED
        if not parsed.secret:
            raise ValidationError(Reason.EMPTY_SECRET)
        secret_text = parsed.secret

    validate(name, secret_text)
    return name, secret_text


class EntryCode(NamedTuple):
    """One rendered row: either code/remaining or error is populated."""

    name: str
    code: Optional[str]
    remaining: Optional[int]
    error: Optional[str]

    @property
    def ok(self) -> bool:
        return self.error is None


def render_entry(name: str, secret_text: str, now: Instant) -> EntryCode:
    result = build_generator(secret_text)
    if not result.ok:
        logger.debug("Entry %r has an unusable secret", name)
        return EntryCode(name, None, None, f"key format error: {result.error}")
    generator = result.generator
    return EntryCode(name, generator.generate(now), generator.remaining(now), None)


def render_entries(
    entries: Union[Mapping[str, str], Iterable[Tuple[str, str]]],
    now: Instant,
) -> List[EntryCode]:
    """Render every (name, secret_text) pair, sorted by name."""
    pairs = entries.items() if isinstance(entries, Mapping) else entries
    return [render_entry(name, secret, now) for name, secret in sorted(pairs)]
