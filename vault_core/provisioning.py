"""
provisioning.py — otpauth:// provisioning URIs (Google Authenticator Key Uri Format).

    otpauth://totp/FooCorp:alice@example.com?secret=JBSWY3DPEHPK3PXP&issuer=FooCorp
    ─────────┬───┬─────────────────────────┬──────────────────────────────────────
             │   │                         └── query: secret, issuer, ...
             │   └── label ("issuer:account" or just "account")
             └── type (only "totp" is accepted)

Issuer precedence: the `issuer` query parameter wins over the label prefix;
the label prefix is only a fallback. The label itself is returned unchanged.

See also:
    https://github.com/google/google-authenticator/wiki/Key-Uri-Format
"""

import logging
from typing import NamedTuple, Optional, Tuple
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlsplit

from .errors import InvalidUri
from .otp_core import DEFAULT_CONFIG, TOTPConfig

logger = logging.getLogger(__name__)

SCHEME = "otpauth"
OTP_TYPE = "totp"
URI_PREFIX = SCHEME + "://"


class ProvisioningUri(NamedTuple):
    label: str
    issuer: Optional[str]
    secret: Optional[str]

    def split_label(self) -> Tuple[Optional[str], str]:
        """'Example:alice@site.com' -> ('Example', 'alice@site.com')"""
        prefix, sep, account = self.label.partition(":")
        if not sep:
            return None, self.label
        return prefix.strip() or None, account.strip()

    @property
    def account_name(self) -> str:
        return self.split_label()[1]

    @property
    def display_issuer(self) -> Optional[str]:
        prefix, _ = self.split_label()
        if self.issuer:
            if prefix and prefix != self.issuer:
                logger.debug("Label issuer %r differs from issuer parameter %r; using the parameter", prefix, self.issuer)
            return self.issuer
        return prefix


def is_provisioning_uri(text: str) -> bool:
    return text.strip().lower().startswith(URI_PREFIX)


def parse_uri(uri: str) -> ProvisioningUri:
    """
    Parse an otpauth://totp provisioning URI.

    Arguments:
        uri: the URI text, e.g. pasted from a QR code scanner

    Returns:
        ProvisioningUri(label, issuer, secret); issuer / secret are None when
        the query parameter is absent (a missing secret is the caller's problem)

    Raises:
        InvalidUri: not a string, unparseable, wrong scheme, or type != totp
    """
    if not isinstance(uri, str):
        raise InvalidUri("URI must be text")
    try:
        parts = urlsplit(uri.strip())
        query = parse_qsl(parts.query, keep_blank_values=True)
    except ValueError as e:
        raise InvalidUri(f"Malformed otpauth URI: {e}") from e

    if parts.scheme.lower() != SCHEME:
        raise InvalidUri("Scheme must be otpauth")
    if parts.netloc.lower() != OTP_TYPE:
        raise InvalidUri("Only totp type is supported")

    params = {}
    for key, value in query:
        # first occurrence wins
        params.setdefault(key, value)

    label = unquote(parts.path[1:] if parts.path.startswith("/") else parts.path)
    return ProvisioningUri(
        label=label,
        issuer=params.get("issuer") or None,
        secret=params.get("secret") or None,
    )


def build_uri(
    secret: str,
    name: str,
    issuer: Optional[str] = None,
    config: TOTPConfig = DEFAULT_CONFIG,
) -> str:
    """
    Build the otpauth://totp URI for an entry, ready for a QR code.

    Only non-default algorithm / digits / period values are emitted, to keep
    the URI short.

    -> "otpauth://totp/GitHub:alice%40gmail.com?secret=ABC234&issuer=GitHub"
    """
    url_args = {"secret": secret}
    label = quote(name)
    if issuer:
        label = quote(issuer) + ":" + label
        url_args["issuer"] = issuer
    if config.digest != DEFAULT_CONFIG.digest:
        url_args["algorithm"] = config.digest.upper()
    if config.digits != DEFAULT_CONFIG.digits:
        url_args["digits"] = str(config.digits)
    if config.period != DEFAULT_CONFIG.period:
        url_args["period"] = str(config.period)
    return "{0}{1}/{2}?{3}".format(URI_PREFIX, OTP_TYPE, label, urlencode(url_args).replace("+", "%20"))
