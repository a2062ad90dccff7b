"""
Configuration for the vault backend.

Values come from environment variables; create_app() accepts overrides with
the same keys (Flask app.config style).
"""

import os
import secrets

ACCESS_PASSWORD = os.environ.get("ACCESS_PASSWORD")            # required outside tests
VAULT_DATABASE = os.environ.get("VAULT_DATABASE", os.path.join("vault_database", "vault.db"))
SECRET_KEY = os.environ.get("SECRET_KEY") or secrets.token_hex(32)
VAULT_ISSUER = os.environ.get("VAULT_ISSUER", "TOTP Vault")    # issuer written into exported URIs
VAULT_HOST = os.environ.get("VAULT_HOST", "0.0.0.0")
VAULT_PORT = int(os.environ.get("VAULT_PORT", "5000"))
TESTING = os.environ.get("TESTING", "").lower() in {"1", "true", "yes", "on"}

PASSWORD_HEADER = "X-Vault-Password"
NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}


def as_dict() -> dict:
    return {
        "ACCESS_PASSWORD": ACCESS_PASSWORD,
        "VAULT_DATABASE": VAULT_DATABASE,
        "SECRET_KEY": SECRET_KEY,
        "VAULT_ISSUER": VAULT_ISSUER,
        "TESTING": TESTING,
    }
