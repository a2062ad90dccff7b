"""
db_manager.py — sqlite storage for vault entries (name -> Base32 secret text).

The store never interprets the secret; it saves and returns the exact text
the validation gate accepted. Name uniqueness is enforced by the UNIQUE
constraint on accounts.name.

Used in: vault_backend/routes.py, vault_core/otp_cli.py
"""

import logging
import os
import sqlite3
from typing import Dict, Optional, Tuple

from .setup_database import setup_database

logger = logging.getLogger(__name__)

DATABASE_FILE = os.environ.get("VAULT_DATABASE", os.path.join("vault_database", "vault.db"))


def get_db_connection(path: Optional[str] = None) -> sqlite3.Connection:
    """Open the database, creating the schema on first use."""
    path = path or DATABASE_FILE
    if not os.path.exists(path):
        setup_database(path)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row  # rows behave like dicts
    return conn


def add_account(name: str, secret: str, path: Optional[str] = None) -> Tuple[bool, str]:
    """Store a new entry. Returns (success, message)."""
    conn = get_db_connection(path)
    try:
        conn.execute(
            "INSERT INTO accounts (name, secret_key) VALUES (?, ?)",
            (name, secret),
        )
        conn.commit()
        logger.info("Account '%s' added", name)
        return (True, f"Account '{name}' added successfully.")
    except sqlite3.IntegrityError:
        message = f"Account '{name}' already exists."
        logger.info(message)
        return (False, message)
    finally:
        conn.close()


def delete_account(name: str, path: Optional[str] = None) -> bool:
    """Remove an entry. Returns False if it did not exist."""
    conn = get_db_connection(path)
    try:
        cursor = conn.execute("DELETE FROM accounts WHERE name = ?", (name,))
        conn.commit()
        deleted = cursor.rowcount > 0
    finally:
        conn.close()
    if deleted:
        logger.info("Account '%s' deleted", name)
    return deleted


def get_account_secret(name: str, path: Optional[str] = None) -> Optional[str]:
    """Return the stored secret text for `name`, or None."""
    conn = get_db_connection(path)
    try:
        row = conn.execute("SELECT secret_key FROM accounts WHERE name = ?", (name,)).fetchone()
    finally:
        conn.close()
    return row["secret_key"] if row else None


def list_accounts(path: Optional[str] = None) -> Dict[str, str]:
    """Return every entry as {name: secret_text}, ordered by name."""
    conn = get_db_connection(path)
    try:
        rows = conn.execute("SELECT name, secret_key FROM accounts ORDER BY name").fetchall()
    finally:
        conn.close()
    return {row["name"]: row["secret_key"] for row in rows}


def account_exists(name: str, path: Optional[str] = None) -> bool:
    return get_account_secret(name, path) is not None
