"""
DATABASE PACKAGE

sqlite storage for vault entries (name -> Base32 secret text).
"""

from .db_manager import (
    account_exists,
    add_account,
    delete_account,
    get_account_secret,
    list_accounts,
)
from .setup_database import setup_database

__all__ = [
    'account_exists',
    'add_account',
    'delete_account',
    'get_account_secret',
    'list_accounts',
    'setup_database',
]
