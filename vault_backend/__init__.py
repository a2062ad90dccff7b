"""
BACKEND PACKAGE

Flask JSON API for the TOTP vault. Use create_app() to build an app.
"""

from .app import create_app

__all__ = ['create_app']
