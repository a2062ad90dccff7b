"""
FLASK APP MAIN ENTRY POINT - TOTP VAULT BACKEND
================================================

Sets up the Flask app, enables CORS, and registers the vault blueprint.

MAIN FEATURES
- JSON API over the vault_core engine (no HTML rendering)
- Password gate on every endpoint (werkzeug password hashing)
- CORS enabled for a separately hosted frontend
"""
import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS
from werkzeug.security import generate_password_hash

from . import config

logger = logging.getLogger(__name__)


def create_app(config_overrides: Optional[dict] = None) -> Flask:
    """
    Build the Flask app.

    Arguments:
        config_overrides: values that replace vault_backend.config settings
            (e.g. {"ACCESS_PASSWORD": ..., "VAULT_DATABASE": ...} in tests)

    Raises:
        RuntimeError: ACCESS_PASSWORD is not configured outside TESTING
    """
    app = Flask(__name__)
    app.config.update(config.as_dict())
    if config_overrides:
        app.config.update(config_overrides)

    password = app.config.get("ACCESS_PASSWORD")
    if not password:
        if not app.config.get("TESTING"):
            raise RuntimeError("ACCESS_PASSWORD must be set")
        logger.warning("ACCESS_PASSWORD not set; every request will be rejected")
    # only the hash is kept in memory
    app.config["ACCESS_PASSWORD_HASH"] = generate_password_hash(password) if password else None
    app.config.pop("ACCESS_PASSWORD", None)

    # Allow a frontend served from another origin to call the API
    CORS(app)

    from .routes import vault_bp
    app.register_blueprint(vault_bp)

    return app


def main() -> None:
    """Run the Flask development server."""
    logging.basicConfig(level=logging.INFO)
    app = create_app()
    app.run(host=config.VAULT_HOST, port=config.VAULT_PORT)


if __name__ == '__main__':
    main()
