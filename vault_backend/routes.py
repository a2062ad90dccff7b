"""
TOTP VAULT API ROUTES - FLASK BLUEPRINT

Every endpoint is password gated. The password travels in the JSON / form
body ("password") for POST requests and in the X-Vault-Password header for
GET / DELETE requests.

EXAMPLES:
curl -X POST http://localhost:5000/auth -H "Content-Type: application/json" -d '{"password": "pw"}'
curl http://localhost:5000/codes -H "X-Vault-Password: pw"
curl -X POST http://localhost:5000/accounts -H "Content-Type: application/json" \
     -d '{"password": "pw", "name": "GitHub", "secret": "JBSWY3DPEHPK3PXP"}'
curl -X DELETE http://localhost:5000/accounts/GitHub -H "X-Vault-Password: pw"
"""

import base64
import functools
import io
import logging
import time

import qrcode
from flask import Blueprint, current_app, jsonify, request
from werkzeug.security import check_password_hash

from vault_core import InvalidUri, ValidationError, build_uri, render_entries, resolve_entry
from vault_database import db_manager

from .config import NO_CACHE_HEADERS, PASSWORD_HEADER

logger = logging.getLogger(__name__)

vault_bp = Blueprint('vault', __name__)


def _request_password() -> str:
    header = request.headers.get(PASSWORD_HEADER)
    if header is not None:
        return header
    data = request.get_json(silent=True)
    if isinstance(data, dict) and "password" in data:
        return str(data["password"])
    return request.form.get("password", "")


def _password_ok(password: str) -> bool:
    pw_hash = current_app.config.get("ACCESS_PASSWORD_HASH")
    return bool(pw_hash) and check_password_hash(pw_hash, password)


def password_required(view):
    """Reject the request with 401 unless it carries the access password."""

    @functools.wraps(view)
    def wrapper(*args, **kwargs):
        if not _password_ok(_request_password()):
            logger.warning("Rejected %s %s: invalid password", request.method, request.path)
            return jsonify({"error": "Unauthorized: Invalid password"}), 401
        return view(*args, **kwargs)

    return wrapper


def _db_path() -> str:
    return current_app.config["VAULT_DATABASE"]


@vault_bp.route('/auth', methods=['POST'])
@password_required
def auth():
    """
    CHECK THE ACCESS PASSWORD

      curl -X POST http://localhost:5000/auth -H "Content-Type: application/json" -d '{"password": "pw"}'
    """
    return jsonify({"success": True})


@vault_bp.route('/codes', methods=['GET'])
@password_required
def get_codes():
    """
    CURRENT CODES FOR EVERY ENTRY

    Output:
      {"codes": [{"name": "GitHub", "code": "123456", "remaining": 12, "error": null}, ...]}

    Entries whose secret no longer decodes are listed with "error" set.
    """
    rows = render_entries(db_manager.list_accounts(_db_path()), time.time())
    response = jsonify({"codes": [row._asdict() for row in rows]})
    response.headers.update(NO_CACHE_HEADERS)
    return response


@vault_bp.route('/accounts', methods=['POST'])
@password_required
def add_account():
    """
    ADD AN ENTRY

    Input (JSON or form body):
      {
        "name": "GitHub",                 # optional when secret is an otpauth:// URI
        "secret": "JBSWY3DPEHPK3PXP"      # Base32 secret or otpauth://totp/... URI
      }
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = request.form
    try:
        name, secret = resolve_entry(data.get("name"), data.get("secret") or "")
    except ValidationError as e:
        return jsonify({"error": f"Error adding key: {e}", "reason": e.reason.value}), 400
    except InvalidUri as e:
        return jsonify({"error": f"Invalid otpauth URL: {e}", "reason": "InvalidUri"}), 400

    success, message = db_manager.add_account(name, secret, _db_path())
    if not success:
        return jsonify({"error": message}), 409
    return jsonify({"message": "Key added successfully!", "name": name}), 201


@vault_bp.route('/accounts/<path:name>', methods=['DELETE'])
@password_required
def delete_account(name):
    """
    REMOVE AN ENTRY

      curl -X DELETE http://localhost:5000/accounts/GitHub -H "X-Vault-Password: pw"
    """
    if not db_manager.delete_account(name, _db_path()):
        return jsonify({"error": f"Account '{name}' not found."}), 404
    return jsonify({"message": "Key deleted successfully!", "name": name})


@vault_bp.route('/export', methods=['GET'])
@password_required
def export_accounts():
    """
    EXPORT EVERY ENTRY WITH ITS PROVISIONING URI

    Output:
      {"GitHub": {"secret": "JBSWY3DPEHPK3PXP", "uri": "otpauth://totp/..."}}
    """
    issuer = current_app.config.get("VAULT_ISSUER")
    exported = {
        name: {"secret": secret, "uri": build_uri(secret, name, issuer=issuer)}
        for name, secret in db_manager.list_accounts(_db_path()).items()
    }
    response = jsonify(exported)
    response.headers.update(NO_CACHE_HEADERS)
    return response


@vault_bp.route('/qr_code/<path:name>', methods=['GET'])
@password_required
def get_qr_code(name):
    """
    QR CODE IMAGE FOR ONE ENTRY

    Scan it with Google Authenticator / Microsoft Authenticator to copy the
    entry to a phone.
    """
    secret = db_manager.get_account_secret(name, _db_path())
    if secret is None:
        return jsonify({"error": f"Account '{name}' not found."}), 404

    uri = build_uri(secret, name, issuer=current_app.config.get("VAULT_ISSUER"))

    qr = qrcode.QRCode(version=1, box_size=10, border=5)
    qr.add_data(uri)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    img_str = base64.b64encode(buffer.getvalue()).decode()

    response = jsonify({"qr_code": f"data:image/png;base64,{img_str}", "name": name})
    response.headers.update(NO_CACHE_HEADERS)
    return response
