import datetime
import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("TESTING", "true")

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

RFC6238_KEY = b"12345678901234567890"
EXAMPLE_SECRET = "JBSWY3DPEHPK3PXP"
PASSWORD = "correct horse"


@pytest.fixture
def fixed_now():
    # 2009-02-13 23:31:30 UTC, counter 41152263
    return datetime.datetime(2009, 2, 13, 23, 31, 30, tzinfo=datetime.timezone.utc)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "vault.db")


@pytest.fixture
def app(db_path):
    from vault_backend import create_app

    app = create_app({
        "TESTING": True,
        "ACCESS_PASSWORD": PASSWORD,
        "VAULT_DATABASE": db_path,
        "VAULT_ISSUER": "TestVault",
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers():
    return {"X-Vault-Password": PASSWORD}
