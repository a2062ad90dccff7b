import pytest

from vault_backend import create_app
from vault_database import db_manager

from .conftest import PASSWORD


def _add(client, **data):
    return client.post("/accounts", json=dict(password=PASSWORD, **data))


def test_auth(client):
    assert client.post("/auth", json={"password": PASSWORD}).get_json() == {"success": True}
    response = client.post("/auth", json={"password": "wrong"})
    assert response.status_code == 401
    assert response.get_json()["error"] == "Unauthorized: Invalid password"


def test_auth_with_form_body(client):
    assert client.post("/auth", data={"password": PASSWORD}).status_code == 200


def test_endpoints_require_password(client):
    assert client.get("/codes").status_code == 401
    assert client.get("/export", headers={"X-Vault-Password": "nope"}).status_code == 401
    assert client.post("/accounts", json={"name": "x", "secret": "JBSWY3DPEHPK3PXP"}).status_code == 401
    assert client.delete("/accounts/x").status_code == 401


def test_add_and_list_codes(client, auth_headers):
    response = _add(client, name="GitHub", secret="JBSWY3DPEHPK3PXP")
    assert response.status_code == 201
    assert response.get_json()["name"] == "GitHub"

    response = client.get("/codes", headers=auth_headers)
    assert response.status_code == 200
    assert "no-store" in response.headers["Cache-Control"]
    (row,) = response.get_json()["codes"]
    assert row["name"] == "GitHub"
    assert len(row["code"]) == 6 and row["code"].isdigit()
    assert 1 <= row["remaining"] <= 30
    assert row["error"] is None


def test_add_with_form_body(client, db_path):
    response = client.post("/accounts", data={"password": PASSWORD, "name": "Form", "secret": "JBSWY3DPEHPK3PXP"})
    assert response.status_code == 201
    assert db_manager.account_exists("Form", db_path)


def test_add_from_provisioning_uri(client, db_path):
    uri = "otpauth://totp/Example:alice@site.com?secret=JBSWY3DPEHPK3PXP&issuer=Example"
    response = _add(client, secret=uri)
    assert response.status_code == 201
    assert response.get_json()["name"] == "Example:alice@site.com"
    assert db_manager.get_account_secret("Example:alice@site.com", db_path) == "JBSWY3DPEHPK3PXP"


@pytest.mark.parametrize("data,reason", [
    ({"name": "x", "secret": "1"}, "InvalidEncoding"),
    ({"name": "x", "secret": ""}, "EmptySecret"),
    ({"name": "", "secret": "JBSWY3DPEHPK3PXP"}, "EmptyName"),
    ({"name": "x", "secret": "otpauth://hotp/x?secret=JBSWY3DPEHPK3PXP"}, "InvalidUri"),
    ({"name": "x", "secret": "otpauth://totp/x?issuer=Foo"}, "EmptySecret"),
    ({"name": "x", "secret": 12345}, "InvalidEncoding"),
    ({"name": "x", "secret": ["JBSWY3DPEHPK3PXP"]}, "InvalidEncoding"),
    ({"name": 5, "secret": "JBSWY3DPEHPK3PXP"}, "EmptyName"),
    ({"name": "x", "secret": "JBSWY3DPEHPK3PX\u00df"}, "InvalidEncoding"),
])
def test_add_rejects_bad_input(client, db_path, data, reason):
    response = _add(client, **data)
    assert response.status_code == 400
    assert response.get_json()["reason"] == reason
    assert db_manager.list_accounts(db_path) == {}


def test_add_duplicate(client):
    assert _add(client, name="GitHub", secret="JBSWY3DPEHPK3PXP").status_code == 201
    response = _add(client, name="GitHub", secret="JBSWY3DPEHPK3PXP")
    assert response.status_code == 409
    assert "already exists" in response.get_json()["error"]


def test_delete(client, auth_headers):
    _add(client, name="GitHub", secret="JBSWY3DPEHPK3PXP")
    assert client.delete("/accounts/GitHub", headers=auth_headers).status_code == 200
    assert client.delete("/accounts/GitHub", headers=auth_headers).status_code == 404
    assert client.get("/codes", headers=auth_headers).get_json() == {"codes": []}


def test_broken_stored_entry_is_reported(client, auth_headers, db_path):
    db_manager.add_account("legacy", "not-base32!", db_path)
    (row,) = client.get("/codes", headers=auth_headers).get_json()["codes"]
    assert row["name"] == "legacy"
    assert row["code"] is None
    assert row["error"].startswith("key format error")


def test_export(client, auth_headers):
    _add(client, name="alice@site.com", secret="JBSWY3DPEHPK3PXP")
    exported = client.get("/export", headers=auth_headers).get_json()
    assert exported == {
        "alice@site.com": {
            "secret": "JBSWY3DPEHPK3PXP",
            "uri": "otpauth://totp/TestVault:alice%40site.com?secret=JBSWY3DPEHPK3PXP&issuer=TestVault",
        }
    }


def test_qr_code(client, auth_headers):
    _add(client, name="GitHub", secret="JBSWY3DPEHPK3PXP")
    response = client.get("/qr_code/GitHub", headers=auth_headers)
    assert response.status_code == 200
    assert response.get_json()["qr_code"].startswith("data:image/png;base64,")
    assert client.get("/qr_code/missing", headers=auth_headers).status_code == 404


def test_password_is_not_kept_in_config(app):
    assert "ACCESS_PASSWORD" not in app.config
    assert app.config["ACCESS_PASSWORD_HASH"]


def test_create_app_requires_password(db_path):
    with pytest.raises(RuntimeError):
        create_app({"TESTING": False, "ACCESS_PASSWORD": None, "VAULT_DATABASE": db_path})


def test_testing_app_without_password_rejects_everything(db_path):
    app = create_app({"TESTING": True, "ACCESS_PASSWORD": None, "VAULT_DATABASE": db_path})
    assert app.test_client().post("/auth", json={"password": ""}).status_code == 401
