# tests/test_auth_api.py
from conftest import auth_headers, create_user
from models.log import Log


def _register(client, email="owner@kasi-traders.co.za", password="secret123"):
    return client.post("/register", json={
        "email": email, "password": password, "first_name": "Lerato", "last_name": "Khumalo",
    })


def test_register_login_me(client):
    r = _register(client)
    assert r.status_code == 200
    body = r.json()
    assert body["role"] == "ADMIN"
    assert body["admin_id"] is None
    assert body["tenant_id"] == body["id"]

    r = client.post("/login", json={"email": "Owner@Kasi-Traders.co.za", "password": "secret123"})
    assert r.status_code == 200
    token = r.json()["access_token"]

    r = client.get("/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["email"] == "owner@kasi-traders.co.za"


def test_register_twice_is_rejected(client):
    assert _register(client).status_code == 200
    r = _register(client)
    assert r.status_code == 400
    assert r.json()["detail"] == "Email already registered"


def test_bad_password_is_logged(client, db):
    _register(client)
    r = client.post("/login", json={"email": "owner@kasi-traders.co.za", "password": "nope"})
    assert r.status_code == 401

    entry = db.query(Log).filter(Log.action == "LOGIN").one()
    assert entry.status == "FAIL"


def test_missing_or_bad_token(client):
    assert client.get("/me").status_code in (401, 403)
    r = client.get("/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_admin_adds_salesman_to_own_tenant(client, admin, admin_headers):
    r = client.post("/staff", headers=admin_headers, json={
        "email": "till1@acme-shop.com", "password": "secret123", "first_name": "Sam", "last_name": "Nkosi",
    })
    assert r.status_code == 201
    body = r.json()
    assert body["role"] == "SALESMAN"
    assert body["admin_id"] == admin.id
    assert body["tenant_id"] == admin.id


def test_salesman_cannot_add_staff(client, db, admin):
    salesman = create_user(db, "till1@acme-shop.com", role="SALESMAN", admin_id=admin.id)
    r = client.post("/staff", headers=auth_headers(salesman), json={
        "email": "till2@acme-shop.com", "password": "secret123", "first_name": "A", "last_name": "B",
    })
    assert r.status_code == 403


def test_unknown_role_has_no_pos_access(client, db):
    viewer = create_user(db, "viewer@acme-shop.com", role="VIEWER")
    assert client.get("/pos/products", headers=auth_headers(viewer)).status_code == 403
