from datetime import datetime, timedelta, timezone

from jose import jwt

from config.auth_settings import JWT_ALGORITHM, JWT_AUDIENCE, JWT_SECRET
from tests.conftest import DEFAULT_PASSWORD, add_member, auth_headers


def test_sign_in_issues_working_token(client, super_admin):
    response = client.post("/api/auth/token", json={"email": "OWNER@acme.com", "password": DEFAULT_PASSWORD})
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["expires_in"] > 0

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["id"] == super_admin.identity_id


def test_wrong_password_is_401(client, super_admin):
    response = client.post("/api/auth/token", json={"email": super_admin.email, "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid login credentials"}


def test_unknown_email_is_401(client):
    response = client.post("/api/auth/token", json={"email": "nobody@x.com", "password": DEFAULT_PASSWORD})
    assert response.status_code == 401


def test_me_returns_profile_company_role_and_permissions(client, admin, company_id):
    response = client.get("/api/auth/me", headers=auth_headers(admin))
    assert response.status_code == 200
    body = response.json()
    assert body["email"] == admin.email
    assert body["profile"]["id"] == admin.profile_id
    assert body["company"] == {"id": company_id, "name": "Tenant T"}
    assert body["role"] == "admin"
    assert "users:create" in body["permissions"]
    assert "users:delete" not in body["permissions"]


def test_expired_token_is_rejected(client, admin):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {
            "sub": admin.identity_id,
            "aud": JWT_AUDIENCE,
            "iat": now - timedelta(hours=2),
            "exp": now - timedelta(hours=1),
        },
        JWT_SECRET,
        algorithm=JWT_ALGORITHM,
    )
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json() == {"error": "Token has expired"}


def test_token_signed_with_other_secret_is_rejected(client, admin):
    token = jwt.encode({"sub": admin.identity_id, "aud": JWT_AUDIENCE}, "another-secret", algorithm=JWT_ALGORITHM)
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_roles_are_listed_lowest_first(client):
    roles = client.get("/api/auth/roles").json()["roles"]
    assert [role["name"] for role in roles] == ["employee", "admin", "super_admin"]
    assert roles[2]["label"] == "Super Admin"


def test_roster_lists_only_own_company(client, engine, company_id, super_admin, admin, employee, outsider):
    unassigned = add_member(engine, company_id, None, "fresh@acme.com", "Fresh")

    response = client.get("/api/users", headers=auth_headers(employee))
    assert response.status_code == 200
    body = response.json()
    roles = {user["user_id"]: user["role"] for user in body["users"]}

    assert body["total"] == 4
    assert outsider.identity_id not in roles
    assert roles[super_admin.identity_id] == "super_admin"
    assert roles[admin.identity_id] == "admin"
    assert roles[unassigned.identity_id] == "employee"


def test_health(client):
    assert client.get("/api/runtime/health").json() == {"status": "ok"}


def test_member_without_role_reads_roster_as_employee(client, engine, company_id, admin):
    member = add_member(engine, company_id, None, "norole@acme.com", "No Role")

    response = client.get("/api/users", headers=auth_headers(member))
    assert response.status_code == 200
    assert response.json()["total"] == 2

    me = client.get("/api/auth/me", headers=auth_headers(member)).json()
    assert me["role"] is None
    assert "users:read" in me["permissions"]
    assert "users:create" not in me["permissions"]
