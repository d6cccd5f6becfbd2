from sqlmodel import Session, select

from core.page_access import PAGE_KEYS, ROLE_DEFAULT_PAGES, find_unknown_pages, resolve_pages
from database.models import AppRole, UserPermission
from tests.conftest import auth_headers

EMPLOYEE_DEFAULTS = ROLE_DEFAULT_PAGES[AppRole.EMPLOYEE]


def access_url(member):
    return f"/api/users/{member.profile_id}/permissions"


def test_administrators_see_every_page():
    assert resolve_pages(AppRole.ADMIN, ["chat"]) == PAGE_KEYS
    assert resolve_pages(AppRole.SUPER_ADMIN, []) == PAGE_KEYS


def test_members_fall_back_to_role_defaults():
    assert resolve_pages(AppRole.EMPLOYEE, []) == EMPLOYEE_DEFAULTS
    assert resolve_pages(None, []) == EMPLOYEE_DEFAULTS
    assert resolve_pages(AppRole.EMPLOYEE, ["leads"]) == ["leads"]


def test_unknown_pages_are_reported():
    assert find_unknown_pages(["tasks", "payroll"]) == ["payroll"]


def test_new_member_has_no_custom_grants(client, admin, employee):
    response = client.get(access_url(employee), headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json() == {
        "profile_id": employee.profile_id,
        "permissions": [],
        "effective": EMPLOYEE_DEFAULTS,
        "custom": False,
    }


def test_replace_grants_and_see_them_in_me(client, admin, employee):
    response = client.put(
        access_url(employee),
        json={"permissions": ["leads", "dashboard", "leads"]},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["permissions"] == ["dashboard", "leads"]
    assert body["effective"] == ["dashboard", "leads"]
    assert body["custom"] is True

    me = client.get("/api/auth/me", headers=auth_headers(employee)).json()
    assert me["pages"] == ["dashboard", "leads"]


def test_empty_list_restores_role_defaults(client, super_admin, employee):
    headers = auth_headers(super_admin)
    client.put(access_url(employee), json={"permissions": ["clients"]}, headers=headers)

    response = client.put(access_url(employee), json={"permissions": []}, headers=headers)
    assert response.json()["custom"] is False

    me = client.get("/api/auth/me", headers=auth_headers(employee)).json()
    assert me["pages"] == EMPLOYEE_DEFAULTS


def test_admin_me_lists_every_page(client, admin):
    me = client.get("/api/auth/me", headers=auth_headers(admin)).json()
    assert me["pages"] == PAGE_KEYS


def test_unknown_page_is_rejected(client, engine, admin, employee):
    response = client.put(access_url(employee), json={"permissions": ["tasks", "payroll"]}, headers=auth_headers(admin))
    assert response.status_code == 400
    assert response.json() == {"error": "Validation failed", "details": "permissions: unknown page payroll"}

    with Session(engine) as session:
        assert session.exec(select(UserPermission)).all() == []


def test_employees_cannot_manage_access(client, admin, employee):
    response = client.put(access_url(admin), json={"permissions": ["tasks"]}, headers=auth_headers(employee))
    assert response.status_code == 403

    response = client.get(access_url(admin), headers=auth_headers(employee))
    assert response.status_code == 403


def test_other_company_member_is_not_found(client, admin, outsider):
    response = client.get(access_url(outsider), headers=auth_headers(admin))
    assert response.status_code == 404

    response = client.put(access_url(outsider), json={"permissions": ["tasks"]}, headers=auth_headers(admin))
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_deleting_a_user_removes_their_grants(client, engine, super_admin, employee):
    headers = auth_headers(super_admin)
    client.put(access_url(employee), json={"permissions": ["tasks", "chat"]}, headers=headers)

    response = client.post(
        "/api/users/manage",
        json={"action": "delete", "userId": employee.identity_id, "profileId": employee.profile_id},
        headers=headers,
    )
    assert response.status_code == 200

    with Session(engine) as session:
        assert session.exec(select(UserPermission)).all() == []


def test_page_catalogue_is_grouped(client):
    body = client.get("/api/auth/pages").json()
    assert set(body["categories"]) == {"management", "operations", "sales", "communication", "settings"}
    assert sum(len(pages) for pages in body["pages"].values()) == len(PAGE_KEYS)
    assert [page["key"] for page in body["pages"]["sales"]] == ["leads", "clients", "contracts"]
