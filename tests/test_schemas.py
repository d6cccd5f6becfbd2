import uuid

import pytest

from api.user.schemas import (
    CreateUserRequest,
    DeleteUserRequest,
    ToggleActiveRequest,
    UpdateProfileRequest,
    UpdateRoleRequest,
)
from core.exceptions import ValidationError
from services.user_admin_service import parse_request


def create_payload(**overrides):
    payload = {
        "action": "create",
        "email": "a@x.com",
        "password": "password1",
        "fullName": "Ann",
        "role": "employee",
    }
    payload.update(overrides)
    return payload


def test_each_action_maps_to_its_model():
    user_id = str(uuid.uuid4())
    profile_id = str(uuid.uuid4())

    assert isinstance(parse_request(create_payload()), CreateUserRequest)
    assert isinstance(
        parse_request({"action": "updateRole", "userId": user_id, "newRole": "admin"}),
        UpdateRoleRequest,
    )
    assert isinstance(
        parse_request({"action": "toggleActive", "profileId": profile_id, "isActive": False}),
        ToggleActiveRequest,
    )
    assert isinstance(
        parse_request({"action": "delete", "userId": user_id, "profileId": profile_id}),
        DeleteUserRequest,
    )
    assert isinstance(
        parse_request({"action": "updateProfile", "profileId": profile_id}),
        UpdateProfileRequest,
    )


@pytest.mark.parametrize("length, valid", [(7, False), (8, True), (72, True), (73, False)])
def test_password_length_boundaries(length, valid):
    payload = create_payload(password="p" * length)
    if valid:
        assert parse_request(payload).password == "p" * length
    else:
        with pytest.raises(ValidationError) as exc_info:
            parse_request(payload)
        assert "password" in exc_info.value.details


@pytest.mark.parametrize("name, valid", [("A", False), ("Al", True), ("A" * 100, True), ("A" * 101, False)])
def test_full_name_length_boundaries(name, valid):
    payload = create_payload(fullName=name)
    if valid:
        assert parse_request(payload).full_name == name
    else:
        with pytest.raises(ValidationError) as exc_info:
            parse_request(payload)
        assert "fullName" in exc_info.value.details


def test_full_name_is_trimmed_before_length_check():
    with pytest.raises(ValidationError):
        parse_request(create_payload(fullName="  A  "))
    assert parse_request(create_payload(fullName="  Ann  ")).full_name == "Ann"


def test_invalid_payload_lists_every_failed_field():
    with pytest.raises(ValidationError) as exc_info:
        parse_request({"action": "create", "email": "not-an-email", "password": "x", "fullName": "A"})

    error = exc_info.value
    assert error.message == "Validation failed"
    assert error.status_code == 400
    for field in ("email", "password", "fullName", "role"):
        assert f"{field}:" in error.details


def test_email_longer_than_255_is_rejected():
    local = "a" * 64
    domain = ".".join(["b" * 60] * 4) + ".com"
    with pytest.raises(ValidationError) as exc_info:
        parse_request(create_payload(email=f"{local}@{domain}"))
    assert "email" in exc_info.value.details


@pytest.mark.parametrize("phone", ["+1 (555) 123-4567", "0501234567"])
def test_phone_accepts_phone_characters(phone):
    assert parse_request(create_payload(phone=phone)).phone == phone


@pytest.mark.parametrize("phone", ["call me", "555-1234 ext. 9", "1" * 21])
def test_phone_rejects_other_characters_and_long_values(phone):
    with pytest.raises(ValidationError) as exc_info:
        parse_request(create_payload(phone=phone))
    assert "phone" in exc_info.value.details


def test_blank_optional_fields_are_missing():
    request = parse_request(create_payload(phone="", department="  ", fullNameAr=""))
    assert request.phone is None
    assert request.department is None
    assert request.full_name_ar is None


def test_role_must_be_assignable():
    with pytest.raises(ValidationError):
        parse_request(create_payload(role="super_admin"))


def test_uuid_fields_are_checked():
    with pytest.raises(ValidationError) as exc_info:
        parse_request({"action": "delete", "userId": "123", "profileId": "abc"})
    assert "userId" in exc_info.value.details
    assert "profileId" in exc_info.value.details


def test_is_active_must_be_boolean():
    with pytest.raises(ValidationError):
        parse_request({"action": "toggleActive", "profileId": str(uuid.uuid4()), "isActive": "yes"})


@pytest.mark.parametrize("payload", [{}, {"action": "promote"}, {"action": None}])
def test_unknown_or_missing_action(payload):
    with pytest.raises(ValidationError) as exc_info:
        parse_request(payload)
    assert exc_info.value.message == "Invalid action"


def test_every_action_has_a_handler(session):
    from typing import get_args

    from api.user.schemas import ManageUserRequest
    from auth.dependencies import CallerContext
    from database.models import AppRole
    from services.user_admin_service import UserAdminService

    caller = CallerContext(
        identity_id=str(uuid.uuid4()),
        email="owner@acme.com",
        profile_id=str(uuid.uuid4()),
        company_id=str(uuid.uuid4()),
        role=AppRole.SUPER_ADMIN,
    )
    union = get_args(ManageUserRequest)[0]
    handlers = UserAdminService(session, caller)._handlers
    assert set(get_args(union)) == set(handlers)
