"""
User administration service.

Every action runs against the caller's own company only. Role and company
come from the resolved CallerContext, never from the payload.

`create` writes three records that the store cannot commit together:
identity -> profile -> role assignment. If a later step fails, the identity
is deleted again, which also removes a profile written in between.
"""
from typing import Any, Callable
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session

from api.user import crud
from api.user.schemas import (
    CreateUserRequest,
    UpdateRoleRequest,
    ToggleActiveRequest,
    DeleteUserRequest,
    UpdateProfileRequest,
    ManageUserResponse,
    INVALID_ACTION_ERROR_TYPES,
    describe_errors,
    manage_user_request_adapter,
)
from auth.dependencies import CallerContext
from auth.service import create_identity, delete_identity
from core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from core.permissions import (
    Permissions,
    can_change_role,
    can_create_role,
    can_delete_user,
    has_permission,
    is_administrator,
)
from database.models import AppRole
from utils.logger import get_logger
from utils.text import sanitize_name

logger = get_logger(__name__)

FULL_NAME_MIN_LENGTH = 2


def parse_request(payload: Any):
    """Validate a raw payload into one of the action request models."""
    try:
        return manage_user_request_adapter.validate_python(payload)
    except PydanticValidationError as exc:
        errors = exc.errors()
        if any(error["type"] in INVALID_ACTION_ERROR_TYPES for error in errors):
            raise ValidationError("Invalid action")
        # loc[0] is the union tag ("create", "updateRole", ...)
        raise ValidationError("Validation failed", details=describe_errors(errors, skip=1))


def _sanitized_full_name(value: str) -> str:
    cleaned = sanitize_name(value)
    if len(cleaned) < FULL_NAME_MIN_LENGTH:
        raise ValidationError(
            "Validation failed",
            details=f"fullName: String should have at least {FULL_NAME_MIN_LENGTH} characters",
        )
    return cleaned


class UserAdminService:
    """Executes validated administration requests on behalf of one caller."""

    def __init__(self, session: Session, caller: CallerContext):
        self.session = session
        self.caller = caller
        self._handlers: dict[type, Callable[[Any], dict]] = {
            CreateUserRequest: self.create_user,
            UpdateRoleRequest: self.update_role,
            ToggleActiveRequest: self.toggle_active,
            DeleteUserRequest: self.delete_user,
            UpdateProfileRequest: self.update_profile,
        }

    @property
    def company_id(self) -> str:
        return self.caller.company_id

    def execute(self, request) -> dict:
        handler = self._handlers.get(type(request))
        if handler is None:
            raise ValidationError("Invalid action")
        return handler(request)

    def _require(self, permission: Permissions, message: str) -> None:
        if not has_permission(self.caller.role, permission):
            raise AuthorizationError(message)

    # ------------------------------------------------------------------
    # create
    # ------------------------------------------------------------------
    def create_user(self, request: CreateUserRequest) -> dict:
        new_role = AppRole(request.role)
        allowed, reason = can_create_role(self.caller.role, new_role)
        if not allowed:
            raise AuthorizationError(reason)

        full_name = _sanitized_full_name(request.full_name)
        full_name_ar = sanitize_name(request.full_name_ar)

        try:
            identity = create_identity(
                self.session,
                email=request.email,
                password=request.password,
                user_metadata={"full_name": full_name, "full_name_ar": full_name_ar},
            )
        except StoreError as exc:
            logger.error(f"Create user error: {exc.message}")
            raise ConflictError(exc.message)

        identity_id = identity.id
        try:
            crud.upsert_profile(
                self.session,
                user_id=identity_id,
                company_id=self.company_id,
                full_name=full_name,
                full_name_ar=full_name_ar,
                department=request.department,
                phone=request.phone,
            )
            crud.create_user_role(self.session, identity_id, self.company_id, new_role)
        except StoreError as exc:
            logger.error(f"Create profile/role error: {exc.message}")
            self._rollback_identity(identity_id)
            raise ConflictError(exc.message)
        except Exception:
            logger.error(f"Unexpected error while provisioning {identity_id}")
            self._rollback_identity(identity_id)
            raise

        logger.info(f"User created successfully: {identity_id}")
        return ManageUserResponse(user_id=identity_id).model_dump(by_alias=True, exclude_none=True)

    def _rollback_identity(self, identity_id: str) -> None:
        """Compensating step for a failed create."""
        self.session.rollback()
        try:
            delete_identity(self.session, identity_id)
            logger.info(f"Rolled back identity {identity_id} after failed create")
        except StoreError as exc:
            logger.error(f"Rollback of identity {identity_id} failed, manual cleanup needed: {exc.message}")

    # ------------------------------------------------------------------
    # updateRole
    # ------------------------------------------------------------------
    def update_role(self, request: UpdateRoleRequest) -> dict:
        self._require(Permissions.USERS_UPDATE_ROLE, "Only super admin can change roles")
        user_id = str(request.user_id)
        new_role = AppRole(request.new_role)

        target = crud.get_user_role(self.session, user_id, self.company_id)
        if target is None:
            raise NotFoundError()

        allowed, reason = can_change_role(self.caller.role, AppRole(target.role), new_role)
        if not allowed:
            raise AuthorizationError(reason)

        if target.role != new_role.value:
            try:
                crud.update_user_role(self.session, target, new_role)
            except StoreError as exc:
                raise ConflictError(exc.message)

        logger.info(f"Role updated successfully for user: {user_id}")
        return ManageUserResponse().model_dump(by_alias=True, exclude_none=True)

    # ------------------------------------------------------------------
    # toggleActive
    # ------------------------------------------------------------------
    def toggle_active(self, request: ToggleActiveRequest) -> dict:
        self._require(Permissions.USERS_TOGGLE_ACTIVE, "Permission denied")
        profile_id = str(request.profile_id)

        profile = crud.get_profile(self.session, profile_id, self.company_id)
        if profile is None:
            raise NotFoundError()

        try:
            crud.update_profile_status(self.session, profile, request.is_active)
        except StoreError as exc:
            raise ConflictError(exc.message)

        logger.info(f"User active status toggled: {profile_id} {request.is_active}")
        return ManageUserResponse().model_dump(by_alias=True, exclude_none=True)

    # ------------------------------------------------------------------
    # delete
    # ------------------------------------------------------------------
    def delete_user(self, request: DeleteUserRequest) -> dict:
        self._require(Permissions.USERS_DELETE, "Only super admin can delete users")
        user_id = str(request.user_id)
        profile_id = str(request.profile_id)

        if user_id == self.caller.identity_id:
            raise AuthorizationError("Cannot delete yourself")

        profile = crud.get_profile(self.session, profile_id, self.company_id)
        if profile is None or profile.user_id != user_id:
            raise NotFoundError()

        target = crud.get_user_role(self.session, user_id, self.company_id)
        target_role = AppRole(target.role) if target else None

        allowed, reason = can_delete_user(self.caller.role, self.caller.identity_id, user_id, target_role)
        if not allowed:
            raise AuthorizationError(reason)

        # Profile and role assignment go with the identity
        try:
            delete_identity(self.session, user_id)
        except StoreError as exc:
            logger.error(f"Delete user error: {exc.message}")
            raise ConflictError(exc.message)

        logger.info(f"User deleted successfully: {user_id}")
        return ManageUserResponse().model_dump(by_alias=True, exclude_none=True)

    # ------------------------------------------------------------------
    # updateProfile
    # ------------------------------------------------------------------
    def update_profile(self, request: UpdateProfileRequest) -> dict:
        self._require(Permissions.USERS_UPDATE_PROFILE, "Permission denied")
        profile_id = str(request.profile_id)

        changes = {}
        if request.full_name is not None:
            changes["full_name"] = _sanitized_full_name(request.full_name)
        if request.full_name_ar is not None:
            changes["full_name_ar"] = sanitize_name(request.full_name_ar)
        if request.department is not None:
            changes["department"] = request.department
        if request.phone is not None:
            changes["phone"] = request.phone

        profile = crud.get_profile(self.session, profile_id, self.company_id)
        if profile is None:
            raise NotFoundError()

        if changes:
            try:
                crud.update_profile(self.session, profile, changes)
            except StoreError as exc:
                raise ConflictError(exc.message)

        logger.info(f"Profile updated: {profile_id} fields={sorted(changes)}")
        return ManageUserResponse().model_dump(by_alias=True, exclude_none=True)


def manage_users(session: Session, caller: CallerContext, payload: Any) -> dict:
    """Entry point: role gate, validation, then dispatch to the action."""
    # Nothing here is open to employees, whatever the payload looks like
    if not is_administrator(caller.role):
        raise AuthorizationError("Permission denied")

    request = parse_request(payload)
    logger.info(f"Request action: {request.action} by role: {caller.role.value}")

    return UserAdminService(session, caller).execute(request)
