"""
Centralized permission definitions.
All permission names should be referenced from here.
"""
from enum import Enum

from database.models.role import AppRole


class Permissions(str, Enum):
    # User administration
    USERS_READ = "users:read"
    USERS_CREATE = "users:create"
    USERS_CREATE_ADMIN = "users:create_admin"
    USERS_UPDATE_ROLE = "users:update_role"
    USERS_TOGGLE_ACTIVE = "users:toggle_active"
    USERS_UPDATE_PROFILE = "users:update_profile"
    USERS_DELETE = "users:delete"
    USERS_MANAGE_ACCESS = "users:manage_access"

    # AI insights
    INSIGHTS_ANALYZE = "insights:analyze"


PERMISSION_DEFINITIONS = [
    {"name": Permissions.USERS_READ.value, "category": "users", "description": "View the company roster"},
    {"name": Permissions.USERS_CREATE.value, "category": "users", "description": "Create employees"},
    {"name": Permissions.USERS_CREATE_ADMIN.value, "category": "users", "description": "Create administrators"},
    {"name": Permissions.USERS_UPDATE_ROLE.value, "category": "users", "description": "Change user roles"},
    {"name": Permissions.USERS_TOGGLE_ACTIVE.value, "category": "users", "description": "Activate or deactivate users"},
    {"name": Permissions.USERS_UPDATE_PROFILE.value, "category": "users", "description": "Edit user profiles"},
    {"name": Permissions.USERS_DELETE.value, "category": "users", "description": "Delete users"},
    {"name": Permissions.USERS_MANAGE_ACCESS.value, "category": "users", "description": "Grant dashboard pages to members"},
    {"name": Permissions.INSIGHTS_ANALYZE.value, "category": "insights", "description": "Request AI analysis"},
]


ROLE_PERMISSIONS = {
    AppRole.SUPER_ADMIN: [
        Permissions.USERS_READ,
        Permissions.USERS_CREATE,
        Permissions.USERS_CREATE_ADMIN,
        Permissions.USERS_UPDATE_ROLE,
        Permissions.USERS_TOGGLE_ACTIVE,
        Permissions.USERS_UPDATE_PROFILE,
        Permissions.USERS_DELETE,
        Permissions.USERS_MANAGE_ACCESS,
        Permissions.INSIGHTS_ANALYZE,
    ],
    AppRole.ADMIN: [
        # Employees only - NO role changes, NO deletes
        Permissions.USERS_READ,
        Permissions.USERS_CREATE,
        Permissions.USERS_TOGGLE_ACTIVE,
        Permissions.USERS_UPDATE_PROFILE,
        Permissions.USERS_MANAGE_ACCESS,
        Permissions.INSIGHTS_ANALYZE,
    ],
    AppRole.EMPLOYEE: [
        Permissions.USERS_READ,
        Permissions.INSIGHTS_ANALYZE,
    ],
}

# Roles that may call the user administration entry point at all
ADMINISTRATOR_ROLES = (AppRole.ADMIN, AppRole.SUPER_ADMIN)


def get_role_permissions(role: AppRole | None) -> list[str]:
    """Get all permission names for a role. No role means no permissions."""
    if role is None:
        return []
    return [perm.value for perm in ROLE_PERMISSIONS[role]]


def has_permission(role: AppRole | None, permission: Permissions) -> bool:
    return permission.value in get_role_permissions(role)


def is_administrator(role: AppRole | None) -> bool:
    return role in ADMINISTRATOR_ROLES


def can_create_role(creator: AppRole | None, new_role: AppRole) -> tuple[bool, str]:
    """Check if a caller with `creator` role may create a user with `new_role`.

    Returns:
        Tuple of (can_create, reason)
    """
    if not has_permission(creator, Permissions.USERS_CREATE):
        return False, "Permission denied"

    if new_role == AppRole.SUPER_ADMIN:
        return False, "Cannot assign super_admin role"

    if new_role == AppRole.ADMIN and not has_permission(creator, Permissions.USERS_CREATE_ADMIN):
        return False, "Admins can only create employees"

    return True, ""


def can_change_role(
    requester: AppRole | None,
    current_role: AppRole | None,
    new_role: AppRole,
) -> tuple[bool, str]:
    """Check if requester may move a target from `current_role` to `new_role`.

    Returns:
        Tuple of (can_modify, reason)
    """
    if not has_permission(requester, Permissions.USERS_UPDATE_ROLE):
        return False, "Only super admin can change roles"

    if new_role == AppRole.SUPER_ADMIN:
        return False, "Cannot assign super_admin role"

    if current_role == AppRole.SUPER_ADMIN:
        return False, "Cannot change super_admin role"

    return True, ""


def can_delete_user(
    requester: AppRole | None,
    requester_id: str,
    target_id: str,
    target_role: AppRole | None,
) -> tuple[bool, str]:
    """Check if requester may delete the target identity.

    Returns:
        Tuple of (can_delete, reason)
    """
    if not has_permission(requester, Permissions.USERS_DELETE):
        return False, "Only super admin can delete users"

    if target_id == requester_id:
        return False, "Cannot delete yourself"

    if target_role == AppRole.SUPER_ADMIN:
        return False, "Cannot delete super_admin"

    return True, ""
