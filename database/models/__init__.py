from database.models.identity import Identity
from database.models.company import Company
from database.models.profile import Profile
from database.models.role import AppRole, UserRole, ROLE_RANK
from database.models.user_permission import UserPermission

__all__ = [
    "Identity",
    "Company",
    "Profile",
    "AppRole",
    "UserRole",
    "ROLE_RANK",
    "UserPermission",
]
