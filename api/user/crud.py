from typing import Optional
from sqlmodel import Session, select
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import StoreError
from database.models import Profile, UserPermission, UserRole, AppRole
from utils.clock import utc_now
from utils.logger import get_logger

logger = get_logger(__name__)


def get_profile(session: Session, profile_id: str, company_id: str) -> Optional[Profile]:
    """Get a profile by ID, only if it belongs to the company."""
    return session.exec(
        select(Profile).where(Profile.id == profile_id, Profile.company_id == company_id)
    ).first()


def get_profile_by_user(session: Session, user_id: str, company_id: Optional[str] = None) -> Optional[Profile]:
    """Get the profile of an identity, optionally restricted to one company."""
    query = select(Profile).where(Profile.user_id == user_id)
    if company_id:
        query = query.where(Profile.company_id == company_id)
    return session.exec(query.order_by(Profile.created_at)).first()


def get_profiles_by_company(session: Session, company_id: str) -> list[Profile]:
    """Get all profiles in a company."""
    return list(session.exec(
        select(Profile).where(Profile.company_id == company_id).order_by(Profile.created_at)
    ).all())


def get_user_role(session: Session, user_id: str, company_id: str) -> Optional[UserRole]:
    """Get the role assignment of an identity inside a company."""
    return session.exec(
        select(UserRole).where(UserRole.user_id == user_id, UserRole.company_id == company_id)
    ).first()


def get_roles_by_company(session: Session, company_id: str) -> dict[str, str]:
    """Map user_id -> role name for every assignment in a company."""
    roles = session.exec(select(UserRole).where(UserRole.company_id == company_id)).all()
    return {role.user_id: role.role for role in roles}


def _commit(session: Session, failure_message: str) -> None:
    try:
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error(f"{failure_message}: {exc}")
        raise StoreError(failure_message) from exc


def upsert_profile(
    session: Session,
    user_id: str,
    company_id: str,
    full_name: str,
    full_name_ar: Optional[str] = None,
    department: Optional[str] = None,
    phone: Optional[str] = None,
) -> Profile:
    """Create the profile of an identity in a company, or update the existing one."""
    profile = get_profile_by_user(session, user_id, company_id)
    now = utc_now()
    if profile is None:
        profile = Profile(user_id=user_id, company_id=company_id, created_at=now)

    profile.full_name = full_name
    profile.full_name_ar = full_name_ar
    profile.department = department
    profile.phone = phone
    profile.is_active = True
    profile.updated_at = now
    session.add(profile)
    _commit(session, "Failed to create profile")
    session.refresh(profile)
    return profile


def create_user_role(session: Session, user_id: str, company_id: str, role: AppRole) -> UserRole:
    """Insert a role assignment. Fails if the identity already has one in the company."""
    user_role = UserRole(user_id=user_id, company_id=company_id, role=role.value)
    session.add(user_role)
    _commit(session, "Failed to assign role")
    session.refresh(user_role)
    return user_role


def update_user_role(session: Session, user_role: UserRole, role: AppRole) -> UserRole:
    """Update the role of an existing assignment."""
    user_role.role = role.value
    session.add(user_role)
    _commit(session, "Failed to update role")
    session.refresh(user_role)
    return user_role


def update_profile_status(session: Session, profile: Profile, is_active: bool) -> Profile:
    """Update a profile's active flag."""
    profile.is_active = is_active
    profile.updated_at = utc_now()
    session.add(profile)
    _commit(session, "Failed to update user status")
    session.refresh(profile)
    return profile


def update_profile(session: Session, profile: Profile, changes: dict) -> Profile:
    """Apply a partial update. Only keys present in `changes` are written."""
    for key, value in changes.items():
        setattr(profile, key, value)
    profile.updated_at = utc_now()
    session.add(profile)
    _commit(session, "Failed to update profile")
    session.refresh(profile)
    return profile


def get_company_users(session: Session, company_id: str) -> list[dict]:
    """Get every profile in a company with its role. Missing roles read as employee."""
    profiles = get_profiles_by_company(session, company_id)
    roles = get_roles_by_company(session, company_id)

    return [
        {
            "id": profile.id,
            "user_id": profile.user_id,
            "full_name": profile.full_name,
            "full_name_ar": profile.full_name_ar,
            "phone": profile.phone,
            "department": profile.department,
            "is_active": profile.is_active,
            "avatar_url": profile.avatar_url,
            "role": roles.get(profile.user_id, AppRole.EMPLOYEE.value),
        }
        for profile in profiles
    ]


def get_user_permissions(session: Session, profile_id: str, company_id: str) -> list[str]:
    """Get the page keys granted to a profile in a company."""
    rows = session.exec(
        select(UserPermission)
        .where(UserPermission.profile_id == profile_id, UserPermission.company_id == company_id)
        .order_by(UserPermission.permission)
    ).all()
    return [row.permission for row in rows]


def replace_user_permissions(
    session: Session,
    profile_id: str,
    company_id: str,
    permissions: list[str],
) -> list[str]:
    """Replace every page grant of a profile in a company. Delete and insert commit together."""
    try:
        session.execute(
            delete(UserPermission).where(
                UserPermission.profile_id == profile_id,
                UserPermission.company_id == company_id,
            )
        )
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error(f"Failed to update permissions: {exc}")
        raise StoreError("Failed to update permissions") from exc

    for permission in permissions:
        session.add(UserPermission(profile_id=profile_id, company_id=company_id, permission=permission))
    _commit(session, "Failed to update permissions")
    return get_user_permissions(session, profile_id, company_id)
