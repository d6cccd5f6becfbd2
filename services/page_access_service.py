"""Per-member dashboard page grants, scoped to the caller's company."""
from sqlmodel import Session

from api.user import crud
from auth.dependencies import CallerContext
from auth.service import get_role_in_company
from core.exceptions import ConflictError, NotFoundError, StoreError, ValidationError
from core.page_access import PAGE_KEYS, find_unknown_pages, resolve_pages
from database.models import AppRole, Profile
from utils.logger import get_logger

logger = get_logger(__name__)


def _in_catalogue_order(keys: list[str]) -> list[str]:
    return sorted(set(keys), key=PAGE_KEYS.index)


def _company_profile(session: Session, caller: CallerContext, profile_id: str) -> Profile:
    profile = crud.get_profile(session, profile_id, caller.company_id)
    if profile is None:
        raise NotFoundError()
    return profile


def _describe(session: Session, profile: Profile, granted: list[str]) -> dict:
    user_role = get_role_in_company(session, profile.user_id, profile.company_id)
    role = AppRole(user_role.role) if user_role else None
    granted = _in_catalogue_order(granted)
    return {
        "profile_id": profile.id,
        "permissions": granted,
        "effective": resolve_pages(role, granted),
        "custom": bool(granted),
    }


def get_page_access(session: Session, caller: CallerContext, profile_id: str) -> dict:
    profile = _company_profile(session, caller, profile_id)
    granted = crud.get_user_permissions(session, profile.id, caller.company_id)
    return _describe(session, profile, granted)


def replace_page_access(session: Session, caller: CallerContext, profile_id: str, permissions: list[str]) -> dict:
    """Replace a member's page grants. Unknown page keys are rejected before anything is written."""
    unknown = find_unknown_pages(permissions)
    if unknown:
        raise ValidationError("Validation failed", details=f"permissions: unknown page {', '.join(unknown)}")

    profile = _company_profile(session, caller, profile_id)
    try:
        granted = crud.replace_user_permissions(
            session, profile.id, caller.company_id, _in_catalogue_order(permissions)
        )
    except StoreError as exc:
        raise ConflictError(exc.message)

    logger.info(f"Page access of {profile.id} set to {granted} by {caller.identity_id}")
    return _describe(session, profile, granted)


def get_my_pages(session: Session, caller: CallerContext) -> list[str]:
    """Pages the caller may open."""
    granted = crud.get_user_permissions(session, caller.profile_id, caller.company_id)
    return resolve_pages(caller.role, _in_catalogue_order(granted))
