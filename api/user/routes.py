from fastapi import APIRouter, Body, Depends
from sqlmodel import Session

from database.connection import get_session
from api.user import crud
from api.user.schemas import PageAccessResponse, PageAccessUpdate, UserListResponse
from auth.dependencies import CallerContext, get_caller_context, require_permission
from core.exceptions import AppError, InternalError
from core.permissions import Permissions
from services import page_access_service, user_admin_service
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=UserListResponse)
def list_users(
    caller: CallerContext = Depends(require_permission(Permissions.USERS_READ)),
    session: Session = Depends(get_session),
):
    """List every user of the caller's company with their role."""
    users = crud.get_company_users(session, caller.company_id)
    return UserListResponse(users=users, total=len(users))


@router.post("/manage")
def manage_users(
    payload: dict = Body(...),
    caller: CallerContext = Depends(get_caller_context),
    session: Session = Depends(get_session),
):
    """Run one user administration action (create, updateRole, toggleActive, delete, updateProfile).

    The body is validated inside the service so that the role gate runs first.
    """
    try:
        return user_admin_service.manage_users(session, caller, payload)
    except AppError:
        raise
    except Exception as exc:
        logger.exception(f"Manage users failed for caller {caller.identity_id}")
        raise InternalError(str(exc))


@router.get("/{profile_id}/permissions", response_model=PageAccessResponse)
def get_page_access(
    profile_id: str,
    caller: CallerContext = Depends(require_permission(Permissions.USERS_MANAGE_ACCESS)),
    session: Session = Depends(get_session),
):
    """Get the dashboard pages granted to a member of the caller's company."""
    return page_access_service.get_page_access(session, caller, profile_id)


@router.put("/{profile_id}/permissions", response_model=PageAccessResponse)
def replace_page_access(
    profile_id: str,
    data: PageAccessUpdate,
    caller: CallerContext = Depends(require_permission(Permissions.USERS_MANAGE_ACCESS)),
    session: Session = Depends(get_session),
):
    """Replace a member's dashboard pages. An empty list falls back to the role defaults."""
    return page_access_service.replace_page_access(session, caller, profile_id, data.permissions)
