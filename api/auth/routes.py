from fastapi import APIRouter, Depends
from sqlmodel import Session

from database.connection import get_session
from database.models import AppRole, Company, Identity, Profile
from api.auth.schemas import TokenRequest, TokenResponse, MeResponse, ProfileSummary, CompanySummary
from auth.dependencies import CallerContext, get_current_identity, resolve_caller
from auth.service import authenticate
from auth.token import create_access_token
from core.exceptions import AuthenticationError
from core.page_access import PAGE_CATEGORIES, get_pages_by_category
from core.permissions import PERMISSION_DEFINITIONS
from services import page_access_service
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/token", response_model=TokenResponse)
def issue_token(data: TokenRequest, session: Session = Depends(get_session)):
    """Sign in with email and password and receive a bearer token."""
    identity = authenticate(session, data.email, data.password)
    if identity is None:
        raise AuthenticationError("Invalid login credentials")

    # Members without a company or with a deactivated profile cannot sign in
    resolve_caller(session, identity)

    token, expires_in = create_access_token(identity.id, identity.email)
    logger.info(f"Issued access token for {identity.id}")
    return TokenResponse(access_token=token, expires_in=expires_in)


@router.get("/me", response_model=MeResponse)
def get_me(
    identity: Identity = Depends(get_current_identity),
    session: Session = Depends(get_session),
):
    """Get the caller with profile, company, role and permissions."""
    caller: CallerContext = resolve_caller(session, identity)
    profile = session.get(Profile, caller.profile_id)
    company = session.get(Company, caller.company_id)

    return MeResponse(
        id=identity.id,
        email=identity.email,
        profile=ProfileSummary.model_validate(profile),
        company=CompanySummary.model_validate(company) if company else None,
        role=caller.role.value if caller.role else None,
        permissions=caller.permissions,
        pages=page_access_service.get_my_pages(session, caller),
    )


@router.get("/permissions")
def get_all_permissions():
    """Get all available permissions for frontend."""
    return {"permissions": PERMISSION_DEFINITIONS}


@router.get("/pages")
def get_page_catalogue():
    """Get the dashboard page catalogue, grouped by category."""
    return {"categories": PAGE_CATEGORIES, "pages": get_pages_by_category()}


def format_role_label(role_name: str) -> str:
    """Convert role name to display label."""
    return role_name.replace("_", " ").title()


@router.get("/roles")
def get_all_roles():
    """Get all roles, lowest privilege first."""
    return {
        "roles": [
            {
                "name": role.value,
                "label": format_role_label(role.value),
                "rank": role.rank,
            }
            for role in sorted(AppRole, key=lambda r: r.rank)
        ]
    }
