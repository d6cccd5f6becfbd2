from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from auth.service import get_identity, get_primary_profile, get_role_in_company
from auth.token import extract_claims
from core.exceptions import AuthenticationError, AuthorizationError
from core.permissions import Permissions, get_role_permissions, has_permission
from database.connection import get_session
from database.models import AppRole, Identity


security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CallerContext:
    """Who is calling, resolved from the store on every request.

    Company and role are never taken from the request payload.
    """
    identity_id: str
    email: str
    profile_id: str
    company_id: str
    role: Optional[AppRole]

    @property
    def effective_role(self) -> AppRole:
        """Members without a role assignment act as employees."""
        return self.role or AppRole.EMPLOYEE

    @property
    def permissions(self) -> list[str]:
        return get_role_permissions(self.effective_role)


def get_token_from_request(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """Extract the bearer token from the Authorization header."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("No authorization header")
    return credentials.credentials


def get_current_identity(
    token: str = Depends(get_token_from_request),
    session: Session = Depends(get_session),
) -> Identity:
    """Verify the caller's credential and load its identity."""
    claims = extract_claims(token)
    identity = get_identity(session, claims.identity_id)
    if identity is None:
        raise AuthenticationError("Unauthorized")
    return identity


def resolve_caller(session: Session, identity: Identity) -> CallerContext:
    """Resolve the caller's company (from their own profile) and role in it."""
    profile = get_primary_profile(session, identity.id)
    if profile is None or not profile.company_id:
        raise AuthorizationError("User has no company")

    if not profile.is_active:
        raise AuthorizationError("User account is deactivated")

    user_role = get_role_in_company(session, identity.id, profile.company_id)

    return CallerContext(
        identity_id=identity.id,
        email=identity.email,
        profile_id=profile.id,
        company_id=profile.company_id,
        role=AppRole(user_role.role) if user_role else None,
    )


def get_caller_context(
    identity: Identity = Depends(get_current_identity),
    session: Session = Depends(get_session),
) -> CallerContext:
    return resolve_caller(session, identity)


class PermissionChecker:
    """Dependency class for checking caller permissions."""

    def __init__(self, required_permission: Permissions):
        self.required_permission = required_permission

    def __call__(self, caller: CallerContext = Depends(get_caller_context)) -> CallerContext:
        if not has_permission(caller.effective_role, self.required_permission):
            raise AuthorizationError(f"Permission denied: {self.required_permission.value} required")
        return caller


def require_permission(permission: Permissions):
    """Factory function to create permission dependency."""
    return PermissionChecker(permission)
