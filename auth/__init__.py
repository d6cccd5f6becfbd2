from auth.dependencies import (
    CallerContext,
    get_current_identity,
    get_caller_context,
    resolve_caller,
    require_permission,
)
from auth.service import authenticate, create_identity, delete_identity, get_identity
from auth.token import create_access_token, decode_token, extract_claims

__all__ = [
    "CallerContext",
    "get_current_identity",
    "get_caller_context",
    "resolve_caller",
    "require_permission",
    "authenticate",
    "create_identity",
    "delete_identity",
    "get_identity",
    "create_access_token",
    "decode_token",
    "extract_claims",
]
