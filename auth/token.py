from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import jwt, JWTError, ExpiredSignatureError

from config.auth_settings import (
    JWT_SECRET,
    JWT_ALGORITHM,
    JWT_AUDIENCE,
    ACCESS_TOKEN_EXPIRE_MINUTES,
)
from core.exceptions import AuthenticationError


@dataclass
class TokenClaims:
    identity_id: str
    email: str | None
    role: str | None
    expires_at: datetime | None


def create_access_token(identity_id: str, email: str, expires_minutes: int | None = None) -> tuple[str, int]:
    """Issue a signed access token for an identity.

    Returns:
        Tuple of (token, lifetime in seconds)
    """
    lifetime = timedelta(minutes=expires_minutes or ACCESS_TOKEN_EXPIRE_MINUTES)
    now = datetime.now(timezone.utc)
    payload = {
        "sub": identity_id,
        "email": email,
        "role": "authenticated",
        "aud": JWT_AUDIENCE,
        "iat": now,
        "exp": now + lifetime,
    }
    token = jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)
    return token, int(lifetime.total_seconds())


def decode_token(token: str) -> dict:
    """Decode and verify a JWT (signature, audience, expiry)."""
    try:
        return jwt.decode(
            token,
            JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
        )
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except JWTError:
        raise AuthenticationError("Invalid authentication credentials")


def extract_claims(token: str) -> TokenClaims:
    """Extract caller claims from an access token.

    Claims used:
    - sub: identity ID (required)
    - email: sign-in email
    - role: always "authenticated" for user tokens
    - exp: expiry timestamp
    """
    payload = decode_token(token)

    identity_id = payload.get("sub")
    if not identity_id:
        raise AuthenticationError("Invalid token: missing subject")

    expires_at = payload.get("exp")
    return TokenClaims(
        identity_id=identity_id,
        email=payload.get("email"),
        role=payload.get("role"),
        expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc) if expires_at else None,
    )
