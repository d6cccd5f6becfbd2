from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, InvalidHashError, VerificationError
from sqlmodel import Session, select
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.exceptions import StoreError
from database.models import Identity, Profile, UserPermission, UserRole
from utils.clock import utc_now
from utils.logger import get_logger

logger = get_logger(__name__)

DUPLICATE_EMAIL_MESSAGE = "A user with this email address has already been registered"

password_hasher = PasswordHasher()


def normalize_email(email: str) -> str:
    return email.strip().lower()


def hash_password(password: str) -> str:
    return password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return password_hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def get_identity(session: Session, identity_id: str) -> Optional[Identity]:
    """Find identity by ID."""
    return session.get(Identity, identity_id)


def get_identity_by_email(session: Session, email: str) -> Optional[Identity]:
    """Find identity by email (case-insensitive)."""
    return session.exec(
        select(Identity).where(Identity.email == normalize_email(email))
    ).first()


def create_identity(
    session: Session,
    email: str,
    password: str,
    user_metadata: Optional[dict] = None,
) -> Identity:
    """Create a confirmed identity.

    Email uniqueness is enforced by the unique index; a concurrent create for
    the same address fails at commit with the same message.
    """
    if get_identity_by_email(session, email):
        raise StoreError(DUPLICATE_EMAIL_MESSAGE)

    now = utc_now()
    identity = Identity(
        email=normalize_email(email),
        password_hash=hash_password(password),
        user_metadata=user_metadata or {},
        email_confirmed_at=now,
        created_at=now,
        updated_at=now,
    )
    session.add(identity)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise StoreError(DUPLICATE_EMAIL_MESSAGE) from exc
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error(f"Create identity error: {exc}")
        raise StoreError("Failed to create user") from exc
    session.refresh(identity)
    return identity


def delete_identity(session: Session, identity_id: str) -> None:
    """Delete an identity together with its profiles, role assignments and page grants."""
    identity = session.get(Identity, identity_id)
    if identity is None:
        raise StoreError("User not found")

    try:
        session.execute(delete(UserRole).where(UserRole.user_id == identity_id))
        profile_ids = select(Profile.id).where(Profile.user_id == identity_id)
        session.execute(delete(UserPermission).where(UserPermission.profile_id.in_(profile_ids)))
        session.execute(delete(Profile).where(Profile.user_id == identity_id))
        session.execute(delete(Identity).where(Identity.id == identity_id))
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error(f"Delete identity error: {exc}")
        raise StoreError("Failed to delete user") from exc


def authenticate(session: Session, email: str, password: str) -> Optional[Identity]:
    """Check email and password. Returns the identity or None."""
    identity = get_identity_by_email(session, email)
    if identity is None or not verify_password(password, identity.password_hash):
        return None

    identity.last_sign_in_at = utc_now()
    session.add(identity)
    session.commit()
    session.refresh(identity)
    return identity


def get_primary_profile(session: Session, identity_id: str) -> Optional[Profile]:
    """Find the profile that defines an identity's company."""
    return session.exec(
        select(Profile).where(Profile.user_id == identity_id).order_by(Profile.created_at)
    ).first()


def get_role_in_company(session: Session, identity_id: str, company_id: str) -> Optional[UserRole]:
    """Find an identity's role assignment in a company."""
    return session.exec(
        select(UserRole).where(UserRole.user_id == identity_id, UserRole.company_id == company_id)
    ).first()
