"""
Bootstrap seeding: a company and its first super admin.
Run this after database tables are created:

    python -m database.seed

Reads SEED_COMPANY_NAME, SEED_ADMIN_EMAIL, SEED_ADMIN_PASSWORD and
SEED_ADMIN_NAME. Running it again is harmless.
"""
from sqlmodel import Session, select

from api.user import crud
from auth.service import create_identity, get_identity_by_email
from config.settings import (
    SEED_COMPANY_NAME,
    SEED_ADMIN_EMAIL,
    SEED_ADMIN_PASSWORD,
    SEED_ADMIN_NAME,
)
from database.connection import engine, create_db_and_tables
from database.models import AppRole, Company
from utils.logger import get_logger
from utils.text import sanitize_name

logger = get_logger(__name__)


def get_or_create_company(session: Session, name: str) -> Company:
    """Get a company by name, creating it if missing."""
    company = session.exec(select(Company).where(Company.name == name)).first()
    if company:
        return company

    company = Company(name=name)
    session.add(company)
    session.commit()
    session.refresh(company)
    logger.info(f"Company created: {company.name} ({company.id})")
    return company


def seed_super_admin(
    session: Session,
    company_name: str,
    email: str,
    password: str,
    full_name: str,
) -> str:
    """Make sure `email` exists as super admin of `company_name`. Returns the identity ID."""
    company = get_or_create_company(session, company_name)
    full_name = sanitize_name(full_name)

    identity = get_identity_by_email(session, email)
    if identity is None:
        identity = create_identity(
            session,
            email=email,
            password=password,
            user_metadata={"full_name": full_name, "full_name_ar": None},
        )
        logger.info(f"Identity created for {identity.email}")

    if crud.get_profile_by_user(session, identity.id, company.id) is None:
        crud.upsert_profile(session, identity.id, company.id, full_name=full_name)

    user_role = crud.get_user_role(session, identity.id, company.id)
    if user_role is None:
        crud.create_user_role(session, identity.id, company.id, AppRole.SUPER_ADMIN)
    elif user_role.role != AppRole.SUPER_ADMIN.value:
        crud.update_user_role(session, user_role, AppRole.SUPER_ADMIN)

    return identity.id


def seed_database():
    """Seed the bootstrap company and super admin from the environment."""
    if not SEED_ADMIN_EMAIL or not SEED_ADMIN_PASSWORD:
        raise ValueError("SEED_ADMIN_EMAIL and SEED_ADMIN_PASSWORD must be set")

    create_db_and_tables()
    with Session(engine) as session:
        identity_id = seed_super_admin(
            session,
            company_name=SEED_COMPANY_NAME,
            email=SEED_ADMIN_EMAIL,
            password=SEED_ADMIN_PASSWORD,
            full_name=SEED_ADMIN_NAME,
        )
    logger.info(f"Database seeded successfully! Super admin: {identity_id}")


if __name__ == "__main__":
    seed_database()
