import os

# Keep the app off any real database or secret while tests import it
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from dataclasses import dataclass
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session, create_engine, select
from sqlalchemy.pool import StaticPool

from main import app
from auth.service import hash_password
from auth.token import create_access_token
from database.connection import get_session
from database.models import Company, Identity, Profile, UserRole

DEFAULT_PASSWORD = "password1"
DEFAULT_PASSWORD_HASH = hash_password(DEFAULT_PASSWORD)


@dataclass
class Member:
    identity_id: str
    profile_id: str
    email: str
    company_id: str
    role: Optional[str]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def server_error_client(client):
    """Like `client`, but unhandled errors come back as responses instead of raising."""
    return TestClient(app, raise_server_exceptions=False)


def add_company(engine, name: str) -> str:
    with Session(engine) as session:
        company = Company(name=name)
        session.add(company)
        session.commit()
        return company.id


def add_member(
    engine,
    company_id: str,
    role: Optional[str],
    email: str,
    full_name: str = "Test User",
    is_active: bool = True,
) -> Member:
    with Session(engine) as session:
        identity = Identity(email=email, password_hash=DEFAULT_PASSWORD_HASH, user_metadata={})
        session.add(identity)
        session.flush()
        profile = Profile(user_id=identity.id, company_id=company_id, full_name=full_name, is_active=is_active)
        session.add(profile)
        if role:
            session.add(UserRole(user_id=identity.id, company_id=company_id, role=role))
        session.commit()
        return Member(identity.id, profile.id, email, company_id, role)


def auth_headers(member: Member) -> dict:
    token, _ = create_access_token(member.identity_id, member.email)
    return {"Authorization": f"Bearer {token}"}


def role_of(engine, identity_id: str, company_id: str) -> Optional[str]:
    with Session(engine) as session:
        user_role = session.exec(
            select(UserRole).where(UserRole.user_id == identity_id, UserRole.company_id == company_id)
        ).first()
        return user_role.role if user_role else None


def identity_by_email(engine, email: str) -> Optional[Identity]:
    with Session(engine) as session:
        return session.exec(select(Identity).where(Identity.email == email)).first()


@pytest.fixture
def company_id(engine):
    return add_company(engine, "Tenant T")


@pytest.fixture
def other_company_id(engine):
    return add_company(engine, "Tenant U")


@pytest.fixture
def super_admin(engine, company_id):
    return add_member(engine, company_id, "super_admin", "owner@acme.com", "Owner")


@pytest.fixture
def admin(engine, company_id):
    return add_member(engine, company_id, "admin", "admin@acme.com", "Admin")


@pytest.fixture
def employee(engine, company_id):
    return add_member(engine, company_id, "employee", "employee@acme.com", "Employee")


@pytest.fixture
def outsider(engine, other_company_id):
    return add_member(engine, other_company_id, "employee", "someone@other.com", "Outsider")
