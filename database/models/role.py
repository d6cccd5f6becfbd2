import uuid
from datetime import datetime
from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from enum import Enum

from utils.clock import utc_now


class AppRole(str, Enum):
    EMPLOYEE = "employee"        # Company member, no administration rights
    ADMIN = "admin"              # Manages employees of own company
    SUPER_ADMIN = "super_admin"  # Company owner, manages everyone but other super admins

    @property
    def rank(self) -> int:
        """Privilege order: employee < admin < super_admin."""
        return ROLE_RANK[self]


ROLE_RANK = {
    AppRole.EMPLOYEE: 0,
    AppRole.ADMIN: 1,
    AppRole.SUPER_ADMIN: 2,
}


class UserRole(SQLModel, table=True):
    """Role assignment of an identity inside one company."""
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "company_id", name="uq_user_roles_user_company"),)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="identities.id", index=True)
    company_id: str = Field(foreign_key="companies.id", index=True)
    role: str = Field(index=True, max_length=20)  # Store as string, not enum
    created_at: datetime = Field(default_factory=utc_now)
