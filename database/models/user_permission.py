import uuid
from datetime import datetime
from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint

from utils.clock import utc_now


class UserPermission(SQLModel, table=True):
    """One dashboard page granted to a member inside one company."""
    __tablename__ = "user_permissions"
    __table_args__ = (
        UniqueConstraint("profile_id", "company_id", "permission", name="uq_user_permissions_profile_page"),
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    profile_id: str = Field(foreign_key="profiles.id", index=True)
    company_id: str = Field(foreign_key="companies.id", index=True)
    permission: str = Field(max_length=50)  # Page key, see core.page_access
    created_at: datetime = Field(default_factory=utc_now)
