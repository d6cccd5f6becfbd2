import uuid
from datetime import datetime
from sqlmodel import SQLModel, Field

from utils.clock import utc_now


class Company(SQLModel, table=True):
    """Tenant boundary. Every profile and role assignment belongs to one company."""
    __tablename__ = "companies"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str = Field(index=True, max_length=255)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
