import uuid
from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON

from utils.clock import utc_now


class Identity(SQLModel, table=True):
    """Authentication principal. Profiles and role assignments hang off it."""
    __tablename__ = "identities"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)  # Stored lower-cased
    password_hash: str = Field(max_length=255)
    user_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    # e.g., {"full_name": "Ann", "full_name_ar": null}
    email_confirmed_at: Optional[datetime] = Field(default=None)
    last_sign_in_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
