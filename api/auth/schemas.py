from pydantic import BaseModel
from typing import Optional


class TokenRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class ProfileSummary(BaseModel):
    id: str
    full_name: str
    full_name_ar: Optional[str]
    department: Optional[str]
    phone: Optional[str]
    avatar_url: Optional[str]
    is_active: bool

    class Config:
        from_attributes = True


class CompanySummary(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True


class MeResponse(BaseModel):
    id: str
    email: str
    profile: ProfileSummary
    company: Optional[CompanySummary]
    role: Optional[str]
    permissions: list[str]
    pages: list[str]
