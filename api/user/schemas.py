from typing import Annotated, Literal, Optional, Union
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StrictBool,
    StringConstraints,
    TypeAdapter,
    field_validator,
)
from pydantic.alias_generators import to_camel


EMAIL_MAX_LENGTH = 255
PHONE_PATTERN = r"^[0-9+\-\s()]+$"

Password = Annotated[str, StringConstraints(min_length=8, max_length=72)]
FullName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
FullNameAr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]
Department = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]
Phone = Annotated[str, StringConstraints(strip_whitespace=True, max_length=20, pattern=PHONE_PATTERN)]
AssignableRole = Literal["admin", "employee"]


class ActionRequest(BaseModel):
    """Base for every user administration action. Wire names are camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProfileFieldsMixin(BaseModel):
    @field_validator("full_name_ar", "department", "phone", mode="before", check_fields=False)
    @classmethod
    def blank_as_missing(cls, value):
        # An empty optional field means "not provided", never "clear it"
        if isinstance(value, str) and not value.strip():
            return None
        return value


class CreateUserRequest(ActionRequest, ProfileFieldsMixin):
    action: Literal["create"]
    email: EmailStr
    password: Password
    full_name: FullName
    full_name_ar: Optional[FullNameAr] = None
    role: AssignableRole
    department: Optional[Department] = None
    phone: Optional[Phone] = None

    @field_validator("email", mode="before")
    @classmethod
    def email_length(cls, value):
        if isinstance(value, str) and len(value) > EMAIL_MAX_LENGTH:
            raise ValueError(f"Email must be at most {EMAIL_MAX_LENGTH} characters")
        return value


class UpdateRoleRequest(ActionRequest):
    action: Literal["updateRole"]
    user_id: UUID
    new_role: AssignableRole


class ToggleActiveRequest(ActionRequest):
    action: Literal["toggleActive"]
    profile_id: UUID
    is_active: StrictBool


class DeleteUserRequest(ActionRequest):
    action: Literal["delete"]
    user_id: UUID
    profile_id: UUID


class UpdateProfileRequest(ActionRequest, ProfileFieldsMixin):
    action: Literal["updateProfile"]
    profile_id: UUID
    full_name: Optional[FullName] = None
    full_name_ar: Optional[FullNameAr] = None
    department: Optional[Department] = None
    phone: Optional[Phone] = None


ManageUserRequest = Annotated[
    Union[
        CreateUserRequest,
        UpdateRoleRequest,
        ToggleActiveRequest,
        DeleteUserRequest,
        UpdateProfileRequest,
    ],
    Field(discriminator="action"),
]

manage_user_request_adapter = TypeAdapter(ManageUserRequest)

# Pydantic error types raised when `action` is missing or not one of the variants
INVALID_ACTION_ERROR_TYPES = {"union_tag_invalid", "union_tag_not_found", "model_attributes_type"}


def describe_errors(errors: list[dict], skip: int = 0) -> str:
    """Flatten pydantic errors into "field: message; field: message".

    `skip` drops leading location parts that are not field names
    (the union tag, or "body" for request validation errors).
    """
    messages = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ())[skip:]]
        field = ".".join(location)
        message = error.get("msg", "Invalid value")
        messages.append(f"{field}: {message}" if field else message)
    return "; ".join(messages)


class ManageUserResponse(BaseModel):
    success: bool = True
    user_id: Optional[str] = Field(default=None, serialization_alias="userId")


class UserWithRole(BaseModel):
    id: str
    user_id: str
    full_name: str
    full_name_ar: Optional[str]
    phone: Optional[str]
    department: Optional[str]
    is_active: bool
    avatar_url: Optional[str]
    role: str

    class Config:
        from_attributes = True


class UserListResponse(BaseModel):
    users: list[UserWithRole]
    total: int


class PageAccessUpdate(BaseModel):
    """Full replacement of a member's page grants. An empty list restores role defaults."""
    permissions: list[Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]]


class PageAccessResponse(BaseModel):
    profile_id: str
    permissions: list[str]  # Stored grants, in catalogue order
    effective: list[str]    # What the member actually sees
    custom: bool
