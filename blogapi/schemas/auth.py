"""Authentication request and response schemas."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from blogapi.auth.identity import Role


class LoginRequest(BaseModel):
    """Credentials for the standard and the admin login."""

    email: EmailStr = Field(..., examples=["ada@example.com"])
    password: str = Field(..., min_length=1, examples=["correct horse"])


class RoleGrantRequest(BaseModel):
    """Target of a role elevation."""

    email: EmailStr = Field(..., examples=["ada@example.com"])


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class UserProfile(BaseModel):
    """Public view of the current user."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    user_id: UUID = Field(serialization_alias="userId")
    username: str
    email: str
    profile_picture: str | None = Field(default=None, serialization_alias="profilePicture")
    roles: list[Role] = Field(default_factory=list)
