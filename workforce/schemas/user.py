"""Pydantic schemas for users."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.enums import UserRole
from shared.validators import normalize_username, validate_password_strength


class UserBase(BaseModel):
    """Fields shared by user create and update."""

    email: str | None = Field(None, max_length=255, description="Email")
    first_name: str | None = Field(None, max_length=100, description="First name")
    last_name: str | None = Field(None, max_length=100, description="Last name")
    profile_image_url: str | None = Field(None, max_length=500)
    department_id: int | None = Field(None, description="Home department")
    reports_to: int | None = Field(None, description="Direct manager")


class UserCreate(UserBase):
    """Schema for creating a user."""

    username: str = Field(..., min_length=3, max_length=100, description="Login name")
    password: str = Field(..., description="Plain password, hashed before storage")
    role: UserRole = Field(default=UserRole.AGENT)
    is_active: bool = True

    @field_validator("username")
    @classmethod
    def clean_username(cls, v: str) -> str:
        return normalize_username(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_password_strength(v)


class UserUpdate(UserBase):
    """Schema for a partial user update. All fields are optional."""

    username: str | None = Field(None, min_length=3, max_length=100)
    password: str | None = None
    role: UserRole | None = None
    is_active: bool | None = None

    @field_validator("username")
    @classmethod
    def clean_username(cls, v: str | None) -> str | None:
        return normalize_username(v) if v is not None else v

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str | None) -> str | None:
        return validate_password_strength(v) if v is not None else v


class RoleUpdate(BaseModel):
    """Change a user's role."""
    role: UserRole


class StatusUpdate(BaseModel):
    """Activate or deactivate a user."""
    is_active: bool


class ReassignTeamLeaderRequest(BaseModel):
    """Move an agent to another team leader."""
    team_leader_id: int


class UserResponse(BaseModel):
    """Full user record, visible to admins."""

    id: int
    username: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    role: str
    department_id: int | None = None
    reports_to: int | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class SafeUserResponse(BaseModel):
    """Restricted user record for non-admin readers."""

    id: int
    username: str
    first_name: str | None = None
    last_name: str | None = None
    role: str
    department_id: int | None = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)
