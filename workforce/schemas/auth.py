"""Login and token schemas."""

from pydantic import BaseModel, Field, field_validator

from shared.validators import normalize_username


class Token(BaseModel):
    """Access/refresh token pair issued at login and on refresh."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class UserLogin(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def normalize(cls, v: str) -> str:
        # stored usernames are lowercase, so " Agent " must find "agent"
        return normalize_username(v)


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)
