"""Authentication routes."""

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select

from workforce.api.dependencies import CurrentUser, DBSession
from workforce.core.security import REFRESH_TOKEN, decode_token, issue_token_pair, verify_password
from workforce.models.user import User
from workforce.schemas.auth import RefreshTokenRequest, Token, UserLogin
from workforce.schemas.user import UserResponse

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_tokens(user: User) -> dict:
    return issue_token_pair(user.id, user.username, user.role)


@router.post("/login", response_model=Token)
async def login(login_data: UserLogin, db: DBSession):
    """
    Authenticates a user and issues a token pair.

    The access token authorizes requests (`Authorization: Bearer <token>`);
    the refresh token obtains a new pair once the access token expires.

    Parameters:
    - **login_data** (UserLogin): JSON with `username` and `password`.

    Returns:
    - **access_token**, **refresh_token**, **token_type** ("bearer"),
      **expires_in** (access token lifetime in seconds).

    Errors:
    - **401 Unauthorized**: Wrong credentials or inactive account.
    """
    user = db.scalars(select(User).where(User.username == login_data.username)).first()
    if user is None or not user.is_active or not verify_password(login_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _issue_tokens(user)


@router.post("/refresh", response_model=Token)
async def refresh_token(data: RefreshTokenRequest, db: DBSession):
    """
    Exchanges a refresh token for a new token pair.

    Errors:
    - **401 Unauthorized**: Invalid or expired refresh token.
    """
    payload = decode_token(data.refresh_token, expected_type=REFRESH_TOKEN)
    user = db.get(User, int(payload["sub"])) if payload and payload.get("sub") else None
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _issue_tokens(user)


@router.get("/user", response_model=UserResponse)
@router.get("/me", response_model=UserResponse, include_in_schema=False)
async def get_me(current_user: CurrentUser):
    """Returns the authenticated user."""
    return current_user
