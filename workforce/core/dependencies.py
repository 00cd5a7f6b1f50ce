"""Bearer-token authentication and role gates for the API routers."""

from collections.abc import Collection

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from workforce.core.database import get_db
from workforce.core.security import decode_token
from workforce.models.user import User
from shared.constants import (
    ASSET_MANAGER_ROLES,
    ASSET_OVERSIGHT_ROLES,
    HR_ADMIN_ROLES,
    PEOPLE_OPS_ROLES,
    USER_DIRECTORY_ROLES,
)
from shared.enums import UserRole

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _forbidden() -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not enough permissions")


async def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    """
    Loads the caller from an access token.

    Refresh tokens, tokens without a subject, deleted users and deactivated
    (e.g. terminated) users all get 401.
    """
    payload = decode_token(token)
    subject = payload.get("sub") if payload else None
    if not subject or not str(subject).isdigit():
        raise _unauthorized()

    user = db.get(User, int(subject))
    if user is None or not user.is_active:
        raise _unauthorized()
    return user


def require_role(allowed_roles: Collection[str]):
    """Dependency factory: the current user, provided their role is in ``allowed_roles``."""
    allowed = tuple(allowed_roles)

    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise _forbidden()
        return current_user

    return role_checker


def ensure_self_or_roles(current_user: User, user_id: int, allowed_roles: Collection[str]) -> None:
    # agents read their own attendance and asset states; reviewers read anyone's
    if current_user.id != user_id and current_user.role not in allowed_roles:
        raise _forbidden()


require_admin = require_role([UserRole.ADMIN.value])
require_team_leader = require_role([UserRole.TEAM_LEADER.value])
require_hr_admin = require_role(HR_ADMIN_ROLES)
require_people_ops = require_role(PEOPLE_OPS_ROLES)
require_user_directory = require_role(USER_DIRECTORY_ROLES)
require_asset_manager = require_role(ASSET_MANAGER_ROLES)
require_asset_oversight = require_role(ASSET_OVERSIGHT_ROLES)
