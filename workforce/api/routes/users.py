"""User directory and administration routes."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select

from workforce.api.dependencies import CurrentUser, DBSession
from workforce.core.dependencies import ensure_self_or_roles, require_admin, require_hr_admin, require_user_directory
from workforce.models.user import User
from workforce.schemas.responses import MessageResponse
from workforce.schemas.team import TeamResponse
from workforce.schemas.user import (
    ReassignTeamLeaderRequest,
    RoleUpdate,
    SafeUserResponse,
    StatusUpdate,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from workforce.services.user_service import UserService
from shared.constants import USER_DIRECTORY_ROLES
from shared.enums import UserRole

router = APIRouter(tags=["users"])


def serialize_user(user: User, viewer: User) -> dict[str, Any]:
    """Full record for admins, safe fields for everyone else."""
    if viewer.role == UserRole.ADMIN.value:
        return UserResponse.model_validate(user).model_dump()
    return SafeUserResponse.model_validate(user).model_dump()


@router.get("/users")
async def list_users(
    db: DBSession,
    current_user: User = Depends(require_user_directory),
):
    """
    Lists every user.

    Returns:
    - Full records for admins, otherwise only id, username, names, role,
      department and active flag.
    """
    users = db.scalars(select(User).order_by(User.first_name, User.last_name, User.id)).all()
    return [serialize_user(u, current_user) for u in users]


@router.get("/team-leaders", response_model=list[SafeUserResponse])
async def list_team_leaders(
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    """Active team leaders, e.g. for the reassignment dialog."""
    return UserService(db).list_team_leaders()


@router.get("/users/{user_id}")
async def get_user(
    user_id: int,
    db: DBSession,
    current_user: User = Depends(require_user_directory),
):
    """
    Returns one user.

    Errors:
    - **404 Not Found**: User does not exist.
    """
    user = UserService(db).get_user(user_id)
    return serialize_user(user, current_user)


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    db: DBSession,
    current_user: User = Depends(require_admin),
):
    """
    Creates a user. The password is stored hashed.

    Errors:
    - **400 Bad Request**: Username or email already taken.
    """
    user = UserService(db, current_user).create_user(data.model_dump())
    db.commit()
    db.refresh(user)
    return user


@router.patch("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    data: UserUpdate,
    db: DBSession,
    current_user: User = Depends(require_admin),
):
    """Partial update; only the supplied fields change."""
    service = UserService(db, current_user)
    user = service.update_user(service.get_user(user_id), data.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(user)
    return user


@router.patch("/users/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: int,
    data: RoleUpdate,
    db: DBSession,
    current_user: User = Depends(require_admin),
):
    service = UserService(db, current_user)
    user = service.set_role(service.get_user(user_id), data.role)
    db.commit()
    db.refresh(user)
    return user


@router.patch("/users/{user_id}/status", response_model=UserResponse)
async def update_user_status(
    user_id: int,
    data: StatusUpdate,
    db: DBSession,
    current_user: User = Depends(require_admin),
):
    service = UserService(db, current_user)
    user = service.set_status(service.get_user(user_id), data.is_active)
    db.commit()
    db.refresh(user)
    return user


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    db: DBSession,
    current_user: User = Depends(require_admin),
):
    """
    Deletes a user and every record that belongs to them in one transaction.

    Errors:
    - **400 Bad Request**: Admin tried to delete their own account.
    - **404 Not Found**: User does not exist.
    """
    service = UserService(db, current_user)
    user = service.get_user(user_id)
    username = user.username
    service.delete_user(user)
    db.commit()
    return {"message": f"User {username} deleted"}


@router.get("/users/{user_id}/teams", response_model=list[TeamResponse])
async def get_user_teams(user_id: int, db: DBSession, current_user: CurrentUser):
    """Teams the user belongs to."""
    ensure_self_or_roles(current_user, user_id, USER_DIRECTORY_ROLES + ("hr",))
    service = UserService(db)
    service.get_user(user_id)
    return service.get_user_teams(user_id)


@router.post("/users/{agent_id}/reassign-team-leader", response_model=TeamResponse)
async def reassign_team_leader(
    agent_id: int,
    data: ReassignTeamLeaderRequest,
    db: DBSession,
    current_user: User = Depends(require_admin),
):
    """
    Moves an agent into the team of another team leader.

    Parameters:
    - **team_leader_id** (int): Target team leader.

    Returns:
    - The team the agent now belongs to.

    Errors:
    - **400 Bad Request**: Target user is not a team leader.
    - **404 Not Found**: Agent or team leader does not exist.
    """
    service = UserService(db, current_user)
    agent = service.get_user(agent_id)
    if agent.id == data.team_leader_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="An agent cannot lead themselves")
    team = service.reassign_team_leader(agent, data.team_leader_id)
    db.commit()
    return team
