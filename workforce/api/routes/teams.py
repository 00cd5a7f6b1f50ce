"""Team routes."""

from fastapi import APIRouter, Depends, status

from workforce.api.dependencies import CurrentUser, DBSession
from workforce.core.dependencies import require_hr_admin
from workforce.models.user import User
from workforce.schemas.responses import SuccessResponse
from workforce.schemas.team import TeamCreate, TeamMemberCreate, TeamMemberResponse, TeamResponse
from workforce.schemas.user import SafeUserResponse
from workforce.services.team_service import TeamService

router = APIRouter(tags=["teams"])


@router.get("/teams", response_model=list[TeamResponse])
async def list_teams(db: DBSession, current_user: CurrentUser):
    return TeamService(db).list_teams()


@router.get("/teams/leader/{leader_id}", response_model=list[TeamResponse])
async def teams_for_leader(leader_id: int, db: DBSession, current_user: CurrentUser):
    return TeamService(db).teams_led_by(leader_id)


@router.get("/teams/{team_id}/members", response_model=list[SafeUserResponse])
async def team_members(team_id: int, db: DBSession, current_user: CurrentUser):
    """
    Members of a team as safe user records.

    Errors:
    - **404 Not Found**: Team does not exist.
    """
    return TeamService(db).members(team_id)


@router.post("/teams", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
async def create_team(
    data: TeamCreate,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    team = TeamService(db, current_user).create_team(**data.model_dump())
    db.commit()
    return team


@router.post("/team-members", response_model=TeamMemberResponse, status_code=status.HTTP_201_CREATED)
async def add_team_member(
    data: TeamMemberCreate,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    """
    Adds a user to a team and notifies the team leader.

    Errors:
    - **400 Bad Request**: User is already a member.
    - **404 Not Found**: Team or user does not exist.
    """
    member = TeamService(db, current_user).add_member(data.team_id, data.user_id)
    db.commit()
    return member


@router.delete("/teams/{team_id}/members/{user_id}", response_model=SuccessResponse)
async def remove_team_member(
    team_id: int,
    user_id: int,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    TeamService(db, current_user).remove_member(team_id, user_id)
    db.commit()
    return SuccessResponse(message="Member removed from team")
