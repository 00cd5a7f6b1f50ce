"""Team service."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from workforce.models.team import Team, TeamMember
from workforce.models.user import User
from workforce.services.notification_service import NotificationService
from shared.exceptions import ConflictError, NotFoundError, UserNotFoundError


class TeamService:
    """Teams and their membership."""

    def __init__(self, db: Session, acting_user: User | None = None):
        self.db = db
        self.acting_user = acting_user

    def get_team(self, team_id: int) -> Team:
        team = self.db.get(Team, team_id)
        if team is None:
            raise NotFoundError("Team not found")
        return team

    def list_teams(self) -> list[Team]:
        return list(self.db.scalars(select(Team).order_by(Team.name)).all())

    def teams_led_by(self, leader_id: int) -> list[Team]:
        return list(self.db.scalars(select(Team).where(Team.leader_id == leader_id).order_by(Team.id)).all())

    def members(self, team_id: int) -> list[User]:
        self.get_team(team_id)
        return list(self.db.scalars(
            select(User)
            .join(TeamMember, TeamMember.user_id == User.id)
            .where(TeamMember.team_id == team_id)
            .order_by(User.first_name, User.last_name)
        ).all())

    def is_leader_of(self, leader_id: int, user_id: int) -> bool:
        """True if the user is a member of any team the leader leads."""
        membership = self.db.scalars(
            select(TeamMember.id)
            .join(Team, Team.id == TeamMember.team_id)
            .where(Team.leader_id == leader_id, TeamMember.user_id == user_id)
        ).first()
        return membership is not None

    def create_team(self, name: str, leader_id: int | None = None, department_id: int | None = None) -> Team:
        if leader_id is not None and self.db.get(User, leader_id) is None:
            raise UserNotFoundError("Team leader not found")
        team = Team(name=name, leader_id=leader_id, department_id=department_id)
        self.db.add(team)
        self.db.flush()
        return team

    def add_member(self, team_id: int, user_id: int) -> TeamMember:
        """
        Adds a user to a team and notifies the team leader.

        Raises:
            NotFoundError: If the team or user does not exist
            ConflictError: If the user is already a member
        """
        team = self.get_team(team_id)
        user = self.db.get(User, user_id)
        if user is None:
            raise UserNotFoundError()
        existing = self.db.scalars(
            select(TeamMember).where(TeamMember.team_id == team_id, TeamMember.user_id == user_id)
        ).first()
        if existing is not None:
            raise ConflictError("User is already a member of this team")

        member = TeamMember(team_id=team_id, user_id=user_id)
        self.db.add(member)
        self.db.flush()
        if self.acting_user is not None:
            NotificationService(self.db).notify_agent_added_to_team(user, team, self.acting_user)
        return member

    def remove_member(self, team_id: int, user_id: int) -> None:
        team = self.get_team(team_id)
        member = self.db.scalars(
            select(TeamMember).where(TeamMember.team_id == team_id, TeamMember.user_id == user_id)
        ).first()
        if member is None:
            raise NotFoundError("User is not a member of this team")
        user = self.db.get(User, user_id)
        self.db.delete(member)
        self.db.flush()
        if self.acting_user is not None and user is not None:
            NotificationService(self.db).notify_agent_removed_from_team(user, team, self.acting_user)
