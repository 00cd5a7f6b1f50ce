"""User management service."""

from typing import Any

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from workforce.core.security import get_password_hash
from workforce.models.asset import Asset, AssetDetails, AssetIncident, AssetLossRecord
from workforce.models.asset_state import AssetDailyState, AssetStateAudit
from workforce.models.attendance import Attendance, AttendanceAudit
from workforce.models.notification import Notification
from workforce.models.organization import UserDepartmentAssignment
from workforce.models.team import Team, TeamMember
from workforce.models.termination import Termination
from workforce.models.transfer import Transfer
from workforce.models.user import User
from workforce.services.notification_service import NotificationService
from shared.enums import UserRole
from shared.exceptions import ConflictError, UserNotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class UserService:
    """
    Service for user records: creation, updates, role and status changes,
    team-leader reassignment and full removal.
    """

    def __init__(self, db: Session, acting_user: User | None = None):
        """
        Args:
            db: Database session
            acting_user: User performing the changes (used for notifications)
        """
        self.db = db
        self.acting_user = acting_user

    def get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    def _check_unique(self, username: str | None, email: str | None, exclude_id: int | None = None) -> None:
        if username:
            query = select(User).where(User.username == username)
            if exclude_id is not None:
                query = query.where(User.id != exclude_id)
            if self.db.scalars(query).first() is not None:
                raise ConflictError(f"Username '{username}' is already taken")
        if email:
            query = select(User).where(User.email == email)
            if exclude_id is not None:
                query = query.where(User.id != exclude_id)
            if self.db.scalars(query).first() is not None:
                raise ConflictError(f"Email '{email}' is already in use")

    def create_user(self, data: dict[str, Any]) -> User:
        """
        Creates a user with a hashed password.

        Args:
            data: Validated UserCreate fields

        Returns:
            The new User (flushed, not committed)

        Raises:
            ConflictError: If the username or email is taken
        """
        data = dict(data)
        self._check_unique(data.get("username"), data.get("email"))
        password = data.pop("password")
        role = data.pop("role", UserRole.AGENT)
        user = User(**data, role=UserRole(role).value, password_hash=get_password_hash(password))
        self.db.add(user)
        self.db.flush()
        logger.info("user_created", user_id=user.id, username=user.username, role=user.role)
        return user

    def update_user(self, user: User, updates: dict[str, Any]) -> User:
        """
        Applies a partial update. A supplied password is re-hashed.

        Raises:
            ConflictError: If the new username or email is taken
            ValidationError: If the user is made to report to themselves
        """
        updates = dict(updates)
        self._check_unique(updates.get("username"), updates.get("email"), exclude_id=user.id)
        if updates.get("reports_to") == user.id:
            raise ValidationError("A user cannot report to themselves")

        password = updates.pop("password", None)
        if password:
            user.password_hash = get_password_hash(password)
        if "role" in updates and updates["role"] is not None:
            updates["role"] = UserRole(updates["role"]).value

        old_department_id = user.department_id
        for key, value in updates.items():
            setattr(user, key, value)
        self.db.flush()

        if "department_id" in updates and old_department_id != user.department_id and self.acting_user:
            NotificationService(self.db).notify_department_change(
                user, old_department_id, user.department_id, self.acting_user
            )
        return user

    def set_role(self, user: User, role: UserRole) -> User:
        user.role = UserRole(role).value
        self.db.flush()
        logger.info("user_role_changed", user_id=user.id, role=user.role)
        return user

    def set_status(self, user: User, is_active: bool) -> User:
        user.is_active = is_active
        self.db.flush()
        logger.info("user_status_changed", user_id=user.id, is_active=is_active)
        return user

    def get_user_teams(self, user_id: int) -> list[Team]:
        return list(self.db.scalars(
            select(Team)
            .join(TeamMember, TeamMember.team_id == Team.id)
            .where(TeamMember.user_id == user_id)
            .order_by(TeamMember.joined_at, TeamMember.id)
        ).all())

    def list_team_leaders(self) -> list[User]:
        return list(self.db.scalars(
            select(User)
            .where(User.role == UserRole.TEAM_LEADER.value, User.is_active.is_(True))
            .order_by(User.first_name, User.last_name)
        ).all())

    def reassign_team_leader(self, agent: User, team_leader_id: int) -> Team:
        """
        Moves an agent into the team of another team leader.

        The agent leaves every current team. The leader's team is created,
        named after the leader, if it does not exist yet.

        Returns:
            The team the agent now belongs to

        Raises:
            UserNotFoundError: If the team leader does not exist
            ValidationError: If the target is not a team leader
        """
        leader = self.db.get(User, team_leader_id)
        if leader is None:
            raise UserNotFoundError("Team leader not found")
        if leader.role != UserRole.TEAM_LEADER.value:
            raise ValidationError("Selected user is not a team leader")

        notifications = NotificationService(self.db)
        previous_teams = self.get_user_teams(agent.id)
        self.db.execute(delete(TeamMember).where(TeamMember.user_id == agent.id))

        team = self.db.scalars(
            select(Team).where(Team.leader_id == leader.id).order_by(Team.id)
        ).first()
        if team is None:
            team = Team(
                name=f"{leader.first_name or 'TL'} Team",
                leader_id=leader.id,
                department_id=leader.department_id,
            )
            self.db.add(team)
            self.db.flush()

        self.db.add(TeamMember(team_id=team.id, user_id=agent.id))
        agent.reports_to = leader.id
        self.db.flush()

        if self.acting_user is not None:
            for old_team in previous_teams:
                if old_team.id != team.id:
                    notifications.notify_agent_removed_from_team(agent, old_team, self.acting_user)
            notifications.notify_agent_added_to_team(agent, team, self.acting_user)

        logger.info("agent_reassigned", agent_id=agent.id, team_leader_id=leader.id, team_id=team.id)
        return team

    def delete_user(self, user: User) -> None:
        """
        Removes a user and every row that references them.

        Rows authored by the user in other people's records (requested_by,
        approved_by, processed_by, team leadership) are detached rather than
        deleted. Runs inside the caller's transaction.

        Raises:
            ValidationError: If the acting user tries to delete themselves
        """
        if self.acting_user is not None and self.acting_user.id == user.id:
            raise ValidationError("You cannot delete your own account")

        user_id = user.id
        self.db.execute(delete(TeamMember).where(TeamMember.user_id == user_id))
        self.db.execute(
            update(Asset)
            .where(Asset.assigned_to_user_id == user_id)
            .values(assigned_to_user_id=None, assigned_at=None, status="available")
        )
        attendance_ids = select(Attendance.id).where(Attendance.user_id == user_id)
        self.db.execute(delete(AttendanceAudit).where(AttendanceAudit.attendance_id.in_(attendance_ids)))
        self.db.execute(delete(Attendance).where(Attendance.user_id == user_id))
        self.db.execute(update(Team).where(Team.leader_id == user_id).values(leader_id=None))

        self.db.execute(update(Transfer).where(Transfer.requested_by == user_id).values(requested_by=None))
        self.db.execute(update(Transfer).where(Transfer.approved_by == user_id).values(approved_by=None))
        self.db.execute(delete(Transfer).where(Transfer.user_id == user_id))

        self.db.execute(update(Termination).where(Termination.processed_by == user_id).values(processed_by=None))
        self.db.execute(delete(Termination).where(Termination.user_id == user_id))

        self.db.execute(delete(AssetStateAudit).where(AssetStateAudit.user_id == user_id))
        self.db.execute(delete(AssetDailyState).where(AssetDailyState.user_id == user_id))
        self.db.execute(delete(AssetIncident).where(AssetIncident.user_id == user_id))
        self.db.execute(delete(AssetLossRecord).where(AssetLossRecord.user_id == user_id))
        self.db.execute(delete(AssetDetails).where(AssetDetails.user_id == user_id))
        self.db.execute(delete(UserDepartmentAssignment).where(UserDepartmentAssignment.user_id == user_id))
        self.db.execute(delete(Notification).where(Notification.recipient_user_id == user_id))
        self.db.execute(update(User).where(User.reports_to == user_id).values(reports_to=None))

        self.db.delete(user)
        self.db.flush()
        logger.info("user_deleted", user_id=user_id)
