"""Daily asset state tracking: book-in, book-out, recovery and agent reset."""

from datetime import date, datetime
from typing import Any

import structlog
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from workforce.core.security import verify_password
from workforce.models.asset import AssetIncident, AssetLossRecord
from workforce.models.asset_state import AssetDailyState, AssetStateAudit
from workforce.models.user import User
from workforce.services.notification_service import NotificationService
from workforce.services.team_service import TeamService
from shared.constants import BOOK_IN_ALLOWED_STATES, RECOVERABLE_STATES
from shared.enums import AssetState, IncidentStatus, IncidentType, LossStatus
from shared.exceptions import InvalidStateError, PermissionDeniedError, UserNotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class AssetStateService:
    """
    Service for the per-day state of each agent's laptop, headsets and dongle.

    Every transition is mirrored by a row in asset_state_audit. The service
    flushes; the caller commits.
    """

    def __init__(self, db: Session, acting_user: User | None = None):
        """
        Args:
            db: Database session
            acting_user: User confirming the transitions
        """
        self.db = db
        self.acting_user = acting_user

    @property
    def _actor_id(self) -> int | None:
        return self.acting_user.id if self.acting_user else None

    def get_state(self, user_id: int, day: date, asset_type: str) -> AssetDailyState | None:
        return self.db.scalars(
            select(AssetDailyState).where(
                AssetDailyState.user_id == user_id,
                AssetDailyState.date == day,
                AssetDailyState.asset_type == asset_type,
            )
        ).first()

    def states_for_date(self, day: date) -> list[AssetDailyState]:
        return list(self.db.scalars(
            select(AssetDailyState)
            .where(AssetDailyState.date == day)
            .order_by(AssetDailyState.agent_name, AssetDailyState.asset_type)
        ).all())

    def states_for_user(self, user_id: int, day: date) -> list[AssetDailyState]:
        return list(self.db.scalars(
            select(AssetDailyState)
            .where(AssetDailyState.user_id == user_id, AssetDailyState.date == day)
            .order_by(AssetDailyState.asset_type)
        ).all())

    def audit_for_user(self, user_id: int) -> list[AssetStateAudit]:
        return list(self.db.scalars(
            select(AssetStateAudit)
            .where(AssetStateAudit.user_id == user_id)
            .order_by(AssetStateAudit.changed_at.desc(), AssetStateAudit.id.desc())
        ).all())

    def _agent(self, user_id: int) -> User:
        agent = self.db.get(User, user_id)
        if agent is None:
            raise UserNotFoundError("Agent not found")
        return agent

    def set_state(
        self,
        user_id: int,
        day: date,
        asset_type: str,
        new_state: str,
        reason: str | None,
        audit_reason: str | None = None,
        previous_state: str | None = None,
    ) -> AssetDailyState:
        """
        Upserts the state for (user, day, asset type) and writes the audit row.

        Args:
            user_id: Agent
            day: Working day
            asset_type: laptop, headsets or dongle
            new_state: Target AssetState value
            reason: Reason stored on the state
            audit_reason: Reason stored on the audit row (defaults to reason)
            previous_state: Previous state recorded in the audit when no row exists yet

        Returns:
            The upserted AssetDailyState
        """
        agent = self._agent(user_id)
        new_state = AssetState(new_state).value
        state = self.get_state(user_id, day, asset_type)
        now = datetime.now()

        if state is None:
            state = AssetDailyState(user_id=user_id, date=day, asset_type=asset_type)
            self.db.add(state)
            before = previous_state
        else:
            before = state.current_state

        state.current_state = new_state
        state.reason = reason
        state.confirmed_by = self._actor_id
        state.confirmed_at = now
        state.agent_name = agent.full_name
        self.db.flush()

        self.db.add(AssetStateAudit(
            daily_state_id=state.id,
            user_id=user_id,
            date=day,
            asset_type=asset_type,
            previous_state=before,
            new_state=new_state,
            reason=audit_reason if audit_reason is not None else reason,
            changed_by=self._actor_id,
            changed_at=now,
        ))
        self.db.flush()
        return state

    def book_in(
        self, user_id: int, asset_type: str, day: date, status: str, reason: str | None = None
    ) -> AssetDailyState:
        """
        Records whether the agent collected the asset.

        Raises:
            InvalidStateError: If the asset is already past the collection stage
        """
        existing = self.get_state(user_id, day, asset_type)
        if existing is not None and existing.current_state not in BOOK_IN_ALLOWED_STATES:
            raise InvalidStateError(f"Cannot book in asset in current state: {existing.current_state}")

        reason = reason or f"Book in: {status}"
        return self.set_state(
            user_id, day, asset_type, status, reason,
            previous_state=AssetState.READY_FOR_COLLECTION.value,
        )

    def book_out(
        self, user_id: int, asset_type: str, day: date, status: str, reason: str | None = None
    ) -> AssetDailyState:
        """
        Records the end-of-shift outcome of a collected asset.

        Booking out as lost opens an incident and a loss record; both
        lost and not_returned notify the agent's chain of command.

        Raises:
            InvalidStateError: If the asset was not collected
        """
        existing = self.get_state(user_id, day, asset_type)
        if existing is None or existing.current_state != AssetState.COLLECTED.value:
            raise InvalidStateError("Asset must be collected before it can be booked out")

        state = self.set_state(user_id, day, asset_type, status, reason or f"Book out: {status}")
        agent = self._agent(user_id)

        if status == AssetState.LOST.value:
            self.db.add(AssetIncident(
                user_id=user_id,
                asset_type=asset_type,
                incident_type=IncidentType.LOST.value,
                description=reason or f"{asset_type} reported lost at book out",
                reported_by=self._actor_id,
                status=IncidentStatus.REPORTED.value,
            ))
            self.db.add(AssetLossRecord(
                user_id=user_id,
                asset_type=asset_type,
                date_lost=day,
                reason=reason or "Reported lost at book out",
                reported_by=self._actor_id,
                status=LossStatus.REPORTED.value,
            ))
            self.db.flush()
            if self.acting_user is not None:
                NotificationService(self.db).notify_asset_lost(agent, asset_type, self.acting_user, reason)
        elif status == AssetState.NOT_RETURNED.value and self.acting_user is not None:
            NotificationService(self.db).notify_asset_not_returned(agent, asset_type, self.acting_user)

        return state

    def mark_found(self, user_id: int, asset_type: str, day: date, recovery_reason: str) -> AssetDailyState:
        """
        Marks a lost or unreturned asset as returned.

        Open loss records and lost/unreturned incidents for the asset are resolved.

        Raises:
            InvalidStateError: If the asset is not lost or unreturned
        """
        existing = self.get_state(user_id, day, asset_type)
        if existing is None or existing.current_state not in RECOVERABLE_STATES:
            raise InvalidStateError("Asset is not in a lost/unreturned state")

        state = self.set_state(
            user_id, day, asset_type, AssetState.RETURNED.value,
            f"Found: {recovery_reason}",
            audit_reason=f"Asset found: {recovery_reason}",
        )

        now = datetime.now()
        for record in self.db.scalars(
            select(AssetLossRecord).where(
                AssetLossRecord.user_id == user_id,
                AssetLossRecord.asset_type == asset_type,
                AssetLossRecord.status != LossStatus.RESOLVED.value,
            )
        ).all():
            record.status = LossStatus.RESOLVED.value
        for incident in self.db.scalars(
            select(AssetIncident).where(
                AssetIncident.user_id == user_id,
                AssetIncident.asset_type == asset_type,
                AssetIncident.incident_type.in_([IncidentType.LOST.value, IncidentType.UNRETURNED.value]),
                AssetIncident.status.in_([IncidentStatus.REPORTED.value, IncidentStatus.INVESTIGATING.value]),
            )
        ).all():
            incident.status = IncidentStatus.RESOLVED.value
            incident.resolution = f"Asset found: {recovery_reason}"
            incident.resolved_by = self._actor_id
            incident.resolved_at = now
        self.db.flush()
        return state

    def reset_agent(self, team_leader: User, agent_id: int, password: str) -> dict[str, Any]:
        """
        Wipes today's asset records for one agent of the team leader.

        Each removed state is preserved as a resolved maintenance incident.

        Args:
            team_leader: Team leader performing the reset
            agent_id: Agent whose records are reset
            password: Team leader's password, re-entered as confirmation

        Returns:
            Summary with the number of states removed

        Raises:
            ValidationError: If the password is wrong
            UserNotFoundError: If the agent does not exist
            PermissionDeniedError: If the agent is not in the leader's team
        """
        if not verify_password(password, team_leader.password_hash):
            raise ValidationError("Invalid password")

        agent = self._agent(agent_id)
        teams = TeamService(self.db)
        if not teams.teams_led_by(team_leader.id):
            raise PermissionDeniedError("You are not assigned as a team leader to any team")
        if not teams.is_leader_of(team_leader.id, agent.id):
            raise PermissionDeniedError("You can only reset records for agents in your team")

        today = date.today()
        states = self.states_for_user(agent.id, today)
        now = datetime.now()
        for state in states:
            self.db.add(AssetIncident(
                user_id=agent.id,
                asset_type=state.asset_type,
                incident_type=IncidentType.MAINTENANCE.value,
                description=(
                    f"Asset records reset by team leader: {team_leader.username}. "
                    f"Previous state was: {state.current_state}"
                ),
                reported_by=team_leader.id,
                reported_at=now,
                status=IncidentStatus.RESOLVED.value,
                resolution="Records reset",
                resolved_by=team_leader.id,
                resolved_at=now,
            ))

        self.db.execute(delete(AssetStateAudit).where(
            AssetStateAudit.user_id == agent.id, AssetStateAudit.date == today
        ))
        self.db.execute(delete(AssetDailyState).where(
            AssetDailyState.user_id == agent.id, AssetDailyState.date == today
        ))
        self.db.flush()

        logger.info(
            "agent_assets_reset",
            agent_id=agent.id,
            team_leader=team_leader.username,
            states_reset=len(states),
        )
        return {
            "message": f"Asset records reset for {agent.full_name}",
            "agent_id": agent.id,
            "date": today,
            "reset_by": team_leader.username,
            "states_reset": len(states),
        }
