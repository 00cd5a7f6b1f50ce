"""Daily roll-over of asset states."""

from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from workforce.models.asset import AssetIncident
from workforce.models.asset_state import AssetDailyState
from workforce.models.user import User
from workforce.services.asset_state_service import AssetStateService
from shared.constants import RESET_REASON_MARKERS, TRACKED_ASSET_TYPES
from shared.enums import AssetState, IncidentStatus, IncidentType, ResetAction

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Transition:
    action: ResetAction
    new_state: str
    reason: str


def plan_transition(previous_state: str | None, previous_day: date) -> Transition:
    """
    Decides today's state from yesterday's.

    Args:
        previous_state: State on the previous day, None if there was none
        previous_day: The previous day, used in reasons

    Returns:
        Transition with the action, the new state and the audit reason
    """
    ready = AssetState.READY_FOR_COLLECTION.value
    if previous_state is None:
        return Transition(ResetAction.INITIALIZE_NEW_STATE, ready, "Daily reset: initial state")
    if previous_state == AssetState.COLLECTED.value:
        return Transition(
            ResetAction.AUTO_MARK_UNRETURNED,
            AssetState.NOT_RETURNED.value,
            f"Daily reset: not booked out on {previous_day.isoformat()}",
        )
    if previous_state == AssetState.RETURNED.value:
        return Transition(ResetAction.RESET_COMPLETED_CYCLE, ready, "Daily reset: previous cycle completed")
    if previous_state == AssetState.NOT_COLLECTED.value:
        return Transition(ResetAction.RESET_NOT_COLLECTED, ready, "Daily reset: not collected previously")
    if previous_state in (AssetState.NOT_RETURNED.value, AssetState.LOST.value):
        return Transition(
            ResetAction.PERSIST_PROBLEMATIC_STATE,
            previous_state,
            f"Persisting {previous_state} state from {previous_day.isoformat()}",
        )
    if previous_state == ready:
        return Transition(ResetAction.RESET_READY_STATE, ready, "Daily reset: ready for collection")
    return Transition(
        ResetAction.RESET_UNKNOWN_STATE,
        ready,
        f"Daily reset: unknown previous state '{previous_state}'",
    )


def is_reset_reason(reason: str | None) -> bool:
    return bool(reason) and any(marker in reason for marker in RESET_REASON_MARKERS)


class DailyResetService:
    """
    Derives each active agent's asset states for a day from the previous day.

    Agents that already have a state for the target day keep it.
    """

    def __init__(self, db: Session, acting_user: User | None = None):
        self.db = db
        self.acting_user = acting_user
        self.states = AssetStateService(db, acting_user)

    def perform_daily_reset(self, target_date: date) -> dict[str, Any]:
        """
        Runs the roll-over for target_date.

        Returns:
            {message, reset_count, incidents_created, details}
        """
        previous_day = target_date - timedelta(days=1)
        users = self.db.scalars(
            select(User).where(User.is_active.is_(True)).order_by(User.id)
        ).all()

        details: list[dict[str, Any]] = []
        incidents_created = 0

        for user in users:
            for asset_type in TRACKED_ASSET_TYPES:
                if self.states.get_state(user.id, target_date, asset_type) is not None:
                    continue

                previous = self.states.get_state(user.id, previous_day, asset_type)
                previous_state = previous.current_state if previous else None
                transition = plan_transition(previous_state, previous_day)

                self.states.set_state(
                    user.id, target_date, asset_type, transition.new_state, transition.reason,
                    previous_state=previous_state,
                )

                if transition.action is ResetAction.AUTO_MARK_UNRETURNED:
                    self.db.add(AssetIncident(
                        user_id=user.id,
                        asset_type=asset_type,
                        incident_type=IncidentType.UNRETURNED.value,
                        description=f"{asset_type} was not returned on {previous_day.isoformat()}",
                        reported_by=self.acting_user.id if self.acting_user else None,
                        status=IncidentStatus.REPORTED.value,
                    ))
                    incidents_created += 1

                details.append({
                    "user_id": user.id,
                    "agent_name": user.full_name,
                    "asset_type": asset_type,
                    "action": transition.action.value,
                    "previous_state": previous_state,
                    "new_state": transition.new_state,
                    "reason": transition.reason,
                })

        self.db.flush()
        logger.info(
            "daily_reset_performed",
            date=target_date.isoformat(),
            reset_count=len(details),
            incidents_created=incidents_created,
        )
        return {
            "message": f"Daily reset completed for {target_date.isoformat()}",
            "reset_count": len(details),
            "incidents_created": incidents_created,
            "details": details,
        }

    def reset_status(self, day: date) -> dict[str, Any]:
        states = self.db.scalars(select(AssetDailyState).where(AssetDailyState.date == day)).all()
        activity = [s.confirmed_at for s in states if s.confirmed_at is not None]
        return {
            "date": day,
            "reset_performed": any(is_reset_reason(s.reason) for s in states),
            "total_states": len(states),
            "state_breakdown": dict(Counter(s.current_state for s in states)),
            "last_activity": max(activity) if activity else None,
        }

    def reset_done(self, day: date) -> bool:
        return self.reset_status(day)["reset_performed"]
