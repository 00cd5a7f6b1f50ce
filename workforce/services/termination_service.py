"""Termination processing."""

from datetime import date
from typing import Any

import structlog
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from workforce.models.termination import Termination
from workforce.models.user import User
from workforce.services.attendance_service import AttendanceService
from workforce.services.notification_service import NotificationService
from shared.enums import AssetReturnStatus, AttendanceStatus, TerminationType
from shared.exceptions import UserNotFoundError, ValidationError

logger = structlog.get_logger(__name__)

# Attendance status written for the day a record is processed
ATTENDANCE_FOR_TERMINATION = {
    TerminationType.RETIREMENT.value: AttendanceStatus.ON_LEAVE,
    TerminationType.AWOL.value: AttendanceStatus.AWOL,
    TerminationType.SUSPENDED.value: AttendanceStatus.SUSPENDED,
}


class TerminationService:
    """Records terminations, deactivates the employee and notifies the chain of command."""

    def __init__(self, db: Session, acting_user: User):
        self.db = db
        self.acting_user = acting_user

    def list_terminations(self) -> list[Termination]:
        return list(self.db.scalars(
            select(Termination).order_by(Termination.termination_date.desc(), Termination.id.desc())
        ).all())

    def active_for_user(self, user_id: int, today: date | None = None) -> Termination | None:
        today = today or date.today()
        return self.db.scalars(
            select(Termination).where(
                Termination.user_id == user_id,
                or_(Termination.termination_date >= today, Termination.last_working_day >= today),
            )
        ).first()

    def create(self, data: dict[str, Any]) -> Termination:
        """
        Processes a termination.

        Args:
            data: Validated TerminationCreate fields

        Returns:
            The new Termination

        Raises:
            UserNotFoundError: If the employee does not exist
            ValidationError: If the employee already has an active record
        """
        data = dict(data)
        user = self.db.get(User, data["user_id"])
        if user is None:
            raise UserNotFoundError()
        if self.active_for_user(user.id) is not None:
            raise ValidationError("User already has an active termination record")

        status_type = TerminationType(data.pop("status_type")).value
        return_status = data.pop("asset_return_status", None)
        termination = Termination(
            **data,
            status_type=status_type,
            asset_return_status=getattr(return_status, "value", return_status) or AssetReturnStatus.PENDING.value,
            processed_by=self.acting_user.id,
        )
        self.db.add(termination)
        user.is_active = False
        self.db.flush()

        attendance_status = ATTENDANCE_FOR_TERMINATION.get(status_type, AttendanceStatus.ABSENT)
        AttendanceService(self.db, self.acting_user).update_recorded_status(
            user.id, date.today(), attendance_status, f"Termination: {status_type}"
        )

        NotificationService(self.db).notify_termination_created(termination, self.acting_user)
        logger.info(
            "termination_processed",
            termination_id=termination.id,
            user_id=user.id,
            status_type=status_type,
            processed_by=self.acting_user.username,
        )
        return termination
