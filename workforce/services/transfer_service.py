"""Transfer workflow: request, approve or reject, complete."""

from typing import Any

import structlog
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from workforce.models.team import Team, TeamMember
from workforce.models.transfer import Transfer, TransferAudit
from workforce.models.user import User
from workforce.services.notification_service import NotificationService
from shared.enums import TransferAction, TransferStatus, TransferType, UserRole
from shared.exceptions import InvalidStateError, NotFoundError, UserNotFoundError, ValidationError

logger = structlog.get_logger(__name__)

USER_ROLE_VALUES = {role.value for role in UserRole}


class TransferService:
    """
    Service for transfer requests.

    Every workflow step is recorded in transfer_audit. Approving a
    permanent transfer moves the employee immediately.
    """

    def __init__(self, db: Session, acting_user: User):
        self.db = db
        self.acting_user = acting_user
        self.notifications = NotificationService(db)

    def get(self, transfer_id: int) -> Transfer:
        transfer = self.db.get(Transfer, transfer_id)
        if transfer is None:
            raise NotFoundError("Transfer not found")
        return transfer

    def list_transfers(self, status: str | None = None) -> list[Transfer]:
        query = select(Transfer)
        if status is not None:
            query = query.where(Transfer.status == status)
        return list(self.db.scalars(query.order_by(Transfer.created_at.desc(), Transfer.id.desc())).all())

    def audit(self, transfer_id: int) -> list[TransferAudit]:
        self.get(transfer_id)
        return list(self.db.scalars(
            select(TransferAudit)
            .where(TransferAudit.transfer_id == transfer_id)
            .order_by(TransferAudit.action_at.desc(), TransferAudit.id.desc())
        ).all())

    def _log(self, transfer: Transfer, action: TransferAction, previous: str | None, comment: str | None) -> None:
        self.db.add(TransferAudit(
            transfer_id=transfer.id,
            action=action.value,
            previous_status=previous,
            new_status=transfer.status,
            comment=comment,
            action_by=self.acting_user.id,
        ))

    def _current_team_id(self, user_id: int) -> int | None:
        return self.db.scalars(
            select(TeamMember.team_id).where(TeamMember.user_id == user_id).order_by(TeamMember.id)
        ).first()

    def create(self, data: dict[str, Any]) -> Transfer:
        """
        Raises a transfer request on behalf of the acting user.

        Omitted from_department_id, from_role and from_team_id default to the
        employee's current placement.

        Raises:
            UserNotFoundError: If the employee does not exist
            NotFoundError: If the target team does not exist
            ValidationError: If a temporary transfer has no end date
        """
        data = dict(data)
        user = self.db.get(User, data["user_id"])
        if user is None:
            raise UserNotFoundError()
        if data.get("to_team_id") is not None and self.db.get(Team, data["to_team_id"]) is None:
            raise NotFoundError("Team not found")

        transfer_type = TransferType(data["transfer_type"]).value
        if transfer_type == TransferType.TEMPORARY.value and data.get("end_date") is None:
            raise ValidationError("Temporary transfers require an end date")

        if data.get("from_department_id") is None:
            data["from_department_id"] = user.department_id
        if data.get("from_role") is None:
            data["from_role"] = user.role
        if data.get("from_team_id") is None:
            data["from_team_id"] = self._current_team_id(user.id)
        if data.get("location") is not None:
            data["location"] = getattr(data["location"], "value", data["location"])

        data["transfer_type"] = transfer_type
        transfer = Transfer(
            **data,
            status=TransferStatus.PENDING.value,
            requested_by=self.acting_user.id,
        )
        self.db.add(transfer)
        self.db.flush()
        self._log(transfer, TransferAction.CREATED, None, data.get("reason"))
        self.db.flush()

        self.notifications.notify_transfer_requested(transfer, self.acting_user)
        logger.info("transfer_requested", transfer_id=transfer.id, user_id=user.id, type=transfer_type)
        return transfer

    def _require_status(self, transfer: Transfer, expected: TransferStatus, message: str) -> None:
        if transfer.status != expected.value:
            raise InvalidStateError(message)

    def _apply(self, transfer: Transfer) -> None:
        """Moves the employee to the transfer's target placement."""
        user = self.db.get(User, transfer.user_id)
        if user is None:
            raise UserNotFoundError()
        if transfer.to_department_id is not None:
            user.department_id = transfer.to_department_id
        if transfer.to_role in USER_ROLE_VALUES:
            user.role = transfer.to_role
        if transfer.to_team_id is not None:
            self.db.execute(delete(TeamMember).where(TeamMember.user_id == user.id))
            self.db.add(TeamMember(team_id=transfer.to_team_id, user_id=user.id))
            team = self.db.get(Team, transfer.to_team_id)
            if team is not None and team.leader_id is not None and team.leader_id != user.id:
                user.reports_to = team.leader_id
        self.db.flush()

    def approve(self, transfer_id: int, comment: str | None = None) -> Transfer:
        """
        Raises:
            InvalidStateError: If the transfer is not pending
        """
        transfer = self.get(transfer_id)
        self._require_status(transfer, TransferStatus.PENDING, "Only pending transfers can be approved")

        previous = transfer.status
        transfer.status = TransferStatus.APPROVED.value
        transfer.approved_by = self.acting_user.id
        if transfer.transfer_type == TransferType.PERMANENT.value:
            self._apply(transfer)
        self._log(transfer, TransferAction.APPROVED, previous, comment)
        self.db.flush()

        self.notifications.notify_transfer_approved(transfer, self.acting_user)
        logger.info("transfer_approved", transfer_id=transfer.id, approver=self.acting_user.username)
        return transfer

    def reject(self, transfer_id: int, comment: str | None = None) -> Transfer:
        transfer = self.get(transfer_id)
        self._require_status(transfer, TransferStatus.PENDING, "Only pending transfers can be rejected")

        previous = transfer.status
        transfer.status = TransferStatus.REJECTED.value
        transfer.approved_by = self.acting_user.id
        self._log(transfer, TransferAction.REJECTED, previous, comment)
        self.db.flush()

        self.notifications.notify_transfer_rejected(transfer, self.acting_user, comment)
        logger.info("transfer_rejected", transfer_id=transfer.id, approver=self.acting_user.username)
        return transfer

    def complete(self, transfer_id: int, comment: str | None = None) -> Transfer:
        transfer = self.get(transfer_id)
        self._require_status(transfer, TransferStatus.APPROVED, "Only approved transfers can be completed")

        previous = transfer.status
        transfer.status = TransferStatus.COMPLETED.value
        self._log(transfer, TransferAction.COMPLETED, previous, comment)
        self.db.flush()
        return transfer
