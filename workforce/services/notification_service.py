"""Notification routing and delivery service."""

from datetime import datetime
from typing import Any, Iterable

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from workforce.models.notification import Notification
from workforce.models.organization import Department
from workforce.models.team import Team, TeamMember
from workforce.models.termination import Termination
from workforce.models.transfer import Transfer
from workforce.models.user import User
from shared.constants import MANAGER_ROLES
from shared.enums import NotificationSeverity, NotificationSubject, UserRole

logger = structlog.get_logger(__name__)

# title, body template, severity
TERMINATION_MESSAGES: dict[str, tuple[str, str, NotificationSeverity]] = {
    "AWOL": (
        "Agent AWOL Alert",
        "{name} has been marked as Absent Without Leave (AWOL). Immediate attention required.",
        NotificationSeverity.URGENT,
    ),
    "suspended": (
        "Agent Suspended",
        "{name} has been placed on suspension pending investigation.",
        NotificationSeverity.WARNING,
    ),
    "resignation": (
        "Agent Resignation Notice",
        "{name} has submitted their resignation.",
        NotificationSeverity.INFO,
    ),
    "terminated": (
        "Agent Terminated",
        "{name} has been terminated from their position.",
        NotificationSeverity.WARNING,
    ),
}


def action_url_for(role: str, view: str) -> str:
    """
    Client route a recipient should open for a notification.

    Args:
        role: Recipient role
        view: transfers, terminations, assets, employees or team

    Returns:
        Relative URL
    """
    if role == UserRole.ADMIN.value:
        return "/admin/team-leader" if view == "team" else f"/admin/hr?view={view}"
    if role == UserRole.HR.value:
        return "/" if view == "team" else f"/hr?view={view}"
    if role in MANAGER_ROLES:
        return "/contact-center"
    if role == UserRole.TEAM_LEADER.value:
        return "/team-leader"
    return "/"


def termination_message(status_type: str, name: str, comment: str | None = None) -> tuple[str, str, str]:
    """
    Builds title, body and severity for a termination notification.

    Returns:
        (title, body, severity)
    """
    if status_type in TERMINATION_MESSAGES:
        title, template, severity = TERMINATION_MESSAGES[status_type]
        body = template.format(name=name)
        if comment:
            label = "Details" if status_type == "resignation" else "Reason"
            body += f" {label}: {comment}"
    else:
        title = f"Agent {status_type} Status"
        body = f"{name} has been marked as {status_type}."
        severity = NotificationSeverity.WARNING
        if comment:
            body += f" Comment: {comment}"
    return title, body, severity.value


class NotificationService:
    """
    Creates notifications for the people affected by a workforce event
    and serves a user's inbox.

    The service only adds rows to the session; the caller commits.
    """

    def __init__(self, db: Session):
        self.db = db

    # RECIPIENTS

    def get_managers_for_user(self, user: User) -> list[User]:
        """Direct manager plus every contact-center manager, without duplicates."""
        managers: list[User] = []
        if user.reports_to:
            direct = self.db.get(User, user.reports_to)
            if direct is not None:
                managers.append(direct)

        cc_managers = self.db.scalars(
            select(User).where(User.role.in_(MANAGER_ROLES)).order_by(User.id)
        ).all()
        seen = {m.id for m in managers}
        for manager in cc_managers:
            if manager.id not in seen:
                managers.append(manager)
                seen.add(manager.id)
        return managers

    def get_team_leader_for_agent(self, agent_id: int) -> User | None:
        """Leader of the first team the agent belongs to."""
        team = self.db.scalars(
            select(Team)
            .join(TeamMember, TeamMember.team_id == Team.id)
            .where(TeamMember.user_id == agent_id)
            .order_by(TeamMember.joined_at, TeamMember.id)
        ).first()
        if team is None or team.leader_id is None:
            return None
        return self.db.get(User, team.leader_id)

    def get_team_leader_for_team(self, team_id: int | None) -> User | None:
        if team_id is None:
            return None
        team = self.db.get(Team, team_id)
        if team is None or team.leader_id is None:
            return None
        return self.db.get(User, team.leader_id)

    def get_manager_for_team_leader(self, team_leader: User) -> User | None:
        if not team_leader.reports_to:
            return None
        return self.db.get(User, team_leader.reports_to)

    def get_users_by_role(self, role: UserRole) -> list[User]:
        return list(self.db.scalars(select(User).where(User.role == role.value).order_by(User.id)).all())

    # DELIVERY

    def create(
        self,
        recipient: User,
        title: str,
        body: str,
        subject_type: NotificationSubject,
        *,
        subject_id: int | None = None,
        severity: NotificationSeverity | str = NotificationSeverity.INFO,
        actor_id: int | None = None,
        requires_action: bool = False,
        view: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Notification:
        """
        Adds one notification to the session.

        Args:
            recipient: User who receives it
            title: Short headline
            body: Message text
            subject_type: Kind of entity the message is about
            subject_id: Id of that entity
            severity: info, warning or urgent
            actor_id: User who triggered the event
            requires_action: Whether the recipient must act
            view: Client view used to derive action_url
            metadata: Extra structured data for the client

        Returns:
            The pending Notification
        """
        notification = Notification(
            recipient_user_id=recipient.id,
            actor_user_id=actor_id,
            subject_type=NotificationSubject(subject_type).value,
            subject_id=subject_id,
            severity=NotificationSeverity(severity).value,
            title=title,
            body=body,
            metadata_json=metadata,
            requires_action=requires_action,
            action_url=action_url_for(recipient.role, view) if view else None,
        )
        self.db.add(notification)
        self.db.flush()
        return notification

    def create_for_many(
        self,
        recipients: Iterable[User],
        title: str,
        body: str,
        subject_type: NotificationSubject,
        exclude_ids: Iterable[int] = (),
        **kwargs: Any,
    ) -> list[Notification]:
        """Sends the same message to several users, once each."""
        skip = set(exclude_ids)
        created = []
        for recipient in recipients:
            if recipient.id in skip:
                continue
            skip.add(recipient.id)
            created.append(self.create(recipient, title, body, subject_type, **kwargs))
        return created

    def create_system_notification(
        self,
        recipients: Iterable[User],
        title: str,
        body: str,
        severity: NotificationSeverity | str = NotificationSeverity.INFO,
    ) -> list[Notification]:
        """System message with no acting user."""
        return self.create_for_many(
            recipients, title, body, NotificationSubject.SYSTEM, severity=severity
        )

    # EVENTS

    def notify_transfer_requested(self, transfer: Transfer, requester: User) -> list[Notification]:
        """Asks the people who can approve a transfer to review it."""
        target = self.db.get(User, transfer.user_id)
        if target is None:
            return []

        recipients: list[User] = []
        team_leader = self.get_team_leader_for_agent(target.id)
        if team_leader is not None:
            recipients.append(team_leader)
        recipients.extend(self.get_managers_for_user(target))
        recipients.extend(self.get_users_by_role(UserRole.HR))
        recipients.extend(self.get_users_by_role(UserRole.ADMIN))

        return self.create_for_many(
            recipients,
            "Transfer Request Pending Approval",
            f"A {transfer.transfer_type} transfer has been requested for {target.full_name}. "
            "Please review and approve/reject.",
            NotificationSubject.TRANSFER,
            exclude_ids=[requester.id],
            subject_id=transfer.id,
            severity=NotificationSeverity.WARNING,
            actor_id=requester.id,
            requires_action=True,
            view="transfers",
            metadata={"target_user_id": target.id, "transfer_type": transfer.transfer_type},
        )

    def notify_transfer_approved(self, transfer: Transfer, approver: User) -> list[Notification]:
        """Tells the requester and both team leaders that a transfer went through."""
        target = self.db.get(User, transfer.user_id)
        if target is None:
            return []

        created: list[Notification] = []
        notified = {approver.id}
        common = dict(subject_id=transfer.id, actor_id=approver.id, severity=NotificationSeverity.INFO)

        requester = self.db.get(User, transfer.requested_by) if transfer.requested_by else None
        if requester is not None and requester.id not in notified:
            created.append(self.create(
                requester,
                "Transfer Request Approved",
                f"The {transfer.transfer_type} transfer for {target.full_name} has been approved.",
                NotificationSubject.TRANSFER,
                view="transfers",
                **common,
            ))
            notified.add(requester.id)

        new_leader = self.get_team_leader_for_team(transfer.to_team_id)
        old_leader = self.get_team_leader_for_team(transfer.from_team_id)
        if old_leader is None:
            # no team recorded on the request; use the agent's current leader unless that is the new one
            current = self.get_team_leader_for_agent(transfer.user_id)
            if current is not None and (new_leader is None or current.id != new_leader.id):
                old_leader = current
        if old_leader is not None and old_leader.id not in notified:
            created.append(self.create(
                old_leader,
                "Agent Transferred Out",
                f"{target.full_name} has been transferred out of your team. "
                f"Transfer type: {transfer.transfer_type}.",
                NotificationSubject.TRANSFER,
                view="team",
                **common,
            ))
            notified.add(old_leader.id)

        if new_leader is not None and new_leader.id not in notified:
            created.append(self.create(
                new_leader,
                "New Agent Assigned",
                f"{target.full_name} has been transferred to your team. "
                f"Transfer type: {transfer.transfer_type}.",
                NotificationSubject.TRANSFER,
                view="team",
                **common,
            ))
        return created

    def notify_transfer_rejected(
        self, transfer: Transfer, approver: User, reason: str | None = None
    ) -> list[Notification]:
        target = self.db.get(User, transfer.user_id)
        requester = self.db.get(User, transfer.requested_by) if transfer.requested_by else None
        if target is None or requester is None or requester.id == approver.id:
            return []

        body = f"The {transfer.transfer_type} transfer for {target.full_name} has been rejected."
        if reason:
            body += f" Reason: {reason}"
        return [self.create(
            requester,
            "Transfer Request Rejected",
            body,
            NotificationSubject.TRANSFER,
            subject_id=transfer.id,
            severity=NotificationSeverity.WARNING,
            actor_id=approver.id,
            view="transfers",
        )]

    def notify_termination_created(self, termination: Termination, processor: User) -> list[Notification]:
        """
        Routes a termination to the processor (as confirmation), the chain of
        command of the agent, HR and admins.
        """
        target = self.db.get(User, termination.user_id)
        if target is None:
            return []

        recipients: dict[int, User] = {processor.id: processor}

        def add(users: Iterable[User]) -> None:
            for u in users:
                recipients.setdefault(u.id, u)

        if processor.role == UserRole.TEAM_LEADER.value:
            manager = self.get_manager_for_team_leader(processor)
            if manager is not None:
                add([manager])
            else:
                logger.warning("team_leader_without_manager", team_leader=processor.username)
                add(self.get_managers_for_user(target))
        else:
            team_leader = self.get_team_leader_for_agent(target.id)
            if team_leader is not None:
                add([team_leader])
                manager = self.get_manager_for_team_leader(team_leader)
                if manager is not None:
                    add([manager])
            else:
                add(self.get_managers_for_user(target))

        add(self.get_users_by_role(UserRole.HR))
        add(self.get_users_by_role(UserRole.ADMIN))

        title, body, severity = termination_message(
            termination.status_type, target.full_name, termination.comment
        )
        created = []
        for recipient in recipients.values():
            is_processor = recipient.id == processor.id
            created.append(self.create(
                recipient,
                f"{title} - Confirmation" if is_processor else title,
                f"You have recorded: {body}" if is_processor
                else f"{body} (Reported by: {processor.full_name})",
                NotificationSubject.TERMINATION,
                subject_id=termination.id,
                severity=severity,
                actor_id=processor.id,
                view="terminations",
                metadata={
                    "status_type": termination.status_type,
                    "target_user_id": target.id,
                    "target_user_name": target.full_name,
                    "processed_by_role": processor.role,
                    "is_confirmation": is_processor,
                },
            ))
        return created

    def _asset_recipients(self, agent: User) -> list[User]:
        recipients: list[User] = []
        team_leader = self.get_team_leader_for_agent(agent.id)
        if team_leader is not None:
            recipients.append(team_leader)
        recipients.extend(self.get_managers_for_user(agent))
        recipients.extend(self.get_users_by_role(UserRole.HR))
        recipients.extend(self.get_users_by_role(UserRole.ADMIN))
        return recipients

    def notify_asset_lost(
        self, agent: User, asset_type: str, reporter: User, reason: str | None = None
    ) -> list[Notification]:
        body = f"{agent.full_name}'s {asset_type} has been reported as lost."
        if reason:
            body += f" Reason: {reason}"
        return self.create_for_many(
            self._asset_recipients(agent),
            "Asset Reported Lost",
            body,
            NotificationSubject.ASSET,
            exclude_ids=[reporter.id],
            severity=NotificationSeverity.URGENT,
            actor_id=reporter.id,
            requires_action=True,
            view="assets",
            metadata={"target_user_id": agent.id, "asset_type": asset_type},
        )

    def notify_asset_not_returned(self, agent: User, asset_type: str, reporter: User) -> list[Notification]:
        return self.create_for_many(
            self._asset_recipients(agent),
            "Asset Not Returned",
            f"{agent.full_name} has not returned their {asset_type}.",
            NotificationSubject.ASSET,
            exclude_ids=[reporter.id],
            severity=NotificationSeverity.WARNING,
            actor_id=reporter.id,
            view="assets",
            metadata={"target_user_id": agent.id, "asset_type": asset_type},
        )

    def notify_department_change(
        self,
        user: User,
        old_department_id: int | None,
        new_department_id: int | None,
        changed_by: User,
    ) -> list[Notification]:
        old_dept = self.db.get(Department, old_department_id) if old_department_id else None
        new_dept = self.db.get(Department, new_department_id) if new_department_id else None
        old_name = old_dept.name if old_dept else "No Department"
        new_name = new_dept.name if new_dept else "No Department"
        metadata = {
            "target_user_id": user.id,
            "old_department_id": old_department_id,
            "new_department_id": new_department_id,
        }

        created = self.create_for_many(
            self.get_managers_for_user(user),
            "Department Assignment Changed",
            f"{user.full_name} has been moved from {old_name} to {new_name}.",
            NotificationSubject.DEPARTMENT,
            exclude_ids=[changed_by.id],
            actor_id=changed_by.id,
            view="employees",
            metadata=metadata,
        )
        notified = {changed_by.id} | {n.recipient_user_id for n in created}
        team_leader = self.get_team_leader_for_agent(user.id)
        if team_leader is not None and team_leader.id not in notified:
            created.append(self.create(
                team_leader,
                "Agent Department Changed",
                f"Your team member {user.full_name} has been moved from {old_name} to {new_name}.",
                NotificationSubject.DEPARTMENT,
                actor_id=changed_by.id,
                view="team",
                metadata=metadata,
            ))
        return created

    def notify_agent_added_to_team(self, agent: User, team: Team, actor: User) -> Notification | None:
        leader = self.db.get(User, team.leader_id) if team.leader_id else None
        if leader is None or leader.id == actor.id:
            return None
        return self.create(
            leader,
            "New Agent Added to Your Team",
            f"{agent.full_name} has been added to your team.",
            NotificationSubject.TEAM,
            subject_id=team.id,
            actor_id=actor.id,
            view="team",
        )

    def notify_agent_removed_from_team(self, agent: User, team: Team, actor: User) -> Notification | None:
        leader = self.db.get(User, team.leader_id) if team.leader_id else None
        if leader is None or leader.id == actor.id:
            return None
        return self.create(
            leader,
            "Agent Removed from Your Team",
            f"{agent.full_name} has been removed from your team.",
            NotificationSubject.TEAM,
            subject_id=team.id,
            severity=NotificationSeverity.WARNING,
            actor_id=actor.id,
            view="team",
        )

    # INBOX

    def list_for_user(
        self, user_id: int, limit: int = 50, offset: int = 0, unread_only: bool = False
    ) -> list[Notification]:
        query = select(Notification).where(Notification.recipient_user_id == user_id)
        if unread_only:
            query = query.where(Notification.is_read.is_(False))
        query = query.order_by(Notification.created_at.desc(), Notification.id.desc())
        return list(self.db.scalars(query.offset(offset).limit(limit)).all())

    def unread_count(self, user_id: int) -> int:
        return self.db.scalar(
            select(func.count(Notification.id)).where(
                Notification.recipient_user_id == user_id,
                Notification.is_read.is_(False),
            )
        ) or 0

    def mark_read(self, notification_id: int, user_id: int) -> Notification | None:
        """Marks one of the user's notifications as read. Returns None if it is not theirs."""
        notification = self.db.get(Notification, notification_id)
        if notification is None or notification.recipient_user_id != user_id:
            return None
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = datetime.now()
            self.db.flush()
        return notification

    def mark_all_read(self, user_id: int) -> int:
        result = self.db.execute(
            update(Notification)
            .where(Notification.recipient_user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True, read_at=datetime.now())
        )
        return result.rowcount
