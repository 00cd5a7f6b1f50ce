"""In-app notification model."""

import datetime as dt

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from workforce.models.base import Base, TimestampMixin
from shared.enums import NotificationSeverity


class Notification(Base, TimestampMixin):
    """
    Notification addressed to one user.

    Attributes:
        recipient_user_id: User who sees the notification
        actor_user_id: User whose action produced it (None for system)
        subject_type: NotificationSubject value
        subject_id: Id of the transfer/termination/asset the message refers to
        severity: info, warning or urgent
        requires_action: True if the recipient is expected to act
        action_url: Client route that handles the action
    """

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_recipient_read", "recipient_user_id", "is_read"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    recipient_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    actor_user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))
    subject_type: Mapped[str] = mapped_column(String(20), nullable=False)
    subject_id: Mapped[int | None] = mapped_column(Integer)
    severity: Mapped[str] = mapped_column(String(10), nullable=False, default=NotificationSeverity.INFO.value)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    metadata_json: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)
    requires_action: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    action_url: Mapped[str | None] = mapped_column(String(300))
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    read_at: Mapped[dt.datetime | None] = mapped_column(DateTime)

    def __repr__(self) -> str:
        return f"<Notification {self.id} -> {self.recipient_user_id}: {self.title}>"
