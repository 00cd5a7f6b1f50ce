"""Transfer models."""

import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce.models.base import Base, TimestampMixin
from shared.enums import TransferStatus

if TYPE_CHECKING:
    from workforce.models.user import User


class Transfer(Base, TimestampMixin):
    """
    Request to move an employee to another department, team or role.

    Attributes:
        transfer_type: temporary or permanent
        start_date: First day in the new placement
        end_date: Last day of a temporary transfer
        status: pending, approved, rejected or completed
        requested_by: User who raised the request
        approved_by: User who approved or rejected it
    """

    __tablename__ = "transfers"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    from_department_id: Mapped[int | None] = mapped_column(ForeignKey("departments.id", ondelete="SET NULL"))
    to_department_id: Mapped[int | None] = mapped_column(ForeignKey("departments.id", ondelete="SET NULL"))
    from_team_id: Mapped[int | None] = mapped_column(ForeignKey("teams.id", ondelete="SET NULL"))
    to_team_id: Mapped[int | None] = mapped_column(ForeignKey("teams.id", ondelete="SET NULL"))
    from_role: Mapped[str | None] = mapped_column(String(50))
    to_role: Mapped[str | None] = mapped_column(String(50))
    transfer_type: Mapped[str] = mapped_column(String(20), nullable=False)
    start_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    end_date: Mapped[dt.date | None] = mapped_column(Date)
    location: Mapped[str | None] = mapped_column(String(50))
    reason: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=TransferStatus.PENDING.value, index=True)
    requested_by: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))
    approved_by: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))

    user: Mapped["User"] = relationship(foreign_keys=[user_id])
    audit_entries: Mapped[list["TransferAudit"]] = relationship(
        back_populates="transfer",
        cascade="all, delete-orphan",
        order_by="desc(TransferAudit.action_at)",
    )

    def __repr__(self) -> str:
        return f"<Transfer {self.id}: user {self.user_id} ({self.status})>"


class TransferAudit(Base):
    """Workflow action taken on a transfer."""

    __tablename__ = "transfer_audit"

    id: Mapped[int] = mapped_column(primary_key=True)
    transfer_id: Mapped[int] = mapped_column(
        ForeignKey("transfers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    previous_status: Mapped[str | None] = mapped_column(String(20))
    new_status: Mapped[str] = mapped_column(String(20), nullable=False)
    comment: Mapped[str | None] = mapped_column(Text)
    action_by: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))
    action_at: Mapped[dt.datetime] = mapped_column(DateTime, default=func.now(), nullable=False)

    transfer: Mapped["Transfer"] = relationship(back_populates="audit_entries")
