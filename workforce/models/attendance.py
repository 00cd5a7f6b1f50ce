"""Attendance models."""

import datetime as dt
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, ForeignKey, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce.models.base import Base, TimestampMixin
from shared.enums import AttendanceStatus

if TYPE_CHECKING:
    from workforce.models.user import User


class Attendance(Base, TimestampMixin):
    """
    One attendance record per user per working day.

    Attributes:
        user_id: Employee
        date: Working day
        clock_in: Clock-in time (None for absences)
        clock_out: Clock-out time
        status: AttendanceStatus value
        hours_worked: Hours between clock-in and clock-out
    """

    __tablename__ = "attendance"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    clock_in: Mapped[dt.datetime | None] = mapped_column(DateTime)
    clock_out: Mapped[dt.datetime | None] = mapped_column(DateTime)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=AttendanceStatus.PRESENT.value)
    hours_worked: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("0"))

    user: Mapped["User"] = relationship(foreign_keys=[user_id])
    audit_entries: Mapped[list["AttendanceAudit"]] = relationship(
        back_populates="attendance",
        cascade="all, delete-orphan",
        order_by="desc(AttendanceAudit.changed_at)",
    )

    def __repr__(self) -> str:
        return f"<Attendance {self.id}: user {self.user_id} on {self.date} ({self.status})>"


class AttendanceAudit(Base):
    """Status change of an attendance record."""

    __tablename__ = "attendance_audit"

    id: Mapped[int] = mapped_column(primary_key=True)
    attendance_id: Mapped[int] = mapped_column(
        ForeignKey("attendance.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    previous_status: Mapped[str | None] = mapped_column(String(20))
    new_status: Mapped[str] = mapped_column(String(20), nullable=False)
    reason: Mapped[str | None] = mapped_column(Text)
    changed_by: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))
    changed_at: Mapped[dt.datetime] = mapped_column(DateTime, default=func.now(), nullable=False)

    attendance: Mapped["Attendance"] = relationship(back_populates="audit_entries")
