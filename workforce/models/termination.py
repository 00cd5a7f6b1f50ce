"""Termination model."""

import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce.models.base import Base, TimestampMixin
from shared.enums import AssetReturnStatus

if TYPE_CHECKING:
    from workforce.models.user import User


class Termination(Base, TimestampMixin):
    """
    End of employment or disciplinary status change (AWOL, suspension).

    A record is "active" while its termination date or last working day
    has not yet passed.
    """

    __tablename__ = "terminations"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status_type: Mapped[str] = mapped_column(String(20), nullable=False)
    termination_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    last_working_day: Mapped[dt.date | None] = mapped_column(Date)
    effective_date: Mapped[dt.date | None] = mapped_column(Date)
    reason: Mapped[str | None] = mapped_column(Text)
    comment: Mapped[str | None] = mapped_column(Text)
    asset_return_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AssetReturnStatus.PENDING.value,
    )
    processed_by: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))

    user: Mapped["User"] = relationship(foreign_keys=[user_id])

    def is_active_on(self, day: dt.date) -> bool:
        """True if the record still applies on the given day."""
        if self.termination_date >= day:
            return True
        return self.last_working_day is not None and self.last_working_day >= day

    def __repr__(self) -> str:
        return f"<Termination {self.id}: user {self.user_id} ({self.status_type})>"
