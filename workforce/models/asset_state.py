"""Daily asset state and its audit trail."""

import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, ForeignKey, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce.models.base import Base, TimestampMixin
from shared.enums import AssetState

if TYPE_CHECKING:
    from workforce.models.user import User


class AssetDailyState(Base, TimestampMixin):
    """
    State of one asset type for one agent on one day.

    Attributes:
        user_id: Agent holding the equipment
        date: Working day
        asset_type: laptop, headsets or dongle
        current_state: AssetState value
        confirmed_by: User who confirmed the last transition
        confirmed_at: Time of the last transition
        reason: Free text reason of the last transition
        agent_name: Denormalised display name of the agent
    """

    __tablename__ = "asset_daily_states"
    __table_args__ = (
        UniqueConstraint("user_id", "date", "asset_type", name="uq_asset_daily_state"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    asset_type: Mapped[str] = mapped_column(String(20), nullable=False)
    current_state: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        default=AssetState.READY_FOR_COLLECTION.value,
    )
    confirmed_by: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))
    confirmed_at: Mapped[dt.datetime | None] = mapped_column(DateTime)
    reason: Mapped[str | None] = mapped_column(Text)
    agent_name: Mapped[str | None] = mapped_column(String(200))

    user: Mapped["User"] = relationship(foreign_keys=[user_id])

    def __repr__(self) -> str:
        return f"<AssetDailyState {self.user_id}/{self.date}/{self.asset_type}: {self.current_state}>"


class AssetStateAudit(Base):
    """One transition of an asset daily state."""

    __tablename__ = "asset_state_audit"

    id: Mapped[int] = mapped_column(primary_key=True)
    daily_state_id: Mapped[int | None] = mapped_column(
        ForeignKey("asset_daily_states.id", ondelete="SET NULL"),
        nullable=True,
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    asset_type: Mapped[str] = mapped_column(String(20), nullable=False)
    previous_state: Mapped[str | None] = mapped_column(String(30))
    new_state: Mapped[str] = mapped_column(String(30), nullable=False)
    reason: Mapped[str | None] = mapped_column(Text)
    changed_by: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))
    changed_at: Mapped[dt.datetime] = mapped_column(DateTime, default=func.now(), nullable=False)
