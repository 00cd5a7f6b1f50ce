"""Asset inventory, loss and incident models."""

import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Date, DateTime, ForeignKey, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce.models.base import Base, TimestampMixin
from shared.enums import AssetCondition, AssetStatus, IncidentStatus, LossStatus

if TYPE_CHECKING:
    from workforce.models.user import User


class Asset(Base, TimestampMixin):
    """Inventory item that can be assigned to a user."""

    __tablename__ = "assets"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    serial_number: Mapped[str | None] = mapped_column(String(100), unique=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=AssetStatus.AVAILABLE.value)
    assigned_to_user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    assigned_at: Mapped[dt.datetime | None] = mapped_column(DateTime)

    assigned_to: Mapped["User | None"] = relationship(foreign_keys=[assigned_to_user_id])

    def __repr__(self) -> str:
        return f"<Asset {self.id}: {self.type} {self.serial_number} ({self.status})>"


class AssetDetails(Base, TimestampMixin):
    """Identifying details of the equipment an agent books every day."""

    __tablename__ = "asset_details"
    __table_args__ = (UniqueConstraint("user_id", "asset_type", name="uq_asset_details_user_type"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    asset_type: Mapped[str] = mapped_column(String(20), nullable=False)
    asset_id: Mapped[str | None] = mapped_column(String(50), comment="Inventory tag, e.g. LP-001")
    serial_number: Mapped[str | None] = mapped_column(String(100))
    brand_model: Mapped[str | None] = mapped_column(String(150))
    accessories: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    condition: Mapped[str] = mapped_column(String(20), nullable=False, default=AssetCondition.GOOD.value)
    notes: Mapped[str | None] = mapped_column(Text)


class AssetLossRecord(Base, TimestampMixin):
    """Report that an agent lost a piece of equipment."""

    __tablename__ = "asset_loss_records"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    asset_type: Mapped[str] = mapped_column(String(20), nullable=False)
    date_lost: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    reported_by: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=LossStatus.REPORTED.value)

    user: Mapped["User"] = relationship(foreign_keys=[user_id])


class AssetIncident(Base, TimestampMixin):
    """Incident raised for an asset: lost, unreturned, damaged or reset."""

    __tablename__ = "asset_incidents"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    asset_type: Mapped[str] = mapped_column(String(20), nullable=False)
    incident_type: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    reported_by: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))
    reported_at: Mapped[dt.datetime] = mapped_column(DateTime, default=func.now(), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=IncidentStatus.REPORTED.value)
    resolution: Mapped[str | None] = mapped_column(Text)
    resolved_by: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))
    resolved_at: Mapped[dt.datetime | None] = mapped_column(DateTime)


class HistoricalAssetRecord(Base, TimestampMixin):
    """Snapshot of a day's book-in/book-out activity."""

    __tablename__ = "historical_asset_records"

    id: Mapped[int] = mapped_column(primary_key=True)
    date: Mapped[dt.date] = mapped_column(Date, unique=True, nullable=False)
    book_in_records: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    book_out_records: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    lost_assets: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
