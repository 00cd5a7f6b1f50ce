"""Asset inventory, per-agent equipment details, losses, incidents and history."""

from datetime import date, datetime
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from workforce.models.asset import (
    Asset,
    AssetDetails,
    AssetIncident,
    AssetLossRecord,
    HistoricalAssetRecord,
)
from workforce.models.asset_state import AssetDailyState
from workforce.models.user import User
from workforce.services.notification_service import NotificationService
from shared.enums import (
    AssetCondition,
    AssetState,
    AssetStatus,
    IncidentStatus,
    LossStatus,
    get_asset_state_label,
)
from shared.exceptions import AssetNotFoundError, ConflictError, NotFoundError, UserNotFoundError

logger = structlog.get_logger(__name__)


class AssetService:
    """Service for inventory items and the records kept about agents' equipment."""

    def __init__(self, db: Session, acting_user: User | None = None):
        self.db = db
        self.acting_user = acting_user

    def _user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    # INVENTORY

    def list_assets(self, user_id: int | None = None) -> list[Asset]:
        query = select(Asset)
        if user_id is not None:
            query = query.where(Asset.assigned_to_user_id == user_id)
        return list(self.db.scalars(query.order_by(Asset.type, Asset.name)).all())

    def create_asset(self, data: dict[str, Any]) -> Asset:
        """
        Raises:
            ConflictError: If the serial number is already registered
        """
        serial = data.get("serial_number")
        if serial and self.db.scalars(select(Asset).where(Asset.serial_number == serial)).first():
            raise ConflictError(f"Asset with serial number '{serial}' already exists")
        asset = Asset(**data, status=AssetStatus.AVAILABLE.value)
        self.db.add(asset)
        self.db.flush()
        return asset

    def assign_asset(self, asset_id: int, user_id: int) -> Asset:
        asset = self.db.get(Asset, asset_id)
        if asset is None:
            raise AssetNotFoundError()
        self._user(user_id)
        asset.assigned_to_user_id = user_id
        asset.assigned_at = datetime.now()
        asset.status = AssetStatus.ASSIGNED.value
        self.db.flush()
        logger.info("asset_assigned", asset_id=asset.id, user_id=user_id)
        return asset

    # DETAILS

    def details_for_user(self, user_id: int) -> list[AssetDetails]:
        return list(self.db.scalars(
            select(AssetDetails).where(AssetDetails.user_id == user_id).order_by(AssetDetails.asset_type)
        ).all())

    def upsert_details(self, data: dict[str, Any]) -> AssetDetails:
        """Creates or replaces the details of one asset type for a user."""
        data = dict(data)
        self._user(data["user_id"])
        data["asset_type"] = getattr(data["asset_type"], "value", data["asset_type"])
        data["condition"] = AssetCondition(data.get("condition") or AssetCondition.GOOD).value

        details = self.db.scalars(
            select(AssetDetails).where(
                AssetDetails.user_id == data["user_id"],
                AssetDetails.asset_type == data["asset_type"],
            )
        ).first()
        if details is None:
            details = AssetDetails(**data)
            self.db.add(details)
        else:
            for key, value in data.items():
                setattr(details, key, value)
        self.db.flush()
        return details

    def delete_details(self, details_id: int) -> None:
        details = self.db.get(AssetDetails, details_id)
        if details is None:
            raise NotFoundError("Asset details not found")
        self.db.delete(details)
        self.db.flush()

    # LOSS RECORDS

    def list_losses(self, day: date | None = None) -> list[AssetLossRecord]:
        query = select(AssetLossRecord)
        if day is not None:
            query = query.where(AssetLossRecord.date_lost == day)
        return list(self.db.scalars(query.order_by(AssetLossRecord.date_lost.desc(), AssetLossRecord.id)).all())

    def record_loss(self, user_id: int, asset_type: str, date_lost: date, reason: str) -> AssetLossRecord:
        """
        Records a lost asset and alerts the agent's managers.

        Raises:
            UserNotFoundError: If the agent does not exist
        """
        agent = self._user(user_id)
        record = AssetLossRecord(
            user_id=user_id,
            asset_type=getattr(asset_type, "value", asset_type),
            date_lost=date_lost,
            reason=reason,
            reported_by=self.acting_user.id if self.acting_user else None,
            status=LossStatus.REPORTED.value,
        )
        self.db.add(record)
        self.db.flush()
        if self.acting_user is not None:
            NotificationService(self.db).notify_asset_lost(agent, record.asset_type, self.acting_user, reason)
        logger.info("asset_loss_recorded", user_id=user_id, asset_type=record.asset_type, date_lost=str(date_lost))
        return record

    def delete_loss(self, user_id: int, asset_type: str, day: date) -> int:
        """
        Deletes the loss records of a user/asset type on a day.

        Returns:
            Number of records removed

        Raises:
            NotFoundError: If nothing matched
        """
        records = self.db.scalars(
            select(AssetLossRecord).where(
                AssetLossRecord.user_id == user_id,
                AssetLossRecord.asset_type == getattr(asset_type, "value", asset_type),
                AssetLossRecord.date_lost == day,
            )
        ).all()
        if not records:
            raise NotFoundError("Asset loss record not found")
        for record in records:
            self.db.delete(record)
        self.db.flush()
        return len(records)

    # UNRETURNED

    def unreturned_assets(self) -> list[dict[str, Any]]:
        """
        Combined list of lost and not-yet-returned equipment.

        A not_returned daily state is skipped when the same user and asset
        type is already listed as lost.

        Returns:
            Rows with user_id, agent_name, asset_type, status, date and reason,
            sorted by agent name
        """
        rows: list[dict[str, Any]] = []
        lost_keys: set[tuple[int, str]] = set()

        losses = self.db.execute(
            select(AssetLossRecord, User)
            .join(User, User.id == AssetLossRecord.user_id)
            .where(AssetLossRecord.status == LossStatus.REPORTED.value)
        ).all()
        for record, user in losses:
            lost_keys.add((record.user_id, record.asset_type))
            rows.append({
                "user_id": record.user_id,
                "agent_name": user.full_name,
                "asset_type": record.asset_type,
                "status": get_asset_state_label(AssetState.LOST.value),
                "date": record.date_lost,
                "reason": record.reason,
            })

        states = self.db.scalars(
            select(AssetDailyState).where(AssetDailyState.current_state == AssetState.NOT_RETURNED.value)
        ).all()
        seen: set[tuple[int, str]] = set()
        for state in sorted(states, key=lambda s: s.date, reverse=True):
            key = (state.user_id, state.asset_type)
            if key in lost_keys or key in seen:
                continue
            seen.add(key)
            rows.append({
                "user_id": state.user_id,
                "agent_name": state.agent_name or (state.user.full_name if state.user else ""),
                "asset_type": state.asset_type,
                "status": get_asset_state_label(AssetState.NOT_RETURNED.value),
                "date": state.date,
                "reason": state.reason,
            })

        return sorted(rows, key=lambda row: (row["agent_name"].lower(), row["asset_type"]))

    def has_unreturned(self, user_id: int) -> bool:
        return any(row["user_id"] == user_id for row in self.unreturned_assets())

    # HISTORICAL RECORDS

    def historical_records(self, day: date | None = None) -> list[HistoricalAssetRecord]:
        query = select(HistoricalAssetRecord)
        if day is not None:
            query = query.where(HistoricalAssetRecord.date == day)
        return list(self.db.scalars(query.order_by(HistoricalAssetRecord.date.desc())).all())

    def upsert_historical_record(self, data: dict[str, Any]) -> HistoricalAssetRecord:
        record = self.db.scalars(
            select(HistoricalAssetRecord).where(HistoricalAssetRecord.date == data["date"])
        ).first()
        if record is None:
            record = HistoricalAssetRecord(**data)
            self.db.add(record)
        else:
            record.book_in_records = data.get("book_in_records", {})
            record.book_out_records = data.get("book_out_records", {})
            record.lost_assets = data.get("lost_assets", [])
        self.db.flush()
        return record

    # INCIDENTS

    def list_incidents(self, user_id: int | None = None, status: str | None = None) -> list[AssetIncident]:
        query = select(AssetIncident)
        if user_id is not None:
            query = query.where(AssetIncident.user_id == user_id)
        if status is not None:
            query = query.where(AssetIncident.status == status)
        return list(self.db.scalars(query.order_by(AssetIncident.reported_at.desc(), AssetIncident.id.desc())).all())

    def resolve_incident(self, incident_id: int, resolution: str) -> AssetIncident:
        incident = self.db.get(AssetIncident, incident_id)
        if incident is None:
            raise NotFoundError("Incident not found")
        incident.status = IncidentStatus.RESOLVED.value
        incident.resolution = resolution
        incident.resolved_by = self.acting_user.id if self.acting_user else None
        incident.resolved_at = datetime.now()
        self.db.flush()
        return incident
