"""Asset inventory, equipment details, losses, incidents and history routes."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from workforce.api.dependencies import CurrentUser, DBSession
from workforce.core.dependencies import (
    ensure_self_or_roles,
    require_asset_manager,
    require_asset_oversight,
    require_hr_admin,
)
from workforce.models.user import User
from workforce.schemas.asset import (
    AssetAssign,
    AssetCreate,
    AssetDetailsResponse,
    AssetDetailsUpsert,
    AssetLossCreate,
    AssetLossDelete,
    AssetLossResponse,
    AssetResponse,
    HistoricalRecordResponse,
    HistoricalRecordUpsert,
    IncidentResolve,
    IncidentResponse,
    UnreturnedAssetResponse,
)
from workforce.schemas.responses import SuccessResponse
from workforce.services.asset_service import AssetService
from shared.constants import ASSET_OVERSIGHT_ROLES
from shared.enums import IncidentStatus

router = APIRouter(tags=["assets"])


# INVENTORY

@router.get("/assets", response_model=list[AssetResponse])
async def list_assets(db: DBSession, current_user: User = Depends(require_asset_oversight)):
    return AssetService(db).list_assets()


@router.get("/assets/unreturned", response_model=list[UnreturnedAssetResponse], include_in_schema=False)
@router.get("/unreturned-assets", response_model=list[UnreturnedAssetResponse])
async def unreturned_assets(db: DBSession, current_user: User = Depends(require_asset_oversight)):
    """
    Lost equipment and equipment not returned yet, sorted by agent name.

    Returns:
    - Rows with **status** "Lost" (open loss records) or "Not Returned Yet"
      (daily states in not_returned). An asset already listed as lost is not
      listed again as not returned.
    """
    return AssetService(db).unreturned_assets()


@router.get("/unreturned-assets/user/{user_id}")
async def user_has_unreturned(user_id: int, db: DBSession, current_user: CurrentUser):
    ensure_self_or_roles(current_user, user_id, ASSET_OVERSIGHT_ROLES)
    return {"has_unreturned_assets": AssetService(db).has_unreturned(user_id)}


@router.get("/assets/user/{user_id}", response_model=list[AssetResponse])
async def user_assets(user_id: int, db: DBSession, current_user: CurrentUser):
    ensure_self_or_roles(current_user, user_id, ASSET_OVERSIGHT_ROLES)
    return AssetService(db).list_assets(user_id=user_id)


@router.post("/assets", response_model=AssetResponse, status_code=status.HTTP_201_CREATED)
async def create_asset(
    data: AssetCreate,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    """
    Errors:
    - **400 Bad Request**: Serial number already registered.
    """
    asset = AssetService(db, current_user).create_asset(data.model_dump())
    db.commit()
    return asset


@router.patch("/assets/{asset_id}/assign", response_model=AssetResponse)
async def assign_asset(
    asset_id: int,
    data: AssetAssign,
    db: DBSession,
    current_user: User = Depends(require_asset_manager),
):
    asset = AssetService(db, current_user).assign_asset(asset_id, data.user_id)
    db.commit()
    return asset


# DETAILS

@router.get("/asset-details/user/{user_id}", response_model=list[AssetDetailsResponse])
async def user_asset_details(user_id: int, db: DBSession, current_user: CurrentUser):
    ensure_self_or_roles(current_user, user_id, ASSET_OVERSIGHT_ROLES)
    return AssetService(db).details_for_user(user_id)


@router.post("/asset-details", response_model=AssetDetailsResponse)
async def upsert_asset_details(
    data: AssetDetailsUpsert,
    db: DBSession,
    current_user: User = Depends(require_asset_manager),
):
    """Creates or replaces the details of one asset type for an agent."""
    details = AssetService(db, current_user).upsert_details(data.model_dump())
    db.commit()
    return details


@router.delete("/asset-details/{details_id}", response_model=SuccessResponse)
async def delete_asset_details(
    details_id: int,
    db: DBSession,
    current_user: User = Depends(require_asset_manager),
):
    AssetService(db, current_user).delete_details(details_id)
    db.commit()
    return SuccessResponse(message="Asset details deleted")


# LOSS RECORDS

@router.post("/asset-loss", response_model=AssetLossResponse, status_code=status.HTTP_201_CREATED)
async def record_asset_loss(
    data: AssetLossCreate,
    db: DBSession,
    current_user: User = Depends(require_asset_manager),
):
    """
    Records a lost asset. The agent's managers receive an urgent notification.

    Errors:
    - **404 Not Found**: Agent does not exist.
    """
    record = AssetService(db, current_user).record_loss(
        data.user_id, data.asset_type.value, data.date_lost, data.reason
    )
    db.commit()
    return record


@router.get("/asset-loss", response_model=list[AssetLossResponse])
async def list_asset_losses(
    db: DBSession,
    day: date | None = Query(None, alias="date", description="Only losses on this day"),
    current_user: User = Depends(require_asset_oversight),
):
    return AssetService(db).list_losses(day)


@router.delete("/asset-loss", response_model=SuccessResponse)
async def delete_asset_loss(
    data: AssetLossDelete,
    db: DBSession,
    current_user: User = Depends(require_asset_manager),
):
    removed = AssetService(db, current_user).delete_loss(data.user_id, data.asset_type.value, data.date)
    db.commit()
    return SuccessResponse(message=f"Deleted {removed} loss record(s)")


# HISTORICAL RECORDS

@router.get("/historical-asset-records", response_model=list[HistoricalRecordResponse])
async def list_historical_records(
    db: DBSession,
    day: date | None = Query(None, alias="date"),
    current_user: User = Depends(require_asset_oversight),
):
    return AssetService(db).historical_records(day)


@router.post("/historical-asset-records", response_model=HistoricalRecordResponse)
async def upsert_historical_record(
    data: HistoricalRecordUpsert,
    db: DBSession,
    current_user: User = Depends(require_asset_oversight),
):
    """Stores the snapshot for a day, replacing an existing one."""
    record = AssetService(db, current_user).upsert_historical_record(data.model_dump())
    db.commit()
    return record


# INCIDENTS

@router.get("/asset-incidents", response_model=list[IncidentResponse])
async def list_incidents(
    db: DBSession,
    user_id: int | None = Query(None),
    incident_status: IncidentStatus | None = Query(None, alias="status"),
    current_user: User = Depends(require_asset_oversight),
):
    return AssetService(db).list_incidents(
        user_id=user_id,
        status=incident_status.value if incident_status else None,
    )


@router.patch("/asset-incidents/{incident_id}/resolve", response_model=IncidentResponse)
async def resolve_incident(
    incident_id: int,
    data: IncidentResolve,
    db: DBSession,
    current_user: User = Depends(require_asset_manager),
):
    incident = AssetService(db, current_user).resolve_incident(incident_id, data.resolution)
    db.commit()
    return incident
