"""Notification inbox routes."""

from fastapi import APIRouter, HTTPException, Query, status

from workforce.api.dependencies import CurrentUser, DBSession, NotificationSvc
from workforce.schemas.notification import MarkAllReadResponse, NotificationResponse, UnreadCountResponse

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    current_user: CurrentUser,
    service: NotificationSvc,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    unread_only: bool = Query(False),
):
    """The current user's notifications, newest first."""
    return service.list_for_user(current_user.id, limit=limit, offset=offset, unread_only=unread_only)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(current_user: CurrentUser, service: NotificationSvc):
    return {"count": service.unread_count(current_user.id)}


@router.patch("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(db: DBSession, current_user: CurrentUser, service: NotificationSvc):
    updated = service.mark_all_read(current_user.id)
    db.commit()
    return {"updated": updated}


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: int,
    db: DBSession,
    current_user: CurrentUser,
    service: NotificationSvc,
):
    """
    Errors:
    - **404 Not Found**: Notification does not exist or belongs to someone else.
    """
    notification = service.mark_read(notification_id, current_user.id)
    if notification is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    db.commit()
    return notification
