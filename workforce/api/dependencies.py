"""Annotated shortcuts used in route signatures."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from workforce.core.database import get_db
from workforce.core.dependencies import get_current_user
from workforce.models.user import User
from workforce.services.notification_service import NotificationService


def get_notification_service(db: Annotated[Session, Depends(get_db)]) -> NotificationService:
    # same session as the route, so notifications commit with the change that caused them
    return NotificationService(db)


DBSession = Annotated[Session, Depends(get_db)]
CurrentUser = Annotated[User, Depends(get_current_user)]
NotificationSvc = Annotated[NotificationService, Depends(get_notification_service)]
