"""Pydantic schemas for notifications."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NotificationResponse(BaseModel):
    id: int
    recipient_user_id: int
    actor_user_id: int | None = None
    subject_type: str
    subject_id: int | None = None
    severity: str
    title: str
    body: str
    metadata: dict[str, Any] | None = Field(None, validation_alias="metadata_json")
    requires_action: bool
    action_url: str | None = None
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UnreadCountResponse(BaseModel):
    count: int


class MarkAllReadResponse(BaseModel):
    updated: int
