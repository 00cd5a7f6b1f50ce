"""Pydantic schemas for assets, daily states, incidents and losses."""

import datetime as dt
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from shared.enums import AssetCondition, AssetState, AssetType


# INVENTORY

class AssetCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    type: str = Field(..., min_length=1, max_length=50)
    serial_number: str | None = Field(None, max_length=100)


class AssetAssign(BaseModel):
    user_id: int


class AssetResponse(BaseModel):
    id: int
    name: str
    type: str
    serial_number: str | None = None
    status: str
    assigned_to_user_id: int | None = None
    assigned_at: dt.datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class AssetDetailsUpsert(BaseModel):
    user_id: int
    asset_type: AssetType
    asset_id: str | None = Field(None, max_length=50, description="Inventory tag, e.g. LP-001")
    serial_number: str | None = Field(None, max_length=100)
    brand_model: str | None = Field(None, max_length=150)
    accessories: list[str] = []
    condition: AssetCondition = AssetCondition.GOOD
    notes: str | None = None


class AssetDetailsResponse(BaseModel):
    id: int
    user_id: int
    asset_type: str
    asset_id: str | None = None
    serial_number: str | None = None
    brand_model: str | None = None
    accessories: list[str] = []
    condition: str
    notes: str | None = None

    model_config = ConfigDict(from_attributes=True)


# DAILY STATES

class BookInRequest(BaseModel):
    """Agent collects equipment at the start of a shift."""

    user_id: int
    asset_type: AssetType
    date: dt.date
    status: Literal["collected", "not_collected"]
    reason: str | None = None


class BookOutRequest(BaseModel):
    """Agent returns equipment at the end of a shift."""

    user_id: int
    asset_type: AssetType
    date: dt.date
    status: Literal["returned", "not_returned", "lost"]
    reason: str | None = None


class MarkFoundRequest(BaseModel):
    user_id: int
    asset_type: AssetType
    date: dt.date
    recovery_reason: str = Field(..., min_length=1)


class DailyStateUpsert(BaseModel):
    user_id: int
    asset_type: AssetType
    date: dt.date
    current_state: AssetState
    reason: str | None = None


class ResetAgentRequest(BaseModel):
    """Team leader wipes today's asset records for one agent."""

    agent_id: int
    password: str = Field(..., min_length=1, description="Team leader's own password")


class DailyResetRequest(BaseModel):
    date: dt.date


class SchedulerTriggerRequest(BaseModel):
    date: dt.date | None = None


class DailyStateResponse(BaseModel):
    id: int
    user_id: int
    date: dt.date
    asset_type: str
    current_state: str
    confirmed_by: int | None = None
    confirmed_at: dt.datetime | None = None
    reason: str | None = None
    agent_name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class StateAuditResponse(BaseModel):
    id: int
    daily_state_id: int | None = None
    user_id: int
    date: dt.date
    asset_type: str
    previous_state: str | None = None
    new_state: str
    reason: str | None = None
    changed_by: int | None = None
    changed_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class ResetDetail(BaseModel):
    user_id: int
    agent_name: str
    asset_type: str
    action: str
    previous_state: str | None = None
    new_state: str
    reason: str


class DailyResetResponse(BaseModel):
    message: str
    reset_count: int
    incidents_created: int
    details: list[ResetDetail]


class ResetStatusResponse(BaseModel):
    date: dt.date
    reset_performed: bool
    total_states: int
    state_breakdown: dict[str, int]
    last_activity: dt.datetime | None = None


class SchedulerStatusResponse(BaseModel):
    is_running: bool
    check_interval_seconds: int
    reset_hour: int
    next_check: dt.datetime | None = None
    last_run: dict[str, Any] | None = None


# LOSSES AND INCIDENTS

class AssetLossCreate(BaseModel):
    user_id: int
    asset_type: AssetType
    date_lost: dt.date
    reason: str = Field(..., min_length=1)


class AssetLossDelete(BaseModel):
    user_id: int
    asset_type: AssetType
    date: dt.date


class AssetLossResponse(BaseModel):
    id: int
    user_id: int
    asset_type: str
    date_lost: dt.date
    reason: str
    reported_by: int | None = None
    status: str
    created_at: dt.datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UnreturnedAssetResponse(BaseModel):
    user_id: int
    agent_name: str
    asset_type: str
    status: str
    date: dt.date
    reason: str | None = None


class IncidentResponse(BaseModel):
    id: int
    user_id: int
    asset_type: str
    incident_type: str
    description: str
    reported_by: int | None = None
    reported_at: dt.datetime
    status: str
    resolution: str | None = None
    resolved_by: int | None = None
    resolved_at: dt.datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class IncidentResolve(BaseModel):
    resolution: str = Field(..., min_length=1)


class HistoricalRecordUpsert(BaseModel):
    date: dt.date
    book_in_records: dict[str, Any] = {}
    book_out_records: dict[str, Any] = {}
    lost_assets: list[Any] = []


class HistoricalRecordResponse(BaseModel):
    id: int
    date: dt.date
    book_in_records: dict[str, Any]
    book_out_records: dict[str, Any]
    lost_assets: list[Any]
    created_at: dt.datetime | None = None

    model_config = ConfigDict(from_attributes=True)
