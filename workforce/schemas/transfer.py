"""Pydantic schemas for transfers and terminations."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, model_validator

from shared.enums import AssetReturnStatus, TerminationType, TransferLocation, TransferType
from shared.validators import validate_end_not_before_start


class TransferCreate(BaseModel):
    """Transfer request. Omitted "from" fields default to the user's current placement."""

    user_id: int
    to_department_id: int | None = None
    to_team_id: int | None = None
    to_role: str | None = Field(None, max_length=50, description="UserRole or TransferRole value")
    from_department_id: int | None = None
    from_team_id: int | None = None
    from_role: str | None = Field(None, max_length=50)
    transfer_type: TransferType
    start_date: dt.date
    end_date: dt.date | None = None
    location: TransferLocation | None = None
    reason: str | None = None

    @model_validator(mode="after")
    def check_dates(self) -> "TransferCreate":
        if self.transfer_type == TransferType.TEMPORARY and self.end_date is None:
            raise ValueError("Temporary transfers require an end date")
        validate_end_not_before_start(self.end_date, self.start_date)
        return self


class TransferDecision(BaseModel):
    comment: str | None = Field(None, max_length=1000)


class TransferResponse(BaseModel):
    id: int
    user_id: int
    from_department_id: int | None = None
    to_department_id: int | None = None
    from_team_id: int | None = None
    to_team_id: int | None = None
    from_role: str | None = None
    to_role: str | None = None
    transfer_type: str
    start_date: dt.date
    end_date: dt.date | None = None
    location: str | None = None
    reason: str | None = None
    status: str
    requested_by: int | None = None
    approved_by: int | None = None
    created_at: dt.datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class TransferAuditResponse(BaseModel):
    id: int
    transfer_id: int
    action: str
    previous_status: str | None = None
    new_status: str
    comment: str | None = None
    action_by: int | None = None
    action_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class TerminationCreate(BaseModel):
    user_id: int
    status_type: TerminationType
    termination_date: dt.date
    last_working_day: dt.date | None = None
    effective_date: dt.date | None = None
    reason: str | None = None
    comment: str | None = None
    asset_return_status: AssetReturnStatus = AssetReturnStatus.PENDING


class TerminationResponse(BaseModel):
    id: int
    user_id: int
    status_type: str
    termination_date: dt.date
    last_working_day: dt.date | None = None
    effective_date: dt.date | None = None
    reason: str | None = None
    comment: str | None = None
    asset_return_status: str
    processed_by: int | None = None
    created_at: dt.datetime | None = None

    model_config = ConfigDict(from_attributes=True)


