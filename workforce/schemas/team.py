"""Pydantic schemas for teams."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    leader_id: int | None = None
    department_id: int | None = None


class TeamResponse(BaseModel):
    id: int
    name: str
    leader_id: int | None = None
    department_id: int | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class TeamMemberCreate(BaseModel):
    team_id: int
    user_id: int


class TeamMemberResponse(BaseModel):
    id: int
    team_id: int
    user_id: int
    joined_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
