"""Pydantic schemas for divisions, departments, sections and assignments."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from shared.enums import OnboardingStatus


class DivisionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    description: str | None = None
    is_active: bool = True


class DivisionUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=150)
    description: str | None = None
    is_active: bool | None = None


class DivisionResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    is_active: bool
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class DepartmentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    description: str | None = None
    division_id: int | None = None


class DepartmentUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=150)
    description: str | None = None
    division_id: int | None = None


class DepartmentResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    division_id: int | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class SectionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    description: str | None = None
    department_id: int


class SectionUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=150)
    description: str | None = None
    department_id: int | None = None


class SectionResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    department_id: int
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class AssignmentCreate(BaseModel):
    """Place one user in a division/department/section."""

    user_id: int
    division_id: int
    department_id: int
    section_id: int | None = None


class BulkAssignmentCreate(BaseModel):
    """Place several users in the same division/department/section."""

    user_ids: list[int] = Field(..., min_length=1)
    division_id: int
    department_id: int
    section_id: int | None = None


class BulkAssignmentDelete(BaseModel):
    assignment_ids: list[int] = Field(..., min_length=1)


class AssignmentResponse(BaseModel):
    id: int
    user_id: int
    division_id: int
    department_id: int
    section_id: int | None = None
    assigned_by: int | None = None
    assigned_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class BulkItemResult(BaseModel):
    """Outcome of one item of a bulk operation."""

    id: int
    success: bool
    error: str | None = None
    assignment_id: int | None = None


class BulkOperationResponse(BaseModel):
    """Per-item results and counts of a bulk operation."""

    results: list[BulkItemResult]
    total_requested: int
    success_count: int
    failure_count: int
    message: str


class PositionResponse(BaseModel):
    id: int
    title: str
    subtitle: str | None = None
    parent_id: int | None = None
    division: str | None = None
    level: int
    display_order: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class PositionNode(PositionResponse):
    children: list["PositionNode"] = []


class OnboardingRequestCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    division_id: int
    department_id: int
    section_id: int | None = None


class OnboardingStatusUpdate(BaseModel):
    status: OnboardingStatus


class OnboardingRequestResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    division_id: int
    department_id: int
    section_id: int | None = None
    requested_by: int | None = None
    status: str
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
