"""Organisation routes: hierarchy, assignments, organogram and onboarding."""

from fastapi import APIRouter, Depends, Query, status

from workforce.api.dependencies import CurrentUser, DBSession
from workforce.core.dependencies import require_admin, require_hr_admin
from workforce.models.user import User
from workforce.schemas.organization import (
    AssignmentCreate,
    AssignmentResponse,
    BulkAssignmentCreate,
    BulkAssignmentDelete,
    BulkOperationResponse,
    DepartmentCreate,
    DepartmentResponse,
    DepartmentUpdate,
    DivisionCreate,
    DivisionResponse,
    DivisionUpdate,
    OnboardingRequestCreate,
    OnboardingRequestResponse,
    OnboardingStatusUpdate,
    PositionNode,
    PositionResponse,
    SectionCreate,
    SectionResponse,
    SectionUpdate,
)
from workforce.schemas.responses import SuccessResponse
from workforce.services.organization_service import OrganizationService

router = APIRouter(tags=["organization"])


# DIVISIONS

@router.get("/divisions", response_model=list[DivisionResponse])
async def list_divisions(db: DBSession, current_user: CurrentUser):
    return OrganizationService(db).list_divisions()


@router.post("/divisions", response_model=DivisionResponse, status_code=status.HTTP_201_CREATED)
async def create_division(
    data: DivisionCreate,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    division = OrganizationService(db, current_user).create_division(data.model_dump())
    db.commit()
    return division


@router.patch("/divisions/{division_id}", response_model=DivisionResponse)
async def update_division(
    division_id: int,
    data: DivisionUpdate,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    division = OrganizationService(db, current_user).update_division(
        division_id, data.model_dump(exclude_unset=True)
    )
    db.commit()
    return division


@router.delete("/divisions/{division_id}", response_model=SuccessResponse)
async def delete_division(
    division_id: int,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    OrganizationService(db, current_user).delete_division(division_id)
    db.commit()
    return SuccessResponse(message="Division deleted")


# DEPARTMENTS

@router.get("/departments", response_model=list[DepartmentResponse])
async def list_departments(
    db: DBSession,
    current_user: CurrentUser,
    division_id: int | None = Query(None, description="Only departments of this division"),
):
    return OrganizationService(db).list_departments(division_id)


@router.post("/departments", response_model=DepartmentResponse, status_code=status.HTTP_201_CREATED)
async def create_department(
    data: DepartmentCreate,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    department = OrganizationService(db, current_user).create_department(data.model_dump())
    db.commit()
    return department


@router.patch("/departments/{department_id}", response_model=DepartmentResponse)
async def update_department(
    department_id: int,
    data: DepartmentUpdate,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    department = OrganizationService(db, current_user).update_department(
        department_id, data.model_dump(exclude_unset=True)
    )
    db.commit()
    return department


@router.delete("/departments/{department_id}", response_model=SuccessResponse)
async def delete_department(
    department_id: int,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    OrganizationService(db, current_user).delete_department(department_id)
    db.commit()
    return SuccessResponse(message="Department deleted")


# SECTIONS

@router.get("/sections", response_model=list[SectionResponse])
async def list_sections(
    db: DBSession,
    current_user: CurrentUser,
    department_id: int | None = Query(None, description="Only sections of this department"),
):
    return OrganizationService(db).list_sections(department_id)


@router.post("/sections", response_model=SectionResponse, status_code=status.HTTP_201_CREATED)
async def create_section(
    data: SectionCreate,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    """
    Errors:
    - **404 Not Found**: Department does not exist.
    """
    section = OrganizationService(db, current_user).create_section(data.model_dump())
    db.commit()
    return section


@router.patch("/sections/{section_id}", response_model=SectionResponse)
async def update_section(
    section_id: int,
    data: SectionUpdate,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    section = OrganizationService(db, current_user).update_section(
        section_id, data.model_dump(exclude_unset=True)
    )
    db.commit()
    return section


@router.delete("/sections/{section_id}", response_model=SuccessResponse)
async def delete_section(
    section_id: int,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    OrganizationService(db, current_user).delete_section(section_id)
    db.commit()
    return SuccessResponse(message="Section deleted")


# ASSIGNMENTS

@router.get("/user-department-assignments", response_model=list[AssignmentResponse])
async def list_assignments(
    db: DBSession,
    current_user: CurrentUser,
    user_id: int | None = Query(None, description="Only assignments of this user"),
):
    return OrganizationService(db).list_assignments(user_id)


@router.post(
    "/user-department-assignments",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_assignment(
    data: AssignmentCreate,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    """
    Places a user in a division, department and optional section.

    Errors:
    - **400 Bad Request**: Inconsistent combination or duplicate assignment.
    - **404 Not Found**: User, division, department or section does not exist.
    """
    assignment = OrganizationService(db, current_user).create_assignment(**data.model_dump())
    db.commit()
    return assignment


@router.post("/user-department-assignments/bulk", response_model=BulkOperationResponse)
async def bulk_create_assignments(
    data: BulkAssignmentCreate,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    """
    Assigns several users to the same combination.

    Each item succeeds or fails on its own; failed items are listed with the
    reason so they can be retried.

    Returns:
    - **results**: [{id, success, error, assignment_id}]
    - **total_requested**, **success_count**, **failure_count**, **message**
    """
    result = OrganizationService(db, current_user).bulk_create_assignments(
        data.user_ids, data.division_id, data.department_id, data.section_id
    )
    db.commit()
    return result


@router.post("/user-department-assignments/bulk-delete", response_model=BulkOperationResponse)
async def bulk_delete_assignments(
    data: BulkAssignmentDelete,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    result = OrganizationService(db, current_user).bulk_delete_assignments(data.assignment_ids)
    db.commit()
    return result


@router.post("/user-department-assignments/auto-assign", response_model=BulkOperationResponse)
async def auto_assign_agents(
    db: DBSession,
    current_user: User = Depends(require_admin),
):
    """
    Assigns every unassigned active agent, round-robin over the valid
    division/department/section combinations.

    Errors:
    - **400 Bad Request**: No valid combination exists.
    """
    result = OrganizationService(db, current_user).auto_assign_agents()
    db.commit()
    return result


@router.delete("/user-department-assignments/{assignment_id}", response_model=SuccessResponse)
async def delete_assignment(
    assignment_id: int,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    OrganizationService(db, current_user).delete_assignment(assignment_id)
    db.commit()
    return SuccessResponse(message="Assignment deleted")


# ORGANOGRAM

@router.get("/organizational-positions", response_model=list[PositionResponse])
async def list_positions(db: DBSession, current_user: CurrentUser):
    """Active positions ordered by level and display order."""
    return OrganizationService(db).list_positions()


@router.get("/organizational-positions/tree", response_model=list[PositionNode])
async def position_tree(db: DBSession, current_user: CurrentUser):
    """Active positions nested under their parents."""
    return OrganizationService(db).position_tree()


# ONBOARDING

@router.post(
    "/onboarding-requests",
    response_model=OnboardingRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_onboarding_request(
    data: OnboardingRequestCreate,
    db: DBSession,
    current_user: CurrentUser,
):
    request = OrganizationService(db, current_user).create_onboarding_request(data.model_dump())
    db.commit()
    return request


@router.get("/onboarding-requests/my-requests", response_model=list[OnboardingRequestResponse])
async def my_onboarding_requests(db: DBSession, current_user: CurrentUser):
    return OrganizationService(db).list_onboarding_requests(requested_by=current_user.id)


@router.get("/onboarding-requests", response_model=list[OnboardingRequestResponse])
async def list_onboarding_requests(
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    return OrganizationService(db).list_onboarding_requests()


@router.patch("/onboarding-requests/{request_id}/status", response_model=OnboardingRequestResponse)
async def update_onboarding_status(
    request_id: int,
    data: OnboardingStatusUpdate,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    """
    Errors:
    - **400 Bad Request**: Request was already decided.
    """
    request = OrganizationService(db, current_user).set_onboarding_status(request_id, data.status)
    db.commit()
    return request
