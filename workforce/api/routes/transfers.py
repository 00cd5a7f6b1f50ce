"""Transfer and termination routes."""

from fastapi import APIRouter, Depends, Query, status

from workforce.api.dependencies import DBSession
from workforce.core.dependencies import require_hr_admin, require_people_ops
from workforce.models.user import User
from workforce.schemas.transfer import (
    TerminationCreate,
    TerminationResponse,
    TransferAuditResponse,
    TransferCreate,
    TransferDecision,
    TransferResponse,
)
from workforce.services.termination_service import TerminationService
from workforce.services.transfer_service import TransferService
from shared.enums import TransferStatus

router = APIRouter(tags=["transfers"])


# TRANSFERS

@router.get("/transfers", response_model=list[TransferResponse])
async def list_transfers(
    db: DBSession,
    transfer_status: TransferStatus | None = Query(None, alias="status"),
    current_user: User = Depends(require_people_ops),
):
    return TransferService(db, current_user).list_transfers(
        transfer_status.value if transfer_status else None
    )


@router.post("/transfers", response_model=TransferResponse, status_code=status.HTTP_201_CREATED)
async def create_transfer(
    data: TransferCreate,
    db: DBSession,
    current_user: User = Depends(require_people_ops),
):
    """
    Raises a transfer request. Approvers are notified.

    Omitted from_department_id, from_role and from_team_id default to the
    employee's current placement.

    Errors:
    - **404 Not Found**: Employee or target team does not exist.
    - **422 Unprocessable Entity**: Temporary transfer without end date, or
      end date before start date.
    """
    transfer = TransferService(db, current_user).create(data.model_dump())
    db.commit()
    return transfer


@router.patch("/transfers/{transfer_id}/approve", response_model=TransferResponse)
async def approve_transfer(
    transfer_id: int,
    data: TransferDecision,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    """
    Approves a pending transfer. A permanent transfer is applied immediately.

    Errors:
    - **400 Bad Request**: Transfer is not pending.
    """
    transfer = TransferService(db, current_user).approve(transfer_id, data.comment)
    db.commit()
    return transfer


@router.patch("/transfers/{transfer_id}/reject", response_model=TransferResponse)
async def reject_transfer(
    transfer_id: int,
    data: TransferDecision,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    transfer = TransferService(db, current_user).reject(transfer_id, data.comment)
    db.commit()
    return transfer


@router.patch("/transfers/{transfer_id}/complete", response_model=TransferResponse)
async def complete_transfer(
    transfer_id: int,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    transfer = TransferService(db, current_user).complete(transfer_id)
    db.commit()
    return transfer


@router.get("/transfers/{transfer_id}/audit", response_model=list[TransferAuditResponse])
async def transfer_audit(
    transfer_id: int,
    db: DBSession,
    current_user: User = Depends(require_people_ops),
):
    return TransferService(db, current_user).audit(transfer_id)


# TERMINATIONS

@router.get("/terminations", response_model=list[TerminationResponse])
async def list_terminations(
    db: DBSession,
    current_user: User = Depends(require_people_ops),
):
    return TerminationService(db, current_user).list_terminations()


@router.post("/terminations", response_model=TerminationResponse, status_code=status.HTTP_201_CREATED)
async def create_termination(
    data: TerminationCreate,
    db: DBSession,
    current_user: User = Depends(require_people_ops),
):
    """
    Processes a termination: deactivates the employee, sets today's
    attendance and notifies the chain of command, HR and admins.

    Errors:
    - **400 Bad Request**: Employee already has an active termination record.
    - **404 Not Found**: Employee does not exist.
    """
    termination = TerminationService(db, current_user).create(data.model_dump())
    db.commit()
    return termination
