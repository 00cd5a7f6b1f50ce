"""Daily asset tracking routes: book-in/out, recovery, resets and the scheduler."""

from datetime import date

from fastapi import APIRouter, Depends

from workforce.api.dependencies import CurrentUser, DBSession
from workforce.core.dependencies import (
    ensure_self_or_roles,
    require_admin,
    require_asset_manager,
    require_asset_oversight,
    require_hr_admin,
    require_team_leader,
)
from workforce.models.user import User
from workforce.schemas.asset import (
    BookInRequest,
    BookOutRequest,
    DailyResetRequest,
    DailyResetResponse,
    DailyStateResponse,
    DailyStateUpsert,
    MarkFoundRequest,
    ResetAgentRequest,
    ResetStatusResponse,
    SchedulerStatusResponse,
    SchedulerTriggerRequest,
    StateAuditResponse,
)
from workforce.services.asset_state_service import AssetStateService
from workforce.services.daily_reset_service import DailyResetService
from workforce.services.scheduler import scheduler
from shared.constants import ASSET_OVERSIGHT_ROLES

router = APIRouter(prefix="/assets", tags=["asset-states"])


@router.post("/book-in", response_model=DailyStateResponse)
async def book_in(
    data: BookInRequest,
    db: DBSession,
    current_user: User = Depends(require_asset_manager),
):
    """
    Records whether the agent collected the asset at the start of the shift.

    Parameters:
    - **status**: collected | not_collected

    Errors:
    - **400 Bad Request**: Asset is already past the collection stage.
    - **404 Not Found**: Agent does not exist.
    """
    state = AssetStateService(db, current_user).book_in(
        data.user_id, data.asset_type.value, data.date, data.status, data.reason
    )
    db.commit()
    return state


@router.post("/book-out", response_model=DailyStateResponse)
async def book_out(
    data: BookOutRequest,
    db: DBSession,
    current_user: User = Depends(require_asset_manager),
):
    """
    Records the end-of-shift outcome of a collected asset.

    Parameters:
    - **status**: returned | not_returned | lost

    Errors:
    - **400 Bad Request**: Asset was not collected.
    """
    state = AssetStateService(db, current_user).book_out(
        data.user_id, data.asset_type.value, data.date, data.status, data.reason
    )
    db.commit()
    return state


@router.post("/mark-found", response_model=DailyStateResponse)
async def mark_found(
    data: MarkFoundRequest,
    db: DBSession,
    current_user: User = Depends(require_asset_manager),
):
    """
    Marks a lost or unreturned asset as returned and resolves its loss records.

    Errors:
    - **400 Bad Request**: Asset is not lost or unreturned.
    """
    state = AssetStateService(db, current_user).mark_found(
        data.user_id, data.asset_type.value, data.date, data.recovery_reason
    )
    db.commit()
    return state


@router.post("/daily-state", response_model=DailyStateResponse)
async def upsert_daily_state(
    data: DailyStateUpsert,
    db: DBSession,
    current_user: User = Depends(require_asset_manager),
):
    state = AssetStateService(db, current_user).set_state(
        data.user_id, data.date, data.asset_type.value, data.current_state.value, data.reason
    )
    db.commit()
    return state


@router.get("/daily-states/{day}", response_model=list[DailyStateResponse])
async def daily_states(
    day: date,
    db: DBSession,
    current_user: User = Depends(require_asset_oversight),
):
    return AssetStateService(db).states_for_date(day)


@router.get("/daily-states/user/{user_id}/date/{day}", response_model=list[DailyStateResponse])
async def user_daily_states(user_id: int, day: date, db: DBSession, current_user: CurrentUser):
    ensure_self_or_roles(current_user, user_id, ASSET_OVERSIGHT_ROLES)
    return AssetStateService(db).states_for_user(user_id, day)


@router.get("/state-audit/{user_id}", response_model=list[StateAuditResponse])
async def state_audit(user_id: int, db: DBSession, current_user: CurrentUser):
    """State transitions of an agent's equipment, newest first."""
    ensure_self_or_roles(current_user, user_id, ASSET_OVERSIGHT_ROLES)
    return AssetStateService(db).audit_for_user(user_id)


@router.post("/reset-agent")
async def reset_agent(
    data: ResetAgentRequest,
    db: DBSession,
    current_user: User = Depends(require_team_leader),
):
    """
    Wipes today's asset records for one agent of the calling team leader.

    Each removed state is kept as a resolved maintenance incident.

    Parameters:
    - **agent_id** (int): Agent to reset.
    - **password** (str): The team leader's own password.

    Returns:
    - **message**, **agent_id**, **date**, **reset_by**, **states_reset**

    Errors:
    - **400 Bad Request**: Wrong password.
    - **403 Forbidden**: Agent is not in the team leader's team.
    - **404 Not Found**: Agent does not exist.
    """
    result = AssetStateService(db, current_user).reset_agent(current_user, data.agent_id, data.password)
    db.commit()
    return result


@router.post("/daily-reset", response_model=DailyResetResponse)
async def daily_reset(
    data: DailyResetRequest,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    """
    Derives the given day's asset states from the previous day.

    Agents that already have a state for the day keep it.
    """
    result = DailyResetService(db, current_user).perform_daily_reset(data.date)
    db.commit()
    return result


@router.post("/daily-reset/auto")
async def daily_reset_auto(
    db: DBSession,
    current_user: User = Depends(require_admin),
):
    """Runs the reset for today, as the scheduler would."""
    today = date.today()
    result = DailyResetService(db, current_user).perform_daily_reset(today)
    db.commit()
    result["automated"] = True
    result["processed_date"] = today
    return result


@router.get("/daily-reset/status/{day}", response_model=ResetStatusResponse)
async def daily_reset_status(
    day: date,
    db: DBSession,
    current_user: User = Depends(require_asset_oversight),
):
    return DailyResetService(db).reset_status(day)


@router.get("/daily-reset/scheduler/status", response_model=SchedulerStatusResponse)
async def scheduler_status(current_user: User = Depends(require_asset_oversight)):
    return scheduler.status()


@router.post("/daily-reset/scheduler/trigger")
async def scheduler_trigger(
    data: SchedulerTriggerRequest,
    db: DBSession,
    current_user: User = Depends(require_hr_admin),
):
    """
    Runs the daily reset immediately.

    Returns:
    - The reset result with **triggered_by** and **triggered_at**.
    """
    result = scheduler.trigger_manual_reset(db, data.date, current_user)
    db.commit()
    return result
