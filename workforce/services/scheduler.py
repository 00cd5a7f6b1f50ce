"""Background scheduler running the daily asset reset inside the web process."""

import asyncio
from datetime import date, datetime, timedelta
from typing import Any

import structlog
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from workforce.core.config import get_settings
from workforce.core.database import get_db_context
from workforce.models.user import User
from workforce.services.daily_reset_service import DailyResetService
from shared.enums import UserRole

logger = structlog.get_logger(__name__)


def get_system_user(db: Session) -> User | None:
    """First admin, else the first user."""
    admin = db.scalars(
        select(User).where(User.role == UserRole.ADMIN.value).order_by(User.id)
    ).first()
    if admin is not None:
        return admin
    return db.scalars(select(User).order_by(User.id)).first()


class DailyResetScheduler:
    """
    Periodically checks whether today's reset is due and runs it.

    A check is skipped before reset_hour, when there are no users, or when
    today's states already show a reset.
    """

    def __init__(self, check_interval_seconds: int | None = None, reset_hour: int | None = None):
        settings = get_settings()
        self.check_interval_seconds = check_interval_seconds or settings.scheduler_check_interval_seconds
        self.reset_hour = settings.scheduler_reset_hour if reset_hour is None else reset_hour
        self.initial_delay_seconds = settings.scheduler_initial_delay_seconds
        self.next_check: datetime | None = None
        self.last_run: dict[str, Any] | None = None
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._loop())
        logger.info("scheduler_started", interval=self.check_interval_seconds, reset_hour=self.reset_hour)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stop_event.set()
        await self._task
        self._task = None
        self.next_check = None
        logger.info("scheduler_stopped")

    async def _wait(self, seconds: int) -> bool:
        """Sleeps up to `seconds`; returns True when asked to stop."""
        self.next_check = datetime.now() + timedelta(seconds=seconds)
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True

    async def _loop(self) -> None:
        if await self._wait(self.initial_delay_seconds):
            return
        while not self._stop_event.is_set():
            try:
                await asyncio.to_thread(self.check_and_run)
            except Exception:
                logger.exception("scheduler_check_failed")
            if await self._wait(self.check_interval_seconds):
                return

    def should_run(self, db: Session, now: datetime) -> bool:
        if now.hour < self.reset_hour:
            return False
        if not db.scalar(select(func.count(User.id))):
            return False
        return not DailyResetService(db).reset_done(now.date())

    def check_and_run(self, now: datetime | None = None) -> dict[str, Any] | None:
        """
        One scheduler check.

        Returns:
            The reset result, or None when the check was skipped
        """
        now = now or datetime.now()
        with get_db_context() as db:
            if not self.should_run(db, now):
                logger.debug("scheduler_check_skipped", date=now.date().isoformat())
                return None
            return self._run(db, now.date(), triggered_by="scheduler")

    def _run(self, db: Session, target_date: date, triggered_by: str) -> dict[str, Any]:
        system_user = get_system_user(db)
        result = DailyResetService(db, system_user).perform_daily_reset(target_date)
        self.last_run = {
            "date": target_date.isoformat(),
            "triggered_by": triggered_by,
            "finished_at": datetime.now().isoformat(),
            "reset_count": result["reset_count"],
            "incidents_created": result["incidents_created"],
        }
        return result

    def trigger_manual_reset(self, db: Session, target_date: date | None, triggered_by: User) -> dict[str, Any]:
        """
        Runs the reset immediately in the caller's session.

        Returns:
            The reset result with triggered_by and triggered_at added
        """
        target_date = target_date or date.today()
        result = DailyResetService(db, triggered_by).perform_daily_reset(target_date)
        result["triggered_by"] = triggered_by.username
        result["triggered_at"] = datetime.now()
        self.last_run = {
            "date": target_date.isoformat(),
            "triggered_by": triggered_by.username,
            "finished_at": result["triggered_at"].isoformat(),
            "reset_count": result["reset_count"],
            "incidents_created": result["incidents_created"],
        }
        return result

    def status(self) -> dict[str, Any]:
        return {
            "is_running": self.is_running,
            "check_interval_seconds": self.check_interval_seconds,
            "reset_hour": self.reset_hour,
            "next_check": self.next_check,
            "last_run": self.last_run,
        }


# Process-wide scheduler instance started by the application lifespan
scheduler = DailyResetScheduler()
