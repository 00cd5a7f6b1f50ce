"""Engine, session factory and session helpers for the workforce database."""

from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from workforce.core.config import get_settings

settings = get_settings()


def engine_options(database_url: str) -> dict[str, Any]:
    """Connection options for the configured backend.

    SQLite is shared between the request threads and the reset scheduler
    thread, so it must allow cross-thread connections. Server databases get
    pre-ping so connections dropped overnight do not fail the first request.
    """
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(settings.database_url, echo=settings.debug, **engine_options(settings.database_url))

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session; routes decide when to commit."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Unit of work outside a request (scheduler runs, seeding).

    Commits when the block finishes and rolls back if it raises:

        with get_db_context() as db:
            DailyResetService(db).perform_daily_reset(date.today())
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_tables() -> None:
    """Creates every mapped table that does not exist yet."""
    from workforce.models import Base

    Base.metadata.create_all(bind=engine)
