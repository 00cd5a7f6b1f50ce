"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from workforce.api.routes import (
    asset_states,
    assets,
    attendance,
    auth,
    notifications,
    organization,
    teams,
    transfers,
    users,
)
from workforce.core.config import get_settings
from workforce.core.logging import setup_logging
from workforce.schemas.responses import ERROR_RESPONSES
from workforce.services.scheduler import scheduler
from shared.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
    WorkforceError,
)

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown events."""
    setup_logging()

    if settings.scheduler_enabled:
        scheduler.start()

    yield

    await scheduler.stop()


app = FastAPI(
    title="Workforce Manager API",
    description="""
    API for contact-center workforce management.

    ## Features

    * **Users and organisation**: user directory, divisions, departments, sections, teams.
    * **Attendance**: clock-in/out and status tracking with an audit trail.
    * **Assets**: daily book-in/book-out of laptops, headsets and dongles, loss reporting, daily reset.
    * **Transfers and terminations**: approval workflow with notifications to the chain of command.

    ## Authorization

    JWT (Bearer token).
    1. Obtain a token from `/api/auth/login`.
    2. Send `Authorization: Bearer <token>` with every request.
    """,
    version=settings.app_version,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Domain errors → HTTP
ERROR_STATUS: dict[type[WorkforceError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InvalidStateError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
}


@app.exception_handler(WorkforceError)
async def workforce_error_handler(request: Request, exc: WorkforceError):
    status_code = next(
        (code for error_type, code in ERROR_STATUS.items() if isinstance(exc, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )
    logger.info("request_rejected", path=request.url.path, status=status_code, error=str(exc))
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


# Routes
app.include_router(auth.router, prefix="/api", responses=ERROR_RESPONSES)
app.include_router(users.router, prefix="/api", responses=ERROR_RESPONSES)
app.include_router(organization.router, prefix="/api", responses=ERROR_RESPONSES)
app.include_router(teams.router, prefix="/api", responses=ERROR_RESPONSES)
app.include_router(attendance.router, prefix="/api", responses=ERROR_RESPONSES)
app.include_router(asset_states.router, prefix="/api", responses=ERROR_RESPONSES)
app.include_router(assets.router, prefix="/api", responses=ERROR_RESPONSES)
app.include_router(transfers.router, prefix="/api", responses=ERROR_RESPONSES)
app.include_router(notifications.router, prefix="/api", responses=ERROR_RESPONSES)


@app.get("/")
async def root():
    """API root."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


def main() -> None:
    """Runs the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "workforce.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )


if __name__ == "__main__":
    main()
