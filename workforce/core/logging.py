"""structlog configuration shared by the API process, the reset scheduler and scripts."""

import logging
import logging.handlers
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from workforce.core.config import get_settings

settings = get_settings()

LOG_FILE_NAME = "workforce.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Loggers that are too chatty at INFO for day-to-day operation.
QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "uvicorn.access": logging.WARNING,
    "httpx": logging.WARNING,
}


def drop_color_message_key(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    # uvicorn duplicates its message with ANSI colours under this key
    event_dict.pop("color_message", None)
    return event_dict


def _pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=False),
        structlog.processors.StackInfoRenderer(),
        drop_color_message_key,
    ]


def _formatter(renderer: Processor) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_pre_chain(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def setup_logging() -> None:
    """
    Routes structlog and stdlib records (uvicorn, SQLAlchemy) through one pipeline.

    Stdout uses the configured format; the rotating file under ``log_dir`` is
    always JSON so reset and scheduler runs can be searched afterwards.
    Calling it again replaces the handlers instead of stacking them.
    """
    level = getattr(logging, settings.log_level)

    structlog.configure(
        processors=_pre_chain() + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    console_renderer: Processor = (
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_formatter(console_renderer))

    settings.log_dir.mkdir(parents=True, exist_ok=True)
    log_file = logging.handlers.RotatingFileHandler(
        settings.log_dir / LOG_FILE_NAME,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    log_file.setFormatter(_formatter(structlog.processors.JSONRenderer()))

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.addHandler(console)
    root.addHandler(log_file)
    root.setLevel(level)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(level, quiet_level))
