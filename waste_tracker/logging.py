from __future__ import annotations

import logging
import os

import structlog


def _get_log_level() -> int:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level, logging.INFO)


def _log_format() -> str:
    # console output for local dev unless LOG_FORMAT says otherwise
    if os.getenv("APP_ENV") == "dev" and "LOG_FORMAT" not in os.environ:
        return "console"
    return os.getenv("LOG_FORMAT", "json").lower()


def setup_logging(log_file: str | os.PathLike | None = None) -> None:
    """Route structlog and stdlib logging through one JSON (or console) formatter.

    Records carry an ISO/UTC timestamp, the level, the event name and any
    contextvars bound for the current request (request_id, path, method).
    """

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if _log_format() == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        # stdlib records (uvicorn, services using `extra=`) get the same treatment
        foreign_pre_chain=shared_processors + [structlog.stdlib.ExtraAdder()],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        os.makedirs(os.path.dirname(str(log_file)), exist_ok=True)
        handlers.append(logging.FileHandler(str(log_file), encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=_get_log_level(), handlers=handlers, force=True)
