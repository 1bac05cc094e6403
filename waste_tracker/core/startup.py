"""Run Alembic migrations at startup and track readiness."""

from __future__ import annotations

import os
import subprocess
import threading
import time
from typing import Final

import structlog
from structlog.stdlib import BoundLogger

_MAX_ATTEMPTS: Final[int] = int(os.getenv("ALEMBIC_STARTUP_MAX_ATTEMPTS", "10"))
_RETRY_DELAY_SECONDS: Final[float] = float(os.getenv("ALEMBIC_STARTUP_RETRY_SECONDS", "2"))
_UPGRADE_COMMAND: Final[tuple[str, ...]] = ("alembic", "upgrade", "head")


class _MigrationState:
    def __init__(self) -> None:
        self.completed = False
        self.error: str | None = None
        self.worker: threading.Thread | None = None

    def finish(self, success: bool, error: str | None) -> None:
        self.completed = success
        self.error = None if success else error


_state = _MigrationState()


def _truthy(value: str | None) -> bool:
    return value is not None and value.lower() in {"1", "true", "yes", "on"}


def _exit_on_failure() -> bool:
    override = os.getenv("ALEMBIC_EXIT_ON_FAILURE")
    if override is not None:
        return _truthy(override)
    return os.getenv("APP_ENV", "dev").lower() == "prod"


def is_migration_completed() -> bool:
    """True once `alembic upgrade head` has succeeded (or was skipped for tests)."""

    return _state.completed


def last_migration_error() -> str | None:
    return _state.error


def run_database_migrations() -> None:
    """Upgrade the schema, blocking in prod and in a daemon thread otherwise.

    A failed blocking upgrade exits the process so the orchestrator restarts it.
    """

    logger = structlog.get_logger(__name__)

    if _state.completed:
        logger.info("alembic_upgrade_skipped", reason="already_completed")
        return

    if os.getenv("TESTING"):
        _state.finish(True, None)
        logger.info("alembic_upgrade_skipped", reason="testing")
        return

    if _exit_on_failure():
        success, error = _upgrade_with_retries(logger)
        _state.finish(success, error)
        if not success:
            raise SystemExit(1)
        return

    if _state.worker and _state.worker.is_alive():
        logger.info("alembic_upgrade_skipped", reason="already_running")
        return

    _state.finish(False, None)
    _state.worker = threading.Thread(target=_upgrade_in_background, name="alembic-startup", daemon=True)
    _state.worker.start()
    logger.info("alembic_upgrade_background_started")


def _upgrade_in_background() -> None:
    logger = structlog.get_logger(__name__).bind(mode="background")
    _state.finish(*_upgrade_with_retries(logger))


def _upgrade_with_retries(logger: BoundLogger) -> tuple[bool, str | None]:
    last_error: str | None = None

    for attempt in range(1, _MAX_ATTEMPTS + 1):
        try:
            logger.info("alembic_upgrade_start", attempt=attempt)
            subprocess.run(_UPGRADE_COMMAND, check=True)
        except FileNotFoundError:
            logger.error("alembic_command_missing", command=" ".join(_UPGRADE_COMMAND))
            return False, "alembic command not found"
        except subprocess.CalledProcessError as exc:  # pragma: no cover - error path
            last_error = f"alembic exited with return code {exc.returncode}"
            logger.error("alembic_upgrade_failed", attempt=attempt, returncode=exc.returncode)
        else:
            logger.info("alembic_upgrade_succeeded", attempt=attempt)
            return True, None

        if attempt < _MAX_ATTEMPTS:
            delay = _RETRY_DELAY_SECONDS * attempt
            logger.info("alembic_upgrade_retry", next_attempt=attempt + 1, delay_seconds=delay)
            time.sleep(delay)

    logger.error("alembic_upgrade_exhausted", attempts=_MAX_ATTEMPTS)
    return False, last_error or "alembic upgrade failed"


__all__ = ["is_migration_completed", "last_migration_error", "run_database_migrations"]
