"""Run `alembic upgrade head` at startup and track whether it has finished."""

from __future__ import annotations

import os
import subprocess
import threading
import time
from dataclasses import dataclass

import structlog
from structlog.stdlib import BoundLogger

ALEMBIC_COMMAND = ("alembic", "upgrade", "head")


def _truthy(value: str | None) -> bool:
    return (value or "").lower() in {"1", "true", "yes", "on"}


@dataclass
class MigrationState:
    completed: bool = False
    error: str | None = None
    worker: threading.Thread | None = None


_state = MigrationState()


def is_migration_completed() -> bool:
    return _state.completed


def last_migration_error() -> str | None:
    return _state.error


def _exit_on_failure() -> bool:
    override = os.getenv("ALEMBIC_EXIT_ON_FAILURE")
    if override is not None:
        return _truthy(override)
    return os.getenv("APP_ENV", "dev").lower() == "prod"


def run_database_migrations() -> None:
    """Upgrade the schema, blocking in prod and in a background thread elsewhere.

    With TESTING set the upgrade is skipped and readiness is reported at once.
    """
    logger = structlog.get_logger(__name__)

    if _state.completed:
        logger.info("alembic_upgrade_skipped", reason="already_completed")
        return
    if os.getenv("TESTING"):
        _state.completed, _state.error = True, None
        logger.info("alembic_upgrade_skipped", reason="testing")
        return

    if _exit_on_failure():
        _record(_upgrade_with_retries(logger))
        if not _state.completed:
            raise SystemExit(1)
        return

    if _state.worker is not None and _state.worker.is_alive():
        logger.info("alembic_upgrade_skipped", reason="already_running")
        return
    _state.completed, _state.error = False, None
    _state.worker = threading.Thread(target=_background, name="alembic-startup", daemon=True)
    _state.worker.start()
    logger.info("alembic_upgrade_background_started")


def _background() -> None:
    _record(_upgrade_with_retries(structlog.get_logger(__name__).bind(mode="async")))


def _record(error: str | None) -> None:
    _state.completed = error is None
    _state.error = error


def _upgrade_with_retries(logger: BoundLogger) -> str | None:
    """Return None on success, else the last error message."""
    attempts = int(os.getenv("ALEMBIC_STARTUP_MAX_ATTEMPTS", "10"))
    delay = float(os.getenv("ALEMBIC_STARTUP_RETRY_SECONDS", "2"))
    last_error = "alembic upgrade failed"

    for attempt in range(1, attempts + 1):
        logger.info("alembic_upgrade_start", attempt=attempt)
        try:
            subprocess.run(ALEMBIC_COMMAND, check=True)
        except FileNotFoundError:
            logger.error("alembic_command_missing", command=" ".join(ALEMBIC_COMMAND))
            return "alembic command not found"
        except subprocess.CalledProcessError as exc:
            last_error = f"alembic exited with return code {exc.returncode}"
            logger.error("alembic_upgrade_failed", attempt=attempt, returncode=exc.returncode)
        else:
            logger.info("alembic_upgrade_succeeded", attempt=attempt)
            return None

        if attempt < attempts:
            logger.info("alembic_upgrade_retry", next_attempt=attempt + 1, delay_seconds=delay * attempt)
            time.sleep(delay * attempt)

    logger.error("alembic_upgrade_exhausted", attempts=attempts)
    return last_error


__all__ = ["is_migration_completed", "last_migration_error", "run_database_migrations"]
