"""Configuration constants, overridable through environment variables."""

import logging
import os


def _env_flag(name: str, default: bool = False) -> bool:
    """Read boolean env flag."""
    val = os.environ.get(name, "").strip().lower()
    if not val:
        return default
    return val in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    val = os.environ.get(name, "").strip()
    return float(val) if val else default


DATABASE_URL = os.environ.get("BOARDSYNC_DATABASE_URL", "sqlite:///./boardsync.db")
SQL_ECHO = _env_flag("BOARDSYNC_SQL_ECHO", default=False)

# Base URL of the snapshot service consumed by HTTPSnapshotStore
API_URL = os.environ.get("BOARDSYNC_API_URL", "http://localhost:8000")
HTTP_TIMEOUT = _env_float("BOARDSYNC_HTTP_TIMEOUT", 10.0)

# Seconds between two reconciliation rounds of the SyncEngine
SYNC_INTERVAL = _env_float("BOARDSYNC_SYNC_INTERVAL", 2.0)

LOG_LEVEL = os.environ.get("BOARDSYNC_LOG_LEVEL", "INFO").strip().upper()


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
