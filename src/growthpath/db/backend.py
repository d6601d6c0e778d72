"""Managed backend connection.

Persistence, authentication and row-level access live in Supabase. This
module owns the process-wide client and the single place where query
failures are translated into BackendError.

Example:
    from growthpath.db.backend import execute, get_backend

    response = execute(get_backend().table("students").select("*"))
    rows = response.data
"""

from __future__ import annotations

from typing import Any

import structlog
from supabase import Client, create_client

from growthpath.config.app_config import load_app_config

logger = structlog.get_logger(__name__)

# Table names
USERS = "users"
STUDENTS = "students"
LEARNING_RECORDS = "learning_records"
ATTENDANCE_RECORDS = "attendance_records"
AI_INSIGHTS = "ai_insights"

# Current client (module-level, shared read-only after creation)
_backend: Client | None = None


class BackendError(Exception):
    """A backend query or auth call failed."""

    pass


def get_backend() -> Client:
    """Get the shared backend client, creating it on first use.

    Raises:
        ConfigError: If the backend URL or key is not configured.
    """
    global _backend
    if _backend is None:
        url, key = load_app_config().backend.require_credentials()
        _backend = create_client(url, key)
        logger.info("backend.connected", url=url)
    return _backend


def set_backend(client: Any) -> None:
    """Install a pre-built client (tests, scripts)."""
    global _backend
    _backend = client


def reset_backend() -> None:
    """Drop the shared client (for testing)."""
    global _backend
    _backend = None


def execute(query: Any) -> Any:
    """Run a built query and return the backend response.

    Raises:
        BackendError: If the backend rejects the query or is unreachable.
    """
    try:
        return query.execute()
    except Exception as e:
        logger.error("backend.query_failed", error=str(e))
        raise BackendError(str(e)) from e
