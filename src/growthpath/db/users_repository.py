"""Repository functions for the users table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from growthpath.db.backend import USERS, execute, get_backend

logger = structlog.get_logger(__name__)

ROLES = ("student", "instructor")


@dataclass
class UserRecord:
    """User record from the backend."""

    id: str
    email: str
    role: str
    full_name: str
    created_at: str = ""
    updated_at: str = ""


def get_user_by_id(user_id: str) -> UserRecord | None:
    """Get user by ID.

    Returns:
        UserRecord if found, None otherwise
    """
    response = execute(
        get_backend().table(USERS).select("*").eq("id", user_id).limit(1)
    )
    if not response.data:
        return None
    return _row_to_record(response.data[0])


def insert_user(user_id: str, email: str, full_name: str, role: str) -> UserRecord:
    """Insert the profile row for a newly registered auth user."""
    row = {
        "id": user_id,
        "email": email,
        "full_name": full_name,
        "role": role,
    }
    response = execute(get_backend().table(USERS).insert(row))
    logger.debug("users.inserted", user_id=user_id, role=role)
    return _row_to_record(response.data[0] if response.data else row)


def _row_to_record(row: dict[str, Any]) -> UserRecord:
    """Convert backend row to UserRecord."""
    return UserRecord(
        id=row["id"],
        email=row.get("email", ""),
        role=row.get("role", "student"),
        full_name=row.get("full_name", ""),
        created_at=row.get("created_at") or "",
        updated_at=row.get("updated_at") or "",
    )
