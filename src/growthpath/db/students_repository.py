"""Repository functions for the students table.

Student rows carry the progress counters shown on both dashboards. The
instructor roster reads them joined with the owning user's name and email.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from growthpath.db.backend import STUDENTS, execute, get_backend

logger = structlog.get_logger(__name__)

# Embedded select of the owning user through the students.user_id foreign key
STUDENTS_WITH_USERS = "*, users!students_user_id_fkey(full_name, email)"


@dataclass
class StudentRecord:
    """Student record from the backend."""

    id: str
    user_id: str
    student_number: str
    status: str
    overall_progress: int
    streak_days: int
    last_activity: str
    enrollment_date: str = ""
    created_at: str = ""
    # Joined from users (roster queries only)
    full_name: str = ""
    email: str = ""


def get_student_by_user_id(user_id: str) -> StudentRecord | None:
    """Get the student row owned by a user.

    Returns:
        StudentRecord if found, None otherwise
    """
    response = execute(
        get_backend().table(STUDENTS).select("*").eq("user_id", user_id).limit(1)
    )
    if not response.data:
        return None
    return _row_to_record(response.data[0])


def get_student_by_id(student_id: str) -> StudentRecord | None:
    """Get student by ID."""
    response = execute(
        get_backend().table(STUDENTS).select("*").eq("id", student_id).limit(1)
    )
    if not response.data:
        return None
    return _row_to_record(response.data[0])


def list_students_with_users() -> list[StudentRecord]:
    """List all students with their user's name and email, newest first."""
    response = execute(
        get_backend()
        .table(STUDENTS)
        .select(STUDENTS_WITH_USERS)
        .order("created_at", desc=True)
    )
    return [_row_to_record(row) for row in response.data or []]


def insert_student(
    user_id: str,
    student_number: str,
    enrollment_date: str,
) -> StudentRecord:
    """Insert a fresh student row (active, no progress yet)."""
    row = {
        "user_id": user_id,
        "student_number": student_number,
        "enrollment_date": enrollment_date,
        "status": "active",
        "overall_progress": 0,
        "streak_days": 0,
        "last_activity": enrollment_date,
    }
    response = execute(get_backend().table(STUDENTS).insert(row))
    logger.debug("students.inserted", user_id=user_id, student_number=student_number)
    return _row_to_record(response.data[0] if response.data else {"id": "", **row})


def update_student(student_id: str, fields: dict[str, Any]) -> None:
    """Update selected columns of a student row."""
    execute(get_backend().table(STUDENTS).update(fields).eq("id", student_id))
    logger.debug("students.updated", student_id=student_id, fields=sorted(fields))


def _row_to_record(row: dict[str, Any]) -> StudentRecord:
    """Convert backend row to StudentRecord."""
    user = row.get("users") or {}
    return StudentRecord(
        id=row["id"],
        user_id=row.get("user_id", ""),
        student_number=row.get("student_number") or "",
        status=row.get("status") or "active",
        overall_progress=int(row.get("overall_progress") or 0),
        streak_days=int(row.get("streak_days") or 0),
        last_activity=row.get("last_activity") or "",
        enrollment_date=row.get("enrollment_date") or "",
        created_at=row.get("created_at") or "",
        full_name=user.get("full_name") or "",
        email=user.get("email") or "",
    )
