"""Repository functions for the attendance_records table.

Attendance is keyed by (student_id, date): writing a second status for the
same day replaces the first.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any

import structlog

from growthpath.db.backend import ATTENDANCE_RECORDS, execute, get_backend

logger = structlog.get_logger(__name__)

ATTENDANCE_STATUSES = ("present", "absent", "late")


@dataclass
class AttendanceRecord:
    """Attendance record from the backend."""

    id: str
    student_id: str
    date: str
    status: str
    notes: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain row dict."""
        return asdict(self)


def list_attendance(student_id: str, limit: int = 30) -> list[AttendanceRecord]:
    """List a student's most recent attendance rows, newest date first."""
    response = execute(
        get_backend()
        .table(ATTENDANCE_RECORDS)
        .select("*")
        .eq("student_id", student_id)
        .order("date", desc=True)
        .limit(limit)
    )
    return [_row_to_record(row) for row in response.data or []]


def list_attendance_since(student_id: str, since: date) -> list[AttendanceRecord]:
    """List a student's attendance rows dated on or after `since`."""
    response = execute(
        get_backend()
        .table(ATTENDANCE_RECORDS)
        .select("*")
        .eq("student_id", student_id)
        .gte("date", since.isoformat())
    )
    return [_row_to_record(row) for row in response.data or []]


def upsert_attendance(
    student_id: str,
    day: date,
    status: str,
    notes: str | None = None,
) -> None:
    """Record a student's attendance for a day, replacing any earlier status."""
    row = {
        "student_id": student_id,
        "date": day.isoformat(),
        "status": status,
        "notes": notes or None,
    }
    execute(
        get_backend()
        .table(ATTENDANCE_RECORDS)
        .upsert(row, on_conflict="student_id,date")
    )
    logger.debug("attendance.upserted", student_id=student_id, date=row["date"], status=status)


def _row_to_record(row: dict[str, Any]) -> AttendanceRecord:
    """Convert backend row to AttendanceRecord."""
    return AttendanceRecord(
        id=row.get("id", ""),
        student_id=row.get("student_id", ""),
        date=row.get("date") or "",
        status=row.get("status") or "absent",
        notes=row.get("notes"),
    )
