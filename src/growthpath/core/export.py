"""CSV export of the instructor roster."""

from __future__ import annotations

from datetime import date
from typing import Any, Callable, Sequence

import structlog

from growthpath.core.roster import RosterEntry

logger = structlog.get_logger(__name__)

EXPORT_COLUMNS: list[tuple[str, Callable[[RosterEntry], Any]]] = [
    ("Student Number", lambda e: e.student.student_number),
    ("Full Name", lambda e: e.student.full_name),
    ("Email", lambda e: e.student.email),
    ("Status", lambda e: e.student.status),
    ("Overall Progress", lambda e: f"{e.student.overall_progress}%"),
    ("Streak Days", lambda e: e.student.streak_days),
    ("Learning Records", lambda e: e.learning_records_count),
    ("Attendance Rate", lambda e: f"{e.attendance_rate}%"),
    ("Last Activity", lambda e: e.student.last_activity),
    ("Enrollment Date", lambda e: e.student.enrollment_date),
]

EXPORT_HEADERS = [label for label, _ in EXPORT_COLUMNS]


def _quote(value: Any) -> str:
    text = "" if value is None else str(value)
    return '"' + text.replace('"', '""') + '"'


def roster_to_csv(entries: Sequence[RosterEntry]) -> str:
    """Render roster entries as CSV text.

    The header row is the bare column labels; every data value is quoted.
    """
    lines = [",".join(EXPORT_HEADERS)]
    for entry in entries:
        lines.append(",".join(_quote(getter(entry)) for _, getter in EXPORT_COLUMNS))

    logger.info("export.rendered", rows=len(entries))
    return "\n".join(lines)


def export_filename(today: date | None = None) -> str:
    """Download filename stamped with the export date."""
    return f"students-report-{(today or date.today()).isoformat()}.csv"
