"""Instructor roster: building, filtering and bucketing.

The roster is fetched in full and filtered in memory on every request.
Each filter is an independent predicate over a single entry, so the order
in which they are applied does not change the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Literal, Sequence

import structlog

from growthpath.core.stats import attendance_rate
from growthpath.db.attendance_repository import list_attendance_since
from growthpath.db.learning_repository import count_learning_records
from growthpath.db.students_repository import StudentRecord, list_students_with_users

logger = structlog.get_logger(__name__)

ProgressBucket = Literal["low", "medium", "high"]
ProgressFilter = Literal["all", "low", "medium", "high"]
StatusFilter = Literal["all", "active", "inactive"]

LOW_CEILING = 40  # low < 40
HIGH_FLOOR = 80  # high >= 80
ATTENDANCE_WINDOW_DAYS = 30


@dataclass
class RosterEntry:
    """A student row enhanced with per-student aggregates."""

    student: StudentRecord
    learning_records_count: int = 0
    attendance_rate: int = 0


def progress_bucket(progress: int) -> ProgressBucket:
    """Map overall progress to its range bucket."""
    if progress < LOW_CEILING:
        return "low"
    if progress < HIGH_FLOOR:
        return "medium"
    return "high"


def matches_search(entry: RosterEntry, term: str) -> bool:
    """Case-insensitive substring match on name, email or student number."""
    if not term:
        return True
    needle = term.lower()
    s = entry.student
    return (
        needle in s.full_name.lower()
        or needle in s.email.lower()
        or needle in s.student_number.lower()
    )


def matches_status(entry: RosterEntry, status: str) -> bool:
    """Exact status match; `all` matches everything."""
    return status == "all" or entry.student.status == status


def matches_progress(entry: RosterEntry, progress: str) -> bool:
    """Progress bucket match; `all` matches everything."""
    return progress == "all" or progress_bucket(entry.student.overall_progress) == progress


@dataclass
class RosterFilter:
    """Search and filter settings for the instructor roster."""

    search: str = ""
    status: StatusFilter = "all"
    progress: ProgressFilter = "all"

    def matches(self, entry: RosterEntry) -> bool:
        return (
            matches_search(entry, self.search)
            and matches_status(entry, self.status)
            and matches_progress(entry, self.progress)
        )

    def apply(self, entries: Sequence[RosterEntry]) -> list[RosterEntry]:
        """Return the entries that pass every filter, order preserved."""
        return [e for e in entries if self.matches(e)]


def build_roster(today: date | None = None) -> list[RosterEntry]:
    """Fetch every student and attach record counts and attendance rates.

    Issues one count query and one attendance query per student, in
    sequence. Attendance covers rows dated within the last 30 days.

    Raises:
        BackendError: If any query fails.
    """
    today = today or date.today()
    since = today - timedelta(days=ATTENDANCE_WINDOW_DAYS)

    entries = []
    for student in list_students_with_users():
        entries.append(
            RosterEntry(
                student=student,
                learning_records_count=count_learning_records(student.id),
                attendance_rate=attendance_rate(list_attendance_since(student.id, since)),
            )
        )

    logger.info("roster.built", students=len(entries), since=since.isoformat())
    return entries
