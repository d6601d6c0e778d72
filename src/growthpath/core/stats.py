"""Derived dashboard statistics.

Pure reductions over lists that are already loaded: nothing here talks to
the backend or keeps state between calls. Rounding matches the dashboards'
half-up convention (2.5 -> 3), not Python's banker's rounding.

Two notions of "recent activity" coexist on purpose:
- overview "active today": last_activity string equals today's ISO date
- instructor "active this week": last_activity within the 7 days ending today
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Sequence

from growthpath.core.sample_data import StudentProgress, TopicProgress
from growthpath.db.attendance_repository import AttendanceRecord
from growthpath.db.learning_repository import LearningRecord
from growthpath.db.students_repository import StudentRecord

TOP_PERFORMER_THRESHOLD = 80
ACTIVE_WINDOW_DAYS = 7
STUDENT_ATTENDANCE_WINDOW = 7  # most recent records, not days


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean, 0.0 for no values."""
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)


def completion_rate(completed: int, total: int) -> int:
    """Percentage of completed topics, 0 when there are none."""
    if total <= 0:
        return 0
    return round_half_up(completed / total * 100)


def attendance_rate(records: Sequence[AttendanceRecord]) -> int:
    """Share of `present` rows as a rounded percentage (0 for no rows)."""
    present = sum(1 for r in records if r.status == "present")
    return round_half_up(present / max(len(records), 1) * 100)


def average_topic_score(topics: Sequence[TopicProgress]) -> int:
    """Card score: mean quiz score with missing scores counted as 0."""
    return round_half_up(mean(t.quiz_score or 0 for t in topics))


def parse_day(value: str) -> date | None:
    """Parse the date part of an ISO date or timestamp string."""
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


# =============================================================================
# OVERVIEW (sample roster)
# =============================================================================


@dataclass
class OverviewStats:
    """Headline numbers for the demo overview."""

    total_students: int
    average_progress: int
    active_today: int
    average_streak: int
    completed_topics: int
    total_topics: int
    completion_rate: int


def compute_overview_stats(
    students: Sequence[StudentProgress],
    today: date | None = None,
) -> OverviewStats:
    """Compute overview numbers over sample-shaped students."""
    today_str = (today or date.today()).isoformat()

    completed = sum(
        1 for s in students for t in s.topics if t.status == "completed"
    )
    total = sum(len(s.topics) for s in students)

    return OverviewStats(
        total_students=len(students),
        average_progress=round_half_up(mean(s.overall_progress for s in students)),
        active_today=sum(1 for s in students if s.last_activity == today_str),
        average_streak=round_half_up(mean(s.streak_days for s in students)),
        completed_topics=completed,
        total_topics=total,
        completion_rate=completion_rate(completed, total),
    )


# =============================================================================
# INSTRUCTOR
# =============================================================================


@dataclass
class InstructorStats:
    """Headline numbers for the instructor dashboard."""

    total_students: int
    average_progress: int
    active_this_week: int
    top_performers: int


def compute_instructor_stats(
    students: Sequence[StudentRecord],
    today: date | None = None,
) -> InstructorStats:
    """Compute instructor dashboard numbers over the fetched roster."""
    today = today or date.today()
    # Seven calendar days including today
    window_start = today - timedelta(days=ACTIVE_WINDOW_DAYS - 1)

    active = 0
    for s in students:
        last = parse_day(s.last_activity)
        if last is not None and last >= window_start:
            active += 1

    return InstructorStats(
        total_students=len(students),
        average_progress=round_half_up(mean(s.overall_progress for s in students)),
        active_this_week=active,
        top_performers=sum(
            1 for s in students if s.overall_progress >= TOP_PERFORMER_THRESHOLD
        ),
    )


# =============================================================================
# STUDENT
# =============================================================================


@dataclass
class StudentStats:
    """Headline numbers for a student's own dashboard."""

    overall_progress: int
    streak_days: int
    completed_topics: int
    total_topics: int
    completion_rate: int
    attendance_rate: int


def compute_student_stats(
    student: StudentRecord,
    learning_records: Sequence[LearningRecord],
    attendance_records: Sequence[AttendanceRecord],
) -> StudentStats:
    """Compute a student's dashboard numbers.

    Attendance rate covers the most recent records as loaded (newest
    first), not a calendar window.
    """
    completed = sum(1 for r in learning_records if r.status == "completed")
    total = len(learning_records)
    recent = list(attendance_records[:STUDENT_ATTENDANCE_WINDOW])

    return StudentStats(
        overall_progress=student.overall_progress,
        streak_days=student.streak_days,
        completed_topics=completed,
        total_topics=total,
        completion_rate=completion_rate(completed, total),
        attendance_rate=attendance_rate(recent),
    )
