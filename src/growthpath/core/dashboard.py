"""Student dashboard loading."""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from growthpath.core.insights import InsightResult, generate_insights
from growthpath.core.stats import StudentStats, compute_student_stats
from growthpath.db.attendance_repository import AttendanceRecord, list_attendance
from growthpath.db.insights_repository import AIInsight, list_insights
from growthpath.db.learning_repository import LearningRecord, list_learning_records
from growthpath.db.students_repository import StudentRecord, get_student_by_user_id
from growthpath.llm.client import LLMClient

logger = structlog.get_logger(__name__)

ATTENDANCE_HISTORY_LIMIT = 30
INSIGHTS_LIMIT = 5


class StudentNotFoundError(Exception):
    """The signed-in user has no student row."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"No student profile for user '{user_id}'")


@dataclass
class StudentDashboard:
    """Everything the student dashboard shows."""

    student: StudentRecord
    stats: StudentStats
    learning_records: list[LearningRecord] = field(default_factory=list)
    attendance_records: list[AttendanceRecord] = field(default_factory=list)
    insights: list[AIInsight] = field(default_factory=list)


def load_student_dashboard(user_id: str) -> StudentDashboard:
    """Fetch the student's rows in sequence and compute their stats.

    Raises:
        StudentNotFoundError: If the user has no student row.
        BackendError: If any query fails.
    """
    student = get_student_by_user_id(user_id)
    if student is None:
        raise StudentNotFoundError(user_id)

    learning = list_learning_records(student.id)
    attendance = list_attendance(student.id, limit=ATTENDANCE_HISTORY_LIMIT)
    insights = list_insights(student.id, limit=INSIGHTS_LIMIT)

    return StudentDashboard(
        student=student,
        stats=compute_student_stats(student, learning, attendance),
        learning_records=learning,
        attendance_records=attendance,
        insights=insights,
    )


def refresh_insights(
    dashboard: StudentDashboard,
    client: LLMClient | None = None,
) -> InsightResult:
    """Generate new insights from the records already on the dashboard."""
    return generate_insights(
        dashboard.student.id,
        [r.to_dict() for r in dashboard.learning_records],
        [a.to_dict() for a in dashboard.attendance_records],
        client=client,
    )
