"""Learning-update submission.

One submission writes, in order: the learning record (update or insert),
today's attendance row (upsert on student and day), and the student's
activity date and progress. The first backend failure stops the sequence.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

import structlog

from growthpath.db.attendance_repository import ATTENDANCE_STATUSES, upsert_attendance
from growthpath.db.learning_repository import (
    DEMO_STATUSES,
    LEARNING_STATUSES,
    XMP_STATUSES,
    get_learning_record,
    insert_learning_record,
    update_learning_record,
)
from growthpath.db.students_repository import StudentRecord, update_student

logger = structlog.get_logger(__name__)

COMPLETED_INCREMENT = 5
OTHER_INCREMENT = 2
MAX_PROGRESS = 100


class LearningUpdateError(Exception):
    """Submitted learning update is invalid."""

    pass


@dataclass
class LearningUpdate:
    """A submitted learning-progress form.

    Leave `record_id` empty to create a record for `topic`.
    """

    status: str
    learning_date: str
    record_id: str | None = None
    topic: str = ""
    demo_date: str | None = None
    demo_status: str = "pending"
    quiz_score: int | None = None
    xmp_topic: str | None = None
    xmp_assignment: str | None = None
    xmp_status: str = "pending"
    notes: str | None = None
    attendance_status: str = "present"
    attendance_notes: str | None = None


@dataclass
class LearningUpdateResult:
    """What a submission changed."""

    created: bool
    topic: str
    overall_progress: int


def next_progress(current: int, status: str) -> int:
    """Progress after a submission: +5 when completed, +2 otherwise, capped."""
    step = COMPLETED_INCREMENT if status == "completed" else OTHER_INCREMENT
    return min(MAX_PROGRESS, current + step)


def _validate(update: LearningUpdate) -> None:
    if update.status not in LEARNING_STATUSES:
        raise LearningUpdateError(f"Invalid status '{update.status}'")
    if update.demo_date and update.demo_status not in DEMO_STATUSES:
        raise LearningUpdateError(f"Invalid demo status '{update.demo_status}'")
    if update.xmp_topic and update.xmp_status not in XMP_STATUSES:
        raise LearningUpdateError(f"Invalid XMP status '{update.xmp_status}'")
    if update.attendance_status not in ATTENDANCE_STATUSES:
        raise LearningUpdateError(f"Invalid attendance status '{update.attendance_status}'")
    if update.quiz_score is not None and not 0 <= update.quiz_score <= 100:
        raise LearningUpdateError("Quiz score must be between 0 and 100")
    if not update.record_id and not update.topic.strip():
        raise LearningUpdateError("Topic is required for a new learning record")


def build_learning_payload(
    student_id: str,
    update: LearningUpdate,
    topic: str,
) -> dict[str, Any]:
    """Row written for the learning record.

    Dependent statuses are only stored alongside the field they describe.
    A quiz score of 0 is stored as no score.
    """
    return {
        "student_id": student_id,
        "topic": topic,
        "status": update.status,
        "learning_date": update.learning_date,
        "demo_date": update.demo_date or None,
        "demo_status": update.demo_status if update.demo_date else None,
        "quiz_score": update.quiz_score or None,
        "xmp_topic": update.xmp_topic or None,
        "xmp_assignment": update.xmp_assignment or None,
        "xmp_status": update.xmp_status if update.xmp_topic else None,
        "notes": update.notes or None,
    }


def submit_learning_update(
    student: StudentRecord,
    update: LearningUpdate,
    today: date | None = None,
) -> LearningUpdateResult:
    """Apply a learning update for the signed-in student.

    Raises:
        LearningUpdateError: If the form is invalid or the selected record
            does not belong to the student.
        BackendError: If any write fails.
    """
    _validate(update)
    today = today or date.today()

    if update.record_id:
        existing = get_learning_record(update.record_id, student.id)
        if existing is None:
            raise LearningUpdateError(f"Learning record '{update.record_id}' not found")
        topic = update.topic.strip() or existing.topic
        update_learning_record(update.record_id, build_learning_payload(student.id, update, topic))
    else:
        topic = update.topic.strip()
        insert_learning_record(build_learning_payload(student.id, update, topic))

    upsert_attendance(student.id, today, update.attendance_status, update.attendance_notes)

    progress = next_progress(student.overall_progress, update.status)
    update_student(
        student.id,
        {"last_activity": today.isoformat(), "overall_progress": progress},
    )

    logger.info(
        "learning.submitted",
        student_id=student.id,
        topic=topic,
        status=update.status,
        created=not update.record_id,
        overall_progress=progress,
    )
    return LearningUpdateResult(
        created=not update.record_id,
        topic=topic,
        overall_progress=progress,
    )
