"""Repository functions for the learning_records table."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

import structlog

from growthpath.db.backend import LEARNING_RECORDS, execute, get_backend

logger = structlog.get_logger(__name__)

LEARNING_STATUSES = ("not-started", "in-progress", "completed")
DEMO_STATUSES = ("pending", "completed", "yes-to-do")
XMP_STATUSES = ("pending", "completed")


@dataclass
class LearningRecord:
    """Learning record from the backend."""

    id: str
    student_id: str
    topic: str
    status: str
    learning_date: str
    demo_date: str | None = None
    demo_status: str | None = None
    quiz_score: int | None = None
    xmp_topic: str | None = None
    xmp_assignment: str | None = None
    xmp_status: str | None = None
    notes: str | None = None
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain row dict."""
        return asdict(self)


def list_learning_records(student_id: str) -> list[LearningRecord]:
    """List a student's learning records, newest first."""
    response = execute(
        get_backend()
        .table(LEARNING_RECORDS)
        .select("*")
        .eq("student_id", student_id)
        .order("created_at", desc=True)
    )
    return [_row_to_record(row) for row in response.data or []]


def count_learning_records(student_id: str) -> int:
    """Count a student's learning records without fetching them."""
    response = execute(
        get_backend()
        .table(LEARNING_RECORDS)
        .select("*", count="exact", head=True)
        .eq("student_id", student_id)
    )
    return response.count or 0


def get_learning_record(record_id: str, student_id: str) -> LearningRecord | None:
    """Get one of a student's learning records by ID."""
    response = execute(
        get_backend()
        .table(LEARNING_RECORDS)
        .select("*")
        .eq("id", record_id)
        .eq("student_id", student_id)
        .limit(1)
    )
    if not response.data:
        return None
    return _row_to_record(response.data[0])


def insert_learning_record(payload: dict[str, Any]) -> None:
    """Insert a new learning record."""
    execute(get_backend().table(LEARNING_RECORDS).insert(payload))
    logger.debug(
        "learning_records.inserted",
        student_id=payload.get("student_id"),
        topic=payload.get("topic"),
    )


def update_learning_record(record_id: str, payload: dict[str, Any]) -> None:
    """Overwrite an existing learning record in place."""
    execute(get_backend().table(LEARNING_RECORDS).update(payload).eq("id", record_id))
    logger.debug("learning_records.updated", record_id=record_id)


def _row_to_record(row: dict[str, Any]) -> LearningRecord:
    """Convert backend row to LearningRecord."""
    quiz_score = row.get("quiz_score")
    return LearningRecord(
        id=row["id"],
        student_id=row.get("student_id", ""),
        topic=row.get("topic") or "",
        status=row.get("status") or "not-started",
        learning_date=row.get("learning_date") or "",
        demo_date=row.get("demo_date"),
        demo_status=row.get("demo_status"),
        quiz_score=int(quiz_score) if quiz_score is not None else None,
        xmp_topic=row.get("xmp_topic"),
        xmp_assignment=row.get("xmp_assignment"),
        xmp_status=row.get("xmp_status"),
        notes=row.get("notes"),
        created_at=row.get("created_at") or "",
    )
