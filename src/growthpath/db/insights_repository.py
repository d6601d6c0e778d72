"""Repository functions for the ai_insights table (append-only)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from growthpath.db.backend import AI_INSIGHTS, execute, get_backend

logger = structlog.get_logger(__name__)


@dataclass
class AIInsight:
    """Generated insight from the backend."""

    id: str
    student_id: str
    insight_type: str
    content: str
    generated_at: str


def list_insights(student_id: str, limit: int = 5) -> list[AIInsight]:
    """List a student's latest insights, most recently generated first."""
    response = execute(
        get_backend()
        .table(AI_INSIGHTS)
        .select("*")
        .eq("student_id", student_id)
        .order("generated_at", desc=True)
        .limit(limit)
    )
    return [_row_to_record(row) for row in response.data or []]


def insert_insights(rows: list[dict[str, Any]]) -> int:
    """Insert a batch of insight rows in one call.

    Returns:
        Number of rows sent.
    """
    execute(get_backend().table(AI_INSIGHTS).insert(rows))
    logger.debug("ai_insights.inserted", count=len(rows))
    return len(rows)


def _row_to_record(row: dict[str, Any]) -> AIInsight:
    """Convert backend row to AIInsight."""
    return AIInsight(
        id=row.get("id", ""),
        student_id=row.get("student_id", ""),
        insight_type=row.get("insight_type", ""),
        content=row.get("content") or "",
        generated_at=row.get("generated_at") or "",
    )
