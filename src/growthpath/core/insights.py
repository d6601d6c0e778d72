"""AI insight generation.

Turns a student's learning and attendance records into up to three
narrative insights via the chat-completion API, then stores them in one
batch insert.

Steps run strictly in sequence:
1. performance: always attempted; any failure aborts the whole run
2. trend: only with at least 3 learning records; failure is skipped
3. recommendation: only with a nonzero average quiz score; failure is skipped

Records are taken as loosely-shaped dicts exactly as the caller supplied
them (snake_case row fields). Nothing is deduplicated: running twice stores
twice.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

import structlog

from growthpath.db.backend import BackendError, get_backend
from growthpath.db.insights_repository import insert_insights
from growthpath.llm.client import LLMClient, LLMError

logger = structlog.get_logger(__name__)

Record = Mapping[str, Any]

MIN_RECORDS_FOR_TREND = 3
RECENT_ACTIVITY_LIMIT = 5
TIMELINE_LIMIT = 10
RECENT_ATTENDANCE_LIMIT = 10


class InsightGenerationError(Exception):
    """Insight generation failed and nothing was stored."""

    pass


@dataclass(frozen=True)
class InsightKind:
    """Prompt settings for one insight type."""

    insight_type: str
    system_prompt: str
    max_tokens: int
    temperature: float


PERFORMANCE = InsightKind(
    insight_type="performance",
    system_prompt=(
        "You are an educational AI assistant that provides personalized learning "
        "insights and recommendations for students. Be encouraging, specific, and "
        "actionable in your feedback."
    ),
    max_tokens=500,
    temperature=0.7,
)

TREND = InsightKind(
    insight_type="trend",
    system_prompt=(
        "You are an educational data analyst. Provide concise trend analysis "
        "based on student learning patterns."
    ),
    max_tokens=200,
    temperature=0.5,
)

RECOMMENDATION = InsightKind(
    insight_type="recommendation",
    system_prompt=(
        "You are a learning coach. Provide specific, actionable recommendations "
        "for student improvement."
    ),
    max_tokens=300,
    temperature=0.6,
)


# =============================================================================
# SUMMARY
# =============================================================================


@dataclass
class LearningSummary:
    """The numbers every prompt is built from."""

    completed_topics: int
    in_progress_topics: int
    average_quiz_score: float
    attendance_rate: float
    total_records: int

    @property
    def completion_rate(self) -> float:
        if self.total_records == 0:
            return 0.0
        return self.completed_topics / self.total_records * 100


def summarize(
    learning_records: Sequence[Record],
    attendance_records: Sequence[Record],
) -> LearningSummary:
    """Compute summary numbers from request-supplied records.

    The quiz average only counts records with a nonzero score. Attendance
    rate covers the first 10 attendance records as given.
    """
    scores = [r["quiz_score"] for r in learning_records if r.get("quiz_score")]
    average_quiz = sum(scores) / len(scores) if scores else 0.0

    recent = attendance_records[:RECENT_ATTENDANCE_LIMIT]
    present = sum(1 for a in recent if a.get("status") == "present")
    rate = present / len(recent) * 100 if recent else 0.0

    return LearningSummary(
        completed_topics=sum(1 for r in learning_records if r.get("status") == "completed"),
        in_progress_topics=sum(1 for r in learning_records if r.get("status") == "in-progress"),
        average_quiz_score=average_quiz,
        attendance_rate=rate,
        total_records=len(learning_records),
    )


# =============================================================================
# PROMPTS
# =============================================================================


def build_performance_prompt(
    summary: LearningSummary,
    learning_records: Sequence[Record],
) -> str:
    activities = "\n".join(
        f"- {r.get('topic')}: {r.get('status')} ({r.get('learning_date')})"
        for r in learning_records[:RECENT_ACTIVITY_LIMIT]
    )
    return f"""Analyze this student's learning data and provide personalized insights:

Student Learning Summary:
- Completed Topics: {summary.completed_topics}
- In Progress Topics: {summary.in_progress_topics}
- Average Quiz Score: {summary.average_quiz_score:.1f}%
- Recent Attendance Rate: {summary.attendance_rate:.1f}%
- Total Learning Records: {summary.total_records}

Recent Learning Activities:
{activities}

Please provide:
1. A performance analysis (2-3 sentences)
2. Specific recommendations for improvement (2-3 actionable items)
3. Strengths to continue building on (1-2 items)

Keep the response concise, encouraging, and actionable. Focus on specific learning patterns and provide constructive feedback."""


def build_trend_prompt(learning_records: Sequence[Record]) -> str:
    lines = []
    for r in learning_records[:TIMELINE_LIMIT]:
        score = f" ({r['quiz_score']}%)" if r.get("quiz_score") else ""
        lines.append(f"{r.get('learning_date')}: {r.get('topic')} - {r.get('status')}{score}")
    timeline = "\n".join(lines)
    return f"""Based on this student's learning timeline, identify key trends:

Learning Timeline:
{timeline}

Provide a brief trend analysis focusing on learning velocity, consistency, and areas of strength/challenge. Maximum 2-3 sentences."""


def build_recommendation_prompt(summary: LearningSummary) -> str:
    return f"""Student Performance Context:
- Average Quiz Score: {summary.average_quiz_score:.1f}%
- Attendance Rate: {summary.attendance_rate:.1f}%
- Completion Rate: {summary.completion_rate:.1f}%

Provide 2-3 specific, actionable recommendations to help this student improve their learning outcomes. Focus on practical steps they can take."""


# =============================================================================
# GENERATION
# =============================================================================


@dataclass
class InsightResult:
    """Outcome of a successful run."""

    student_id: str
    rows: list[dict[str, Any]] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.rows)

    @property
    def insight_types(self) -> list[str]:
        return [row["insight_type"] for row in self.rows]


def _ask(client: LLMClient, kind: InsightKind, prompt: str) -> str:
    """One outbound call; returns stripped content (may be empty)."""
    content = client.simple_chat(
        system_prompt=kind.system_prompt,
        user_message=prompt,
        temperature=kind.temperature,
        max_tokens=kind.max_tokens,
    )
    return (content or "").strip()


def _try_optional(
    client: LLMClient,
    kind: InsightKind,
    prompt: str,
    student_id: str,
) -> str | None:
    """Attempt a non-critical insight, logging and skipping on failure."""
    try:
        content = _ask(client, kind, prompt)
    except LLMError as e:
        logger.warning(
            "insights.step_skipped",
            student_id=student_id,
            insight_type=kind.insight_type,
            error=str(e),
        )
        return None
    if not content:
        logger.warning(
            "insights.step_empty",
            student_id=student_id,
            insight_type=kind.insight_type,
        )
        return None
    return content


def generate_insights(
    student_id: str | None,
    learning_records: Sequence[Record],
    attendance_records: Sequence[Record],
    client: LLMClient | None = None,
) -> InsightResult:
    """Generate and store insights for one student.

    Args:
        student_id: Target student (required)
        learning_records: Learning rows, newest first
        attendance_records: Attendance rows, newest first
        client: LLM client (built from app config if not provided)

    Returns:
        InsightResult with the stored rows

    Raises:
        InsightGenerationError: Missing student ID or API key, failed
            performance step, or failed insert.
        ConfigError: If the backend is not configured.
    """
    if not student_id:
        raise InsightGenerationError("Student ID is required")

    # Fails fast on missing backend settings before any outbound call
    get_backend()

    if client is None:
        client = LLMClient()
    if not client.has_api_key:
        raise InsightGenerationError("Groq API key not configured")

    summary = summarize(learning_records, attendance_records)
    logger.info(
        "insights.started",
        student_id=student_id,
        records=summary.total_records,
        average_quiz_score=round(summary.average_quiz_score, 1),
    )

    result = InsightResult(student_id=student_id)

    def add(kind: InsightKind, content: str) -> None:
        result.rows.append(
            {
                "student_id": student_id,
                "insight_type": kind.insight_type,
                "content": content,
                "generated_at": datetime.now(timezone.utc).isoformat(),
            }
        )

    try:
        performance = _ask(client, PERFORMANCE, build_performance_prompt(summary, learning_records))
    except LLMError as e:
        raise InsightGenerationError(f"Groq API error: {e}") from e
    if not performance:
        raise InsightGenerationError("No insight generated from Groq API")
    add(PERFORMANCE, performance)

    if len(learning_records) >= MIN_RECORDS_FOR_TREND:
        trend = _try_optional(client, TREND, build_trend_prompt(learning_records), student_id)
        if trend:
            add(TREND, trend)

    if summary.average_quiz_score > 0:
        recommendation = _try_optional(
            client, RECOMMENDATION, build_recommendation_prompt(summary), student_id
        )
        if recommendation:
            add(RECOMMENDATION, recommendation)

    try:
        insert_insights(result.rows)
    except BackendError as e:
        logger.error("insights.save_failed", student_id=student_id, error=str(e))
        raise InsightGenerationError(f"Error saving insights: {e}") from e

    logger.info(
        "insights.generated",
        student_id=student_id,
        count=result.count,
        types=result.insight_types,
    )
    return result
