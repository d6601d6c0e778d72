"""Demo endpoints over the bundled sample roster. No sign-in required."""

from fastapi import APIRouter

from growthpath.core.sample_data import (
    ALL_TOPICS,
    SAMPLE_STUDENTS,
    StudentProgress,
    search_sample_students,
)
from growthpath.core.stats import average_topic_score, compute_overview_stats
from growthpath.web.schemas import (
    OverviewStatsResponse,
    SampleStudentListResponse,
    SampleStudentResponse,
    SampleTopicResponse,
    TopicCatalogueResponse,
)

router = APIRouter(prefix="/api/demo", tags=["demo"])


def _card(student: StudentProgress) -> SampleStudentResponse:
    return SampleStudentResponse(
        id=student.id,
        name=student.name,
        overall_progress=student.overall_progress,
        streak_days=student.streak_days,
        last_activity=student.last_activity,
        average_score=average_topic_score(student.topics),
        completed_topics=sum(1 for t in student.topics if t.status == "completed"),
        topics=[SampleTopicResponse.model_validate(t) for t in student.topics],
    )


@router.get("/students", response_model=SampleStudentListResponse)
async def list_sample_students(search: str = "") -> SampleStudentListResponse:
    """Sample student cards, optionally filtered by name."""
    students = [_card(s) for s in search_sample_students(search)]
    return SampleStudentListResponse(students=students, count=len(students))


@router.get("/overview", response_model=OverviewStatsResponse)
async def get_overview() -> OverviewStatsResponse:
    """Overview numbers over the full sample roster."""
    return OverviewStatsResponse.model_validate(compute_overview_stats(SAMPLE_STUDENTS))


@router.get("/topics", response_model=TopicCatalogueResponse)
async def list_topics() -> TopicCatalogueResponse:
    """The course topic catalogue, in teaching order."""
    return TopicCatalogueResponse(topics=list(ALL_TOPICS), count=len(ALL_TOPICS))
