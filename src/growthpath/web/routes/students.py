"""Student self-service endpoints: dashboard, learning updates, insights."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from growthpath.core.accounts import Session
from growthpath.core.dashboard import (
    StudentDashboard,
    StudentNotFoundError,
    load_student_dashboard,
    refresh_insights,
)
from growthpath.core.insights import InsightGenerationError
from growthpath.core.learning import (
    LearningUpdate,
    LearningUpdateError,
    submit_learning_update,
)
from growthpath.db.students_repository import get_student_by_user_id
from growthpath.web.deps import require_student
from growthpath.web.schemas import (
    GenerateInsightsResponse,
    LearningUpdateRequest,
    LearningUpdateResponse,
    StudentDashboardResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/me", tags=["students"])


def _load_dashboard(session: Session) -> StudentDashboard:
    try:
        return load_student_dashboard(session.user.id)
    except StudentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("/dashboard", response_model=StudentDashboardResponse)
def get_dashboard(session: Session = Depends(require_student)) -> StudentDashboardResponse:
    """Student row, stats, learning records, attendance and latest insights."""
    return StudentDashboardResponse.model_validate(_load_dashboard(session))


@router.post("/learning", response_model=LearningUpdateResponse)
def post_learning(
    body: LearningUpdateRequest,
    session: Session = Depends(require_student),
) -> LearningUpdateResponse:
    """Create or update a learning record and mark today's attendance."""
    student = get_student_by_user_id(session.user.id)
    if student is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(StudentNotFoundError(session.user.id)),
        )

    update = LearningUpdate(
        status=body.status,
        learning_date=body.learning_date.isoformat(),
        record_id=body.record_id,
        topic=body.topic,
        demo_date=body.demo_date.isoformat() if body.demo_date else None,
        demo_status=body.demo_status,
        quiz_score=body.quiz_score,
        xmp_topic=body.xmp_topic,
        xmp_assignment=body.xmp_assignment,
        xmp_status=body.xmp_status,
        notes=body.notes,
        attendance_status=body.attendance_status,
        attendance_notes=body.attendance_notes,
    )
    try:
        result = submit_learning_update(student, update)
    except LearningUpdateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    message = "Learning record created" if result.created else "Learning record updated"
    return LearningUpdateResponse(
        created=result.created,
        topic=result.topic,
        overall_progress=result.overall_progress,
        message=message,
    )


@router.post("/insights", response_model=GenerateInsightsResponse)
def post_insights(session: Session = Depends(require_student)) -> GenerateInsightsResponse:
    """Generate fresh AI insights from the student's current records."""
    dashboard = _load_dashboard(session)
    try:
        result = refresh_insights(dashboard)
    except InsightGenerationError as e:
        logger.error("students.insights_failed", user_id=session.user.id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from e
    return GenerateInsightsResponse(insights=result.count)
