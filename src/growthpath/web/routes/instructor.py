"""Instructor endpoints: roster, stats and CSV export."""

from datetime import date

from fastapi import APIRouter, Depends, Query, Response

from growthpath.core.accounts import Session
from growthpath.core.export import export_filename, roster_to_csv
from growthpath.core.roster import (
    ProgressFilter,
    RosterEntry,
    RosterFilter,
    StatusFilter,
    build_roster,
    progress_bucket,
)
from growthpath.core.stats import compute_instructor_stats
from growthpath.web.deps import require_instructor
from growthpath.web.schemas import (
    InstructorStatsResponse,
    RosterEntryResponse,
    RosterResponse,
)

router = APIRouter(prefix="/api/instructor", tags=["instructor"])


def _entry_response(entry: RosterEntry) -> RosterEntryResponse:
    s = entry.student
    return RosterEntryResponse(
        id=s.id,
        student_number=s.student_number,
        full_name=s.full_name,
        email=s.email,
        status=s.status,
        overall_progress=s.overall_progress,
        progress_level=progress_bucket(s.overall_progress),
        streak_days=s.streak_days,
        learning_records_count=entry.learning_records_count,
        attendance_rate=entry.attendance_rate,
        last_activity=s.last_activity,
        enrollment_date=s.enrollment_date,
    )


@router.get("/students", response_model=RosterResponse)
def list_roster(
    search: str = "",
    status: StatusFilter = Query("all"),
    progress: ProgressFilter = Query("all"),
    session: Session = Depends(require_instructor),
) -> RosterResponse:
    """Filtered roster; stats are computed over the unfiltered roster."""
    entries = build_roster()
    visible = RosterFilter(search=search, status=status, progress=progress).apply(entries)
    stats = compute_instructor_stats([e.student for e in entries])
    return RosterResponse(
        students=[_entry_response(e) for e in visible],
        count=len(visible),
        stats=InstructorStatsResponse.model_validate(stats),
    )


@router.get("/stats", response_model=InstructorStatsResponse)
def get_stats(session: Session = Depends(require_instructor)) -> InstructorStatsResponse:
    """Headline numbers over every student."""
    entries = build_roster()
    return InstructorStatsResponse.model_validate(
        compute_instructor_stats([e.student for e in entries])
    )


@router.get("/export")
def export_roster(
    search: str = "",
    status: StatusFilter = Query("all"),
    progress: ProgressFilter = Query("all"),
    session: Session = Depends(require_instructor),
) -> Response:
    """Download the filtered roster as CSV."""
    entries = RosterFilter(search=search, status=status, progress=progress).apply(
        build_roster()
    )
    filename = export_filename(date.today())
    return Response(
        content=roster_to_csv(entries),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
