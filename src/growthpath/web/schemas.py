"""Pydantic schemas for the Web API.

Serialization models for accounts, student dashboards, the instructor
roster, the demo overview and the insight function.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# AUTH SCHEMAS
# =============================================================================


class SignUpRequest(BaseModel):
    """Request body for creating an account."""

    email: str = Field(..., max_length=200)
    password: str = Field(..., max_length=200)
    full_name: str = Field(..., max_length=200)
    role: str = "student"


class SignInRequest(BaseModel):
    """Request body for password sign-in."""

    email: str
    password: str


class UserResponse(BaseModel):
    """Response for a user profile."""

    id: str
    email: str
    role: str
    full_name: str

    model_config = ConfigDict(from_attributes=True)


class SessionResponse(BaseModel):
    """Response for a successful sign-in."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# =============================================================================
# STUDENT SCHEMAS
# =============================================================================


class StudentResponse(BaseModel):
    """Response for a student row."""

    id: str
    user_id: str
    student_number: str
    status: str
    overall_progress: int
    streak_days: int
    last_activity: str
    enrollment_date: str = ""

    model_config = ConfigDict(from_attributes=True)


class LearningRecordResponse(BaseModel):
    """Response for a learning record."""

    id: str
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

    model_config = ConfigDict(from_attributes=True)


class AttendanceResponse(BaseModel):
    """Response for an attendance row."""

    date: str
    status: str
    notes: str | None = None

    model_config = ConfigDict(from_attributes=True)


class InsightResponse(BaseModel):
    """Response for a stored AI insight."""

    id: str
    insight_type: str
    content: str
    generated_at: str

    model_config = ConfigDict(from_attributes=True)


class StudentStatsResponse(BaseModel):
    """Headline numbers on the student dashboard."""

    overall_progress: int
    streak_days: int
    completed_topics: int
    total_topics: int
    completion_rate: int
    attendance_rate: int

    model_config = ConfigDict(from_attributes=True)


class StudentDashboardResponse(BaseModel):
    """Everything the student dashboard shows."""

    student: StudentResponse
    stats: StudentStatsResponse
    learning_records: list[LearningRecordResponse]
    attendance_records: list[AttendanceResponse]
    insights: list[InsightResponse]

    model_config = ConfigDict(from_attributes=True)


class LearningUpdateRequest(BaseModel):
    """Learning-progress form submission."""

    record_id: str | None = None
    topic: str = Field(default="", max_length=200)
    status: Literal["not-started", "in-progress", "completed"] = "not-started"
    learning_date: date = Field(default_factory=date.today)
    demo_date: date | None = None
    demo_status: Literal["pending", "completed", "yes-to-do"] = "pending"
    quiz_score: int | None = Field(default=None, ge=0, le=100)
    xmp_topic: str | None = None
    xmp_assignment: str | None = None
    xmp_status: Literal["pending", "completed"] = "pending"
    notes: str | None = Field(default=None, max_length=2000)
    attendance_status: Literal["present", "absent", "late"] = "present"
    attendance_notes: str | None = Field(default=None, max_length=2000)


class LearningUpdateResponse(BaseModel):
    """Result of a learning-progress submission."""

    created: bool
    topic: str
    overall_progress: int
    message: str


class GenerateInsightsResponse(BaseModel):
    """Result of generating insights."""

    success: bool = True
    insights: int
    message: str = "AI insights generated successfully"


# =============================================================================
# INSTRUCTOR SCHEMAS
# =============================================================================


class RosterEntryResponse(BaseModel):
    """One row of the instructor roster."""

    id: str
    student_number: str
    full_name: str
    email: str
    status: str
    overall_progress: int
    progress_level: str
    streak_days: int
    learning_records_count: int
    attendance_rate: int
    last_activity: str
    enrollment_date: str


class InstructorStatsResponse(BaseModel):
    """Headline numbers on the instructor dashboard."""

    total_students: int
    average_progress: int
    active_this_week: int
    top_performers: int

    model_config = ConfigDict(from_attributes=True)


class RosterResponse(BaseModel):
    """Filtered roster plus stats over the unfiltered roster."""

    students: list[RosterEntryResponse]
    count: int
    stats: InstructorStatsResponse


# =============================================================================
# DEMO SCHEMAS
# =============================================================================


class SampleTopicResponse(BaseModel):
    """A topic on a sample student's track."""

    id: str
    title: str
    status: str
    learning_date: str
    demo_date: str | None = None
    demo_status: str | None = None
    quiz_score: int | None = None
    xmp_topic: str | None = None
    xmp_assignment: str | None = None
    xmp_status: str | None = None

    model_config = ConfigDict(from_attributes=True)


class SampleStudentResponse(BaseModel):
    """A sample student card."""

    id: str
    name: str
    overall_progress: int
    streak_days: int
    last_activity: str
    average_score: int
    completed_topics: int
    topics: list[SampleTopicResponse]


class SampleStudentListResponse(BaseModel):
    """List of sample students."""

    students: list[SampleStudentResponse]
    count: int


class OverviewStatsResponse(BaseModel):
    """Overview numbers over the sample roster."""

    total_students: int
    average_progress: int
    active_today: int
    average_streak: int
    completed_topics: int
    total_topics: int
    completion_rate: int

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# INSIGHT FUNCTION SCHEMAS
# =============================================================================


class InsightFunctionRequest(BaseModel):
    """Body of the groq-insights function call."""

    student_id: str | None = Field(default=None, alias="studentId")
    learning_records: list[dict[str, Any]] = Field(
        default_factory=list, alias="learningRecords"
    )
    attendance_records: list[dict[str, Any]] = Field(
        default_factory=list, alias="attendanceRecords"
    )

    model_config = ConfigDict(populate_by_name=True)


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )


class TopicCatalogueResponse(BaseModel):
    """Course topics offered on every track."""

    topics: list[str]
    count: int
