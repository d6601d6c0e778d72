"""Bundled demo roster.

Five sample students and the course topic catalogue, used by the demo
overview endpoints and `growthpath overview` when no backend is configured.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class TopicProgress:
    """One topic on a sample student's track."""

    id: str
    title: str
    status: str  # not-started | in-progress | completed
    learning_date: str
    demo_date: str | None = None
    demo_status: str | None = None
    quiz_score: int | None = None
    xmp_topic: str | None = None
    xmp_assignment: str | None = None
    xmp_status: str | None = None


@dataclass
class StudentProgress:
    """A sample student with inline topics."""

    id: str
    name: str
    overall_progress: int
    streak_days: int
    last_activity: str
    topics: list[TopicProgress] = field(default_factory=list)


ALL_TOPICS = [
    "Introduction to HTML",
    "CSS Fundamentals",
    "JavaScript Basics",
    "React Fundamentals",
    "Node.js Basics",
    "Database Design",
    "API Development",
    "Testing & Debugging",
    "Deployment Strategies",
    "Version Control with Git",
]


def _html(learning_date: str, demo_date: str, score: int) -> TopicProgress:
    return TopicProgress(
        id="1",
        title="Introduction to HTML",
        status="completed",
        learning_date=learning_date,
        demo_date=demo_date,
        demo_status="completed",
        quiz_score=score,
        xmp_topic="Professional Development",
        xmp_assignment="HTML Project",
        xmp_status="completed",
    )


def _css(
    status: str,
    learning_date: str,
    demo_date: str | None = None,
    score: int | None = None,
) -> TopicProgress:
    done = status == "completed"
    return TopicProgress(
        id="2",
        title="CSS Fundamentals",
        status=status,
        learning_date=learning_date,
        demo_date=demo_date,
        demo_status="completed" if done else "pending",
        quiz_score=score,
        xmp_topic="Web Design",
        xmp_assignment="CSS Styling",
        xmp_status="completed" if done else "pending",
    )


def _javascript(
    status: str,
    learning_date: str,
    demo_date: str | None = None,
    score: int | None = None,
) -> TopicProgress:
    done = status == "completed"
    return TopicProgress(
        id="3",
        title="JavaScript Basics",
        status=status,
        learning_date=learning_date,
        demo_date=demo_date,
        demo_status="completed" if done else "yes-to-do",
        quiz_score=score,
        xmp_topic="Programming Logic",
        xmp_assignment="JS Functions",
        xmp_status="completed" if done else "pending",
    )


SAMPLE_STUDENTS = [
    StudentProgress(
        id="1",
        name="Alex Johnson",
        overall_progress=85,
        streak_days=12,
        last_activity="2024-08-30",
        topics=[
            _html("2024-08-20", "2024-08-25", 95),
            _css("completed", "2024-08-22", "2024-08-27", 88),
            _javascript("in-progress", "2024-08-28"),
        ],
    ),
    StudentProgress(
        id="2",
        name="Sarah Chen",
        overall_progress=92,
        streak_days=18,
        last_activity="2024-08-30",
        topics=[
            _html("2024-08-18", "2024-08-23", 98),
            _css("completed", "2024-08-20", "2024-08-25", 94),
            _javascript("completed", "2024-08-26", "2024-08-29", 91),
        ],
    ),
    StudentProgress(
        id="3",
        name="Michael Rodriguez",
        overall_progress=76,
        streak_days=8,
        last_activity="2024-08-29",
        topics=[
            _html("2024-08-21", "2024-08-26", 82),
            _css("in-progress", "2024-08-28"),
        ],
    ),
    StudentProgress(
        id="4",
        name="Emily Davis",
        overall_progress=88,
        streak_days=15,
        last_activity="2024-08-30",
        topics=[
            _html("2024-08-19", "2024-08-24", 93),
            _css("completed", "2024-08-23", "2024-08-28", 89),
            _javascript("in-progress", "2024-08-29"),
        ],
    ),
    StudentProgress(
        id="5",
        name="David Thompson",
        overall_progress=71,
        streak_days=5,
        last_activity="2024-08-28",
        topics=[
            _html("2024-08-22", "2024-08-27", 78),
            _css("in-progress", "2024-08-28"),
        ],
    ),
]


def search_sample_students(term: str = "") -> list[StudentProgress]:
    """Case-insensitive name search over the sample roster."""
    needle = term.lower()
    return [s for s in SAMPLE_STUDENTS if needle in s.name.lower()]
