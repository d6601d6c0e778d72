"""Route handlers for the Web API."""

from growthpath.web.routes.health import router as health_router
from growthpath.web.routes.auth import router as auth_router
from growthpath.web.routes.students import router as students_router
from growthpath.web.routes.instructor import router as instructor_router
from growthpath.web.routes.demo import router as demo_router
from growthpath.web.routes.insights_function import router as insights_function_router

__all__ = [
    "health_router",
    "auth_router",
    "students_router",
    "instructor_router",
    "demo_router",
    "insights_function_router",
]
