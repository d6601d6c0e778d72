"""FastAPI application factory.

Main entry point for the GrowthPath Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.types import Receive, Scope, Send

from growthpath.config import ConfigError, load_app_config
from growthpath.db.backend import BackendError, get_backend
from growthpath.web.routes import (
    auth_router,
    demo_router,
    health_router,
    insights_function_router,
    instructor_router,
    students_router,
)
from growthpath.web.routes.insights_function import FUNCTIONS_PREFIX

logger = structlog.get_logger(__name__)


class APICORSMiddleware(CORSMiddleware):
    """CORS for the API routes only.

    Function endpoints answer their own preflights with fixed headers, so
    requests under `exempt_prefix` pass through untouched.
    """

    def __init__(self, app, exempt_prefix: str = FUNCTIONS_PREFIX, **kwargs):
        super().__init__(app, **kwargs)
        self.exempt_prefix = exempt_prefix

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["path"].startswith(self.exempt_prefix):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    # Startup: refuse to serve without backend credentials
    try:
        get_backend()
    except ConfigError as e:
        logger.error("api_startup_failed", error=str(e))
        raise
    logger.info("api_startup", provider=load_app_config().default_provider)
    yield


async def _backend_error_handler(request: Request, exc: BackendError) -> JSONResponse:
    logger.error("backend_request_failed", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": "Backend request failed. Please try again."},
    )


async def _config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
    logger.error("backend_not_configured", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc)},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="GrowthPath API",
        description="Learning-progress dashboard API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        APICORSMiddleware,
        allow_origins=load_app_config().server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(BackendError, _backend_error_handler)
    app.add_exception_handler(ConfigError, _config_error_handler)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(students_router)
    app.include_router(instructor_router)
    app.include_router(demo_router)
    app.include_router(insights_function_router)

    return app


# Default app instance for uvicorn
app = create_app()
