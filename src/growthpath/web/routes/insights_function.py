"""The `groq-insights` function endpoint.

Accepts `{studentId, learningRecords, attendanceRecords}` and answers with
`{success, insights, message}` on success or `{success: false, error}` with
status 500 on any failure, always carrying the function CORS headers.
"""

import structlog
from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse

from growthpath.core.insights import generate_insights
from growthpath.web.schemas import GenerateInsightsResponse, InsightFunctionRequest

logger = structlog.get_logger(__name__)

FUNCTIONS_PREFIX = "/functions/v1"

router = APIRouter(prefix=FUNCTIONS_PREFIX, tags=["functions"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


@router.options("/groq-insights")
async def groq_insights_preflight() -> PlainTextResponse:
    """CORS preflight."""
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.post("/groq-insights")
async def groq_insights(request: Request) -> JSONResponse:
    """Generate and store up to three insights for one student."""
    try:
        body = InsightFunctionRequest.model_validate(await request.json())
        result = await run_in_threadpool(
            generate_insights,
            body.student_id,
            body.learning_records,
            body.attendance_records,
        )
    except Exception as e:
        # Every failure, including malformed JSON, maps to a 500 body
        logger.error("groq_insights.failed", error=str(e))
        return JSONResponse(
            status_code=500,
            content={"error": str(e) or "Internal server error", "success": False},
            headers=CORS_HEADERS,
        )

    return JSONResponse(
        content=GenerateInsightsResponse(insights=result.count).model_dump(),
        headers=CORS_HEADERS,
    )
