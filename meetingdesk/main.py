import logging
from typing import Optional

from fastapi import Depends, FastAPI, Header, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool

from meetingdesk.auth.verifier import SupabaseIdentityVerifier, bearer_token
from meetingdesk.core.config import settings
from meetingdesk.core.openai_client import get_openai_client
from meetingdesk.core.supabase_client import get_supabase_client
from meetingdesk.extract.analyzer import MeetingAnalyzer
from meetingdesk.extract.provider import OpenAIStructuredProvider
from meetingdesk.guardrails.errors import (
    CORS_HEADERS,
    ExtractionError,
    as_http_500,
    as_json_error,
)
from meetingdesk.gut.scorer import (
    BAND_STYLES,
    CRITICAL_MIN,
    HIGH_MIN,
    MAX_SCORE,
    MEDIUM_MIN,
    SCALE_LABELS,
    Band,
    band_style,
    classify,
    compute_score,
    rank_issues,
    score_percent,
)
from meetingdesk.models.schemas import (
    AnalyzeMeetingRequest,
    AnalyzeMeetingResponse,
    BandThreshold,
    ErrorResponse,
    GutInput,
    GutScaleResponse,
    GutScoreResponse,
    RankIssuesRequest,
    RankIssuesResponse,
)
from meetingdesk.observability.middleware import RequestTimingMiddleware, get_request_id


# -------------------------
# App setup
# -------------------------

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Meeting Desk")
app.add_middleware(RequestTimingMiddleware)


def get_analyzer() -> MeetingAnalyzer:
    """Build the analyzer with Supabase as identity provider and OpenAI as text-generation provider. Clients are created lazily on first use.
    Why available: FastAPI dependency so tests can swap in stub verifier/provider via app.dependency_overrides."""
    return MeetingAnalyzer(
        verifier=SupabaseIdentityVerifier(get_supabase_client),
        provider=OpenAIStructuredProvider(get_openai_client),
    )


# -------------------------
# Root
# -------------------------

@app.get("/")
def root():
    """Returns a minimal welcome payload with app name and docs URL.
    Why available: Gives clients and load balancers a simple root endpoint to confirm the API is running."""
    return {"app": "Meeting Desk", "docs": "/docs"}


@app.get("/health")
def health():
    """Returns 200 OK with status. Used by load balancers and probes to check if the API is up."""
    return {"status": "ok"}


# -------------------------
# Meeting analysis
# -------------------------

@app.options("/analyze-meeting")
def analyze_meeting_preflight():
    """Answers browser preflight with permissive CORS headers. No authentication: preflight requests never carry credentials."""
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@app.post(
    "/analyze-meeting",
    response_model=AnalyzeMeetingResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        500: {"model": ErrorResponse, "description": "Provider failure"},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": AnalyzeMeetingRequest.model_json_schema()}},
        }
    },
)
async def analyze_meeting(
    request: Request,
    authorization: Optional[str] = Header(None),
    analyzer: MeetingAnalyzer = Depends(get_analyzer),
):
    """Extracts candidate decisions and action items from meeting minutes using a schema-constrained LLM call. Requires a Bearer session token; writes nothing.
    The body is read raw and only decoded after the caller is verified, so an unauthenticated caller always gets 401.
    Why available: Lets users import decisions/tasks from pasted minutes instead of typing them one by one."""
    body = await request.body()
    try:
        # provider call blocks; keep it off the event loop
        result = await run_in_threadpool(analyzer.extract_body, body, bearer_token(authorization))
    except ExtractionError as e:
        logger.info(
            "analyze_meeting_rejected",
            extra={"request_id": get_request_id(request), "kind": e.kind, "status_code": e.status_code},
        )
        return as_json_error(e)
    except Exception as e:
        return as_http_500(e)

    return JSONResponse(
        content=AnalyzeMeetingResponse(decisions=result.decisions, tasks=result.tasks).model_dump(),
        headers=CORS_HEADERS,
    )


# -------------------------
# GUT prioritization
# -------------------------

@app.post("/gut/score", response_model=GutScoreResponse)
def gut_score(req: GutInput):
    """Returns the GUT score (G x U x T), its band, display color and bar percentage.
    Why available: Form preview while editing an issue; the score is never stored, so this is the canonical way to obtain it."""
    score = compute_score(req.gravity, req.urgency, req.tendency)
    band = classify(score)
    return GutScoreResponse(score=score, band=band, color=band_style(band).color, percent=score_percent(score))


@app.get("/gut/scale", response_model=GutScaleResponse)
def gut_scale():
    """Returns level labels for gravity/urgency/tendency and the band thresholds, highest first."""
    thresholds = [
        (Band.CRITICAL, CRITICAL_MIN),
        (Band.HIGH, HIGH_MIN),
        (Band.MEDIUM, MEDIUM_MIN),
        (Band.LOW, 1),
    ]
    return GutScaleResponse(
        labels=SCALE_LABELS,
        bands=[BandThreshold(band=b, min_score=m, color=BAND_STYLES[b].color) for b, m in thresholds],
        max_score=MAX_SCORE,
    )


@app.post("/gut/rank", response_model=RankIssuesResponse)
def gut_rank(req: RankIssuesRequest):
    """Filters issues by text search, working group and status, and orders them by descending GUT score; equal scores keep the order they were sent in.
    Why available: Backs the prioritization matrix list so repeated renders show a stable order."""
    return RankIssuesResponse(
        issues=rank_issues(
            req.issues, working_group_id=req.working_group_id, status=req.status, search=req.search
        )
    )
