from pydantic import BaseModel, ConfigDict, Field, computed_field
from typing import Dict, List, Optional

from meetingdesk.extract.schema import ExtractedDecision, ExtractedTask
from meetingdesk.gut.scorer import MAX_LEVEL, MIN_LEVEL, Band, classify, compute_score


class AnalyzeMeetingRequest(BaseModel):
    """Request body for POST /analyze-meeting. Why available: Carries the minutes text plus title/working group used only as prompt context."""

    model_config = ConfigDict(populate_by_name=True)

    summary: Optional[str] = Field(None, description="Raw meeting minutes to analyze (required, non-empty after trimming)")
    title: Optional[str] = Field(None, description="Meeting title (prompt context only)")
    working_group: Optional[str] = Field(None, alias="workingGroup", description="Working group name (prompt context only)")


class AnalyzeMeetingResponse(BaseModel):
    """Response for POST /analyze-meeting: candidate decisions and tasks. Why available: The UI lets the user pick which candidates to import."""

    decisions: List[ExtractedDecision] = Field(default_factory=list)
    tasks: List[ExtractedTask] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str
    kind: str
    retryable: bool = False
    field: Optional[str] = None


class GutInput(BaseModel):
    """Gravity, urgency, tendency on the 1..5 scale. Range checks live here so the scorer itself never has to clamp."""

    gravity: int = Field(..., ge=MIN_LEVEL, le=MAX_LEVEL)
    urgency: int = Field(..., ge=MIN_LEVEL, le=MAX_LEVEL)
    tendency: int = Field(..., ge=MIN_LEVEL, le=MAX_LEVEL)


class GutScoreResponse(BaseModel):
    """Response for POST /gut/score. Why available: Lets forms preview score, band and color while G/U/T are edited."""

    score: int = Field(..., ge=1, le=125)
    band: Band
    color: str
    percent: float = Field(..., ge=0, le=100)


class Issue(GutInput):
    """A prioritization issue as the record store holds it. score and band are computed from G/U/T on every access, never stored."""

    id: str
    title: str
    description: Optional[str] = None
    working_group_id: Optional[str] = None
    status: str = Field("Open", pattern="^(Open|Under Analysis|Resolved)$")

    @computed_field
    @property
    def score(self) -> int:
        return compute_score(self.gravity, self.urgency, self.tendency)

    @computed_field
    @property
    def band(self) -> Band:
        return classify(self.score)


class RankIssuesRequest(BaseModel):
    """Request body for POST /gut/rank: issues in creation order plus optional filters."""

    issues: List[Issue] = Field(default_factory=list)
    working_group_id: Optional[str] = Field(None, description="Only keep issues of this working group")
    status: Optional[str] = Field(None, description="Only keep issues with this status")
    search: Optional[str] = Field(None, description="Case-insensitive text matched against title or description")


class RankIssuesResponse(BaseModel):
    issues: List[Issue] = Field(default_factory=list)


class BandThreshold(BaseModel):
    band: Band
    min_score: int
    color: str


class GutScaleResponse(BaseModel):
    """Response for GET /gut/scale: per-dimension level labels and band thresholds. Why available: Lets the UI render selectors and legends from one source."""

    labels: Dict[str, Dict[int, str]]
    bands: List[BandThreshold]
    max_score: int
