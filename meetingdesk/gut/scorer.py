"""
GUT prioritization: score = Gravity x Urgency x Tendency, banded into Low / Medium / High / Critical.
Scores are always derived from the three inputs on demand; nothing here stores or caches a score.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Protocol, TypeVar

MIN_LEVEL = 1
MAX_LEVEL = 5
MAX_SCORE = MAX_LEVEL ** 3

# Lower bounds, evaluated highest-first
CRITICAL_MIN = 75
HIGH_MIN = 27
MEDIUM_MIN = 8


class Band(str, Enum):
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


@dataclass(frozen=True)
class BandStyle:
    color: str
    label: str


BAND_STYLES: Dict[Band, BandStyle] = {
    Band.CRITICAL: BandStyle(color="red", label="Critical"),
    Band.HIGH: BandStyle(color="orange", label="High"),
    Band.MEDIUM: BandStyle(color="yellow", label="Medium"),
    Band.LOW: BandStyle(color="green", label="Low"),
}

SCALE_LABELS: Dict[str, Dict[int, str]] = {
    "gravity": {
        1: "No gravity",
        2: "Slightly grave",
        3: "Grave",
        4: "Very grave",
        5: "Extremely grave",
    },
    "urgency": {
        1: "Can wait",
        2: "Slightly urgent",
        3: "Urgent",
        4: "Very urgent",
        5: "Immediate",
    },
    "tendency": {
        1: "Will not change",
        2: "Will worsen in the long term",
        3: "Will worsen in the medium term",
        4: "Will worsen in the short term",
        5: "Will worsen rapidly",
    },
}


def compute_score(gravity: int, urgency: int, tendency: int) -> int:
    """Return gravity * urgency * tendency. Inputs are expected in [1, 5]; callers validate, this function does not clamp.
    Why available: The one place the GUT product is computed, for display, ranking, and the /gut endpoints."""
    return gravity * urgency * tendency


def classify(score: int) -> Band:
    """Map a GUT score to its band: >= 75 Critical, >= 27 High, >= 8 Medium, otherwise Low."""
    if score >= CRITICAL_MIN:
        return Band.CRITICAL
    if score >= HIGH_MIN:
        return Band.HIGH
    if score >= MEDIUM_MIN:
        return Band.MEDIUM
    return Band.LOW


def band_style(band: Band) -> BandStyle:
    return BAND_STYLES[band]


def score_percent(score: int) -> float:
    """Share of the maximum score (125) as a percentage capped at 100, for rendering a score bar."""
    return min(score / MAX_SCORE * 100.0, 100.0)


class Scored(Protocol):
    gravity: int
    urgency: int
    tendency: int


S = TypeVar("S", bound=Scored)


def matches_search(issue, search: Optional[str]) -> bool:
    """Case-insensitive substring match on title or description; a missing description counts as empty and a blank query matches everything."""
    q = (search or "").lower()
    if not q:
        return True
    title = (getattr(issue, "title", None) or "").lower()
    description = (getattr(issue, "description", None) or "").lower()
    return q in title or q in description


def rank_issues(
    issues: Iterable[S],
    working_group_id: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> List[S]:
    """Optionally filter issues by free-text search, working group and status, then order by descending GUT score.
    sorted() is stable, so equal scores keep their input (creation) order across repeated calls.
    Why available: Backs the prioritization matrix list; repeated renders must not shuffle ties."""
    selected = [
        i for i in issues
        if matches_search(i, search)
        and (working_group_id is None or getattr(i, "working_group_id", None) == working_group_id)
        and (status is None or getattr(i, "status", None) == status)
    ]
    return sorted(selected, key=lambda i: compute_score(i.gravity, i.urgency, i.tendency), reverse=True)
