"""Output contract for meeting analysis: the JSON schema handed to the provider and the pydantic models that enforce it on the way back."""
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

SCHEMA_NAME = "meeting_analysis"

ANALYSIS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "decisions": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "context": {"type": "string"},
                    "tags": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["title", "context", "tags"],
                "additionalProperties": False,
            },
        },
        "tasks": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "description": {"type": "string"},
                },
                "required": ["title", "description"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["decisions", "tasks"],
    "additionalProperties": False,
}


class ExtractedDecision(BaseModel):
    """A decision already taken in the meeting: concise title, rationale/impact in context, keyword tags. Why available: Candidate the caller may import as a Decision record."""

    model_config = ConfigDict(extra="forbid", strict=True)

    title: str
    context: str
    tags: List[str]

    @field_validator("tags")
    @classmethod
    def unique_tags(cls, v: List[str]) -> List[str]:
        """Tags are a set; drop repeats but keep first-seen order."""
        seen = set()
        out = []
        for t in v:
            if t not in seen:
                seen.add(t)
                out.append(t)
        return out


class ExtractedTask(BaseModel):
    """Follow-up work identified in the meeting. Why available: Candidate the caller may import as a Task record."""

    model_config = ConfigDict(extra="forbid", strict=True)

    title: str
    description: str


class ExtractionResult(BaseModel):
    """All candidates from one analysis. Both lists may be empty; that is a successful outcome."""

    model_config = ConfigDict(extra="forbid")

    decisions: List[ExtractedDecision] = Field(...)
    tasks: List[ExtractedTask] = Field(...)
