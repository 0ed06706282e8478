"""Meeting analysis: turn free-text minutes into candidate decisions and tasks via a schema-constrained LLM call. Nothing is persisted here."""
import json
import logging
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from meetingdesk.auth.verifier import IdentityVerifier, UserIdentity
from meetingdesk.extract.provider import TextGenerationProvider
from meetingdesk.extract.schema import ANALYSIS_SCHEMA, SCHEMA_NAME, ExtractionResult
from meetingdesk.guardrails.errors import InvalidInput, ProviderResponseInvalid
from meetingdesk.models.schemas import AnalyzeMeetingRequest
from meetingdesk.prompts.loader import get_system_prompt, get_user_prompt, render

logger = logging.getLogger(__name__)

PROMPT_COMPONENT = "analyze_meeting"
NOT_SPECIFIED = "Not specified"


@dataclass(frozen=True)
class ExtractionRequest:
    summary: Optional[str]
    title: Optional[str] = None
    working_group: Optional[str] = None


def build_user_prompt(request: ExtractionRequest, template: Optional[str] = None) -> str:
    """Fill the user prompt with meeting title, working group (or 'Not specified'), and the minutes verbatim.
    Why available: Shared by the analyzer and tests so the exact prompt the provider sees can be checked."""
    template = template if template is not None else get_user_prompt(PROMPT_COMPONENT)
    title = (request.title or "").strip() or NOT_SPECIFIED
    group = (request.working_group or "").strip() or NOT_SPECIFIED
    return render(
        template,
        {"TITLE": title, "WORKING_GROUP": group, "MINUTES": request.summary or ""},
    )


def parse_result(raw: Optional[str]) -> ExtractionResult:
    """Parse provider text as JSON matching the analysis schema. Raises ProviderResponseInvalid if the text is missing, not JSON, or violates the schema; no partial result is ever returned."""
    if raw is None or not raw.strip():
        raise ProviderResponseInvalid("Unexpected response from model: no text output")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ProviderResponseInvalid("Unexpected response from model: output is not valid JSON") from e
    try:
        return ExtractionResult.model_validate(data)
    except ValidationError as e:
        raise ProviderResponseInvalid(
            f"Unexpected response from model: output does not match schema ({e.error_count()} errors)"
        ) from e


def parse_request(body: Optional[bytes]) -> ExtractionRequest:
    """Decode a raw POST body into an ExtractionRequest. Non-JSON bodies and wrong-typed fields raise InvalidInput (naming the field when there is one); an empty body counts as {}.
    Why available: Lets the endpoint read the body only after the caller has been verified."""
    try:
        data = json.loads(body) if body and body.strip() else {}
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidInput("Request body must be a JSON object") from e
    try:
        req = AnalyzeMeetingRequest.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        loc = [str(p) for p in first.get("loc", ())]
        if not loc:
            raise InvalidInput("Request body must be a JSON object") from e
        raise InvalidInput(f"Invalid value for '{loc[0]}': {first.get('msg', 'invalid')}", field=loc[0]) from e
    return ExtractionRequest(summary=req.summary, title=req.title, working_group=req.working_group)


class MeetingAnalyzer:
    """Orchestrates one extraction: verify caller -> validate minutes -> prompt -> provider call -> parse.
    Holds no per-request state, so one instance can serve concurrent requests.
    Why available: Powers POST /analyze-meeting; the caller decides which returned candidates to import."""

    def __init__(self, verifier: IdentityVerifier, provider: TextGenerationProvider):
        self.verifier = verifier
        self.provider = provider

    def extract(self, request: ExtractionRequest, credential: Optional[str]) -> ExtractionResult:
        user = self.verifier.verify(credential)
        return self._analyze(request, user)

    def extract_body(self, body: Optional[bytes], credential: Optional[str]) -> ExtractionResult:
        """Same as extract, but for an undecoded request body: the credential is checked before the body is even parsed."""
        user = self.verifier.verify(credential)
        return self._analyze(parse_request(body), user)

    def _analyze(self, request: ExtractionRequest, user: UserIdentity) -> ExtractionResult:
        if not (request.summary or "").strip():
            raise InvalidInput("Meeting minutes content ('summary') is required", field="summary")

        system = get_system_prompt(PROMPT_COMPONENT)
        prompt = build_user_prompt(request)

        raw = self.provider.generate(system, prompt, ANALYSIS_SCHEMA, SCHEMA_NAME)
        try:
            result = parse_result(raw)
        except ProviderResponseInvalid:
            logger.warning(
                "provider_response_invalid",
                extra={"user_id": user.user_id, "raw_preview": (raw or "")[:200]},
            )
            raise

        logger.info(
            "meeting_analyzed",
            extra={
                "user_id": user.user_id,
                "decisions": len(result.decisions),
                "tasks": len(result.tasks),
            },
        )
        return result
