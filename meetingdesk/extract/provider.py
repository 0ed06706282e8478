"""Text-generation provider: one schema-constrained chat completion per call."""
import logging
from typing import Any, Callable, Dict, Optional, Protocol

from openai import OpenAI, OpenAIError

from meetingdesk.core.config import settings
from meetingdesk.guardrails.errors import ProviderCallFailed

logger = logging.getLogger(__name__)


class TextGenerationProvider(Protocol):
    def generate(self, system: str, prompt: str, schema: Dict[str, Any], schema_name: str) -> Optional[str]:
        """Return the raw text the model produced (expected to be JSON for `schema`), or None when it produced no text. Raise ProviderCallFailed on transport/provider errors."""
        ...


class OpenAIStructuredProvider:
    """Calls OpenAI chat completions with response_format=json_schema (strict), so the model output is constrained to the analysis schema.
    Why available: The analyzer only needs "prompt + schema in, text out"; this keeps SDK details and error translation in one place."""

    def __init__(
        self,
        client_factory: Callable[[], OpenAI],
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ):
        self._client_factory = client_factory
        self.model = model or settings.chat_model
        self.max_tokens = max_tokens or settings.max_output_tokens
        self.temperature = settings.extraction_temperature if temperature is None else temperature

    def generate(self, system: str, prompt: str, schema: Dict[str, Any], schema_name: str) -> Optional[str]:
        try:
            resp = self._client_factory().chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                max_completion_tokens=self.max_tokens,
                response_format={
                    "type": "json_schema",
                    "json_schema": {"name": schema_name, "schema": schema, "strict": True},
                },
            )
        except OpenAIError as e:
            logger.warning("provider_call_failed", exc_info=True, extra={"model": self.model})
            raise ProviderCallFailed(f"Text generation provider call failed: {type(e).__name__}") from e

        u = getattr(resp, "usage", None)
        if u is not None:
            logger.info(
                "provider_usage",
                extra={
                    "model": self.model,
                    "prompt_tokens": getattr(u, "prompt_tokens", 0) or 0,
                    "completion_tokens": getattr(u, "completion_tokens", 0) or 0,
                },
            )

        if not resp.choices:
            return None
        message = resp.choices[0].message
        if getattr(message, "refusal", None):
            logger.warning("provider_refused", extra={"model": self.model})
            return None
        return message.content or None
