import os
from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

load_dotenv()


class Settings(BaseModel):
    """Application settings loaded from environment: OpenAI key and model, Supabase project used to verify callers, provider timeout/token limits, prompt version, and logging/CORS.
    Why available: Single source of configuration so the analyzer, provider, and API agree on limits and model names."""
    openai_api_key: str = os.getenv("OPENAI_API_KEY", "")
    chat_model: str = os.getenv("CHAT_MODEL", "gpt-4o-mini")
    max_output_tokens: int = int(os.getenv("MAX_OUTPUT_TOKENS", "4096"))
    extraction_temperature: float = float(os.getenv("EXTRACTION_TEMPERATURE", "0.1"))
    provider_timeout_seconds: float = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "60"))
    supabase_url: str = os.getenv("SUPABASE_URL", "")
    supabase_anon_key: str = os.getenv("SUPABASE_ANON_KEY", "")
    prompt_version: str = os.getenv("PROMPT_VERSION", "v1")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    cors_allow_origin: str = os.getenv("CORS_ALLOW_ORIGIN", "*")

    @field_validator("max_output_tokens", "provider_timeout_seconds")
    @classmethod
    def must_be_positive(cls, v):
        """Ensure max_output_tokens and provider_timeout_seconds are positive. Prevents an unbounded or zero-length provider call from env."""
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @field_validator("extraction_temperature")
    @classmethod
    def temperature_in_range(cls, v):
        if not 0 <= v <= 2:
            raise ValueError("must be between 0 and 2")
        return v


settings = Settings()
