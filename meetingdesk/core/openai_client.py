"""OpenAI client for structured meeting extraction (api_key and timeout from config)."""
import threading
from typing import Any

from meetingdesk.core.config import settings
from openai import OpenAI

_openai_client: Any = None
_lock = threading.Lock()


def get_openai_client() -> OpenAI:
    """Return a singleton OpenAI client configured with api_key and timeout from settings. SDK retries are disabled; a failed call surfaces to the caller as-is.
    Creation is guarded by a lock since routes run in the threadpool.
    Why available: Single place to get the OpenAI client so the extraction provider always uses the same bound on blocking time."""
    global _openai_client
    if _openai_client is None:
        with _lock:
            if _openai_client is None:
                _openai_client = OpenAI(
                    api_key=settings.openai_api_key,
                    timeout=settings.provider_timeout_seconds,
                    max_retries=0,
                )
    return _openai_client
