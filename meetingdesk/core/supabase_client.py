"""Supabase client used as the identity provider for bearer session tokens."""
import logging
import threading
from typing import Any

from supabase import Client, create_client

from meetingdesk.core.config import settings

logger = logging.getLogger(__name__)

_supabase_client: Any = None
_lock = threading.Lock()


def get_supabase_client() -> Client:
    """Return a singleton Supabase client built from SUPABASE_URL and SUPABASE_ANON_KEY. Raises RuntimeError when either is missing.
    Why available: The anon client is enough to resolve a caller's access token to a user via auth.get_user(jwt); no service key is needed."""
    global _supabase_client
    if _supabase_client is None:
        with _lock:
            if _supabase_client is None:
                if not settings.supabase_url or not settings.supabase_anon_key:
                    logger.error("supabase_not_configured")
                    raise RuntimeError("Supabase not configured (missing SUPABASE_URL or SUPABASE_ANON_KEY)")
                _supabase_client = create_client(settings.supabase_url, settings.supabase_anon_key)
    return _supabase_client
