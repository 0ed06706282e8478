import sys
from pathlib import Path
import json
from typing import Any, Dict, List, Optional

import pytest

# Ensure repo root is on sys.path so `import meetingdesk...` works in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from meetingdesk.auth.verifier import UserIdentity  # noqa: E402
from meetingdesk.guardrails.errors import ProviderCallFailed, Unauthorized  # noqa: E402

VALID_TOKEN = "valid-session-token"


class StubVerifier:
    """Accepts only VALID_TOKEN; records every credential it was asked about."""

    def __init__(self):
        self.seen: List[Optional[str]] = []

    def verify(self, credential: Optional[str]) -> UserIdentity:
        self.seen.append(credential)
        if credential != VALID_TOKEN:
            raise Unauthorized("Not authorized")
        return UserIdentity(user_id="user-1", email="member@example.org")


class StubProvider:
    """Returns a canned text (or raises ProviderCallFailed when fail=True) and records each call."""

    def __init__(self, text: Optional[str] = None, fail: bool = False):
        self.text = text
        self.fail = fail
        self.calls: List[Dict[str, Any]] = []

    def generate(self, system: str, prompt: str, schema: Dict[str, Any], schema_name: str) -> Optional[str]:
        self.calls.append({"system": system, "prompt": prompt, "schema": schema, "schema_name": schema_name})
        if self.fail:
            raise ProviderCallFailed("Text generation provider call failed: APITimeoutError")
        return self.text


@pytest.fixture
def verifier():
    return StubVerifier()


@pytest.fixture
def provider_factory():
    def _make(payload: Any = None, text: Optional[str] = None, fail: bool = False) -> StubProvider:
        if payload is not None:
            text = json.dumps(payload)
        return StubProvider(text=text, fail=fail)

    return _make


def pretty_json(obj) -> str:
    return json.dumps(obj, indent=2, ensure_ascii=False, sort_keys=True)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Attach request/response payloads into pytest-html report.

    Tests store payloads on the item:
      item._api_logs = [{"title": "...", "request": {...}, "response": {...}}, ...]
    """
    outcome = yield
    rep = outcome.get_result()

    if rep.when != "call":
        return

    api_logs = getattr(item, "_api_logs", None)
    if not api_logs:
        return

    extras = getattr(rep, "extra", [])

    try:
        from pytest_html import extras as html_extras
    except ImportError:
        rep.extra = extras
        return

    for entry in api_logs:
        title = entry.get("title", "API Call")
        html = f"""
        <div style="font-family: ui-monospace, Menlo, Consolas, monospace;">
          <h4 style="margin:8px 0;">{title}</h4>
          <details><summary><b>Request</b></summary><pre>{pretty_json(entry.get("request", {}))}</pre></details>
          <details><summary><b>Response</b></summary><pre>{pretty_json(entry.get("response", {}))}</pre></details>
        </div>
        """
        extras.append(html_extras.html(html))

    rep.extra = extras
