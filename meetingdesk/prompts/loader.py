"""
Versioned prompt loader: reads prompts from meetingdesk/prompts/{version}/{component}.yaml.
Use PROMPT_VERSION (default v1) to select version.
"""
import re
from pathlib import Path
from typing import Mapping

import yaml

from meetingdesk.core.config import settings

# Base path: meetingdesk/prompts/ (next to this file)
_PROMPTS_DIR = Path(__file__).resolve().parent

_PLACEHOLDER_RE = re.compile(r"<<([A-Z_]+)>>")


def load_prompts(
    component: str,
    version: str | None = None,
) -> dict[str, str]:
    """Load prompt templates for a component. Returns dict with keys "system", "user" (user optional); values may contain placeholders like <<TITLE>>, <<MINUTES>>.
    Why available: Keeps extraction wording out of code so it can be revised per version without touching the analyzer."""
    version = version or settings.prompt_version

    path = _PROMPTS_DIR / version / f"{component}.yaml"
    if not path.exists():
        raise FileNotFoundError(f"Prompt file not found: {path}")

    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    out: dict[str, str] = {}
    for key in ("system", "user"):
        val = data.get(key)
        if val is not None:
            out[key] = val.strip() if isinstance(val, str) else str(val).strip()
    return out


def get_system_prompt(component: str, version: str | None = None) -> str:
    """Load and return the 'system' prompt template for the given component. Raises ValueError if the component has no system prompt in the specified version."""
    prompts = load_prompts(component, version=version)
    if "system" not in prompts:
        raise ValueError(f"Component {component} has no 'system' prompt in version {version}")
    return prompts["system"]


def get_user_prompt(component: str, version: str | None = None) -> str:
    """Load and return the 'user' prompt template for the given component. Raises ValueError if the component has no user prompt in the specified version."""
    prompts = load_prompts(component, version=version)
    if "user" not in prompts:
        raise ValueError(f"Component {component} has no 'user' prompt in version {version}")
    return prompts["user"]


def render(template: str, values: Mapping[str, str]) -> str:
    """Fill <<NAME>> placeholders in one pass, so text inserted for one placeholder is never expanded again. Unknown placeholders are left as-is."""
    return _PLACEHOLDER_RE.sub(lambda m: values.get(m.group(1), m.group(0)), template)
