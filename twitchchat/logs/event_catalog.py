"""Human readable templates for logged events, keyed by ``(domain, action)``."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

_TEMPLATES_PATH = Path(__file__).with_name("event_templates.json")


def load_event_templates(path: Path = _TEMPLATES_PATH) -> dict[tuple[str, str], str]:
    """Flatten the ``{domain: {action: template}}`` JSON file.

    Non-string entries are skipped. A missing or malformed file yields an
    empty catalog; the logger then derives text from the event name.
    """
    try:
        raw: Any = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    if not isinstance(raw, dict):
        return {}
    return {
        (domain, action): template
        for domain, actions in raw.items()
        if isinstance(actions, dict)
        for action, template in actions.items()
        if isinstance(template, str)
    }


EVENT_TEMPLATES = load_event_templates()

__all__ = ["EVENT_TEMPLATES", "load_event_templates"]
