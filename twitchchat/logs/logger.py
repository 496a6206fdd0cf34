"""Event logger for the chat client."""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

from .event_catalog import EVENT_TEMPLATES

EVENT_NAME_WIDTH = 32
PREFIX_WIDTH = 24


def _supports_color(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):  # pragma: no cover
        return False


def _debug_enabled() -> bool:
    return os.environ.get("DEBUG", "false").lower() in ("true", "1", "yes")


class SimpleFormatter(logging.Formatter):
    """Level name padded to 8 columns, coloured on a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: "\x1b[36m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[35m",
    }
    RESET = "\x1b[0m"

    def __init__(self, stream: TextIO = sys.stdout) -> None:
        super().__init__()
        self.enable_color = _supports_color(stream)

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname.ljust(8)
        if self.enable_color:
            level = f"{self.LEVEL_COLORS.get(record.levelno, '')}{level}{self.RESET}"
        return f"{level} {record.getMessage()}"


def _render(domain: str, action: str, fields: dict[str, object]) -> str:
    template = EVENT_TEMPLATES.get((domain, action))
    if template is None:
        return f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}"
    try:
        return template.format(**fields)
    except (KeyError, IndexError, ValueError):
        return template


def _prefix(user: object, channel: object) -> str:
    label = user if isinstance(user, str) and user else "system"
    if isinstance(channel, str) and channel:
        label = f"{label}#{channel}"
    return f"[{label.ljust(PREFIX_WIDTH)[:PREFIX_WIDTH]}]"


class ChatLogger:
    """Writes ``(domain, action)`` events to stdout.

    Normal mode prints ``[user#channel] text``. With ``DEBUG`` set the line
    starts with the padded event name and ends with the remaining fields.
    """

    def __init__(self, name: str = "twitchchat") -> None:
        self.logger = logging.getLogger(name)
        self.logger.handlers.clear()
        self.logger.setLevel(logging.DEBUG if _debug_enabled() else logging.INFO)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(SimpleFormatter())
        self.logger.addHandler(handler)

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **fields: object,
    ) -> None:
        """Log one event.

        The text is ``human`` when given, else the catalogued template
        formatted with ``fields``, else derived from the event name.
        ``user`` and ``channel`` fields form the line prefix.
        """
        text = human if human is not None else _render(domain, action, fields)
        prefix = _prefix(fields.pop("user", None), fields.pop("channel", None))
        event_name = f"{domain}_{action}".lower()
        if _debug_enabled():
            msg = self._debug_line(event_name, prefix, text, fields)
        else:
            msg = f"{prefix} {text or event_name}"
        self.logger.log(level, msg, exc_info=exc_info)

    @staticmethod
    def _debug_line(
        event_name: str, prefix: str, text: str, fields: dict[str, object]
    ) -> str:
        if len(event_name) > EVENT_NAME_WIDTH:
            event_name = event_name[: EVENT_NAME_WIDTH - 1] + "…"
        line = f"{event_name.ljust(EVENT_NAME_WIDTH)} {prefix}"
        if text:
            line = f"{line} {text}"
        if fields:
            context = ", ".join(f"{k}={v}" for k, v in fields.items())
            line = f"{line} ({context})"
        return line


logger = ChatLogger()
