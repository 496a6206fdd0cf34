"""Event logging for the chat client (template catalog + ChatLogger)."""

from .event_catalog import EVENT_TEMPLATES, load_event_templates  # noqa: F401
from .logger import ChatLogger, logger  # noqa: F401

__all__ = ["ChatLogger", "logger", "EVENT_TEMPLATES", "load_event_templates"]
