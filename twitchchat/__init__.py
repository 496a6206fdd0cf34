"""Twitch chat (IRC) client.

Parses the tagged Twitch IRC line format, keeps the connection alive by
answering PINGs and hands every other message to a single handler.
"""

from .config import ChatConfig  # noqa: F401
from .connection import ChatConnection  # noqa: F401
from .errors import (  # noqa: F401
    ChatError,
    ConnectError,
    HandshakeError,
    ReceiveError,
    ReplyError,
    SendError,
    TimeoutConfigurationError,
)
from .message import ChatMessage, MessageKind, parse_message  # noqa: F401
from .stream import ChatStream, MessageDispatcher  # noqa: F401
from .tags import TagSet, parse_tags  # noqa: F401

__all__ = [
    "ChatConfig",
    "ChatConnection",
    "ChatError",
    "ChatMessage",
    "ChatStream",
    "ConnectError",
    "HandshakeError",
    "MessageDispatcher",
    "MessageKind",
    "ReceiveError",
    "ReplyError",
    "SendError",
    "TagSet",
    "TimeoutConfigurationError",
    "parse_message",
    "parse_tags",
]
