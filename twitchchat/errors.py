"""Centralized chat client error hierarchy.

Every failure surfaced by the client derives from ``ChatError`` so callers can
catch the whole family in one place. None of these errors is retried
automatically; reconnecting is left to the embedding application.

Classes:
  ChatError                     – Base for all client errors.
  ConfigError                   – Missing or invalid session configuration.
  ConnectError                  – TCP connect failure or connect timeout.
  HandshakeError                – Handshake lines could not be flushed.
  TimeoutConfigurationError     – Read idle timeout could not be applied.
  ReceiveError                  – Read failure, EOF or idle timeout.
  SendError                     – Write/flush failure on an outbound line.
  ReplyError                    – Reply attempted without a message id tag.
  HandlerAlreadyRegisteredError – Second handler registered on one stream.
  AuthenticationError           – Token rejected by the validate endpoint.
  NetworkError                  – Transport failure talking to the OAuth API.
  ParsingError                  – Unexpected OAuth API response body.
"""

from __future__ import annotations

from collections.abc import Mapping


class ChatError(Exception):
    """Base class for all chat client errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class ConfigError(ChatError):
    """Raised when the session configuration cannot be assembled."""


class ConnectError(ChatError):
    """Raised when the TCP connection to the chat server cannot be opened."""


class HandshakeError(ChatError):
    """Raised when the capability/auth/nick/join lines fail to flush."""


class TimeoutConfigurationError(ChatError):
    """Raised when the read idle timeout is not a positive number of seconds."""


class ReceiveError(ChatError):
    """Raised when reading a line fails.

    Covers a closed connection, an idle timeout and OS level read errors.
    Terminates the read loop.
    """


class SendError(ChatError):
    """Raised when an outbound line cannot be written and flushed."""


class ReplyError(SendError):
    """Raised when replying to a chat message that carries no ``id`` tag."""


class HandlerAlreadyRegisteredError(ChatError):
    """Raised when a second message handler is registered on one stream."""


class AuthenticationError(ChatError):
    """Raised when Twitch rejects the OAuth token."""


class NetworkError(ChatError):
    """Raised for transport failures or unexpected statuses from the OAuth API."""


class ParsingError(ChatError):
    """Raised when an OAuth API response does not have the expected shape."""


__all__ = [
    "ChatError",
    "ConfigError",
    "ConnectError",
    "HandshakeError",
    "TimeoutConfigurationError",
    "ReceiveError",
    "SendError",
    "ReplyError",
    "HandlerAlreadyRegisteredError",
    "AuthenticationError",
    "NetworkError",
    "ParsingError",
]
