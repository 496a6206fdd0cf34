"""TCP connection & handshake for Twitch IRC."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from .constants import (
    IRC_CONNECT_TIMEOUT,
    IRC_MAX_LINE_LENGTH,
    IRC_READ_TIMEOUT,
    LINE_TERMINATOR,
    TWITCH_IRC_HOST,
    TWITCH_IRC_PORT,
)
from .errors import (
    ConnectError,
    HandshakeError,
    ReceiveError,
    ReplyError,
    SendError,
    TimeoutConfigurationError,
)
from .logs.logger import logger
from .message import MessageKind

if TYPE_CHECKING:  # pragma: no cover
    from .config import ChatConfig
    from .message import ChatMessage

_TERMINATOR = LINE_TERMINATOR.encode("ascii")


class ChatConnection:
    """One TCP connection to the chat server.

    The reader half is consumed by a single read loop. Every outbound line
    goes through ``write_line`` which holds ``_write_lock`` for the write and
    the drain, so concurrent senders never interleave partial frames.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        *,
        nickname: str | None = None,
        read_timeout: float = IRC_READ_TIMEOUT,
    ) -> None:
        self.reader = reader
        self.writer = writer
        self.nickname = nickname
        self.read_timeout = IRC_READ_TIMEOUT
        self.closed = False
        self._write_lock = asyncio.Lock()
        self.set_read_timeout(read_timeout)

    @classmethod
    async def connect(
        cls,
        config: ChatConfig,
        *,
        host: str = TWITCH_IRC_HOST,
        port: int = TWITCH_IRC_PORT,
        connect_timeout: float = IRC_CONNECT_TIMEOUT,
        read_timeout: float = IRC_READ_TIMEOUT,
    ) -> ChatConnection:
        """Open the connection, send the handshake and apply the read timeout.

        Raises:
            ConnectError: The TCP connection could not be opened in time.
            HandshakeError: The handshake lines could not be flushed.
            TimeoutConfigurationError: ``read_timeout`` is not a positive number.
        """
        user = config.nickname
        logger.log_event("irc", "connect_start", user=user, server=host, port=port)
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port, limit=IRC_MAX_LINE_LENGTH),
                timeout=connect_timeout,
            )
        except TimeoutError as e:
            logger.log_event(
                "irc",
                "connect_timeout",
                level=logging.ERROR,
                user=user,
                timeout=connect_timeout,
            )
            raise ConnectError(
                f"Timed out connecting to {host}:{port}",
                data={"host": host, "port": port, "timeout": connect_timeout},
            ) from e
        except OSError as e:
            logger.log_event(
                "irc",
                "connect_network_error",
                level=logging.ERROR,
                user=user,
                error=str(e),
            )
            raise ConnectError(
                f"Unable to connect to {host}:{port}: {e}",
                data={"host": host, "port": port},
            ) from e
        logger.log_event(
            "irc", "connection_established", level=logging.DEBUG, user=user
        )

        try:
            await cls._handshake(config, writer)
        except HandshakeError:
            writer.close()
            raise

        try:
            return cls(reader, writer, nickname=user, read_timeout=read_timeout)
        except TimeoutConfigurationError:
            writer.close()
            raise

    @staticmethod
    async def _handshake(config: ChatConfig, writer: asyncio.StreamWriter) -> None:
        try:
            writer.write(config.handshake_payload())
            await writer.drain()
        except (OSError, RuntimeError) as e:
            logger.log_event(
                "irc",
                "handshake_failed",
                level=logging.ERROR,
                user=config.nickname,
                error=str(e),
            )
            raise HandshakeError(f"Unable to perform handshake: {e}") from e
        logger.log_event(
            "irc",
            "handshake_sent",
            user=config.nickname,
            channels=",".join(config.channels),
            capabilities=",".join(config.capabilities),
        )

    def set_read_timeout(self, timeout: float) -> None:
        if isinstance(timeout, bool) or not isinstance(timeout, int | float):
            raise TimeoutConfigurationError(
                f"Read timeout must be a number, got {timeout!r}",
                data={"timeout": timeout},
            )
        if not timeout > 0:
            raise TimeoutConfigurationError(
                f"Read timeout must be positive, got {timeout!r}",
                data={"timeout": timeout},
            )
        self.read_timeout = float(timeout)

    async def receive_line(self) -> str:
        """Wait for the next CRLF terminated line and return it without terminator.

        Raises:
            ReceiveError: The connection closed, timed out or failed.
        """
        try:
            raw = await asyncio.wait_for(
                self.reader.readuntil(_TERMINATOR), timeout=self.read_timeout
            )
        except TimeoutError as e:
            logger.log_event(
                "irc",
                "read_timeout",
                level=logging.WARNING,
                user=self.nickname,
                timeout=self.read_timeout,
            )
            raise ReceiveError(
                f"No data received for {self.read_timeout:.0f}s",
                data={"timeout": self.read_timeout},
            ) from e
        except asyncio.IncompleteReadError as e:
            raise ReceiveError("Connection closed by server") from e
        except asyncio.LimitOverrunError as e:
            raise ReceiveError(
                "Line exceeds the reader limit", data={"consumed": e.consumed}
            ) from e
        except OSError as e:
            raise ReceiveError(f"Read failed: {e}") from e
        return raw[: -len(_TERMINATOR)].decode("utf-8", errors="replace")

    async def write_line(self, line: str) -> None:
        """Write one line plus CRLF and wait for the flush.

        Raises:
            SendError: The line contains CR or LF, the connection is closed
                or the write failed.
        """
        if "\r" in line or "\n" in line:
            raise SendError(
                "Outbound line must not contain CR or LF", data={"line": line}
            )
        async with self._write_lock:
            if self.closed or self.writer.is_closing():
                raise SendError("Connection is closed")
            try:
                self.writer.write(f"{line}{LINE_TERMINATOR}".encode())
                await self.writer.drain()
            except (OSError, RuntimeError) as e:
                raise SendError(f"Unable to send line: {e}") from e

    async def send(self, channel: str, text: str) -> None:
        channel = channel.removeprefix("#")
        await self.write_line(f"PRIVMSG #{channel} :{text}")
        logger.log_event(
            "irc", "send", level=logging.DEBUG, user=self.nickname, channel=channel
        )

    async def reply(self, message: ChatMessage, text: str) -> None:
        """Reply in-thread to ``message`` using its ``id`` tag.

        Anything other than a ``PRIVMSG`` is ignored without writing.

        Raises:
            ReplyError: The message has no ``id`` tag.
            SendError: The write failed.
        """
        if message.kind is not MessageKind.PRIVMSG:
            return
        msg_id = message.tags.get("id")
        if not msg_id:
            logger.log_event(
                "irc",
                "reply_missing_id",
                level=logging.WARNING,
                user=self.nickname,
                channel=message.room,
            )
            raise ReplyError(
                "Cannot reply to a message without an id tag",
                data={"room": message.room, "author": message.user},
            )
        await self.write_line(
            f"@reply-parent-msg-id={msg_id} PRIVMSG #{message.room} :{text}"
        )
        logger.log_event(
            "irc",
            "reply",
            level=logging.DEBUG,
            user=self.nickname,
            channel=message.room,
            parent_id=msg_id,
        )

    async def pong(self, payload: str) -> None:
        await self.write_line(f"PONG {payload}")
        logger.log_event(
            "irc", "pong", level=logging.DEBUG, user=self.nickname, server=payload
        )

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except OSError as e:
            logger.log_event(
                "irc",
                "close_error",
                level=logging.DEBUG,
                user=self.nickname,
                error=str(e),
            )
        logger.log_event("irc", "disconnected", level=logging.WARNING, user=self.nickname)
