"""Read loop & message dispatch for one chat connection."""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from collections.abc import Callable
from typing import Any

from .config import ChatConfig
from .connection import ChatConnection
from .errors import HandlerAlreadyRegisteredError, ReceiveError, SendError
from .logs.logger import logger
from .message import ChatMessage, MessageKind, parse_message

MessageHandler = Callable[[ChatMessage], Any]


class MessageDispatcher:
    """Routes parsed messages to the keep-alive responder or the user handler."""

    def __init__(self, connection: ChatConnection, handler: MessageHandler):
        self.connection = connection
        self.handler = handler

    async def dispatch(self, message: ChatMessage) -> None:
        if message.kind is MessageKind.PING:
            await self._handle_ping(message)
            return
        await self._invoke_handler(message)

    async def _handle_ping(self, message: ChatMessage) -> None:
        # A failed PONG is fatal to the read loop; SendError propagates.
        await self.connection.pong(message.message)

    async def _invoke_handler(self, message: ChatMessage) -> None:
        if message.kind is MessageKind.PRIVMSG:
            logger.log_event(
                "irc",
                "privmsg",
                level=logging.DEBUG,
                user=self.connection.nickname,
                channel=message.room,
                human=f"{message.user}: {message.message}",
                author=message.user,
            )
        try:
            result = self.handler(message)
            if inspect.isawaitable(result):
                await result
        except Exception as e:  # noqa: BLE001
            logger.log_event(
                "irc",
                "message_handler_error",
                level=logging.ERROR,
                user=self.connection.nickname,
                error=str(e),
                error_type=type(e).__name__,
            )


class ChatStream:
    """A connected chat session with at most one message handler.

    Registering the handler with ``on_message`` starts the read loop as an
    asyncio task. The loop ends when a read fails or a PONG cannot be sent;
    it never reconnects.
    """

    def __init__(self, connection: ChatConnection):
        self.connection = connection
        self.dispatcher: MessageDispatcher | None = None
        self._task: asyncio.Task[None] | None = None

    @classmethod
    async def connect(cls, config: ChatConfig, **kwargs: Any) -> ChatStream:
        """Connect and handshake; ``kwargs`` go to ``ChatConnection.connect``."""
        connection = await ChatConnection.connect(config, **kwargs)
        return cls(connection)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def on_message(self, handler: MessageHandler) -> asyncio.Task[None]:
        """Register the message handler and start the read loop.

        ``handler`` receives every non-PING message, in wire order, on the
        read loop itself. It may be a plain function or a coroutine function;
        awaitable results are awaited before the next line is read.

        Raises:
            HandlerAlreadyRegisteredError: A handler was registered before.
        """
        if self._task is not None:
            raise HandlerAlreadyRegisteredError(
                "A message handler is already registered on this stream"
            )
        self.dispatcher = MessageDispatcher(self.connection, handler)
        self._task = asyncio.create_task(
            self._read_loop(), name=f"twitchchat-read-{self.connection.nickname}"
        )
        return self._task

    async def _read_loop(self) -> None:
        assert self.dispatcher is not None
        user = self.connection.nickname
        logger.log_event("irc", "read_loop_started", level=logging.DEBUG, user=user)
        try:
            # A handler may close the connection; buffered lines are dropped.
            while not self.connection.closed:
                line = await self.connection.receive_line()
                logger.log_event("irc", "raw", level=logging.DEBUG, user=user, raw=line)
                await self.dispatcher.dispatch(parse_message(line, self.connection))
        except ReceiveError as e:
            logger.log_event(
                "irc", "read_loop_stopped", level=logging.WARNING, user=user, error=str(e)
            )
            raise
        except SendError as e:
            logger.log_event(
                "irc", "pong_failed", level=logging.ERROR, user=user, error=str(e)
            )
            raise

    async def send(self, channel: str, text: str) -> None:
        await self.connection.send(channel, text)

    async def reply(self, message: ChatMessage, text: str) -> None:
        await self.connection.reply(message, text)

    async def wait_closed(self) -> None:
        """Wait for the read loop to end, re-raising the error that ended it."""
        if self._task is not None:
            await self._task

    async def close(self) -> None:
        """Stop the read loop (if running) and close the connection.

        Called from the handler, the loop finishes after the handler returns.
        """
        if (
            self._task is not None
            and not self._task.done()
            and self._task is not asyncio.current_task()
        ):
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        await self.connection.close()
