"""
Command line runner: connect with env configuration and log every message
"""

from __future__ import annotations

import asyncio
import logging
import sys

import aiohttp
from pydantic import ValidationError

from .auth import validate_token
from .config import ChatConfig
from .errors import ChatError, ConfigError
from .logs.logger import logger
from .message import ChatMessage
from .stream import ChatStream


def log_message(msg: ChatMessage) -> None:
    """Default handler: log the parsed fields of each message."""
    logger.log_event(
        "chat",
        "message",
        user=msg.user or None,
        channel=msg.room or None,
        kind=msg.kind.value,
        text=msg.message,
        tags=msg.tags.tags,
        badges=msg.tags.badges,
    )


def load_config() -> ChatConfig | None:
    try:
        return ChatConfig.from_env()
    except (ConfigError, ValidationError) as e:
        logger.log_event("app", "config_error", level=logging.ERROR, error=str(e))
        return None


async def check_token(config: ChatConfig) -> bool:
    try:
        async with aiohttp.ClientSession() as session:
            info = await validate_token(session, config.token)
    except ChatError as e:
        logger.log_event(
            "app",
            "token_rejected",
            level=logging.ERROR,
            user=config.nickname,
            error=str(e),
            error_type=type(e).__name__,
        )
        return False
    if info.login.lower() != config.nickname.lower():
        logger.log_event(
            "app",
            "nickname_mismatch",
            level=logging.WARNING,
            user=config.nickname,
            login=info.login,
        )
    return True


async def main(argv: list[str] | None = None) -> int:
    """Run one chat session until its read loop ends.

    Flags: ``--no-validate`` skips the OAuth validate request.
    """
    argv = sys.argv[1:] if argv is None else argv
    config = load_config()
    if config is None:
        return 1
    if "--no-validate" not in argv and not await check_token(config):
        return 1

    try:
        stream = await ChatStream.connect(config)
    except ChatError as e:
        logger.log_event(
            "app", "connect_failed", level=logging.ERROR, user=config.nickname, error=str(e)
        )
        return 1

    stream.on_message(log_message)
    try:
        await stream.wait_closed()
    except ChatError as e:
        logger.log_event(
            "app",
            "session_ended",
            level=logging.WARNING,
            user=config.nickname,
            error=str(e),
            error_type=type(e).__name__,
        )
    finally:
        await stream.close()
    return 0


def run() -> None:
    if len(sys.argv) > 1 and sys.argv[1] == "--health-check":
        # Configuration check only; no network access.
        sys.exit(0 if load_config() is not None else 1)
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.log_event("app", "interrupted")
        sys.exit(0)
