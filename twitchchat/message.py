"""Chat line parsing."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from .errors import SendError
from .tags import TagSet, parse_tags

if TYPE_CHECKING:  # pragma: no cover
    from .connection import ChatConnection


class MessageKind(str, Enum):
    PING = "PING"
    PRIVMSG = "PRIVMSG"
    NONE = "NONE"


_COMMAND_KINDS = {
    "PING": MessageKind.PING,
    "PRIVMSG": MessageKind.PRIVMSG,
}


@dataclass
class ChatMessage:
    """One parsed inbound line.

    ``room`` is the channel name without its leading ``#`` and is only set
    for ``PRIVMSG`` lines. ``message`` is the trailing payload after the
    first colon that follows the command. ``connection`` is the connection
    the line arrived on, so handlers can answer without extra plumbing.
    """

    user: str = ""
    room: str = ""
    message: str = ""
    kind: MessageKind = MessageKind.NONE
    tags: TagSet = field(default_factory=TagSet)
    connection: ChatConnection | None = field(
        default=None, repr=False, compare=False
    )

    @property
    def id(self) -> str | None:
        return self.tags.get("id")

    async def reply(self, text: str) -> None:
        """Reply in-thread to this message.

        No-op for anything that is not a ``PRIVMSG``.

        Raises:
            ReplyError: The message carries no ``id`` tag.
            SendError: The message has no connection or the write failed.
        """
        if self.kind is not MessageKind.PRIVMSG:
            return
        if self.connection is None:
            raise SendError("Message has no connection to reply on")
        await self.connection.reply(self, text)


def parse_message(
    raw_line: str, connection: ChatConnection | None = None
) -> ChatMessage:
    """Parse a raw line (terminator already stripped) into a ChatMessage.

    Never raises: malformed or empty input yields a best-effort message with
    empty fields and ``MessageKind.NONE``.
    """
    msg = ChatMessage(connection=connection)
    line = raw_line

    if line.startswith("@"):
        end = line.find(" ")
        if end != -1:
            msg.tags = parse_tags(line[1:end])
            line = line[end + 1 :]

    # Source prefix (:nick!user@host); the first space must follow the colon.
    colon = line.find(":")
    space = line.find(" ")
    if colon != -1 and space > colon:
        source = line[colon + 1 : space]
        msg.user = source.split("!", 1)[0]
        line = line[space:]

    colon = line.find(":")
    if colon == -1:
        return msg

    parts = line[:colon].strip().split(" ")
    msg.kind = _COMMAND_KINDS.get(parts[0], MessageKind.NONE)
    if msg.kind is MessageKind.PRIVMSG and len(parts) > 1:
        msg.room = parts[1].removeprefix("#")
    msg.message = line[colon + 1 :]
    return msg
