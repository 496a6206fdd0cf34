from __future__ import annotations

import asyncio

from twitchchat.connection import ChatConnection


class FakeWriter:
    """Records written bytes; optionally fails on drain."""

    def __init__(self, drain_error: Exception | None = None) -> None:
        self.buffer = bytearray()
        self.drain_error = drain_error
        self.drain_calls = 0
        self.closed = False

    def write(self, data: bytes) -> None:
        self.buffer.extend(data)

    async def drain(self) -> None:
        self.drain_calls += 1
        await asyncio.sleep(0)
        if self.drain_error:
            raise self.drain_error

    def is_closing(self) -> bool:
        return self.closed

    def close(self) -> None:
        self.closed = True

    async def wait_closed(self) -> None:
        await asyncio.sleep(0)

    @property
    def lines(self) -> list[str]:
        text = self.buffer.decode("utf-8")
        return text.split("\r\n")[:-1] if text else []


def make_connection(
    *lines: str,
    eof: bool = True,
    writer: FakeWriter | None = None,
    read_timeout: float = 5.0,
) -> tuple[ChatConnection, asyncio.StreamReader, FakeWriter]:
    """Build a connection over a fed StreamReader. Call from a running loop."""
    reader = asyncio.StreamReader()
    for line in lines:
        reader.feed_data(f"{line}\r\n".encode())
    if eof:
        reader.feed_eof()
    writer = writer or FakeWriter()
    conn = ChatConnection(
        reader, writer, nickname="botname", read_timeout=read_timeout  # type: ignore[arg-type]
    )
    return conn, reader, writer
