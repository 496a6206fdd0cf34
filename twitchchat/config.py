"""Session configuration and handshake line rendering."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import CAPABILITY_NAMESPACE, DEFAULT_CAPABILITIES, LINE_TERMINATOR
from .errors import ConfigError


def _normalize_names(values: Any, *, strip_hash: bool) -> list[str]:
    """Normalize a list (or comma separated string) of names.

    Strips whitespace (and the ``#`` channel prefix when asked), drops empty
    entries and duplicates while preserving the original order.
    """
    if isinstance(values, str):
        values = values.split(",")
    if not isinstance(values, list | tuple):
        raise ValueError("expected a list of names")
    cleaned = []
    for value in values:
        name = str(value).strip()
        if strip_hash:
            name = name.removeprefix("#")
        if name:
            cleaned.append(name)
    return list(dict.fromkeys(cleaned))


class ChatConfig(BaseModel):
    """Immutable connection settings for one chat session.

    Attributes:
        token: OAuth access token, stored without the ``oauth:`` prefix.
        nickname: Login name sent with ``NICK``.
        channels: Channels to join, without ``#``, in join order.
        capabilities: Twitch capability names requested with ``CAP REQ``.
    """

    model_config = ConfigDict(frozen=True)

    token: str = Field(min_length=1)
    nickname: str = Field(min_length=1)
    channels: list[str] = Field(min_length=1)
    capabilities: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CAPABILITIES)
    )

    @field_validator("token", mode="before")
    @classmethod
    def validate_token(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("oauth:"):
                v = v[len("oauth:") :]
        return v

    @field_validator("nickname", mode="before")
    @classmethod
    def validate_nickname(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("channels", mode="before")
    @classmethod
    def validate_channels(cls, v: Any) -> list[str]:
        return _normalize_names(v, strip_hash=True)

    @field_validator("capabilities", mode="before")
    @classmethod
    def validate_capabilities(cls, v: Any) -> list[str]:
        names = _normalize_names(v, strip_hash=False)
        return [
            n[len(CAPABILITY_NAMESPACE) :] if n.startswith(CAPABILITY_NAMESPACE) else n
            for n in names
        ]

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ChatConfig:
        """Build a config from ``TOKEN``, ``NAME``, ``CHANNEL`` and ``CAPABILITIES``.

        ``CHANNEL`` and ``CAPABILITIES`` accept comma separated lists.

        Raises:
            ConfigError: A required variable is missing or empty.
        """
        env = os.environ if environ is None else environ
        missing = [k for k in ("TOKEN", "NAME", "CHANNEL") if not env.get(k)]
        if missing:
            raise ConfigError(
                f"Missing environment variables: {', '.join(missing)}",
                data={"missing": missing},
            )
        values: dict[str, Any] = {
            "token": env["TOKEN"],
            "nickname": env["NAME"],
            "channels": env["CHANNEL"],
        }
        if env.get("CAPABILITIES"):
            values["capabilities"] = env["CAPABILITIES"]
        return cls(**values)

    def capability_line(self) -> str:
        # Each capability is followed by a space, trailing one included.
        caps = "".join(f"{CAPABILITY_NAMESPACE}{cap} " for cap in self.capabilities)
        return f"CAP REQ :{caps}"

    def pass_line(self) -> str:
        return f"PASS oauth:{self.token}"

    def nick_line(self) -> str:
        return f"NICK {self.nickname}"

    def join_line(self) -> str:
        return "JOIN " + ",".join(f"#{channel}" for channel in self.channels)

    def handshake_lines(self) -> list[str]:
        """The four handshake lines in send order, without terminators."""
        return [
            self.capability_line(),
            self.pass_line(),
            self.nick_line(),
            self.join_line(),
        ]

    def handshake_payload(self) -> bytes:
        return "".join(
            f"{line}{LINE_TERMINATOR}" for line in self.handshake_lines()
        ).encode("utf-8")
