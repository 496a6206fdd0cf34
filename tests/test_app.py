from __future__ import annotations

import pytest

from twitchchat import app
from twitchchat.auth import TokenInfo
from twitchchat.errors import AuthenticationError, ConnectError, ReceiveError

ENV = {"TOKEN": "oauth:tok", "NAME": "botname", "CHANNEL": "somechannel"}


class FakeStream:
    def __init__(self) -> None:
        self.handler = None
        self.closed = False

    def on_message(self, handler):  # type: ignore[no-untyped-def]
        self.handler = handler

    async def wait_closed(self) -> None:
        raise ReceiveError("Connection closed by server")

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def env(monkeypatch):
    for key in ("TOKEN", "NAME", "CHANNEL", "CAPABILITIES"):
        monkeypatch.delenv(key, raising=False)
    for key, value in ENV.items():
        monkeypatch.setenv(key, value)


@pytest.mark.asyncio
async def test_main_missing_config_returns_1(monkeypatch):
    for key in ("TOKEN", "NAME", "CHANNEL"):
        monkeypatch.delenv(key, raising=False)
    assert await app.main([]) == 1


@pytest.mark.asyncio
async def test_main_runs_until_read_loop_ends(env, monkeypatch):
    stream = FakeStream()

    async def fake_connect(config, **kwargs):  # type: ignore[no-untyped-def]
        assert config.channels == ["somechannel"]
        return stream

    monkeypatch.setattr(app.ChatStream, "connect", fake_connect)
    assert await app.main(["--no-validate"]) == 0
    assert stream.handler is app.log_message
    assert stream.closed


@pytest.mark.asyncio
async def test_main_connect_failure_returns_1(env, monkeypatch):
    async def failing_connect(config, **kwargs):  # type: ignore[no-untyped-def]
        raise ConnectError("refused")

    monkeypatch.setattr(app.ChatStream, "connect", failing_connect)
    assert await app.main(["--no-validate"]) == 1


@pytest.mark.asyncio
async def test_main_rejected_token_returns_1(env, monkeypatch):
    async def rejecting_validate(session, token):  # type: ignore[no-untyped-def]
        raise AuthenticationError("Token is invalid or expired")

    async def unexpected_connect(config, **kwargs):  # type: ignore[no-untyped-def]
        raise AssertionError("should not connect with a rejected token")

    monkeypatch.setattr(app, "validate_token", rejecting_validate)
    monkeypatch.setattr(app.ChatStream, "connect", unexpected_connect)
    assert await app.main([]) == 1


@pytest.mark.asyncio
async def test_check_token_accepts_mismatched_login(env, monkeypatch):
    async def fake_validate(session, token):  # type: ignore[no-untyped-def]
        assert token == "tok"
        return TokenInfo(login="someoneelse", user_id="1", client_id="c")

    monkeypatch.setattr(app, "validate_token", fake_validate)
    config = app.load_config()
    assert config is not None
    assert await app.check_token(config) is True


def test_run_health_check(env, monkeypatch):
    monkeypatch.setattr(app.sys, "argv", ["twitchchat", "--health-check"])
    with pytest.raises(SystemExit) as exc_info:
        app.run()
    assert exc_info.value.code == 0
