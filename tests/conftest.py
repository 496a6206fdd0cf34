from __future__ import annotations

import pytest

from twitchchat.config import ChatConfig


@pytest.fixture
def config() -> ChatConfig:
    return ChatConfig(
        token="oauth:secrettoken",
        nickname="botname",
        channels=["#somechannel", "other"],
    )
