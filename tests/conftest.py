from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import pytest

from homewatch.adapters import ActuatorError
from homewatch.config import HomewatchConfig, load_config


class FakeSender:
    """Records sends; raises for chat ids listed in ``failing``."""

    def __init__(self, failing: tuple[int, ...] = ()) -> None:
        self.failing = set(failing)
        self.attempts: list[tuple[int, str]] = []
        self.sent: list[tuple[int, str]] = []

    async def send_message(self, chat_id: int, text: str, **kwargs: Any) -> None:
        self.attempts.append((chat_id, text))
        if chat_id in self.failing:
            raise RuntimeError(f"Forbidden: bot was blocked by chat {chat_id}")
        self.sent.append((chat_id, text))


class FakeActuators:
    def __init__(
        self,
        *,
        ac_status: Optional[str] = "already",
        fail: bool = False,
    ) -> None:
        self.ac_status = ac_status
        self.fail = fail
        self.ac_calls: list[bool] = []
        self.power_calls: list[str] = []

    async def switch_ac(self, on: bool) -> str:
        self.ac_calls.append(on)
        if self.fail or self.ac_status is None:
            raise ActuatorError("connection refused")
        return self.ac_status

    async def set_power_source(self, source: str) -> None:
        self.power_calls.append(source)
        if self.fail:
            raise ActuatorError("timed out")


@pytest.fixture
def sender() -> FakeSender:
    return FakeSender()


@pytest.fixture
def make_sender():
    return FakeSender


@pytest.fixture
def make_actuators():
    return FakeActuators


@pytest.fixture
def make_config(tmp_path: Path):
    def factory(extra: str = "") -> HomewatchConfig:
        config_path = tmp_path / "homewatch.cfg"
        config_path.write_text(
            f"""
[telegram]
bot_token = 42:TEST-token
webhook_host = bot.example.com
ssl_cert = {tmp_path / "bot-cert.pem"}
ssl_key = {tmp_path / "bot-key.key"}
username_whitelist = alice, @bob

[storage]
path = {tmp_path / "storage.json"}

[logging]
path =
""".strip()
            + "\n"
            + extra,
            encoding="utf-8",
        )
        return load_config(config_path)

    return factory
