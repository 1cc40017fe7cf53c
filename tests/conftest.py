from __future__ import annotations

import json

import pytest
import requests
from loguru import logger

from telemon import Config, TelegramClient, TelemonConfig


class FakeResponse:
    def __init__(self, status_code: int = 200, body: object = None) -> None:
        self.status_code = status_code
        if body is None:
            body = {"ok": True, "result": {"message_id": 1}}
        self.text = body if isinstance(body, str) else json.dumps(body)

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Records every post() and replies with a canned response or error."""

    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response or FakeResponse()
        self.error = error
        self.calls: list[dict] = []
        self.closed = False

    def post(self, url, json=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def _reset_global_config():
    Config.reset()
    yield
    Config.reset()


@pytest.fixture
def config() -> TelemonConfig:
    return TelemonConfig(token="123:abc", chat_id=111, group_id=333)


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(config, session) -> TelegramClient:
    return TelegramClient(config, session=session)


@pytest.fixture
def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("Failed to resolve 'api.telegram.org'")


@pytest.fixture
def log_records() -> list[dict]:
    """Loguru records emitted while the test runs."""
    records: list[dict] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
