from __future__ import annotations

import importlib.util
import sys
from pathlib import Path

import pytest

from conftest import FakeResponse, FakeSession

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "test_telemon.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("telemon_smoke_script", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _run(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, session: FakeSession) -> None:
    config_path = tmp_path / "telemon.toml"
    config_path.write_text(
        'token = "123:abc"\nchat_id = 111\ngroup_id = 333\nparse_mode = "MarkdownV2"\n',
        encoding="utf-8",
    )
    monkeypatch.setattr("telemon.telegramClient.requests.Session", lambda: session)
    monkeypatch.setattr(sys, "argv", ["test_telemon.py", "--config", str(config_path)])
    _load_script().main()


def test_escaped_message_goes_to_group_id(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    session = FakeSession()
    _run(tmp_path, monkeypatch, session)

    assert [call["json"]["chat_id"] for call in session.calls] == [333, 333]
    assert "\\." in session.calls[-1]["json"]["text"]
    assert session.closed


def test_session_closed_when_send_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    session = FakeSession(FakeResponse(401, '{"description":"Unauthorized"}'))

    with pytest.raises(SystemExit) as excinfo:
        _run(tmp_path, monkeypatch, session)

    assert excinfo.value.code == 1
    assert session.closed
