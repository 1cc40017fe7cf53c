"""
telemonConfig.py

Loads the static ``telemon.toml`` file:

  token = "123456:ABC-DEF..."   # required
  chat_id = -1001234567890      # used by .to(topic_id)
  group_id = -1009876543210     # used by .to_group()
  show_logs = true              # default: false
  parse_mode = "HTML"           # default: "HTML"
"""

from __future__ import annotations

import threading
import tomllib
import typing as t
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

DEFAULT_CONFIG_PATH = Path("telemon.toml")
DEFAULT_BASE_URL = "https://api.telegram.org"


class ConfigError(Exception):
    """Raised when telemon.toml is missing or invalid."""


@dataclass(frozen=True)
class TelemonConfig:
    token: str
    chat_id: int | None = None              # default chat for topic sends
    group_id: int | None = None             # default chat for group sends
    show_logs: bool = False
    parse_mode: str = "HTML"
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float | None = None    # None -> requests default (no timeout)

    def __repr__(self) -> str:
        return (
            f"TelemonConfig(token='***', chat_id={self.chat_id!r}, group_id={self.group_id!r}, "
            f"show_logs={self.show_logs!r}, parse_mode={self.parse_mode!r}, base_url={self.base_url!r}, "
            f"timeout_seconds={self.timeout_seconds!r})"
        )

    @classmethod
    def from_mapping(cls, data: t.Mapping[str, t.Any]) -> "TelemonConfig":
        """
        Validate a parsed config mapping. Unknown keys are ignored.

        Raises:
            ConfigError: If the token is missing or a field has the wrong type
        """
        token = data.get("token")
        if not isinstance(token, str) or not token.strip():
            raise ConfigError("Missing bot token. Set `token` in telemon.toml")

        parse_mode = data.get("parse_mode", "HTML")
        if not isinstance(parse_mode, str):
            raise ConfigError(f"`parse_mode` must be a string, got {parse_mode!r}")

        base_url = data.get("base_url", DEFAULT_BASE_URL)
        if not isinstance(base_url, str) or not base_url.strip():
            raise ConfigError(f"`base_url` must be a non-empty string, got {base_url!r}")

        show_logs = data.get("show_logs", False)
        if not isinstance(show_logs, bool):
            raise ConfigError(f"`show_logs` must be true or false, got {show_logs!r}")

        timeout = data.get("timeout_seconds")
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                raise ConfigError(f"`timeout_seconds` must be a positive number, got {timeout!r}")
            timeout = float(timeout)

        return cls(
            token=token.strip(),
            chat_id=_optional_id(data, "chat_id"),
            group_id=_optional_id(data, "group_id"),
            show_logs=show_logs,
            parse_mode=parse_mode,
            base_url=base_url.rstrip("/"),
            timeout_seconds=timeout,
        )


def _optional_id(data: t.Mapping[str, t.Any], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    # bool is an int subclass; `chat_id = true` is a typo, not an id
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"`{key}` must be an integer, got {value!r}")
    return value


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> TelemonConfig:
    """
    Read and validate a telemon.toml file.

    Raises:
        ConfigError: If the file is missing, is not valid TOML, or fails validation
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"{path} file not found") from e
    except OSError as e:
        raise ConfigError(f"Could not read {path}: {e}") from e

    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e

    return TelemonConfig.from_mapping(data)


class Config:
    """Process-wide configuration, loaded from telemon.toml on first use."""

    _instance: TelemonConfig | None = None
    _lock = threading.Lock()

    @classmethod
    def get(cls) -> TelemonConfig:
        """
        Return the cached configuration, loading it on the first call.

        Safe to call from several threads; the file is read once.
        A missing or malformed file is fatal: the error is logged and the
        process exits with status 1.
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    try:
                        cls._instance = load_config(DEFAULT_CONFIG_PATH)
                    except ConfigError as e:
                        logger.critical(f"Cannot start telemon: {e}")
                        raise SystemExit(1) from e
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Forget the cached configuration so the next get() reloads it."""
        with cls._lock:
            cls._instance = None
