"""
telegramClient.py

Thin wrapper around the Bot API ``sendMessage`` method.

Basic usage:
  from telemon import TelegramClient
  client = TelegramClient()                       # reads telemon.toml
  client.send_to_group(-1001234567890, "Hello, group!")
  client.send_to_topic(-1001234567890, 42, "Hello, topic!")

Errors are raised as TelegramError; nothing is retried.
"""

from __future__ import annotations

import re
import typing as t

import requests
from loguru import logger

from telemon.telemonConfig import Config, TelemonConfig

_MARKDOWN_V2_SPECIAL = re.compile(r"([_*\[\]()~`>#+\-=|{}.!\\])")


class TelegramError(Exception):
    """A send failed: non-2xx response or transport error."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class TelegramClient:
    """
    Sends text messages to Telegram groups and forum topics.

    - Uses the given TelemonConfig, or the global one from telemon.toml.
    - One requests.Session per client; safe to share between threads.
    - Returns the decoded response on 2xx, raises TelegramError otherwise.
    """

    def __init__(
        self,
        config: TelemonConfig | None = None,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self._cfg = config or Config.get()
        self._session = session or requests.Session()

    @property
    def config(self) -> TelemonConfig:
        return self._cfg

    # ----------------------------- Public API -----------------------------

    def send_message(
        self,
        chat_id: int,
        text: str,
        message_thread_id: int | None = None,
    ) -> dict[str, t.Any]:
        """
        Send a text message to a chat, or to a topic inside it.

        Args:
            chat_id: Destination chat
            text: Message text, passed through as-is (see escape_markdown_v2)
            message_thread_id: Forum topic; omitted from the payload when None

        Returns:
            Telegram API response dict (empty if the body was not JSON)

        Raises:
            TelegramError: On non-2xx status or network failure
        """
        payload: dict[str, t.Any] = {"chat_id": chat_id, "text": text}
        if message_thread_id is not None:
            payload["message_thread_id"] = message_thread_id
        payload["parse_mode"] = self._cfg.parse_mode

        return self._post_json("sendMessage", payload)

    def send_to_topic(self, chat_id: int, topic_id: int, text: str) -> dict[str, t.Any]:
        """Send a message to a forum topic (message thread) in a chat."""
        return self.send_message(chat_id, text, message_thread_id=topic_id)

    def send_to_group(self, chat_id: int, text: str) -> dict[str, t.Any]:
        """Send a message to a chat without a topic."""
        return self.send_message(chat_id, text)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "TelegramClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # --------------------------- Internal helpers -------------------------

    def _endpoint(self, method: str) -> str:
        return f"{self._cfg.base_url}/bot{self._cfg.token}/{method}"

    def _post_json(self, method: str, payload: dict[str, t.Any]) -> dict[str, t.Any]:
        try:
            resp = self._session.post(
                self._endpoint(method),
                json=payload,
                timeout=self._cfg.timeout_seconds,
            )
            return self._handle_response(resp)
        except requests.RequestException as e:
            # never log the exception repr as-is: the URL carries the token
            message = str(e).replace(self._cfg.token, "***")
            if self._cfg.show_logs:
                logger.error(f"Telegram request failed: {message}")
            raise TelegramError(message) from e

    def _handle_response(self, resp: requests.Response) -> dict[str, t.Any]:
        if 200 <= resp.status_code < 300:
            if self._cfg.show_logs:
                logger.info(f"𝌮 Telegram response {resp.status_code}: {resp.text}")
            try:
                data = resp.json()
            except ValueError:
                return {}
            return data if isinstance(data, dict) else {}

        body = resp.text
        if self._cfg.show_logs:
            logger.error(f"Telegram error ({resp.status_code}): {body}")
        raise TelegramError(f"Telegram error: {body}", status_code=resp.status_code, body=body)


# ------------------------------ Utility functions -------------------------------

def escape_markdown_v2(text: str) -> str:
    """
    Backslash-escape the characters MarkdownV2 treats as markup.

    Escapes _*[]()~`>#+-=|{}.! and the backslash itself, which MarkdownV2
    also requires: "C:\\path" becomes "C:\\\\path".
    Only needed with parse_mode = "MarkdownV2"; telemon never calls it for you.

        >>> escape_markdown_v2("Hello_World!")
        'Hello\\\\_World\\\\!'
    """
    return _MARKDOWN_V2_SPECIAL.sub(r"\\\1", text)
