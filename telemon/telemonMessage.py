"""
telemonMessage.py

Fluent dispatch layer over TelegramClient.

Basic usage (chat_id / group_id come from telemon.toml):
  from telemon import Telemon, chat_topic
  Telemon.send("Hello Topic!").to(42)                         # topic in chat_id
  Telemon.send("Hello with chat!").to(chat_topic(-100123, 42))
  Telemon.send("Hello Group!").to_group()                     # group_id

Advanced:
  tm = Telemon(config=load_config("other.toml"))
  result = tm.message("Deploy finished").to_group()
  if not result:
      print(result.status, result.error)

.to() and .to_group() never raise on a failed send; they return a
DispatchResult that callers are free to ignore.
"""

from __future__ import annotations

import enum
import typing as t
from dataclasses import dataclass

from loguru import logger

from telemon.telegramClient import TelegramClient, TelegramError
from telemon.telemonConfig import Config, TelemonConfig

_LOGS_HINT = "You can turn off these logs by setting show_logs = false in telemon.toml."


# ------------------------------ Targets -------------------------------

@dataclass(frozen=True)
class Topic:
    """A topic inside the chat configured as `chat_id`."""
    topic_id: int


@dataclass(frozen=True)
class ChatTopic:
    """A topic inside an explicit chat."""
    chat_id: int
    topic_id: int


Target = t.Union[Topic, ChatTopic]


def topic_of(topic_id: int) -> Topic:
    return Topic(topic_id)


def chat_topic(chat_id: int, topic_id: int) -> ChatTopic:
    return ChatTopic(chat_id, topic_id)


def _is_id(value: t.Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def as_target(target: Target | int | tuple[int, int]) -> Target:
    """
    Normalize what .to() accepts into a Target.

    A bare int is a topic id, a (chat_id, topic_id) pair is a ChatTopic.

    Raises:
        TypeError: For anything else
    """
    if isinstance(target, (Topic, ChatTopic)):
        return target
    if _is_id(target):
        return Topic(target)
    if isinstance(target, tuple) and len(target) == 2 and all(_is_id(v) for v in target):
        return ChatTopic(target[0], target[1])
    raise TypeError(
        f"Unsupported target {target!r}. Use a topic id, a (chat_id, topic_id) pair, "
        "topic_of(...) or chat_topic(...)."
    )


# ------------------------------ Results -------------------------------

class DispatchStatus(enum.Enum):
    SENT = "sent"
    SKIPPED = "skipped"     # chat_id / group_id missing from config
    FAILED = "failed"       # Telegram or network error


@dataclass(frozen=True)
class DispatchResult:
    status: DispatchStatus
    chat_id: int | None = None
    topic_id: int | None = None
    error: str | None = None

    @property
    def sent(self) -> bool:
        return self.status is DispatchStatus.SENT

    def __bool__(self) -> bool:
        return self.sent


# ------------------------------ Builder -------------------------------

class Telemon:
    """Entry point for building messages."""

    def __init__(
        self,
        config: TelemonConfig | None = None,
        *,
        client: TelegramClient | None = None,
    ) -> None:
        if client is not None:
            # the client's token and parse_mode must agree with the ids used here
            if config is not None and config != client.config:
                raise ValueError("config does not match client.config; pass only one of them")
            config = client.config
        elif config is None:
            config = Config.get()
        self._cfg = config
        self._client = client
        self._owns_client = client is None

    @property
    def config(self) -> TelemonConfig:
        return self._cfg

    @property
    def client(self) -> TelegramClient:
        # created on first real send; skipped dispatches never open a session
        if self._client is None:
            self._client = TelegramClient(self._cfg)
        return self._client

    def message(self, text: str) -> "TelemonMessage":
        return TelemonMessage(self, text)

    def close(self) -> None:
        """Close the session this Telemon opened. A client passed in is left open."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "Telemon":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @classmethod
    def send(cls, text: str) -> "TelemonMessage":
        """Start a one-shot message using the global telemon.toml configuration."""
        return TelemonMessage(cls(), text, close_after=True)


class TelemonMessage:
    """A message waiting for its destination."""

    def __init__(self, telemon: Telemon, text: str, *, close_after: bool = False) -> None:
        self._telemon = telemon
        self.text = text
        self._close_after = close_after

    def to(self, target: Target | int | tuple[int, int]) -> DispatchResult:
        """
        Send to a forum topic.

        Accepts Topic / ChatTopic, a bare topic id (uses `chat_id` from config)
        or a (chat_id, topic_id) pair. A bare topic id without a configured
        `chat_id` is skipped and no request is made.
        """
        target = as_target(target)
        try:
            return self._to_topic(target)
        finally:
            if self._close_after:
                self._telemon.close()

    def to_group(self) -> DispatchResult:
        """Send to the chat configured as `group_id`, without a topic."""
        try:
            return self._to_group()
        finally:
            if self._close_after:
                self._telemon.close()

    def _to_topic(self, target: Target) -> DispatchResult:
        cfg = self._telemon.config

        if isinstance(target, Topic):
            if cfg.chat_id is None:
                if cfg.show_logs:
                    logger.warning(
                        "⚠️ chat_id not found! The `chat_id` field is missing in telemon.toml. "
                        "Please use `.to((chat_id, topic_id))` instead."
                    )
                return DispatchResult(DispatchStatus.SKIPPED, topic_id=target.topic_id)
            chat_id = cfg.chat_id
        else:
            chat_id = target.chat_id

        try:
            self._telemon.client.send_to_topic(chat_id, target.topic_id, self.text)
        except TelegramError as e:
            if cfg.show_logs:
                logger.error(f"❌ Error sending to topic {target.topic_id} in chat {chat_id}: {e}")
            return DispatchResult(DispatchStatus.FAILED, chat_id, target.topic_id, error=str(e))

        if cfg.show_logs:
            logger.info(f"✅ Message sent to topic {target.topic_id} in chat {chat_id}")
        return DispatchResult(DispatchStatus.SENT, chat_id, target.topic_id)

    def _to_group(self) -> DispatchResult:
        cfg = self._telemon.config
        group_id = cfg.group_id

        if group_id is None:
            if cfg.show_logs:
                logger.warning(
                    "⚠️ group_id is missing in the config file. "
                    "👀 Make sure the group_id is set in telemon.toml."
                )
            return DispatchResult(DispatchStatus.SKIPPED)

        try:
            self._telemon.client.send_to_group(group_id, self.text)
        except TelegramError as e:
            if cfg.show_logs:
                logger.error(f"❌ Error sending to group: {e}\n⚠️ {_LOGS_HINT}")
            return DispatchResult(DispatchStatus.FAILED, group_id, error=str(e))

        if cfg.show_logs:
            logger.info(f"✅ Message sent to group\nℹ️ Group id: {group_id}\n⚠️ {_LOGS_HINT}")
        return DispatchResult(DispatchStatus.SENT, group_id)
