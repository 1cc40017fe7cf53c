"""
Telemon - send messages to Telegram groups and forum topics.

A tiny Bot API client with:
- Static configuration from telemon.toml
- A fluent builder: Telemon.send(text).to(...) / .to_group()
- One blocking request per message, no retries
- Only two dependencies: requests and loguru

Basic usage:
    from telemon import Telemon

    Telemon.send("Hello Topic! 🚀").to(42)
    Telemon.send("Hello Group!").to_group()
"""

__version__ = "0.1.0"

from .telemonConfig import Config, ConfigError, TelemonConfig, load_config
from .telegramClient import TelegramClient, TelegramError, escape_markdown_v2
from .telemonMessage import (
    ChatTopic,
    DispatchResult,
    DispatchStatus,
    Telemon,
    TelemonMessage,
    Topic,
    chat_topic,
    topic_of,
)

__all__ = [
    "Telemon",
    "TelemonMessage",
    "Topic",
    "ChatTopic",
    "topic_of",
    "chat_topic",
    "DispatchResult",
    "DispatchStatus",
    "TelegramClient",
    "TelegramError",
    "escape_markdown_v2",
    "Config",
    "ConfigError",
    "TelemonConfig",
    "load_config",
    "__version__",
]
