"""Core configuration dataclasses.

We keep config parsing outside the core (see settings.py), but these
dataclasses define the shape the core and adapters expect so the service can
be built once at startup and wired explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

NOTIFICATION_METHODS = ("bot_api", "telethon")


@dataclass(frozen=True)
class TelegramConfig:
    """Telegram delivery settings consumed by notifier adapters."""

    bot_token: str
    chat_id: int
    notification_method: str = "bot_api"
    timeout_seconds: float = 10.0
    # Only needed by the Telethon notifier.
    api_id: Optional[int] = None
    api_hash: Optional[str] = None
    session_name: str = "octogram"


@dataclass(frozen=True)
class AppConfig:
    """Everything the service needs, built once at process start."""

    webhook_secret: str
    telegram: TelegramConfig
    logging: dict[str, Any] = field(default_factory=dict)
