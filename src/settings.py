"""Configuration loading for octogram.

Secrets (webhook secret, bot token) and the destination chat come from the
environment, optionally via a .env file. Non-secret tuning (notification
method, logging) lives in an optional config.json so it can be edited
without touching Python. Settings are loaded once at start-up and passed
around explicitly.
"""

from __future__ import annotations

import json
import os
from typing import Optional

from dotenv import load_dotenv

from core.chat_ids import parse_chat_id
from core.config import NOTIFICATION_METHODS, AppConfig, TelegramConfig

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Optional; override with OCTOGRAM_CONFIG.
CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")

SECRET_ENV_VARS = ("GITHUB_CLIENT_SECRET", "TELEGRAM_TOKEN", "API_HASH")


def _load_json_config(path: str) -> dict:
    """Load config.json if present; a missing file means defaults."""

    if not os.path.exists(path):
        return {}

    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _require_env(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise RuntimeError(f"Missing {name} in environment")
    return value


def _optional_int_env(name: str) -> Optional[int]:
    value = os.getenv(name, "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


def load_settings(config_path: Optional[str] = None) -> AppConfig:
    """Build the application config from the environment and config.json."""

    load_dotenv()

    path = config_path or os.getenv("OCTOGRAM_CONFIG") or CONFIG_PATH
    raw = _load_json_config(path)

    webhook_secret = _require_env("GITHUB_CLIENT_SECRET")
    bot_token = _require_env("TELEGRAM_TOKEN")

    # How to get the chat id of a group:
    # https://stackoverflow.com/questions/32423837/telegram-bot-how-to-get-a-group-chat-id
    try:
        chat_id = parse_chat_id(_require_env("TELEGRAM_CHAT_ID"))
    except ValueError as exc:
        raise RuntimeError(str(exc)) from exc

    notifications = raw.get("notifications", {})
    # Notification method switches adapters without changing core logic.
    method = notifications.get("notification_method", "bot_api")
    if method not in NOTIFICATION_METHODS:
        raise RuntimeError(f"notification_method must be one of {', '.join(NOTIFICATION_METHODS)}")

    telegram = TelegramConfig(
        bot_token=bot_token,
        chat_id=chat_id,
        notification_method=method,
        timeout_seconds=float(notifications.get("timeout_seconds", 10.0)),
        api_id=_optional_int_env("API_ID"),
        api_hash=os.getenv("API_HASH") or None,
        session_name=os.getenv("SESSION_NAME", "octogram"),
    )

    return AppConfig(
        webhook_secret=webhook_secret,
        telegram=telegram,
        logging=raw.get("logging", {}),
    )
