"""Telegram client factory for octogram.

Only used when notification_method is "telethon". The client logs in with
the bot token, so no interactive login or user session is involved.
"""

from __future__ import annotations

import logging

from telethon import TelegramClient

from core.config import TelegramConfig


def build_client(config: TelegramConfig) -> TelegramClient:
    """Create a Telethon client from the Telegram settings.

    The session name defaults to "octogram" to create a local .session file.
    """

    # Fail fast on missing credentials to avoid an ambiguous start-up error.
    if not config.api_id or not config.api_hash:
        raise RuntimeError("API_ID and API_HASH are required when notification_method=telethon")

    logging.getLogger(__name__).info("Initializing Telegram client")

    return TelegramClient(config.session_name, config.api_id, config.api_hash)


async def start_client(client: TelegramClient, config: TelegramConfig) -> TelegramClient:
    """Connect and authorize the client as the configured bot."""

    await client.start(bot_token=config.bot_token)
    return client
