"""Telegram client notification adapter.

Sends through an MTProto client (Telethon) logged in as the bot, for
deployments that already run a Telethon session.
"""

from __future__ import annotations

from telethon.errors import RPCError

from core.chat_ids import group_chat_id
from core.ports import DeliveryError


class TelegramClientNotifier:
    """Notifier adapter that sends messages through a Telethon client."""

    def __init__(self, client) -> None:
        self._client = client

    async def send(self, message: str, chat_id: int) -> None:
        """Send the message to the group chat with link previews disabled."""

        try:
            await self._client.send_message(
                group_chat_id(chat_id),
                message,
                parse_mode="md",
                link_preview=False,
            )
        except RPCError as e:
            raise DeliveryError(f"Telegram error: {e}") from e
        except ValueError as e:
            # Telethon raises ValueError when the chat cannot be resolved.
            raise DeliveryError(str(e)) from e
