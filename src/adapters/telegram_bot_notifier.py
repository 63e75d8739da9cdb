"""Telegram Bot API notification adapter.

Uses the Bot API for delivery so notifications only need a bot token and the
target group's chat id.
"""

from __future__ import annotations

import asyncio
import json
import urllib.error
import urllib.request

from core.chat_ids import group_chat_id
from core.ports import DeliveryError


class TelegramBotNotifier:
    """Notifier adapter that sends messages via the Telegram Bot API."""

    def __init__(self, bot_token: str, timeout_seconds: float = 10.0) -> None:
        self._bot_token = bot_token
        self._timeout = timeout_seconds

    def _endpoint(self) -> str:
        # The Bot API endpoint is deterministic and derived from the token.
        return f"https://api.telegram.org/bot{self._bot_token}/sendMessage"

    def build_payload(self, message: str, chat_id: int) -> dict:
        """Return the sendMessage body for the given message."""

        return {
            "chat_id": group_chat_id(chat_id),
            "text": message,
            "parse_mode": "Markdown",
            "disable_web_page_preview": True,
        }

    def _post(self, payload: dict) -> None:
        data = json.dumps(payload).encode("utf-8")
        request = urllib.request.Request(self._endpoint(), data=data, method="POST")
        request.add_header("Content-Type", "application/json")
        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                body = response.read().decode("utf-8", errors="replace")
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            raise DeliveryError(f"Bot API error {e.code}: {body}") from e
        except urllib.error.URLError as e:
            raise DeliveryError(f"Bot API unreachable: {e.reason}") from e

        try:
            result = json.loads(body)
        except json.JSONDecodeError as e:
            raise DeliveryError(f"Bot API returned invalid JSON: {body}") from e
        if not result.get("ok", False):
            raise DeliveryError(f"Bot API rejected message: {result.get('description', body)}")

    async def send(self, message: str, chat_id: int) -> None:
        """Send the message to the group chat via the Bot API."""

        # urllib is blocking; run it in a worker thread so the event loop
        # keeps serving other deliveries.
        await asyncio.to_thread(self._post, self.build_payload(message, chat_id))
