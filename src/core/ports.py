"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contract for notification adapters so that the core
can deliver through the Bot API, a Telethon client, or a test fake.
"""

from __future__ import annotations

from typing import Protocol


class DeliveryError(RuntimeError):
    """Raised by notifiers when a message could not be delivered."""


class NotifierPort(Protocol):
    """Notification operations required by the core pipeline."""

    async def send(self, message: str, chat_id: int) -> None:
        """Deliver message to chat_id, raising DeliveryError on failure."""
        ...
