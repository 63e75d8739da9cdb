"""Core webhook processing pipeline.

This module is integration-agnostic. It only relies on the notifier port,
so the HTTP service, the CLI and the tests drive it the same way.
"""

from __future__ import annotations

import logging

from core.dispatcher import dispatch
from core.models import Delivered, Failed, Outcome, RawEvent, Suppressed
from core.ports import DeliveryError, NotifierPort

LOGGER = logging.getLogger(__name__)


class EventProcessor:
    """Orchestrates dispatch and delivery for one delivery at a time."""

    def __init__(self, notifier: NotifierPort, chat_id: int) -> None:
        self._notifier = notifier
        self._chat_id = chat_id

    async def handle(self, event: RawEvent) -> Outcome:
        """Process one decoded delivery and return its terminal outcome."""

        outcome = dispatch(event)

        if isinstance(outcome, Suppressed):
            LOGGER.info("Suppressed %s event (%s)", event.kind, outcome.reason)
            return outcome

        # Unrecognized kinds resolve to an empty message; there is nothing to send.
        if not outcome.message:
            LOGGER.info("No message for %s event", event.kind)
            return outcome

        LOGGER.debug("Message:\n%s", outcome.message)
        LOGGER.debug("Chat ID: %s", self._chat_id)

        try:
            await self._notifier.send(outcome.message, self._chat_id)
        except DeliveryError as exc:
            LOGGER.warning("Delivery failed for %s event: %s", event.kind, exc)
            return Failed(str(exc))

        LOGGER.info("Sent %s event notification", event.kind)
        return Delivered(outcome.message)
