"""Routes a decoded webhook delivery through extraction, suppression and formatting."""

from __future__ import annotations

from typing import Union

from core.extractors import EXTRACTORS
from core.formatting import format_event
from core.models import Delivered, RawEvent, Suppressed
from core.suppression import suppression_reason


def dispatch(event: RawEvent) -> Union[Delivered, Suppressed]:
    """Return the message for one delivery, or the reason it was suppressed.

    Unrecognized event kinds produce an empty message rather than an error so
    that event types GitHub adds later never break the webhook.
    """

    extractor = EXTRACTORS.get(event.kind)
    if extractor is None:
        return Delivered("")

    normalized = extractor(event.payload)
    # Suppression is checked before formatting so dropped events cost nothing.
    reason = suppression_reason(normalized)
    if reason is not None:
        return Suppressed(reason)

    return Delivered(format_event(normalized))
