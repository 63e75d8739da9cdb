"""Suppression rules (core domain).

Rules are static set lookups per event category so that adding a new
low-value action is a one-line change.
"""

from __future__ import annotations

from typing import Optional

from core.models import CRUDEvent, NormalizedEvent, StatusEvent

SUPPRESSED_ACTIONS = frozenset(
    {
        "labeled",
        "unlabeled",
        "assigned",
        "unassigned",
        "review_requested",
        "review_request_removed",
        "edited",
    }
)

SUPPRESSED_STATES = frozenset({"pending"})


def suppression_reason(event: NormalizedEvent) -> Optional[str]:
    """Return a human-readable reason when the event should not be forwarded.

    Comment and ping events are always forwarded.
    """

    if isinstance(event, StatusEvent):
        if event.status.state in SUPPRESSED_STATES:
            return f"Not Allowed: status {event.status.state}"
        return None
    if isinstance(event, CRUDEvent):
        if event.content.action in SUPPRESSED_ACTIONS:
            return f"Not Allowed: action {event.content.action}"
        return None
    return None


def should_suppress(event: NormalizedEvent) -> bool:
    return suppression_reason(event) is not None
