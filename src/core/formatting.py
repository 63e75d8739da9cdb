"""Notification formatting helpers.

Keeping formatting here prevents drift between notifier adapters and keeps
messages identical regardless of delivery channel. Output uses Telegram's
Markdown dialect; values are inserted verbatim.
"""

from __future__ import annotations

from core.models import (
    CommentEvent,
    CRUDEvent,
    NormalizedEvent,
    PingEvent,
    Sender,
    StatusEvent,
)


def format_sender(sender: Sender) -> str:
    """Return a Markdown link to the sender's GitHub profile."""

    return f"[{sender.login}]({sender.profile_url})"


def format_comment(event: CommentEvent) -> str:
    # The wording is "commented one", not "commented on". Existing chat
    # consumers expect it byte for byte.
    return (
        f"{format_sender(event.sender)} commented one {event.kind} with:"
        f"\n\n{event.comment.body}\n\n{event.comment.url}"
    )


def format_crud(event: CRUDEvent) -> str:
    """Format a CRUD-like action, appending details only when a body exists."""

    content = event.content
    details = f" Details:\n{content.body}" if content.body else ""
    return (
        f"{format_sender(event.sender)} {content.action} the {event.kind}: "
        f"{content.title} {content.url}{details}"
    )


def format_status(event: StatusEvent) -> str:
    status = event.status
    return f"`{status.state}`: [{status.message}]({status.url}) by {format_sender(event.sender)}"


def format_event(event: NormalizedEvent) -> str:
    """Return the notification text for any normalized event."""

    if isinstance(event, CommentEvent):
        return format_comment(event)
    if isinstance(event, CRUDEvent):
        return format_crud(event)
    if isinstance(event, StatusEvent):
        return format_status(event)
    if isinstance(event, PingEvent):
        return "ping"
    raise TypeError(f"Unsupported event type: {type(event).__name__}")
