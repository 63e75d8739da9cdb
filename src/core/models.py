"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to GitHub's payload shapes or any Telegram-specific types. Every
instance is built from a single webhook delivery and discarded afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class Sender:
    """The GitHub account that triggered the event."""

    login: str
    profile_url: str


@dataclass(frozen=True)
class Comment:
    """A single user-authored comment on a commit, issue, or review thread."""

    body: str
    url: str


@dataclass(frozen=True)
class Content:
    """A CRUD-style change to an issue, pull request, or review."""

    action: str
    title: str
    url: str
    body: str = ""


@dataclass(frozen=True)
class Status:
    """A commit status transition reported by CI."""

    state: str
    message: str
    url: str


@dataclass(frozen=True)
class CommentEvent:
    kind: str
    sender: Sender
    comment: Comment


@dataclass(frozen=True)
class CRUDEvent:
    kind: str
    sender: Sender
    content: Content


@dataclass(frozen=True)
class StatusEvent:
    sender: Sender
    status: Status


@dataclass(frozen=True)
class PingEvent:
    """Sent by GitHub when a webhook is first configured."""


NormalizedEvent = Union[CommentEvent, CRUDEvent, StatusEvent, PingEvent]


@dataclass(frozen=True)
class RawEvent:
    """A decoded webhook delivery, tagged with its X-GitHub-Event value."""

    kind: str
    payload: Mapping[str, Any]


@dataclass(frozen=True)
class Delivered:
    """A message is ready to be forwarded (empty for unrecognized events)."""

    message: str


@dataclass(frozen=True)
class Suppressed:
    """The event was deliberately dropped by a suppression rule."""

    reason: str


@dataclass(frozen=True)
class Failed:
    """Decoding or delivery failed; reason is surfaced to the caller."""

    reason: str


Outcome = Union[Delivered, Suppressed, Failed]
