"""Per-event extractors that map GitHub payloads onto the core event model.

Each extractor is pure and never fails: missing or malformed fields degrade
to empty strings (or zero for counters) so a partially populated payload
still produces a readable notification.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Sequence

from core.models import (
    Comment,
    CommentEvent,
    Content,
    CRUDEvent,
    NormalizedEvent,
    PingEvent,
    Sender,
    Status,
    StatusEvent,
)

Payload = Mapping[str, Any]
Extractor = Callable[[Payload], NormalizedEvent]


def _dig(data: Any, path: Sequence[str]) -> Any:
    current = data
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
        if current is None:
            return None
    return current


def _text(data: Any, *path: str) -> str:
    value = _dig(data, path)
    if value is None or isinstance(value, (Mapping, list, tuple)):
        return ""
    return str(value)


def _count(data: Any, *path: str) -> int:
    value = _dig(data, path)
    # bool is an int subclass but never a meaningful line count
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value


def extract_sender(payload: Payload) -> Sender:
    """Return the account that triggered the event."""

    return Sender(
        login=_text(payload, "sender", "login"),
        profile_url=_text(payload, "sender", "html_url"),
    )


def _extract_comment(payload: Payload) -> Comment:
    return Comment(
        body=_text(payload, "comment", "body"),
        url=_text(payload, "comment", "html_url"),
    )


def extract_commit_comment(payload: Payload) -> CommentEvent:
    return CommentEvent("commit", extract_sender(payload), _extract_comment(payload))


def extract_issue_comment(payload: Payload) -> CommentEvent:
    return CommentEvent("issue", extract_sender(payload), _extract_comment(payload))


def extract_pull_request_review_comment(payload: Payload) -> CommentEvent:
    return CommentEvent("pull request", extract_sender(payload), _extract_comment(payload))


def extract_pull_request_review(payload: Payload) -> CRUDEvent:
    content = Content(
        action=_text(payload, "action"),
        title=_text(payload, "pull_request", "title"),
        url=_text(payload, "pull_request", "html_url"),
        body=_text(payload, "review", "body"),
    )
    return CRUDEvent("pull request review", extract_sender(payload), content)


def extract_pull_request(payload: Payload) -> CRUDEvent:
    additions = _count(payload, "pull_request", "additions")
    deletions = _count(payload, "pull_request", "deletions")
    content = Content(
        action=_text(payload, "action"),
        title=_text(payload, "pull_request", "title"),
        url=_text(payload, "pull_request", "html_url"),
        body=f"Additions: {additions} Deletions: {deletions}",
    )
    return CRUDEvent("pull request", extract_sender(payload), content)


def extract_issues(payload: Payload) -> CRUDEvent:
    content = Content(
        action=_text(payload, "action"),
        title=_text(payload, "issue", "title"),
        url=_text(payload, "issue", "html_url"),
    )
    return CRUDEvent("issue", extract_sender(payload), content)


def extract_status(payload: Payload) -> StatusEvent:
    """Build a StatusEvent from the commit the status was reported on."""

    status = Status(
        state=_text(payload, "state"),
        message=_text(payload, "commit", "commit", "message"),
        url=_text(payload, "commit", "html_url"),
    )
    return StatusEvent(extract_sender(payload), status)


def extract_ping(payload: Payload) -> PingEvent:
    return PingEvent()


# Keys are X-GitHub-Event header values. This is the complete set of kinds
# the service understands; anything else is treated as unrecognized.
EXTRACTORS: Dict[str, Extractor] = {
    "commit_comment": extract_commit_comment,
    "issue_comment": extract_issue_comment,
    "pull_request_review_comment": extract_pull_request_review_comment,
    "pull_request_review": extract_pull_request_review,
    "pull_request": extract_pull_request,
    "issues": extract_issues,
    "status": extract_status,
    "ping": extract_ping,
}

SUPPORTED_EVENTS = frozenset(EXTRACTORS)
