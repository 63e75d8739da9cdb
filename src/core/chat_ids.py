"""Helpers for working with Telegram chat identifiers."""

from __future__ import annotations

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def parse_chat_id(raw: str) -> int:
    """Parse a chat identifier as a signed 64-bit integer."""

    text = raw.strip()
    try:
        value = int(text)
    except ValueError as exc:
        raise ValueError(f"Invalid chat id: {raw!r}") from exc
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError(f"Chat id out of range: {raw!r}")
    return value


def group_chat_id(destination: int) -> int:
    """Return the group-chat form of a destination id.

    Group chat ids are negative in the Bot API. Destinations are configured
    as positive magnitudes, so both signs resolve to the same chat.
    """

    return -abs(destination)
