from __future__ import annotations

import asyncio
import io
import json
import urllib.error
import urllib.request

import pytest

from adapters.telegram_bot_notifier import TelegramBotNotifier
from core.ports import DeliveryError


class FakeResponse:
    def __init__(self, body: dict) -> None:
        self._body = json.dumps(body).encode("utf-8")

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info) -> None:
        return None


def _capture_urlopen(monkeypatch, response: dict) -> list:
    requests: list = []

    def fake_urlopen(request, timeout=None):
        requests.append((request, timeout))
        return FakeResponse(response)

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    return requests


def test_payload_targets_group_chat_with_markdown() -> None:
    notifier = TelegramBotNotifier(bot_token="123:abc")

    payload = notifier.build_payload("ping", 4242)

    assert payload == {
        "chat_id": -4242,
        "text": "ping",
        "parse_mode": "Markdown",
        "disable_web_page_preview": True,
    }


def test_send_posts_to_bot_endpoint(monkeypatch) -> None:
    requests = _capture_urlopen(monkeypatch, {"ok": True, "result": {}})
    notifier = TelegramBotNotifier(bot_token="123:abc", timeout_seconds=3)

    asyncio.run(notifier.send("hello", 99))

    request, timeout = requests[0]
    assert request.full_url == "https://api.telegram.org/bot123:abc/sendMessage"
    assert request.get_method() == "POST"
    assert json.loads(request.data)["chat_id"] == -99
    assert timeout == 3


def test_rejected_message_raises_delivery_error(monkeypatch) -> None:
    _capture_urlopen(monkeypatch, {"ok": False, "description": "Bad Request: chat not found"})
    notifier = TelegramBotNotifier(bot_token="123:abc")

    with pytest.raises(DeliveryError, match="chat not found"):
        asyncio.run(notifier.send("hello", 99))


def test_http_error_raises_delivery_error(monkeypatch) -> None:
    def fake_urlopen(request, timeout=None):
        raise urllib.error.HTTPError(
            request.full_url, 401, "Unauthorized", {}, io.BytesIO(b'{"ok":false}')
        )

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    notifier = TelegramBotNotifier(bot_token="bad")

    with pytest.raises(DeliveryError, match="Bot API error 401"):
        asyncio.run(notifier.send("hello", 99))


def test_network_error_raises_delivery_error(monkeypatch) -> None:
    def fake_urlopen(request, timeout=None):
        raise urllib.error.URLError("connection refused")

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    notifier = TelegramBotNotifier(bot_token="123:abc")

    with pytest.raises(DeliveryError, match="unreachable"):
        asyncio.run(notifier.send("hello", 99))
