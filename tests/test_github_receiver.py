from __future__ import annotations

import hashlib
import hmac
import json
from urllib.parse import urlencode

import pytest

from adapters.github_receiver import (
    InvalidPayloadError,
    InvalidSignatureError,
    MissingEventHeaderError,
    MissingSignatureError,
    UnsupportedContentTypeError,
    UnsupportedEventError,
    parse_webhook_request,
)
from core.models import RawEvent
from tests import payloads

SECRET = "s3cret"


def _sign(body: bytes, algorithm: str = "sha256", secret: str = SECRET) -> str:
    digest = hmac.new(secret.encode("utf-8"), body, getattr(hashlib, algorithm)).hexdigest()
    return f"{algorithm}={digest}"


def _headers(event: str, body: bytes, **extra: str) -> dict[str, str]:
    headers = {
        "X-GitHub-Event": event,
        "Content-Type": "application/json",
        "X-Hub-Signature-256": _sign(body),
    }
    headers.update(extra)
    return headers


def test_valid_sha256_delivery_is_decoded() -> None:
    payload = payloads.issue_comment()
    body = json.dumps(payload).encode("utf-8")

    event = parse_webhook_request(body, _headers("issue_comment", body), SECRET)

    assert event == RawEvent("issue_comment", payload)


def test_legacy_sha1_signature_is_accepted() -> None:
    body = json.dumps(payloads.ping()).encode("utf-8")
    headers = {"x-github-event": "ping", "x-hub-signature": _sign(body, "sha1")}

    assert parse_webhook_request(body, headers, SECRET).kind == "ping"


def test_tampered_body_fails_verification() -> None:
    body = json.dumps(payloads.status()).encode("utf-8")
    headers = _headers("status", body)

    with pytest.raises(InvalidSignatureError, match="HMAC verification failed"):
        parse_webhook_request(body + b" ", headers, SECRET)


def test_wrong_secret_fails_verification() -> None:
    body = json.dumps(payloads.status()).encode("utf-8")
    headers = _headers("status", body, **{"X-Hub-Signature-256": _sign(body, secret="other")})

    with pytest.raises(InvalidSignatureError):
        parse_webhook_request(body, headers, SECRET)


def test_missing_signature_is_rejected_when_secret_configured() -> None:
    body = b"{}"

    with pytest.raises(MissingSignatureError, match="missing X-Hub-Signature Header"):
        parse_webhook_request(body, {"X-GitHub-Event": "ping"}, SECRET)


def test_non_ascii_signature_fails_verification() -> None:
    body = json.dumps(payloads.ping()).encode("utf-8")
    headers = _headers("ping", body, **{"X-Hub-Signature-256": "sha256=\xff" + "0" * 63})

    with pytest.raises(InvalidSignatureError, match="HMAC verification failed"):
        parse_webhook_request(body, headers, SECRET)


def test_signature_is_not_checked_without_secret() -> None:
    assert parse_webhook_request(b"{}", {"X-GitHub-Event": "ping"}, None) == RawEvent("ping", {})


def test_missing_event_header() -> None:
    with pytest.raises(MissingEventHeaderError, match="missing X-GitHub-Event Header"):
        parse_webhook_request(b"{}", {}, SECRET)


def test_event_outside_supported_set_is_rejected() -> None:
    body = b"{}"

    with pytest.raises(UnsupportedEventError, match="event not defined to be parsed"):
        parse_webhook_request(body, _headers("push", body), SECRET)


def test_custom_event_set_is_honoured() -> None:
    body = b"{}"

    event = parse_webhook_request(body, _headers("push", body), SECRET, events={"push"})

    assert event == RawEvent("push", {})


def test_empty_body_is_rejected() -> None:
    with pytest.raises(InvalidPayloadError, match="error parsing payload"):
        parse_webhook_request(b"", _headers("ping", b""), SECRET)


@pytest.mark.parametrize("body", [b"{not json", b"[1, 2]", b"\xff\xfe\x00"])
def test_malformed_json_is_rejected(body: bytes) -> None:
    with pytest.raises(InvalidPayloadError):
        parse_webhook_request(body, _headers("ping", body), SECRET)


def test_form_encoded_payload_is_decoded() -> None:
    payload = payloads.issues()
    body = urlencode({"payload": json.dumps(payload)}).encode("utf-8")
    headers = _headers("issues", body, **{"Content-Type": "application/x-www-form-urlencoded"})

    assert parse_webhook_request(body, headers, SECRET) == RawEvent("issues", payload)


def test_unknown_content_type_is_rejected() -> None:
    body = b"<xml/>"
    headers = _headers("ping", body, **{"Content-Type": "application/xml"})

    with pytest.raises(UnsupportedContentTypeError):
        parse_webhook_request(body, headers, SECRET)
