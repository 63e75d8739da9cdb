"""GitHub webhook decoding adapter.

Turns raw request bytes and headers into a core RawEvent. Signature and
payload checks happen here so the core only ever sees decoded deliveries.
"""

from __future__ import annotations

import hashlib
import hmac
import json
from typing import Iterable, Mapping, Optional
from urllib.parse import parse_qs

from core.extractors import SUPPORTED_EVENTS
from core.models import RawEvent

EVENT_HEADER = "x-github-event"
SIGNATURE_256_HEADER = "x-hub-signature-256"
SIGNATURE_HEADER = "x-hub-signature"


class DecodeError(ValueError):
    """Base error for deliveries that cannot be turned into a RawEvent."""


class MissingEventHeaderError(DecodeError):
    pass


class UnsupportedEventError(DecodeError):
    pass


class InvalidPayloadError(DecodeError):
    pass


class UnsupportedContentTypeError(DecodeError):
    pass


class MissingSignatureError(DecodeError):
    pass


class InvalidSignatureError(DecodeError):
    pass


SIGNATURE_ERRORS = (MissingSignatureError, InvalidSignatureError)


def _lower_keys(headers: Mapping[str, str]) -> dict[str, str]:
    return {key.lower(): value for key, value in headers.items()}


def verify_signature(raw_body: bytes, headers: Mapping[str, str], secret: str) -> None:
    """Check the HMAC signature GitHub computed with the shared secret.

    The SHA-256 header is preferred; the legacy SHA-1 header is accepted when
    it is the only one present.
    """

    lowered = _lower_keys(headers)
    if lowered.get(SIGNATURE_256_HEADER):
        signature = lowered[SIGNATURE_256_HEADER]
        prefix, digestmod = "sha256=", hashlib.sha256
    elif lowered.get(SIGNATURE_HEADER):
        signature = lowered[SIGNATURE_HEADER]
        prefix, digestmod = "sha1=", hashlib.sha1
    else:
        raise MissingSignatureError("missing X-Hub-Signature Header")

    if not signature.startswith(prefix):
        raise InvalidSignatureError("HMAC verification failed")

    expected = hmac.new(secret.encode("utf-8"), raw_body, digestmod).hexdigest()
    # Compare bytes: header values may carry non-ASCII characters, which
    # compare_digest rejects for str.
    provided = signature[len(prefix):].encode("utf-8", errors="replace")
    if not hmac.compare_digest(provided, expected.encode("ascii")):
        raise InvalidSignatureError("HMAC verification failed")


def _decode_body(raw_body: bytes, content_type: str) -> bytes:
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type in ("", "application/json"):
        return raw_body
    if media_type == "application/x-www-form-urlencoded":
        form = parse_qs(raw_body.decode("utf-8", errors="replace"))
        values = form.get("payload")
        if not values:
            raise InvalidPayloadError("error parsing payload")
        return values[0].encode("utf-8")
    raise UnsupportedContentTypeError(f"unsupported content type: {media_type}")


def parse_webhook_request(
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: Optional[str],
    events: Iterable[str] = SUPPORTED_EVENTS,
) -> RawEvent:
    """Validate and decode one webhook delivery.

    Raises a DecodeError subclass describing the first check that failed.
    Signature verification is skipped when no secret is configured.
    """

    lowered = _lower_keys(headers)

    kind = lowered.get(EVENT_HEADER, "").strip()
    if not kind:
        raise MissingEventHeaderError("missing X-GitHub-Event Header")
    if kind not in set(events):
        raise UnsupportedEventError("event not defined to be parsed")

    if not raw_body:
        raise InvalidPayloadError("error parsing payload")

    if secret:
        verify_signature(raw_body, lowered, secret)

    body = _decode_body(raw_body, lowered.get("content-type", ""))
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidPayloadError("error parsing payload") from exc

    if not isinstance(payload, dict):
        raise InvalidPayloadError("error parsing payload")

    return RawEvent(kind=kind, payload=payload)
