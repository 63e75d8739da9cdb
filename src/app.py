"""Application entry point for the octogram webhook service."""

from __future__ import annotations

import argparse
import json
import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from typing import Iterable, Optional

from art import tprint
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

import settings
from adapters.github_receiver import SIGNATURE_ERRORS, DecodeError, parse_webhook_request
from adapters.telegram_bot_notifier import TelegramBotNotifier
from adapters.telegram_notifier import TelegramClientNotifier
from client import build_client, start_client
from core.config import AppConfig
from core.dispatcher import dispatch
from core.models import Delivered, Failed, Outcome, RawEvent, Suppressed
from core.ports import NotifierPort
from core.processor import EventProcessor

NAME = "OCTOGRAM"
FONT = "tarty-1"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_PATH = "logs/octogram.log"

LOGGER = logging.getLogger(__name__)


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    """Masks the webhook secret, the bot token and configured env values."""

    def __init__(self, secrets: Iterable[str], fmt: str = LOG_FORMAT) -> None:
        super().__init__(fmt=fmt, datefmt=LOG_DATEFMT)
        # Longest first, so a secret that contains another is masked whole.
        self._secrets = sorted({secret for secret in secrets if secret}, key=len, reverse=True)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _redaction_values(config: AppConfig) -> list[str]:
    # The bot token appears in Bot API URLs, so it is always masked.
    values = [config.webhook_secret, config.telegram.bot_token]
    redact_cfg = config.logging.get("redact", {})
    if redact_cfg.get("enabled", False):
        for name in redact_cfg.get("patterns", settings.SECRET_ENV_VARS):
            values.append(os.getenv(name, ""))
    return values


def _log_handlers(logging_cfg: dict) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if logging_cfg.get("console", True):
        handlers.append(logging.StreamHandler())

    file_cfg = logging_cfg.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", DEFAULT_LOG_PATH)
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                path,
                maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
                backupCount=int(file_cfg.get("backup_count", 5)),
                encoding="utf-8",
            )
        )
    return handlers


def configure_logging(config: AppConfig) -> None:
    """Install console/file handlers from the "logging" section of config.json."""

    logging_cfg = config.logging or {}
    if not logging_cfg.get("enabled", False):
        return

    handlers = _log_handlers(logging_cfg)
    if not handlers:
        return

    formatter = _RedactingFormatter(_redaction_values(config))
    for handler in handlers:
        handler.setFormatter(formatter)

    level = getattr(logging, str(logging_cfg.get("level", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=level, handlers=handlers, force=True)


def _response_for(outcome: Outcome) -> PlainTextResponse:
    if isinstance(outcome, Delivered):
        return PlainTextResponse(f"Sent:\n{outcome.message}")
    if isinstance(outcome, Suppressed):
        return PlainTextResponse(outcome.reason)
    return PlainTextResponse(outcome.reason, status_code=502)


def create_app(config: AppConfig, notifier: Optional[NotifierPort] = None) -> FastAPI:
    """Build the webhook service.

    The notifier is selected from config unless one is injected, which keeps
    the processor independent from delivery details.
    """

    client = None
    if notifier is None:
        method = config.telegram.notification_method
        if method == "telethon":
            client = build_client(config.telegram)
            notifier = TelegramClientNotifier(client)
        elif method == "bot_api":
            notifier = TelegramBotNotifier(
                bot_token=config.telegram.bot_token,
                timeout_seconds=config.telegram.timeout_seconds,
            )
        else:
            raise RuntimeError("notification_method must be 'bot_api' or 'telethon'")
        LOGGER.info("Selected notification method - %s", method)

    processor = EventProcessor(notifier=notifier, chat_id=config.telegram.chat_id)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # The Telethon client needs an explicit login before the first send.
        if client is not None:
            await start_client(client, config.telegram)
        try:
            yield
        finally:
            if client is not None:
                await client.disconnect()

    app = FastAPI(title="octogram", lifespan=lifespan)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.post("/", response_class=PlainTextResponse)
    async def receive_webhook(request: Request) -> PlainTextResponse:
        raw_body = await request.body()
        try:
            event = parse_webhook_request(raw_body, dict(request.headers), config.webhook_secret)
        except DecodeError as exc:
            LOGGER.warning("Rejected webhook delivery: %s", exc)
            status_code = 401 if isinstance(exc, SIGNATURE_ERRORS) else 400
            return PlainTextResponse(str(exc), status_code=status_code)

        try:
            outcome = await processor.handle(event)
        except Exception:
            LOGGER.exception("Error while processing %s event", event.kind)
            raise
        return _response_for(outcome)

    return app


def build_app() -> FastAPI:
    """Factory for `uvicorn --factory app:build_app`."""

    config = settings.load_settings()
    configure_logging(config)
    return create_app(config)


def _serve(host: str, port: int) -> None:
    import uvicorn

    _print_banner()
    app = build_app()
    LOGGER.info("Starting octogram on %s:%s", host, port)
    uvicorn.run(app, host=host, port=port)


def render(kind: str, payload_path: str) -> Outcome:
    """Dispatch a saved payload without delivering it."""

    with open(payload_path, "r", encoding="utf-8") as handle:
        try:
            payload = json.load(handle)
        except json.JSONDecodeError:
            return Failed("error parsing payload")
    if not isinstance(payload, dict):
        return Failed("error parsing payload")
    return dispatch(RawEvent(kind=kind, payload=payload))


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="octogram")
    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="Start the webhook service")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=8080)

    render_parser = subparsers.add_parser(
        "render",
        help="Print the notification a saved webhook payload would produce.",
    )
    render_parser.add_argument("event", help="X-GitHub-Event value, e.g. issues")
    render_parser.add_argument("payload", help="Path to the JSON payload file")

    args = parser.parse_args(argv)
    if args.command == "render":
        outcome = render(args.event, args.payload)
        if isinstance(outcome, Delivered):
            print(outcome.message)
        else:
            print(f"{type(outcome).__name__}: {outcome.reason}")
        return
    if args.command == "serve":
        _serve(args.host, args.port)
        return
    parser.print_help()


if __name__ == "__main__":
    main()
