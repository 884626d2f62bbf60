"""Application entry point for the spamscope service."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import re
from logging.handlers import RotatingFileHandler
from typing import Iterable, Optional

import uvicorn
from art import tprint

import settings
from adapters.email_notifier import EmailAlertNotifier
from adapters.http_api import create_app
from adapters.smtp_transport import SMTPConfig, SMTPMailTransport
from adapters.sqlite_storage import SQLiteHistoryStore
from core.config import HistoryConfig, NotificationConfig
from core.errors import InvalidInput
from core.lexicon import DEFAULT_INDICATORS, build_lexicon
from core.processor import SpamCheckProcessor

NAME = "SPAMSCOPE"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
MASK = "***"


class _RedactingFormatter(logging.Formatter):
    """Formatter that masks configured secret values in every rendered line."""

    def __init__(self, secrets: Iterable[str], fmt: str = LOG_FORMAT, datefmt: Optional[str] = LOG_DATEFMT) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        # Longest first so a secret containing another is masked whole.
        ordered = sorted({secret for secret in secrets if secret}, key=len, reverse=True)
        self._pattern = re.compile("|".join(map(re.escape, ordered))) if ordered else None

    def format(self, record: logging.LogRecord) -> str:
        rendered = super().format(record)
        if self._pattern is None:
            return rendered
        return self._pattern.sub(MASK, rendered)


def _secret_values(redact: dict) -> list[str]:
    """Resolve the env variable names under logging.redact into their values."""

    if not redact.get("enabled", False):
        return []
    return [os.environ[name] for name in redact.get("patterns", []) if os.environ.get(name)]


def _rotating_file_handler(file_cfg: dict) -> logging.Handler:
    path = file_cfg.get("path", "logs/spamscope.log")
    if not os.path.isabs(path):
        path = os.path.join(settings.CONFIG_DIR, path)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    return RotatingFileHandler(
        path,
        maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
        backupCount=int(file_cfg.get("backup_count", 5)),
        encoding="utf-8",
    )


def _configure_logging(config: Optional[dict] = None) -> list[logging.Handler]:
    """Install console/file handlers from the logging block of config.json."""

    config = settings.LOGGING if config is None else config
    if not config or not config.get("enabled", False):
        return []

    level = logging.getLevelName(str(config.get("level", "INFO")).upper())
    if not isinstance(level, int):
        level = logging.INFO

    handlers: list[logging.Handler] = []
    if config.get("console", True):
        handlers.append(logging.StreamHandler())
    if config.get("file", {}).get("enabled", False):
        handlers.append(_rotating_file_handler(config["file"]))
    if not handlers:
        return []

    formatter = _RedactingFormatter(_secret_values(config.get("redact", {})))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers)
    # aiosmtplib logs every SMTP exchange at DEBUG.
    logging.getLogger("aiosmtplib").setLevel(max(level, logging.INFO))
    return handlers


def _build_transport() -> SMTPMailTransport:
    return SMTPMailTransport(
        SMTPConfig(
            host=settings.MAIL_HOST,
            port=settings.MAIL_PORT,
            username=settings.MAIL_USER,
            password=settings.MAIL_PASS,
            sender=settings.MAIL_FROM,
            start_tls=settings.MAIL_STARTTLS,
            use_tls=settings.MAIL_USE_TLS,
        )
    )


def _build_processor(
    transport: SMTPMailTransport,
    background_notifications: bool = True,
) -> tuple[SpamCheckProcessor, SQLiteHistoryStore]:
    storage = SQLiteHistoryStore(settings.DB_PATH, preview_chars=settings.PREVIEW_CHARS)
    storage.init_db()

    # Lexicon and gating are built once here and passed down explicitly.
    lexicon = build_lexicon(settings.LEXICON or DEFAULT_INDICATORS)
    logging.getLogger(__name__).info("%s indicators are loaded", len(lexicon))

    processor = SpamCheckProcessor(
        lexicon=lexicon,
        store=storage,
        notifier=EmailAlertNotifier(transport),
        notification_config=NotificationConfig(
            threshold_percent=settings.THRESHOLD_PERCENT,
            default_recipient=settings.DEFAULT_RECIPIENT,
        ),
        history_config=HistoryConfig(limit=settings.HISTORY_LIMIT),
        background_notifications=background_notifications,
    )
    return processor, storage


def _serve() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting spamscope")

    transport = _build_transport()
    # Readiness is only reported; a broken relay must not keep the API down.
    asyncio.run(transport.verify())

    processor, storage = _build_processor(transport)
    logger.info("History store at %s holds %s records", settings.DB_PATH, storage.count())

    app = create_app(processor, cors_origins=settings.CORS_ORIGINS)
    logger.info("Server running on http://%s:%s", settings.SERVER_HOST, settings.SERVER_PORT)
    uvicorn.run(app, host=settings.SERVER_HOST, port=settings.SERVER_PORT, log_config=None)


def _check(text: str, notify_email: Optional[str]) -> int:
    _configure_logging()
    processor, _ = _build_processor(_build_transport(), background_notifications=False)
    try:
        record = asyncio.run(processor.submit(text, notify_email))
    except InvalidInput as exc:
        print(str(exc))
        return 2

    print(
        json.dumps(
            {
                "id": record.id,
                "result": record.verdict.value,
                "spamProbability": record.probability,
                "matchedKeywords": list(record.matched_indicators),
                "createdAt": record.created_at.isoformat(),
            },
            indent=2,
        )
    )
    return 0


def _history(limit: Optional[int]) -> int:
    _configure_logging()
    processor, _ = _build_processor(_build_transport())
    entries = processor.history(limit)
    if not entries:
        print("No checks recorded yet.")
        return 0

    for entry in entries:
        keywords = ", ".join(entry.matched_indicators) or "none"
        print(
            f"{entry.created_at.astimezone():%Y-%m-%d %H:%M:%S} | {entry.verdict.value:<8} | "
            f"{entry.probability * 100:>3.0f}% | {keywords} | {entry.text}"
        )
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="spamscope")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("serve", help="Start the HTTP API")

    check_parser = subparsers.add_parser("check", help="Classify one message and print the record")
    check_parser.add_argument("text", help="Message text to classify")
    check_parser.add_argument("--notify", dest="notify_email", help="Alert recipient for this check")

    history_parser = subparsers.add_parser("history", help="Show the most recent checks")
    history_parser.add_argument("--limit", type=int, default=None, help="Number of checks to show")

    args = parser.parse_args(argv)
    if args.command == "check":
        return _check(args.text, args.notify_email)
    if args.command == "history":
        return _history(args.limit)
    _serve()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
