#!/usr/bin/env python3
"""Send an Alertmanager webhook payload through one provider.

Usage::

    # Render with the provider's configured language and send
    python scripts/send_alert.py telegram payload.json

    # Route by level, override the language
    python scripts/send_alert.py slack payload.json --level L1 --language tw

    # Send firing and resolved alerts as separate messages
    python scripts/send_alert.py discord payload.json --separate

    # Probe every enabled provider and exit
    python scripts/send_alert.py --test-connections
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

from alert_webhooks.core.config import load_settings
from alert_webhooks.core.logging import setup_logging
from alert_webhooks.notification import AlertManagerData
from alert_webhooks.notification.factory import create_notification_stack

logger = structlog.get_logger(__name__)


def _load_payload(path: Path) -> AlertManagerData:
    with open(path, encoding="utf-8") as f:
        return AlertManagerData.model_validate(json.load(f))


async def run(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    setup_logging(settings.logging, level=args.log_level)

    stack = create_notification_stack(settings)
    try:
        if args.test_connections:
            results = await stack.manager.test_connections()
            for name, ok in sorted(results.items()):
                print(f"{name}: {'ok' if ok else 'FAILED'}")
            return 0 if results and all(results.values()) else 1

        if not args.provider or not args.payload:
            print("provider and payload are required", file=sys.stderr)
            return 2

        try:
            payload = _load_payload(Path(args.payload))
        except (OSError, ValueError, ValidationError) as e:
            logger.error("payload_load_failed", path=args.payload, error=str(e))
            return 2

        responses = await stack.manager.notify_alert(
            args.provider,
            payload,
            level=args.level,
            channel=args.channel,
            chat_id=args.chat_id,
            template_language=args.language,
            separate_by_status=args.separate,
        )
        for response in responses:
            print(response.model_dump_json())
        return 0 if all(r.success for r in responses) else 1
    finally:
        await stack.close()


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Send an Alertmanager payload to Telegram, Slack or Discord.",
    )
    parser.add_argument("provider", nargs="?", help="telegram, slack or discord")
    parser.add_argument("payload", nargs="?", help="Path to Alertmanager webhook JSON")
    parser.add_argument("--level", default="", help="Level key, e.g. L0 or chat_ids0")
    parser.add_argument("--channel", default="", help="Explicit channel / channel ID")
    parser.add_argument("--chat-id", default="", help="Explicit Telegram chat ID")
    parser.add_argument("--language", default="", help="Template language code")
    parser.add_argument(
        "--separate",
        action="store_true",
        help="Send firing and resolved alerts as separate messages",
    )
    parser.add_argument(
        "--test-connections",
        action="store_true",
        help="Probe every enabled provider and exit",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override: DEBUG, INFO, WARNING, ERROR",
    )
    args = parser.parse_args()

    code = asyncio.run(run(args))
    sys.exit(code)


if __name__ == "__main__":
    main()
