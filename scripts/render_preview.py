#!/usr/bin/env python3
"""Render an Alertmanager payload without sending it.

Usage::

    # Render with the English template for Telegram
    python scripts/render_preview.py payload.json

    # Traditional Chinese for Slack, minimal profile
    python scripts/render_preview.py payload.json --language tw --platform slack --profile minimal

    # Show the built-in fallback text instead of a template
    python scripts/render_preview.py payload.json --builtin

    # Check that a template file compiles
    python scripts/render_preview.py --validate templates/alert_template_tw.j2
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

from alert_webhooks.core.config import load_settings
from alert_webhooks.core.logging import setup_logging
from alert_webhooks.notification import AlertManagerData, build_template_data
from alert_webhooks.notification.factory import create_template_engine
from alert_webhooks.templating import TemplateError, format_builtin_message

logger = structlog.get_logger(__name__)


def run(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    setup_logging(settings.logging, level=args.log_level)

    engine = create_template_engine(settings)

    if args.validate:
        try:
            engine.validate_template(args.validate)
        except TemplateError as e:
            print(f"invalid: {e}", file=sys.stderr)
            return 1
        print("ok")
        return 0

    if not args.payload:
        print("payload is required", file=sys.stderr)
        return 2

    try:
        with open(Path(args.payload), encoding="utf-8") as f:
            payload = AlertManagerData.model_validate(json.load(f))
    except (OSError, ValueError, ValidationError) as e:
        logger.error("payload_load_failed", path=args.payload, error=str(e))
        return 2

    options = engine.get_format_options(args.profile or settings.templates.profile)
    data = build_template_data(payload, options).model_copy(update={"platform": args.platform})

    if args.builtin:
        print(format_builtin_message(data, args.language, args.platform))
        return 0

    language = engine.get_default_language(args.language)
    try:
        print(engine.render_for_platform(language, args.platform, data))
    except TemplateError as e:
        print(f"render failed ({language}): {e}", file=sys.stderr)
        return 1
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Preview how an Alertmanager payload renders.",
    )
    parser.add_argument("payload", nargs="?", help="Path to Alertmanager webhook JSON")
    parser.add_argument("--language", default="eng", help="Template language code")
    parser.add_argument(
        "--platform",
        default="telegram",
        choices=["telegram", "slack", "discord"],
        help="Markup target",
    )
    parser.add_argument("--profile", default="", help="Format profile: full or minimal")
    parser.add_argument("--builtin", action="store_true", help="Use the built-in formatter")
    parser.add_argument("--validate", default="", help="Compile a template file and exit")
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

    sys.exit(run(args))


if __name__ == "__main__":
    main()
