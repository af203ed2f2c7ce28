"""Per-platform markup helpers exposed to templates.

Telegram receives HTML (``parse_mode=HTML``), Slack receives mrkdwn and every
other platform gets standard Markdown.
"""

from __future__ import annotations

import re
from datetime import datetime
from html import escape as html_escape

TELEGRAM = "telegram"
SLACK = "slack"
DISCORD = "discord"

# Alertmanager's zero value for "still firing".
ZERO_TIME = "0001-01-01T00:00:00Z"
UNSET_TIME = "N/A"

# RFC 3339 allows nanoseconds, datetime only takes microseconds.
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def format_time_simple(value: str) -> str:
    """Render an RFC 3339 timestamp as ``YYYY-MM-DD HH:MM:SS``.

    Unparseable input is returned unchanged.
    """
    if not value or value == ZERO_TIME:
        return UNSET_TIME
    try:
        parsed = datetime.fromisoformat(_FRACTION_RE.sub(r"\1", value.replace("Z", "+00:00")))
    except ValueError:
        return value
    return parsed.strftime("%Y-%m-%d %H:%M:%S")


def format_time(platform: str, value: str) -> str:
    return format_text(platform, format_time_simple(value))


def format_text(platform: str, text: str) -> str:
    if platform == TELEGRAM:
        return html_escape(text, quote=False)
    return text


def format_bold(platform: str, text: str) -> str:
    if platform == TELEGRAM:
        return f"<b>{text}</b>"
    if platform == SLACK:
        return f"*{text}*"
    return f"**{text}**"


def format_italic(platform: str, text: str) -> str:
    if platform == TELEGRAM:
        return f"<i>{text}</i>"
    return f"_{text}_"


def format_code(platform: str, text: str) -> str:
    if platform == TELEGRAM:
        return f"<code>{text}</code>"
    return f"`{text}`"


def format_link(platform: str, url: str, text: str = "") -> str:
    """Render a hyperlink; the URL itself is the label when *text* is empty."""
    label = text or url
    if platform == TELEGRAM:
        return f'<a href="{html_escape(url)}">{html_escape(label, quote=False)}</a>'
    if platform == SLACK:
        return f"<{url}|{label}>"
    return f"[{label}]({url})"


def truncate(text: str, limit: int) -> str:
    """Shorten *text* to *limit* characters plus an ellipsis; 0 means no limit."""
    if limit <= 0 or len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


def add(a: int, b: int) -> int:
    return a + b


TEMPLATE_GLOBALS = {
    "format_time": format_time,
    "format_time_simple": format_time_simple,
    "format_text": format_text,
    "format_bold": format_bold,
    "format_italic": format_italic,
    "format_code": format_code,
    "format_link": format_link,
    "truncate": truncate,
    "add": add,
    "enumerate": enumerate,
}
