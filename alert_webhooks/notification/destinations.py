"""Destination helpers shared by providers.

Level keys, message pagination and wire-error translation live here so every
provider applies the same rules.
"""

from __future__ import annotations

import re
from typing import NamedTuple

from alert_webhooks.notification.exceptions import DeliveryError, DeliveryErrorCategory

LEVEL_KEY_PREFIX = "chat_ids"

# Room kept free in each chunk for the "(Part i/N)\n" header.
PART_HEADER_RESERVE = 24

# Room kept free in each HTML chunk for closing the tags still open at the cut.
HTML_CLOSE_RESERVE = 32

_TAG_RE = re.compile(r"<(/?)([a-zA-Z][a-zA-Z0-9-]*)[^<>]*>")


def normalize_level(level: str) -> str:
    """Map any accepted spelling of a level to its canonical lookup key.

    ``"L0"``, ``"l0"``, ``"0"`` and ``"chat_ids0"`` all become ``"chat_ids0"``.
    Anything else is lower-cased and stripped.
    """
    key = level.strip().lower()
    if key.isdigit():
        return f"{LEVEL_KEY_PREFIX}{key}"
    if key.startswith("l") and key[1:].isdigit():
        return f"{LEVEL_KEY_PREFIX}{key[1:]}"
    return key


def normalize_channels(channels: dict[str, str]) -> dict[str, str]:
    """Re-key a configured level→destination mapping with normalized levels."""
    return {normalize_level(k): v for k, v in channels.items() if v}


def split_message(text: str, limit: int) -> list[str]:
    """Cut *text* into chunks of at most *limit* characters.

    A chunk ends just after the last newline in its window when that newline
    lies past ``limit // 2``; otherwise it is a hard cut at *limit*. Joining
    the chunks gives back *text* exactly.
    """
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")

    chunks: list[str] = []
    rest = text
    while len(rest) > limit:
        newline = rest.rfind("\n", 0, limit)
        cut = newline + 1 if newline > limit // 2 else limit
        chunks.append(rest[:cut])
        rest = rest[cut:]
    if rest or not chunks:
        chunks.append(rest)
    return chunks


def part_header(index: int, total: int) -> str:
    return f"(Part {index}/{total})\n"


def _safe_cut(text: str, cut: int) -> int:
    """Move *cut* back so it does not land inside a tag or an entity."""
    open_tag = text.rfind("<", 0, cut)
    if open_tag > text.rfind(">", 0, cut) and open_tag > 0:
        cut = open_tag
    entity = text.rfind("&", 0, cut)
    if entity > text.rfind(";", 0, cut) and cut - entity < 10 and entity > 0:
        cut = entity
    return cut


def _track_tags(open_tags: list[tuple[str, str]], body: str) -> list[tuple[str, str]]:
    """Return the (name, opening tag) stack still open after *body*."""
    stack = list(open_tags)
    for match in _TAG_RE.finditer(body):
        closing, name = match.group(1), match.group(2).lower()
        if not closing:
            stack.append((name, match.group(0)))
            continue
        for i in range(len(stack) - 1, -1, -1):
            if stack[i][0] == name:
                del stack[i]
                break
    return stack


def split_html_message(text: str, limit: int) -> list[str]:
    """Cut HTML *text* into chunks of at most *limit* characters.

    Cuts follow :func:`split_message` but never fall inside a tag or entity.
    Tags open at a cut are closed at the end of the chunk and reopened at the
    start of the next one, so every chunk is balanced markup on its own.
    """
    if limit <= HTML_CLOSE_RESERVE:
        raise ValueError(f"limit must exceed {HTML_CLOSE_RESERVE}, got {limit}")

    chunks: list[str] = []
    open_tags: list[tuple[str, str]] = []
    rest = text
    while True:
        prefix = "".join(tag for _, tag in open_tags)
        if len(prefix) + len(rest) <= limit:
            chunks.append(prefix + rest)
            return chunks

        window = max(limit - len(prefix) - HTML_CLOSE_RESERVE, 1)
        newline = rest.rfind("\n", 0, window)
        cut = newline + 1 if newline > window // 2 else _safe_cut(rest, window)
        body = rest[:cut]
        open_tags = _track_tags(open_tags, body)
        suffix = "".join(f"</{name}>" for name, _ in reversed(open_tags))
        chunks.append(prefix + body + suffix)
        rest = rest[cut:]


def _with_headers(chunks: list[str]) -> list[str]:
    total = len(chunks)
    return [part_header(i, total) + chunk for i, chunk in enumerate(chunks, start=1)]


def paginate(text: str, max_length: int) -> list[str]:
    """Split *text* for a destination that accepts *max_length* characters.

    Single-part messages are returned untouched; multi-part ones carry a
    ``(Part i/N)`` header on every part.
    """
    if len(text) <= max_length:
        return [text]
    return _with_headers(split_message(text, max_length - PART_HEADER_RESERVE))


def paginate_html(text: str, max_length: int) -> list[str]:
    """Like :func:`paginate` for HTML markup; see :func:`split_html_message`."""
    if len(text) <= max_length:
        return [text]
    return _with_headers(split_html_message(text, max_length - PART_HEADER_RESERVE))

class ErrorPattern(NamedTuple):
    """A substring of a wire error and the friendlier error it stands for.

    ``message`` may reference ``{destination}``.
    """

    needle: str
    category: DeliveryErrorCategory
    message: str


def translate_error(
    patterns: tuple[ErrorPattern, ...],
    description: str,
    destination: str = "",
) -> DeliveryError:
    """Match *description* against *patterns*; first hit wins.

    Unrecognised descriptions pass through verbatim with no category.
    """
    lowered = description.lower()
    for pattern in patterns:
        if pattern.needle.lower() in lowered:
            return DeliveryError(
                pattern.message.format(destination=destination),
                category=pattern.category,
            )
    return DeliveryError(description)
