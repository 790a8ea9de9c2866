"""Date helpers for string and epoch coercion."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from functools import lru_cache

from aws_client_bridge.exceptions import DateParseError

_PATTERN_TOKEN = re.compile(r"'[^']*'|([A-Za-z])\1*")


def _convert_letter(letter: str, count: int) -> str:
    if letter == "y":
        return "%y" if count == 2 else "%Y"
    if letter == "M":
        if count >= 4:
            return "%B"
        return "%b" if count == 3 else "%m"
    if letter == "E":
        return "%A" if count >= 4 else "%a"
    simple = {
        "d": "%d",
        "D": "%j",
        "H": "%H",
        "h": "%I",
        "m": "%M",
        "s": "%S",
        "S": "%f",
        "a": "%p",
        "z": "%Z",
        "Z": "%z",
        "X": "%z",
    }
    if letter not in simple:
        raise ValueError(f"Unsupported date pattern letter '{letter}'")
    return simple[letter]


@lru_cache(maxsize=32)
def to_strptime(pattern: str) -> str:
    """Translate a ``SimpleDateFormat`` style pattern into a ``strptime`` one.

    Patterns that already contain ``%`` directives are returned unchanged.
    """
    if "%" in pattern:
        return pattern

    parts: list[str] = []
    pos = 0
    for match in _PATTERN_TOKEN.finditer(pattern):
        parts.append(pattern[pos : match.start()])
        token = match.group(0)
        if token.startswith("'"):
            literal = token[1:-1]
            parts.append(literal.replace("%", "%%") if literal else "'")
        else:
            parts.append(_convert_letter(token[0], len(token)))
        pos = match.end()
    parts.append(pattern[pos:])
    return "".join(parts)


def parse_datetime(value: object, pattern: str) -> datetime:
    """Parse ``str(value)`` with ``pattern``; naive results are taken as UTC."""
    text = str(value).strip()
    try:
        parsed = datetime.strptime(text, to_strptime(pattern))
    except ValueError as exc:
        raise DateParseError(value, pattern) from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def from_epoch_millis(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def promote_date(value: date) -> datetime:
    """Midnight UTC for a bare ``date``."""
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
