from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from aws_client_bridge.conversion.dates import (
    as_aware,
    from_epoch_millis,
    parse_datetime,
    promote_date,
    to_strptime,
)
from aws_client_bridge.exceptions import DateParseError


@pytest.mark.parametrize(
    ("pattern", "expected"),
    [
        ("yyyy-MM-dd", "%Y-%m-%d"),
        ("MM-dd-yyyy", "%m-%d-%Y"),
        ("dd/MM/yy HH:mm:ss", "%d/%m/%y %H:%M:%S"),
        ("EEE, d MMM yyyy", "%a, %d %b %Y"),
        ("yyyy-MM-dd'T'HH:mm:ssZ", "%Y-%m-%dT%H:%M:%S%z"),
        ("%Y/%m/%d", "%Y/%m/%d"),
    ],
)
def test_to_strptime(pattern: str, expected: str) -> None:
    assert to_strptime(pattern) == expected


def test_unsupported_letters_are_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported date pattern letter 'G'"):
        to_strptime("G yyyy")


def test_parse_datetime_naive_is_utc() -> None:
    assert parse_datetime("2024-07-04", "yyyy-MM-dd") == datetime(2024, 7, 4, tzinfo=timezone.utc)


def test_parse_datetime_keeps_offset() -> None:
    parsed = parse_datetime("2024-07-04T10:00:00+0200", "yyyy-MM-dd'T'HH:mm:ssZ")
    assert parsed.utcoffset() == timedelta(hours=2)


def test_parse_datetime_failure() -> None:
    with pytest.raises(DateParseError, match="yyyy-MM-dd"):
        parse_datetime("July 4th", "yyyy-MM-dd")


def test_parse_datetime_unsupported_pattern_is_a_parse_error() -> None:
    with pytest.raises(DateParseError):
        parse_datetime("2024", "GGGG")


def test_helpers() -> None:
    assert from_epoch_millis(86_400_000) == datetime(1970, 1, 2, tzinfo=timezone.utc)
    assert as_aware(datetime(2024, 1, 1)).tzinfo is timezone.utc
    aware = datetime(2024, 1, 1, tzinfo=timezone(timedelta(hours=1)))
    assert as_aware(aware) is aware
    assert promote_date(date(2024, 2, 29)) == datetime(2024, 2, 29, tzinfo=timezone.utc)
