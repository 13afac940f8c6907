"""Tests for datetime utilities."""

from datetime import UTC, datetime, timedelta, timezone

from app.utils.datetime_utils import as_utc, utc_now


def test_utc_now_is_aware():
    assert utc_now().tzinfo is UTC


def test_as_utc_naive_taken_as_utc():
    """SQLite returns naive timestamps; they are already UTC."""
    naive = datetime(2026, 10, 18, 12, 0)

    assert as_utc(naive) == datetime(2026, 10, 18, 12, 0, tzinfo=UTC)


def test_as_utc_converts_offset():
    sao_paulo = timezone(timedelta(hours=-3))
    local = datetime(2026, 10, 18, 9, 0, tzinfo=sao_paulo)

    converted = as_utc(local)

    assert converted.hour == 12
    assert converted.tzinfo is UTC


def test_as_utc_none():
    assert as_utc(None) is None
