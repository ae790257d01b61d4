from datetime import datetime, timezone

from devkit.timezone import now_utc, parse_timestamp


def test_parse_timestamp_accepts_zulu_suffix() -> None:
    parsed = parse_timestamp("2026-03-01T10:00:00Z")
    assert parsed == datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc)


def test_parse_timestamp_treats_naive_values_as_utc() -> None:
    parsed = parse_timestamp("2026-03-01T10:00:00")
    assert parsed is not None
    assert parsed.tzinfo == timezone.utc


def test_parse_timestamp_handles_empty_values() -> None:
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None


def test_now_utc_is_timezone_aware() -> None:
    assert now_utc().tzinfo is not None
