from datetime import datetime, timedelta, timezone

import pytest

from jobsched.utils import parse_delay_to_seconds, to_iso, utc_now


@pytest.mark.parametrize("text,seconds", [
    ("20s", 20),
    ("5m", 300),
    ("1h30m", 5400),
    ("2d3h", 183600),
    ("  2h  ", 7200),
    ("90M", 5400),
])
def test_parse_delay(text, seconds):
    assert parse_delay_to_seconds(text) == seconds


@pytest.mark.parametrize("text", ["", "abc", "0s", "5x"])
def test_parse_delay_rejects(text):
    with pytest.raises(ValueError):
        parse_delay_to_seconds(text)


def test_to_iso_uses_z_suffix():
    ist = timezone(timedelta(hours=5, minutes=30))
    assert to_iso(datetime(2025, 11, 6, 14, 30, tzinfo=ist)) == "2025-11-06T09:00:00Z"


def test_utc_now_is_aware():
    assert utc_now().tzinfo is not None
