"""Tests for date keys and the DateTextResolver."""
import os
import time
from datetime import date, datetime, timedelta, timezone

import pytest

from workout_log_api.services.date_resolver import (
    DateTextResolver,
    date_key_to_date,
    day_name,
    days_between,
    display_full,
    is_canonical_date,
    parse_embedded_date,
    to_date_key,
)


class TestDateKeys:

    def test_to_date_key_pads_fields(self):
        assert to_date_key(date(2026, 2, 1)) == "2026-02-01"

    def test_to_date_key_uses_datetime_calendar_fields(self):
        late_evening = datetime(2026, 2, 11, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        assert to_date_key(late_evening) == "2026-02-11"

    def test_date_key_to_date(self):
        assert date_key_to_date("2026-02-11") == date(2026, 2, 11)

    @pytest.mark.parametrize("value", ["2026-2-11", "11/02/2026", "", "2026-02-30"])
    def test_date_key_to_date_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            date_key_to_date(value)

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2026-02-11", True),
            ("2024-02-29", True),
            ("2026-02-29", False),
            ("2026-13-01", False),
            ("2026-02-11T00:00:00", False),
            (None, False),
            (20260211, False),
        ],
    )
    def test_is_canonical_date(self, value, expected):
        assert is_canonical_date(value) is expected


class TestParseEmbeddedDate:

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("11 feb 2026, 18:36", "2026-02-11"),
            ("1 ene 2025", "2025-01-01"),
            ("3 DIC 2024, 07:00", "2024-12-03"),
            ("Entreno del 5 sep. 2025", "2025-09-05"),
        ],
    )
    def test_extracts_date(self, text, expected):
        assert parse_embedded_date(text) == expected

    @pytest.mark.parametrize(
        "text",
        [
            None,
            "",
            "sin fecha",
            "11 xyz 2026",
            "11 february 2026",
            "31 feb 2026",
        ],
    )
    def test_returns_none_without_a_real_date(self, text):
        assert parse_embedded_date(text) is None


class TestCalendarHelpers:

    def test_days_between_is_absolute(self):
        assert days_between("2026-02-11", "2026-03-05") == 22
        assert days_between("2026-03-05", "2026-02-11") == 22
        assert days_between("2026-02-11", "2026-02-11") == 0

    def test_days_between_across_leap_day(self):
        assert days_between("2024-02-28", "2024-03-01") == 2

    def test_day_name(self):
        assert day_name("2026-02-11") == "miércoles"
        assert day_name("2026-02-15") == "domingo"

    def test_display_full(self):
        assert display_full("2026-02-11") == "miércoles, 11 de febrero de 2026"


class TestDateTextResolver:

    def test_today_uses_clock(self, resolver):
        assert resolver.resolve_today_key() == "2026-03-05"
        assert resolver.today() == date(2026, 3, 5)

    def test_today_uses_local_fields_of_aware_clock(self):
        # 23:30 at UTC-5 is already the next day in UTC
        clock = lambda: datetime(2026, 2, 11, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        resolver = DateTextResolver(clock=clock)
        assert resolver.resolve_today_key() == "2026-02-11"

    def test_is_today(self, resolver):
        assert resolver.is_today("2026-03-05") is True
        assert resolver.is_today("2026-03-04") is False

    def test_days_ago(self, resolver):
        assert resolver.days_ago(0) == "2026-03-05"
        assert resolver.days_ago(5) == "2026-02-28"
        assert resolver.days_ago(65) == "2025-12-30"

    def test_parse_embedded_date_delegates(self, resolver):
        assert resolver.parse_embedded_date("11 feb 2026, 18:36") == "2026-02-11"

    def test_today_full_info(self, resolver):
        info = resolver.today_full_info()

        assert info["date_key"] == "2026-03-05"
        assert info["day_name"] == "jueves"
        assert info["full_date"] == "Jueves 5 de marzo de 2026"
        assert info["timestamp"].startswith("2026-03-05T10:00")

    def test_named_timezone_clock(self):
        resolver = DateTextResolver(tz_name="UTC")
        assert resolver.now().utcoffset() == timedelta(0)

    def test_unknown_timezone_falls_back_to_host_time(self, caplog):
        resolver = DateTextResolver(tz_name="Mars/Olympus_Mons")

        assert is_canonical_date(resolver.resolve_today_key())
        assert "Mars/Olympus_Mons" in caplog.text


@pytest.mark.skipif(not hasattr(time, "tzset"), reason="time.tzset is not available")
class TestHostTimezones:
    """The host clock must give the local calendar day, west or east of UTC."""

    @pytest.fixture
    def host_tz(self, monkeypatch):
        def _set(tz: str):
            monkeypatch.setenv("TZ", tz)
            time.tzset()

        yield _set
        monkeypatch.undo()
        time.tzset()

    @pytest.mark.parametrize("tz", ["America/Bogota", "Asia/Tokyo", "UTC"])
    def test_today_matches_local_date(self, host_tz, tz):
        host_tz(tz)
        resolver = DateTextResolver()

        expected = time.localtime()
        key = resolver.resolve_today_key()
        assert key == f"{expected.tm_year:04d}-{expected.tm_mon:02d}-{expected.tm_mday:02d}"
        assert os.environ["TZ"] == tz

    @pytest.mark.parametrize("tz", ["America/Bogota", "Pacific/Kiritimati", "Asia/Tokyo"])
    def test_embedded_date_ignores_host_timezone(self, host_tz, tz):
        host_tz(tz)

        assert parse_embedded_date("11 feb 2026, 18:36") == "2026-02-11"
        assert DateTextResolver().parse_embedded_date("1 ene 2026, 00:15") == "2026-01-01"
