"""Tests for shared utility functions."""

from datetime import date
from decimal import Decimal

import pytest

from scheduler.utils import (
    format_duration,
    format_price,
    format_time_12h,
    format_time_of_day,
    normalize_phone,
    parse_date,
    parse_time_of_day,
    slugify,
    weekday_index,
)


class TestParseTimeOfDay:
    def test_morning(self):
        assert parse_time_of_day("09:30") == 570

    def test_single_digit_hour(self):
        assert parse_time_of_day("9:05") == 545

    def test_strips_whitespace(self):
        assert parse_time_of_day(" 13:00 ") == 780

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            parse_time_of_day("24:00")
        with pytest.raises(ValueError):
            parse_time_of_day("12:60")

    def test_malformed(self):
        with pytest.raises(ValueError):
            parse_time_of_day("noon")


class TestFormatting:
    def test_time_of_day(self):
        assert format_time_of_day(0) == "00:00"
        assert format_time_of_day(1050) == "17:30"
        assert format_time_of_day(1440) == "24:00"

    def test_time_of_day_out_of_range(self):
        with pytest.raises(ValueError):
            format_time_of_day(1441)

    def test_time_12h(self):
        assert format_time_12h(0) == "12:00 AM"
        assert format_time_12h(570) == "9:30 AM"
        assert format_time_12h(720) == "12:00 PM"
        assert format_time_12h(810) == "1:30 PM"

    def test_price(self):
        assert format_price(Decimal("30")) == "$30.00"
        assert format_price(Decimal("1250.5")) == "$1,250.50"

    def test_duration(self):
        assert format_duration(5) == "5 min"
        assert format_duration(60) == "1 hr"
        assert format_duration(75) == "1 hr 15 min"


class TestWeekdayIndex:
    def test_sunday_is_zero(self):
        assert weekday_index(date(2030, 1, 13)) == 0

    def test_tuesday(self):
        assert weekday_index(date(2030, 1, 8)) == 2

    def test_saturday_is_six(self):
        assert weekday_index(date(2030, 1, 12)) == 6


class TestParseDate:
    def test_iso_string(self):
        assert parse_date("2030-01-08") == date(2030, 1, 8)

    def test_date_passthrough(self):
        assert parse_date(date(2030, 1, 8)) == date(2030, 1, 8)

    def test_bad_string(self):
        with pytest.raises(ValueError, match="YYYY-MM-DD"):
            parse_date("01/08/2030")


class TestNormalizePhone:
    def test_strips_spaces(self):
        assert normalize_phone("334 555 0142") == "3345550142"

    def test_strips_parentheses_and_dashes(self):
        assert normalize_phone("(334) 555-0142") == "3345550142"

    def test_preserves_leading_plus(self):
        assert normalize_phone("+1 714-809-9692") == "+17148099692"

    def test_strips_whitespace(self):
        assert normalize_phone("  3345550142  ") == "3345550142"


class TestSlugify:
    def test_ampersand(self):
        assert slugify("Haircut & Beard") == "haircut-beard"

    def test_plain(self):
        assert slugify("Skin Fade") == "skin-fade"
