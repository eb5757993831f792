"""Tests for raw date normalisation and pattern formatting."""
from datetime import date, datetime

import pytest

from concoction.dates import (
    EpochMillis,
    PartialFields,
    classify,
    format_date,
    parse_date,
    to_datetime,
)
from concoction.errors import InvalidDate


class TestClassify:

    def test_string(self):
        assert classify("2020-01-01") == "2020-01-01"

    def test_number_is_epoch_millis(self):
        assert classify(1500000000000) == EpochMillis(1500000000000)

    def test_mapping_aliases(self):
        assert classify({"years": 2020, "M": 3, "date": 15}) == PartialFields(year=2020, month=3, day=15)

    def test_date_instance(self):
        assert classify(date(2020, 3, 15)) == datetime(2020, 3, 15)

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            classify(True)


class TestPartialFields:

    def test_string_month_is_not_shifted(self):
        assert to_datetime(PartialFields(year=2020, month="3", day=15)) == datetime(2020, 3, 15)

    def test_month_name(self):
        assert to_datetime(PartialFields(year=2020, month="March", day=1)) == datetime(2020, 3, 1)
        assert to_datetime(PartialFields(year=2020, month="sep", day=1)) == datetime(2020, 9, 1)

    def test_defaults(self):
        dt = to_datetime(PartialFields(year=2020))
        assert dt == datetime(2020, 1, 1)

    def test_time_fields(self):
        dt = to_datetime(PartialFields(year=2020, month=1, day=2, hour=3, minute=4, second=5, millisecond=6))
        assert dt == datetime(2020, 1, 2, 3, 4, 5, 6000)

    def test_bad_month(self):
        with pytest.raises(ValueError):
            to_datetime(PartialFields(year=2020, month="Smarch", day=1))

    @pytest.mark.parametrize("month", ["3.0", 3.0, "3rd", " 3"])
    def test_leading_integer_month(self, month):
        assert to_datetime(PartialFields(year=2020, month=month, day=1)) == datetime(2020, 3, 1)

    @pytest.mark.parametrize("fields", [
        PartialFields(year=2020, month=3, day=15.9),
        PartialFields(year=2020, month=3, day=1, hour=1.5),
    ])
    def test_fractional_fields_rejected(self, fields):
        with pytest.raises(ValueError):
            to_datetime(fields)

    def test_whole_float_fields(self):
        assert to_datetime(PartialFields(year=2020.0, month=3, day=15.0)) == datetime(2020, 3, 15)


class TestLeadingDefaults:

    def test_only_day_uses_current_year_and_month(self):
        now = datetime.now()
        dt = to_datetime(PartialFields(day=15))
        assert (dt.year, dt.month, dt.day) == (now.year, now.month, 15)

    def test_only_month_uses_current_year(self):
        dt = to_datetime(PartialFields(month=6))
        assert (dt.year, dt.month, dt.day) == (datetime.now().year, 6, 1)

    def test_empty_fields_are_today(self):
        assert to_datetime(PartialFields()).date() == date.today()

    def test_time_only_is_today(self):
        dt = to_datetime(PartialFields(hour=9, minute=30))
        assert dt.date() == date.today()
        assert (dt.hour, dt.minute, dt.second) == (9, 30, 0)

    def test_later_fields_start_at_lowest(self):
        assert to_datetime(PartialFields(year=2020, day=15)) == datetime(2020, 1, 15)


class TestStrings:

    @pytest.mark.parametrize("text, expected", [
        ("2020-03-15", datetime(2020, 3, 15)),
        ("2020-03-15T10:20:30", datetime(2020, 3, 15, 10, 20, 30)),
        ("2020-03-15 10:20", datetime(2020, 3, 15, 10, 20)),
        ("2020/03/15", datetime(2020, 3, 15)),
        ("March 15, 2020", datetime(2020, 3, 15)),
        ("15 Mar 2020", datetime(2020, 3, 15)),
        ("2020-3-5", datetime(2020, 3, 5)),
        ("2020-03", datetime(2020, 3, 1)),
        ("2020", datetime(2020, 1, 1)),
        ("2020-03-15T10:20:30.5", datetime(2020, 3, 15, 10, 20, 30, 500000)),
    ])
    def test_naive_formats(self, text, expected):
        assert to_datetime(text) == expected

    def test_utc_suffix_matches_offset(self):
        assert to_datetime("2020-03-15T10:00:00Z") == to_datetime("2020-03-15T10:00:00+00:00")

    def test_rfc2822(self):
        assert to_datetime("Sun, 15 Mar 2020 10:00:00 +0000") == to_datetime("2020-03-15T10:00:00Z")

    def test_epoch_millis_matches_timestamp(self):
        assert to_datetime(EpochMillis(1584266400000)) == datetime.fromtimestamp(1584266400)


class TestParseDate:

    @pytest.mark.parametrize("value", [None, "", "yesterday", [2020, 1, 1], {"year": 2020, "month": 2, "day": 30}])
    def test_invalid(self, value):
        with pytest.raises(InvalidDate) as exc_info:
            parse_date(value, "posts/x.json")
        assert exc_info.value.key == "posts/x.json"
        assert exc_info.value.value == value


class TestFormat:
    dt = datetime(2020, 3, 5, 14, 7, 9, 45000)

    @pytest.mark.parametrize("pattern, expected", [
        ("YYYY-MM-DD", "2020-03-05"),
        ("YY M D", "20 3 5"),
        ("MMM Do", "Mar 5th"),
        ("ddd, dd, d", "Thu, Th, 4"),
        ("hh:mm A", "02:07 PM"),
        ("H:m:s.SSS", "14:7:9.045"),
        ("DDDD", "065"),
        ("[Posted] MMMM", "Posted March"),
        ("Mo", "3rd"),
    ])
    def test_tokens(self, pattern, expected):
        assert format_date(self.dt, pattern) == expected

    @pytest.mark.parametrize("day, expected", [(1, "1st"), (2, "2nd"), (11, "11th"), (12, "12th"), (22, "22nd"), (23, "23rd")])
    def test_ordinals(self, day, expected):
        assert format_date(datetime(2020, 1, day), "Do") == expected

    def test_midnight_is_twelve(self):
        assert format_date(datetime(2020, 1, 1, 0, 30), "h:mm a") == "12:30 am"

    def test_strftime(self):
        assert format_date(self.dt, "%d.%m.%Y") == "05.03.2020"

    def test_default(self):
        assert format_date(self.dt) == "Thursday, March 5th 2020, 2:07:09 pm"
