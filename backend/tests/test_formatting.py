import csv
import io
import math

import pytest

from lyriccoach.core.formatting import escape_csv_field, format_duration, format_fixed, format_percent


@pytest.mark.parametrize("seconds, expected", [
    (195.0, "3:15"),
    (120.0, "2:00"),
    (5, "0:05"),
    (61.4, "1:01"),
    (0, "0:00"),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


@pytest.mark.parametrize("seconds", [None, math.nan, "195"])
def test_format_duration_missing(seconds):
    assert format_duration(seconds) == ""


def test_format_duration_keeps_unrounded_minute():
    """Just under a minute boundary the seconds round to 60 without carrying."""
    assert format_duration(239.6) == "3:60"


def test_format_percent():
    assert format_percent(0.523) == "52%"
    assert format_percent(0.6) == "60%"
    assert format_percent(1) == "100%"
    assert format_percent(0) == "0%"


@pytest.mark.parametrize("ratio", [None, math.nan])
def test_format_percent_missing(ratio):
    assert format_percent(ratio) == "n/a"


def test_format_fixed_precision():
    assert format_fixed(195.0, 3) == "195.000"
    assert format_fixed(1.2, 4) == "1.2000"
    assert format_fixed(2.0, 2) == "2.00"
    assert format_fixed(-38.5, 1) == "-38.5"


def test_format_fixed_rounds_exact_binary_value():
    """1.005 is stored just below 1.005; 0.125 is an exact half."""
    assert format_fixed(1.005, 2) == "1.00"
    assert format_fixed(0.125, 2) == "0.13"
    assert format_fixed(2.5, 0) == "3"


def test_format_fixed_negative_zero():
    assert format_fixed(-0.0, 2) == "0.00"


def test_format_fixed_missing_depends_on_context():
    assert format_fixed(None, 2) == "n/a"
    assert format_fixed(None, 4, missing="") == ""
    assert format_fixed(math.nan, 4, missing="") == ""


@pytest.mark.parametrize("value, expected", [
    (None, ""),
    ("plain", "plain"),
    (3, "3"),
    ("a,b", '"a,b"'),
    ('say "hi"', '"say ""hi"""'),
    ("two\nlines", '"two\nlines"'),
    ("", ""),
])
def test_escape_csv_field(value, expected):
    assert escape_csv_field(value) == expected


def test_escape_csv_field_parses_back():
    original = 'Gaps, "breaths"\nand a bridge'
    escaped = escape_csv_field(original)

    assert escaped.startswith('"') and escaped.endswith('"')
    row = next(csv.reader(io.StringIO(escaped, newline="")))
    assert row == [original]


def test_very_large_values_still_render():
    """Values past the default Decimal precision or the float range once scaled."""
    assert format_fixed(1e25, 4) == "10000000000000000905969664.0000"
    assert format_fixed(1.7e308, 2, missing="").endswith(".00")
    assert format_fixed(10**40, 3) == "1" + "0" * 40 + ".000"

    percent = format_percent(1e307)
    assert percent.endswith("%")
    assert percent[:-1].isdigit() and len(percent) > 300

    assert ":" in format_duration(1e300)
    assert format_duration(10**30).startswith(str(10**30 // 60) + ":")
