"""Unit tests for timecode conversion and time hint extraction."""

import pytest

from utils.errors import MalformedTimecode
from utils.timecode import (
    extract_time_hint,
    format_hint,
    normalize_timecode,
    to_seconds,
    to_timecode,
)


@pytest.mark.unit
class TestToSeconds:
    """Tests for to_seconds()."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("00:00:00", 0),
            ("00:02:35", 155),
            ("01:00:01", 3601),
            ("2:35", 155),
            ("12:05", 725),
            (" 00:00:09 ", 9),
        ],
    )
    def test_accepts_two_and_three_segments(self, text, expected):
        assert to_seconds(text) == expected

    @pytest.mark.parametrize("text", ["", "155", "1:2:3:4", "aa:bb", "00:-1:00", "00:1.5:00", "00:٣:00"])
    def test_rejects_malformed(self, text):
        with pytest.raises(MalformedTimecode):
            to_seconds(text)

    def test_rejects_non_string(self):
        with pytest.raises(MalformedTimecode):
            to_seconds(155)


@pytest.mark.unit
class TestToTimecode:
    """Tests for to_timecode()."""

    def test_zero_pads_all_segments(self):
        assert to_timecode(0) == "00:00:00"
        assert to_timecode(155) == "00:02:35"
        assert to_timecode(3601) == "01:00:01"

    def test_round_trips_through_to_seconds(self):
        for seconds in (0, 59, 60, 3599, 3600, 86399):
            assert to_seconds(to_timecode(seconds)) == seconds

    @pytest.mark.parametrize("value", [-1, 1.5, "10", True])
    def test_rejects_invalid_values(self, value):
        with pytest.raises(MalformedTimecode):
            to_timecode(value)

    def test_normalize_expands_short_form(self):
        assert normalize_timecode("2:35") == "00:02:35"


@pytest.mark.unit
class TestTimeHint:
    """Tests for extract_time_hint() and format_hint()."""

    def test_extracts_minutes_and_seconds(self):
        assert extract_time_hint("find the dog jumping in the pool around 2:35") == 155

    def test_extracts_hours(self):
        assert extract_time_hint("the toast at 1:02:03") == 3723

    def test_first_match_wins(self):
        assert extract_time_hint("somewhere between 4:10 and 5:20") == 250

    def test_no_hint(self):
        assert extract_time_hint("the part where everyone laughs") is None
        assert extract_time_hint("") is None

    def test_format_hint(self):
        assert format_hint(155) == "2:35"
        assert format_hint(5) == "0:05"
