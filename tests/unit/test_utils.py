"""Tests for the formatting and ffmpeg helpers."""

from datetime import timedelta

import pytest

from mkv_cruncher.utils.ffmpeg_utils import parse_progress_line
from mkv_cruncher.utils.format_utils import (
    format_elapsed,
    format_minutes_seconds,
    format_size,
)


class TestParseProgressLine:
    @pytest.mark.parametrize(
        "line, expected",
        [
            ("out_time_ms=1500000\n", ("out_time_ms", "1500000")),
            ("speed= 1.9x\n", ("speed", "1.9x")),
            ("progress=end", ("progress", "end")),
            ("bitrate=1234.5kbits/s\n", None),
            ("garbage\n", None),
            ("", None),
        ],
    )
    def test_lines(self, line, expected) -> None:
        assert parse_progress_line(line) == expected


class TestFormatting:
    def test_format_elapsed(self) -> None:
        assert format_elapsed(timedelta(seconds=7261)) == "02:01:01"
        assert format_elapsed(timedelta(days=1, seconds=5)) == "24:00:05"

    def test_format_minutes_seconds(self) -> None:
        assert format_minutes_seconds(timedelta(minutes=83, seconds=5)) == "83m5s"

    @pytest.mark.parametrize(
        "size, expected",
        [
            (0, "0 B"),
            (-5, "0 B"),
            (512, "512 B"),
            (1536, "1.50 KB"),
            (2 * 1024 * 1024, "2 MB"),
            (1024 ** 6, "1024 PB"),
        ],
    )
    def test_format_size(self, size, expected) -> None:
        assert format_size(size) == expected
