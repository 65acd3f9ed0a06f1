"""Unit tests for the page layout."""

from datetime import timedelta

import pytest

from timeskwire.encoding import EncodedGroup
from timeskwire.errors import RenderLayoutError
from timeskwire.layout import (
    TOTAL_COLOR,
    Align,
    Line,
    PageGeometry,
    Rectangle,
    Text,
    format_duration,
    format_tags,
    layout_report,
)

RED = (192, 0, 0)
CYAN = (0, 192, 192)


def measure(text: str, size: float) -> float:
    """Fake text measurement: every character is half the font size wide."""
    return len(text) * size * 0.5


def encoded(tags: list[str], minutes: int, pct: float, color: tuple) -> EncodedGroup:
    """Helper to create an encoded group."""
    return EncodedGroup(frozenset(tags), timedelta(minutes=minutes), pct, color)


def scenario_b() -> list:
    return layout_report(
        "2024-01-01 - 2024-01-07",
        [encoded(["short"], 30, 25.0, RED), encoded(["long"], 90, 75.0, CYAN)],
        timedelta(minutes=120),
        measure,
    )


class TestFormatDuration:
    """Tests for the format_duration function."""

    def test_zero_time(self):
        assert format_duration(timedelta()) == "0:00:00"

    def test_minutes_only(self):
        assert format_duration(timedelta(minutes=30)) == "0:30:00"

    def test_padding(self):
        assert format_duration(timedelta(hours=1, minutes=1, seconds=1)) == "1:01:01"

    def test_large_hours(self):
        assert format_duration(timedelta(hours=125, minutes=4, seconds=9)) == "125:04:09"

    def test_days_count_as_hours(self):
        assert format_duration(timedelta(days=2)) == "48:00:00"

    def test_negative(self):
        assert format_duration(-timedelta(hours=1, minutes=1, seconds=1)) == "-1:01:01"


class TestFormatTags:
    """Tests for the format_tags function."""

    def test_sorted_and_quoted(self):
        assert format_tags({"b", "a"}) == '{"a", "b"}'

    def test_empty(self):
        assert format_tags(set()) == "{}"


class TestLayoutReport:
    """Tests for the layout_report function."""

    def test_title_centered(self):
        instructions = scenario_b()
        title = next(i for i in instructions if isinstance(i, Text) and i.align is Align.CENTER)

        assert title == Text(90.0, 220.0, "2024-01-01 - 2024-01-07", 10.0, Align.CENTER)

    def test_divider_sized_to_title(self):
        instructions = scenario_b()
        divider = next(i for i in instructions if isinstance(i, Line))
        width = measure("2024-01-01 - 2024-01-07", 10.0) + 8.0

        assert divider.x1 == pytest.approx((180.0 - width) / 2)
        assert divider.x2 == pytest.approx((180.0 + width) / 2)
        assert divider.y1 == divider.y2 == 214.0

    def test_heading(self):
        assert Text(10.0, 190.0, "Time spent by tags", 8.0) in scenario_b()

    def test_legend_ascending(self):
        instructions = scenario_b()
        labels = [i for i in instructions if isinstance(i, Text) and i.x == 20.0 and i.text != "TOTAL:"]

        assert [label.text for label in labels] == ['{"short"} (25.00%):', '{"long"} (75.00%):']
        assert [label.y for label in labels] == [180.0, 174.0]

    def test_legend_swatches(self):
        instructions = scenario_b()
        assert Rectangle(10.0, 180.0, 3.0, 3.0, RED) in instructions
        assert Rectangle(10.0, 174.0, 3.0, 3.0, CYAN) in instructions

    def test_legend_durations_right_aligned(self):
        instructions = scenario_b()
        assert Text(170.0, 180.0, "0:30:00", 5.0, Align.RIGHT) in instructions
        assert Text(170.0, 174.0, "1:30:00", 5.0, Align.RIGHT) in instructions

    def test_total_row(self):
        instructions = scenario_b()
        assert Text(20.0, 168.0, "TOTAL:", 5.0, color=TOTAL_COLOR) in instructions
        assert Text(170.0, 168.0, "2:00:00", 5.0, Align.RIGHT, TOTAL_COLOR) in instructions

    def test_bar_chart_descending(self):
        instructions = scenario_b()
        bars = [i for i in instructions if isinstance(i, Rectangle) and i.height == 10.0]

        assert bars == [
            Rectangle(10.0, 153.0, 120.0, 10.0, CYAN),
            Rectangle(130.0, 153.0, 40.0, 10.0, RED),
        ]

    def test_bar_fills_available_width(self):
        groups = [
            encoded(["a"], 7, 0.0, RED),
            encoded(["b"], 13, 0.0, CYAN),
            encoded(["c"], 29, 0.0, RED),
        ]
        instructions = layout_report("t", groups, timedelta(minutes=49), measure)
        bars = [i for i in instructions if isinstance(i, Rectangle) and i.height == 10.0]

        assert sum(bar.width for bar in bars) == pytest.approx(160.0)
        assert bars[-1].x + bars[-1].width == pytest.approx(170.0)

    def test_empty_report(self):
        instructions = layout_report("t", [], timedelta(), measure)

        assert not any(isinstance(i, Rectangle) for i in instructions)
        assert Text(170.0, 180.0, "0:00:00", 5.0, Align.RIGHT, TOTAL_COLOR) in instructions

    def test_zero_total_gives_empty_bars(self):
        instructions = layout_report("t", [encoded(["a"], 0, 0.0, RED)], timedelta(), measure)
        bars = [i for i in instructions if isinstance(i, Rectangle) and i.height == 10.0]
        assert [bar.width for bar in bars] == [0.0]

    def test_custom_geometry(self):
        geometry = PageGeometry(width=300.0, height=400.0)
        instructions = layout_report("t", [], timedelta(), measure, geometry)
        title = next(i for i in instructions if isinstance(i, Text) and i.align is Align.CENTER)
        assert (title.x, title.y) == (150.0, 380.0)

    @pytest.mark.parametrize("width, height", [(0.0, 240.0), (180.0, -1.0)])
    def test_non_positive_dimensions(self, width, height):
        with pytest.raises(RenderLayoutError):
            layout_report("t", [], timedelta(), measure, PageGeometry(width=width, height=height))
