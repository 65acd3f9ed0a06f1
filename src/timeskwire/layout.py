"""
Page layout of the default report.

The layout is computed as a flat list of drawing instructions in PDF
coordinates (origin at the bottom-left corner, y growing upwards). Nothing
here touches a file; a render sink replays the instructions.

Page structure, top to bottom:

- the report range as a centered title, underlined
- a "Time spent by tags" heading
- one legend row per tag set, smallest first
- the total row
- a stacked bar, largest tag set first
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Callable, Union

from timeskwire.errors import RenderLayoutError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from timeskwire.encoding import EncodedGroup

Color = tuple[int, int, int]
TextMeasure = Callable[[str, float], float]

BLACK: Color = (0, 0, 0)
TOTAL_COLOR: Color = (150, 0, 0)


def format_duration(duration: timedelta) -> str:
    """
    Format a timedelta as 'H:MM:SS' (e.g., '0:30:00' or '125:04:09').

    Parameters
    ----------
    duration : timedelta
        The time duration to format.

    Returns
    -------
    str
        Unpadded hours, zero-padded minutes and seconds, with a leading '-'
        for negative durations.
    """
    total_seconds = int(duration.total_seconds())
    sign = "-" if total_seconds < 0 else ""
    hours, remainder = divmod(abs(total_seconds), 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{sign}{hours}:{minutes:02d}:{seconds:02d}"


def format_tags(tags: Iterable[str]) -> str:
    """Format a tag set as ``{"a", "b"}`` with the tags sorted."""
    return "{" + ", ".join(f'"{tag}"' for tag in sorted(tags)) + "}"


class Align(enum.Enum):
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float = 0.5
    color: Color = BLACK


@dataclass(frozen=True)
class Rectangle:
    """A filled rectangle anchored at its bottom-left corner."""

    x: float
    y: float
    width: float
    height: float
    color: Color = BLACK


@dataclass(frozen=True)
class Text:
    """A single line of text; ``x`` is the left edge, right edge or center depending on ``align``."""

    x: float
    y: float
    text: str
    size: float
    align: Align = Align.LEFT
    color: Color = BLACK


Instruction = Union[Line, Rectangle, Text]


@dataclass(frozen=True)
class PageGeometry:
    """
    Fixed measurements of the default report, in points.

    The defaults give a 180x240 page.
    """

    width: float = 180.0
    height: float = 240.0
    margin: float = 10.0
    title_offset: float = 20.0
    title_size: float = 10.0
    title_padding: float = 8.0
    divider_gap: float = 6.0
    divider_width: float = 0.5
    heading: str = "Time spent by tags"
    heading_offset: float = 30.0
    heading_size: float = 8.0
    legend_offset: float = 40.0
    row_spacing: float = 6.0
    row_size: float = 5.0
    swatch_size: float = 3.0
    bar_gap: float = 15.0
    bar_height: float = 10.0


def _title(geometry: PageGeometry, title: str, measure: TextMeasure) -> list[Instruction]:
    title_y = geometry.height - geometry.title_offset
    divider_width = measure(title, geometry.title_size) + geometry.title_padding
    divider_y = title_y - geometry.divider_gap
    return [
        Line(
            (geometry.width - divider_width) / 2,
            divider_y,
            (geometry.width + divider_width) / 2,
            divider_y,
            width=geometry.divider_width,
        ),
        Text(geometry.width / 2, title_y, title, geometry.title_size, Align.CENTER),
    ]


def _legend_row(geometry: PageGeometry, group: EncodedGroup, y: float) -> list[Instruction]:
    label = f"{format_tags(group.tags)} ({group.percentage:.2f}%):"
    return [
        Rectangle(geometry.margin, y, geometry.swatch_size, geometry.swatch_size, group.color),
        Text(geometry.margin * 2, y, label, geometry.row_size),
        Text(
            geometry.width - geometry.margin,
            y,
            format_duration(group.duration),
            geometry.row_size,
            Align.RIGHT,
        ),
    ]


def _bar_chart(
    geometry: PageGeometry, groups: Sequence[EncodedGroup], total: timedelta, y: float
) -> list[Instruction]:
    bar_width = geometry.width - 2 * geometry.margin
    x = geometry.margin
    segments: list[Instruction] = []
    for group in reversed(groups):
        width = bar_width * (group.duration / total) if total else 0.0
        segments.append(Rectangle(x, y, width, geometry.bar_height, group.color))
        x += width
    return segments


def layout_report(
    title: str,
    groups: Sequence[EncodedGroup],
    total: timedelta,
    measure: TextMeasure,
    geometry: PageGeometry | None = None,
) -> list[Instruction]:
    """
    Compute every drawing instruction of the report page.

    Parameters
    ----------
    title : str
        Title centered at the top of the page.
    groups : Sequence[EncodedGroup]
        Encoded tag sets in ascending duration order. The legend follows this
        order; the bar chart runs in the reverse order.
    total : timedelta
        Total time logged.
    measure : Callable[[str, float], float]
        Width of a string at a font size, supplied by the render sink.
    geometry : PageGeometry | None, optional
        Page measurements, by default :class:`PageGeometry()`.

    Returns
    -------
    list[Instruction]
        Instructions in drawing order.

    Raises
    ------
    RenderLayoutError
        If the page width or height is not positive.
    """
    geometry = geometry or PageGeometry()
    if geometry.width <= 0 or geometry.height <= 0:
        raise RenderLayoutError(
            f"page dimensions must be positive, got {geometry.width}x{geometry.height}"
        )

    instructions = _title(geometry, title, measure)

    title_y = geometry.height - geometry.title_offset
    instructions.append(
        Text(geometry.margin, title_y - geometry.heading_offset, geometry.heading, geometry.heading_size)
    )

    legend_y = title_y - geometry.legend_offset
    offset = 0.0
    for group in groups:
        instructions.extend(_legend_row(geometry, group, legend_y - offset))
        offset += geometry.row_spacing

    total_y = legend_y - offset
    instructions.append(Text(geometry.margin * 2, total_y, "TOTAL:", geometry.row_size, color=TOTAL_COLOR))
    instructions.append(
        Text(
            geometry.width - geometry.margin,
            total_y,
            format_duration(total),
            geometry.row_size,
            Align.RIGHT,
            TOTAL_COLOR,
        )
    )

    bar_y = legend_y - (offset + geometry.bar_gap)
    instructions.extend(_bar_chart(geometry, groups, total, bar_y))
    return instructions
