"""
Visual encoding of aggregated tag sets.

Each tag set gets its share of the total time and a color. Colors are spread
evenly around the hue circle, starting at red for the smallest group.
"""

from __future__ import annotations

import colorsys
import math
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

from timeskwire.errors import EmptyAggregateError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from timeskwire.aggregation import TagSetAggregate

SATURATION = 1.0
VALUE = 0.75

Color = tuple[int, int, int]


@dataclass(frozen=True)
class EncodedGroup:
    """
    A tag set ready to be drawn.

    Parameters
    ----------
    tags : frozenset[str]
        The tag set.
    duration : timedelta
        Time logged with exactly this tag set.
    percentage : float
        Share of the total time, 0 to 100.
    color : tuple[int, int, int]
        RGB color, 0 to 255 per channel.
    """

    tags: frozenset[str]
    duration: timedelta
    percentage: float
    color: Color


def order_aggregates(groups: Sequence[TagSetAggregate]) -> list[TagSetAggregate]:
    """Sort groups by ascending duration, keeping input order between equal durations."""
    return sorted(groups, key=lambda group: group.total)


def _channel(component: float) -> int:
    return min(int(component * 256), 255)


def hue_color(radians: float) -> Color:
    """
    Convert a hue angle to an RGB triple at full saturation and 0.75 value.

    Channels are scaled by 256 and truncated, then clamped to 255.
    """
    hue = (radians / (2 * math.pi)) % 1.0
    red, green, blue = colorsys.hsv_to_rgb(hue, SATURATION, VALUE)
    return (_channel(red), _channel(green), _channel(blue))


def percentage(duration: timedelta, total: timedelta) -> float:
    """Return ``duration`` as a percentage of ``total``; 0.0 when ``total`` is empty."""
    if not total:
        return 0.0
    return duration / total * 100


def encode(total: timedelta, groups: Sequence[TagSetAggregate]) -> list[EncodedGroup]:
    """
    Order the groups and attach a percentage and a color to each.

    Parameters
    ----------
    total : timedelta
        Total time logged.
    groups : Sequence[TagSetAggregate]
        Aggregated tag sets, in any order.

    Returns
    -------
    list[EncodedGroup]
        The groups in ascending duration order.

    Raises
    ------
    EmptyAggregateError
        If there are no groups to spread hues over.
    """
    if not groups:
        raise EmptyAggregateError("cannot assign colors to zero tag sets")

    increment = 2 * math.pi / len(groups)
    return [
        EncodedGroup(
            tags=group.tags,
            duration=group.total,
            percentage=percentage(group.total, total),
            color=hue_color(index * increment),
        )
        for index, group in enumerate(order_aggregates(groups))
    ]
