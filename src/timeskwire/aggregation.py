"""Grouping of intervals by tag set."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from timeskwire.intervals import Interval

logger = logging.getLogger(__name__)


def tag_key(tags: Iterable[str]) -> tuple[str, ...]:
    """Return the canonical grouping key of a tag collection: its sorted distinct tags."""
    return tuple(sorted(set(tags)))


@dataclass(frozen=True)
class TagSetAggregate:
    """
    Summed duration of every interval carrying exactly one tag set.

    Parameters
    ----------
    tags : frozenset[str]
        The tag set.
    total : timedelta
        Accumulated duration.
    """

    tags: frozenset[str]
    total: timedelta


@dataclass(frozen=True)
class Aggregation:
    """
    Result of :func:`aggregate`.

    Attributes
    ----------
    total : timedelta
        Total time logged.
    groups : list[TagSetAggregate]
        One entry per distinct tag set, in the order the tag sets were first seen.
    """

    total: timedelta
    groups: list[TagSetAggregate] = field(default_factory=list)


def clip_interval(
    interval: Interval, report_start: datetime, report_end: datetime
) -> timedelta | None:
    """
    Return the part of the interval's duration inside the report range.

    Returns None when the interval does not overlap the range at all. A
    zero-length interval inside the range, boundaries included, is kept.
    """
    if interval.end < report_start or interval.start > report_end:
        return None
    overlap = min(interval.end, report_end) - max(interval.start, report_start)
    # Only touches the range at one boundary.
    if not overlap and interval.duration:
        return None
    return overlap


def aggregate(
    intervals: Iterable[Interval],
    report_start: datetime | None = None,
    report_end: datetime | None = None,
    clip: bool = False,
) -> Aggregation:
    """
    Sum interval durations per distinct tag set.

    Two intervals land in the same group when their tag sets are equal,
    whatever the order or repetition of tags in the input.

    Parameters
    ----------
    intervals : Iterable[Interval]
        The logged intervals.
    report_start, report_end : datetime | None, optional
        Report range. Only used when ``clip`` is set.
    clip : bool, optional
        Drop intervals outside the report range and trim those crossing its
        boundaries, by default False.

    Returns
    -------
    Aggregation
        The grand total and the per-tag-set totals.
    """
    if clip and (report_start is None or report_end is None):
        raise ValueError("clipping requires both report_start and report_end")

    total = timedelta()
    totals: dict[tuple[str, ...], timedelta] = {}
    tag_sets: dict[tuple[str, ...], frozenset[str]] = {}

    for interval in intervals:
        if clip:
            duration = clip_interval(interval, report_start, report_end)
            if duration is None:
                logger.debug("Skipping interval outside report range: %s", interval)
                continue
        else:
            duration = interval.duration

        total += duration
        key = tag_key(interval.tags)
        if key in totals:
            totals[key] += duration
        else:
            totals[key] = duration
            tag_sets[key] = frozenset(key)

    groups = [TagSetAggregate(tags=tag_sets[key], total=duration) for key, duration in totals.items()]
    logger.debug("Aggregated %d tag sets, total %s", len(groups), total)
    return Aggregation(total=total, groups=groups)
