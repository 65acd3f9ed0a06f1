"""
Parsing of the TimeWarrior extension input.

TimeWarrior writes a header of ``key: value`` configuration lines, a blank
line, and then a JSON array with one object per logged interval::

    temp.report.start: 20240101T000000Z
    temp.version: 1.4.3

    [{"start": "20240101T090000Z", "end": "20240101T100000Z", "tags": ["work"]}]
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Callable

import pytz

from timeskwire.errors import (
    InvalidTimestampError,
    MalformedBodyError,
    MalformedHeaderError,
    MissingFieldError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%dT%H%M%SZ"
_TIMESTAMP_PATTERN = re.compile(r"\d{8}T\d{6}Z")
_HEADER_SEPARATOR = ": "


def utc_now() -> datetime:
    """Return the current instant as an aware UTC datetime."""
    return datetime.now(pytz.UTC)


@dataclass(frozen=True)
class Interval:
    """
    One logged period of time.

    Parameters
    ----------
    start : datetime
        Aware UTC start instant.
    end : datetime
        Aware UTC end instant. For an open interval this is the instant the
        input was parsed.
    tags : frozenset[str]
        The tags attached to the interval.
    is_open : bool, optional
        Whether logging was still in progress, by default False.
    """

    start: datetime
    end: datetime
    tags: frozenset[str] = field(default_factory=frozenset)
    is_open: bool = False

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


@dataclass(frozen=True)
class ParsedInput:
    """
    Everything read from the extension input.

    Attributes
    ----------
    config : dict[str, str]
        The header block as a mapping.
    intervals : list[Interval]
        Intervals in input order.
    open_ended_at : datetime | None
        The instant substituted for missing ``end`` values, if any were missing.
    """

    config: dict[str, str]
    intervals: list[Interval]
    open_ended_at: datetime | None = None


def parse_timestamp(value: object, field_name: str) -> datetime:
    """
    Parse a ``YYYYMMDDTHHMMSSZ`` timestamp into an aware UTC datetime.

    Parameters
    ----------
    value : object
        The raw JSON value.
    field_name : str
        Name reported in the error when the value is invalid.

    Returns
    -------
    datetime
        The instant, localized to UTC.

    Raises
    ------
    InvalidTimestampError
        If the value is not a string in the expected pattern or not a real date.
    """
    if not isinstance(value, str) or not _TIMESTAMP_PATTERN.fullmatch(value):
        raise InvalidTimestampError(field_name, value)
    try:
        naive = datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError as exc:
        raise InvalidTimestampError(field_name, value) from exc
    return pytz.UTC.localize(naive)


def parse_config(header: str) -> dict[str, str]:
    """
    Parse the configuration header into a mapping.

    Blank lines are skipped. The key ends at the first ``": "``; the value is
    the remainder of the line and may contain further separators.

    Raises
    ------
    MalformedHeaderError
        If a non-empty line has no separator.
    """
    config: dict[str, str] = {}
    for line_number, line in enumerate(header.split("\n"), start=1):
        if not line.strip():
            continue
        key, separator, value = line.partition(_HEADER_SEPARATOR)
        if not separator:
            raise MalformedHeaderError(line, line_number)
        logger.debug("Got key %r with value %r", key, value)
        config[key] = value
    return config


def _parse_tags(record: dict, index: int) -> frozenset[str]:
    if "tags" not in record:
        raise MissingFieldError("tags", index)
    tags = record["tags"]
    if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
        raise MalformedBodyError(f"interval {index}: 'tags' must be a list of strings")
    return frozenset(tags)


def parse_intervals(
    records: Iterable[object], clock: Callable[[], datetime] = utc_now
) -> tuple[list[Interval], datetime | None]:
    """
    Build intervals from decoded JSON records.

    A record without ``end`` is still being logged; it is closed at a single
    ``clock()`` instant shared by every open record of the run.

    Returns
    -------
    tuple[list[Interval], datetime | None]
        The intervals and the substituted end instant, if one was needed.
    """
    intervals = []
    now = None
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise MalformedBodyError(f"interval {index}: expected an object, got {record!r}")
        tags = _parse_tags(record, index)
        if "start" not in record:
            raise MissingFieldError("start", index)
        start = parse_timestamp(record["start"], "start")

        if "end" in record:
            end = parse_timestamp(record["end"], "end")
            is_open = False
        else:
            if now is None:
                now = clock()
                logger.debug("Time logging still in progress, using now (%s) as end", now)
            end = now
            is_open = True

        intervals.append(Interval(start=start, end=end, tags=tags, is_open=is_open))
    return intervals, now


def parse_input(text: str, clock: Callable[[], datetime] = utc_now) -> ParsedInput:
    """
    Split the extension input into configuration and intervals.

    Parameters
    ----------
    text : str
        The full input stream.
    clock : Callable[[], datetime], optional
        Source of "now" for open intervals, by default :func:`utc_now`.

    Returns
    -------
    ParsedInput
        The configuration mapping and the intervals in input order.

    Raises
    ------
    MalformedHeaderError
        If a header line lacks the ``": "`` separator.
    MalformedBodyError
        If the body is missing or is not a JSON array of objects.
    MissingFieldError
        If an interval lacks ``tags`` or ``start``.
    InvalidTimestampError
        If ``start`` or a present ``end`` is not a valid timestamp.
    """
    text = text.replace("\r\n", "\n")
    header, separator, body = text.partition("\n\n")
    if not separator:
        raise MalformedBodyError("no blank line between configuration and interval list")

    config = parse_config(header)

    try:
        records = json.loads(body)
    except json.JSONDecodeError as exc:
        raise MalformedBodyError(f"interval list is not valid JSON: {exc}") from exc
    if not isinstance(records, list):
        raise MalformedBodyError(f"expected a JSON array, got {type(records).__name__}")

    intervals, open_ended_at = parse_intervals(records, clock)
    return ParsedInput(config=config, intervals=intervals, open_ended_at=open_ended_at)
