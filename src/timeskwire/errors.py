"""Exceptions raised while turning TimeWarrior input into a report."""

from __future__ import annotations


class TimeskwireError(Exception):
    """Base class for every error that aborts a report run."""


class MalformedHeaderError(TimeskwireError):
    """A configuration line is missing its ``": "`` separator or holds an unusable value."""

    def __init__(
        self, line: str, line_number: int | None = None, reason: str = "expected 'key: value'"
    ) -> None:
        where = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{where}{reason}, got {line!r}")
        self.line_number = line_number
        self.line = line


class MalformedBodyError(TimeskwireError):
    """The interval list is not a JSON array of objects."""


class MissingFieldError(TimeskwireError):
    """An interval record lacks a required field."""

    def __init__(self, field: str, index: int) -> None:
        super().__init__(f"interval {index}: missing required field {field!r}")
        self.field = field
        self.index = index


class InvalidTimestampError(TimeskwireError):
    """A timestamp does not follow the ``YYYYMMDDTHHMMSSZ`` pattern."""

    def __init__(self, field: str, value: object) -> None:
        super().__init__(f"{field}: invalid timestamp {value!r}, expected YYYYMMDDTHHMMSSZ")
        self.field = field
        self.value = value


class EmptyAggregateError(TimeskwireError, ZeroDivisionError):
    """Colors cannot be spread over zero tag sets."""


class RenderLayoutError(TimeskwireError):
    """The page cannot be laid out or drawn."""
