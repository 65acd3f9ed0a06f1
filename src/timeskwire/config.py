"""
Report configuration read from TimeWarrior's header block.

TimeWarrior forwards its whole configuration to extensions, including the
``temp.*`` keys describing the current report. Only a handful matter here;
they are pulled out once into :class:`ReportConfig` so the rest of the code
never looks up raw strings.

ENVIRONMENT VARIABLES:
- TIMESKWIRE_REPORT: report kind, overrides ``timeskwire.report.kind``
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, ClassVar

from timeskwire.errors import MalformedHeaderError
from timeskwire.intervals import parse_timestamp

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"on", "yes", "y", "true", "1"})
_FALSE_VALUES = frozenset({"off", "no", "n", "false", "0", ""})


def parse_flag(key: str, value: str) -> bool:
    """Interpret a TimeWarrior boolean setting (``on``/``off``, ``yes``/``no``...)."""
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise MalformedHeaderError(f"{key}: {value}", reason="expected on/off, yes/no, true/false or 1/0")


@dataclass(frozen=True)
class ReportConfig:
    """
    Typed view of the configuration mapping.

    Attributes
    ----------
    report_start : datetime
        Start of the report range (aware, UTC).
    report_end : datetime
        End of the report range (aware, UTC).
    host_version : str
        TimeWarrior version, ``"unknown"`` if not reported.
    report_kind : str
        Identifier of the report to render.
    filename : str
        Path of the PDF to write.
    clip_to_range : bool
        Whether intervals are clipped to the report range before aggregation.
    """

    START_KEY: ClassVar[str] = "temp.report.start"
    END_KEY: ClassVar[str] = "temp.report.end"
    VERSION_KEY: ClassVar[str] = "temp.version"
    KIND_KEY: ClassVar[str] = "timeskwire.report.kind"
    FILENAME_KEY: ClassVar[str] = "timeskwire.report.filename"
    CLIP_KEY: ClassVar[str] = "timeskwire.report.clip"
    KIND_ENV_VAR: ClassVar[str] = "TIMESKWIRE_REPORT"

    DEFAULT_VERSION: ClassVar[str] = "unknown"
    DEFAULT_KIND: ClassVar[str] = "default"
    DEFAULT_FILENAME: ClassVar[str] = "report.pdf"

    report_start: datetime
    report_end: datetime
    host_version: str = DEFAULT_VERSION
    report_kind: str = DEFAULT_KIND
    filename: str = DEFAULT_FILENAME
    clip_to_range: bool = False

    @classmethod
    def from_mapping(
        cls,
        config: Mapping[str, str],
        now: datetime,
        first_start: datetime | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> ReportConfig:
        """
        Build the configuration from the header mapping.

        Parameters
        ----------
        config : Mapping[str, str]
            Header key/value pairs.
        now : datetime
            Substitute for an empty or missing report end.
        first_start : datetime | None, optional
            Substitute for an empty or missing report start; ``now`` is used
            when this is None as well.
        environ : Mapping[str, str] | None, optional
            Environment to read overrides from, by default ``os.environ``.

        Raises
        ------
        InvalidTimestampError
            If a non-empty report boundary is not a valid timestamp.
        """
        environ = os.environ if environ is None else environ

        raw_start = config.get(cls.START_KEY, "")
        if raw_start:
            report_start = parse_timestamp(raw_start, cls.START_KEY)
        else:
            report_start = first_start if first_start is not None else now

        raw_end = config.get(cls.END_KEY, "")
        report_end = parse_timestamp(raw_end, cls.END_KEY) if raw_end else now

        report_kind = environ.get(cls.KIND_ENV_VAR) or config.get(cls.KIND_KEY)
        if not report_kind:
            logger.warning('No report choice made, using "%s"', cls.DEFAULT_KIND)
            report_kind = cls.DEFAULT_KIND

        filename = config.get(cls.FILENAME_KEY)
        if not filename:
            logger.info("No report filename defined, falling back to %s", cls.DEFAULT_FILENAME)
            filename = cls.DEFAULT_FILENAME

        return cls(
            report_start=report_start,
            report_end=report_end,
            host_version=config.get(cls.VERSION_KEY) or cls.DEFAULT_VERSION,
            report_kind=report_kind,
            filename=filename,
            clip_to_range=parse_flag(cls.CLIP_KEY, config.get(cls.CLIP_KEY, "")),
        )
