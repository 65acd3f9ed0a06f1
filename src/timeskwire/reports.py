"""
Report kinds and the default tag-set report.

Every report kind is a member of :class:`ReportKind` and registers the class
that renders it with :func:`register`. The command line only ever calls
:func:`report_for`.
"""

from __future__ import annotations

import enum
import logging
from datetime import datetime
from typing import TYPE_CHECKING, Callable, TextIO

from timeskwire import __version__
from timeskwire.aggregation import aggregate
from timeskwire.canvas import PdfCanvas
from timeskwire.encoding import encode
from timeskwire.layout import PageGeometry, format_duration, format_tags, layout_report

if TYPE_CHECKING:
    from collections.abc import Sequence

    from timeskwire.config import ReportConfig
    from timeskwire.encoding import EncodedGroup
    from timeskwire.intervals import Interval

logger = logging.getLogger(__name__)

CanvasFactory = Callable[[str, tuple[float, float]], PdfCanvas]


class ReportKind(enum.Enum):
    DEFAULT = "default"

    @classmethod
    def parse(cls, name: str) -> ReportKind:
        """Look up a kind by name, falling back to the default report for unknown names."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            logger.warning('Unknown report kind "%s", using "%s"', name, cls.DEFAULT.value)
            return cls.DEFAULT


REPORTS: dict[ReportKind, type] = {}


def register(kind: ReportKind):
    """Class decorator registering the renderer of a report kind."""

    def decorator(report_class: type) -> type:
        REPORTS[kind] = report_class
        return report_class

    return decorator


def report_for(kind: ReportKind) -> type:
    return REPORTS[kind]


def format_title(start: datetime, end: datetime) -> str:
    """Format the report range in local time, e.g. '2024-01-01 - 2024-01-07'."""
    return f"{start.astimezone():%Y-%m-%d} - {end.astimezone():%Y-%m-%d}"


class TagSetReportModel:
    """
    Model containing the tag set summary.

    Parameters
    ----------
    config : ReportConfig
        Report configuration.
    intervals : Sequence[Interval]
        Intervals to summarize.

    Attributes
    ----------
    total : timedelta
        Total time logged.
    groups : list[EncodedGroup]
        Encoded tag sets in ascending duration order, empty when nothing was logged.
    title : str
        The report range, formatted for the page title.
    """

    def __init__(self, config: ReportConfig, intervals: Sequence[Interval]) -> None:
        self.config = config
        aggregation = aggregate(
            intervals,
            report_start=config.report_start,
            report_end=config.report_end,
            clip=config.clip_to_range,
        )
        self.total = aggregation.total
        # Hues are undefined for zero tag sets.
        self.groups: list[EncodedGroup] = (
            encode(aggregation.total, aggregation.groups) if aggregation.groups else []
        )
        self.title = format_title(config.report_start, config.report_end)


class TagSetReportView:
    """
    Console progress output for the tag set report.

    Parameters
    ----------
    model : TagSetReportModel
        The model containing the summary.
    """

    def __init__(self, model: TagSetReportModel) -> None:
        self._model = model

    def render(self, output: TextIO) -> None:
        """
        Print the report range, per tag set totals and the grand total.

        Parameters
        ----------
        output : TextIO
            Stream to write to.
        """
        config = self._model.config
        print(f"Report start:\t{_rfc2822(config.report_start)}", file=output)
        print(f"Report end:\t{_rfc2822(config.report_end)}", file=output)
        print(f"Total time logged: {format_duration(self._model.total)}", file=output)
        print(f"Unique tag set count: {len(self._model.groups)}", file=output)
        for group in self._model.groups:
            print(
                f"{format_tags(group.tags)}: {format_duration(group.duration)} "
                f"({group.percentage:.2f}%)",
                file=output,
            )


def _rfc2822(instant: datetime) -> str:
    return instant.astimezone().strftime("%a, %d %b %Y %H:%M:%S %z")


@register(ReportKind.DEFAULT)
class DefaultReport:
    """
    Tag set summary with a legend and a stacked bar chart on a single page.

    Parameters
    ----------
    config : ReportConfig
        Report configuration.
    intervals : Sequence[Interval]
        Intervals to summarize.
    output : TextIO
        Stream receiving progress lines.
    canvas_factory : Callable, optional
        Builds the render sink from a filename and a page size, by default
        :class:`PdfCanvas`.
    geometry : PageGeometry | None, optional
        Page measurements, by default :class:`PageGeometry()`.
    """

    def __init__(
        self,
        config: ReportConfig,
        intervals: Sequence[Interval],
        output: TextIO,
        canvas_factory: CanvasFactory = PdfCanvas,
        geometry: PageGeometry | None = None,
    ) -> None:
        self._config = config
        self._intervals = intervals
        self._output = output
        self._canvas_factory = canvas_factory
        self._geometry = geometry or PageGeometry()

    def __call__(self) -> TagSetReportModel:
        """Print the summary and write the PDF."""
        model = TagSetReportModel(self._config, self._intervals)
        TagSetReportView(model).render(self._output)

        geometry = self._geometry
        with self._canvas_factory(self._config.filename, (geometry.width, geometry.height)) as sink:
            instructions = layout_report(model.title, model.groups, model.total, sink.measure, geometry)
            logger.debug("Drawing %d instructions", len(instructions))
            sink.draw_all(instructions)
        return model


def print_versions(config: ReportConfig, output: TextIO) -> None:
    print(f"TimeWarrior version {config.host_version}", file=output)
    print(f"TimeSkwire version {__version__}", file=output)
