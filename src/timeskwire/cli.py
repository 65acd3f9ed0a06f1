"""
Command line entry point.

Without arguments timeskwire waits for input from TimeWarrior's extension
API (https://timewarrior.net/docs/api/) and writes the PDF report.

Example
-------
>>> timew report timeskwire :week
>>> timeskwire init
>>> timeskwire init ~/.config/timewarrior/extensions --force
"""

from __future__ import annotations

import argparse
import logging
import os
import shutil
import sys
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from timeskwire import __version__
from timeskwire.config import ReportConfig
from timeskwire.errors import TimeskwireError
from timeskwire.intervals import parse_input, utc_now
from timeskwire.reports import ReportKind, print_versions, report_for

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION_SUBDIR = Path(".timewarrior") / "extensions"
EXTENSION_NAME = "timeskwire"
LOG_LEVEL_ENV_VAR = "TIMESKWIRE_LOG"


def configure_logging(environ: dict[str, str] | None = None) -> None:
    """Set up logging to stderr at the level named by ``TIMESKWIRE_LOG`` (default WARNING)."""
    environ = os.environ if environ is None else environ
    level_name = environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="timeskwire: %(levelname)s: %(name)s: %(message)s")


def add_args(parser: argparse.ArgumentParser) -> None:
    """
    Add the timeskwire arguments and the ``init`` sub-command.

    Parameters
    ----------
    parser : argparse.ArgumentParser
        The argument parser to add arguments to.
    """
    parser.add_argument(
        "--version",
        action="version",
        version=__version__,
        help="Print the version of timeskwire.",
    )

    subparsers = parser.add_subparsers(dest="command")
    init_parser = subparsers.add_parser(
        "init",
        help="Link timeskwire into TimeWarrior's extension directory.",
    )
    init_parser.add_argument(
        "extension_dir",
        nargs="?",
        default=None,
        type=Path,
        help="Where to initialize timeskwire (~/.timewarrior/extensions/ by default).",
    )
    init_parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        default=False,
        help="Replace the link if it already exists.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="timeskwire",
        description="TimeSkwire - a PDF render extension for TimeWarrior.",
    )
    add_args(parser)
    return parser


def find_executable() -> Path:
    """
    Locate the timeskwire executable to link into TimeWarrior.

    Under ``python -m timeskwire`` the running script is the package's
    ``__main__.py``, which TimeWarrior cannot execute; the installed console
    script on ``PATH`` is used instead.

    Raises
    ------
    FileNotFoundError
        If no executable can be found.
    """
    script = Path(sys.argv[0])
    if script.suffix != ".py":
        return script
    found = shutil.which(EXTENSION_NAME)
    if found is None:
        raise FileNotFoundError(
            f"{EXTENSION_NAME} executable not found on PATH; install the package to get it"
        )
    return Path(found)


def init_extension(extension_dir: Path, force: bool = False, executable: Path | None = None) -> Path:
    """
    Symlink the timeskwire executable into TimeWarrior's extension directory.

    Parameters
    ----------
    extension_dir : Path
        TimeWarrior's extension directory; it must already exist.
    force : bool, optional
        Remove an existing file at the link location first, by default False.
    executable : Path | None, optional
        What to link to, by default the running console script (see
        :func:`find_executable`).

    Returns
    -------
    Path
        The created link.

    Raises
    ------
    FileNotFoundError
        If ``extension_dir`` is not a directory.
    FileExistsError
        If the link already exists and ``force`` is not set.
    """
    if not extension_dir.is_dir():
        raise FileNotFoundError(f"{extension_dir}: No such file or directory")

    target = extension_dir / EXTENSION_NAME
    source = (executable or find_executable()).resolve()

    if force and (target.exists() or target.is_symlink()):
        logger.debug("`force` is set, removing %s", target)
        target.unlink()

    logger.info("Bootstrapping %s at %s", source, target)
    target.symlink_to(source)
    return target


def run_report(stdin: TextIO, stdout: TextIO) -> None:
    """Read TimeWarrior's input, print progress and render the configured report."""
    parsed = parse_input(stdin.read())
    now = parsed.open_ended_at or utc_now()
    first_start = min((interval.start for interval in parsed.intervals), default=None)
    config = ReportConfig.from_mapping(parsed.config, now=now, first_start=first_start)

    print_versions(config, stdout)
    if parsed.open_ended_at is not None:
        print(
            f"Time logging still in progress, using now ({parsed.open_ended_at.isoformat()}) as end",
            file=stdout,
        )

    report_class = report_for(ReportKind.parse(config.report_kind))
    report = report_class(config, parsed.intervals, stdout)
    report()


def main(
    argv: Sequence[str] | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """
    Run timeskwire and return the process exit status.

    Parameters
    ----------
    argv : Sequence[str] | None, optional
        Arguments without the program name, by default ``sys.argv[1:]``.
    stdin, stdout, stderr : TextIO | None, optional
        Streams to use, by default the process streams.

    Returns
    -------
    int
        0 on success, 1 on any failure.
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    configure_logging()
    args = build_parser().parse_args(argv)

    if args.command == "init":
        extension_dir = args.extension_dir or Path.home() / DEFAULT_EXTENSION_SUBDIR
        logger.debug("Using extension dir: %s", extension_dir)
        try:
            init_extension(extension_dir, force=args.force)
        except OSError as exc:
            print(f"timeskwire: init: Could not symlink to {extension_dir}: {exc}", file=stderr)
            return 1
        print(
            "Init OK. Check that your TimeWarrior sees timeskwire with `timew extensions`.",
            file=stdout,
        )
        return 0

    try:
        run_report(stdin, stdout)
    except (TimeskwireError, OSError) as exc:
        logger.debug("Report failed", exc_info=True)
        print(f"timeskwire: {exc}", file=stderr)
        return 1
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())
