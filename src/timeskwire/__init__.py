"""
timeskwire: a PDF report extension for TimeWarrior.

TimeWarrior pipes its configuration and the intervals of the requested range
to every extension on standard input. timeskwire reads that stream and renders
a one-page PDF showing:

- Total time logged over the report range
- Time logged per distinct set of tags, with percentages
- A stacked bar chart of the tag sets, largest first

Installation
------------
Install via pip and link the executable into TimeWarrior's extensions::

    pip install timeskwire
    timeskwire init

Usage
-----
Once linked, the report is available through TimeWarrior::

    timew report timeskwire :week

The output filename and report kind are read from TimeWarrior's
configuration (``timeskwire.report.filename``, ``timeskwire.report.kind``).
"""

__version__ = "0.2.0"

__all__ = ["__version__"]
