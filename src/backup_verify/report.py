# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# backup-verify/src/backup_verify/report.py

"""Line-oriented output of classification events and the run summary."""

from typing import TextIO

import typer
from rich.console import Console

from .types import Category, Event, StatsSnapshot, Verbosity, printable


def plain_console(file: TextIO | None = None) -> Console:
    """Console that writes lines verbatim: no markup, colour or wrapping."""
    return Console(
        file=file,
        markup=False,
        emoji=False,
        highlight=False,
        soft_wrap=True,
        no_color=True,
    )


class Reporter:
    """Print events whose level is within the configured verbosity."""

    def __init__(self, console: Console | None = None,
                 verbosity: Verbosity = Verbosity.QUIET):
        self.console = console or plain_console()
        self.verbosity = verbosity

    def wants(self, level: Verbosity) -> bool:
        return self.verbosity >= level

    def emit(self, event: Event, level: Verbosity = Verbosity.QUIET) -> None:
        if self.wants(level):
            self.console.print(event.render())

    def debug(self, message: str, level: Verbosity) -> None:
        if self.wants(level):
            self.console.print(f"{Category.DEBUG.value}: {printable(message)}")

    def line(self, text: str) -> None:
        self.console.print(printable(text))

    def summary(self, snapshot: StatsSnapshot) -> None:
        self.console.print(format_summary(snapshot))


def format_summary(s: StatsSnapshot) -> str:
    """The SUMMARY: block printed at the end of every run."""
    missing_pct = s.percent_of_original(s.missing)
    different_pct = s.percent_of_original(s.different)
    return "\n".join([
        "SUMMARY:",
        f"    Original items processed: {s.original_items}",
        f"    Backup items processed: {s.backup_items}",
        f"    Missing: {s.missing} ({missing_pct:.2f}%)",
        f"    Different: {s.different} ({different_pct:.2f}%)",
        f"    Extras: {s.extras}",
        f"    Special files: {s.special_files}",
        f"    Similarities: {s.similarities}",
        f"    Skipped: {s.skipped}",
        f"    Errors: {s.errors}",
        f"    Missing or different: {s.missing_or_different_pct:.2f}%",
    ])


def print_interrupted(snapshot: StatsSnapshot, console: Console) -> None:
    """Report an interrupted run: notice on stderr, partial summary on stdout."""
    typer.echo("\nInterrupted!", err=True)
    console.print(format_summary(snapshot))
    console.file.flush()
