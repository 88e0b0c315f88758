# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# backup-verify/src/backup_verify/cli.py

"""Command line interface for backup-verify."""

import shlex
import signal
from pathlib import Path
from typing import Optional

import typer

from .config import VerifyConfig
from .errors import ConfigError, WalkCancelled
from .report import Reporter, plain_console, print_interrupted
from .stats import Statistics
from .walker import TreeWalker

EXIT_OK = 0
EXIT_DIFFERENCES = 1
EXIT_CONFIG = 2
EXIT_INTERRUPTED = 130

app = typer.Typer(
    help="Verify backup integrity by comparing directory trees",
    add_completion=False,
)
console = plain_console()


def command_line(original: Path, backup: Path, verbose: int, samples: int,
                 full_hash: bool, follow: bool, one_filesystem: bool,
                 ignore: list[Path]) -> str:
    """The invocation as a shell-quoted CMD: line."""
    args = ["vfy", str(original), str(backup)]
    args += ["-v"] * verbose
    if samples:
        args += ["--samples", str(samples)]
    if full_hash:
        args.append("--all")
    if follow:
        args.append("--follow")
    if one_filesystem:
        args.append("--one-filesystem")
    for path in ignore:
        args += ["--ignore", str(path)]
    return f"CMD: {shlex.join(args)}"


@app.command()
def verify(
    original: Path = typer.Argument(..., help="Original directory"),
    backup: Path = typer.Argument(..., help="Backup directory"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True,
                                help="Verbose output (-v for dirs, -vv for files)"),
    samples: int = typer.Option(0, "--samples", "-s", min=0,
                                help="Number of random samples to compare per file"),
    full_hash: bool = typer.Option(False, "--all", "-a",
                                   help="Full BLAKE3 hash comparison"),
    follow: bool = typer.Option(False, "--follow",
                                help="Follow symlinks into directories"),
    one_filesystem: bool = typer.Option(False, "--one-filesystem", "-o",
                                        help="Stay on one filesystem"),
    ignore: Optional[list[Path]] = typer.Option(
        None, "--ignore", "-i",
        help="Path to ignore (can be specified multiple times)"),
) -> None:
    """Compare ORIGINAL against BACKUP and report every discrepancy."""
    ignore = ignore or []
    try:
        config = VerifyConfig.from_cli(
            original, backup, verbose=verbose, samples=samples,
            full_hash=full_hash, follow=follow,
            one_filesystem=one_filesystem, ignore=ignore,
        )
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_CONFIG)

    if config.original == config.backup:
        typer.echo("Warning: original and backup are the same directory",
                   err=True)

    reporter = Reporter(console, config.verbosity)
    reporter.line(command_line(original, backup, verbose, samples, full_hash,
                               follow, one_filesystem, ignore))

    stats = Statistics()
    walker = TreeWalker(config, stats, reporter)

    previous = signal.signal(signal.SIGINT,
                             lambda signum, frame: walker.cancel())
    try:
        snapshot = walker.run()
    except WalkCancelled:
        print_interrupted(stats.snapshot(), console)
        raise typer.Exit(EXIT_INTERRUPTED)
    finally:
        signal.signal(signal.SIGINT, previous)

    reporter.summary(snapshot)
    if not snapshot.is_success:
        raise typer.Exit(EXIT_DIFFERENCES)


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
