# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# backup-verify/src/backup_verify/config.py

"""Validated, read-only run configuration."""

import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError
from .types import Verbosity


def canonical_ignore_path(path: Path | str) -> str:
    """Absolute form of an ignore path with its last component kept verbatim.

    Parent directories are resolved so they line up with the canonical
    roots, but a symlink named as the final component stays a symlink path.
    """
    absolute = os.path.abspath(os.fspath(path))
    parent, leaf = os.path.split(absolute)
    if not leaf:
        return absolute
    return os.path.join(os.path.realpath(parent), leaf)


def _is_within(path: str, root: str) -> bool:
    return path == root or path.startswith(root.rstrip(os.sep) + os.sep)


@dataclass(frozen=True)
class VerifyConfig:
    """Everything the walker needs to know about a run."""
    original: Path
    backup: Path
    verbosity: Verbosity = Verbosity.QUIET
    samples: int = 0
    full_hash: bool = False
    follow: bool = False
    one_filesystem: bool = False
    ignore: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_cli(cls, original: Path | str, backup: Path | str,
                 verbose: int = 0, samples: int = 0, full_hash: bool = False,
                 follow: bool = False, one_filesystem: bool = False,
                 ignore: Iterable[Path | str] = ()) -> "VerifyConfig":
        """Validate raw command-line values. Raises ConfigError."""
        roots = []
        for label, raw in (("original", original), ("backup", backup)):
            try:
                resolved = Path(raw).resolve(strict=True)
            except OSError as e:
                raise ConfigError(
                    f"Cannot resolve {label} directory {str(raw)!r}: "
                    f"{e.strerror or e}") from e
            if not resolved.is_dir():
                raise ConfigError(f"{str(raw)!r} is not a directory")
            roots.append(resolved)
        original_root, backup_root = roots

        try:
            verbosity = Verbosity.from_count(verbose)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        if samples < 0:
            raise ConfigError(f"Sample count must be >= 0, got {samples}")

        ignored = set()
        for raw in ignore:
            candidate = canonical_ignore_path(raw)
            if not os.path.lexists(candidate):
                raise ConfigError(
                    f"Ignore path {str(raw)!r} does not exist")
            if not (_is_within(candidate, str(original_root))
                    or _is_within(candidate, str(backup_root))):
                raise ConfigError(
                    f"Ignore path {candidate!r} is not within the original "
                    f"({str(original_root)!r}) or backup "
                    f"({str(backup_root)!r}) directory")
            ignored.add(candidate)

        return cls(
            original=original_root,
            backup=backup_root,
            verbosity=verbosity,
            samples=samples,
            full_hash=full_hash,
            follow=follow,
            one_filesystem=one_filesystem,
            ignore=frozenset(ignored),
        )
