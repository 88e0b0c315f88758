# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# backup-verify/src/backup_verify/types.py

"""Type definitions for backup tree verification."""

import os
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path
from typing import Final


SAMPLE_WINDOW: Final = 32

_ESCAPES: Final = {"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r"}


def printable(text: str) -> str:
    """Text with control characters and undecodable bytes written as escapes.

    A file name may hold any byte except NUL and slash. Tabs, newlines and
    other control characters are shown as backslash escapes so every event
    stays on one line and names the entry unambiguously; a literal backslash
    is doubled.
    """
    if text.isprintable() and "\\" not in text:
        return text
    out = []
    for ch in text:
        code = ord(ch)
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif 0xDC80 <= code <= 0xDCFF:
            # byte that was not valid UTF-8, see os.fsdecode
            out.append(f"\\x{code - 0xDC00:02x}")
        elif ch.isprintable():
            out.append(ch)
        elif code <= 0xFF:
            out.append(f"\\x{code:02x}")
        else:
            out.append(f"\\u{code:04x}")
    return "".join(out)


class Verbosity(IntEnum):
    """How much the reporter prints. Counters are never affected."""
    QUIET = 0
    DIRS = 1
    FILES = 2

    @classmethod
    def from_count(cls, count: int) -> "Verbosity":
        if count < 0:
            raise ValueError(f"Invalid verbosity: {count}")
        return cls(min(count, cls.FILES))


class Kind(Enum):
    """Closed set of entry kinds a walker can observe."""
    DIRECTORY = "directory"
    REGULAR_FILE = "file"
    SYMLINK = "symlink"
    SPECIAL = "special"
    DANGLING = "dangling"
    UNREADABLE = "unreadable"


@dataclass(frozen=True)
class EntryKind:
    """Kind of a single entry on one side of the comparison."""
    kind: Kind
    target: str | None = None
    cause: OSError | None = None
    stat: os.stat_result | None = field(default=None, compare=False, repr=False)

    @property
    def is_dir(self) -> bool:
        return self.kind is Kind.DIRECTORY

    @property
    def is_symlink(self) -> bool:
        return self.kind is Kind.SYMLINK


class Category(Enum):
    """Wire-level output prefixes."""
    MISSING_FILE = "MISSING-FILE"
    MISSING_DIR = "MISSING-DIR"
    MISSING_SYMLINK = "MISSING-SYMLINK"
    MISSING_SPECIAL = "MISSING-SPECIAL"
    MISSING_ERROR = "MISSING-ERROR"
    EXTRA_FILE = "EXTRA-FILE"
    EXTRA_DIR = "EXTRA-DIR"
    EXTRA_SYMLINK = "EXTRA-SYMLINK"
    EXTRA_SPECIAL = "EXTRA-SPECIAL"
    EXTRA_ERROR = "EXTRA-ERROR"
    DIFFERENT_FILE = "DIFFERENT-FILE"
    FILE_DIR_MISMATCH = "FILE-DIR-MISMATCH"
    DIFFERENT_SYMLINK_TARGET = "DIFFERENT-SYMLINK-TARGET"
    DIFFERENT_SYMLINK_STATUS = "DIFFERENT-SYMLINK-STATUS"
    SPECIAL_FILE = "SPECIAL-FILE"
    SYMLINK_SKIPPED = "SYMLINK-SKIPPED"
    DANGLING_SYMLINK = "DANGLING-SYMLINK"
    DIFFERENT_FS = "DIFFERENT-FS"
    SKIP = "SKIP"
    ERROR = "ERROR"
    DEBUG = "DEBUG"


class DiffReason(IntEnum):
    """Content comparison tiers, in reporting order."""
    SIZE = 1
    SAMPLE = 2
    HASH = 3


@dataclass(frozen=True)
class Event:
    """A single classification decision, printed once."""
    category: Category
    path: str
    detail: str | None = None
    reasons: tuple[DiffReason, ...] = ()

    def render(self) -> str:
        label = self.category.value
        if self.reasons:
            tags = ", ".join(r.name for r in sorted(self.reasons))
            label = f"{label} [{tags}]"
        line = f"{label}: {printable(self.path)}"
        if self.detail:
            line = f"{line} ({printable(self.detail)})"
        return line


@dataclass(frozen=True)
class ContentVerdict:
    """Outcome of comparing two regular files."""
    reasons: tuple[DiffReason, ...] = ()
    digests: tuple[str, str] | None = None

    @property
    def same(self) -> bool:
        return not self.reasons


def _root_device(path: Path) -> int | None:
    if os.name != "posix":
        return None
    return os.stat(path).st_dev


@dataclass(frozen=True)
class ComparisonRoot:
    """The two tree roots and the devices they live on."""
    original: Path
    backup: Path
    original_device: int | None = None
    backup_device: int | None = None

    @classmethod
    def capture(cls, original: Path | str, backup: Path | str) -> "ComparisonRoot":
        original = Path(original)
        backup = Path(backup)
        return cls(
            original=original,
            backup=backup,
            original_device=_root_device(original),
            backup_device=_root_device(backup),
        )


@dataclass(frozen=True)
class StatsSnapshot:
    """Point-in-time copy of the nine run counters."""
    original_items: int = 0
    backup_items: int = 0
    missing: int = 0
    different: int = 0
    similarities: int = 0
    extras: int = 0
    special_files: int = 0
    skipped: int = 0
    errors: int = 0

    @property
    def is_success(self) -> bool:
        return self.missing + self.different + self.extras + self.errors == 0

    def percent_of_original(self, count: int) -> float:
        if self.original_items == 0:
            return 0.0
        return count / self.original_items * 100

    @property
    def missing_or_different_pct(self) -> float:
        return self.percent_of_original(self.missing + self.different)
