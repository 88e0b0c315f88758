# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# backup-verify/src/backup_verify/stats.py

"""Run counters shared by the walker and the content comparator.

Counts are not mutually exclusive and will not add up to 100%: a symlink
whose target differs may count as different and then again as a similarity
once its resolved content matches.
"""

import threading
from contextlib import ExitStack
from dataclasses import fields

from .types import StatsSnapshot


class _Counter:
    """Unsigned counter guarded by its own lock."""

    __slots__ = ("_lock", "_value")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    @property
    def lock(self) -> threading.Lock:
        return self._lock

    @property
    def value(self) -> int:
        return self._value

    def add(self, n: int = 1) -> None:
        with self._lock:
            self.add_held(n)

    def add_held(self, n: int) -> None:
        """Adjust by n while the caller holds lock; never drops below zero."""
        self._value = max(0, self._value + n)


COUNTER_NAMES = tuple(f.name for f in fields(StatsSnapshot))


class Statistics:
    """Process-wide counters for one verification run."""

    def __init__(self) -> None:
        self._counters = {name: _Counter() for name in COUNTER_NAMES}

    def _inc(self, name: str) -> None:
        self._counters[name].add()

    def inc_original_items(self) -> None:
        self._inc("original_items")

    def inc_backup_items(self) -> None:
        self._inc("backup_items")

    def inc_missing(self) -> None:
        self._inc("missing")

    def inc_different(self) -> None:
        self._inc("different")

    def inc_similarities(self) -> None:
        self._inc("similarities")

    def inc_special_files(self) -> None:
        self._inc("special_files")

    def inc_skipped(self) -> None:
        self._inc("skipped")

    def inc_errors(self) -> None:
        self._inc("errors")

    def provisional_extra(self) -> None:
        """Count an extra entry before it has been classified."""
        with self._locked("backup_items", "extras"):
            for name in ("backup_items", "extras"):
                self._counters[name].add_held(1)

    def retract_extra(self) -> None:
        """Undo provisional_extra() for an entry that could not be classified.

        This is the only place counters move backwards.
        """
        with self._locked("backup_items", "extras"):
            for name in ("backup_items", "extras"):
                self._counters[name].add_held(-1)

    def _locked(self, *names: str) -> ExitStack:
        stack = ExitStack()
        # fixed acquisition order
        for name in COUNTER_NAMES:
            if name in names:
                stack.enter_context(self._counters[name].lock)
        return stack

    def snapshot(self) -> StatsSnapshot:
        """Consistent copy of all counters."""
        with self._locked(*COUNTER_NAMES):
            values = {name: c.value for name, c in self._counters.items()}
        return StatsSnapshot(**values)
