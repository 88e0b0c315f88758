# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# backup-verify/src/backup_verify/walker.py

"""Recursive comparison of an original tree against its backup.

The walk is single-threaded and depth-first. Original names are visited in
raw byte order and extras are reported afterwards in the same order, so two
runs over unchanged trees print identical output.
"""

import os
import threading
from enum import Enum

from .config import VerifyConfig
from .content import ContentComparator
from .entry import describe, link_status, list_names, resolve
from .errors import ContentReadError, WalkCancelled
from .guards import BoundaryGuard, IgnoreMatcher
from .report import Reporter
from .stats import Statistics
from .types import (
    Category,
    ComparisonRoot,
    EntryKind,
    Event,
    Kind,
    StatsSnapshot,
    Verbosity,
)


class Presence(Enum):
    """Which side an unpaired entry exists on."""
    MISSING = "original"
    EXTRA = "backup"


_PRESENCE_CATEGORIES = {
    Presence.MISSING: {
        Kind.DIRECTORY: Category.MISSING_DIR,
        Kind.REGULAR_FILE: Category.MISSING_FILE,
        Kind.SYMLINK: Category.MISSING_SYMLINK,
        Kind.SPECIAL: Category.MISSING_SPECIAL,
        Kind.UNREADABLE: Category.MISSING_ERROR,
    },
    Presence.EXTRA: {
        Kind.DIRECTORY: Category.EXTRA_DIR,
        Kind.REGULAR_FILE: Category.EXTRA_FILE,
        Kind.SYMLINK: Category.EXTRA_SYMLINK,
        Kind.SPECIAL: Category.EXTRA_SPECIAL,
        Kind.UNREADABLE: Category.EXTRA_ERROR,
    },
}


def _by_raw_name(names) -> list[str]:
    return sorted(names, key=os.fsencode)


def _show(rel: str) -> str:
    return rel or "."


class TreeWalker:
    """Pair, classify and count every entry of two directory trees."""

    def __init__(self, config: VerifyConfig, stats: Statistics,
                 reporter: Reporter,
                 comparator: ContentComparator | None = None,
                 root: ComparisonRoot | None = None):
        self.config = config
        self.stats = stats
        self.reporter = reporter
        self.root = root or ComparisonRoot.capture(config.original, config.backup)
        self.comparator = comparator or ContentComparator(
            samples=config.samples, full_hash=config.full_hash)
        self.ignore = IgnoreMatcher(config.ignore)
        self.guard = BoundaryGuard(config.one_filesystem)
        self._cancelled = threading.Event()
        # (st_dev, st_ino) of original-side directories on the current path
        self._active: set[tuple[int, int]] = set()

    def cancel(self) -> None:
        """Ask the walk to stop at the next directory step."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def _check_cancelled(self) -> None:
        if self._cancelled.is_set():
            raise WalkCancelled("comparison interrupted")

    def run(self) -> StatsSnapshot:
        """Compare the two roots and return the final counters.

        Raises WalkCancelled if cancel() was called; the counters are still
        consistent and can be read from self.stats.
        """
        with self.comparator:
            self.compare(os.fspath(self.root.original),
                         os.fspath(self.root.backup), "", is_root=True)
        return self.stats.snapshot()

    # ── helpers ─────────────────────────────────────────────────────────

    def _emit(self, category: Category, rel: str, detail: str | None = None,
              level: Verbosity = Verbosity.QUIET) -> None:
        self.reporter.emit(Event(category, _show(rel), detail), level)

    def _error(self, rel: str, detail: str) -> None:
        self._emit(Category.ERROR, rel, detail)
        self.stats.inc_errors()

    def _skip(self, rel: str) -> None:
        self._emit(Category.SKIP, rel)
        self.stats.inc_skipped()

    def _root_device(self, presence: Presence) -> int | None:
        if presence is Presence.MISSING:
            return self.root.original_device
        return self.root.backup_device

    def _crosses_device(self, orig: str, backup: str, rel: str) -> bool:
        """Report DIFFERENT-FS (or an error) if either side leaves its root device."""
        if not self.guard.enabled:
            return False
        try:
            crossed = (
                self.guard.on_different_device(orig, self.root.original_device)
                or self.guard.on_different_device(backup, self.root.backup_device)
            )
        except OSError as e:
            self._error(rel, f"cannot stat: {describe(e)}")
            return True
        if crossed:
            self._emit(Category.DIFFERENT_FS, rel)
            self.stats.inc_skipped()
        return crossed

    # ── directories ─────────────────────────────────────────────────────

    def compare(self, orig: str, backup: str, rel: str,
                is_root: bool = False) -> None:
        """Compare two directories that stand for the same location."""
        self._check_cancelled()

        if self.ignore.matches(orig, backup):
            self._skip(rel)
            return

        if is_root:
            self.stats.inc_original_items()
            self.stats.inc_backup_items()

        self.reporter.debug(f"Comparing directory {_show(rel)}", Verbosity.DIRS)

        listed = True
        try:
            orig_names = list_names(orig)
            identity = os.stat(orig)
        except OSError as e:
            self._error(rel, f"original: cannot read directory: {describe(e)}")
            listed = False
        try:
            backup_names = list_names(backup)
        except OSError as e:
            self._error(rel, f"backup: cannot read directory: {describe(e)}")
            listed = False
        if not listed:
            return

        self.stats.inc_similarities()

        key = (identity.st_dev, identity.st_ino)
        self._active.add(key)
        try:
            self._compare_children(orig, backup, rel, orig_names, backup_names)
        finally:
            self._active.discard(key)

    def _compare_children(self, orig: str, backup: str, rel: str,
                          orig_names: list[str], backup_names: list[str]) -> None:
        pending = set(backup_names)

        for name in _by_raw_name(orig_names):
            orig_path = os.path.join(orig, name)
            backup_path = os.path.join(backup, name)
            child_rel = os.path.join(rel, name)
            in_backup = name in pending
            pending.discard(name)

            if self.ignore.matches(orig_path, backup_path):
                self._skip(child_rel)
                continue

            self.stats.inc_original_items()
            if in_backup:
                self.stats.inc_backup_items()
                self._compare_pair(orig_path, backup_path, child_rel)
            else:
                self._report_presence(orig_path, child_rel, Presence.MISSING,
                                      top=True)

        for name in _by_raw_name(pending):
            backup_path = os.path.join(backup, name)
            child_rel = os.path.join(rel, name)
            if self.ignore.matches(backup_path):
                self._skip(child_rel)
                continue
            self._report_presence(backup_path, child_rel, Presence.EXTRA,
                                  top=True)

    # ── paired entries ──────────────────────────────────────────────────

    def _unreadable(self, rel: str, orig: EntryKind, backup: EntryKind) -> bool:
        """Report each side that could not be inspected."""
        failed = False
        for side, kind in (("original", orig), ("backup", backup)):
            if kind.kind is Kind.UNREADABLE:
                self._error(rel, f"{side}: cannot stat: {describe(kind.cause)}")
                failed = True
        return failed

    def _compare_pair(self, orig: str, backup: str, rel: str) -> None:
        orig_kind = link_status(orig)
        backup_kind = link_status(backup)
        if self._unreadable(rel, orig_kind, backup_kind):
            return

        if orig_kind.is_symlink != backup_kind.is_symlink:
            self._emit(Category.DIFFERENT_SYMLINK_STATUS, rel,
                       f"{orig_kind.kind.value} vs {backup_kind.kind.value}")
            self.stats.inc_different()
            return

        if orig_kind.is_symlink:
            self._compare_symlinks(orig, backup, rel, orig_kind, backup_kind)
        else:
            self._compare_entries(orig, backup, rel, orig_kind, backup_kind)

    def _compare_entries(self, orig: str, backup: str, rel: str,
                         orig_kind: EntryKind, backup_kind: EntryKind) -> None:
        """Classify two non-symlink entries (or two resolved symlinks)."""
        specials = [
            (side, other)
            for side, kind, other in (("original", orig_kind, backup_kind),
                                      ("backup", backup_kind, orig_kind))
            if kind.kind is Kind.SPECIAL
        ]
        if specials:
            for side, other in specials:
                detail = side
                if other.kind is not Kind.SPECIAL:
                    detail = f"{side}; other side is {other.kind.value}"
                self._emit(Category.SPECIAL_FILE, rel, detail)
                self.stats.inc_special_files()
            if len(specials) == 1:
                self.stats.inc_different()
            return

        if orig_kind.is_dir and backup_kind.is_dir:
            if not self._crosses_device(orig, backup, rel):
                self.compare(orig, backup, rel)
            return

        if orig_kind.is_dir or backup_kind.is_dir:
            if orig_kind.is_dir:
                self._emit(Category.FILE_DIR_MISMATCH, rel, "dir vs file")
                self.stats.inc_different()
                self._count_subtree(orig, rel, Presence.MISSING)
            else:
                self._emit(Category.FILE_DIR_MISMATCH, rel, "file vs dir")
                self.stats.inc_different()
                self._count_subtree(backup, rel, Presence.EXTRA)
            return

        self._compare_files(orig, backup, rel)

    def _compare_files(self, orig: str, backup: str, rel: str) -> None:
        self.reporter.debug(f"Comparing file {_show(rel)}", Verbosity.FILES)
        try:
            verdict = self.comparator.compare(orig, backup)
        except ContentReadError as e:
            side = "original" if os.fspath(e.path) == orig else "backup"
            self._error(rel, f"{side}: cannot read: {describe(e.cause)}")
            return

        if verdict.digests is not None:
            for side, digest in zip(("original", "backup"), verdict.digests):
                self.reporter.debug(f"BLAKE3 {digest} {_show(rel)} ({side})",
                                    Verbosity.FILES)

        if verdict.same:
            self.stats.inc_similarities()
        else:
            self.reporter.emit(Event(Category.DIFFERENT_FILE, _show(rel),
                                     reasons=verdict.reasons))
            self.stats.inc_different()

    # ── symlinks ────────────────────────────────────────────────────────

    def _compare_symlinks(self, orig: str, backup: str, rel: str,
                          orig_link: EntryKind, backup_link: EntryKind) -> None:
        orig_kind = resolve(orig)
        backup_kind = resolve(backup)
        if self._unreadable(rel, orig_kind, backup_kind):
            return

        targets_differ = orig_link.target != backup_link.target
        if targets_differ:
            self._emit(Category.DIFFERENT_SYMLINK_TARGET, rel,
                       f"{orig_link.target} vs {backup_link.target}")
            self.stats.inc_different()

        if orig_kind.is_dir and backup_kind.is_dir:
            self._follow_directories(orig, backup, rel, orig_kind)
            return

        if not self.config.follow:
            if not targets_differ:
                self.stats.inc_similarities()
            return

        self._compare_resolved(orig, backup, rel, orig_kind, backup_kind,
                               targets_differ)

    def _follow_directories(self, orig: str, backup: str, rel: str,
                            orig_kind: EntryKind) -> None:
        if not self.config.follow:
            self._emit(Category.SYMLINK_SKIPPED, rel)
            self.stats.inc_skipped()
            return
        if self._crosses_device(orig, backup, rel):
            return
        st = orig_kind.stat
        if st is not None and (st.st_dev, st.st_ino) in self._active:
            self._error(rel, "symlink loop: target is an ancestor directory")
            return
        self.compare(orig, backup, rel)

    def _compare_resolved(self, orig: str, backup: str, rel: str,
                          orig_kind: EntryKind, backup_kind: EntryKind,
                          targets_differ: bool) -> None:
        """Compare what two followed symlinks point at."""
        dangling = 0
        for side, kind in (("original", orig_kind), ("backup", backup_kind)):
            if kind.kind is Kind.DANGLING:
                self._emit(Category.DANGLING_SYMLINK, rel, side)
                dangling += 1

        if dangling == 2:
            if not targets_differ:
                self.stats.inc_similarities()
            return
        if dangling == 1:
            if not targets_differ:
                self.stats.inc_different()
            return

        self._compare_entries(orig, backup, rel, orig_kind, backup_kind)

    # ── missing / extra ─────────────────────────────────────────────────

    def _report_presence(self, path: str, rel: str, presence: Presence,
                         top: bool) -> None:
        """Classify an entry that exists on one side only.

        Extras are counted before classification and retracted if the entry
        cannot be inspected. The original side is counted by the caller at
        the top level and here for descendants.
        """
        kind = link_status(path)
        if presence is Presence.EXTRA:
            self.stats.provisional_extra()
        elif not top:
            self.stats.inc_original_items()

        category = _PRESENCE_CATEGORIES[presence][kind.kind]
        if kind.kind is Kind.UNREADABLE:
            if presence is Presence.EXTRA:
                self.stats.retract_extra()
            self._emit(category, rel, f"cannot stat: {describe(kind.cause)}")
            self.stats.inc_errors()
            return

        if presence is Presence.MISSING:
            self.stats.inc_missing()
        level = Verbosity.QUIET if top else Verbosity.FILES
        self._emit(category, rel, level=level)

        if kind.is_dir:
            self._count_subtree(path, rel, presence)

    def _count_subtree(self, path: str, rel: str, presence: Presence) -> None:
        """Count every descendant of a one-sided directory."""
        self._check_cancelled()
        try:
            if self.guard.on_different_device(path, self._root_device(presence)):
                self._emit(Category.DIFFERENT_FS, rel)
                self.stats.inc_skipped()
                return
            names = list_names(path)
        except OSError as e:
            self._error(rel, f"{presence.value}: cannot read directory: "
                             f"{describe(e)}")
            return

        for name in _by_raw_name(names):
            child = os.path.join(path, name)
            child_rel = os.path.join(rel, name)
            if self.ignore.matches(child):
                self._skip(child_rel)
                continue
            self._report_presence(child, child_rel, presence, top=False)
