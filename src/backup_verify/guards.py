# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# backup-verify/src/backup_verify/guards.py

"""Ignore matching and filesystem boundary checks."""

import os
from collections.abc import Iterable
from pathlib import Path


class IgnoreMatcher:
    """Exact-path ignore list.

    Paths are compared as strings against the unresolved paths the walker
    builds, so a symlinked directory is ignored by naming the link itself.
    """

    def __init__(self, paths: Iterable[Path | str] = ()):
        self._paths = frozenset(os.fspath(p) for p in paths)

    def matches(self, *candidates: Path | str) -> bool:
        if not self._paths:
            return False
        return any(os.fspath(c) in self._paths for c in candidates)


class BoundaryGuard:
    """Detects directories that live on another device than their tree root.

    The candidate is always compared with the device captured for the root
    when the walk started, never with its parent. A root that is itself a
    mount point is therefore never flagged, and a crossing is still seen
    after following a symlink onto a foreign device.
    """

    def __init__(self, enabled: bool):
        self.enabled = enabled and os.name == "posix"

    def on_different_device(self, candidate: Path | str,
                            root_device: int | None) -> bool:
        """True when candidate is on another device. Raises OSError."""
        if not self.enabled or root_device is None:
            return False
        return os.stat(candidate).st_dev != root_device
