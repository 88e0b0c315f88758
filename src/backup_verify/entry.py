# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# backup-verify/src/backup_verify/entry.py

"""Determine the kind of a directory entry. All stat I/O lives here."""

import os
import stat
from pathlib import Path

from .types import EntryKind, Kind


def _from_stat(st: os.stat_result) -> EntryKind:
    if stat.S_ISDIR(st.st_mode):
        return EntryKind(Kind.DIRECTORY, stat=st)
    if stat.S_ISREG(st.st_mode):
        return EntryKind(Kind.REGULAR_FILE, stat=st)
    return EntryKind(Kind.SPECIAL, stat=st)


def link_status(path: Path | str) -> EntryKind:
    """Kind of the entry itself, without following a symlink."""
    try:
        st = os.lstat(path)
    except OSError as e:
        return EntryKind(Kind.UNREADABLE, cause=e)

    if stat.S_ISLNK(st.st_mode):
        try:
            target = os.readlink(path)
        except OSError as e:
            return EntryKind(Kind.UNREADABLE, cause=e)
        return EntryKind(Kind.SYMLINK, target=target, stat=st)
    return _from_stat(st)


def resolve(path: Path | str) -> EntryKind:
    """Kind of whatever the entry ultimately points at.

    A missing target is DANGLING; any other failure (permissions, ELOOP)
    is UNREADABLE.
    """
    try:
        st = os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return EntryKind(Kind.DANGLING)
    except OSError as e:
        return EntryKind(Kind.UNREADABLE, cause=e)
    return _from_stat(st)


def list_names(path: Path | str) -> list[str]:
    """Names in a directory, unsorted. Raises OSError."""
    with os.scandir(path) as it:
        return [entry.name for entry in it]


def describe(cause: OSError | None) -> str:
    if cause is None:
        return "unknown error"
    return cause.strerror or str(cause)
