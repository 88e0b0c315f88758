# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tests/integration/test_special_and_errors.py
"""Integration tests for special files and unreadable entries."""

import os

import pytest

from backup_verify.types import StatsSnapshot
from tests.fixtures.tree_fixture import (
    Dir,
    Fifo,
    File,
    assert_symmetric,
    create_entries,
    make_and_verify,
    run_verify,
)


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="needs FIFOs")
class TestSpecialFiles:

    def test_special_on_both_sides(self, trees):
        run = make_and_verify(trees, [Fifo("pipe")], [Fifo("pipe")])
        assert run.lines == [
            "SPECIAL-FILE: pipe (original)",
            "SPECIAL-FILE: pipe (backup)",
        ]
        assert run.snapshot == StatsSnapshot(
            original_items=2, backup_items=2, special_files=2, similarities=1)
        assert run.snapshot.is_success

    def test_special_replaced_by_file(self, trees):
        run = make_and_verify(trees, [Fifo("pipe")], [File("pipe", "data")])
        assert run.lines == ["SPECIAL-FILE: pipe (original; other side is file)"]
        assert run.snapshot.special_files == 1
        assert run.snapshot.different == 1
        assert_symmetric(run)

    def test_special_vs_directory(self, trees):
        run = make_and_verify(trees, [Dir("pipe"), File("pipe/x", "x")],
                              [Fifo("pipe")])
        assert run.lines == [
            "SPECIAL-FILE: pipe (backup; other side is directory)",
        ]
        assert run.snapshot.different == 1

    def test_missing_special(self, trees):
        run = make_and_verify(trees, [Fifo("pipe"), File("a", "a")],
                              [File("a", "a")])
        assert run.lines == ["MISSING-SPECIAL: pipe"]
        assert run.snapshot.missing == 1
        assert run.snapshot.special_files == 0
        assert_symmetric(run)

    def test_special_is_never_opened(self, trees):
        # opening a FIFO with no writer would block
        run = make_and_verify(trees, [Fifo("pipe")], [Fifo("pipe")],
                              full_hash=True, samples=4)
        assert run.snapshot.special_files == 2


@pytest.fixture
def restore_modes():
    """Collect paths whose mode a test changes and make them removable again."""
    changed = []
    yield changed
    for path in changed:
        os.chmod(path, 0o755)


@pytest.mark.permissions
class TestUnreadable:

    def test_unreadable_directories_on_both_sides(self, trees, restore_modes):
        entries = [Dir("locked"), File("locked/secret", "s")]
        for root in trees:
            create_entries(root, entries)
            os.chmod(root / "locked", 0)
            restore_modes.append(root / "locked")
        run = run_verify(*trees)

        assert [label for label, _ in run.labels()] == ["ERROR", "ERROR"]
        assert run.lines[0].startswith(
            "ERROR: locked (original: cannot read directory:")
        assert run.lines[1].startswith(
            "ERROR: locked (backup: cannot read directory:")
        assert run.snapshot.errors == 2
        assert run.snapshot.similarities == 1

    def test_extra_entry_that_cannot_be_inspected(self, trees, restore_modes):
        original, backup = trees
        create_entries(backup, [Dir("box"), File("box/item", "i")])
        os.chmod(backup / "box", 0o444)
        restore_modes.append(backup / "box")
        run = run_verify(original, backup, verbose=2)

        assert run.lines == [
            "EXTRA-DIR: box",
            "EXTRA-ERROR: box/item (cannot stat: Permission denied)",
        ]
        assert run.snapshot == StatsSnapshot(
            original_items=1, backup_items=2, extras=1, errors=1)

    def test_missing_entry_that_cannot_be_inspected(self, trees, restore_modes):
        original, backup = trees
        create_entries(original, [Dir("box"), File("box/item", "i")])
        os.chmod(original / "box", 0o444)
        restore_modes.append(original / "box")
        run = run_verify(original, backup)

        assert run.lines == [
            "MISSING-DIR: box",
            "MISSING-ERROR: box/item (cannot stat: Permission denied)",
        ]
        assert run.snapshot == StatsSnapshot(
            original_items=3, backup_items=1, missing=1, errors=1)

    def test_unreadable_file_content(self, trees, restore_modes):
        original, backup = trees
        for root in trees:
            create_entries(root, [File("f", "data")])
        os.chmod(backup / "f", 0)
        restore_modes.append(backup / "f")
        run = run_verify(original, backup, full_hash=True)

        assert run.lines == ["ERROR: f (backup: cannot read: Permission denied)"]
        assert run.snapshot.errors == 1
        assert run.snapshot.different == 0
