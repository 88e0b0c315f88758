# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tests/conftest.py
"""Pytest configuration for backup-verify tests."""

import os

import pytest


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--run-mount-tests",
        action="store_true",
        default=False,
        help="Run tests that need /dev/shm on a different filesystem than the temp dir",
    )


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "mount_required: mark test as requiring a second filesystem (/dev/shm)",
    )
    config.addinivalue_line(
        "markers",
        "permissions: mark test as relying on file permissions (skipped as root)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip mount tests unless --run-mount-tests is passed."""
    if not config.getoption("--run-mount-tests"):
        skip_mount = pytest.mark.skip(
            reason="need --run-mount-tests option to run"
        )
        for item in items:
            if "mount_required" in item.keywords:
                item.add_marker(skip_mount)

    # root ignores permission bits, so these tests cannot fail as intended
    if hasattr(os, "geteuid") and os.geteuid() == 0:
        skip_root = pytest.mark.skip(reason="permission tests cannot run as root")
        for item in items:
            if "permissions" in item.keywords:
                item.add_marker(skip_root)


@pytest.fixture
def trees(tmp_path):
    """Empty original and backup roots under a temp directory."""
    original = tmp_path / "a"
    backup = tmp_path / "b"
    original.mkdir()
    backup.mkdir()
    return original, backup
