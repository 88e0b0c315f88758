# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# backup-verify/src/backup_verify/errors.py

"""Exceptions raised by backup-verify."""

from pathlib import Path


class VerifyError(Exception):
    """Base class for backup-verify errors."""


class ConfigError(VerifyError, ValueError):
    """Invalid configuration, detected before any comparison starts."""


class ContentReadError(VerifyError):
    """Reading one side of a file pair failed."""

    def __init__(self, path: Path | str, cause: OSError):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Cannot read [{path}]: {cause.strerror or cause}")


class WalkCancelled(VerifyError):
    """The walk was interrupted between two directory steps."""
