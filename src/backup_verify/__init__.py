# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# Copyright (C) 2026 HRDAG https://hrdag.org
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along
# with this program; if not, see <https://www.gnu.org/licenses/>.
#
# ------
# backup-verify/src/backup_verify/__init__.py

"""Verify that a backup directory tree reproduces its original."""

from .config import VerifyConfig
from .content import ContentComparator
from .errors import ConfigError, ContentReadError, VerifyError, WalkCancelled
from .guards import BoundaryGuard, IgnoreMatcher
from .report import Reporter, format_summary
from .stats import Statistics
from .types import (
    Category,
    ComparisonRoot,
    DiffReason,
    EntryKind,
    Event,
    Kind,
    StatsSnapshot,
    Verbosity,
)
from .walker import TreeWalker

__version__ = "0.1.0"

__all__ = [
    "TreeWalker",
    "VerifyConfig",
    "ContentComparator",
    "Statistics",
    "StatsSnapshot",
    "Reporter",
    "format_summary",
    "IgnoreMatcher",
    "BoundaryGuard",
    "ComparisonRoot",
    "EntryKind",
    "Kind",
    "Category",
    "DiffReason",
    "Event",
    "Verbosity",
    "VerifyError",
    "ConfigError",
    "ContentReadError",
    "WalkCancelled",
]
