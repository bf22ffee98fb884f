# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Reporting, console monitoring and result persistence.

File: atomcascade/monitor/__init__.py
Date: October, 2026
"""

from __future__ import annotations

from .logger import MonitorLogger, remove_file_logging, setup_file_logging
from .reporters import BaseReporter, ConsoleReporter, JsonReporter
from .storage import ResultStore, RunContext

__all__ = [
    "MonitorLogger",
    "setup_file_logging",
    "remove_file_logging",
    "BaseReporter",
    "ConsoleReporter",
    "JsonReporter",
    "ResultStore",
    "RunContext",
]
