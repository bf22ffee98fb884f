# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Console monitoring and file logging.

MonitorLogger prints section headers and tables (levels, blocks, steps,
distributions) to stdout, mirroring them without ANSI codes to an
optional file. setup_file_logging() routes the package's `logging`
records into a run directory.

File: atomcascade/monitor/logger.py
Date: October, 2026
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping, Sequence, TextIO

from ..constants import HARTREE_EV

if TYPE_CHECKING:
    from ..cascade.graph import CascadeBlock, CascadeStep
    from ..structure.multiplet import Multiplet

# ANSI escape sequence regex for clean file logging
_ANSI_ESCAPE_RE = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")

PACKAGE_LOGGER = "atomcascade"


def setup_file_logging(
    directory: str | Path,
    level: int | str = logging.INFO,
    filename: str = "atomcascade.log",
) -> logging.FileHandler:
    """Attach a file handler for all atomcascade loggers; returns the handler."""
    path = Path(directory)
    path.mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    fh = logging.FileHandler(path / filename, mode="a", encoding="utf-8")
    fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(fh)
    return fh


def remove_file_logging(handler: logging.Handler) -> None:
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.removeHandler(handler)
    handler.close()


class MonitorLogger:
    """Stdout and optional file output with color support."""

    BLUE = "\033[94m"
    RESET = "\033[0m"
    WIDTH = 78

    def __init__(self, file: TextIO | None = None, color: bool = True) -> None:
        self._file = file
        self.color = color

    def _write(self, msg: str) -> None:
        """Color codes kept for console, stripped for the file."""
        print(msg)
        if self._file is not None:
            self._file.write(_ANSI_ESCAPE_RE.sub("", msg) + "\n")
            self._file.flush()

    def _blue(self, text: str) -> str:
        return f"{self.BLUE}{text}{self.RESET}" if self.color else text

    def info(self, msg: str) -> None:
        self._write(msg)

    def header(self, title: str) -> None:
        line = "=" * self.WIDTH
        self._write(f"\n{line}")
        self._write(f"{title:^{self.WIDTH}}")
        self._write(line)

    # -------------------------------------------------------------------------
    # Tables
    # -------------------------------------------------------------------------

    def multiplet_table(self, multiplet: Multiplet) -> None:
        """Level energies, absolute and relative to the lowest level."""
        self.header(f"Multiplet: {multiplet.name}")
        self._write(f"{'Lev':>4} | {'J^P':>6} | {'Energy [Ha]':>18} | {'Rel [eV]':>12}")
        self._write("-" * self.WIDTH)
        e0 = multiplet.e_min if len(multiplet) else 0.0
        for lev in multiplet:
            self._write(
                f"{lev.index:4d} | {str(lev.symmetry):>6} | {lev.energy:18.8f} | "
                f"{(lev.energy - e0) * HARTREE_EV:12.5f}"
            )

    def blocks_table(self, blocks: Sequence[CascadeBlock]) -> None:
        self.header("Cascade blocks")
        self._write(f"{'Gen':>4} | {'N':>4} | {'E_bind est [Ha]':>16} | Configurations")
        self._write("-" * self.WIDTH)
        for block in blocks:
            confs = ", ".join(str(c) for c in block.configurations)
            self._write(
                f"{block.generation:4d} | {block.n_electrons:4d} | "
                f"{block.binding_energy:16.4f} | {confs}"
            )

    def steps_table(self, steps: Sequence[CascadeStep]) -> None:
        self.header("Cascade steps")
        for idx, step in enumerate(steps):
            data = f"{len(step.lines)} lines" if not step.pathways else f"{len(step.pathways)} pathways"
            status = data if step.computed else "pending"
            self._write(f"{idx:4d}  {self._blue(step.tag):<14} {step.label}  [{status}]")

    def distribution_table(self, title: str, values: Mapping[Any, float]) -> None:
        self.header(title)
        for key, value in values.items():
            self._write(f"{str(key):<50} {value:14.8f}")


__all__ = ["MonitorLogger", "setup_file_logging", "remove_file_logging", "PACKAGE_LOGGER"]
