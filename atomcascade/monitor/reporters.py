# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Observer pattern for write-only reporting of computed results.

Hooks:
  - on_multiplet:    after a structure computation
  - on_blocks:       after the cascade graph is built
  - on_steps:        after all steps are computed
  - on_distribution: after a simulation

Implementations:
  - ConsoleReporter: formatted tables through MonitorLogger
  - JsonReporter:    line-delimited JSON records

File: atomcascade/monitor/reporters.py
Date: October, 2026
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from .logger import MonitorLogger
from .storage import _to_json_safe

if TYPE_CHECKING:
    from ..cascade.graph import CascadeBlock, CascadeStep
    from ..structure.multiplet import Multiplet


class BaseReporter(ABC):
    """Abstract base for result observers."""

    @abstractmethod
    def on_multiplet(self, multiplet: Multiplet) -> None:
        """Invoked after each structure computation that is reported."""

    def on_blocks(self, blocks: Sequence[CascadeBlock]) -> None:
        """Invoked once the cascade blocks are known."""

    def on_steps(self, steps: Sequence[CascadeStep]) -> None:
        """Invoked once all cascade steps carry their data."""

    def on_distribution(self, name: str, distribution: Mapping[str, Any]) -> None:
        """Invoked after a cascade simulation."""


class ConsoleReporter(BaseReporter):
    """Stdout tables."""

    def __init__(self, logger: MonitorLogger | None = None):
        self.logger = logger or MonitorLogger()

    def on_multiplet(self, multiplet: Multiplet) -> None:
        self.logger.multiplet_table(multiplet)

    def on_blocks(self, blocks: Sequence[CascadeBlock]) -> None:
        self.logger.blocks_table(blocks)

    def on_steps(self, steps: Sequence[CascadeStep]) -> None:
        self.logger.steps_table(steps)

    def on_distribution(self, name: str, distribution: Mapping[str, Any]) -> None:
        for kind, values in distribution.items():
            self.logger.distribution_table(f"{name}: {kind}", values)


class JsonReporter(BaseReporter):
    """Stream records to a line-delimited JSON file for post-analysis."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.touch(exist_ok=True)

    def _append(self, record: dict[str, Any]) -> None:
        with self.path.open("a") as f:
            f.write(json.dumps(_to_json_safe(record)) + "\n")

    def on_multiplet(self, multiplet: Multiplet) -> None:
        self._append({
            "event": "multiplet",
            "name": multiplet.name,
            "levels": [
                {"index": lev.index, "J^P": str(lev.symmetry), "energy": lev.energy}
                for lev in multiplet
            ],
        })

    def on_blocks(self, blocks: Sequence[CascadeBlock]) -> None:
        self._append({
            "event": "blocks",
            "blocks": [
                {
                    "name": b.name,
                    "n_electrons": b.n_electrons,
                    "generation": b.generation,
                    "binding_energy": b.binding_energy,
                }
                for b in blocks
            ],
        })

    def on_steps(self, steps: Sequence[CascadeStep]) -> None:
        self._append({
            "event": "steps",
            "steps": [
                {"label": s.label, "lines": len(s.lines), "pathways": len(s.pathways)}
                for s in steps
            ],
        })

    def on_distribution(self, name: str, distribution: Mapping[str, Any]) -> None:
        self._append({"event": "distribution", "name": name, "values": distribution})


__all__ = ["BaseReporter", "ConsoleReporter", "JsonReporter"]
