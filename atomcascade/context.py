# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Explicit computation context.

Carries the collaborators a run needs (nuclear model, radial grid, process
registry, angular coefficient provider) and its write-only outlets
(reporters, result store). Passed to every public operation; there are no
process-wide defaults.

File: atomcascade/context.py
Date: October, 2026
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .monitor.reporters import BaseReporter
from .monitor.storage import ResultStore
from .nuclear import NuclearModel, RadialGrid
from .processes.registry import KernelRegistry, default_registry
from .structure.angular import AngularCoefficientProvider

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class ComputationContext:
    """
    Per-run collaborators.

    Attributes:
        nuclear: Nuclear charge and potential
        grid: Radial grid for orbitals and integrals
        registry: Process tag -> kernel, fixed before the run
        reporters: Observers notified after each public operation
        store: Optional persistence of results mappings
        provider: Angular coefficients; None selects the configuration average
    """

    nuclear: NuclearModel
    grid: RadialGrid
    registry: KernelRegistry = field(default_factory=default_registry)
    reporters: list[BaseReporter] = field(default_factory=list)
    store: Optional[ResultStore] = None
    provider: Optional[AngularCoefficientProvider] = None

    def notify(self, hook: str, *args: Any) -> None:
        """Invoke `hook` on every reporter."""
        for reporter in self.reporters:
            getattr(reporter, hook)(*args)

    def persist(self, name: str, results: Mapping[str, Any]) -> None:
        if self.store is None:
            return
        path = self.store.save(name, results)
        logger.info("Results %r saved to %s", name, path)


__all__ = ["ComputationContext"]
