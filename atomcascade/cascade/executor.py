# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Cascade step execution with memoized structure computations.

StructureCache runs basis -> SCF -> CI at most once per block (keyed by
block identity) and is shared by graph construction, which needs block
energies for its energy rules, and by step execution. CascadeExecutor
dispatches each step to the kernel registered under its tag.

File: atomcascade/cascade/executor.py
Date: October, 2026
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Sequence

import numpy as np

from ..config import AsfSettings, CascadeSpec
from ..errors import InvalidConfiguration
from ..structure.multiplet import Multiplet
from ..structure.pipeline import compute_multiplet
from .graph import CascadeBlock, CascadeGraph, CascadeStep

if TYPE_CHECKING:
    from ..context import ComputationContext

logger = logging.getLogger(__name__)


class StructureCache:
    """Block -> Multiplet, computed lazily and read-only once stored."""

    def __init__(self, context: ComputationContext, asf: AsfSettings):
        self.context = context
        self.asf = asf
        self._multiplets: dict[CascadeBlock, Multiplet] = {}
        self.n_computed = 0

    def __contains__(self, block: object) -> bool:
        return block in self._multiplets

    def __len__(self) -> int:
        return len(self._multiplets)

    def get(self, block: CascadeBlock) -> Multiplet:
        multiplet = self._multiplets.get(block)
        if multiplet is None:
            multiplet = compute_multiplet(
                block.configurations,
                self.context.nuclear,
                self.context.grid,
                self.asf,
                provider=self.context.provider,
                name=block.name,
            )
            self._multiplets[block] = multiplet
            self.n_computed += 1
        return multiplet

    __call__ = get


class CascadeExecutor:
    """Computes the lines or pathways of cascade steps."""

    def __init__(self, context: ComputationContext, spec: CascadeSpec, cache: StructureCache):
        self.context = context
        self.spec = spec
        self.cache = cache

    def settings_for(self, tag: str) -> dict[str, Any]:
        """Per-tag kernel settings; photon energies default to the cascade's."""
        settings = dict(self.spec.process_settings.get(tag, {}))
        settings.setdefault("photon_energies", list(self.spec.photon_energies))
        return settings

    def execute(self, step: CascadeStep) -> CascadeStep:
        kernel = self.context.registry.get(step.tag)
        settings = self.settings_for(step.tag)
        nuclear, grid = self.context.nuclear, self.context.grid

        initial = self.cache.get(step.initial_block)
        final = self.cache.get(step.final_block)
        if kernel.three_level:
            if step.intermediate_block is None:
                raise InvalidConfiguration(f"Step {step.label} lacks an intermediate block")
            intermediate = self.cache.get(step.intermediate_block)
            step.pathways = kernel.compute_pathways(
                initial, intermediate, final, nuclear, grid, settings
            )
        else:
            step.lines = kernel.compute_lines(initial, final, nuclear, grid, settings)
        step.computed = True

        logger.debug(
            "%s: %d lines, %d pathways", step.label, len(step.lines), len(step.pathways)
        )
        return step

    def execute_all(self, steps: Sequence[CascadeStep]) -> None:
        for step in steps:
            self.execute(step)


# ============================================================================
# Result container
# ============================================================================

def _multiplet_results(multiplet: Multiplet) -> dict[str, Any]:
    return {
        "name": multiplet.name,
        "energies": multiplet.energies,
        "two_J": np.array([lev.two_J for lev in multiplet], dtype=np.int64),
        "parity": [lev.parity.value for lev in multiplet],
    }


def _step_results(step: CascadeStep) -> dict[str, Any]:
    record: dict[str, Any] = {
        "tag": step.tag,
        "initial": step.initial_block.name,
        "final": step.final_block.name,
        "intermediate": step.intermediate_block.name if step.intermediate_block else None,
        "computed": step.computed,
    }
    if step.lines:
        record["lines"] = {
            "initial_level": np.array([ln.initial.index for ln in step.lines], dtype=np.int64),
            "final_level": np.array([ln.final.index for ln in step.lines], dtype=np.int64),
            "energy": np.array([ln.energy for ln in step.lines]),
            "rate": np.array([np.nan if ln.rate is None else ln.rate for ln in step.lines]),
            "cross_section": np.array([
                np.nan if ln.cross_section is None else ln.cross_section for ln in step.lines
            ]),
        }
    if step.pathways:
        record["pathways"] = {
            "levels": np.array(
                [(p.initial.index, p.intermediate.index, p.final.index) for p in step.pathways],
                dtype=np.int64,
            ),
            "excitation_energy": np.array([p.excitation_energy for p in step.pathways]),
            "decay_energy": np.array([p.decay_energy for p in step.pathways]),
            "cross_section": np.array([p.preferred_cross_section() for p in step.pathways]),
        }
    return record


@dataclass(eq=False)
class CascadeData:
    """Computed cascade: graph, step data and the block multiplets."""

    spec: CascadeSpec
    graph: CascadeGraph
    cache: StructureCache

    @property
    def initial_multiplet(self) -> Multiplet:
        return self.cache.get(self.graph.initial_block)

    @property
    def steps(self) -> list[CascadeStep]:
        return self.graph.steps

    def multiplet(self, block: CascadeBlock) -> Multiplet:
        return self.cache.get(block)

    def to_results(self) -> dict[str, Any]:
        """Opaque results mapping for persistence."""
        return {
            "name": self.spec.name,
            "spec": self.spec.model_dump(mode="json"),
            "blocks": [
                {
                    "name": b.name,
                    "n_electrons": b.n_electrons,
                    "generation": b.generation,
                    "binding_energy": b.binding_energy,
                    "is_initial": b.is_initial,
                    "configurations": [str(c) for c in b.configurations],
                    "multiplet": _multiplet_results(self.cache.get(b)),
                }
                for b in self.graph.all_blocks
            ],
            "steps": [_step_results(s) for s in self.graph.steps],
            "n_structure_computations": self.cache.n_computed,
        }


__all__ = ["StructureCache", "CascadeExecutor", "CascadeData"]
