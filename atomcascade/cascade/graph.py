# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Cascade graph construction.

Pipeline:
  1. Descendants: remove one electron at a time from occupied, non-frozen
     shells (up to max_electron_loss), then up to max_shake_displacements
     single-electron moves; initial configurations are never descendants
  2. Excited copies of the initial configurations when a three-level
     process is requested (same electron count, intermediate blocks)
  3. Blocks: one per configuration (average-sca) or per electron count (sca),
     ordered by electron count descending, then canonical configuration order
  4. Steps: every (source, target) pair whose electron-count change and
     energy rule match a requested kernel
  5. Generations: longest path from the initial block over the step DAG

Energy rules consult block multiplets through a caller-supplied lookup,
normally the structure cache of the executor.

File: atomcascade/cascade/graph.py
Date: October, 2026
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Sequence

from ..config import Approach, CascadeSpec
from ..errors import InvalidConfiguration
from ..processes.lines import Line, Pathway
from ..processes.registry import EnergyWindow, KernelRegistry, ProcessKernel
from ..structure.configuration import Configuration
from ..structure.multiplet import Multiplet
from ..structure.subshell import Shell, l_from_symbol

logger = logging.getLogger(__name__)

MultipletLookup = Callable[["CascadeBlock"], Multiplet]


# ============================================================================
# Graph entities
# ============================================================================

@dataclass(eq=False)
class CascadeBlock:
    """
    Configurations treated as one structure computation.

    Identity-hashed: the structure cache is keyed by the block object.
    """

    name: str
    configurations: tuple[Configuration, ...]
    n_electrons: int
    generation: int = 0
    binding_energy: float = 0.0
    is_initial: bool = False

    def __repr__(self) -> str:
        return f"CascadeBlock({self.name!r}, N={self.n_electrons}, gen={self.generation})"


@dataclass(eq=False)
class CascadeStep:
    """Process-labeled edge between blocks, with computed data attached later."""

    tag: str
    initial_block: CascadeBlock
    final_block: CascadeBlock
    intermediate_block: Optional[CascadeBlock] = None
    lines: list[Line] = field(default_factory=list, repr=False)
    pathways: list[Pathway] = field(default_factory=list, repr=False)
    computed: bool = False

    @property
    def label(self) -> str:
        via = f" via {self.intermediate_block.name}" if self.intermediate_block else ""
        return f"{self.tag}: {self.initial_block.name} -> {self.final_block.name}{via}"


@dataclass(eq=False)
class CascadeGraph:
    """Initial block (generation 0), descendant blocks and steps."""

    initial_block: CascadeBlock
    blocks: list[CascadeBlock]
    steps: list[CascadeStep]

    @property
    def all_blocks(self) -> list[CascadeBlock]:
        return [self.initial_block] + list(self.blocks)

    def outgoing(self, block: CascadeBlock) -> list[CascadeStep]:
        return [s for s in self.steps if s.initial_block is block]

    def by_generation(self) -> list[CascadeBlock]:
        """All blocks in non-decreasing generation order (stable)."""
        return sorted(self.all_blocks, key=lambda b: b.generation)


# ============================================================================
# Configuration generation
# ============================================================================

def parse_shells(labels: Iterable[str]) -> list[Shell]:
    """Shell labels such as '1s', '2p'."""
    shells = []
    for label in labels:
        text = label.strip()
        if len(text) < 2 or not text[:-1].isdigit():
            raise InvalidConfiguration(f"Invalid shell label: {label!r}")
        shells.append(Shell(int(text[:-1]), l_from_symbol(text[-1])))
    return shells


def _dedupe(configs: Iterable[Configuration], exclude: set) -> list[Configuration]:
    seen = set(exclude)
    out = []
    for c in configs:
        if c not in seen:
            seen.add(c)
            out.append(c)
    return out


def generate_descendants(
    initial: Sequence[Configuration],
    max_electron_loss: int,
    frozen: Sequence[Shell] = (),
) -> list[Configuration]:
    """Configurations reachable by removing 1..max_electron_loss electrons."""
    frozen_set = set(frozen)
    excluded = set(initial)
    frontier = list(initial)
    descendants: list[Configuration] = []
    for _ in range(max_electron_loss):
        children = []
        for conf in frontier:
            for shell, _q in conf.shells:
                if shell in frozen_set:
                    continue
                child = conf.remove_electron(shell)
                if child.n_electrons > 0:
                    children.append(child)
        frontier = _dedupe(children, excluded | set(descendants))
        descendants.extend(frontier)
    return descendants


def _moves(
    conf: Configuration, targets: Sequence[Shell], frozen: set,
) -> list[Configuration]:
    out = []
    for source, _q in conf.shells:
        if source in frozen:
            continue
        for target in targets:
            if target == source or conf.occupation(target) >= target.max_occupation:
                continue
            out.append(conf.move_electron(source, target))
    return out


def apply_shakes(
    configs: Sequence[Configuration],
    max_displacements: int,
    shake_shells: Sequence[Shell] = (),
    frozen: Sequence[Shell] = (),
    exclude: Iterable[Configuration] = (),
) -> list[Configuration]:
    """configs plus up to max_displacements single-electron moves of each."""
    frozen_set = set(frozen)
    targets = sorted({s for c in configs for s, _ in c.shells} | set(shake_shells))
    result = list(configs)
    frontier = list(configs)
    excluded = set(exclude)
    for _ in range(max_displacements):
        moved = [m for c in frontier for m in _moves(c, targets, frozen_set)]
        frontier = _dedupe(moved, excluded | set(result))
        result.extend(frontier)
    return result


def excited_configurations(
    initial: Sequence[Configuration],
    shake_shells: Sequence[Shell],
    frozen: Sequence[Shell] = (),
) -> list[Configuration]:
    """Single excitations of the initial configurations (intermediate states)."""
    targets = sorted({s for c in initial for s, _ in c.shells} | set(shake_shells))
    moved = [m for c in initial for m in _moves(c, targets, set(frozen))]
    return _dedupe(moved, set(initial))


# ============================================================================
# Blocks
# ============================================================================

def estimate_binding_energy(conf: Configuration, Z: float) -> float:
    """
    Screened-hydrogenic total energy -sum q Z_eff^2 / (2 n^2) (hartree).

    Z_eff(nl) = Z - (electrons in shells with lower n) - 0.35 (q_nl - 1).
    Informational only.
    """
    energy = 0.0
    for shell, q in conf.shells:
        inner = sum(q2 for s2, q2 in conf.shells if s2.n < shell.n)
        z_eff = max(Z - inner - 0.35 * (q - 1), 1.0)
        energy -= q * z_eff ** 2 / (2.0 * shell.n ** 2)
    return energy


def _sorted_configs(configs: Iterable[Configuration]) -> list[Configuration]:
    return sorted(configs, key=lambda c: (-c.n_electrons, c.sort_key))


def group_blocks(
    configs: Sequence[Configuration],
    approach: Approach,
    Z: float,
) -> list[CascadeBlock]:
    """Deterministically ordered blocks of descendant configurations."""
    ordered = _sorted_configs(configs)
    blocks = []
    if approach is Approach.AVERAGE_SCA:
        for conf in ordered:
            blocks.append(CascadeBlock(
                name=str(conf),
                configurations=(conf,),
                n_electrons=conf.n_electrons,
                binding_energy=estimate_binding_energy(conf, Z),
            ))
    else:
        by_count: dict[int, list[Configuration]] = defaultdict(list)
        for conf in ordered:
            by_count[conf.n_electrons].append(conf)
        for n in sorted(by_count, reverse=True):
            group = tuple(by_count[n])
            blocks.append(CascadeBlock(
                name=f"N={n}",
                configurations=group,
                n_electrons=n,
                binding_energy=sum(estimate_binding_energy(c, Z) for c in group) / len(group),
            ))
    return blocks


def make_initial_block(configs: Sequence[Configuration], Z: float) -> CascadeBlock:
    counts = {c.n_electrons for c in configs}
    if len(counts) != 1:
        raise InvalidConfiguration(
            f"Initial configurations must share one electron count, got {sorted(counts)}"
        )
    return CascadeBlock(
        name="initial: " + " + ".join(str(c) for c in configs),
        configurations=tuple(configs),
        n_electrons=counts.pop(),
        generation=0,
        binding_energy=sum(estimate_binding_energy(c, Z) for c in configs) / len(configs),
        is_initial=True,
    )


# ============================================================================
# Steps and generations
# ============================================================================

def build_steps(
    initial_block: CascadeBlock,
    blocks: Sequence[CascadeBlock],
    kernels: Sequence[ProcessKernel],
    multiplet_of: MultipletLookup,
    photon_energies: Sequence[float] = (),
) -> list[CascadeStep]:
    """Enumerate steps in kernel order, then source order, then target order."""
    windows: dict[CascadeBlock, EnergyWindow] = {}

    def window(block: CascadeBlock) -> EnergyWindow:
        if block not in windows:
            windows[block] = EnergyWindow.of(multiplet_of(block))
        return windows[block]

    steps = []
    for kernel in kernels:
        if kernel.three_level:
            src = initial_block
            mids = [b for b in blocks if b.n_electrons == src.n_electrons + kernel.intermediate_change]
            finals = [b for b in blocks if b.n_electrons == src.n_electrons + kernel.electron_change]
            for mid in mids:
                for dst in finals:
                    if mid is dst:
                        continue
                    if kernel.intermediate_allowed(window(src), window(mid), window(dst)):
                        steps.append(CascadeStep(kernel.tag, src, dst, intermediate_block=mid))
            continue

        sources = [initial_block] if kernel.initial_block_only else [initial_block, *blocks]
        for src in sources:
            for dst in blocks:
                if dst is src or dst.n_electrons - src.n_electrons != kernel.electron_change:
                    continue
                if kernel.energy_allowed(window(src), window(dst), photon_energies):
                    steps.append(CascadeStep(kernel.tag, src, dst))
    return steps


def assign_generations(
    initial_block: CascadeBlock,
    blocks: Sequence[CascadeBlock],
    steps: Sequence[CascadeStep],
) -> None:
    """
    generation = longest path length from a source-free block (Kahn order).

    The initial block has no inbound steps and gets generation 0.
    """
    nodes = [initial_block, *blocks]
    indegree = {b: 0 for b in nodes}
    succ: dict[CascadeBlock, list[CascadeBlock]] = defaultdict(list)
    for step in steps:
        succ[step.initial_block].append(step.final_block)
        indegree[step.final_block] += 1

    for b in nodes:
        b.generation = 0
    queue = deque(b for b in nodes if indegree[b] == 0)
    visited = 0
    while queue:
        node = queue.popleft()
        visited += 1
        for nxt in succ[node]:
            nxt.generation = max(nxt.generation, node.generation + 1)
            indegree[nxt] -= 1
            if indegree[nxt] == 0:
                queue.append(nxt)

    if visited != len(nodes):
        raise InvalidConfiguration("Cascade step graph contains a cycle")


def build_cascade_graph(
    spec: CascadeSpec,
    registry: KernelRegistry,
    multiplet_of: MultipletLookup,
    Z: float,
) -> CascadeGraph:
    """Blocks and energetically allowed steps for a cascade specification."""
    try:
        approach = Approach(spec.approach)
    except ValueError as exc:
        raise InvalidConfiguration(f"Unknown cascade approach: {spec.approach!r}") from exc
    if not spec.initial_configs:
        raise InvalidConfiguration("Cascade requires at least one initial configuration")

    kernels = [registry.get(tag) for tag in spec.processes]
    initial = _dedupe((Configuration.coerce(c) for c in spec.initial_configs), set())
    frozen = parse_shells(spec.frozen_shells)
    shake = parse_shells(spec.shake_shells)

    descendants = generate_descendants(initial, spec.max_electron_loss, frozen)
    configs = apply_shakes(descendants, spec.max_shake_displacements, shake, frozen, exclude=initial)
    if any(k.three_level for k in kernels):
        configs = _dedupe(configs + excited_configurations(initial, shake, frozen), set(initial))

    initial_block = make_initial_block(initial, Z)
    blocks = group_blocks(configs, approach, Z)
    steps = build_steps(initial_block, blocks, kernels, multiplet_of, spec.photon_energies)
    assign_generations(initial_block, blocks, steps)

    logger.info(
        "Cascade graph: %d descendant blocks, %d steps over %d generations",
        len(blocks), len(steps), 1 + max((b.generation for b in blocks), default=0),
    )
    return CascadeGraph(initial_block=initial_block, blocks=blocks, steps=steps)


__all__ = [
    "CascadeBlock",
    "CascadeStep",
    "CascadeGraph",
    "generate_descendants",
    "apply_shakes",
    "excited_configurations",
    "estimate_binding_energy",
    "group_blocks",
    "make_initial_block",
    "build_steps",
    "assign_generations",
    "build_cascade_graph",
]
