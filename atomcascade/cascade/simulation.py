# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Probability propagation over a computed cascade.

Blocks are visited in non-decreasing generation; every edge raises the
generation, so a block's inbound population is complete when it is read.
A populated level with outbound flows empties completely into its
targets with branching fractions

    b_k = R_k / sum_j R_j,   R = rate, or sigma * photon_flux for ionizing lines

and levels without outbound flows keep their population. Pathways flow
directly from their initial to their final level.

File: atomcascade/cascade/simulation.py
Date: October, 2026
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Optional, Union

import numpy as np

from ..config import PropertyKind, SimulationMethod, SimulationSpec
from ..errors import InvalidConfiguration, UnimplementedProperty
from ..processes.lines import Line, Pathway
from .executor import CascadeData
from .graph import CascadeBlock

logger = logging.getLogger(__name__)

IMPLEMENTED_PROPERTIES = (
    PropertyKind.ION_DISTRIBUTION,
    PropertyKind.FINAL_LEVEL_DISTRIBUTION,
)

Flow = tuple[CascadeBlock, int, Union[Line, Pathway]]


def _resolve(spec: SimulationSpec) -> list[PropertyKind]:
    try:
        SimulationMethod(spec.method)
    except ValueError as exc:
        raise InvalidConfiguration(f"Unknown simulation method: {spec.method!r}") from exc

    kinds = []
    for name in spec.properties:
        try:
            kind = PropertyKind(name)
        except ValueError as exc:
            raise InvalidConfiguration(f"Unknown simulation property: {name!r}") from exc
        if kind not in IMPLEMENTED_PROPERTIES:
            raise UnimplementedProperty(f"Simulation property {kind.value!r} is not implemented")
        kinds.append(kind)
    return kinds


def _outgoing_flows(data: CascadeData, block: CascadeBlock) -> dict[int, list[Flow]]:
    """Level index -> (target block, target level index, line or pathway)."""
    flows: dict[int, list[Flow]] = defaultdict(list)
    for step in data.graph.outgoing(block):
        for line in step.lines:
            flows[line.initial.index].append((step.final_block, line.final.index, line))
        for pathway in step.pathways:
            flows[pathway.initial.index].append((step.final_block, pathway.final.index, pathway))
    return flows


def _flow_rate(item: Union[Line, Pathway], photon_flux: Optional[float], source: str) -> float:
    try:
        return item.flow_rate(photon_flux)
    except ValueError as exc:
        raise InvalidConfiguration(
            f"Populated level {source} has ionizing transitions but no photon_flux was given"
        ) from exc


def propagate(
    data: CascadeData,
    occupations: list[tuple[int, float]],
    photon_flux: Optional[float] = None,
) -> dict[CascadeBlock, np.ndarray]:
    """Final level populations per block."""
    graph = data.graph
    populations = {b: np.zeros(len(data.multiplet(b))) for b in graph.all_blocks}

    initial = populations[graph.initial_block]
    for idx, pop in occupations:
        if not 0 <= idx < initial.size:
            raise InvalidConfiguration(
                f"Initial occupation index {idx} outside 0..{initial.size - 1}"
            )
        if pop < 0.0:
            raise InvalidConfiguration(f"Negative initial population {pop} for level {idx}")
        initial[idx] += pop

    for block in graph.by_generation():
        pops = populations[block]
        flows = _outgoing_flows(data, block)
        for level, outgoing in sorted(flows.items()):
            if pops[level] <= 0.0:
                continue
            source = f"{block.name}[{level}]"
            rates = np.array([_flow_rate(item, photon_flux, source) for *_, item in outgoing])
            total = rates.sum()
            if total <= 0.0:
                continue
            moved = pops[level]
            for (target, target_level, _), rate in zip(outgoing, rates):
                populations[target][target_level] += moved * rate / total
            pops[level] = 0.0
    return populations


def simulate(spec: SimulationSpec, data: CascadeData) -> dict[str, Any]:
    """
    Propagate the initial populations and aggregate the requested properties.

    Returns:
        Property name -> distribution; ion-distribution is keyed by electron
        count, final-level-distribution by (block name, level index).

    Raises:
        UnimplementedProperty: A requested property has no implementation
        InvalidConfiguration: Unknown method/property, bad initial
            occupations, or ionizing flow without photon_flux
    """
    kinds = _resolve(spec)
    populations = propagate(data, list(spec.initial_occupations), spec.photon_flux)

    result: dict[str, Any] = {}
    for kind in kinds:
        if kind is PropertyKind.ION_DISTRIBUTION:
            ions: dict[int, float] = defaultdict(float)
            for block, pops in populations.items():
                ions[block.n_electrons] += float(pops.sum())
            result[kind.value] = {n: ions[n] for n in sorted(ions, reverse=True)}
        else:
            result[kind.value] = {
                (block.name, idx): float(p)
                for block, pops in populations.items()
                for idx, p in enumerate(pops)
                if p > 0.0
            }

    total_in = sum(p for _, p in spec.initial_occupations)
    total_out = sum(float(p.sum()) for p in populations.values())
    logger.info(
        "Simulation %s: population in %.10g, out %.10g", spec.name, total_in, total_out
    )
    return result


__all__ = ["simulate", "propagate", "IMPLEMENTED_PROPERTIES"]
