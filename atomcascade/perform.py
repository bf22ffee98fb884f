# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Public operations.

Structure:
  - perform_structure:          configurations -> Multiplet (SCF + CI)
  - perform_diagonal_structure: configurations + orbitals -> CSF-diagonal Multiplet

Cascade:
  - perform_cascade_computation: CascadeSpec -> CascadeData
  - perform_cascade_simulation:  SimulationSpec + CascadeData -> distributions

Single process:
  - perform_process: ProcessRequest -> lines or pathways

Every operation receives an explicit ComputationContext and notifies its
reporters and result store after the core work is done.

File: atomcascade/perform.py
Date: October, 2026
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .cascade.executor import CascadeData, CascadeExecutor, StructureCache
from .cascade.graph import build_cascade_graph
from .cascade.simulation import simulate
from .config import AsfSettings, CascadeSpec, RunConfig, SimulationSpec
from .context import ComputationContext
from .errors import InvalidConfiguration
from .monitor.logger import MonitorLogger, remove_file_logging, setup_file_logging
from .monitor.reporters import ConsoleReporter, JsonReporter
from .monitor.storage import ResultStore, RunContext
from .processes.lines import Line, Pathway
from .structure.basis import build_basis
from .structure.ci import solve_diagonal
from .structure.configuration import Configuration
from .structure.multiplet import Multiplet
from .structure.orbitals import Orbital
from .structure.pipeline import compute_multiplet
from .structure.scf import attach_orbitals
from .structure.subshell import Subshell

logger = logging.getLogger(__name__)

ConfigLike = Union[Configuration, str]


def _multiplet_results(multiplet: Multiplet) -> Dict[str, Any]:
    basis = multiplet.basis
    return {
        "name": multiplet.name,
        "energies": multiplet.energies,
        "symmetries": [str(lev.symmetry) for lev in multiplet],
        "leading_csf": [lev.leading_csf() for lev in multiplet],
        "scf": basis.scf if basis is not None else None,
    }


# ============================================================================
# Structure
# ============================================================================

def perform_structure(
    configs: Iterable[ConfigLike],
    context: ComputationContext,
    asf_settings: Optional[AsfSettings] = None,
    name: str = "structure",
) -> Multiplet:
    """
    Levels of the configurations: basis -> SCF -> symmetry-block CI.

    Raises:
        InvalidConfiguration: Empty or malformed configurations, unknown
            SCF strategies
    """
    multiplet = compute_multiplet(
        configs, context.nuclear, context.grid, asf_settings,
        provider=context.provider, name=name,
    )
    context.notify("on_multiplet", multiplet)
    context.persist(name, _multiplet_results(multiplet))
    return multiplet


def perform_diagonal_structure(
    configs: Iterable[ConfigLike],
    orbitals: Optional[Mapping[Subshell, Orbital]],
    context: ComputationContext,
    asf_settings: Optional[AsfSettings] = None,
    name: str = "diagonal",
) -> Multiplet:
    """
    One level per CSF with its diagonal energy, on the given orbitals.

    Supplied orbitals are used as they are, without SCF iterations;
    missing ones are filled with hydrogenic orbitals. Without orbitals
    the basis is solved by the SCF of `asf_settings` first.
    """
    asf = asf_settings or AsfSettings()
    if orbitals is None:
        multiplet = compute_multiplet(
            configs, context.nuclear, context.grid,
            asf.model_copy(update={"diagonal_only": True}),
            provider=context.provider, name=name,
        )
    else:
        basis = attach_orbitals(build_basis(configs), context.nuclear, context.grid, orbitals)
        multiplet = solve_diagonal(
            basis, context.nuclear, context.grid, asf.ci, asf.plasma, context.provider, name,
        )
    context.notify("on_multiplet", multiplet)
    context.persist(name, _multiplet_results(multiplet))
    return multiplet


# ============================================================================
# Cascade
# ============================================================================

def perform_cascade_computation(
    spec: CascadeSpec,
    context: ComputationContext,
) -> CascadeData:
    """
    Build the cascade graph and compute the data of every step.

    Each block's structure is computed at most once; graph construction
    and step execution share the same cache.
    """
    cache = StructureCache(context, spec.asf)
    graph = build_cascade_graph(spec, context.registry, cache.get, context.nuclear.Z)

    executor = CascadeExecutor(context, spec, cache)
    executor.execute_all(graph.steps)

    data = CascadeData(spec=spec, graph=graph, cache=cache)
    logger.info(
        "Cascade %s: %d steps computed, %d structure computations",
        spec.name, len(graph.steps), cache.n_computed,
    )
    context.notify("on_blocks", graph.all_blocks)
    context.notify("on_steps", graph.steps)
    context.persist(spec.name, data.to_results())
    return data


def perform_cascade_simulation(
    simulation_spec: SimulationSpec,
    data: CascadeData,
    context: ComputationContext,
) -> Dict[str, Any]:
    """Propagate populations through a computed cascade."""
    distribution = simulate(simulation_spec, data)
    context.notify("on_distribution", simulation_spec.name, distribution)
    context.persist(simulation_spec.name, {"name": simulation_spec.name, **distribution})
    return distribution


# ============================================================================
# Single process
# ============================================================================

@dataclass(frozen=True)
class ProcessRequest:
    """
    One process between explicit configuration sets.

    Attributes:
        tag: Registered process tag
        initial_configs: Configurations of the initial multiplet
        final_configs: Configurations of the final multiplet
        intermediate_configs: Required by three-level processes
        asf: Structure settings shared by all multiplets
        settings: Kernel parameters (e.g. photon_energies)
    """

    tag: str
    initial_configs: List[ConfigLike]
    final_configs: List[ConfigLike]
    intermediate_configs: List[ConfigLike] = field(default_factory=list)
    asf: AsfSettings = field(default_factory=AsfSettings)
    settings: Dict[str, Any] = field(default_factory=dict)


def perform_process(
    request: ProcessRequest,
    context: ComputationContext,
) -> Union[List[Line], List[Pathway]]:
    """Lines (two-level kernels) or pathways (three-level kernels) of one process."""
    kernel = context.registry.get(request.tag)
    if kernel.three_level and not request.intermediate_configs:
        raise InvalidConfiguration(f"Process {request.tag!r} needs intermediate configurations")

    def structure(configs: List[ConfigLike], name: str) -> Multiplet:
        multiplet = compute_multiplet(
            configs, context.nuclear, context.grid, request.asf,
            provider=context.provider, name=name,
        )
        context.notify("on_multiplet", multiplet)
        return multiplet

    initial = structure(request.initial_configs, "initial")
    final = structure(request.final_configs, "final")
    settings = dict(request.settings)

    if kernel.three_level:
        intermediate = structure(request.intermediate_configs, "intermediate")
        result: Union[List[Line], List[Pathway]] = kernel.compute_pathways(
            initial, intermediate, final, context.nuclear, context.grid, settings
        )
        records = {
            "levels": [(p.initial.index, p.intermediate.index, p.final.index) for p in result],
            "cross_section": [p.cross_section for p in result],
        }
    else:
        result = kernel.compute_lines(initial, final, context.nuclear, context.grid, settings)
        records = {
            "levels": [(ln.initial.index, ln.final.index) for ln in result],
            "energy": [ln.energy for ln in result],
            "rate": [ln.rate for ln in result],
            "cross_section": [ln.cross_section for ln in result],
        }

    logger.info("Process %s: %d results", request.tag, len(result))
    context.persist(request.tag, {"tag": request.tag, **records})
    return result


# ============================================================================
# Config-driven run
# ============================================================================

def run(
    config: Union[RunConfig, str, Path],
    root_dir: Optional[Union[str, Path]] = None,
) -> Dict[str, Any]:
    """
    Execute a RunConfig: structure (if configs), cascade and simulation.

    Output goes to a timestamped run directory with JSON/NPZ results,
    a line-delimited event log and the package log file.
    """
    cfg = config if isinstance(config, RunConfig) else RunConfig.load(config)
    run_ctx = RunContext(root_dir or cfg.output_dir or "runs", cfg.name)
    run_ctx.save_config(cfg)
    handler = setup_file_logging(run_ctx.root, cfg.log_level)

    console = ConsoleReporter(MonitorLogger(file=run_ctx.log_file))
    context = cfg.build_context(
        reporters=[console, JsonReporter(run_ctx.root / "events.jsonl")],
        store=ResultStore.for_run(run_ctx),
    )

    outputs: Dict[str, Any] = {"run_dir": run_ctx.root}
    try:
        console.logger.header(f"Run {run_ctx.run_id}")
        if cfg.configs:
            outputs["structure"] = perform_structure(cfg.configs, context, cfg.asf)
        if cfg.cascade is not None:
            data = perform_cascade_computation(cfg.cascade, context)
            outputs["cascade"] = data
            if cfg.simulation is not None:
                outputs["simulation"] = perform_cascade_simulation(cfg.simulation, data, context)
        elif cfg.simulation is not None:
            raise InvalidConfiguration("Simulation requires a cascade specification")
        console.logger.info(f"Results written to {run_ctx.root}")
    finally:
        remove_file_logging(handler)
        run_ctx.close()
    return outputs


__all__ = [
    "perform_structure",
    "perform_diagonal_structure",
    "perform_cascade_computation",
    "perform_cascade_simulation",
    "ProcessRequest",
    "perform_process",
    "run",
]
