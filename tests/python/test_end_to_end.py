# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
End-to-end tests of the public operations with reporters and storage.

File: test_end_to_end.py
Date: October, 2026
"""

from __future__ import annotations

import json

import numpy as np
import pytest

from atomcascade.config import (
    AsfSettings,
    CascadeSpec,
    GridConfig,
    NuclearConfig,
    RunConfig,
    ScfSettings,
    SimulationSpec,
)
from atomcascade.errors import InvalidConfiguration
from atomcascade.monitor.reporters import JsonReporter
from atomcascade.monitor.storage import ResultStore
from atomcascade.perform import (
    ProcessRequest,
    perform_cascade_computation,
    perform_cascade_simulation,
    perform_diagonal_structure,
    perform_process,
    perform_structure,
    run,
)
from atomcascade.structure.basis import build_basis
from atomcascade.structure.ci import solve_diagonal
from atomcascade.structure.orbitals import hydrogenic_orbital
from atomcascade.structure.scf import solve_scf
from atomcascade.structure.subshell import Parity, Subshell


@pytest.fixture
def photo_spec(fast_asf) -> CascadeSpec:
    return CascadeSpec(
        name="ne-photo",
        initial_configs=["1s^2 2s^2 2p^6"],
        frozen_shells=["1s"],
        processes=["Photo"],
        photon_energies=[50.0],
        asf=fast_asf,
    )


# ============================================================================
# Structure
# ============================================================================

def test_closed_shell_structure(context, fast_asf):
    multiplet = perform_structure(["1s^2 2s^2 2p^6"], context, fast_asf)
    assert len(multiplet) == 1
    level = multiplet[0]
    assert level.two_J == 0 and level.parity is Parity.PLUS
    assert level.basis.is_solved
    # Neon total energy is about -128.5 hartree
    assert -150.0 < level.energy < -110.0


def test_diagonal_structure_uses_given_orbitals(context, fast_asf, neon, grid):
    configs = ["1s^2 2s^2 2p^5"]
    bare = solve_scf(build_basis(configs), neon, grid, ScfSettings(method="pureNuclear"))
    orbitals = bare.orbitals
    diagonal = perform_diagonal_structure(configs, orbitals, context, fast_asf)

    assert len(diagonal) == bare.size
    for s, orb in orbitals.items():
        assert diagonal.basis.orbitals[s] is orb
    assert diagonal.basis.scf.method == "fixed" and diagonal.basis.scf.iterations == 0
    for level in diagonal:
        assert np.count_nonzero(level.eigenvector) == 1
    np.testing.assert_allclose(diagonal.energies, solve_diagonal(bare, neon, grid).energies)


def test_diagonal_structure_fills_missing_orbitals(context, grid):
    supplied = {Subshell.parse("1s"): hydrogenic_orbital(Subshell.parse("1s"), 9.5, grid)}
    diagonal = perform_diagonal_structure(["1s^2 2s^1"], supplied, context)
    assert diagonal.basis.orbitals[Subshell.parse("1s")] is supplied[Subshell.parse("1s")]
    assert diagonal.basis.orbitals[Subshell.parse("2s")].z_eff == context.nuclear.Z


# ============================================================================
# Cascade and simulation
# ============================================================================

def test_photoionization_cascade_moves_all_population(context, photo_spec):
    data = perform_cascade_computation(photo_spec, context)
    sim = SimulationSpec(
        properties=["ion-distribution", "final-level-distribution"],
        photon_flux=1.0,
    )
    result = perform_cascade_simulation(sim, data, context)
    ions = result["ion-distribution"]
    assert ions[10] == pytest.approx(0.0, abs=1e-12)
    assert ions[9] == pytest.approx(1.0, abs=1e-9)
    assert sum(result["final-level-distribution"].values()) == pytest.approx(1.0, abs=1e-9)


def test_fluorine_like_photoionization_blocks(context, fast_asf):
    spec = CascadeSpec(
        name="f-like-photo",
        initial_configs=["1s^2 2s^2 2p^5"],
        max_electron_loss=1,
        frozen_shells=["1s"],
        processes=["Photo"],
        photon_energies=[50.0],
        asf=fast_asf,
    )
    data = perform_cascade_computation(spec, context)
    graph = data.graph

    assert len(graph.blocks) == 2
    assert all(b.n_electrons == 8 for b in graph.blocks)
    assert len(graph.steps) == 2
    assert all(s.tag == "Photo" for s in graph.steps)

    initial = data.initial_multiplet
    assert len(initial) == 2
    assert sorted((lev.two_J, lev.parity) for lev in initial) == [
        (1, Parity.MINUS), (3, Parity.MINUS),
    ]
    sizes = {b.name: len(data.multiplet(b)) for b in graph.blocks}
    assert sizes == {"1s^2 2s^1 2p^5": 4, "1s^2 2s^2 2p^4": 5}


def test_photoionization_without_flux_fails(context, photo_spec):
    data = perform_cascade_computation(photo_spec, context)
    with pytest.raises(InvalidConfiguration):
        perform_cascade_simulation(SimulationSpec(), data, context)


def test_ground_state_does_not_autoionize(context, converged_asf):
    spec = CascadeSpec(
        name="ne-auger",
        initial_configs=["1s^2 2s^2 2p^6"],
        frozen_shells=["1s"],
        processes=["Auger"],
        asf=converged_asf,
    )
    data = perform_cascade_computation(spec, context)
    assert len(data.graph.blocks) == 2
    assert data.graph.steps == []

    ions = perform_cascade_simulation(SimulationSpec(), data, context)["ion-distribution"]
    assert ions[10] == pytest.approx(1.0)
    assert ions[9] == pytest.approx(0.0)


def test_inner_shell_excitation_autoionizes(context, fast_asf):
    spec = CascadeSpec(
        name="ne-exc-auto",
        initial_configs=["1s^2 2s^2 2p^6"],
        shake_shells=["3p"],
        processes=["PhotoExcAuto"],
        asf=fast_asf,
    )
    data = perform_cascade_computation(spec, context)
    steps = data.graph.steps
    assert steps and all(s.tag == "PhotoExcAuto" and s.computed for s in steps)

    routes = {(s.intermediate_block.name, s.final_block.name) for s in steps}
    assert ("1s^1 2s^2 2p^6 3p^1", "1s^2 2s^2 2p^5") in routes

    pathways = [p for s in steps for p in s.pathways]
    assert pathways
    for p in pathways:
        assert p.excitation_energy >= 0.0 and p.decay_energy >= 0.0
        assert p.intermediate.energy > p.final.energy

    result = perform_cascade_simulation(SimulationSpec(photon_flux=1.0), data, context)
    ions = result["ion-distribution"]
    assert ions[10] == pytest.approx(0.0, abs=1e-12)
    assert ions[9] == pytest.approx(1.0, abs=1e-9)


def test_reporters_and_store_receive_results(context, photo_spec, tmp_path):
    context.reporters.append(JsonReporter(tmp_path / "events.jsonl"))
    context.store = ResultStore(tmp_path / "results")

    data = perform_cascade_computation(photo_spec, context)
    perform_cascade_simulation(SimulationSpec(photon_flux=2.0), data, context)

    events = [json.loads(line) for line in (tmp_path / "events.jsonl").read_text().splitlines()]
    assert [e["event"] for e in events] == ["blocks", "steps", "distribution"]
    assert len(events[0]["blocks"]) == 3

    saved = context.store.load("ne-photo")
    assert saved["n_structure_computations"] == 3
    assert isinstance(saved["blocks"][0]["multiplet"]["energies"], np.ndarray)
    np.testing.assert_allclose(
        saved["blocks"][0]["multiplet"]["energies"], data.initial_multiplet.energies,
    )
    assert context.store.load("simulation")["ion-distribution"]["9"] == pytest.approx(1.0)


# ============================================================================
# Single process
# ============================================================================

def test_single_photo_process(context, fast_asf):
    request = ProcessRequest(
        tag="Photo",
        initial_configs=["1s^2 2s^2 2p^6"],
        final_configs=["1s^2 2s^2 2p^5"],
        asf=fast_asf,
        settings={"photon_energies": [50.0]},
    )
    lines = perform_process(request, context)
    assert len(lines) == 2
    assert all(ln.ionizing and ln.energy > 0.0 for ln in lines)


def test_three_level_process_needs_intermediate(context):
    request = ProcessRequest(
        tag="PhotoExcAuto",
        initial_configs=["1s^2 2s^2"],
        final_configs=["1s^2 2s"],
    )
    with pytest.raises(InvalidConfiguration):
        perform_process(request, context)


# ============================================================================
# Config-driven run
# ============================================================================

def test_run_from_config(tmp_path):
    asf = AsfSettings(scf=ScfSettings(max_iterations=10, accuracy=1e-6))
    cfg = RunConfig(
        name="neon",
        nuclear=NuclearConfig(Z=10.0),
        grid=GridConfig(r_max=60.0, n_points=801),
        configs=["1s^2 2s^2 2p^6"],
        asf=asf,
        cascade=CascadeSpec(
            initial_configs=["1s^2 2s^2 2p^6"],
            frozen_shells=["1s"],
            processes=["Photo"],
            photon_energies=[50.0],
            asf=asf,
        ),
        simulation=SimulationSpec(photon_flux=1.0),
    )
    outputs = run(cfg, root_dir=tmp_path)

    run_dir = outputs["run_dir"]
    assert run_dir.parent == tmp_path and run_dir.name.endswith("_neon")
    for name in ("config.json", "events.jsonl", "atomcascade.log", "stdout.log",
                 "structure.json", "cascade.json", "simulation.json"):
        assert (run_dir / name).exists(), name
    assert outputs["simulation"]["ion-distribution"][9] == pytest.approx(1.0)


def test_simulation_without_cascade_rejected(tmp_path):
    cfg = RunConfig(
        nuclear=NuclearConfig(Z=10.0),
        grid=GridConfig(n_points=201),
        simulation=SimulationSpec(),
    )
    with pytest.raises(InvalidConfiguration):
        run(cfg, root_dir=tmp_path)
