# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Tests for cascade graph construction with synthetic block energies.

Block energies come from an independent-electron lookup: every level of a
configuration sits at -sum q * B(nl) with fixed shell bindings B, so
removing an electron always costs energy and only inner-shell holes
filled by a displacement can decay by electron emission.

File: test_graph.py
Date: October, 2026
"""

from __future__ import annotations

from types import SimpleNamespace

import numpy as np
import pytest

from atomcascade.config import CascadeSpec
from atomcascade.errors import InvalidConfiguration
from atomcascade.cascade.graph import (
    CascadeStep,
    assign_generations,
    build_cascade_graph,
    generate_descendants,
    make_initial_block,
)
from atomcascade.processes.registry import default_registry
from atomcascade.structure.configuration import Configuration
from atomcascade.structure.subshell import Shell

Z = 10.0


# Shell binding energies (hartree); other shells are bound by 0.1
BINDING = {Shell(1, 0): 32.0, Shell(2, 0): 2.0, Shell(2, 1): 1.0}


def _independent_electrons(block):
    energies = [
        -sum(q * BINDING.get(shell, 0.1) for shell, q in conf.shells)
        for conf in block.configurations
    ]
    return SimpleNamespace(energies=np.array(energies))


def _flat(block):
    return SimpleNamespace(energies=np.array([-1.0]))


def _graph(**kwargs):
    spec = CascadeSpec(initial_configs=["1s 2s^2 2p^6"], **kwargs)
    return build_cascade_graph(spec, default_registry(), _independent_electrons, Z)


# ============================================================================
# Descendants
# ============================================================================

def test_descendants_lose_electrons_only():
    initial = [Configuration.parse("1s 2s^2 2p^6")]
    descendants = generate_descendants(initial, max_electron_loss=2)
    assert initial[0] not in descendants
    assert {c.n_electrons for c in descendants} == {8, 7}
    assert len(descendants) == len(set(descendants))


def test_frozen_shells_keep_occupation():
    initial = [Configuration.parse("1s^2 2s^2 2p^6")]
    descendants = generate_descendants(initial, 2, frozen=[Shell(1, 0)])
    assert descendants
    assert all(c.occupation(Shell(1, 0)) == 2 for c in descendants)


def test_graph_blocks_exclude_initial_configuration():
    graph = _graph(processes=["Auger"])
    initial = Configuration.parse("1s 2s^2 2p^6")
    assert graph.initial_block.configurations == (initial,)
    assert graph.initial_block.is_initial and graph.initial_block.generation == 0
    assert all(initial not in b.configurations for b in graph.blocks)
    assert {b.n_electrons for b in graph.blocks} == {8}


def test_shake_displacements_add_redistributions():
    plain = _graph(processes=["Auger"])
    shaken = _graph(processes=["Auger"], max_shake_displacements=1)
    names = {b.name for b in shaken.blocks}
    assert "1s^2 2s^2 2p^4" in names
    assert len(shaken.blocks) > len(plain.blocks)
    assert {b.n_electrons for b in shaken.blocks} == {8}


# ============================================================================
# Blocks and ordering
# ============================================================================

def test_block_order_is_reproducible():
    first = _graph(max_electron_loss=2, max_shake_displacements=1)
    second = _graph(max_electron_loss=2, max_shake_displacements=1)
    assert [b.name for b in first.blocks] == [b.name for b in second.blocks]
    assert [s.label for s in first.steps] == [s.label for s in second.steps]
    counts = [b.n_electrons for b in first.blocks]
    assert counts == sorted(counts, reverse=True)


def test_sca_groups_by_electron_count():
    graph = _graph(max_electron_loss=2, approach="sca")
    assert [b.name for b in graph.blocks] == ["N=8", "N=7"]
    assert sum(len(b.configurations) for b in graph.blocks) == len(
        _graph(max_electron_loss=2).blocks
    )


def test_unknown_approach_rejected():
    with pytest.raises(InvalidConfiguration):
        _graph(approach="exact")


def test_unregistered_process_rejected():
    with pytest.raises(InvalidConfiguration):
        _graph(processes=["Auger", "Compton"])


def test_initial_configs_must_share_electron_count():
    configs = [Configuration.parse("1s^2"), Configuration.parse("1s")]
    with pytest.raises(InvalidConfiguration):
        make_initial_block(configs, Z)


# ============================================================================
# Steps and generations
# ============================================================================

def test_auger_steps_follow_electron_loss():
    graph = _graph(processes=["Auger"], max_electron_loss=2, max_shake_displacements=1)
    assert graph.steps
    for step in graph.steps:
        assert step.final_block.n_electrons == step.initial_block.n_electrons - 1
        assert step.final_block.generation > step.initial_block.generation
        assert _independent_electrons(step.initial_block).energies.max() > \
            _independent_electrons(step.final_block).energies.min()
    assert graph.initial_block.generation == 0
    assert max(b.generation for b in graph.blocks) == 2


def test_auger_needs_inner_shell_refill():
    # Plain removal of an electron from a 1s-hole state never releases energy
    assert _graph(processes=["Auger"]).steps == []


def test_photo_needs_photon_energies():
    assert _graph(processes=["Photo"]).steps == []
    graph = _graph(processes=["Photo"], photon_energies=[5.0])
    assert graph.steps
    assert all(s.initial_block is graph.initial_block for s in graph.steps)


def test_radiative_steps_go_down_in_energy():
    graph = _graph(processes=["Radiative"])
    assert graph.steps
    for step in graph.steps:
        assert step.initial_block is not step.final_block
        assert step.initial_block is not graph.initial_block
        assert step.final_block.n_electrons == step.initial_block.n_electrons
        assert _independent_electrons(step.initial_block).energies.mean() > \
            _independent_electrons(step.final_block).energies.mean()


def test_radiative_steps_require_energy_ordering():
    # Equal energies: no radiative step
    spec = CascadeSpec(initial_configs=["1s 2s^2 2p^6"], processes=["Radiative"])
    assert build_cascade_graph(spec, default_registry(), _flat, Z).steps == []


def test_three_level_adds_excited_intermediates():
    assert _graph(processes=["PhotoExcAuto"]).steps == []
    graph = _graph(processes=["PhotoExcAuto"], shake_shells=["3p"])
    assert graph.steps
    routes = {(s.intermediate_block.name, s.final_block.name) for s in graph.steps}
    assert ("1s^1 2s^1 2p^6 3p^1", "1s^1 2s^2 2p^5") in routes
    # The intermediate must lie above the final block
    assert ("1s^1 2s^1 2p^6 3p^1", "1s^1 2s^1 2p^6") not in routes
    for step in graph.steps:
        assert step.intermediate_block is not None
        assert step.intermediate_block.n_electrons == graph.initial_block.n_electrons
        assert step.final_block.n_electrons == graph.initial_block.n_electrons - 1
        assert step.initial_block is graph.initial_block


def test_cycle_detected():
    a = make_initial_block([Configuration.parse("1s^2")], Z)
    b = make_initial_block([Configuration.parse("1s 2s")], Z)
    steps = [CascadeStep("Radiative", a, b), CascadeStep("Radiative", b, a)]
    with pytest.raises(InvalidConfiguration):
        assign_generations(a, [b], steps)
