# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Tests for probability propagation on a synthetic three-block cascade.

    A (N=3) --rates 1, 3--> B (N=2) --rate 2--> C (N=1)

File: test_simulation.py
Date: October, 2026
"""

from __future__ import annotations

import pytest

from atomcascade.cascade.executor import CascadeData
from atomcascade.cascade.graph import CascadeBlock, CascadeGraph, CascadeStep, assign_generations
from atomcascade.cascade.simulation import propagate, simulate
from atomcascade.config import CascadeSpec, SimulationSpec
from atomcascade.errors import InvalidConfiguration, UnimplementedProperty
from atomcascade.processes.lines import Line, Pathway


class StaticCache:
    """Block -> Multiplet stand-in for the structure cache."""

    def __init__(self, multiplets):
        self.multiplets = multiplets
        self.n_computed = 0

    def get(self, block):
        return self.multiplets[block]


@pytest.fixture
def cascade(multiplet_factory):
    a = CascadeBlock("A", (), 3, is_initial=True)
    b = CascadeBlock("B", (), 2)
    c = CascadeBlock("C", (), 1)
    ma = multiplet_factory("A", [(1, "+", 4.0), (1, "+", 5.0)])
    mb = multiplet_factory("B", [(0, "+", 1.0), (2, "+", 2.0)])
    mc = multiplet_factory("C", [(1, "+", 0.0)])

    # Level indices follow energy order: A[1] (5.0) decays, A[0] (4.0) is stable
    ab = CascadeStep("Auger", a, b, lines=[
        Line(ma[1], mb[0], 4.0, rate=1.0),
        Line(ma[1], mb[1], 3.0, rate=3.0),
    ], computed=True)
    bc = CascadeStep("Auger", b, c, lines=[Line(mb[1], mc[0], 2.0, rate=2.0)], computed=True)

    graph = CascadeGraph(initial_block=a, blocks=[b, c], steps=[ab, bc])
    assign_generations(a, [b, c], graph.steps)
    spec = CascadeSpec(initial_configs=["1s^2 2s"])
    data = CascadeData(spec=spec, graph=graph, cache=StaticCache({a: ma, b: mb, c: mc}))
    return data, (a, b, c), (ma, mb, mc)


def _spec(**kwargs) -> SimulationSpec:
    kwargs.setdefault("properties", ["ion-distribution", "final-level-distribution"])
    return SimulationSpec(**kwargs)


# ============================================================================
# Propagation
# ============================================================================

def test_branching_fractions(cascade):
    data, _, _ = cascade
    result = simulate(_spec(initial_occupations=[(1, 0.6), (0, 0.4)]), data)
    assert result["ion-distribution"] == pytest.approx({3: 0.4, 2: 0.15, 1: 0.45})
    assert result["final-level-distribution"] == pytest.approx({
        ("A", 0): 0.4, ("B", 0): 0.15, ("C", 0): 0.45,
    })
    assert list(result["ion-distribution"]) == [3, 2, 1]


@pytest.mark.parametrize("occupations", [
    [(1, 1.0)],
    [(0, 0.25), (1, 0.75)],
    [(0, 2.0), (1, 3.5)],
])
def test_population_conserved(cascade, occupations):
    data, _, _ = cascade
    result = simulate(_spec(initial_occupations=occupations), data)
    total = sum(p for _, p in occupations)
    assert sum(result["ion-distribution"].values()) == pytest.approx(total, abs=1e-9)
    assert sum(result["final-level-distribution"].values()) == pytest.approx(total, abs=1e-9)


def test_generation_order_respected(cascade):
    data, (a, b, c), (ma, mb, mc) = cascade
    # Direct A -> C shortcut listed first; C must still collect B's inflow
    shortcut = CascadeStep("Auger", a, c, lines=[Line(ma[1], mc[0], 5.0, rate=4.0)])
    data.graph.steps.insert(0, shortcut)
    assign_generations(a, [b, c], data.graph.steps)
    assert (a.generation, b.generation, c.generation) == (0, 1, 2)

    pops = propagate(data, [(1, 1.0)])
    assert pops[c][0] == pytest.approx(0.5 + 0.5 * 0.75)
    assert pops[b][0] == pytest.approx(0.5 * 0.25)


# ============================================================================
# Ionizing flows
# ============================================================================

def _add_photo(data, a, b, ma, mb):
    photo = CascadeStep("Photo", a, b, lines=[
        Line(ma[1], mb[0], 1.0, cross_section=1.0, photon_energy=10.0),
    ])
    data.graph.steps.append(photo)


def test_ionizing_lines_need_flux(cascade):
    data, (a, b, _), (ma, mb, _) = cascade
    _add_photo(data, a, b, ma, mb)
    with pytest.raises(InvalidConfiguration):
        simulate(_spec(initial_occupations=[(1, 1.0)]), data)


def test_unpopulated_ionizing_level_needs_no_flux(cascade):
    data, (a, b, _), (ma, mb, _) = cascade
    _add_photo(data, a, b, ma, mb)
    result = simulate(_spec(initial_occupations=[(0, 1.0)]), data)
    assert result["ion-distribution"][3] == pytest.approx(1.0)


def test_flux_scales_cross_sections(cascade):
    data, (a, b, _), (ma, mb, _) = cascade
    _add_photo(data, a, b, ma, mb)
    # Decay rates 1 + 3 compete with sigma * flux = 4 into B[0]
    pops = propagate(data, [(1, 1.0)], photon_flux=4.0)
    assert pops[b][0] == pytest.approx((1.0 + 4.0) / 8.0)


def test_pathways_flow_to_final_level(cascade):
    data, (a, _, c), (ma, mb, mc) = cascade
    data.graph.steps[:] = [CascadeStep("PhotoExcAuto", a, c, intermediate_block=None, pathways=[
        Pathway(ma[0], mb[1], mc[0], 1.0, 2.0, cross_section={"Babushkin": 0.5}),
    ])]
    assign_generations(a, [data.graph.blocks[0], c], data.graph.steps)
    pops = propagate(data, [(0, 1.0)], photon_flux=1.0)
    assert pops[c][0] == pytest.approx(1.0)
    assert pops[a].sum() == 0.0


# ============================================================================
# Validation
# ============================================================================

@pytest.mark.parametrize("kind", ["electron-intensity", "photon-intensity", "electron-coincidence"])
def test_unimplemented_properties_fail_before_work(cascade, kind):
    data, _, _ = cascade
    # The out-of-range occupation would fail later; the property check comes first
    with pytest.raises(UnimplementedProperty):
        simulate(_spec(properties=["ion-distribution", kind], initial_occupations=[(99, 1.0)]), data)


def test_unimplemented_property_is_not_implemented_error(cascade):
    data, _, _ = cascade
    with pytest.raises(NotImplementedError):
        simulate(_spec(properties=["photon-intensity"]), data)


@pytest.mark.parametrize("kwargs", [
    {"method": "monte-carlo"},
    {"properties": ["spectrum"]},
    {"initial_occupations": [(2, 1.0)]},
    {"initial_occupations": [(0, -1.0)]},
])
def test_invalid_requests_rejected(cascade, kwargs):
    data, _, _ = cascade
    with pytest.raises(InvalidConfiguration):
        simulate(_spec(**kwargs), data)
