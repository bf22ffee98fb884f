# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Shared fixtures: neon nucleus, a coarse radial grid and synthetic levels.

File: conftest.py
Date: October, 2026
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pytest

from atomcascade.config import AsfSettings, ScfSettings
from atomcascade.context import ComputationContext
from atomcascade.nuclear import NuclearModel, RadialGrid
from atomcascade.structure.multiplet import Level, Multiplet
from atomcascade.structure.subshell import Parity


@pytest.fixture
def neon() -> NuclearModel:
    return NuclearModel(Z=10.0)


@pytest.fixture
def grid() -> RadialGrid:
    return RadialGrid(r_min=1e-5, r_max=60.0, n_points=801)


@pytest.fixture
def context(neon: NuclearModel, grid: RadialGrid) -> ComputationContext:
    return ComputationContext(nuclear=neon, grid=grid)


@pytest.fixture
def fast_asf() -> AsfSettings:
    """Short SCF for tests that only need some converged-ish orbitals."""
    return AsfSettings(scf=ScfSettings(max_iterations=10, accuracy=1e-6))


@pytest.fixture
def converged_asf() -> AsfSettings:
    """SCF run to convergence, for tests comparing total energies."""
    return AsfSettings(scf=ScfSettings(max_iterations=200, accuracy=1e-6))


def make_multiplet(name: str, states: Sequence[tuple[int, str, float]]) -> Multiplet:
    """Multiplet of bare levels from (2J, parity sign, energy) triples."""
    levels = [
        Level(two_J=two_j, parity=Parity(p), energy=e, eigenvector=np.ones(1), basis=None)
        for two_j, p, e in states
    ]
    return Multiplet.from_levels(name, levels)


@pytest.fixture
def multiplet_factory():
    return make_multiplet
