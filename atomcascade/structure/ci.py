# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Symmetry-block configuration interaction.

Workflow:
  1. Partition basis.csfs by (2J, parity) in order of first appearance
  2. Per block, assemble H from angular coefficients x radial integrals
  3. Diagonalize (real symmetric), scatter eigenvectors into the full
     CSF space, one Level per eigenpair
  4. Stable-sort all levels by energy and renumber

The diagonal-only path skips step 3 and assigns every CSF its own level
with energy H_ii; the symmetry of each level is read from its dominant
CSF (see dominant_csf).

File: atomcascade/structure/ci.py
Date: October, 2026
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import scipy.linalg
import scipy.sparse as sp

from ..config import CiSettings, PlasmaSettings
from ..errors import BasisConsistencyError, InvalidConfiguration, MixingAmbiguity
from ..nuclear import NuclearModel, RadialGrid
from .angular import AngularCoefficientProvider, AverageConfigurationCoefficients
from .basis import Basis
from .interaction import RadialIntegrals
from .multiplet import Level, Multiplet
from .subshell import LevelSymmetry

logger = logging.getLogger(__name__)


# ============================================================================
# Symmetry partition
# ============================================================================

@dataclass(frozen=True)
class SymmetryBlock:
    """CSF indices (ascending) sharing one LevelSymmetry."""
    symmetry: LevelSymmetry
    indices: tuple[int, ...]

    @property
    def size(self) -> int:
        return len(self.indices)


def symmetry_blocks(basis: Basis) -> list[SymmetryBlock]:
    """Disjoint, exhaustive partition of basis.csfs in first-appearance order."""
    groups: dict[LevelSymmetry, list[int]] = {}
    for idx, csf in enumerate(basis.csfs):
        groups.setdefault(csf.symmetry, []).append(idx)
    return [SymmetryBlock(sym, tuple(idx)) for sym, idx in groups.items()]


# ============================================================================
# Hamiltonian
# ============================================================================

def _coo_to_dense(
    rows: list[int],
    cols: list[int],
    vals: list[float],
    n: int,
) -> np.ndarray:
    """Sum COO triplets (duplicates added) into a dense symmetric matrix."""
    coo = sp.coo_matrix(
        (np.asarray(vals, dtype=np.float64),
         (np.asarray(rows, dtype=np.int64), np.asarray(cols, dtype=np.int64))),
        shape=(n, n),
    )
    dense = coo.toarray()
    upper = np.triu(dense, 1)
    return np.diag(np.diag(dense)) + upper + upper.T


def _element(
    basis: Basis,
    r: int,
    s: int,
    integrals: RadialIntegrals,
    provider: AngularCoefficientProvider,
    settings: CiSettings,
) -> float:
    subshells = basis.subshells
    csf_r, csf_s = basis.csfs[r], basis.csfs[s]

    value = 0.0
    for term in provider.one_body(subshells, csf_r, csf_s):
        value += term.coeff * integrals.one_electron(term.a)
    for term in provider.two_body(subshells, csf_r, csf_s):
        if settings.coulomb:
            value += term.coeff * integrals.slater(term.k, term.a, term.c, term.b, term.d)
        if settings.breit and term.exchange:
            value += term.coeff * integrals.breit(term.k, term.a, term.c)
    return value


def hamiltonian_matrix(
    basis: Basis,
    indices: Sequence[int],
    integrals: RadialIntegrals,
    provider: AngularCoefficientProvider,
    settings: CiSettings,
) -> np.ndarray:
    """H restricted to the CSFs at `indices` (upper triangle mirrored)."""
    rows, cols, vals = [], [], []
    for i, r in enumerate(indices):
        for j in range(i, len(indices)):
            h = _element(basis, r, indices[j], integrals, provider, settings)
            if h != 0.0:
                rows.append(i)
                cols.append(j)
                vals.append(h)
    return _coo_to_dense(rows, cols, vals, len(indices))


def _integrals(
    basis: Basis,
    nuclear: NuclearModel,
    grid: RadialGrid,
    plasma: Optional[PlasmaSettings],
) -> RadialIntegrals:
    if not basis.is_solved:
        missing = [str(s) for s in basis.subshells if s not in basis.orbitals]
        raise InvalidConfiguration(f"Basis has no orbitals for {missing}; run the SCF first")
    return RadialIntegrals(basis.orbitals, nuclear, grid, plasma, n_electrons=basis.n_electrons)


# ============================================================================
# Dominant CSF
# ============================================================================

def dominant_csf(vector: np.ndarray, settings: Optional[CiSettings] = None) -> int:
    """
    Index of the component whose squared coefficient exceeds dominant_weight.

    Components are scanned in order; a squared coefficient in
    (mixing_floor, dominant_weight] met before a dominant one is fatal.

    Raises:
        MixingAmbiguity: No single dominant component
    """
    settings = settings or CiSettings()
    weights = np.asarray(vector, dtype=np.float64) ** 2
    for idx, w in enumerate(weights):
        if w > settings.dominant_weight:
            return idx
        if w > settings.mixing_floor:
            raise MixingAmbiguity(
                f"Component {idx} has squared weight {w:.4f} in "
                f"({settings.mixing_floor}, {settings.dominant_weight}]",
                weights=weights,
            )
    raise MixingAmbiguity("No component exceeds the dominant weight", weights=weights)


def assign_symmetry(
    vector: np.ndarray, basis: Basis, settings: Optional[CiSettings] = None,
) -> LevelSymmetry:
    """(J, parity) of the dominant CSF of a mixing vector."""
    return basis.csfs[dominant_csf(vector, settings)].symmetry


# ============================================================================
# Solvers
# ============================================================================

def solve_ci(
    basis: Basis,
    nuclear: NuclearModel,
    grid: RadialGrid,
    settings: Optional[CiSettings] = None,
    plasma: Optional[PlasmaSettings] = None,
    provider: Optional[AngularCoefficientProvider] = None,
    name: str = "",
) -> Multiplet:
    """
    Full symmetry-block CI on a solved basis.

    Returns:
        Multiplet with exactly len(basis.csfs) levels, energies non-decreasing
    """
    settings = settings or CiSettings()
    provider = provider or AverageConfigurationCoefficients()
    integrals = _integrals(basis, nuclear, grid, plasma)
    n_csf = basis.size

    levels: list[Level] = []
    for block in symmetry_blocks(basis):
        hmat = hamiltonian_matrix(basis, block.indices, integrals, provider, settings)
        if np.count_nonzero(hmat - np.diag(np.diag(hmat))) == 0:
            # Already diagonal: keep CSFs as eigenvectors exactly
            evals = np.diag(hmat).copy()
            evecs = np.eye(block.size)
        else:
            evals, evecs = scipy.linalg.eigh(hmat)

        idx = np.asarray(block.indices, dtype=np.int64)
        for col in range(block.size):
            vec = np.zeros(n_csf, dtype=np.float64)
            vec[idx] = evecs[:, col]
            levels.append(Level(
                two_J=block.symmetry.two_j,
                parity=block.symmetry.parity,
                energy=float(evals[col]),
                eigenvector=vec,
                basis=basis,
            ))
        logger.debug("CI block %s: %d CSFs", block.symmetry, block.size)

    multiplet = Multiplet.from_levels(name or _default_name(basis), levels)
    if len(multiplet) != n_csf:
        raise BasisConsistencyError(
            f"CI produced {len(multiplet)} levels for {n_csf} CSFs"
        )
    return multiplet


def solve_diagonal(
    basis: Basis,
    nuclear: NuclearModel,
    grid: RadialGrid,
    settings: Optional[CiSettings] = None,
    plasma: Optional[PlasmaSettings] = None,
    provider: Optional[AngularCoefficientProvider] = None,
    name: str = "",
) -> Multiplet:
    """One level per CSF with energy H_ii; no CI mixing."""
    settings = settings or CiSettings()
    provider = provider or AverageConfigurationCoefficients()
    integrals = _integrals(basis, nuclear, grid, plasma)
    n_csf = basis.size

    levels = []
    for r in range(n_csf):
        energy = _element(basis, r, r, integrals, provider, settings)
        vec = np.zeros(n_csf, dtype=np.float64)
        vec[r] = 1.0
        sym = assign_symmetry(vec, basis, settings)
        levels.append(Level(sym.two_j, sym.parity, energy, vec, basis))
    return Multiplet.from_levels(name or _default_name(basis), levels)


def _default_name(basis: Basis) -> str:
    return " + ".join(str(c) for c in basis.configurations)


__all__ = [
    "SymmetryBlock",
    "symmetry_blocks",
    "hamiltonian_matrix",
    "dominant_csf",
    "assign_symmetry",
    "solve_ci",
    "solve_diagonal",
]
