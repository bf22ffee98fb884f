# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Self-consistent field refinement of the orbitals of a Basis.

Each orbital is a screened hydrogenic Dirac orbital. Its effective charge
is the Rayleigh-Ritz solution of the radial problem in the current
mean-field potential V_a(r), restricted to the hydrogenic family:

    Z*(a)    = argmin_Z  eps_a(Z),   eps_a(Z) = <h_D + V_a>  of phi_a(Z)
    Z_eff(a) <- (1 - mix) Z_eff(a) + mix * Z*(a)

Potentials (rho = sum_b w_b (P_b^2 + Q_b^2), Latter tail -(Z-N+1)/r):

  - meanDFS:        V_nuc + V_H[rho] + V_x[rho]        (Slater local exchange)
  - meanHS:         V_nuc + V_H[rho - rho_a]           (field of the other electrons)
  - optimizedLevel: meanDFS with weights w_b from CI levels on current orbitals
  - pureNuclear:    no iteration, hydrogenic orbitals in the nuclear charge

Convergence: max_a |eps_a^(k) - eps_a^(k-1)| < accuracy.

File: atomcascade/structure/scf.py
Date: October, 2026
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

import numpy as np
from scipy import optimize

from ..config import CiSettings, PlasmaSettings, ScfMethod, ScfSettings, StartStrategy
from ..errors import InvalidConfiguration
from ..nuclear import NuclearModel, RadialGrid
from ..utils.convergence import VectorConvergence
from .angular import AngularCoefficientProvider
from .basis import Basis, ScfStatus
from .orbitals import Orbital, dirac_energy, hydrogenic_orbital
from .subshell import Subshell

logger = logging.getLogger(__name__)

# Lower bound of the effective-charge search
Z_EFF_MIN = 0.5


# ============================================================================
# Strategy resolution
# ============================================================================

def _resolve(settings: ScfSettings) -> tuple[StartStrategy, ScfMethod]:
    try:
        start = StartStrategy(settings.start)
    except ValueError as exc:
        raise InvalidConfiguration(f"Unknown SCF start strategy: {settings.start!r}") from exc
    try:
        method = ScfMethod(settings.method)
    except ValueError as exc:
        raise InvalidConfiguration(f"Unknown SCF method: {settings.method!r}") from exc
    return start, method


def initial_orbitals(
    basis: Basis,
    nuclear: NuclearModel,
    grid: RadialGrid,
    start: StartStrategy,
    orbitals: Optional[Mapping[Subshell, Orbital]] = None,
) -> dict[Subshell, Orbital]:
    """Start orbitals; caller-supplied ones win, hydrogenic fill the rest."""
    if start is StartStrategy.HYDROGENIC:
        return {s: hydrogenic_orbital(s, nuclear.Z, grid) for s in basis.subshells}

    supplied = dict(orbitals or {})
    result = {}
    for s in basis.subshells:
        if s in supplied:
            result[s] = supplied[s]
        else:
            logger.warning("No start orbital for %s, using hydrogenic fallback", s)
            result[s] = hydrogenic_orbital(s, nuclear.Z, grid)
    return result


def attach_orbitals(
    basis: Basis,
    nuclear: NuclearModel,
    grid: RadialGrid,
    orbitals: Mapping[Subshell, Orbital],
) -> Basis:
    """Basis carrying the given orbitals unchanged (hydrogenic for missing ones)."""
    current = initial_orbitals(basis, nuclear, grid, StartStrategy.FROM_ORBITALS, orbitals)
    status = ScfStatus(converged=True, iterations=0, max_change=0.0, method="fixed")
    return basis.with_orbitals(current, status)


# ============================================================================
# Mean-field potentials
# ============================================================================

def average_weights(basis: Basis) -> np.ndarray:
    """Subshell occupations averaged over CSFs with weights 2J+1."""
    occ = np.array([csf.occupation for csf in basis.csfs], dtype=np.float64)
    g = np.array([csf.two_J + 1 for csf in basis.csfs], dtype=np.float64)
    return (g @ occ) / g.sum()


def level_weights(
    basis: Basis,
    nuclear: NuclearModel,
    grid: RadialGrid,
    levels: list[int],
    ci: Optional[CiSettings] = None,
    plasma: Optional[PlasmaSettings] = None,
    provider: Optional[AngularCoefficientProvider] = None,
) -> np.ndarray:
    """Subshell occupations averaged over selected CI levels."""
    from .ci import solve_ci

    multiplet = solve_ci(basis, nuclear, grid, ci, plasma, provider)
    chosen = [multiplet[i] for i in levels if 0 <= i < len(multiplet)]
    if not chosen:
        raise InvalidConfiguration(
            f"levels_to_optimize {levels} outside 0..{len(multiplet) - 1}"
        )
    return np.mean([lev.subshell_occupations() for lev in chosen], axis=0)


def hartree_potential(rho: np.ndarray, grid: RadialGrid) -> np.ndarray:
    """V_H(r) = (1/r) int_0^r rho + int_r^inf rho / s."""
    r = grid.r
    return grid.cumulative(rho) / r + grid.cumulative_from_outside(rho / r)


def slater_exchange(rho: np.ndarray, grid: RadialGrid) -> np.ndarray:
    """Local exchange -(3 n / pi)^{1/3}, n = rho / (4 pi r^2)."""
    n = np.maximum(rho, 0.0) / (4.0 * np.pi * grid.r ** 2)
    return -np.cbrt(3.0 * n / np.pi)


def mean_field_potential(
    orbitals: Mapping[Subshell, Orbital],
    subshells: tuple[Subshell, ...],
    weights: np.ndarray,
    nuclear: NuclearModel,
    grid: RadialGrid,
    n_electrons: int,
    exchange: bool,
    exclude: Optional[Subshell] = None,
) -> np.ndarray:
    """
    Mean-field potential with the Latter tail.

    With `exclude`, one electron of that subshell is left out of the
    Hartree density, giving the field an electron of it moves in.
    """
    rho = np.zeros_like(grid.r)
    for s, w in zip(subshells, weights):
        if w > 0.0:
            rho += w * orbitals[s].density

    rho_h = rho
    if exclude is not None:
        w_self = min(float(weights[subshells.index(exclude)]), 1.0)
        rho_h = rho - w_self * orbitals[exclude].density

    v = nuclear.potential(grid) + hartree_potential(rho_h, grid)
    if exchange:
        v += slater_exchange(rho, grid)
    tail = -(nuclear.Z - n_electrons + 1.0) / grid.r
    return np.minimum(v, tail)


# ============================================================================
# Orbital step
# ============================================================================

def orbital_energy(orb: Orbital, potential: np.ndarray, grid: RadialGrid) -> float:
    """<h_D> of a Z_eff-Coulomb orbital in the mean-field potential."""
    return dirac_energy(orb.subshell, orb.z_eff) + grid.integrate(
        orb.density * (potential + orb.z_eff / grid.r)
    )


def optimal_charge(
    subshell: Subshell,
    potential: np.ndarray,
    grid: RadialGrid,
    z_max: float,
    z_min: float = Z_EFF_MIN,
) -> float:
    """Effective charge minimizing the orbital energy in a fixed potential."""

    def energy(z: float) -> float:
        return orbital_energy(hydrogenic_orbital(subshell, z, grid), potential, grid)

    result = optimize.minimize_scalar(
        energy, bounds=(z_min, z_max), method="bounded", options={"xatol": 1e-8},
    )
    return float(result.x)


# ============================================================================
# Driver
# ============================================================================

def solve_scf(
    basis: Basis,
    nuclear: NuclearModel,
    grid: RadialGrid,
    settings: Optional[ScfSettings] = None,
    orbitals: Optional[Mapping[Subshell, Orbital]] = None,
    plasma: Optional[PlasmaSettings] = None,
    ci: Optional[CiSettings] = None,
    provider: Optional[AngularCoefficientProvider] = None,
) -> Basis:
    """
    Generate and refine orbitals for every subshell of the basis.

    `ci` and `provider` define the Hamiltonian of the optimizedLevel CI
    and should match the final structure computation.

    Returns:
        New Basis carrying orbitals and an ScfStatus; non-convergence at
        max_iterations is reported there with converged=False.

    Raises:
        InvalidConfiguration: Unknown start/method, or pureNuclear without
            a hydrogenic start
    """
    settings = settings or ScfSettings()
    start, method = _resolve(settings)
    current = initial_orbitals(basis, nuclear, grid, start, orbitals)

    if method is ScfMethod.PURE_NUCLEAR:
        if start is not StartStrategy.HYDROGENIC:
            raise InvalidConfiguration("pureNuclear requires the hydrogenic start strategy")
        status = ScfStatus(converged=True, iterations=0, max_change=0.0, method=method.value)
        return basis.with_orbitals(current, status)

    frozen = {Subshell.parse(label) for label in settings.frozen_subshells}
    active = [s for s in basis.subshells if s not in frozen]
    exchange = method is not ScfMethod.MEAN_HS
    tracker = VectorConvergence(tol=settings.accuracy, patience=1)
    converged, delta, iteration = False, float("inf"), 0

    for iteration in range(1, settings.max_iterations + 1):
        if method is ScfMethod.OPTIMIZED_LEVEL:
            trial = basis.with_orbitals(current, basis.scf)
            weights = level_weights(
                trial, nuclear, grid, settings.levels_to_optimize, ci, plasma, provider,
            )
        else:
            weights = average_weights(basis)

        field_args = (current, basis.subshells, weights, nuclear, grid, basis.n_electrons)
        if exchange:
            shared = mean_field_potential(*field_args, exchange=True)
            potentials = {s: shared for s in active}
        else:
            potentials = {
                s: mean_field_potential(*field_args, exchange=False, exclude=s) for s in active
            }

        updated = dict(current)
        for s in active:
            z_opt = optimal_charge(s, potentials[s], grid, z_max=nuclear.Z)
            z_new = (1.0 - settings.mixing) * current[s].z_eff + settings.mixing * z_opt
            updated[s] = hydrogenic_orbital(s, z_new, grid)
        current = updated

        energies = []
        for s in active:
            orb = current[s]
            orb.energy = orbital_energy(orb, potentials[s], grid)
            energies.append(orb.energy)

        converged, delta = tracker.update(energies)
        logger.debug("SCF %s iter %d: max |d eps| = %.3e", method.value, iteration, delta)
        if converged:
            break

    if not converged:
        logger.warning(
            "SCF (%s) not converged after %d iterations (max |d eps| = %.3e > %.1e)",
            method.value, settings.max_iterations, delta, settings.accuracy,
        )

    status = ScfStatus(
        converged=converged,
        iterations=iteration,
        max_change=float(delta),
        method=method.value,
    )
    return basis.with_orbitals(current, status)


__all__ = [
    "solve_scf",
    "initial_orbitals",
    "attach_orbitals",
    "average_weights",
    "level_weights",
    "hartree_potential",
    "slater_exchange",
    "mean_field_potential",
    "orbital_energy",
    "optimal_charge",
]
