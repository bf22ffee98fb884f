# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Radial Dirac orbitals.

Bound orbitals are closed-form Dirac-Coulomb solutions for an effective
charge Z_eff (natural units, rho = 2 p r):

    gamma = sqrt(kappa^2 - (Z alpha)^2),   n_r = n - |kappa|
    E     = 1 / sqrt(1 + (Z alpha / (n_r + gamma))^2)
    P(r)  ~ rho^gamma e^{-rho/2} [ a L_{n_r-1}^{2gamma} + xi L_{n_r}^{2gamma} ]
    Q(r)  ~ rho^gamma e^{-rho/2} [ a L_{n_r-1}^{2gamma} - xi L_{n_r}^{2gamma} ] p/(1+E)

with a = n_r + 2gamma, xi = kappa - (n_r + gamma). Normalization
int (P^2 + Q^2) dr = 1 is enforced on the radial grid.

File: atomcascade/structure/orbitals.py
Date: October, 2026
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np
from scipy import special

from ..constants import ALPHA, C_AU
from ..errors import InvalidConfiguration
from ..nuclear import RadialGrid
from .subshell import Subshell


@dataclass(eq=False)
class Orbital:
    """
    Radial orbital of one subshell.

    Attributes:
        subshell: Owning subshell
        energy: Orbital energy (hartree, rest mass removed)
        P: Large component on the grid
        Q: Small component on the grid
        z_eff: Effective charge of the generating Coulomb potential
    """

    subshell: Subshell
    energy: float
    P: np.ndarray = field(repr=False)
    Q: np.ndarray = field(repr=False)
    z_eff: float

    @property
    def density(self) -> np.ndarray:
        """Radial density P^2 + Q^2."""
        return self.P * self.P + self.Q * self.Q

    def overlap_density(self, other: "Orbital") -> np.ndarray:
        return self.P * other.P + self.Q * other.Q


# ============================================================================
# Closed-form Dirac-Coulomb solution
# ============================================================================

def _check_charge(subshell: Subshell, z: float) -> float:
    za = z * ALPHA
    if z <= 0.0 or za >= abs(subshell.kappa):
        raise InvalidConfiguration(
            f"No bound Dirac state for {subshell} at Z={z:.4g} (Z*alpha must be < |kappa|)"
        )
    return math.sqrt(subshell.kappa ** 2 - za * za)


def dirac_energy(subshell: Subshell, z: float) -> float:
    """Point-Coulomb Dirac energy in hartree with the rest mass removed."""
    gamma = _check_charge(subshell, z)
    n_r = subshell.n - abs(subshell.kappa)
    e_total = 1.0 / math.sqrt(1.0 + (z * ALPHA / (n_r + gamma)) ** 2)
    return (e_total - 1.0) * C_AU * C_AU


def hydrogenic_orbital(subshell: Subshell, z: float, grid: RadialGrid) -> Orbital:
    """Normalized Dirac-Coulomb orbital for charge z on the given grid."""
    gamma = _check_charge(subshell, z)
    kappa = subshell.kappa
    n_r = subshell.n - abs(kappa)

    e_total = 1.0 / math.sqrt(1.0 + (z * ALPHA / (n_r + gamma)) ** 2)
    p = math.sqrt(max(0.0, 1.0 - e_total * e_total))

    # Natural length unit hbar/mc = alpha bohr
    rho = np.maximum(2.0 * p * grid.r / ALPHA, np.finfo(np.float64).tiny)

    l_nr = special.eval_genlaguerre(n_r, 2.0 * gamma, rho)
    if n_r >= 1:
        l_nm1 = special.eval_genlaguerre(n_r - 1, 2.0 * gamma, rho)
    else:
        l_nm1 = np.zeros_like(rho)

    a = n_r + 2.0 * gamma
    xi = kappa - (n_r + gamma)
    pref = np.exp(gamma * np.log(rho) - 0.5 * rho)

    P = pref * (a * l_nm1 + xi * l_nr)
    Q = pref * (a * l_nm1 - xi * l_nr) * (p / (1.0 + e_total))

    norm2 = grid.integrate(P * P + Q * Q)
    if not np.isfinite(norm2) or norm2 <= 0.0:
        raise InvalidConfiguration(f"Orbital {subshell} cannot be normalized on this grid")
    norm = math.sqrt(norm2)

    # Sign convention: large component positive near the origin
    sign = 1.0 if P[np.argmax(np.abs(P) > 0)] >= 0 else -1.0
    return Orbital(
        subshell=subshell,
        energy=(e_total - 1.0) * C_AU * C_AU,
        P=sign * P / norm,
        Q=sign * Q / norm,
        z_eff=float(z),
    )


__all__ = ["Orbital", "dirac_energy", "hydrogenic_orbital"]
