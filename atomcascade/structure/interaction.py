# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Radial integrals of the Dirac-Coulomb(-Breit) Hamiltonian.

One-electron (orbital a generated by -Z_eff/r):

    I_a = eps_D(Z_eff) + int rho_a(r) [V_nuc(r) + Z_eff/r] dr  (+ ion-sphere term)

Two-electron, over transition densities rho_ac = P_a P_c + Q_a Q_c:

    R^k(ac; bd) = int int rho_ac(r1) U_k(r1, r2) rho_bd(r2) dr1 dr2

  - Coulomb:       U_k = r<^k / r>^{k+1}                 (via Y^k potentials)
  - Debye-Hueckel: U_k = (2k+1)(2 lambda/pi) i_k(lambda r<) k_k(lambda r>)
  - Breit:         Gaunt-type magnetic exchange, Coulomb multipole over the
                   mixed densities P_a Q_c + Q_a P_c with opposite sign

File: atomcascade/structure/interaction.py
Date: October, 2026
"""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

import numpy as np
from scipy import special

from ..errors import InvalidConfiguration
from ..nuclear import NuclearModel, RadialGrid
from .orbitals import Orbital, dirac_energy
from .subshell import Subshell


class PlasmaModel(StrEnum):
    DEBYE_HUECKEL = "debye-hueckel"
    ION_SPHERE = "ion-sphere"


# ============================================================================
# Kernels
# ============================================================================

def coulomb_potential(rho: np.ndarray, k: int, grid: RadialGrid) -> np.ndarray:
    """Y^k(r) = r^{-k-1} int_0^r rho s^k ds + r^k int_r^inf rho s^{-k-1} ds."""
    r = grid.r
    inner = grid.cumulative(rho * r ** k)
    outer = grid.cumulative_from_outside(rho / r ** (k + 1))
    return inner / r ** (k + 1) + outer * r ** k


def _trapezoid_weights(r: np.ndarray) -> np.ndarray:
    w = np.empty_like(r)
    w[1:-1] = 0.5 * (r[2:] - r[:-2])
    w[0] = 0.5 * (r[1] - r[0])
    w[-1] = 0.5 * (r[-1] - r[-2])
    return w


def debye_hueckel_kernel(k: int, lam: float, grid: RadialGrid) -> np.ndarray:
    """
    Screened multipole kernel U_k(r_i, r_j) as a dense matrix.

    Modified spherical Bessel functions follow scipy's spherical_in /
    spherical_kn normalization, evaluated through the exponentially scaled
    cylindrical ones:
    i_k(x<) k_k(x>) = pi / (2 sqrt(x< x>)) Ive(x<) Kve(x>) exp(x< - x>).
    """
    x = lam * grid.r
    x_lo = np.minimum.outer(x, x)
    x_hi = np.maximum.outer(x, x)
    order = k + 0.5
    prod = (
        np.pi / (2.0 * np.sqrt(x_lo * x_hi))
        * special.ive(order, x_lo)
        * special.kve(order, x_hi)
        * np.exp(x_lo - x_hi)
    )
    return (2 * k + 1) * (2.0 * lam / np.pi) * prod


# ============================================================================
# Integral tables
# ============================================================================

class RadialIntegrals:
    """
    Lazily computed radial integrals over one orbital set.

    Values are cached per (kind, k, subshells) key for the lifetime of
    the object; the orbital set is treated as read-only.
    """

    def __init__(
        self,
        orbitals: dict[Subshell, Orbital],
        nuclear: NuclearModel,
        grid: RadialGrid,
        plasma: Optional[object] = None,
        n_electrons: int = 0,
    ):
        self.orbitals = orbitals
        self.nuclear = nuclear
        self.grid = grid
        self.plasma = plasma
        self.n_electrons = n_electrons
        self._v_nuc = nuclear.potential(grid)
        self._cache: dict[tuple, float] = {}
        self._kernels: dict[int, np.ndarray] = {}
        self._weights = _trapezoid_weights(grid.r)

        self._model = None
        if plasma is not None:
            try:
                self._model = PlasmaModel(plasma.model)
            except ValueError as exc:
                raise InvalidConfiguration(f"Unknown plasma model: {plasma.model!r}") from exc

    def _orbital(self, subshell: Subshell) -> Orbital:
        try:
            return self.orbitals[subshell]
        except KeyError as exc:
            raise InvalidConfiguration(f"No orbital for subshell {subshell}") from exc

    # -------------------------------------------------------------------------
    # One-electron
    # -------------------------------------------------------------------------

    def one_electron(self, a: Subshell) -> float:
        key = ("I", a)
        if key not in self._cache:
            orb = self._orbital(a)
            r = self.grid.r
            value = dirac_energy(a, orb.z_eff)
            value += self.grid.integrate(orb.density * (self._v_nuc + orb.z_eff / r))
            if self._model is PlasmaModel.ION_SPHERE:
                value += self.grid.integrate(orb.density * self._ion_sphere_potential())
            self._cache[key] = value
        return self._cache[key]

    def _ion_sphere_potential(self) -> np.ndarray:
        """Potential energy of a bound electron inside the neutralizing sphere."""
        r = self.grid.r
        radius = float(self.plasma.ion_sphere_radius)
        if radius <= 0.0:
            raise InvalidConfiguration("Ion-sphere model requires a positive radius")
        z_ion = max(self.nuclear.Z - self.n_electrons, 0.0)
        v = np.zeros_like(r)
        inside = r < radius
        v[inside] = z_ion / (2.0 * radius) * (3.0 - (r[inside] / radius) ** 2)
        v[~inside] = z_ion / r[~inside]
        return v

    # -------------------------------------------------------------------------
    # Two-electron
    # -------------------------------------------------------------------------

    def _multipole(self, k: int, rho1: np.ndarray, rho2: np.ndarray) -> float:
        if self._model is PlasmaModel.DEBYE_HUECKEL:
            kernel = self._kernels.get(k)
            if kernel is None:
                lam = float(self.plasma.screening_parameter)
                if lam <= 0.0:
                    raise InvalidConfiguration("Debye-Hueckel model requires lambda > 0")
                kernel = debye_hueckel_kernel(k, lam, self.grid)
                self._kernels[k] = kernel
            w = self._weights
            return float((rho1 * w) @ kernel @ (rho2 * w))
        return self.grid.integrate(rho1 * coulomb_potential(rho2, k, self.grid))

    def slater(self, k: int, a: Subshell, c: Subshell, b: Subshell, d: Subshell) -> float:
        """R^k(ac; bd) with the active Coulomb or screened kernel."""
        key = ("R", k, a, c, b, d)
        if key not in self._cache:
            oa, oc = self._orbital(a), self._orbital(c)
            ob, od = self._orbital(b), self._orbital(d)
            self._cache[key] = self._multipole(k, oa.overlap_density(oc), ob.overlap_density(od))
        return self._cache[key]

    def breit(self, k: int, a: Subshell, b: Subshell) -> float:
        """Magnetic exchange integral between subshells a and b."""
        key = ("B", k, a, b)
        if key not in self._cache:
            oa, ob = self._orbital(a), self._orbital(b)
            mixed = oa.P * ob.Q + oa.Q * ob.P
            self._cache[key] = -self.grid.integrate(mixed * coulomb_potential(mixed, k, self.grid))
        return self._cache[key]


__all__ = [
    "PlasmaModel",
    "RadialIntegrals",
    "coulomb_potential",
    "debye_hueckel_kernel",
]
