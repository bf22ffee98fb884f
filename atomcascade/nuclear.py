# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Nuclear model and radial grid.

Both objects are read-only once built and shared by every structure
computation of a run.

  - RadialGrid:   r_i = r_min * exp(i h), Simpson quadrature on the samples
  - NuclearModel: point nucleus V = -Z/r or uniformly charged sphere

File: atomcascade/nuclear.py
Date: October, 2026
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

import numpy as np
from scipy import integrate

from .constants import FM_TO_BOHR
from .errors import InvalidConfiguration


# ============================================================================
# Radial grid
# ============================================================================

@dataclass(eq=False)
class RadialGrid:
    """
    Logarithmic radial grid in bohr.

    Attributes:
        r_min: First grid point
        r_max: Last grid point
        n_points: Number of samples (odd keeps Simpson exact on panels)
    """

    r_min: float = 1e-5
    r_max: float = 80.0
    n_points: int = 1601
    r: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not (0.0 < self.r_min < self.r_max):
            raise InvalidConfiguration("RadialGrid requires 0 < r_min < r_max")
        if self.n_points < 16:
            raise InvalidConfiguration("RadialGrid requires at least 16 points")
        self.r = np.geomspace(self.r_min, self.r_max, int(self.n_points))

    @property
    def size(self) -> int:
        return int(self.r.size)

    def integrate(self, f: np.ndarray) -> float:
        """Definite integral of samples f(r_i) over the grid."""
        return float(integrate.simpson(f, x=self.r))

    def cumulative(self, f: np.ndarray) -> np.ndarray:
        """Running integral from r_min to r_i."""
        return integrate.cumulative_trapezoid(f, self.r, initial=0.0)

    def cumulative_from_outside(self, f: np.ndarray) -> np.ndarray:
        """Running integral from r_i to r_max."""
        total = self.cumulative(f)
        return total[-1] - total


# ============================================================================
# Nuclear model
# ============================================================================

class NuclearShape(StrEnum):
    """Nuclear charge distribution."""
    POINT = "point"
    UNIFORM = "uniform"


@dataclass(frozen=True)
class NuclearModel:
    """
    Nucleus of charge Z.

    The uniform sphere radius defaults to R = 1.2 A^{1/3} fm with
    A = mass_number (estimated as 2.5 Z when omitted).
    """

    Z: float
    shape: NuclearShape = NuclearShape.POINT
    mass_number: float | None = None

    def __post_init__(self) -> None:
        if self.Z <= 0:
            raise InvalidConfiguration(f"Nuclear charge must be positive, got {self.Z}")
        try:
            shape = NuclearShape(self.shape)
        except ValueError as exc:
            raise InvalidConfiguration(f"Unknown nuclear shape: {self.shape!r}") from exc
        object.__setattr__(self, "shape", shape)

    @property
    def radius(self) -> float:
        """Sphere radius in bohr (zero for a point nucleus)."""
        if self.shape is NuclearShape.POINT:
            return 0.0
        a = self.mass_number if self.mass_number is not None else 2.5 * self.Z
        return 1.2 * a ** (1.0 / 3.0) * FM_TO_BOHR

    def potential(self, grid: RadialGrid) -> np.ndarray:
        """Electron-nucleus potential V(r) in hartree."""
        r = grid.r
        v = -self.Z / r
        if self.shape is NuclearShape.UNIFORM:
            R = self.radius
            inside = r < R
            v[inside] = -self.Z / (2.0 * R) * (3.0 - (r[inside] / R) ** 2)
        return v


__all__ = ["RadialGrid", "NuclearModel", "NuclearShape"]
