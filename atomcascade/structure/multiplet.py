# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Levels and multiplets produced by the CI solver.

File: atomcascade/structure/multiplet.py
Date: October, 2026
"""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Iterator, Sequence

import numpy as np

from .basis import Basis
from .subshell import LevelSymmetry, Parity


@dataclass(eq=False)
class Level:
    """
    CI eigenstate within one (J, parity) block.

    Attributes:
        two_J: Doubled total angular momentum
        parity: Level parity
        energy: Total energy (hartree)
        eigenvector: Mixing coefficients over basis.csfs
        basis: Owning basis (read-only back-reference)
        index: 0-based position in the energy-sorted multiplet
    """

    two_J: int
    parity: Parity
    energy: float
    eigenvector: np.ndarray = field(repr=False)
    basis: Basis = field(repr=False)
    index: int = 0

    @property
    def J(self) -> Fraction:
        return Fraction(self.two_J, 2)

    @property
    def symmetry(self) -> LevelSymmetry:
        return LevelSymmetry(self.two_J, self.parity)

    @property
    def weight(self) -> int:
        """Statistical weight 2J+1."""
        return self.two_J + 1

    def leading_csf(self) -> int:
        """Index of the CSF with largest squared coefficient."""
        return int(np.argmax(self.eigenvector ** 2))

    def subshell_occupations(self) -> np.ndarray:
        """Mixing-weighted subshell occupations over basis.subshells."""
        occ = np.array([csf.occupation for csf in self.basis.csfs], dtype=np.float64)
        return (self.eigenvector ** 2) @ occ


@dataclass(eq=False)
class Multiplet:
    """Named, energy-sorted sequence of levels."""

    name: str
    levels: list[Level]

    def __len__(self) -> int:
        return len(self.levels)

    def __iter__(self) -> Iterator[Level]:
        return iter(self.levels)

    def __getitem__(self, idx: int) -> Level:
        return self.levels[idx]

    @property
    def energies(self) -> np.ndarray:
        return np.array([lev.energy for lev in self.levels], dtype=np.float64)

    @property
    def e_min(self) -> float:
        return float(self.energies.min())

    @property
    def e_max(self) -> float:
        return float(self.energies.max())

    @property
    def basis(self) -> Basis | None:
        return self.levels[0].basis if self.levels else None

    @classmethod
    def from_levels(cls, name: str, levels: Sequence[Level]) -> "Multiplet":
        """Stable sort by energy and renumber from 0."""
        ordered = sorted(levels, key=lambda lev: lev.energy)
        for idx, lev in enumerate(ordered):
            lev.index = idx
        return cls(name=name, levels=ordered)


__all__ = ["Level", "Multiplet"]
