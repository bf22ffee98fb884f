# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Parametric radiative (E1) decay kernel.

    A(i -> f) = coefficient * omega^3 * (2J_f + 1) / (2J_i + 1),  omega = E_i - E_f > 0

for every E1-allowed level pair; both E1 gauges are listed as channels.
Blocks are connected only downhill in mean energy, which keeps the
cascade graph acyclic.

File: atomcascade/processes/radiative.py
Date: October, 2026
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..nuclear import NuclearModel, RadialGrid
from ..structure.multiplet import Multiplet
from .lines import Line
from .pathways import radiative_channels
from .registry import EnergyWindow, ProcessKernel

DEFAULT_COEFFICIENT = 2.0e-7


class RadiativeKernel(ProcessKernel):
    tag = "Radiative"
    electron_change = 0

    def energy_allowed(
        self,
        initial: EnergyWindow,
        final: EnergyWindow,
        photon_energies: Sequence[float] = (),
    ) -> bool:
        return initial.e_mean > final.e_mean and initial.e_max > final.e_min

    def compute_lines(
        self,
        initial: Multiplet,
        final: Multiplet,
        nuclear: NuclearModel,
        grid: RadialGrid,
        settings: Mapping[str, Any],
    ) -> list[Line]:
        coeff = float(settings.get("coefficient", DEFAULT_COEFFICIENT))
        max_multipole = int(settings.get("max_multipole", 1))

        lines = []
        for lev_i in initial:
            for lev_f in final:
                omega = lev_i.energy - lev_f.energy
                if omega <= 0.0:
                    continue
                channels = tuple(radiative_channels(
                    lev_f.symmetry, lev_i.symmetry, max_multipole, magnetic=False,
                ))
                if not channels:
                    continue
                rate = coeff * omega ** 3 * lev_f.weight / lev_i.weight
                lines.append(Line(lev_i, lev_f, omega, rate=rate, channels=channels))
        return lines


__all__ = ["RadiativeKernel"]
