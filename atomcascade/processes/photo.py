# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Parametric photoionization kernel.

For every photon energy omega and level pair with a positive photoelectron
energy eps = omega + E_i - E_f, E1 absorption couples J_i to J_t with
opposite parity, and each (J_t, kappa) with triangle(J_f, j_kappa, J_t)
is one channel:

    sigma = scale * n_channels * omega^{-7/2}

The result is a cross section; the simulator needs a photon flux to
turn it into a rate.

File: atomcascade/processes/photo.py
Date: October, 2026
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..nuclear import NuclearModel, RadialGrid
from ..structure.multiplet import Multiplet
from ..structure.subshell import LevelSymmetry, Parity
from .lines import Channel, Line
from .pathways import continuum_channels
from .registry import EnergyWindow, ProcessKernel

DEFAULT_SCALE = 1.0e-2


def _absorption_symmetries(sym: LevelSymmetry) -> list[LevelSymmetry]:
    parity = sym.parity * Parity.MINUS
    two_js = range(abs(sym.two_j - 2), sym.two_j + 3, 2)
    return [LevelSymmetry(tj, parity) for tj in two_js if not (tj == 0 and sym.two_j == 0)]


class PhotoKernel(ProcessKernel):
    tag = "Photo"
    electron_change = -1
    initial_block_only = True

    def energy_allowed(
        self,
        initial: EnergyWindow,
        final: EnergyWindow,
        photon_energies: Sequence[float] = (),
    ) -> bool:
        if not photon_energies:
            return False
        return max(photon_energies) + initial.e_max > final.e_min

    def compute_lines(
        self,
        initial: Multiplet,
        final: Multiplet,
        nuclear: NuclearModel,
        grid: RadialGrid,
        settings: Mapping[str, Any],
    ) -> list[Line]:
        scale = float(settings.get("scale", DEFAULT_SCALE))
        max_kappa = int(settings.get("max_kappa", 3))
        omegas = [float(w) for w in settings.get("photon_energies", ())]

        lines = []
        for omega in omegas:
            if omega <= 0.0:
                continue
            for lev_i in initial:
                for lev_f in final:
                    eps = omega + lev_i.energy - lev_f.energy
                    if eps <= 0.0:
                        continue
                    channels: list[Channel] = []
                    for sym_t in _absorption_symmetries(lev_i.symmetry):
                        channels.extend(continuum_channels(sym_t, lev_f.symmetry, max_kappa))
                    if not channels:
                        continue
                    lines.append(Line(
                        lev_i, lev_f, eps,
                        cross_section=scale * len(channels) * omega ** -3.5,
                        photon_energy=omega,
                        channels=tuple(channels),
                    ))
        return lines


__all__ = ["PhotoKernel"]
