# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Generic three-level pathway algorithm.

For multiplets (I, M, F) every triple (i, m, f) is visited in index order:

  1. keep only exc = E_m - E_i >= 0 and dec = E_m - E_f >= 0
  2. optionally keep only triples in a caller allow-list of 0-based indices
  3. photon channels i -> m from multipole selection rules,
     electron channels m -> f from partial-wave coupling
  4. amplitudes from the kernel's AmplitudeStrategy, combined per gauge:

       sigma_g = sum_{gamma in g} |A_gamma|^2 * sum_e |A_e|^2 / (2J_i + 1)

     Magnetic channels contribute to every gauge.

Selection rules (doubled momenta):
  - E_L: parity change (-1)^L, triangle(J_i, L, J_m), no 0 -> 0
  - M_L: parity change (-1)^{L+1}, same triangle
  - partial wave kappa: triangle(J_f, j, J_m), P_f (-1)^l = P_m

File: atomcascade/processes/pathways.py
Date: October, 2026
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..structure.multiplet import Level, Multiplet
from ..structure.subshell import LevelSymmetry
from .lines import Channel, Pathway

E_GAUGES = ("Coulomb", "Babushkin")
MAGNETIC_GAUGE = "Magnetic"


def triangle(two_a: int, two_b: int, two_c: int) -> bool:
    """|a - b| <= c <= a + b with integer a + b + c."""
    return abs(two_a - two_b) <= two_c <= two_a + two_b and (two_a + two_b + two_c) % 2 == 0


def kappa_l(kappa: int) -> int:
    return kappa if kappa > 0 else -kappa - 1


def kappa_two_j(kappa: int) -> int:
    return 2 * abs(kappa) - 1


# ============================================================================
# Channel enumeration
# ============================================================================

def radiative_channels(
    lower: LevelSymmetry,
    upper: LevelSymmetry,
    max_multipole: int = 1,
    magnetic: bool = True,
) -> list[Channel]:
    """Photon multipole/gauge channels connecting two symmetries."""
    if lower.two_j == 0 and upper.two_j == 0:
        return []
    parity_change = lower.parity.sign * upper.parity.sign
    channels = []
    for L in range(1, max_multipole + 1):
        if not triangle(lower.two_j, 2 * L, upper.two_j):
            continue
        if parity_change == (-1) ** L:
            channels.extend(Channel("E", L, g) for g in E_GAUGES)
        elif magnetic and parity_change == (-1) ** (L + 1):
            channels.append(Channel("M", L, MAGNETIC_GAUGE))
    return channels


def continuum_channels(
    parent: LevelSymmetry,
    ion: LevelSymmetry,
    max_kappa: int = 3,
) -> list[Channel]:
    """Free-electron partial waves coupling an ion level to a parent symmetry."""
    channels = []
    for mag in range(1, max_kappa + 1):
        for kappa in (-mag, mag):
            l = kappa_l(kappa)
            if not triangle(ion.two_j, kappa_two_j(kappa), parent.two_j):
                continue
            if ion.parity.sign * (-1) ** l != parent.parity.sign:
                continue
            channels.append(Channel("e", kappa=kappa))
    return channels


# ============================================================================
# Amplitude strategies
# ============================================================================

class AmplitudeStrategy(Protocol):
    """Physics of a three-level kernel."""

    def photon_amplitude(self, initial: Level, intermediate: Level,
                         channel: Channel, omega: float) -> float: ...

    def electron_amplitude(self, intermediate: Level, final: Level,
                           channel: Channel, energy: float) -> float: ...


def _gauge_cross_sections(
    photon: Sequence[Channel], electron: Sequence[Channel], two_j_initial: int,
) -> dict[str, float]:
    electron_sum = sum(ch.amplitude ** 2 for ch in electron)
    magnetic = sum(ch.amplitude ** 2 for ch in photon if ch.gauge == MAGNETIC_GAUGE)
    gauges = {ch.gauge for ch in photon if ch.gauge != MAGNETIC_GAUGE} or {MAGNETIC_GAUGE}
    result = {}
    for gauge in sorted(gauges):
        photon_sum = magnetic if gauge == MAGNETIC_GAUGE else magnetic + sum(
            ch.amplitude ** 2 for ch in photon if ch.gauge == gauge
        )
        result[gauge] = photon_sum * electron_sum / (two_j_initial + 1)
    return result


def determine_pathways(
    initial: Multiplet,
    intermediate: Multiplet,
    final: Multiplet,
    amplitudes: AmplitudeStrategy,
    allowed: Optional[Iterable[Sequence[int]]] = None,
    max_multipole: int = 1,
    max_kappa: int = 3,
) -> list[Pathway]:
    """
    Enumerate energetically allowed (i, m, f) triples with their channels.

    Triples without any photon or electron channel are dropped as well.
    """
    allow = None if allowed is None else {tuple(int(x) for x in t) for t in allowed}

    pathways = []
    for lev_i in initial:
        for lev_m in intermediate:
            exc = lev_m.energy - lev_i.energy
            if exc < 0.0:
                continue
            photon = radiative_channels(lev_i.symmetry, lev_m.symmetry, max_multipole)
            if not photon:
                continue
            for lev_f in final:
                dec = lev_m.energy - lev_f.energy
                if dec < 0.0:
                    continue
                if allow is not None and (lev_i.index, lev_m.index, lev_f.index) not in allow:
                    continue
                electron = continuum_channels(lev_m.symmetry, lev_f.symmetry, max_kappa)
                if not electron:
                    continue

                photon_amp = tuple(
                    ch._replace(amplitude=amplitudes.photon_amplitude(lev_i, lev_m, ch, exc))
                    for ch in photon
                )
                electron_amp = tuple(
                    ch._replace(amplitude=amplitudes.electron_amplitude(lev_m, lev_f, ch, dec))
                    for ch in electron
                )
                pathways.append(Pathway(
                    initial=lev_i,
                    intermediate=lev_m,
                    final=lev_f,
                    excitation_energy=exc,
                    decay_energy=dec,
                    photon_channels=photon_amp,
                    electron_channels=electron_amp,
                    cross_section=_gauge_cross_sections(photon_amp, electron_amp, lev_i.two_J),
                ))
    return pathways


__all__ = [
    "AmplitudeStrategy",
    "continuum_channels",
    "determine_pathways",
    "radiative_channels",
    "triangle",
]
