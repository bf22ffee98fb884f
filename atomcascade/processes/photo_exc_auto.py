# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Photoexcitation followed by autoionization, as a three-level kernel.

Pathways come from the generic pathway algorithm with a parametric
amplitude model:

    A_gamma = photon_strength * gauge_factor(g) * sqrt(omega)
    A_e     = electron_strength * exp(-|kappa| / 2)

File: atomcascade/processes/photo_exc_auto.py
Date: October, 2026
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from ..nuclear import NuclearModel, RadialGrid
from ..structure.multiplet import Level, Multiplet
from .lines import Channel, Pathway
from .pathways import determine_pathways
from .registry import EnergyWindow, ProcessKernel


@dataclass
class ParametricAmplitudes:
    """Smooth model amplitudes; gauge_factors rescale photon channels per gauge."""
    photon_strength: float = 1.0e-2
    electron_strength: float = 1.0e-1
    gauge_factors: dict[str, float] = field(default_factory=dict)

    def photon_amplitude(self, initial: Level, intermediate: Level,
                         channel: Channel, omega: float) -> float:
        factor = self.gauge_factors.get(channel.gauge, 1.0)
        return self.photon_strength * factor * math.sqrt(max(omega, 0.0))

    def electron_amplitude(self, intermediate: Level, final: Level,
                           channel: Channel, energy: float) -> float:
        return self.electron_strength * math.exp(-abs(channel.kappa) / 2.0)


class PhotoExcAutoKernel(ProcessKernel):
    tag = "PhotoExcAuto"
    electron_change = -1
    three_level = True
    intermediate_change = 0
    initial_block_only = True

    def energy_allowed(
        self,
        initial: EnergyWindow,
        final: EnergyWindow,
        photon_energies: Sequence[float] = (),
    ) -> bool:
        return True

    def compute_pathways(
        self,
        initial: Multiplet,
        intermediate: Multiplet,
        final: Multiplet,
        nuclear: NuclearModel,
        grid: RadialGrid,
        settings: Mapping[str, Any],
    ) -> list[Pathway]:
        amplitudes = ParametricAmplitudes(
            photon_strength=float(settings.get("photon_strength", 1.0e-2)),
            electron_strength=float(settings.get("electron_strength", 1.0e-1)),
            gauge_factors=dict(settings.get("gauge_factors", {})),
        )
        return determine_pathways(
            initial, intermediate, final, amplitudes,
            allowed=settings.get("allowed_triples"),
            max_multipole=int(settings.get("max_multipole", 1)),
            max_kappa=int(settings.get("max_kappa", 3)),
        )


__all__ = ["ParametricAmplitudes", "PhotoExcAutoKernel"]
