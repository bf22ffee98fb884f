# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Parametric Auger (autoionization) kernel.

Every level pair with a positive electron energy eps = E_i - E_f decays
with rate = channel_rate * (number of allowed partial waves), the partial
waves being those that couple J_f to J_i with the right parity.

File: atomcascade/processes/auger.py
Date: October, 2026
"""

from __future__ import annotations

from typing import Any, Mapping

from ..nuclear import NuclearModel, RadialGrid
from ..structure.multiplet import Multiplet
from .lines import Line
from .pathways import continuum_channels
from .registry import ProcessKernel

DEFAULT_CHANNEL_RATE = 1.0e-3


class AugerKernel(ProcessKernel):
    tag = "Auger"
    electron_change = -1

    def compute_lines(
        self,
        initial: Multiplet,
        final: Multiplet,
        nuclear: NuclearModel,
        grid: RadialGrid,
        settings: Mapping[str, Any],
    ) -> list[Line]:
        channel_rate = float(settings.get("channel_rate", DEFAULT_CHANNEL_RATE))
        max_kappa = int(settings.get("max_kappa", 3))

        lines = []
        for lev_i in initial:
            for lev_f in final:
                eps = lev_i.energy - lev_f.energy
                if eps <= 0.0:
                    continue
                channels = tuple(continuum_channels(lev_i.symmetry, lev_f.symmetry, max_kappa))
                if not channels:
                    continue
                lines.append(Line(
                    lev_i, lev_f, eps,
                    rate=channel_rate * len(channels),
                    channels=channels,
                ))
        return lines


__all__ = ["AugerKernel"]
