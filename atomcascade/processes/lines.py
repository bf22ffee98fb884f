# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Transition data produced by process kernels.

  - Channel: one multipole/gauge photon channel or continuum partial wave
  - Line:    initial -> final level with a rate (decay) or a cross section
             (photon-driven, needs a flux to become a rate)
  - Pathway: initial -> intermediate -> final with gauge-resolved cross sections

File: atomcascade/processes/lines.py
Date: October, 2026
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple, Optional

from ..structure.multiplet import Level


class Channel(NamedTuple):
    """
    Photon channel (kind 'E'/'M', multipole L, gauge) or electron
    partial wave (kind 'e', kappa); amplitude filled by the kernel.
    """
    kind: str
    multipole: int = 0
    gauge: str = ""
    kappa: int = 0
    amplitude: float = 0.0

    def __str__(self) -> str:
        if self.kind == "e":
            return f"kappa={self.kappa}"
        return f"{self.kind}{self.multipole}({self.gauge})"


@dataclass(eq=False)
class Line:
    """
    Transition between two levels.

    Exactly one of rate (1/time, a.u.) and cross_section (bohr^2) is set.
    """

    initial: Level
    final: Level
    energy: float
    rate: Optional[float] = None
    cross_section: Optional[float] = None
    photon_energy: Optional[float] = None
    channels: tuple[Channel, ...] = field(default=(), repr=False)

    @property
    def ionizing(self) -> bool:
        return self.cross_section is not None

    def flow_rate(self, photon_flux: Optional[float]) -> float:
        """Rate for branching; cross sections are scaled by the photon flux."""
        if self.cross_section is not None:
            if photon_flux is None:
                raise ValueError("Cross-section line needs a photon flux")
            return self.cross_section * photon_flux
        return float(self.rate or 0.0)


@dataclass(eq=False)
class Pathway:
    """
    Three-level route initial -> intermediate -> final.

    Attributes:
        excitation_energy: E_m - E_i (>= 0)
        decay_energy: E_m - E_f (>= 0)
        photon_channels: Allowed multipole/gauge channels i -> m
        electron_channels: Allowed partial waves m -> f
        cross_section: Gauge name -> cross section
    """

    initial: Level
    intermediate: Level
    final: Level
    excitation_energy: float
    decay_energy: float
    photon_channels: tuple[Channel, ...] = field(default=(), repr=False)
    electron_channels: tuple[Channel, ...] = field(default=(), repr=False)
    cross_section: dict[str, float] = field(default_factory=dict)

    @property
    def ionizing(self) -> bool:
        return True

    def preferred_cross_section(self, gauge: str = "Babushkin") -> float:
        if gauge in self.cross_section:
            return self.cross_section[gauge]
        return max(self.cross_section.values(), default=0.0)

    def flow_rate(self, photon_flux: Optional[float]) -> float:
        if photon_flux is None:
            raise ValueError("Pathway needs a photon flux")
        return self.preferred_cross_section() * photon_flux


__all__ = ["Channel", "Line", "Pathway"]
