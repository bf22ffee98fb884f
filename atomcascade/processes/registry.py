# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Process kernels and the tag -> kernel registry.

A kernel declares how it connects cascade blocks (electron-count change,
energy rule, whether it may only start from the initial block) and
computes either two-level lines or three-level pathways between
multiplets. The registry is fixed before a run starts.

File: atomcascade/processes/registry.py
Date: October, 2026
"""

from __future__ import annotations

from abc import ABC
from typing import Any, Iterator, Mapping, NamedTuple, Optional, Sequence

from ..errors import InvalidConfiguration
from ..nuclear import NuclearModel, RadialGrid
from ..structure.multiplet import Multiplet
from .lines import Line, Pathway


class EnergyWindow(NamedTuple):
    """Energy range of a block's multiplet."""
    e_min: float
    e_max: float
    e_mean: float

    @classmethod
    def of(cls, multiplet: Multiplet) -> "EnergyWindow":
        e = multiplet.energies
        return cls(float(e.min()), float(e.max()), float(e.mean()))


class ProcessKernel(ABC):
    """
    Base for process kernels.

    Class attributes:
        tag: Process identifier used in CascadeSpec.processes
        electron_change: N_final - N_initial
        three_level: Computes pathways through an intermediate block
        intermediate_change: N_intermediate - N_initial (three-level only)
        initial_block_only: Step may only start from the initial block
    """

    tag: str = ""
    electron_change: int = 0
    three_level: bool = False
    intermediate_change: int = 0
    initial_block_only: bool = False

    def energy_allowed(
        self,
        initial: EnergyWindow,
        final: EnergyWindow,
        photon_energies: Sequence[float] = (),
    ) -> bool:
        """Default rule: E_max(i) > E_min(f)."""
        return initial.e_max > final.e_min

    def intermediate_allowed(
        self,
        initial: EnergyWindow,
        intermediate: EnergyWindow,
        final: EnergyWindow,
    ) -> bool:
        """Three-level rule: some triple can have E_m >= E_i and E_m >= E_f."""
        return intermediate.e_max >= initial.e_min and intermediate.e_max >= final.e_min

    def compute_lines(
        self,
        initial: Multiplet,
        final: Multiplet,
        nuclear: NuclearModel,
        grid: RadialGrid,
        settings: Mapping[str, Any],
    ) -> list[Line]:
        raise InvalidConfiguration(f"Process {self.tag!r} does not compute lines")

    def compute_pathways(
        self,
        initial: Multiplet,
        intermediate: Multiplet,
        final: Multiplet,
        nuclear: NuclearModel,
        grid: RadialGrid,
        settings: Mapping[str, Any],
    ) -> list[Pathway]:
        raise InvalidConfiguration(f"Process {self.tag!r} does not compute pathways")


class KernelRegistry:
    """Mapping process tag -> kernel, open for extension."""

    def __init__(self, kernels: Optional[Sequence[ProcessKernel]] = None):
        self._kernels: dict[str, ProcessKernel] = {}
        for kernel in kernels or ():
            self.register(kernel)

    def register(self, kernel: ProcessKernel, *, replace: bool = False) -> None:
        if not kernel.tag:
            raise InvalidConfiguration(f"Kernel {type(kernel).__name__} has no tag")
        if kernel.tag in self._kernels and not replace:
            raise InvalidConfiguration(f"Process {kernel.tag!r} is already registered")
        self._kernels[kernel.tag] = kernel

    def get(self, tag: str) -> ProcessKernel:
        try:
            return self._kernels[tag]
        except KeyError as exc:
            raise InvalidConfiguration(
                f"Unregistered process {tag!r}; known: {sorted(self._kernels)}"
            ) from exc

    def __contains__(self, tag: object) -> bool:
        return tag in self._kernels

    def __iter__(self) -> Iterator[str]:
        return iter(self._kernels)

    @property
    def tags(self) -> list[str]:
        return list(self._kernels)


def default_registry() -> KernelRegistry:
    """Registry with the shipped model kernels."""
    from .auger import AugerKernel
    from .photo import PhotoKernel
    from .photo_exc_auto import PhotoExcAutoKernel
    from .radiative import RadiativeKernel

    return KernelRegistry([RadiativeKernel(), AugerKernel(), PhotoKernel(), PhotoExcAutoKernel()])


__all__ = ["EnergyWindow", "ProcessKernel", "KernelRegistry", "default_registry"]
