# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Process kernels: transition lines, three-level pathways and their registry.
"""

from .lines import Channel, Line, Pathway
from .registry import EnergyWindow, KernelRegistry, ProcessKernel, default_registry
from .pathways import AmplitudeStrategy, continuum_channels, determine_pathways, radiative_channels
from .radiative import RadiativeKernel
from .auger import AugerKernel
from .photo import PhotoKernel
from .photo_exc_auto import ParametricAmplitudes, PhotoExcAutoKernel

__all__ = [
    "Channel",
    "Line",
    "Pathway",
    "EnergyWindow",
    "KernelRegistry",
    "ProcessKernel",
    "default_registry",
    "AmplitudeStrategy",
    "continuum_channels",
    "determine_pathways",
    "radiative_channels",
    "RadiativeKernel",
    "AugerKernel",
    "PhotoKernel",
    "ParametricAmplitudes",
    "PhotoExcAutoKernel",
]
