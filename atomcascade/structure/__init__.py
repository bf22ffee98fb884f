# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Atomic structure: configurations, CSF bases, orbitals, SCF and CI.
"""

from .subshell import LevelSymmetry, Parity, Shell, Subshell
from .configuration import Configuration, RelativisticConfiguration, expand_configurations
from .csf import CSF, enumerate_csfs
from .basis import Basis, ScfStatus, build_basis
from .orbitals import Orbital, hydrogenic_orbital
from .scf import solve_scf
from .angular import AngularCoefficientProvider, AverageConfigurationCoefficients
from .multiplet import Level, Multiplet
from .ci import dominant_csf, solve_ci, solve_diagonal, symmetry_blocks
from .pipeline import compute_multiplet

__all__ = [
    "LevelSymmetry",
    "Parity",
    "Shell",
    "Subshell",
    "Configuration",
    "RelativisticConfiguration",
    "expand_configurations",
    "CSF",
    "enumerate_csfs",
    "Basis",
    "ScfStatus",
    "build_basis",
    "Orbital",
    "hydrogenic_orbital",
    "solve_scf",
    "AngularCoefficientProvider",
    "AverageConfigurationCoefficients",
    "Level",
    "Multiplet",
    "dominant_csf",
    "solve_ci",
    "solve_diagonal",
    "symmetry_blocks",
    "compute_multiplet",
]
