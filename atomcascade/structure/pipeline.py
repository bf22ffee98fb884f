# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Single structure computation: basis -> SCF -> CI.

File: atomcascade/structure/pipeline.py
Date: October, 2026
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional

from ..config import AsfSettings
from ..nuclear import NuclearModel, RadialGrid
from .angular import AngularCoefficientProvider
from .basis import build_basis
from .ci import solve_ci, solve_diagonal
from .configuration import Configuration
from .multiplet import Multiplet
from .orbitals import Orbital
from .scf import solve_scf
from .subshell import Subshell

logger = logging.getLogger(__name__)


def compute_multiplet(
    configs: Iterable[Configuration | str],
    nuclear: NuclearModel,
    grid: RadialGrid,
    asf: Optional[AsfSettings] = None,
    provider: Optional[AngularCoefficientProvider] = None,
    orbitals: Optional[Mapping[Subshell, Orbital]] = None,
    name: str = "",
) -> Multiplet:
    """Build the basis of `configs`, solve its orbitals and diagonalize."""
    asf = asf or AsfSettings()
    basis = build_basis(configs)
    basis = solve_scf(
        basis, nuclear, grid, asf.scf, orbitals=orbitals, plasma=asf.plasma,
        ci=asf.ci, provider=provider,
    )

    solver = solve_diagonal if asf.diagonal_only else solve_ci
    multiplet = solver(basis, nuclear, grid, asf.ci, asf.plasma, provider, name)
    logger.info(
        "Structure %s: %d CSFs, %d levels, SCF %s after %d iterations",
        multiplet.name, basis.size, len(multiplet),
        "converged" if basis.scf.converged else "NOT converged", basis.scf.iterations,
    )
    return multiplet


__all__ = ["compute_multiplet"]
