# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
CSF basis assembly.

build_basis() expands symbolic configurations into relativistic ones,
fixes the global subshell order (n, l, 2j), enumerates CSFs against it
and identifies core subshells:

    s in core  <=>  q_s == 2j_s + 1 for every CSF

File: atomcascade/structure/basis.py
Date: October, 2026
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Iterable, Optional

from ..errors import BasisConsistencyError, InvalidConfiguration
from .configuration import (
    Configuration,
    RelativisticConfiguration,
    expand_configurations,
    ordered_subshells,
)
from .csf import CSF, enumerate_csfs
from .subshell import Subshell

if TYPE_CHECKING:
    from .orbitals import Orbital

logger = logging.getLogger(__name__)


@dataclass
class ScfStatus:
    """Outcome of the orbital optimization attached to a Basis."""
    converged: bool = False
    iterations: int = 0
    max_change: float = float("nan")
    method: Optional[str] = None


@dataclass(eq=False)
class Basis:
    """
    CSF basis of one structure computation.

    Invariants:
        - sum(csf.occupation) == n_electrons for every CSF
        - core_subshells == subshells filled in every CSF
        - orbitals maps subshell -> Orbital once solved (empty before)
    """

    subshells: tuple[Subshell, ...]
    csfs: tuple[CSF, ...]
    core_subshells: tuple[Subshell, ...]
    n_electrons: int
    configurations: tuple[Configuration, ...] = ()
    relconfs: tuple[RelativisticConfiguration, ...] = field(default=(), repr=False)
    orbitals: dict[Subshell, "Orbital"] = field(default_factory=dict, repr=False)
    scf: ScfStatus = field(default_factory=ScfStatus)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def size(self) -> int:
        return len(self.csfs)

    @property
    def is_solved(self) -> bool:
        return all(s in self.orbitals for s in self.subshells)

    def subshell_index(self, subshell: Subshell) -> int:
        return self.subshells.index(subshell)

    def with_orbitals(self, orbitals: dict[Subshell, "Orbital"], scf: ScfStatus) -> "Basis":
        """Copy sharing the CSF list, carrying new orbitals and SCF status."""
        return replace(self, orbitals=dict(orbitals), scf=scf)


def build_basis(configs: Iterable[Configuration | str]) -> Basis:
    """
    Build the CSF basis spanned by a list of configurations.

    Raises:
        InvalidConfiguration: Empty configuration list
        BasisConsistencyError: CSFs with different electron counts
    """
    configurations = tuple(Configuration.coerce(c) for c in configs)
    if not configurations:
        raise InvalidConfiguration("Cannot build a basis from an empty configuration list")

    relconfs = expand_configurations(configurations)
    subshells = tuple(ordered_subshells(relconfs))

    csfs: list[CSF] = []
    for relconf in relconfs:
        csfs.extend(enumerate_csfs(relconf, subshells))

    counts = {csf.n_electrons for csf in csfs}
    if len(counts) != 1:
        raise BasisConsistencyError(
            f"CSFs disagree on electron count {sorted(counts)} for "
            f"{[str(c) for c in configurations]}"
        )

    core = tuple(
        s for k, s in enumerate(subshells)
        if all(csf.occupation[k] == s.max_occupation for csf in csfs)
    )

    logger.debug(
        "Basis: %d configurations -> %d relconfs, %d subshells, %d CSFs",
        len(configurations), len(relconfs), len(subshells), len(csfs),
    )
    return Basis(
        subshells=subshells,
        csfs=tuple(csfs),
        core_subshells=core,
        n_electrons=counts.pop(),
        configurations=configurations,
        relconfs=tuple(relconfs),
    )


__all__ = ["Basis", "ScfStatus", "build_basis"]
