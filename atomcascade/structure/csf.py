# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Configuration state functions in jj-coupling.

For every relativistic configuration the subshell states j^q are
enumerated by seniority and total subshell momentum, then coupled
left-to-right over the global subshell order:

    X_1 = J_1,   X_k in |X_{k-1} - J_k| ... X_{k-1} + J_k

Allowed (nu, J) pairs of j^q follow from m-scheme counting:

    N_q(J) = c_q(M=J) - c_q(M=J+1)
    N_nu(J) with seniority nu = N_q'(J) - N_{q'-2}(J),  q' = min(q, 2j+1-q)

All angular momenta are doubled integers.

File: atomcascade/structure/csf.py
Date: October, 2026
"""

from __future__ import annotations

import itertools
from collections import Counter
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Sequence

from .configuration import RelativisticConfiguration
from .subshell import LevelSymmetry, Parity, Subshell


@dataclass(frozen=True)
class CSF:
    """
    Single jj-coupled CSF over a fixed global subshell list.

    Attributes:
        occupation: Electrons per subshell, aligned with the basis subshells
        seniority:  Seniority nu per subshell
        two_j_sub:  Doubled subshell angular momentum 2J_k
        two_x:      Doubled intermediate couplings 2X_k (last entry = 2J)
        parity:     (-1)^{sum l q}
    """

    occupation: tuple[int, ...]
    seniority: tuple[int, ...]
    two_j_sub: tuple[int, ...]
    two_x: tuple[int, ...]
    parity: Parity

    @property
    def two_J(self) -> int:
        return self.two_x[-1] if self.two_x else 0

    @property
    def symmetry(self) -> LevelSymmetry:
        return LevelSymmetry(self.two_J, self.parity)

    @property
    def n_electrons(self) -> int:
        return sum(self.occupation)


# ============================================================================
# Subshell states j^q
# ============================================================================

@lru_cache(maxsize=None)
def _m_scheme_counts(two_j: int, q: int) -> dict[int, int]:
    """Histogram of 2M over all Pauli-allowed q-electron states of j^q."""
    two_m_values = range(-two_j, two_j + 1, 2)
    counts: Counter = Counter()
    for combo in itertools.combinations(two_m_values, q):
        counts[sum(combo)] += 1
    return dict(counts)


@lru_cache(maxsize=None)
def _j_multiplicities(two_j: int, q: int) -> dict[int, int]:
    """Number of times each 2J occurs in j^q."""
    counts = _m_scheme_counts(two_j, q)
    result = {}
    for two_m in sorted(counts):
        if two_m < 0:
            continue
        n = counts[two_m] - counts.get(two_m + 2, 0)
        if n > 0:
            result[two_m] = n
    return result


@lru_cache(maxsize=None)
def subshell_states(two_j: int, q: int) -> tuple[tuple[int, int], ...]:
    """
    Allowed (seniority, 2J) pairs of j^q, ordered by seniority then 2J.

    Particle-hole symmetry: j^q and j^{2j+1-q} share the same term list.
    """
    capacity = two_j + 1
    if q < 0 or q > capacity:
        return ()
    q_eff = min(q, capacity - q)

    states = []
    for nu in range(q_eff % 2, q_eff + 1, 2):
        upper = _j_multiplicities(two_j, nu)
        lower = _j_multiplicities(two_j, nu - 2) if nu >= 2 else {}
        for two_J in sorted(upper):
            extra = upper[two_J] - lower.get(two_J, 0)
            states.extend([(nu, two_J)] * extra)
    return tuple(states)


# ============================================================================
# Coupling
# ============================================================================

def _couple(two_js: Sequence[int]) -> Iterator[tuple[int, ...]]:
    """Left-to-right intermediate couplings for a sequence of 2J_k."""
    if not two_js:
        yield ()
        return

    def _recurse(k: int, chain: tuple[int, ...]) -> Iterator[tuple[int, ...]]:
        if k == len(two_js):
            yield chain
            return
        x_prev = chain[-1]
        j_k = two_js[k]
        for x in range(abs(x_prev - j_k), x_prev + j_k + 1, 2):
            yield from _recurse(k + 1, chain + (x,))

    yield from _recurse(1, (two_js[0],))


def enumerate_csfs(
    relconf: RelativisticConfiguration,
    subshells: Sequence[Subshell],
) -> list[CSF]:
    """
    All CSFs of one relativistic configuration against a global subshell list.

    Subshells missing from relconf contribute q = 0 (nu = 0, J = 0).
    """
    occupation = tuple(relconf.occupation(s) for s in subshells)
    parity = relconf.parity

    per_subshell = [subshell_states(s.two_j, q) for s, q in zip(subshells, occupation)]
    csfs = []
    for states in itertools.product(*per_subshell):
        seniority = tuple(nu for nu, _ in states)
        two_j_sub = tuple(tj for _, tj in states)
        for chain in _couple(two_j_sub):
            csfs.append(CSF(occupation, seniority, two_j_sub, chain, parity))
    return csfs


__all__ = ["CSF", "enumerate_csfs", "subshell_states"]
