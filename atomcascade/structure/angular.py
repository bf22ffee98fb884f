# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Angular coefficients of the many-electron Hamiltonian between CSFs.

    H_rs = sum_a t_rs(a) I_a + sum_k v^k_rs(ac; bd) R^k(ac; bd)

AngularCoefficientProvider is the seam for a full recoupling library.
The shipped provider, AverageConfigurationCoefficients, returns the jj
average-of-configuration coefficients on the diagonal and nothing off it:

  same subshell a (q electrons):
    q(q-1)/2 [ F^0(aa) - (2j+1)/(2j) sum_{k>0} (j k j; -1/2 0 1/2)^2 F^k(aa) ]
  different subshells a, b:
    q_a q_b  [ F^0(ab) - sum_k (j_a k j_b; -1/2 0 1/2)^2 G^k(ab) ]

with k restricted by l_a + k + l_b even and the triangle rule.

File: atomcascade/structure/angular.py
Date: October, 2026
"""

from __future__ import annotations

from functools import lru_cache
from typing import NamedTuple, Protocol, Sequence

from sympy import Rational
from sympy.physics.wigner import wigner_3j

from .csf import CSF
from .subshell import Subshell


class OneBodyTerm(NamedTuple):
    """t * I(a)."""
    a: Subshell
    coeff: float


class TwoBodyTerm(NamedTuple):
    """v * R^k(ac; bd); exchange marks G-type terms that carry a Breit partner."""
    k: int
    a: Subshell
    c: Subshell
    b: Subshell
    d: Subshell
    coeff: float
    exchange: bool = False


class AngularCoefficientProvider(Protocol):
    """Angular coefficients between two CSFs over a fixed subshell list."""

    def one_body(
        self, subshells: Sequence[Subshell], r: CSF, s: CSF,
    ) -> list[OneBodyTerm]: ...

    def two_body(
        self, subshells: Sequence[Subshell], r: CSF, s: CSF,
    ) -> list[TwoBodyTerm]: ...


# ============================================================================
# Wigner symbols
# ============================================================================

@lru_cache(maxsize=4096)
def reduced_3j_squared(two_ja: int, k: int, two_jb: int) -> float:
    """(j_a k j_b; -1/2 0 1/2)^2, exact via sympy."""
    value = wigner_3j(
        Rational(two_ja, 2), k, Rational(two_jb, 2),
        Rational(-1, 2), 0, Rational(1, 2),
    )
    return float(value ** 2)


def _k_range(a: Subshell, b: Subshell) -> range:
    lo = abs(a.two_j - b.two_j) // 2
    hi = (a.two_j + b.two_j) // 2
    if (a.l + lo + b.l) % 2:
        lo += 1
    return range(lo, hi + 1, 2)


# ============================================================================
# Configuration-average provider
# ============================================================================

class AverageConfigurationCoefficients:
    """Diagonal jj configuration-average coefficients."""

    def one_body(self, subshells, r, s):
        if r is not s:
            return []
        return [OneBodyTerm(a, float(q)) for a, q in zip(subshells, r.occupation) if q > 0]

    def two_body(self, subshells, r, s):
        if r is not s:
            return []

        occupied = [(a, q) for a, q in zip(subshells, r.occupation) if q > 0]
        terms: list[TwoBodyTerm] = []
        for i, (a, qa) in enumerate(occupied):
            if qa >= 2:
                pairs = qa * (qa - 1) / 2.0
                terms.append(TwoBodyTerm(0, a, a, a, a, pairs))
                factor = (a.two_j + 1) / a.two_j
                for k in _k_range(a, a):
                    if k == 0:
                        continue
                    w = reduced_3j_squared(a.two_j, k, a.two_j)
                    terms.append(TwoBodyTerm(k, a, a, a, a, -pairs * factor * w, True))

            for b, qb in occupied[i + 1:]:
                pairs = float(qa * qb)
                terms.append(TwoBodyTerm(0, a, a, b, b, pairs))
                for k in _k_range(a, b):
                    w = reduced_3j_squared(a.two_j, k, b.two_j)
                    terms.append(TwoBodyTerm(k, a, b, b, a, -pairs * w, True))
        return terms


__all__ = [
    "AngularCoefficientProvider",
    "AverageConfigurationCoefficients",
    "OneBodyTerm",
    "TwoBodyTerm",
    "reduced_3j_squared",
]
