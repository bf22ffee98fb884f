# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Single-particle labels and level symmetries.

  - Shell:         non-relativistic (n, l)
  - Subshell:      relativistic (n, kappa), j = |kappa| - 1/2
  - LevelSymmetry: (2J, parity) key of a CI block

Angular momenta are stored doubled (2j, 2J) so that all arithmetic stays
in integers.

File: atomcascade/structure/subshell.py
Date: October, 2026
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from fractions import Fraction

from ..errors import InvalidConfiguration

L_SYMBOLS = "spdfghiklmnoqrtuv"


class Parity(str, Enum):
    """Spatial parity of a state."""
    PLUS = "+"
    MINUS = "-"

    @classmethod
    def from_l_sum(cls, l_sum: int) -> "Parity":
        """Parity (-1)^l_sum."""
        return cls.PLUS if l_sum % 2 == 0 else cls.MINUS

    @property
    def sign(self) -> int:
        return 1 if self is Parity.PLUS else -1

    def __mul__(self, other: "Parity") -> "Parity":
        return Parity.PLUS if self.sign * other.sign == 1 else Parity.MINUS


def l_from_symbol(symbol: str) -> int:
    """Orbital angular momentum for a spectroscopic letter."""
    idx = L_SYMBOLS.find(symbol.lower())
    if idx < 0:
        raise InvalidConfiguration(f"Unknown orbital symbol: {symbol!r}")
    return idx


def two_j_to_str(two_j: int) -> str:
    """Render 2J as '0', '1/2', '3', ..."""
    return str(two_j // 2) if two_j % 2 == 0 else f"{two_j}/2"


@dataclass(frozen=True, order=True)
class Shell:
    """Non-relativistic shell nl."""
    n: int
    l: int

    def __post_init__(self) -> None:
        if self.n < 1 or self.l < 0 or self.l >= self.n:
            raise InvalidConfiguration(f"Invalid shell n={self.n}, l={self.l}")

    @property
    def max_occupation(self) -> int:
        return 2 * (2 * self.l + 1)

    def subshells(self) -> tuple["Subshell", ...]:
        """Relativistic subshells (j = l - 1/2 first, then j = l + 1/2)."""
        if self.l == 0:
            return (Subshell(self.n, -1),)
        return (Subshell(self.n, self.l), Subshell(self.n, -self.l - 1))

    def __str__(self) -> str:
        return f"{self.n}{L_SYMBOLS[self.l]}"


@dataclass(frozen=True)
class Subshell:
    """
    Relativistic subshell (n, kappa).

    kappa < 0: j = l + 1/2, kappa = -(l+1)
    kappa > 0: j = l - 1/2, kappa = l
    """
    n: int
    kappa: int

    def __post_init__(self) -> None:
        if self.kappa == 0 or self.n < 1 or self.l >= self.n:
            raise InvalidConfiguration(f"Invalid subshell n={self.n}, kappa={self.kappa}")

    @property
    def l(self) -> int:
        return self.kappa if self.kappa > 0 else -self.kappa - 1

    @property
    def two_j(self) -> int:
        return 2 * abs(self.kappa) - 1

    @property
    def j(self) -> Fraction:
        return Fraction(self.two_j, 2)

    @property
    def max_occupation(self) -> int:
        return self.two_j + 1

    @property
    def shell(self) -> Shell:
        return Shell(self.n, self.l)

    @property
    def sort_key(self) -> tuple[int, int, int]:
        return (self.n, self.l, self.two_j)

    def __lt__(self, other: "Subshell") -> bool:
        return self.sort_key < other.sort_key

    def __le__(self, other: "Subshell") -> bool:
        return self.sort_key <= other.sort_key

    def __gt__(self, other: "Subshell") -> bool:
        return self.sort_key > other.sort_key

    def __ge__(self, other: "Subshell") -> bool:
        return self.sort_key >= other.sort_key

    @classmethod
    def parse(cls, label: str) -> "Subshell":
        """Parse labels such as '1s', '2p-', '2p', '3d-'."""
        text = label.strip()
        minus = text.endswith("-") or text.endswith("_")
        if minus:
            text = text[:-1]
        digits = "".join(ch for ch in text if ch.isdigit())
        if not digits or not text[len(digits):]:
            raise InvalidConfiguration(f"Invalid subshell label: {label!r}")
        n = int(digits)
        l = l_from_symbol(text[len(digits):])
        if l == 0 and minus:
            raise InvalidConfiguration(f"s subshells have a single j value: {label!r}")
        return cls(n, l if minus else -l - 1)

    def __str__(self) -> str:
        suffix = "-" if self.kappa > 0 else ""
        return f"{self.n}{L_SYMBOLS[self.l]}{suffix}"

    def __repr__(self) -> str:
        return f"Subshell({self})"


@dataclass(frozen=True)
class LevelSymmetry:
    """Total angular momentum and parity J^P."""
    two_j: int
    parity: Parity

    @property
    def J(self) -> Fraction:
        return Fraction(self.two_j, 2)

    @property
    def multiplicity(self) -> int:
        """Statistical weight 2J+1."""
        return self.two_j + 1

    def __str__(self) -> str:
        return f"{two_j_to_str(self.two_j)}{self.parity.value}"


__all__ = [
    "L_SYMBOLS",
    "Parity",
    "Shell",
    "Subshell",
    "LevelSymmetry",
    "l_from_symbol",
    "two_j_to_str",
]
