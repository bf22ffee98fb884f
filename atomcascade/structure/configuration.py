# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Symbolic electron configurations and their relativistic expansion.

Accepted notations (mixed freely within one string):
  - "1s^2 2s^2 2p^5"
  - "1s2 2s2 2p5"
  - "1s² 2s² 2p⁵"
  - "[Ne] 3s"          (noble-gas core, occupation 1 when omitted)

A shell nl with q electrons expands into every split q = q_- + q_+ over
the subshells j = l - 1/2 and j = l + 1/2 that respects the Pauli limits
2j + 1; the relativistic configurations of a Configuration are the
Cartesian product of these splits.

File: atomcascade/structure/configuration.py
Date: October, 2026
"""

from __future__ import annotations

import itertools
import re
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from ..errors import InvalidConfiguration
from .subshell import Parity, Shell, Subshell, l_from_symbol

_SUPERSCRIPTS = str.maketrans("⁰¹²³⁴⁵⁶⁷⁸⁹", "0123456789")

_NOBLE_GAS_CORES = {
    "He": "1s^2",
    "Ne": "[He] 2s^2 2p^6",
    "Ar": "[Ne] 3s^2 3p^6",
    "Kr": "[Ar] 3d^10 4s^2 4p^6",
    "Xe": "[Kr] 4d^10 5s^2 5p^6",
    "Rn": "[Xe] 4f^14 5d^10 6s^2 6p^6",
}

_TOKEN_RE = re.compile(r"^(\d+)([a-zA-Z])(?:\^?(\d+))?$")


def _parse_tokens(text: str) -> dict[Shell, int]:
    occupations: dict[Shell, int] = {}
    for token in text.translate(_SUPERSCRIPTS).replace(",", " ").split():
        if token.startswith("[") and token.endswith("]"):
            core = _NOBLE_GAS_CORES.get(token[1:-1])
            if core is None:
                raise InvalidConfiguration(f"Unknown core {token!r}")
            for shell, occ in _parse_tokens(core).items():
                occupations[shell] = occupations.get(shell, 0) + occ
            continue

        match = _TOKEN_RE.match(token)
        if match is None:
            raise InvalidConfiguration(f"Cannot parse shell token {token!r} in {text!r}")
        n = int(match.group(1))
        shell = Shell(n, l_from_symbol(match.group(2)))
        occ = int(match.group(3)) if match.group(3) is not None else 1
        occupations[shell] = occupations.get(shell, 0) + occ
    return occupations


@dataclass(frozen=True)
class Configuration:
    """
    Non-relativistic configuration: ordered (Shell, occupation) pairs.

    Invariants:
        - shells sorted by (n, l), no duplicates
        - 0 < occupation <= 2(2l+1); empty shells are dropped
    """

    shells: tuple[tuple[Shell, int], ...]

    def __post_init__(self) -> None:
        for shell, occ in self.shells:
            if occ < 0 or occ > shell.max_occupation:
                raise InvalidConfiguration(
                    f"Occupation {occ} exceeds Pauli limit {shell.max_occupation} of {shell}"
                )

    @classmethod
    def from_mapping(cls, occupations: Mapping[Shell, int]) -> "Configuration":
        items = sorted((s, int(q)) for s, q in occupations.items() if q > 0)
        return cls(shells=tuple(items))

    @classmethod
    def parse(cls, text: str) -> "Configuration":
        """Parse a configuration string; see module docstring for syntax."""
        if not text or not text.strip():
            raise InvalidConfiguration("Empty configuration string")
        return cls.from_mapping(_parse_tokens(text))

    @classmethod
    def coerce(cls, value: "Configuration | str") -> "Configuration":
        if isinstance(value, Configuration):
            return value
        return cls.parse(str(value))

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def n_electrons(self) -> int:
        return sum(q for _, q in self.shells)

    @property
    def parity(self) -> Parity:
        return Parity.from_l_sum(sum(s.l * q for s, q in self.shells))

    def occupation(self, shell: Shell) -> int:
        for s, q in self.shells:
            if s == shell:
                return q
        return 0

    def as_dict(self) -> dict[Shell, int]:
        return dict(self.shells)

    @property
    def sort_key(self) -> tuple:
        """Canonical key: fewer inner-shell vacancies first."""
        return tuple((s.n, s.l, -q) for s, q in self.shells)

    # ------------------------------------------------------------------
    # Derived configurations
    # ------------------------------------------------------------------

    def remove_electron(self, shell: Shell) -> "Configuration":
        occ = self.as_dict()
        if occ.get(shell, 0) == 0:
            raise InvalidConfiguration(f"No electron in {shell} of {self}")
        occ[shell] -= 1
        return Configuration.from_mapping(occ)

    def move_electron(self, source: Shell, target: Shell) -> "Configuration":
        occ = self.as_dict()
        if occ.get(source, 0) == 0:
            raise InvalidConfiguration(f"No electron in {source} of {self}")
        if occ.get(target, 0) >= target.max_occupation:
            raise InvalidConfiguration(f"Shell {target} of {self} is already full")
        occ[source] -= 1
        occ[target] = occ.get(target, 0) + 1
        return Configuration.from_mapping(occ)

    def relativistic(self) -> list["RelativisticConfiguration"]:
        """All relativistic configurations consistent with this configuration."""
        per_shell: list[list[tuple[tuple[Subshell, int], ...]]] = []
        for shell, q in self.shells:
            subs = shell.subshells()
            if len(subs) == 1:
                per_shell.append([((subs[0], q),)])
                continue
            minus, plus = subs
            splits = []
            # Fill j = l - 1/2 first, i.e. 2p-^2 2p^3 before 2p- 2p^4
            for q_minus in range(min(q, minus.max_occupation), -1, -1):
                q_plus = q - q_minus
                if q_plus > plus.max_occupation:
                    continue
                splits.append(((minus, q_minus), (plus, q_plus)))
            per_shell.append(splits)

        relconfs = []
        for combo in itertools.product(*per_shell):
            occ = {sub: q for part in combo for sub, q in part if q > 0}
            relconfs.append(RelativisticConfiguration.from_mapping(occ))
        return relconfs

    def __str__(self) -> str:
        return " ".join(f"{s}^{q}" for s, q in self.shells) or "(bare)"


@dataclass(frozen=True)
class RelativisticConfiguration:
    """Assignment of electrons to relativistic subshells (q > 0 only)."""

    subshells: tuple[tuple[Subshell, int], ...]

    @classmethod
    def from_mapping(cls, occupations: Mapping[Subshell, int]) -> "RelativisticConfiguration":
        for sub, q in occupations.items():
            if q < 0 or q > sub.max_occupation:
                raise InvalidConfiguration(f"Occupation {q} exceeds limit of {sub}")
        items = sorted(((s, int(q)) for s, q in occupations.items() if q > 0),
                       key=lambda item: item[0].sort_key)
        return cls(subshells=tuple(items))

    @property
    def n_electrons(self) -> int:
        return sum(q for _, q in self.subshells)

    @property
    def parity(self) -> Parity:
        return Parity.from_l_sum(sum(s.l * q for s, q in self.subshells))

    def occupation(self, subshell: Subshell) -> int:
        for s, q in self.subshells:
            if s == subshell:
                return q
        return 0

    def __str__(self) -> str:
        return " ".join(f"{s}^{q}" for s, q in self.subshells)


def expand_configurations(
    configs: Iterable[Configuration | str],
) -> list[RelativisticConfiguration]:
    """Concatenate relativistic expansions, dropping exact duplicates."""
    relconfs: list[RelativisticConfiguration] = []
    seen: set[RelativisticConfiguration] = set()
    for conf in configs:
        for relconf in Configuration.coerce(conf).relativistic():
            if relconf not in seen:
                seen.add(relconf)
                relconfs.append(relconf)
    return relconfs


def ordered_subshells(relconfs: Sequence[RelativisticConfiguration]) -> list[Subshell]:
    """Deduplicated union of subshells, ordered by (n, l, 2j)."""
    subs = {s for rc in relconfs for s, _ in rc.subshells}
    return sorted(subs, key=lambda s: s.sort_key)


__all__ = [
    "Configuration",
    "RelativisticConfiguration",
    "expand_configurations",
    "ordered_subshells",
]
