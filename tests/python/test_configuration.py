# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Tests for configuration parsing, relativistic expansion and CSF counting.

File: test_configuration.py
Date: October, 2026
"""

from __future__ import annotations

import pytest

from atomcascade.errors import InvalidConfiguration
from atomcascade.structure.configuration import Configuration, expand_configurations
from atomcascade.structure.csf import enumerate_csfs, subshell_states
from atomcascade.structure.subshell import Parity, Shell, Subshell


# ============================================================================
# Parsing
# ============================================================================

def test_parse_caret_and_superscript_agree():
    a = Configuration.parse("1s^2 2s^2 2p^5")
    b = Configuration.parse("1s² 2s² 2p⁵")
    assert a == b
    assert a.n_electrons == 9
    assert a.parity is Parity.MINUS
    assert str(a) == "1s^2 2s^2 2p^5"


def test_parse_noble_gas_core():
    conf = Configuration.parse("[Ne] 3s")
    assert conf.n_electrons == 11
    assert conf.occupation(Shell(2, 1)) == 6
    assert conf.occupation(Shell(3, 0)) == 1


def test_zero_occupation_dropped():
    conf = Configuration.parse("1s^2 2s^0 2p^1")
    assert conf.occupation(Shell(2, 0)) == 0
    assert [str(s) for s, _ in conf.shells] == ["1s", "2p"]


@pytest.mark.parametrize("text", ["1s^3", "2p^7", "3d^11"])
def test_overfilled_shell_rejected(text: str):
    with pytest.raises(InvalidConfiguration):
        Configuration.parse(text)


@pytest.mark.parametrize("text", ["", "   ", "1x^2", "[Zz] 1s", "s^2"])
def test_malformed_configuration_rejected(text: str):
    with pytest.raises(InvalidConfiguration):
        Configuration.parse(text)


def test_remove_and_move_electron():
    conf = Configuration.parse("1s 2s2 2p6")
    assert str(conf.remove_electron(Shell(1, 0))) == "2s^2 2p^6"
    assert str(conf.move_electron(Shell(2, 1), Shell(1, 0))) == "1s^2 2s^2 2p^5"
    with pytest.raises(InvalidConfiguration):
        conf.move_electron(Shell(1, 0), Shell(2, 1))


# ============================================================================
# Subshells and relativistic expansion
# ============================================================================

def test_subshell_labels_and_order():
    p_minus, p_plus = Subshell.parse("2p-"), Subshell.parse("2p")
    assert (p_minus.two_j, p_plus.two_j) == (1, 3)
    assert str(p_minus) == "2p-" and str(p_plus) == "2p"
    assert p_minus.max_occupation == 2 and p_plus.max_occupation == 4
    assert sorted([p_plus, Subshell.parse("2s"), p_minus, Subshell.parse("1s")]) == [
        Subshell.parse("1s"), Subshell.parse("2s"), p_minus, p_plus,
    ]


def test_relativistic_expansion_respects_pauli():
    relconfs = Configuration.parse("2p^3").relativistic()
    splits = sorted(
        (rc.occupation(Subshell.parse("2p-")), rc.occupation(Subshell.parse("2p")))
        for rc in relconfs
    )
    assert splits == [(0, 3), (1, 2), (2, 1)]
    assert all(rc.n_electrons == 3 for rc in relconfs)


def test_expansion_deduplicates():
    relconfs = expand_configurations([Configuration.parse("2p"), Configuration.parse("2p^1")])
    assert len(relconfs) == 2


# ============================================================================
# CSF enumeration
# ============================================================================

@pytest.mark.parametrize("two_j,q,expected", [
    (1, 1, [(1, 1)]),
    (3, 2, [(0, 0), (2, 4)]),
    (5, 3, [(1, 5), (3, 3), (3, 9)]),
    (3, 4, [(0, 0)]),
])
def test_subshell_states(two_j: int, q: int, expected):
    assert list(subshell_states(two_j, q)) == expected


@pytest.mark.parametrize("text,n_csf", [
    ("1s^2 2s^2 2p^5", 2),
    ("1s^2 2s^1 2p^5", 4),
    ("1s^2 2s^2 2p^4", 5),
    ("1s^2 2s^2 2p^6", 1),
])
def test_csf_counts(text: str, n_csf: int):
    relconfs = Configuration.parse(text).relativistic()
    subshells = sorted({s for rc in relconfs for s, _ in rc.subshells})
    csfs = [c for rc in relconfs for c in enumerate_csfs(rc, subshells)]
    assert len(csfs) == n_csf
    assert all(c.n_electrons == Configuration.parse(text).n_electrons for c in csfs)
