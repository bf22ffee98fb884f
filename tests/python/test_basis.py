# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Tests for basis construction invariants.

File: test_basis.py
Date: October, 2026
"""

from __future__ import annotations

import pytest

from atomcascade.errors import BasisConsistencyError, InvalidConfiguration
from atomcascade.structure.basis import build_basis
from atomcascade.structure.subshell import Subshell


def test_electron_count_shared_by_all_csfs():
    basis = build_basis(["1s^2 2s^2 2p^5", "1s^2 2s^1 2p^6"])
    assert basis.n_electrons == 9
    assert all(sum(csf.occupation) == 9 for csf in basis.csfs)
    assert basis.size == 2 + 1


def test_subshells_sorted_and_unique():
    basis = build_basis(["1s^2 2p^1", "1s^2 2s^1"])
    keys = [s.sort_key for s in basis.subshells]
    assert keys == sorted(keys)
    assert len(set(basis.subshells)) == len(basis.subshells)
    assert [str(s) for s in basis.subshells] == ["1s", "2s", "2p-", "2p"]


def test_core_subshells_full_in_every_csf():
    basis = build_basis(["1s^2 2s^2 2p^5", "1s^2 2s^1 2p^6"])
    assert basis.core_subshells == (Subshell.parse("1s"),)
    for core in basis.core_subshells:
        k = basis.subshell_index(core)
        assert all(csf.occupation[k] == core.max_occupation for csf in basis.csfs)


def test_csfs_unsolved_until_scf():
    basis = build_basis(["1s^2"])
    assert not basis.is_solved
    assert basis.scf.converged is False


def test_empty_input_rejected():
    with pytest.raises(InvalidConfiguration):
        build_basis([])


def test_mixed_electron_counts_rejected():
    with pytest.raises(BasisConsistencyError):
        build_basis(["1s^2", "1s^1"])
