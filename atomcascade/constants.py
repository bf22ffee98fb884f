# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Physical constants in Hartree atomic units (CODATA 2018).

File: atomcascade/constants.py
Date: October, 2026
"""

ALPHA = 7.2973525693e-3          # fine-structure constant
C_AU = 1.0 / ALPHA               # speed of light
HARTREE_EV = 27.211386245988     # eV per hartree
BOHR_FM = 52917.721090           # fm per bohr
FM_TO_BOHR = 1.0 / BOHR_FM

__all__ = ["ALPHA", "C_AU", "HARTREE_EV", "BOHR_FM", "FM_TO_BOHR"]
