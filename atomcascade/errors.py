# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Exception hierarchy for structure and cascade computations.

All failures are fatal for the current run; nothing is retried.
Energetically forbidden steps or pathways are filtered, never raised.

File: atomcascade/errors.py
Date: October, 2026
"""

from __future__ import annotations


class AtomCascadeError(Exception):
    """Base class for all atomcascade errors."""


class InvalidConfiguration(AtomCascadeError, ValueError):
    """
    Unsupported request or malformed input.

    Raised for empty configuration lists, unknown SCF start/method
    strategies, unregistered process tags and malformed shell strings.
    """


class MixingAmbiguity(AtomCascadeError):
    """Dominant CSF of a level cannot be identified in the diagonal-only path."""

    def __init__(self, message: str, weights=None):
        super().__init__(message)
        self.weights = weights


class UnimplementedProperty(AtomCascadeError, NotImplementedError):
    """Requested simulation output kind has no implementation."""


class BasisConsistencyError(AtomCascadeError):
    """Internal invariant of a Basis is violated (e.g. mixed electron counts)."""


__all__ = [
    "AtomCascadeError",
    "InvalidConfiguration",
    "MixingAmbiguity",
    "UnimplementedProperty",
    "BasisConsistencyError",
]
