# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

from .convergence import VectorConvergence

__all__ = ["VectorConvergence"]
