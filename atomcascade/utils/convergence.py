# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Convergence control for self-consistent iterations.

File: atomcascade/utils/convergence.py
Date: October, 2026
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np


@dataclass
class VectorConvergence:
    """
    Convergence controller over a vector of monitored quantities.

    Tracks consecutive updates where max_i |x_i^(k) - x_i^(k-1)| < tol.
    Converges when the streak reaches patience.
    """

    tol: float
    patience: int = 1

    last_value: Optional[np.ndarray] = field(default=None, init=False)
    streak: int = field(default=0, init=False)
    n_updates: int = field(default=0, init=False)

    def update(self, values) -> Tuple[bool, float]:
        """
        Update with the current vector and check convergence.

        Returns:
            (converged, max_delta): Patience criterion and current max change
        """
        current = np.asarray(values, dtype=np.float64)
        self.n_updates += 1
        if self.last_value is None or self.last_value.shape != current.shape:
            delta = float("inf")
        else:
            delta = float(np.max(np.abs(current - self.last_value))) if current.size else 0.0

        if delta < self.tol:
            self.streak += 1
        else:
            self.streak = 0

        self.last_value = current
        return self.streak >= self.patience, delta


__all__ = ["VectorConvergence"]
