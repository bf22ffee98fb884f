# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Cascade orchestration: graph construction, step execution, simulation.
"""

from .graph import (
    CascadeBlock,
    CascadeGraph,
    CascadeStep,
    assign_generations,
    build_cascade_graph,
    generate_descendants,
)
from .executor import CascadeData, CascadeExecutor, StructureCache
from .simulation import propagate, simulate

__all__ = [
    "CascadeBlock",
    "CascadeGraph",
    "CascadeStep",
    "assign_generations",
    "build_cascade_graph",
    "generate_descendants",
    "CascadeData",
    "CascadeExecutor",
    "StructureCache",
    "propagate",
    "simulate",
]
