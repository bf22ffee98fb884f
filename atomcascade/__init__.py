# file: atomcascade/__init__.py

"""
AtomCascade: relativistic atomic structure and multi-step cascade simulation.

Structure computations (CSF basis, SCF, symmetry-block CI) feed a cascade
engine that builds the decay/ionization graph of an ion, computes each
step through pluggable process kernels and propagates level populations.
"""

from .config import (
    AsfSettings,
    CascadeSpec,
    CiSettings,
    PlasmaSettings,
    RunConfig,
    ScfSettings,
    SimulationSpec,
)
from .context import ComputationContext
from .errors import (
    AtomCascadeError,
    BasisConsistencyError,
    InvalidConfiguration,
    MixingAmbiguity,
    UnimplementedProperty,
)
from .nuclear import NuclearModel, RadialGrid
from .perform import (
    ProcessRequest,
    perform_cascade_computation,
    perform_cascade_simulation,
    perform_diagonal_structure,
    perform_process,
    perform_structure,
    run,
)
from .structure import Configuration, Multiplet

from . import cascade
from . import processes
from . import structure

__version__ = "0.1.0"

__all__ = [
    "AsfSettings",
    "CascadeSpec",
    "CiSettings",
    "PlasmaSettings",
    "RunConfig",
    "ScfSettings",
    "SimulationSpec",
    "ComputationContext",
    "AtomCascadeError",
    "BasisConsistencyError",
    "InvalidConfiguration",
    "MixingAmbiguity",
    "UnimplementedProperty",
    "NuclearModel",
    "RadialGrid",
    "ProcessRequest",
    "perform_cascade_computation",
    "perform_cascade_simulation",
    "perform_diagonal_structure",
    "perform_process",
    "perform_structure",
    "run",
    "Configuration",
    "Multiplet",
]
