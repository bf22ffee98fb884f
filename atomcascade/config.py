# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Configuration management using Pydantic.

Single source of truth for structure and cascade runs: solver settings,
cascade and simulation specifications, and the run-level snapshot that
is loaded from / saved to YAML.

Strategy names (SCF start/method, cascade approach, simulation method
and properties) are kept as plain strings here and resolved by the
components that consume them, so an unknown name surfaces as the
domain error of that component rather than a validation error.

File: atomcascade/config.py
Date: October, 2026
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from .context import ComputationContext


# ============================================================================
# Enums
# ============================================================================

class StartStrategy(str, Enum):
    """Initial orbitals of the SCF."""
    HYDROGENIC = "hydrogenic"
    FROM_ORBITALS = "fromOrbitals"


class ScfMethod(str, Enum):
    """Mean-field functional optimized by the SCF."""
    MEAN_DFS = "meanDFS"
    MEAN_HS = "meanHS"
    OPTIMIZED_LEVEL = "optimizedLevel"
    PURE_NUCLEAR = "pureNuclear"


class Approach(str, Enum):
    """Grouping of cascade configurations into blocks."""
    AVERAGE_SCA = "average-sca"
    SCA = "sca"


class SimulationMethod(str, Enum):
    PROBABILITY_PROPAGATION = "probability-propagation"


class PropertyKind(str, Enum):
    """Simulation output kinds; only the first two are implemented."""
    ION_DISTRIBUTION = "ion-distribution"
    FINAL_LEVEL_DISTRIBUTION = "final-level-distribution"
    ELECTRON_INTENSITY = "electron-intensity"
    PHOTON_INTENSITY = "photon-intensity"
    ELECTRON_COINCIDENCE = "electron-coincidence"


# ============================================================================
# Structure settings
# ============================================================================

class ScfSettings(BaseModel):
    """Orbital generation and refinement."""
    model_config = ConfigDict(frozen=True)

    start: str = StartStrategy.HYDROGENIC.value
    method: str = ScfMethod.MEAN_DFS.value
    max_iterations: int = 60
    accuracy: float = 1e-7
    mixing: float = 0.5

    # optimizedLevel: 0-based level indices whose density is optimized
    levels_to_optimize: List[int] = Field(default_factory=lambda: [0])
    # Subshell labels ("1s", "2p-") kept fixed during iterations
    frozen_subshells: List[str] = Field(default_factory=list)


class CiSettings(BaseModel):
    """Interaction terms and dominant-CSF thresholds."""
    model_config = ConfigDict(frozen=True)

    coulomb: bool = True
    breit: bool = False
    dominant_weight: float = 0.99
    mixing_floor: float = 0.01


class PlasmaSettings(BaseModel):
    """Plasma screening of the electron-electron interaction."""
    model_config = ConfigDict(frozen=True)

    model: str = "debye-hueckel"
    screening_parameter: float = 0.1   # lambda = 1/D (1/bohr)
    ion_sphere_radius: float = 0.0     # bohr


class AsfSettings(BaseModel):
    """Settings of one atomic-state-function (structure) computation."""
    model_config = ConfigDict(frozen=True)

    scf: ScfSettings = Field(default_factory=ScfSettings)
    ci: CiSettings = Field(default_factory=CiSettings)
    plasma: Optional[PlasmaSettings] = None
    diagonal_only: bool = False


# ============================================================================
# Collaborators
# ============================================================================

class GridConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    r_min: float = 1e-5
    r_max: float = 80.0
    n_points: int = 1601


class NuclearConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    Z: float
    shape: str = "point"
    mass_number: Optional[float] = None


# ============================================================================
# Cascade
# ============================================================================

class CascadeSpec(BaseModel):
    """
    Cascade graph and computation request.

    process_settings holds per-tag kernel parameters, e.g.
    {"PhotoExcAuto": {"allowed_triples": [[0, 1, 0]]}}.
    """
    model_config = ConfigDict(frozen=True)

    name: str = "cascade"
    initial_configs: List[str]
    max_electron_loss: int = 1
    max_shake_displacements: int = 0
    frozen_shells: List[str] = Field(default_factory=list)
    shake_shells: List[str] = Field(default_factory=list)
    processes: List[str] = Field(default_factory=lambda: ["Radiative", "Auger"])
    approach: str = Approach.AVERAGE_SCA.value
    photon_energies: List[float] = Field(default_factory=list)
    asf: AsfSettings = Field(default_factory=AsfSettings)
    process_settings: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


class SimulationSpec(BaseModel):
    """Population propagation request over a computed cascade."""
    model_config = ConfigDict(frozen=True)

    name: str = "simulation"
    method: str = SimulationMethod.PROBABILITY_PROPAGATION.value
    properties: List[str] = Field(
        default_factory=lambda: [PropertyKind.ION_DISTRIBUTION.value]
    )
    # (0-based level index in the initial multiplet, population)
    initial_occupations: List[Tuple[int, float]] = Field(default_factory=lambda: [(0, 1.0)])
    photon_flux: Optional[float] = None


# ============================================================================
# Run config
# ============================================================================

class RunConfig(BaseModel):
    """
    Static snapshot of a run.

    Ties together the nucleus, the grid, a structure request (configs +
    asf), and optional cascade/simulation specifications.
    """
    name: str = "run"
    nuclear: NuclearConfig
    grid: GridConfig = Field(default_factory=GridConfig)
    configs: List[str] = Field(default_factory=list)
    asf: AsfSettings = Field(default_factory=AsfSettings)
    cascade: Optional[CascadeSpec] = None
    simulation: Optional[SimulationSpec] = None
    output_dir: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def load(cls, path: Union[str, Path]) -> "RunConfig":
        """Load from YAML file."""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls(**data)

    def save(self, path: Union[str, Path]) -> None:
        """Save to YAML file."""
        path = Path(path)
        data = self.model_dump(mode="json", exclude_none=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False)

    def build_context(self, **kwargs: Any) -> "ComputationContext":
        """Construct the nuclear model and grid; extra kwargs go to the context."""
        from .context import ComputationContext
        from .nuclear import NuclearModel, RadialGrid

        nuclear = NuclearModel(
            Z=self.nuclear.Z,
            shape=self.nuclear.shape,
            mass_number=self.nuclear.mass_number,
        )
        grid = RadialGrid(
            r_min=self.grid.r_min,
            r_max=self.grid.r_max,
            n_points=self.grid.n_points,
        )
        return ComputationContext(nuclear=nuclear, grid=grid, **kwargs)


__all__ = [
    "StartStrategy",
    "ScfMethod",
    "Approach",
    "SimulationMethod",
    "PropertyKind",
    "ScfSettings",
    "CiSettings",
    "PlasmaSettings",
    "AsfSettings",
    "GridConfig",
    "NuclearConfig",
    "CascadeSpec",
    "SimulationSpec",
    "RunConfig",
]
