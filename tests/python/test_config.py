# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Tests for run configuration models and YAML persistence.

File: test_config.py
Date: October, 2026
"""

from __future__ import annotations

import pytest
import yaml
from pydantic import ValidationError

from atomcascade.config import (
    CascadeSpec,
    CiSettings,
    NuclearConfig,
    RunConfig,
    ScfSettings,
    SimulationSpec,
)
from atomcascade.context import ComputationContext
from atomcascade.errors import InvalidConfiguration
from atomcascade.nuclear import NuclearShape


def _config() -> RunConfig:
    return RunConfig(
        name="ne-auger",
        nuclear=NuclearConfig(Z=10.0, shape="uniform", mass_number=20.0),
        configs=["1s 2s^2 2p^6"],
        cascade=CascadeSpec(
            initial_configs=["1s 2s^2 2p^6"],
            max_shake_displacements=1,
            process_settings={"Auger": {"channel_rate": 0.01}},
        ),
        simulation=SimulationSpec(initial_occupations=[(0, 0.5), (1, 0.5)]),
    )


def test_defaults():
    assert ScfSettings().start == "hydrogenic"
    assert ScfSettings().method == "meanDFS"
    ci = CiSettings()
    assert (ci.coulomb, ci.breit) == (True, False)
    assert (ci.dominant_weight, ci.mixing_floor) == (0.99, 0.01)
    assert CascadeSpec(initial_configs=["1s"]).processes == ["Radiative", "Auger"]
    assert SimulationSpec().method == "probability-propagation"


def test_yaml_round_trip(tmp_path):
    cfg = _config()
    path = tmp_path / "run.yaml"
    cfg.save(path)
    raw = yaml.safe_load(path.read_text())
    assert raw["cascade"]["process_settings"]["Auger"]["channel_rate"] == 0.01
    assert "output_dir" not in raw
    assert RunConfig.load(path) == cfg


def test_settings_are_frozen():
    with pytest.raises(ValidationError):
        ScfSettings().mixing = 0.1


def test_build_context():
    ctx = _config().build_context()
    assert isinstance(ctx, ComputationContext)
    assert ctx.nuclear.shape is NuclearShape.UNIFORM
    assert ctx.nuclear.radius > 0.0
    assert ctx.grid.size == 1601
    assert "Auger" in ctx.registry


def test_unknown_nuclear_shape_rejected():
    cfg = RunConfig(nuclear=NuclearConfig(Z=10.0, shape="fermi"))
    with pytest.raises(InvalidConfiguration):
        cfg.build_context()
