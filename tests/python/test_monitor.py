# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Tests for result storage, run directories and console output.

File: test_monitor.py
Date: October, 2026
"""

from __future__ import annotations

import json
import logging

import numpy as np

from atomcascade.monitor.logger import MonitorLogger, remove_file_logging, setup_file_logging
from atomcascade.monitor.reporters import ConsoleReporter
from atomcascade.monitor.storage import ResultStore, RunContext


def test_result_store_splits_arrays(tmp_path):
    store = ResultStore(tmp_path)
    results = {
        "name": "demo",
        "energies": np.array([-1.0, -0.5]),
        "nested": {"steps": [{"rate": np.arange(3.0)}]},
        "counts": {(1, 2): 0.5},
    }
    store.save("demo", results)

    raw = json.loads((tmp_path / "demo.json").read_text())
    assert raw["energies"] == {"__npz__": "energies"}
    assert (tmp_path / "demo.npz").exists()

    loaded = store.load("demo")
    np.testing.assert_array_equal(loaded["energies"], results["energies"])
    np.testing.assert_array_equal(loaded["nested"]["steps"][0]["rate"], np.arange(3.0))
    assert loaded["counts"] == {"(1, 2)": 0.5}


def test_result_store_without_arrays(tmp_path):
    store = ResultStore(tmp_path)
    store.save("plain", {"a": 1, "b": [1, 2]})
    assert not (tmp_path / "plain.npz").exists()
    assert store.load("plain") == {"a": 1, "b": [1, 2]}


def test_run_context_layout(tmp_path):
    run = RunContext(tmp_path, name="demo")
    run.save_config({"Z": 10.0})
    run.close()
    payload = json.loads((run.root / "config.json").read_text())
    assert run.root.name.endswith("_demo")
    assert payload["run_info"]["name"] == "demo"
    assert payload["config"] == {"Z": 10.0}


def test_monitor_logger_strips_color_in_file(tmp_path, capsys):
    path = tmp_path / "out.log"
    with path.open("w") as f:
        mon = MonitorLogger(file=f)
        mon.info(mon._blue("colored"))
    assert "\x1b[" in capsys.readouterr().out
    assert path.read_text() == "colored\n"


def test_console_reporter_prints_distribution(capsys):
    ConsoleReporter(MonitorLogger(color=False)).on_distribution(
        "sim", {"ion-distribution": {10: 0.25, 9: 0.75}}
    )
    out = capsys.readouterr().out
    assert "sim: ion-distribution" in out
    assert "0.75000000" in out


def test_file_logging_attaches_and_detaches(tmp_path):
    handler = setup_file_logging(tmp_path, logging.INFO)
    logging.getLogger("atomcascade.structure.scf").info("hello from scf")
    remove_file_logging(handler)
    assert "hello from scf" in (tmp_path / "atomcascade.log").read_text()
    assert handler not in logging.getLogger("atomcascade").handlers
