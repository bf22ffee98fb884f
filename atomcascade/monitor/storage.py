# Copyright 2026 The AtomCascade Authors
# SPDX-License-Identifier: Apache-2.0

"""
Persistent storage for run artifacts.

The core hands over an opaque results mapping; ResultStore writes its
scalar/nested part to JSON and every NumPy array to one NPZ file, with
array locations recorded in the JSON as {"__npz__": key}.

File: atomcascade/monitor/storage.py
Date: October, 2026
"""

from __future__ import annotations

import enum
import json
from dataclasses import asdict, is_dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Mapping, TextIO, Union

import numpy as np
from pydantic import BaseModel

PathLike = Union[str, Path]


def _to_json_safe(obj: Any) -> Any:
    """Recursively convert object to JSON-serializable representation."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if is_dataclass(obj) and not isinstance(obj, type):
        return {k: _to_json_safe(v) for k, v in asdict(obj).items()}
    if isinstance(obj, enum.Enum):
        return obj.value
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, dict):
        return {str(_to_json_safe(k)): _to_json_safe(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_to_json_safe(x) for x in obj]
    return obj


def _split_arrays(obj: Any, arrays: dict[str, np.ndarray], prefix: str) -> Any:
    """Replace arrays by NPZ references, collecting them in `arrays`."""
    if isinstance(obj, np.ndarray):
        key = prefix or f"array_{len(arrays)}"
        arrays[key] = obj
        return {"__npz__": key}
    if isinstance(obj, Mapping):
        return {
            str(k): _split_arrays(v, arrays, f"{prefix}.{k}" if prefix else str(k))
            for k, v in obj.items()
        }
    if isinstance(obj, (list, tuple)):
        return [_split_arrays(v, arrays, f"{prefix}.{i}") for i, v in enumerate(obj)]
    return _to_json_safe(obj)


def _join_arrays(obj: Any, arrays: Mapping[str, np.ndarray]) -> Any:
    if isinstance(obj, dict):
        if set(obj) == {"__npz__"}:
            return np.asarray(arrays[obj["__npz__"]])
        return {k: _join_arrays(v, arrays) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_join_arrays(v, arrays) for v in obj]
    return obj


class RunContext:
    """
    Run directory lifecycle with timestamped unique directories.

    Creates `{timestamp}_{name}` under root_dir and an output log file.
    """

    def __init__(self, root_dir: PathLike = "runs", name: str = "run") -> None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.name = name
        self.run_id = f"{timestamp}_{name}"
        self.root = Path(root_dir) / self.run_id
        self.root.mkdir(parents=True, exist_ok=True)
        self.created_at = datetime.now().isoformat(timespec="seconds")
        self._log_file: TextIO = open(self.root / "stdout.log", "a", encoding="utf-8")

    @property
    def log_file(self) -> TextIO:
        return self._log_file

    def save_config(self, cfg: Any) -> None:
        """Save configuration and run identification to config.json."""
        payload: Dict[str, Any] = {
            "run_info": {"id": self.run_id, "name": self.name, "created_at": self.created_at},
            "config": _to_json_safe(cfg),
        }
        with open(self.root / "config.json", "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)

    def close(self) -> None:
        self._log_file.close()


class ResultStore:
    """Snapshot results mappings as `<name>.json` + `<name>.npz` in one directory."""

    def __init__(self, root: PathLike) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    @classmethod
    def for_run(cls, run: RunContext) -> "ResultStore":
        return cls(run.root)

    def save(self, name: str, results: Mapping[str, Any]) -> Path:
        arrays: dict[str, np.ndarray] = {}
        payload = _split_arrays(results, arrays, "")
        path = self.root / f"{name}.json"
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        if arrays:
            np.savez(self.root / f"{name}.npz", **arrays)
        return path

    def load(self, name: str) -> Dict[str, Any]:
        path = self.root / f"{name}.json"
        with path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
        npz_path = self.root / f"{name}.npz"
        if not npz_path.exists():
            return payload
        with np.load(npz_path) as data:
            arrays = {k: data[k] for k in data.files}
        return _join_arrays(payload, arrays)


__all__ = ["RunContext", "ResultStore"]
