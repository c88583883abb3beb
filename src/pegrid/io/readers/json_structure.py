"""Normalized JSON/dict structure payloads to ``Framework``.

Expected keys::

    {
      "name": "cubic_test",
      "cell": {"a": 10.0, "b": 10.0, "c": 10.0, "alpha": 90, "beta": 90, "gamma": 90},
      "atoms": [{"symbol": "C", "position": [0.0, 0.0, 0.0]}, ...]
    }

Positions are fractional.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np

from pegrid.modeling.schema import Framework
from pegrid.modeling.validators import validate_framework


def _load_source_payload(source: Any) -> tuple[dict[str, Any], str | None]:
    if isinstance(source, dict):
        return source, None
    path = Path(source)
    with path.open("r", encoding="utf-8") as f:
        return json.load(f), str(path)


def read_json_structure(source: Any) -> Framework:
    payload, path = _load_source_payload(source)
    try:
        cell = payload["cell"]
        atoms = payload["atoms"]
    except KeyError as exc:
        raise ValueError(f"Structure payload is missing key {exc}.") from exc

    symbols = tuple(str(atom["symbol"]) for atom in atoms)
    positions = np.asarray([atom["position"] for atom in atoms], dtype=float).reshape(-1, 3)
    default_name = Path(path).stem if path is not None else "structure"
    framework = Framework(
        name=str(payload.get("name", default_name)),
        a=float(cell["a"]),
        b=float(cell["b"]),
        c=float(cell["c"]),
        alpha=float(cell.get("alpha", 90.0)),
        beta=float(cell.get("beta", 90.0)),
        gamma=float(cell.get("gamma", 90.0)),
        atom_symbols=symbols,
        fractional_positions=np.mod(positions, 1.0),
        metadata={"source_format": "json", "path": path},
    )
    validate_framework(framework)
    return framework
