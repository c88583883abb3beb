"""Force-field CSV tables to ``ForceField``."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any

from pegrid.modeling.schema import ForceField
from pegrid.modeling.validators import validate_forcefield


def _find_column(header: list[str], prefix: str) -> int:
    for idx, name in enumerate(header):
        if name.strip().lower().startswith(prefix):
            return idx
    raise ValueError(f"Force-field header lacks a '{prefix}' column: {header}")


def read_forcefield(source: Any, name: str | None = None) -> ForceField:
    """Parse ``atom,epsilon(K),sigma(A)`` rows; extra columns are ignored.

    Columns are matched by prefix, so ``epsilon(K)`` and ``sigma(A)`` both work.
    Blank lines and lines starting with ``#`` are skipped.
    """

    path = Path(source)
    with path.open("r", encoding="utf-8", newline="") as fh:
        rows = []
        for row in csv.reader(fh):
            if not any(c.strip() for c in row) or row[0].lstrip().startswith("#"):
                continue
            rows.append(row)
    if not rows:
        raise ValueError(f"Force-field file '{path}' is empty.")

    header = rows[0]
    i_atom = _find_column(header, "atom")
    i_eps = _find_column(header, "epsilon")
    i_sig = _find_column(header, "sigma")

    epsilons: dict[str, float] = {}
    sigmas: dict[str, float] = {}
    for row in rows[1:]:
        if len(row) <= max(i_atom, i_eps, i_sig):
            raise ValueError(f"Incomplete force-field row in '{path}': {row}")
        atom = row[i_atom].strip()
        if atom in epsilons:
            raise ValueError(f"Duplicate atom type '{atom}' in force field '{path}'.")
        epsilons[atom] = float(row[i_eps])
        sigmas[atom] = float(row[i_sig])

    ff = ForceField(
        name=name or path.stem,
        epsilons=epsilons,
        sigmas=sigmas,
        metadata={"source_format": "csv", "path": str(path)},
    )
    validate_forcefield(ff)
    return ff
