"""CSSR crystal structure files to ``Framework``."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import numpy as np

from pegrid.modeling.schema import Framework
from pegrid.modeling.validators import validate_framework


_ELEMENT_RE = re.compile(r"^([A-Za-z]+)")


def _element(label: str) -> str:
    m = _ELEMENT_RE.match(label)
    if m is None:
        raise ValueError(f"Cannot read an atom type from CSSR label '{label}'.")
    return m.group(1)


def read_cssr(source: Any) -> Framework:
    """Parse a CSSR file with fractional coordinates.

    Line 1 holds a, b, c; line 2 alpha, beta, gamma; line 3 the atom count;
    line 4 a title. Atom lines are ``<index> <label> <x> <y> <z> ...``.
    Labels such as ``O12`` are reduced to their element part.
    """

    path = Path(source)
    lines = [ln.rstrip("\n") for ln in path.open("r", encoding="utf-8")]
    if len(lines) < 4:
        raise ValueError(f"CSSR file seems too short: '{path}'")

    lengths = lines[0].split()
    angles = lines[1].split()
    if len(lengths) < 3 or len(angles) < 3:
        raise ValueError(f"Invalid CSSR cell lines in '{path}'.")
    a, b, c = (float(x) for x in lengths[:3])
    alpha, beta, gamma = (float(x) for x in angles[:3])
    count_line = lines[2].split()
    n_atoms = int(count_line[0])
    if len(count_line) > 1 and int(count_line[1]) != 0:
        raise ValueError(
            f"CSSR file '{path}' uses Cartesian coordinates (flag {count_line[1]}); "
            "only fractional coordinates (flag 0) are supported."
        )

    symbols: list[str] = []
    positions: list[list[float]] = []
    for line in lines[4:]:
        toks = line.split()
        if not toks:
            continue
        if len(toks) < 5:
            raise ValueError(f"Invalid atom line in CSSR file: '{line}'")
        symbols.append(_element(toks[1]))
        positions.append([float(toks[2]), float(toks[3]), float(toks[4])])
        if len(symbols) == n_atoms:
            break
    if len(symbols) != n_atoms:
        raise ValueError(f"CSSR file '{path}' declares {n_atoms} atoms but lists {len(symbols)}.")

    framework = Framework(
        name=path.stem,
        a=a,
        b=b,
        c=c,
        alpha=alpha,
        beta=beta,
        gamma=gamma,
        atom_symbols=tuple(symbols),
        fractional_positions=np.mod(np.asarray(positions, dtype=float).reshape(-1, 3), 1.0),
        metadata={"source_format": "cssr", "path": str(path), "title": lines[3].strip()},
    )
    validate_framework(framework)
    return framework
