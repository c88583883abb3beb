"""Gaussian-cube style text files for energy grids.

Layout written by :func:`write_cube`::

    This is a grid file generated by PEGrid
    Loop order: x, y, z
    0 0.000000 0.000000 0.000000          natoms, origin
    N_x vx vy vz                          voxel step along each axis (Angstrom)
    N_y vx vy vz
    N_z vx vy vz
    e e e e e e                           values, i outer / j middle / k inner,
    e e                                   6 per line, each (i, j) run on new lines

Values are in kJ/mol. Cartesian vectors are in Angstrom, not Bohr.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any

import numpy as np

from pegrid.core.errors import FileFormatError
from pegrid.core.grid import EnergyGrid
from pegrid.core.types import UnitCell


Array = np.ndarray

VALUES_PER_LINE = 6
DEFAULT_COMMENTS = ("This is a grid file generated by PEGrid", "Loop order: x, y, z")


@dataclass(frozen=True)
class CubeData:
    """Everything stored in a cube file."""

    n_points: tuple[int, int, int]
    origin: Array
    voxel_vectors: Array
    values: Array
    n_atoms: int = 0
    comments: tuple[str, str] = DEFAULT_COMMENTS


def _write_body(fh: IO[str], grid: EnergyGrid, cell: UnitCell, comments: tuple[str, str]) -> None:
    n_x, n_y, n_z = grid.shape
    fh.write(f"{comments[0]}\n{comments[1]}\n")
    fh.write(f"{0:d} {0.0:f} {0.0:f} {0.0:f}\n")
    mtrx = cell.f_to_cartesian
    for d, n in enumerate((n_x, n_y, n_z)):
        vx, vy, vz = mtrx[:, d] / (n - 1)
        fh.write(f"{n:d} {vx:f} {vy:f} {vz:f}\n")

    for i in range(n_x):
        for j in range(n_y):
            run = grid.energies[i, j, :]
            for k in range(n_z):
                fh.write(f"{run[k]:e} ")
                if (k + 1) % VALUES_PER_LINE == 0:
                    fh.write("\n")
            fh.write("\n")


def write_cube(
    path: str | Path,
    grid: EnergyGrid,
    cell: UnitCell,
    *,
    comments: tuple[str, str] | None = None,
) -> Path:
    """Write ``grid`` to ``path``.

    The file is written next to its destination under a temporary name and moved
    into place once complete, so an interrupted write never leaves a truncated
    grid at ``path``.
    """

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{out.name}.", suffix=".tmp", dir=out.parent)
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            _write_body(fh, grid, cell, comments or DEFAULT_COMMENTS)
        os.replace(tmp, out)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    return out


def _fields(line: str, n: int, what: str) -> list[str]:
    toks = line.split()
    if len(toks) < n:
        raise FileFormatError(f"Cube {what} line needs {n} fields, got: '{line.strip()}'")
    return toks[:n]


def read_cube(source: Any) -> CubeData:
    """Parse a cube file; dimensions come from the first field of lines 4-6."""

    path = Path(source)
    with path.open("r", encoding="utf-8") as fh:
        lines = fh.read().splitlines()
    if len(lines) < 6:
        raise FileFormatError(f"Cube file '{path}' is truncated: missing header lines.")

    try:
        head = _fields(lines[2], 4, "atom-count/origin")
        n_atoms = int(head[0])
        origin = np.array([float(x) for x in head[1:4]], dtype=float)

        n_points: list[int] = []
        voxel_vectors = np.zeros((3, 3), dtype=float)
        for d in range(3):
            toks = _fields(lines[3 + d], 4, "axis")
            n_points.append(int(toks[0]))
            voxel_vectors[d] = [float(x) for x in toks[1:4]]
    except FileFormatError:
        raise
    except ValueError as exc:
        raise FileFormatError(f"Invalid cube header in '{path}': {exc}") from exc

    if any(n < 2 for n in n_points):
        raise FileFormatError(f"Cube grid needs at least 2 points per axis, got {tuple(n_points)}.")

    first_value_line = 6 + abs(n_atoms)
    if len(lines) < first_value_line:
        raise FileFormatError(f"Cube file '{path}' is truncated inside the atom list.")
    tokens = " ".join(lines[first_value_line:]).split()
    expected = n_points[0] * n_points[1] * n_points[2]
    if len(tokens) != expected:
        raise FileFormatError(
            f"Cube file '{path}' holds {len(tokens)} values but its header declares "
            f"{n_points[0]} x {n_points[1]} x {n_points[2]} = {expected}."
        )
    try:
        values = np.array([float(t) for t in tokens], dtype=float)
    except ValueError as exc:
        raise FileFormatError(f"Non-numeric grid value in '{path}': {exc}") from exc

    return CubeData(
        n_points=(n_points[0], n_points[1], n_points[2]),
        origin=origin,
        voxel_vectors=voxel_vectors,
        values=values.reshape(n_points),
        n_atoms=n_atoms,
        comments=(lines[0], lines[1]),
    )


def load_energy_grid(
    source: Any,
    *,
    structure_name: str = "",
    forcefield_name: str = "",
    adsorbate: str = "",
) -> EnergyGrid:
    """Load a cube file into a read-only :class:`EnergyGrid`."""

    cube = read_cube(source)
    return EnergyGrid(
        energies=cube.values,
        structure_name=structure_name,
        forcefield_name=forcefield_name,
        adsorbate=adsorbate,
    )
