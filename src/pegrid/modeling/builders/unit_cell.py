"""Fractional-to-Cartesian transform from crystallographic cell parameters."""

from __future__ import annotations

import numpy as np

from pegrid.core.errors import GeometryError
from pegrid.core.types import UnitCell
from pegrid.modeling.schema import Framework


def unit_cell_from_parameters(
    a: float,
    b: float,
    c: float,
    alpha: float,
    beta: float,
    gamma: float,
) -> UnitCell:
    """Build a cell with a along x and b in the xy plane (angles in degrees)."""

    ca, cb, cg = np.cos(np.radians([alpha, beta, gamma]))
    sg = np.sin(np.radians(gamma))
    volume_term = 1.0 - ca * ca - cb * cb - cg * cg + 2.0 * ca * cb * cg
    if volume_term <= 0.0 or abs(sg) < 1e-12:
        raise GeometryError(f"Cell angles ({alpha}, {beta}, {gamma}) do not describe a cell with positive volume.")
    volume = a * b * c * np.sqrt(volume_term)
    mtrx = np.array(
        [
            [a, b * cg, c * cb],
            [0.0, b * sg, c * (ca - cb * cg) / sg],
            [0.0, 0.0, volume / (a * b * sg)],
        ],
        dtype=float,
    )
    # cos(90 deg) is ~6e-17, not 0; clean up so orthogonal cells stay diagonal.
    mtrx[np.abs(mtrx) < 1e-12 * max(a, b, c)] = 0.0
    return UnitCell(a=float(a), b=float(b), c=float(c), f_to_cartesian=mtrx)


def build_unit_cell(framework: Framework) -> UnitCell:
    return unit_cell_from_parameters(*framework.cell_parameters)
