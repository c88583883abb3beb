"""Unit-cell replication factors for truncated pair sums under periodic boundaries."""

from __future__ import annotations

import math

import numpy as np

from .errors import GeometryError
from .types import ReplicationFactors, UnitCell


Array = np.ndarray

ZERO_VOLUME_TOL = 1e-12


def perpendicular_widths(cell: UnitCell) -> Array:
    """Distances between the three pairs of parallel cell faces.

    For axis d the width is V / |v_e x v_f|, where v_e and v_f are the two other
    lattice vectors spanning the face. For orthogonal cells this reduces to the
    lattice lengths; for skewed cells it is smaller, which is the quantity that
    limits how far a cutoff sphere reaches into neighboring images.
    """

    volume = cell.volume
    if volume < ZERO_VOLUME_TOL:
        raise GeometryError(f"Unit cell is degenerate (volume={volume:.3e}).")
    a, b, c = cell.lattice_vectors
    areas = np.array(
        [
            np.linalg.norm(np.cross(b, c)),
            np.linalg.norm(np.cross(c, a)),
            np.linalg.norm(np.cross(a, b)),
        ],
        dtype=float,
    )
    return volume / areas


def replication_factors(cell: UnitCell, cutoff: float) -> ReplicationFactors:
    """Return the image box guaranteeing no pair within ``cutoff`` is missed.

    ``n_d = ceil(cutoff / width_d)`` per axis, combined as a bounding box. The
    box is slightly conservative: a few corner images beyond the cutoff are
    visited and then rejected by the distance test.
    """

    if cutoff <= 0.0:
        raise ValueError("cutoff must be positive.")
    widths = perpendicular_widths(cell)
    n = [int(math.ceil(float(cutoff) / float(w))) for w in widths]
    return ReplicationFactors(n_x=n[0], n_y=n[1], n_z=n[2])
