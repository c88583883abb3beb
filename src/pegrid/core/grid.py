"""Dense fractional-coordinate energy grids: generation and interpolated queries."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from .errors import DomainError
from .potential import energies_from_images, periodic_images
from .replication import replication_factors
from .types import HostAtomSet, UnitCell
from .units import kelvin_to_kj_per_mol


Array = np.ndarray

logger = logging.getLogger(__name__)

# Offsets closer than this (in units of one voxel) to a node snap onto it.
NODE_SNAP_TOL = 1e-9


def _lerp(lo: float, hi: float, t: float) -> float:
    if t == 0.0:
        return lo
    return (1.0 - t) * lo + t * hi


def _voxel_corner(coord: float, step: float, n: int) -> tuple[int, int, float]:
    """Lower index, upper index and offset within the voxel along one axis.

    The upper index of the last node wraps to 0: node n-1 and node 0 are the
    same physical plane, so a query at exactly 1.0 never reads past the array.
    """

    t = coord / step
    nearest = round(t)
    if abs(t - nearest) <= NODE_SNAP_TOL:
        lower = int(nearest)
        offset = 0.0
    else:
        lower = int(math.floor(t))
        offset = (coord - lower * step) / step
    lower = min(max(lower, 0), n - 1)
    upper = lower + 1 if lower + 1 < n else 0
    return lower, upper, offset


@dataclass(frozen=True)
class EnergyGrid:
    """Energies (kJ/mol) on the closed fractional unit cube, shape (N_x, N_y, N_z).

    Node (i, j, k) sits at fractional (i*dx_f, j*dy_f, k*dz_f) with
    dx_f = 1/(N_x - 1). Both boundary faces of each axis are stored even though
    they are periodic images of each other.
    """

    energies: Array
    structure_name: str = ""
    forcefield_name: str = ""
    adsorbate: str = ""

    def __post_init__(self) -> None:
        arr = np.array(self.energies, dtype=float)
        if arr.ndim != 3:
            raise ValueError("energies must be a 3D array.")
        if min(arr.shape) < 2:
            raise ValueError("Energy grids need at least two points per axis.")
        arr.setflags(write=False)
        object.__setattr__(self, "energies", arr)

    @property
    def shape(self) -> tuple[int, int, int]:
        n_x, n_y, n_z = self.energies.shape
        return int(n_x), int(n_y), int(n_z)

    @property
    def spacing(self) -> tuple[float, float, float]:
        """Fractional grid spacing (dx_f, dy_f, dz_f)."""
        n_x, n_y, n_z = self.shape
        return 1.0 / (n_x - 1), 1.0 / (n_y - 1), 1.0 / (n_z - 1)

    def fractional_axes(self) -> tuple[Array, Array, Array]:
        return tuple(np.arange(n, dtype=float) * d for n, d in zip(self.shape, self.spacing))

    def index_to_fractional_coord(self, i: int, j: int, k: int) -> Array:
        for idx, n, axis in zip((i, j, k), self.shape, "xyz"):
            if not 0 <= idx < n:
                raise IndexError(f"Grid index {idx} out of range along {axis} (N={n}).")
        dx_f, dy_f, dz_f = self.spacing
        return np.array([i * dx_f, j * dy_f, k * dz_f], dtype=float)

    def minimum(self) -> tuple[tuple[int, int, int], float, Array]:
        """Index, energy and fractional coordinate of the lowest grid point.

        Ties resolve to the first node in (i, j, k) row-major order.
        """

        flat = int(np.argmin(self.energies))
        i, j, k = (int(v) for v in np.unravel_index(flat, self.energies.shape))
        return (i, j, k), float(self.energies[i, j, k]), self.index_to_fractional_coord(i, j, k)

    def energy_at(self, x_f: float, y_f: float, z_f: float) -> float:
        """Trilinear interpolation of the grid at a fractional point in [0, 1]^3.

        Returns the stored value exactly when the point is a grid node.
        """

        for value, axis in zip((x_f, y_f, z_f), "xyz"):
            if not 0.0 <= value <= 1.0:
                raise DomainError(f"Fractional {axis} coordinate {value!r} outside [0, 1].")

        dx_f, dy_f, dz_f = self.spacing
        n_x, n_y, n_z = self.shape
        i0, i1, x_d = _voxel_corner(float(x_f), dx_f, n_x)
        j0, j1, y_d = _voxel_corner(float(y_f), dy_f, n_y)
        k0, k1, z_d = _voxel_corner(float(z_f), dz_f, n_z)
        e = self.energies

        # collapse along x
        c00 = _lerp(e[i0, j0, k0], e[i1, j0, k0], x_d)
        c10 = _lerp(e[i0, j1, k0], e[i1, j1, k0], x_d)
        c01 = _lerp(e[i0, j0, k1], e[i1, j0, k1], x_d)
        c11 = _lerp(e[i0, j1, k1], e[i1, j1, k1], x_d)
        # then y
        c0 = _lerp(c00, c10, y_d)
        c1 = _lerp(c01, c11, y_d)
        # then z
        return float(_lerp(c0, c1, z_d))


def grid_dimensions(cell: UnitCell, grid_spacing: float) -> tuple[int, int, int]:
    """Number of nodes per axis, ``floor(length / spacing) + 1`` and at least 2."""

    if grid_spacing <= 0.0:
        raise ValueError("grid_spacing must be positive.")
    n = [max(2, int(math.floor(length / grid_spacing)) + 1) for length in cell.lengths]
    return n[0], n[1], n[2]


def generate_energy_grid(
    cell: UnitCell,
    host_atoms: HostAtomSet,
    grid_spacing: float,
    cutoff: float,
    *,
    structure_name: str = "",
    forcefield_name: str = "",
    adsorbate: str = "",
) -> EnergyGrid:
    """Evaluate the periodic LJ energy at every node of a fractional grid.

    Nodes are visited with x slowest and z fastest. Each value is converted from
    Kelvin-equivalent units to kJ/mol before it is stored.
    """

    rep = replication_factors(cell, cutoff)
    logger.info(
        "Unit cell replication factors for LJ cutoff of %.2f A: %d by %d by %d",
        cutoff,
        rep.n_x,
        rep.n_y,
        rep.n_z,
    )
    n_x, n_y, n_z = grid_dimensions(cell, grid_spacing)
    logger.info("Grid is %d by %d by %d points, a total of %d grid points.", n_x, n_y, n_z, n_x * n_y * n_z)
    steps = np.array([1.0 / (n_x - 1), 1.0 / (n_y - 1), 1.0 / (n_z - 1)])
    logger.info("Fractional grid spacing: dx_f = %f, dy_f = %f, dz_f = %f", *steps)
    cart = cell.f_to_cartesian @ steps
    logger.info("Grid spacing: dx = %.2f, dy = %.2f, dz = %.2f", *cart)

    xf = np.arange(n_x, dtype=float) * steps[0]
    yf = np.arange(n_y, dtype=float) * steps[1]
    zf = np.arange(n_z, dtype=float) * steps[2]

    images = periodic_images(cell, host_atoms, rep)
    raw = np.empty((n_x, n_y, n_z), dtype=float)
    report_every = max(1, n_x // 10)
    for i in range(n_x):
        for j in range(n_y):
            frac = np.column_stack([np.full(n_z, xf[i]), np.full(n_z, yf[j]), zf])
            raw[i, j, :] = energies_from_images(cell.to_cartesian(frac), images, cutoff)
        if (i + 1) % report_every == 0:
            logger.info("Percent finished: %.1f", 100.0 * (i + 1) / n_x)

    n_bad = int(np.count_nonzero(~np.isfinite(raw)))
    if n_bad:
        logger.warning("%d grid points coincide with host atoms; their energies are not finite.", n_bad)

    return EnergyGrid(
        energies=np.asarray(kelvin_to_kj_per_mol(raw), dtype=float),
        structure_name=structure_name,
        forcefield_name=forcefield_name,
        adsorbate=adsorbate,
    )
