"""Truncated 12-6 Lennard-Jones sums over periodic images of host atoms."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.spatial import cKDTree

from .types import HostAtomSet, ReplicationFactors, UnitCell


Array = np.ndarray

# Closest approach (Angstrom) below which a point is reported as near-singular.
NEAR_SINGULAR_DISTANCE = 0.1


@dataclass(frozen=True)
class ImageSet:
    """Cartesian positions of every (atom, image) pair with aligned LJ parameters."""

    positions: Array
    epsilons: Array
    sigmas: Array

    @property
    def size(self) -> int:
        return int(self.positions.shape[0])


def periodic_images(cell: UnitCell, host_atoms: HostAtomSet, rep_factors: ReplicationFactors) -> ImageSet:
    """Replicate host atoms over the image box and convert to Cartesian.

    Images are ordered atom-major, offsets in lexicographic order.
    """

    offsets = rep_factors.offsets()
    frac = host_atoms.fractional_positions[:, np.newaxis, :] + offsets[np.newaxis, :, :]
    frac = frac.reshape(-1, 3)
    n_img = offsets.shape[0]
    return ImageSet(
        positions=cell.to_cartesian(frac),
        epsilons=np.repeat(host_atoms.epsilons, n_img),
        sigmas=np.repeat(host_atoms.sigmas, n_img),
    )


def energies_from_images(points_cart: Array, images: ImageSet, cutoff: float) -> Array:
    """LJ energy (raw units of epsilon) at each Cartesian point, shape (n_points,).

    Pairs with r^2 > cutoff^2 contribute nothing; there is no smoothing or tail
    correction. Points on top of an image give inf, not a clamped value.
    """

    pts = np.atleast_2d(np.asarray(points_cart, dtype=float))
    out = np.zeros(pts.shape[0], dtype=float)
    if images.size == 0:
        return out
    cutoff2 = float(cutoff) * float(cutoff)
    for p, point in enumerate(pts):
        diffs = images.positions - point
        r2 = np.einsum("ij,ij->i", diffs, diffs)
        inside = r2 <= cutoff2
        if not np.any(inside):
            continue
        with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
            sr2 = (images.sigmas[inside] ** 2) / r2[inside]
            sr6 = sr2 * sr2 * sr2
            # sr6 * (sr6 - 1) keeps r -> 0 at +inf instead of inf - inf.
            out[p] = float(np.sum(4.0 * images.epsilons[inside] * sr6 * (sr6 - 1.0)))
    return out


def lj_energy_at_point(
    point_frac: Array,
    cell: UnitCell,
    host_atoms: HostAtomSet,
    rep_factors: ReplicationFactors,
    cutoff: float,
) -> float:
    """Energy at a fractional point from all host-atom images within ``cutoff``.

    Output is in the units of the mixed epsilons (Kelvin-equivalent for the
    usual eps/k_B tables); conversion to kJ/mol is left to the caller.
    """

    images = periodic_images(cell, host_atoms, rep_factors)
    point_cart = cell.to_cartesian(np.asarray(point_frac, dtype=float).reshape(3))
    return float(energies_from_images(point_cart, images, cutoff)[0])


def nearest_image_distance(
    point_frac: Array,
    cell: UnitCell,
    host_atoms: HostAtomSet,
    rep_factors: ReplicationFactors,
) -> float:
    """Cartesian distance from a fractional point to the closest host-atom image."""

    images = periodic_images(cell, host_atoms, rep_factors)
    if images.size == 0:
        return float("inf")
    point_cart = cell.to_cartesian(np.asarray(point_frac, dtype=float).reshape(3))
    dist, _ = cKDTree(images.positions).query(point_cart)
    return float(dist)


def is_near_singular(
    point_frac: Array,
    cell: UnitCell,
    host_atoms: HostAtomSet,
    rep_factors: ReplicationFactors,
    threshold: float = NEAR_SINGULAR_DISTANCE,
) -> bool:
    return nearest_image_distance(point_frac, cell, host_atoms, rep_factors) < threshold
