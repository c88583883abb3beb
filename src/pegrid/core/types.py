"""Core data structures for periodic potential-energy grids."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import product

import numpy as np


Array = np.ndarray


@dataclass(frozen=True)
class UnitCell:
    """Periodic cell; ``f_to_cartesian`` maps fractional columns to Cartesian (Angstrom)."""

    a: float
    b: float
    c: float
    f_to_cartesian: Array

    def __post_init__(self) -> None:
        mtrx = np.array(self.f_to_cartesian, dtype=float)
        if mtrx.shape != (3, 3):
            raise ValueError("f_to_cartesian must be a 3x3 array.")
        if min(self.a, self.b, self.c) <= 0.0:
            raise ValueError("Unit cell lengths a, b, c must be positive.")
        mtrx.setflags(write=False)
        object.__setattr__(self, "f_to_cartesian", mtrx)

    @property
    def volume(self) -> float:
        return float(abs(np.linalg.det(self.f_to_cartesian)))

    @property
    def lattice_vectors(self) -> Array:
        """Lattice vectors a, b, c as rows."""
        return self.f_to_cartesian.T

    @property
    def lengths(self) -> tuple[float, float, float]:
        return (float(self.a), float(self.b), float(self.c))

    def to_cartesian(self, frac: Array) -> Array:
        """Convert fractional coordinates of shape (3,) or (n, 3)."""
        frac = np.asarray(frac, dtype=float)
        return frac @ self.f_to_cartesian.T


@dataclass(frozen=True)
class HostAtomSet:
    """Host atoms with LJ parameters already mixed with the adsorbate's."""

    fractional_positions: Array
    epsilons: Array
    sigmas: Array
    symbols: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        pos = np.array(self.fractional_positions, dtype=float)
        eps = np.array(self.epsilons, dtype=float)
        sig = np.array(self.sigmas, dtype=float)
        if pos.ndim != 2 or pos.shape[1] != 3:
            raise ValueError("fractional_positions must have shape (n_atoms, 3).")
        if eps.shape != (pos.shape[0],) or sig.shape != (pos.shape[0],):
            raise ValueError("epsilons and sigmas must be 1D and aligned with fractional_positions.")
        if self.symbols is not None:
            if len(self.symbols) != pos.shape[0]:
                raise ValueError("symbols must have one entry per atom.")
            object.__setattr__(self, "symbols", tuple(str(s) for s in self.symbols))
        for arr in (pos, eps, sig):
            arr.setflags(write=False)
        object.__setattr__(self, "fractional_positions", pos)
        object.__setattr__(self, "epsilons", eps)
        object.__setattr__(self, "sigmas", sig)

    @property
    def n_atoms(self) -> int:
        return int(self.fractional_positions.shape[0])


@dataclass(frozen=True)
class ReplicationFactors:
    """Number of periodic images on either side of the origin per lattice direction."""

    n_x: int
    n_y: int
    n_z: int

    def __post_init__(self) -> None:
        for name in ("n_x", "n_y", "n_z"):
            value = getattr(self, name)
            if int(value) != value or value < 0:
                raise ValueError(f"{name} must be a non-negative integer.")
            object.__setattr__(self, name, int(value))

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.n_x, self.n_y, self.n_z)

    @property
    def n_images(self) -> int:
        return (2 * self.n_x + 1) * (2 * self.n_y + 1) * (2 * self.n_z + 1)

    def offsets(self) -> Array:
        """All integer image offsets in the image box, shape (n_images, 3)."""
        rx = range(-self.n_x, self.n_x + 1)
        ry = range(-self.n_y, self.n_y + 1)
        rz = range(-self.n_z, self.n_z + 1)
        return np.array(list(product(rx, ry, rz)), dtype=float).reshape(-1, 3)
