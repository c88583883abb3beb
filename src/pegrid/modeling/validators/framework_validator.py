"""Validation helpers for structure and force-field records."""

from __future__ import annotations

import numpy as np

from pegrid.modeling.schema import ForceField, Framework, GridConfig


def validate_framework(framework: Framework) -> None:
    if min(framework.a, framework.b, framework.c) <= 0.0:
        raise ValueError(f"Framework '{framework.name}' must have positive cell lengths.")
    for name in ("alpha", "beta", "gamma"):
        angle = getattr(framework, name)
        if not 0.0 < angle < 180.0:
            raise ValueError(f"Framework '{framework.name}' has invalid {name}={angle}; expected (0, 180) degrees.")
    pos = np.asarray(framework.fractional_positions, dtype=float)
    if pos.ndim != 2 or pos.shape[1] != 3:
        raise ValueError("Framework.fractional_positions must have shape (n_atoms, 3).")
    if pos.shape[0] != len(framework.atom_symbols):
        raise ValueError("Framework.atom_symbols must have one entry per position.")
    if not np.all(np.isfinite(pos)):
        raise ValueError("Framework.fractional_positions must be finite.")


def validate_forcefield(forcefield: ForceField) -> None:
    if set(forcefield.epsilons) != set(forcefield.sigmas):
        raise ValueError(f"Force field '{forcefield.name}' must define epsilon and sigma for the same atom types.")
    if len(forcefield.epsilons) == 0:
        raise ValueError(f"Force field '{forcefield.name}' is empty.")
    for atom_type in forcefield.epsilons:
        eps, sigma = forcefield.params(atom_type)
        if eps < 0.0:
            raise ValueError(f"Force field '{forcefield.name}': epsilon of '{atom_type}' must be non-negative.")
        if sigma <= 0.0:
            raise ValueError(f"Force field '{forcefield.name}': sigma of '{atom_type}' must be positive.")


def validate_grid_config(config: GridConfig) -> None:
    if config.grid_spacing <= 0.0:
        raise ValueError("GridConfig.grid_spacing must be positive.")
    if config.cutoff <= 0.0:
        raise ValueError("GridConfig.cutoff must be positive.")
