"""Energy unit conversions."""

from __future__ import annotations

import numpy as np


# Gas constant as used by the grid files [J/(mol K)].
GAS_CONSTANT_J_PER_MOL_K = 8.314


def kelvin_to_kj_per_mol(energy_k: np.ndarray | float) -> np.ndarray | float:
    """Convert an energy expressed as E/k_B [K] to kJ/mol."""

    return np.asarray(energy_k) * GAS_CONSTANT_J_PER_MOL_K / 1000.0


def kj_per_mol_to_kelvin(energy_kj: np.ndarray | float) -> np.ndarray | float:
    """Convert kJ/mol to E/k_B [K]."""

    return np.asarray(energy_kj) * 1000.0 / GAS_CONSTANT_J_PER_MOL_K
