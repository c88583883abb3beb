"""Mix framework and adsorbate LJ parameters into a HostAtomSet."""

from __future__ import annotations

import numpy as np

from pegrid.core.types import HostAtomSet
from pegrid.modeling.schema import ForceField, Framework
from pegrid.modeling.validators import validate_forcefield, validate_framework


def lorentz_berthelot(
    eps_i: np.ndarray | float,
    sigma_i: np.ndarray | float,
    eps_j: float,
    sigma_j: float,
) -> tuple[np.ndarray, np.ndarray]:
    """eps_ij = sqrt(eps_i * eps_j), sigma_ij = (sigma_i + sigma_j) / 2."""

    eps = np.sqrt(np.asarray(eps_i, dtype=float) * float(eps_j))
    sigma = 0.5 * (np.asarray(sigma_i, dtype=float) + float(sigma_j))
    return eps, sigma


def build_host_atoms(
    framework: Framework,
    forcefield: ForceField,
    adsorbate: str,
    *,
    adsorbate_params: tuple[float, float] | None = None,
) -> HostAtomSet:
    """Host atoms with parameters mixed against the adsorbate.

    The adsorbate's own (epsilon, sigma) come from ``adsorbate_params`` when
    given, otherwise from the force field entry named ``adsorbate``.
    """

    validate_framework(framework)
    validate_forcefield(forcefield)
    missing = sorted({s for s in framework.atom_symbols if s not in forcefield.epsilons})
    if missing:
        raise KeyError(
            f"Force field '{forcefield.name}' lacks parameters for atom types {missing} "
            f"in framework '{framework.name}'."
        )
    if adsorbate_params is None:
        eps_ads, sigma_ads = forcefield.params(adsorbate)
    else:
        eps_ads, sigma_ads = (float(adsorbate_params[0]), float(adsorbate_params[1]))

    eps_host = np.array([forcefield.epsilons[s] for s in framework.atom_symbols], dtype=float)
    sigma_host = np.array([forcefield.sigmas[s] for s in framework.atom_symbols], dtype=float)
    eps_mix, sigma_mix = lorentz_berthelot(eps_host, sigma_host, eps_ads, sigma_ads)
    return HostAtomSet(
        fractional_positions=np.asarray(framework.fractional_positions, dtype=float).reshape(-1, 3),
        epsilons=eps_mix,
        sigmas=sigma_mix,
        symbols=framework.atom_symbols,
    )
