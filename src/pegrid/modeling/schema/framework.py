"""Crystal structure record produced by the structure readers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np


Array = np.ndarray


@dataclass(frozen=True)
class Framework:
    """Host crystal: cell parameters (Angstrom, degrees) and fractional atom positions."""

    name: str
    a: float
    b: float
    c: float
    alpha: float
    beta: float
    gamma: float
    atom_symbols: tuple[str, ...]
    fractional_positions: Array
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def n_atoms(self) -> int:
        return len(self.atom_symbols)

    @property
    def cell_parameters(self) -> tuple[float, float, float, float, float, float]:
        return (self.a, self.b, self.c, self.alpha, self.beta, self.gamma)
