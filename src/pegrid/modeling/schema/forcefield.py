"""Per-atom-type Lennard-Jones parameter table."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ForceField:
    """Epsilon (K, i.e. eps/k_B) and sigma (Angstrom) keyed by atom type."""

    name: str
    epsilons: dict[str, float]
    sigmas: dict[str, float]
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def atom_types(self) -> tuple[str, ...]:
        return tuple(sorted(self.epsilons))

    def params(self, atom_type: str) -> tuple[float, float]:
        try:
            return float(self.epsilons[atom_type]), float(self.sigmas[atom_type])
        except KeyError as exc:
            raise KeyError(f"Atom type '{atom_type}' is not in force field '{self.name}'.") from exc
