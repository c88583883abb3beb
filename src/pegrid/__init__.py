from .core import (
    DomainError,
    EnergyGrid,
    FileFormatError,
    GeometryError,
    HostAtomSet,
    ReplicationFactors,
    UnitCell,
    generate_energy_grid,
    lj_energy_at_point,
    replication_factors,
)
from .io import load_energy_grid, write_cube

__all__ = [
    "UnitCell",
    "HostAtomSet",
    "ReplicationFactors",
    "EnergyGrid",
    "GeometryError",
    "FileFormatError",
    "DomainError",
    "replication_factors",
    "lj_energy_at_point",
    "generate_energy_grid",
    "write_cube",
    "load_energy_grid",
]
