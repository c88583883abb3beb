from .errors import DomainError, FileFormatError, GeometryError, PEGridError
from .grid import EnergyGrid, generate_energy_grid, grid_dimensions
from .potential import (
    NEAR_SINGULAR_DISTANCE,
    ImageSet,
    energies_from_images,
    is_near_singular,
    lj_energy_at_point,
    nearest_image_distance,
    periodic_images,
)
from .replication import perpendicular_widths, replication_factors
from .types import HostAtomSet, ReplicationFactors, UnitCell
from .units import GAS_CONSTANT_J_PER_MOL_K, kelvin_to_kj_per_mol, kj_per_mol_to_kelvin

__all__ = [
    "UnitCell",
    "HostAtomSet",
    "ReplicationFactors",
    "EnergyGrid",
    "ImageSet",
    "PEGridError",
    "GeometryError",
    "FileFormatError",
    "DomainError",
    "perpendicular_widths",
    "replication_factors",
    "periodic_images",
    "energies_from_images",
    "lj_energy_at_point",
    "nearest_image_distance",
    "is_near_singular",
    "NEAR_SINGULAR_DISTANCE",
    "grid_dimensions",
    "generate_energy_grid",
    "GAS_CONSTANT_J_PER_MOL_K",
    "kelvin_to_kj_per_mol",
    "kj_per_mol_to_kelvin",
]
