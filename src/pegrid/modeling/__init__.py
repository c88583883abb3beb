from .builders import build_host_atoms, build_unit_cell, lorentz_berthelot, unit_cell_from_parameters
from .schema import ForceField, Framework, GridConfig
from .validators import validate_forcefield, validate_framework, validate_grid_config

__all__ = [
    "Framework",
    "ForceField",
    "GridConfig",
    "build_unit_cell",
    "unit_cell_from_parameters",
    "build_host_atoms",
    "lorentz_berthelot",
    "validate_framework",
    "validate_forcefield",
    "validate_grid_config",
]
