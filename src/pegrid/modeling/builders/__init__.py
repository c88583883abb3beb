from .host_atoms import build_host_atoms, lorentz_berthelot
from .unit_cell import build_unit_cell, unit_cell_from_parameters

__all__ = ["build_unit_cell", "unit_cell_from_parameters", "build_host_atoms", "lorentz_berthelot"]
