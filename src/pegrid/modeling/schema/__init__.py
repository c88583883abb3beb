from .forcefield import ForceField
from .framework import Framework
from .grid_config import GridConfig

__all__ = ["Framework", "ForceField", "GridConfig"]
