from .cssr import read_cssr
from .forcefield import read_forcefield
from .json_structure import read_json_structure

__all__ = ["read_cssr", "read_json_structure", "read_forcefield"]
