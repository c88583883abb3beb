from pegrid.io.cube import CubeData, load_energy_grid, read_cube, write_cube
from pegrid.io.readers import read_cssr, read_forcefield, read_json_structure
from pegrid.io.registry import get_reader, list_readers, read_structure, register_reader


register_reader("cssr", read_cssr)
register_reader("json", read_json_structure)

__all__ = [
    "register_reader",
    "get_reader",
    "list_readers",
    "read_structure",
    "read_cssr",
    "read_json_structure",
    "read_forcefield",
    "CubeData",
    "read_cube",
    "write_cube",
    "load_energy_grid",
]
