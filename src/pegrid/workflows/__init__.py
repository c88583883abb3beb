from .energy_grid import grid_file_path, load_grid, prepare_inputs, run_energy_grid, write_grid, write_input_template

__all__ = ["grid_file_path", "prepare_inputs", "write_grid", "load_grid", "run_energy_grid", "write_input_template"]
