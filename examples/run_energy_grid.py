"""Generate an adsorbate energy grid from a JSON input file.

Usage examples:
  python examples/run_energy_grid.py --write-template examples/configs/energy_grid_template.json
  python examples/run_energy_grid.py --input examples/configs/toy_box_ch4.json
"""

from pegrid.workflows.energy_grid import main


if __name__ == "__main__":
    main()
