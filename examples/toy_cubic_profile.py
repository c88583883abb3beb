"""Plot the interpolated CH4 energy along the body diagonal of a toy cubic host."""

import numpy as np
import matplotlib.pyplot as plt

from pegrid.core import HostAtomSet, generate_energy_grid
from pegrid.modeling import lorentz_berthelot, unit_cell_from_parameters


cell = unit_cell_from_parameters(12.0, 12.0, 12.0, 90.0, 90.0, 90.0)
eps, sigma = lorentz_berthelot(np.array([52.83, 52.83]), np.array([3.431, 3.431]), 148.0, 3.73)
host = HostAtomSet(
    fractional_positions=np.array([[0.0, 0.0, 0.0], [0.5, 0.5, 0.5]]),
    epsilons=eps,
    sigmas=sigma,
    symbols=("C", "C"),
)
grid = generate_energy_grid(cell, host, 0.4, 12.5, structure_name="toy_bcc", adsorbate="CH4")
_, e_min, frac_min = grid.minimum()
print(f"grid shape={grid.shape}, minimum {e_min:.4f} kJ/mol at {frac_min}")

ts = np.linspace(0.15, 0.35, 200)
vals = np.array([grid.energy_at(t, t, t) for t in ts])

plt.plot(ts * np.sqrt(3.0) * 12.0, vals)
plt.xlabel(r"distance along [111] ($\AA$)")
plt.ylabel("Energy (kJ/mol)")
plt.title("CH4 in a toy bcc carbon host")
plt.grid(alpha=0.3)
plt.tight_layout()
plt.show()
