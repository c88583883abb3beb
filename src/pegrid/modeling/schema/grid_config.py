"""Grid generation settings."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GridConfig:
    """Config knobs for energy-grid generation."""

    grid_spacing: float = 0.1
    cutoff: float = 12.5
    output_root: str = "~/PEGrid_output"
