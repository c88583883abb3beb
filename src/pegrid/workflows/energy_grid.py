"""Generate and reload adsorbate potential-energy grids from a JSON run configuration."""

from __future__ import annotations

import argparse
import hashlib
import json
import logging
import re
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

from pegrid.core import (
    EnergyGrid,
    HostAtomSet,
    UnitCell,
    generate_energy_grid,
    perpendicular_widths,
    replication_factors,
)
from pegrid.io import load_energy_grid, read_forcefield, read_structure, write_cube
from pegrid.modeling import (
    ForceField,
    Framework,
    GridConfig,
    build_host_atoms,
    build_unit_cell,
    validate_grid_config,
)


logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _sanitize_token(value: str) -> str:
    token = re.sub(r"[^A-Za-z0-9._-]+", "_", value.strip())
    # "." and ".." would name a directory, not a file.
    return token if token.strip(".") else "unnamed"


def _sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as fh:
        while True:
            chunk = fh.read(1024 * 1024)
            if not chunk:
                break
            h.update(chunk)
    return h.hexdigest()


def _resolve_path(base_dir: Path, path_like: str | Path) -> Path:
    p = Path(path_like).expanduser()
    return p if p.is_absolute() else (base_dir / p)


def _to_builtin(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, (np.floating, np.integer)):
        return _to_builtin(value.item())
    if isinstance(value, float) and not np.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {str(k): _to_builtin(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_builtin(v) for v in value]
    return value


def _load_json_config(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8-sig") as fh:
        cfg = json.load(fh)
    if not isinstance(cfg, dict):
        raise ValueError("Input config must be a JSON object.")
    return cfg


def _save_json(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(_to_builtin(payload), fh, indent=2, sort_keys=True)
        fh.write("\n")


def grid_file_path(output_root: str | Path, forcefield_name: str, structure_name: str, adsorbate: str) -> Path:
    """``<output_root>/<forcefield>/<structure>_<adsorbate>.cube``.

    Names are reduced to ``[A-Za-z0-9._-]`` so the file always lands inside the
    force-field directory under ``output_root``.
    """

    root = Path(output_root).expanduser()
    ff_dir = _sanitize_token(forcefield_name)
    return root / ff_dir / f"{_sanitize_token(structure_name)}_{_sanitize_token(adsorbate)}.cube"


def prepare_inputs(
    structure_source: Any,
    forcefield_source: Any,
    adsorbate: str,
    *,
    reader: str = "auto",
    forcefield_name: str | None = None,
    adsorbate_params: tuple[float, float] | None = None,
) -> tuple[Framework, ForceField, UnitCell, HostAtomSet]:
    """Read structure and force field, then build the cell and mixed host atoms."""

    logger.info("Constructing framework object for %s...", structure_source)
    framework = read_structure(structure_source, reader=reader)
    logger.info("Constructing forcefield object for %s...", forcefield_source)
    forcefield = read_forcefield(forcefield_source, name=forcefield_name)
    cell = build_unit_cell(framework)
    host_atoms = build_host_atoms(framework, forcefield, adsorbate, adsorbate_params=adsorbate_params)
    return framework, forcefield, cell, host_atoms


def write_grid(
    adsorbate: str,
    structure_source: Any,
    forcefield_source: Any,
    *,
    config: GridConfig | None = None,
    reader: str = "auto",
    forcefield_name: str | None = None,
    adsorbate_params: tuple[float, float] | None = None,
) -> Path:
    """Compute the adsorbate energy grid of a structure and write it as a cube file.

    Energies are in kJ/mol. The file goes to
    ``<output_root>/<forcefield>/<structure>_<adsorbate>.cube``.
    """

    config = config or GridConfig()
    validate_grid_config(config)
    framework, forcefield, cell, host_atoms = prepare_inputs(
        structure_source,
        forcefield_source,
        adsorbate,
        reader=reader,
        forcefield_name=forcefield_name,
        adsorbate_params=adsorbate_params,
    )
    out, _ = _generate_and_write(framework, forcefield, cell, host_atoms, adsorbate, config)
    return out


def _generate_and_write(
    framework: Framework,
    forcefield: ForceField,
    cell: UnitCell,
    host_atoms: HostAtomSet,
    adsorbate: str,
    config: GridConfig,
) -> tuple[Path, EnergyGrid]:
    grid = generate_energy_grid(
        cell,
        host_atoms,
        config.grid_spacing,
        config.cutoff,
        structure_name=framework.name,
        forcefield_name=forcefield.name,
        adsorbate=adsorbate,
    )
    out = grid_file_path(config.output_root, forcefield.name, framework.name, adsorbate)
    out.parent.mkdir(parents=True, exist_ok=True)
    write_cube(out, grid, cell)
    logger.info("Grid available in %s", out)
    return out, grid


def load_grid(
    adsorbate: str,
    structure_name: str,
    forcefield_name: str,
    *,
    output_root: str | Path = GridConfig.output_root,
) -> EnergyGrid:
    """Reload a grid previously written by :func:`write_grid`."""

    path = grid_file_path(output_root, forcefield_name, structure_name, adsorbate)
    grid = load_energy_grid(
        path,
        structure_name=structure_name,
        forcefield_name=forcefield_name,
        adsorbate=adsorbate,
    )
    logger.info("N_x = %d, N_y = %d, N_z = %d", *grid.shape)
    return grid


def _plot_minimum_slice(path: Path, grid: EnergyGrid, cell: UnitCell, *, title: str, vmax: float = 0.0) -> None:
    import matplotlib.pyplot as plt

    path.parent.mkdir(parents=True, exist_ok=True)
    (_, _, k_min), _, _ = grid.minimum()
    xf, yf, _ = grid.fractional_axes()
    energies = np.asarray(grid.energies[:, :, k_min], dtype=float)
    # Cartesian positions of the slice nodes, so skewed cells plot undistorted.
    frac = np.stack(np.meshgrid(xf, yf, indexing="ij"), axis=-1)
    frac = np.concatenate([frac, np.full(frac.shape[:2] + (1,), k_min * grid.spacing[2])], axis=-1)
    cart = cell.to_cartesian(frac.reshape(-1, 3)).reshape(frac.shape)
    clipped = np.clip(np.nan_to_num(energies, nan=vmax, posinf=vmax), None, vmax)

    fig, ax = plt.subplots(figsize=(6.4, 5.2))
    mesh = ax.pcolormesh(cart[..., 0], cart[..., 1], clipped, shading="gouraud", cmap="viridis")
    fig.colorbar(mesh, ax=ax, label="Energy (kJ/mol)")
    ax.set_xlabel(r"x ($\AA$)")
    ax.set_ylabel(r"y ($\AA$)")
    ax.set_title(title)
    ax.set_aspect("equal")
    fig.tight_layout()
    fig.savefig(path, dpi=220)
    plt.close(fig)


def _default_template() -> dict[str, Any]:
    return {
        "run": {
            "name": "energy_grid_run",
            "output_root": "~/PEGrid_output",
            "write_plot": True,
            "write_report": True,
        },
        "structure": {
            "path": "structures/IRMOF-1.cssr",
            "reader": "auto",
        },
        "forcefield": {
            "path": "forcefields/UFF.csv",
            "name": None,
        },
        "adsorbate": {
            "name": "CH4",
            "epsilon": None,
            "sigma": None,
        },
        "grid": {
            "grid_spacing": 0.1,
            "cutoff": 12.5,
        },
    }


def write_input_template(path: str | Path) -> Path:
    out = Path(path)
    _save_json(out, _default_template())
    return out


def run_energy_grid(config_path: str | Path) -> dict[str, Any]:
    cfg_path = Path(config_path)
    cfg_dir = cfg_path.parent if cfg_path.parent != Path("") else Path(".")
    cfg = _load_json_config(cfg_path)
    run_cfg = dict(cfg.get("run", {}))
    structure_cfg = dict(cfg.get("structure", {}))
    ff_cfg = dict(cfg.get("forcefield", {}))
    ads_cfg = dict(cfg.get("adsorbate", {}))
    grid_cfg = dict(cfg.get("grid", {}))

    if "path" not in structure_cfg:
        raise ValueError("structure.path is required.")
    if "path" not in ff_cfg:
        raise ValueError("forcefield.path is required.")
    adsorbate = str(ads_cfg.get("name", "")).strip()
    if not adsorbate:
        raise ValueError("adsorbate.name is required.")
    eps_ads = ads_cfg.get("epsilon", None)
    sigma_ads = ads_cfg.get("sigma", None)
    if (eps_ads is None) != (sigma_ads is None):
        raise ValueError("adsorbate.epsilon and adsorbate.sigma must be given together.")
    adsorbate_params = None if eps_ads is None else (float(eps_ads), float(sigma_ads))

    output_root = _resolve_path(cfg_dir, run_cfg.get("output_root", GridConfig.output_root))
    config = GridConfig(
        grid_spacing=float(grid_cfg.get("grid_spacing", GridConfig.grid_spacing)),
        cutoff=float(grid_cfg.get("cutoff", GridConfig.cutoff)),
        output_root=str(output_root),
    )
    validate_grid_config(config)
    write_plot = bool(run_cfg.get("write_plot", True))
    write_report = bool(run_cfg.get("write_report", True))

    structure_path = _resolve_path(cfg_dir, structure_cfg["path"]).resolve()
    ff_path = _resolve_path(cfg_dir, ff_cfg["path"]).resolve()

    t0 = time.perf_counter()
    started = _utc_now_iso()
    framework, forcefield, cell, host_atoms = prepare_inputs(
        structure_path,
        ff_path,
        adsorbate,
        reader=str(structure_cfg.get("reader", "auto")),
        forcefield_name=ff_cfg.get("name", None),
        adsorbate_params=adsorbate_params,
    )
    rep = replication_factors(cell, config.cutoff)
    grid_path, grid = _generate_and_write(framework, forcefield, cell, host_atoms, adsorbate, config)
    outputs: dict[str, str] = {"grid": str(grid_path)}

    stem = f"{_sanitize_token(framework.name)}_{_sanitize_token(adsorbate)}"
    if write_plot:
        plot_path = grid_path.parent / f"{stem}_min_slice.png"
        _plot_minimum_slice(plot_path, grid, cell, title=f"{framework.name} / {adsorbate} ({forcefield.name})")
        outputs["plot"] = str(plot_path)

    (i_min, j_min, k_min), e_min, xf_min = grid.minimum()
    runtime = time.perf_counter() - t0
    report = {
        "run": {
            "name": str(run_cfg.get("name", f"{framework.name}_{adsorbate}")),
            "input_config": str(cfg_path.resolve()),
            "started_utc": started,
            "finished_utc": _utc_now_iso(),
            "runtime_seconds": float(runtime),
        },
        "structure": {
            "name": framework.name,
            "path": str(structure_path),
            "sha256": _sha256_file(structure_path),
            "n_atoms": int(framework.n_atoms),
            "cell_parameters": list(framework.cell_parameters),
            "perpendicular_widths": perpendicular_widths(cell),
        },
        "forcefield": {
            "name": forcefield.name,
            "path": str(ff_path),
            "sha256": _sha256_file(ff_path),
            "adsorbate": adsorbate,
            "adsorbate_params": adsorbate_params,
        },
        "grid": {
            "grid_spacing": config.grid_spacing,
            "cutoff": config.cutoff,
            "replication_factors": list(rep.as_tuple()),
            "shape": list(grid.shape),
            "fractional_spacing": list(grid.spacing),
            "n_nonfinite": int(np.count_nonzero(~np.isfinite(grid.energies))),
            "energy_unit": "kJ/mol",
        },
        "minimum": {
            "index": [i_min, j_min, k_min],
            "energy_kj_per_mol": e_min,
            "fractional_coord": xf_min,
            "cartesian_coord": cell.to_cartesian(xf_min),
        },
        "outputs": outputs,
    }
    if write_report:
        report_path = grid_path.parent / f"{stem}_report.json"
        report["outputs"]["report"] = str(report_path)
        _save_json(report_path, report)
    return report


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--input", type=Path, default=None, help="Path to JSON run configuration.")
    parser.add_argument("--write-template", type=Path, default=None, help="Write template config and exit.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ...).")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.write_template is not None:
        out = write_input_template(args.write_template)
        print(f"Wrote template: {out}")
        return
    if args.input is None:
        raise ValueError("Provide --input <config.json> or --write-template <path>.")

    report = run_energy_grid(args.input)
    print(f"Run complete: {report['run']['name']}")
    print(f"grid_shape={report['grid']['shape']}")
    print(f"min_energy_kj_per_mol={report['minimum']['energy_kj_per_mol']:.6f}")
    print(f"runtime_seconds={report['run']['runtime_seconds']:.3f}")
    print(f"outputs={report['outputs']}")
