import json
import sys
from pathlib import Path

import numpy as np
import pytest

from pegrid.modeling import GridConfig
from pegrid.workflows import (
    grid_file_path,
    load_grid,
    prepare_inputs,
    run_energy_grid,
    write_grid,
    write_input_template,
)
from pegrid.workflows.energy_grid import main


FF_TEXT = "atom,epsilon(K),sigma(A)\nC,52.83,3.431\nO,30.19,3.118\nCH4,148.0,3.73\n"


def _write_inputs(tmp_path: Path) -> tuple[Path, Path]:
    structure = {
        "name": "box",
        "cell": {"a": 10.0, "b": 10.0, "c": 10.0},
        "atoms": [
            {"symbol": "C", "position": [0.1, 0.2, 0.3]},
            {"symbol": "O", "position": [0.6, 0.7, 0.15]},
        ],
    }
    s_path = tmp_path / "structures" / "box.json"
    s_path.parent.mkdir(parents=True)
    s_path.write_text(json.dumps(structure), encoding="utf-8")
    ff_path = tmp_path / "forcefields" / "UFF.csv"
    ff_path.parent.mkdir(parents=True)
    ff_path.write_text(FF_TEXT, encoding="utf-8")
    return s_path, ff_path


def _write_config(tmp_path: Path, **overrides) -> Path:
    cfg = {
        "run": {"name": "box_ch4", "output_root": "out", "write_plot": False, "write_report": True},
        "structure": {"path": "structures/box.json", "reader": "auto"},
        "forcefield": {"path": "forcefields/UFF.csv", "name": None},
        "adsorbate": {"name": "CH4", "epsilon": None, "sigma": None},
        "grid": {"grid_spacing": 5.0, "cutoff": 12.5},
    }
    for section, values in overrides.items():
        cfg[section].update(values)
    path = tmp_path / "run.json"
    path.write_text(json.dumps(cfg, indent=2), encoding="utf-8")
    return path


def test_grid_file_path_layout() -> None:
    path = grid_file_path("/data/grids", "UFF", "IRMOF-1", "Xe")
    assert path == Path("/data/grids/UFF/IRMOF-1_Xe.cube")


def test_grid_file_path_keeps_unsafe_names_inside_output_root(tmp_path: Path) -> None:
    root = tmp_path / "root" / "out"
    path = grid_file_path(root, "..", "../../escaped", "CH4/x")
    assert path.parent.parent == root
    assert path.parent.name == "unnamed"
    assert path.name == ".._.._escaped_CH4_x.cube"

    s_path, ff_path = _write_inputs(tmp_path)
    payload = json.loads(s_path.read_text(encoding="utf-8"))
    payload["name"] = "../../escaped"
    s_path.write_text(json.dumps(payload), encoding="utf-8")
    config = GridConfig(grid_spacing=5.0, cutoff=12.5, output_root=str(root))
    out = write_grid("CH4", s_path, ff_path, config=config, forcefield_name="../x")
    assert out.resolve().is_relative_to(root.resolve())
    assert out == root / ".._x" / ".._.._escaped_CH4.cube"
    assert out.exists()

    grid = load_grid("CH4", "../../escaped", "../x", output_root=root)
    assert grid.shape == (3, 3, 3)


def test_write_input_template_round_trips(tmp_path: Path) -> None:
    out = write_input_template(tmp_path / "cfg" / "template.json")
    cfg = json.loads(out.read_text(encoding="utf-8"))
    assert set(cfg) == {"run", "structure", "forcefield", "adsorbate", "grid"}
    assert cfg["grid"] == {"grid_spacing": 0.1, "cutoff": 12.5}
    assert cfg["adsorbate"]["name"] == "CH4"


def test_prepare_inputs_builds_cell_and_mixed_atoms(tmp_path: Path) -> None:
    s_path, ff_path = _write_inputs(tmp_path)
    framework, forcefield, cell, host = prepare_inputs(s_path, ff_path, "CH4")
    assert framework.name == "box"
    assert forcefield.name == "UFF"
    assert np.allclose(cell.f_to_cartesian, np.diag([10.0, 10.0, 10.0]))
    assert np.isclose(host.epsilons[0], np.sqrt(52.83 * 148.0))


def test_run_energy_grid_writes_grid_and_report(tmp_path: Path) -> None:
    _write_inputs(tmp_path)
    report = run_energy_grid(_write_config(tmp_path))

    assert report["run"]["name"] == "box_ch4"
    assert report["grid"]["shape"] == [3, 3, 3]
    assert report["grid"]["replication_factors"] == [2, 2, 2]
    assert report["grid"]["energy_unit"] == "kJ/mol"
    assert report["grid"]["n_nonfinite"] == 0
    assert report["structure"]["n_atoms"] == 2
    assert len(report["structure"]["sha256"]) == 64

    grid_path = Path(report["outputs"]["grid"])
    assert grid_path == tmp_path / "out" / "UFF" / "box_CH4.cube"
    assert grid_path.exists()
    assert "plot" not in report["outputs"]

    saved = json.loads(Path(report["outputs"]["report"]).read_text(encoding="utf-8"))
    assert saved["minimum"]["index"] == report["minimum"]["index"]
    assert saved["grid"]["fractional_spacing"] == [0.5, 0.5, 0.5]

    grid = load_grid("CH4", "box", "UFF", output_root=tmp_path / "out")
    assert grid.shape == (3, 3, 3)
    assert (grid.structure_name, grid.forcefield_name, grid.adsorbate) == ("box", "UFF", "CH4")
    index, e_min, _ = grid.minimum()
    assert list(index) == report["minimum"]["index"]
    assert np.isclose(e_min, report["minimum"]["energy_kj_per_mol"], rtol=1e-5)


def test_run_energy_grid_with_explicit_adsorbate_parameters(tmp_path: Path) -> None:
    _write_inputs(tmp_path)
    cfg = _write_config(
        tmp_path,
        adsorbate={"name": "Xe", "epsilon": 221.0, "sigma": 4.1},
        forcefield={"name": "toyff"},
        run={"write_report": False},
    )
    report = run_energy_grid(cfg)
    assert report["forcefield"]["name"] == "toyff"
    assert report["forcefield"]["adsorbate_params"] == (221.0, 4.1)
    assert Path(report["outputs"]["grid"]) == tmp_path / "out" / "toyff" / "box_Xe.cube"
    assert "report" not in report["outputs"]


def test_run_energy_grid_writes_minimum_slice_plot(tmp_path: Path) -> None:
    matplotlib = pytest.importorskip("matplotlib")
    matplotlib.use("Agg")
    _write_inputs(tmp_path)
    report = run_energy_grid(_write_config(tmp_path, run={"write_plot": True}))
    plot = Path(report["outputs"]["plot"])
    assert plot.name == "box_CH4_min_slice.png"
    assert plot.stat().st_size > 0


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"adsorbate": {"name": ""}}, "adsorbate.name"),
        ({"adsorbate": {"epsilon": 100.0}}, "together"),
        ({"grid": {"grid_spacing": 0.0}}, "grid_spacing"),
        ({"grid": {"cutoff": -1.0}}, "cutoff"),
    ],
)
def test_run_energy_grid_rejects_bad_config(tmp_path: Path, overrides: dict, message: str) -> None:
    _write_inputs(tmp_path)
    with pytest.raises(ValueError, match=message):
        run_energy_grid(_write_config(tmp_path, **overrides))


def test_write_grid_is_repeatable_into_existing_directory(tmp_path: Path) -> None:
    s_path, ff_path = _write_inputs(tmp_path)
    config = GridConfig(grid_spacing=5.0, cutoff=12.5, output_root=str(tmp_path / "grids"))
    first = write_grid("CH4", s_path, ff_path, config=config)
    text = first.read_text(encoding="utf-8")
    second = write_grid("CH4", s_path, ff_path, config=config)
    assert first == second == tmp_path / "grids" / "UFF" / "box_CH4.cube"
    assert second.read_text(encoding="utf-8") == text


def test_load_grid_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_grid("CH4", "nothing", "UFF", output_root=tmp_path)


def test_main_writes_template(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    target = tmp_path / "template.json"
    monkeypatch.setattr(sys, "argv", ["pegrid-grid", "--write-template", str(target)])
    main()
    assert target.exists()
    assert "Wrote template" in capsys.readouterr().out


def test_main_requires_input_or_template(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "argv", ["pegrid-grid"])
    with pytest.raises(ValueError):
        main()
