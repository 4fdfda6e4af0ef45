from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pytest

from easywand.api.estimate_io import load_fundamental_matrix
from easywand.cli.main import main


@pytest.mark.integration
def test_cli_generate_then_calibrate(tmp_path: Path, capsys) -> None:
    data = tmp_path / "data"
    assert main(["generate-synthetic", "--out", str(data), "--cameras", "3", "--frames", "20", "--seed", "4"]) == 0
    assert (data / "profiles.txt").exists()
    assert (data / "wand.csv").exists()

    cfg = tmp_path / "config.json"
    cfg.write_text(json.dumps({"schema_version": "easywand.config.v0", "min_correspondences": 10}), encoding="utf-8")
    out = tmp_path / "F"
    rc = main(["calibrate", str(data / "profiles.txt"), str(data / "wand.csv"), "--config", str(cfg), "--out", str(out)])
    assert rc == 0
    stdout = capsys.readouterr().out
    assert "Cameras: [1, 2, 3]  wand correspondences: 40" in stdout

    for name in ("F_1_2.json", "F_1_3.json"):
        est = load_fundamental_matrix(out / name)
        assert est.F[2, 2] == pytest.approx(1.0)
        assert abs(np.linalg.det(est.F)) <= 1e-9 * np.linalg.norm(est.F) ** 3
        assert est.diagnostics["epipolar_max_px"] < 1e-6


@pytest.mark.integration
def test_cli_reports_calibration_errors(tmp_path: Path, capsys) -> None:
    (tmp_path / "profiles.txt").write_text("1 1400 1280 1024 640 512\n2 1500 1280 1024 630 520\n", encoding="utf-8")
    (tmp_path / "wand.csv").write_text("1,2,3,4,5,6,7,8\n9,10,11,12,13,14,15,16\n", encoding="utf-8")
    rc = main(["calibrate", str(tmp_path / "profiles.txt"), str(tmp_path / "wand.csv")])
    assert rc == 2
    assert "InsufficientCorrespondences" in capsys.readouterr().err


@pytest.mark.integration
def test_cli_rejects_header_only_wand_file(tmp_path: Path, capsys) -> None:
    (tmp_path / "profiles.txt").write_text("1 1400 1280 1024 640 512\n2 1500 1280 1024 630 520\n", encoding="utf-8")
    (tmp_path / "wand.csv").write_text("a,b,c,d,e,f,g,h\n", encoding="utf-8")
    rc = main(["calibrate", str(tmp_path / "profiles.txt"), str(tmp_path / "wand.csv")])
    assert rc == 2
    assert "InsufficientCorrespondences" in capsys.readouterr().err


@pytest.mark.integration
def test_cli_reports_bad_config(tmp_path: Path, capsys) -> None:
    assert main(["generate-synthetic", "--out", str(tmp_path), "--frames", "6"]) == 0
    cfg = tmp_path / "config.json"
    cfg.write_text(json.dumps({"min_correspondences": 3}), encoding="utf-8")
    rc = main(["calibrate", str(tmp_path / "profiles.txt"), str(tmp_path / "wand.csv"), "--config", str(cfg)])
    assert rc == 2
    assert "ConfigValidationError" in capsys.readouterr().err


@pytest.mark.integration
def test_cli_plot_to_file(tmp_path: Path) -> None:
    matplotlib = pytest.importorskip("matplotlib")
    matplotlib.use("Agg")
    assert main(["generate-synthetic", "--out", str(tmp_path), "--frames", "6"]) == 0
    png = tmp_path / "cam2.png"
    assert main(["plot", str(tmp_path / "profiles.txt"), str(tmp_path / "wand.csv"), "--camera", "2", "--out", str(png)]) == 0
    assert png.exists()
