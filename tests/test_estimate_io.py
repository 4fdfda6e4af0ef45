from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pytest

from easywand.api.estimate_io import load_fundamental_matrix, save_fundamental_matrix
from easywand.core.fundamental import compute_fundamental_matrix
from easywand.errors import MalformedInput
from easywand.sim.synthetic import make_wand_scene


def test_save_and_load_estimate(tmp_path: Path) -> None:
    scene = make_wand_scene(n_frames=12, seed=0)
    est = compute_fundamental_matrix(scene.wand, scene.profiles.get(1), scene.profiles.get(2))
    path = save_fundamental_matrix(tmp_path / "out" / "F_1_2.json", est)

    doc = json.loads(path.read_text(encoding="utf-8"))
    assert doc["schema_version"] == "easywand.fundamental.v0"
    assert doc["camera_a"] == 1 and doc["camera_b"] == 2

    loaded = load_fundamental_matrix(path)
    assert np.array_equal(loaded.F, est.F)
    assert loaded.n_correspondences == 24
    assert loaded.diagnostics == est.diagnostics


_GOOD_F = [[0.0, 0.0, 1e-3], [0.0, 0.0, -2e-3], [-1e-3, 2e-3, 1.0]]


@pytest.mark.parametrize(
    "doc",
    [
        {"schema_version": "other", "camera_a": 1, "camera_b": 2, "F": _GOOD_F},
        {"camera_a": 1, "camera_b": 2, "F": _GOOD_F},
        {"schema_version": "easywand.fundamental.v0", "camera_a": 1, "camera_b": 2, "F": [[1.0, 2.0], [3.0, 4.0]]},
        {"schema_version": "easywand.fundamental.v0", "camera_b": 2, "F": _GOOD_F},
        {"schema_version": "easywand.fundamental.v0", "camera_a": 1, "camera_b": 2},
        {"schema_version": "easywand.fundamental.v0", "camera_a": 1, "camera_b": 2, "F": [[float("nan")] * 3] * 3},
        [1, 2, 3],
    ],
)
def test_load_rejects_bad_documents(tmp_path: Path, doc) -> None:
    p = tmp_path / "F.json"
    p.write_text(json.dumps(doc), encoding="utf-8")
    with pytest.raises(MalformedInput):
        load_fundamental_matrix(p)


def test_load_rejects_invalid_json(tmp_path: Path) -> None:
    p = tmp_path / "F.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(MalformedInput):
        load_fundamental_matrix(p)
