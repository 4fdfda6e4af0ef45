from __future__ import annotations

import math

import numpy as np
import pytest

from easywand.core.normalization import NormalizationTransform, denormalize, normalize
from easywand.errors import DegenerateScale
from easywand.profiles import parse_camera_profile
from easywand.sim.synthetic import make_wand_scene


def _points(n: int = 50, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return np.stack([rng.uniform(200, 1100, size=n), rng.uniform(100, 900, size=n)], axis=1)


def test_transform_centers_and_scales_to_sqrt2():
    profile = parse_camera_profile(1, 1500.0, 1280, 1024, 650.0, 500.0)
    uv = _points()
    t = NormalizationTransform.from_points(profile, uv)
    xy = t.apply(uv)
    assert np.max(np.abs(np.mean(xy, axis=0))) < 1e-12
    assert math.isclose(float(np.mean(np.linalg.norm(xy, axis=1))), math.sqrt(2.0), rel_tol=1e-12)
    assert t.matrix[0, 0] == t.matrix[1, 1]
    assert np.array_equal(t.matrix[2], [0.0, 0.0, 1.0])


def test_transform_is_invertible():
    profile = parse_camera_profile(2, 900.0, 640, 480, 320.0, 240.0)
    uv = _points(seed=1)
    t = NormalizationTransform.from_points(profile, uv)
    rng = np.random.default_rng(2)
    other = rng.uniform(-5000, 5000, size=(200, 2))
    assert np.max(np.abs(t.invert(t.apply(other)) - other)) < 1e-9
    assert np.allclose(t.matrix @ t.inverse(), np.eye(3), atol=1e-12)


def test_transform_matches_principal_point_and_focal_removal():
    profile = parse_camera_profile(1, 1200.0, 1280, 1024, 640.0, 512.0)
    uv = _points(seed=4)
    t = NormalizationTransform.from_points(profile, uv, target_mean_distance=1.0)
    x = (uv - np.array([640.0, 512.0])) / 1200.0
    x = x - x.mean(axis=0)
    x = x / np.mean(np.linalg.norm(x, axis=1))
    assert np.max(np.abs(t.apply(uv) - x)) < 1e-12


def test_coincident_points_keep_unit_isotropic_scale():
    profile = parse_camera_profile(1, 1000.0, 640, 480, 320.0, 240.0)
    uv = np.tile([[100.0, 50.0]], (10, 1))
    t = NormalizationTransform.from_points(profile, uv)
    assert math.isclose(t.scale, 1.0 / 1000.0)
    assert np.allclose(t.apply(uv), 0.0)


def test_coincident_points_with_rounding_residue_keep_unit_scale():
    profile = parse_camera_profile(1, 1500.0, 1280, 1024, 650.0, 500.0)
    # 0.1-style values do not average back exactly in floating point.
    uv = np.tile([[650.1, 500.3]], (7, 1))
    t = NormalizationTransform.from_points(profile, uv)
    assert math.isclose(t.scale, 1.0 / 1500.0)


def test_normalize_pairs_layout():
    scene = make_wand_scene(n_frames=12, seed=5)
    pa, pb = scene.profiles.get(1), scene.profiles.get(2)
    pairs, ta, tb = normalize(scene.wand, pa, pb)
    assert pairs.shape == (24, 4)
    assert ta.camera_id == 1 and tb.camera_id == 2
    assert np.allclose(pairs[:, :2], ta.apply(scene.wand.points(1)))
    assert np.allclose(pairs[:, 2:], tb.apply(scene.wand.points(2)))


def test_denormalize_sets_canonical_scale():
    scene = make_wand_scene(n_frames=12, seed=6)
    pa, pb = scene.profiles.get(1), scene.profiles.get(2)
    _pairs, ta, tb = normalize(scene.wand, pa, pb)
    F_true = scene.fundamental(1, 2)
    F_hat = np.linalg.inv(tb.matrix).T @ (-3.7 * F_true) @ np.linalg.inv(ta.matrix)
    F = denormalize(F_hat, ta, tb)
    assert F[2, 2] == pytest.approx(1.0, abs=1e-12)
    assert np.allclose(F, F_true, atol=1e-9 * np.linalg.norm(F_true))


def test_denormalize_rejects_zero_f22():
    eye = NormalizationTransform(camera_id=1, matrix=np.eye(3))
    F_hat = np.array([[0.0, 0.0, 1.0], [0.0, 0.0, 1.0], [1.0, 1.0, 0.0]])
    with pytest.raises(DegenerateScale):
        denormalize(F_hat, eye, eye)
