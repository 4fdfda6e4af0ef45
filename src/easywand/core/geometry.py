from __future__ import annotations

import numpy as np

from easywand.profiles import CameraProfile


def pixel_to_normalized(profile: CameraProfile, u_px: np.ndarray, v_px: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Map pixel coordinates (u,v) -> normalized camera coordinates (x,y).

    Removes the principal point and divides by the focal length, per axis.
    """
    u_px = np.asarray(u_px, dtype=np.float64)
    v_px = np.asarray(v_px, dtype=np.float64)
    cx, cy = profile.principal_point
    f = float(profile.focal_length)
    return (u_px - cx) / f, (v_px - cy) / f


def normalized_to_pixel(profile: CameraProfile, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Inverse of `pixel_to_normalized` for the same profile."""
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    cx, cy = profile.principal_point
    f = float(profile.focal_length)
    return x * f + cx, y * f + cy


def to_homogeneous(xy: np.ndarray) -> np.ndarray:
    xy = np.asarray(xy, dtype=np.float64).reshape(-1, 2)
    return np.concatenate([xy, np.ones((xy.shape[0], 1), dtype=np.float64)], axis=1)


def _split_pairs(pairs: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    pairs = np.asarray(pairs, dtype=np.float64).reshape(-1, 4)
    return to_homogeneous(pairs[:, 0:2]), to_homogeneous(pairs[:, 2:4])


def epipolar_residuals(F: np.ndarray, pairs: np.ndarray) -> np.ndarray:
    """Algebraic residuals p'^T F p, one per `(x, y, x', y')` row."""
    F = np.asarray(F, dtype=np.float64).reshape(3, 3)
    p, q = _split_pairs(pairs)
    return np.einsum("ni,ij,nj->n", q, F, p)


def epipolar_lines(F: np.ndarray, pairs: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Epipolar lines (a, b, c) for every pair.

    Returns (lines in the first image from p', lines in the second image from p).
    """
    F = np.asarray(F, dtype=np.float64).reshape(3, 3)
    p, q = _split_pairs(pairs)
    return q @ F, p @ F.T


def symmetric_epipolar_distance(F: np.ndarray, pairs: np.ndarray) -> np.ndarray:
    """
    Mean of the point-to-epipolar-line distances in both images (pixels).
    """
    F = np.asarray(F, dtype=np.float64).reshape(3, 3)
    p, q = _split_pairs(pairs)
    l1, l2 = epipolar_lines(F, pairs)
    d2 = np.abs(np.sum(q * l2, axis=1)) / (np.hypot(l2[:, 0], l2[:, 1]) + 1e-12)
    d1 = np.abs(np.sum(p * l1, axis=1)) / (np.hypot(l1[:, 0], l1[:, 1]) + 1e-12)
    return 0.5 * (d1 + d2)
