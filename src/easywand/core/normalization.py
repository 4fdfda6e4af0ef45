from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from easywand.config import DEFAULT_CONFIG, CalibrationConfig
from easywand.core.geometry import pixel_to_normalized
from easywand.correspondences import CorrespondenceSet
from easywand.errors import DegenerateScale
from easywand.profiles import CameraProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizationTransform:
    """
    Affine 3x3 map from pixels to conditioned coordinates of one camera.

    The chain is: subtract the principal point, divide by the focal length,
    move the centroid to the origin, then scale isotropically so the mean
    distance to the origin equals the target (sqrt(2) by default).
    """

    camera_id: int
    matrix: np.ndarray  # (3,3), last row [0, 0, 1]

    @classmethod
    def from_points(
        cls,
        profile: CameraProfile,
        uv_px: np.ndarray,
        *,
        target_mean_distance: float = DEFAULT_CONFIG.target_mean_distance,
    ) -> "NormalizationTransform":
        uv_px = np.asarray(uv_px, dtype=np.float64).reshape(-1, 2)
        x, y = pixel_to_normalized(profile, uv_px[:, 0], uv_px[:, 1])
        if x.size:
            mx, my = float(np.mean(x)), float(np.mean(y))
            mean_dist = float(np.mean(np.hypot(x - mx, y - my)))
        else:
            mx, my, mean_dist = 0.0, 0.0, 0.0

        # Coincident points: keep unit scale and let the estimator reject them.
        if np.isfinite(mean_dist) and mean_dist > 1e-12 * max(1.0, abs(mx), abs(my)):
            scale = float(target_mean_distance) / mean_dist
        else:
            scale = 1.0

        f = float(profile.focal_length)
        cx, cy = profile.principal_point
        a = scale / f
        matrix = np.array(
            [
                [a, 0.0, -a * cx - scale * mx],
                [0.0, a, -a * cy - scale * my],
                [0.0, 0.0, 1.0],
            ],
            dtype=np.float64,
        )
        return cls(camera_id=profile.camera_id, matrix=matrix)

    @property
    def scale(self) -> float:
        """Overall pixel -> conditioned scale factor (isotropic scale / focal length)."""
        return float(self.matrix[0, 0])

    def apply(self, uv_px: np.ndarray) -> np.ndarray:
        uv_px = np.asarray(uv_px, dtype=np.float64).reshape(-1, 2)
        return uv_px * self.scale + self.matrix[:2, 2]

    def invert(self, xy: np.ndarray) -> np.ndarray:
        xy = np.asarray(xy, dtype=np.float64).reshape(-1, 2)
        return (xy - self.matrix[:2, 2]) / self.scale

    def inverse(self) -> np.ndarray:
        s = self.scale
        t = self.matrix[:2, 2]
        return np.array(
            [[1.0 / s, 0.0, -t[0] / s], [0.0, 1.0 / s, -t[1] / s], [0.0, 0.0, 1.0]],
            dtype=np.float64,
        )


def normalize(
    correspondences: CorrespondenceSet,
    profile_a: CameraProfile,
    profile_b: CameraProfile,
    *,
    config: CalibrationConfig = DEFAULT_CONFIG,
) -> tuple[np.ndarray, NormalizationTransform, NormalizationTransform]:
    """
    Condition the correspondences of a camera pair.

    Returns (pairs, T_a, T_b) where `pairs` is (N,4) with rows
    `(x, y, x', y')`: unprimed from camera a, primed from camera b.
    """
    uv_a = correspondences.points(profile_a.camera_id)
    uv_b = correspondences.points(profile_b.camera_id)
    t_a = NormalizationTransform.from_points(profile_a, uv_a, target_mean_distance=config.target_mean_distance)
    t_b = NormalizationTransform.from_points(profile_b, uv_b, target_mean_distance=config.target_mean_distance)
    pairs = np.concatenate([t_a.apply(uv_a), t_b.apply(uv_b)], axis=1)
    if config.debug:
        logger.info("normalization camera %d:\n%s", t_a.camera_id, t_a.matrix)
        logger.info("normalization camera %d:\n%s", t_b.camera_id, t_b.matrix)
    return pairs, t_a, t_b


def denormalize(
    F_norm: np.ndarray,
    transform_a: NormalizationTransform,
    transform_b: NormalizationTransform,
    *,
    config: CalibrationConfig = DEFAULT_CONFIG,
) -> np.ndarray:
    """
    Map a conditioned-coordinate F back to pixels and fix its scale (F[2,2] = 1).

    With p_hat = T_a p and p_hat' = T_b p', the constraint p_hat'^T F_norm p_hat = 0
    becomes p'^T (T_b^T F_norm T_a) p = 0.
    """
    F_norm = np.asarray(F_norm, dtype=np.float64).reshape(3, 3)
    F = transform_b.matrix.T @ F_norm @ transform_a.matrix

    f22 = float(F[2, 2])
    norm = float(np.linalg.norm(F))
    if not np.isfinite(f22) or abs(f22) <= config.scale_rtol * norm:
        raise DegenerateScale(f"F[2,2]={f22:.3e} is numerically zero (|F|={norm:.3e})")
    return F / f22
