from __future__ import annotations

import logging

import numpy as np

from easywand.config import DEFAULT_CONFIG, CalibrationConfig
from easywand.errors import DegenerateConfiguration, InsufficientCorrespondences

logger = logging.getLogger(__name__)


def design_matrix(pairs: np.ndarray) -> np.ndarray:
    """
    (N,9) matrix A with A @ F.ravel() = p'^T F p for rows `(x, y, x', y')`.
    """
    pairs = np.asarray(pairs, dtype=np.float64).reshape(-1, 4)
    x, y, xp, yp = (pairs[:, i] for i in range(4))
    return np.stack([xp * x, xp * y, xp, yp * x, yp * y, yp, x, y, np.ones_like(x)], axis=1)


def _full_svd(A: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Singular values padded to 9 (zeros for N < 9) and V^T (9,9)."""
    _, s, Vt = np.linalg.svd(A, full_matrices=True)
    if s.size < 9:
        s = np.concatenate([s, np.zeros((9 - s.size,), dtype=np.float64)])
    return s, Vt


def design_singular_values(pairs: np.ndarray) -> np.ndarray:
    s, _ = _full_svd(design_matrix(pairs))
    return s


def estimate_raw(
    normalized_pairs: np.ndarray,
    *,
    config: CalibrationConfig = DEFAULT_CONFIG,
) -> np.ndarray:
    """
    Linear eight-point estimate from conditioned `(x, y, x', y')` rows.

    Returns the unit-norm 3x3 minimizer of |A f| (generally rank 3).
    """
    pairs = np.asarray(normalized_pairs, dtype=np.float64).reshape(-1, 4)
    n = int(pairs.shape[0])
    required = max(8, int(config.min_correspondences))
    if n < required:
        raise InsufficientCorrespondences(n, required)
    if not np.all(np.isfinite(pairs)):
        raise DegenerateConfiguration("non-finite normalized coordinates")

    s, Vt = _full_svd(design_matrix(pairs))
    check_null_space(s, config=config)

    F0 = Vt[-1].reshape(3, 3)
    if config.debug:
        logger.info("design matrix singular values: %s", np.array2string(s, precision=3))
        logger.info("raw estimate:\n%s", F0)
    return F0


def check_null_space(s: np.ndarray, *, config: CalibrationConfig = DEFAULT_CONFIG) -> None:
    """
    Raise DegenerateConfiguration unless the two smallest singular values are well separated.
    """
    s = np.asarray(s, dtype=np.float64).reshape(-1)
    s_max, s_second, s_min = float(s[0]), float(s[-2]), float(s[-1])
    if s_max <= 0.0 or s_second <= config.degenerate_rtol * s_max:
        raise DegenerateConfiguration(
            f"null space is not one-dimensional (s[-2]/s[0]={s_second / s_max if s_max > 0 else 0.0:.3e})"
        )
    ratio = s_min / s_second
    if ratio >= config.max_singular_ratio:
        raise DegenerateConfiguration(f"smallest singular values are not separated (s[-1]/s[-2]={ratio:.3f})")
    logger.debug("null space check: s[-2]/s[0]=%.3e s[-1]/s[-2]=%.3e", s_second / s_max, ratio)
