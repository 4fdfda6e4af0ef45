from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from easywand.config import DEFAULT_CONFIG, CalibrationConfig
from easywand.core.eight_point import design_matrix, design_singular_values, estimate_raw
from easywand.core.geometry import epipolar_residuals, symmetric_epipolar_distance
from easywand.core.normalization import denormalize, normalize
from easywand.core.rank import enforce_rank2
from easywand.correspondences import CorrespondenceSet
from easywand.errors import InsufficientCorrespondences, MalformedInput, MissingProfile
from easywand.log import timed
from easywand.profiles import CameraProfile, ProfileStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FundamentalMatrixEstimate:
    """
    Fundamental matrix of a camera pair, in pixel coordinates.

    Convention: for corresponding pixels p (camera_a) and p' (camera_b),
    p'^T F p = 0. F is canonicalized with F[2,2] = 1 and has rank <= 2.
    """

    F: np.ndarray  # (3,3)
    camera_a: int
    camera_b: int
    n_correspondences: int
    diagnostics: dict[str, float] = field(default_factory=dict)

    def residuals(self, correspondences: CorrespondenceSet) -> np.ndarray:
        return epipolar_residuals(self.F, correspondences.pairs(self.camera_a, self.camera_b))

    def epipolar_distances_px(self, correspondences: CorrespondenceSet) -> np.ndarray:
        return symmetric_epipolar_distance(self.F, correspondences.pairs(self.camera_a, self.camera_b))


def compute_fundamental_matrix(
    correspondences: CorrespondenceSet,
    profile_a: CameraProfile,
    profile_b: CameraProfile,
    *,
    config: CalibrationConfig | None = None,
) -> FundamentalMatrixEstimate:
    """
    Normalized eight-point estimate of F for cameras (a, b).

    Raises InsufficientCorrespondences, MissingProfile (profile camera not
    observed), DegenerateConfiguration or DegenerateScale; never returns a matrix
    that fails those checks.
    """
    config = DEFAULT_CONFIG if config is None else config
    required = max(8, config.min_correspondences)
    if len(correspondences) < required:
        raise InsufficientCorrespondences(len(correspondences), required)
    for p in (profile_a, profile_b):
        if p.camera_id not in correspondences.camera_ids:
            raise MissingProfile(p.camera_id)

    pair_name = f"F({profile_a.camera_id},{profile_b.camera_id})"
    with timed(logger, pair_name):
        pairs_hat, t_a, t_b = normalize(correspondences, profile_a, profile_b, config=config)
        F0 = estimate_raw(pairs_hat, config=config)
        F_hat = enforce_rank2(F0)
        F = denormalize(F_hat, t_a, t_b, config=config)

    pairs_px = correspondences.pairs(profile_a.camera_id, profile_b.camera_id)
    s = design_singular_values(pairs_hat)
    r = epipolar_residuals(F, pairs_px)
    d = symmetric_epipolar_distance(F, pairs_px)
    diagnostics = {
        "design_sv_min": float(s[-1]),
        "design_sv_second": float(s[-2]),
        "design_sv_ratio": float(s[-1] / s[-2]),
        "normalized_residual_norm": float(np.linalg.norm(design_matrix(pairs_hat) @ F_hat.reshape(-1))),
        "algebraic_rms": float(np.sqrt(np.mean(r * r))),
        "epipolar_rms_px": float(np.sqrt(np.mean(d * d))),
        "epipolar_max_px": float(np.max(d)),
    }
    if config.debug:
        logger.info("%s =\n%s", pair_name, F)
    logger.debug("%s diagnostics: %s", pair_name, diagnostics)

    return FundamentalMatrixEstimate(
        F=F,
        camera_a=profile_a.camera_id,
        camera_b=profile_b.camera_id,
        n_correspondences=len(correspondences),
        diagnostics=diagnostics,
    )


def calibrate_pairs(
    correspondences: CorrespondenceSet,
    profiles: ProfileStore,
    *,
    reference: int | None = None,
    config: CalibrationConfig | None = None,
) -> dict[tuple[int, int], FundamentalMatrixEstimate]:
    """
    Estimate F between a reference camera and every other observed camera.

    The reference defaults to the first observed camera.
    """
    cams = correspondences.camera_ids
    if len(cams) < 2:
        raise MalformedInput(f"need at least two observed cameras to form a pair, got {list(cams)}")
    for cid in cams:
        profiles.get(cid)
    if reference is None:
        reference = cams[0]
    ref = profiles.get(reference)
    if reference not in cams:
        raise MalformedInput(f"reference camera {reference} is not observed in the correspondences")

    out: dict[tuple[int, int], FundamentalMatrixEstimate] = {}
    for cid in cams:
        if cid == reference:
            continue
        est = compute_fundamental_matrix(correspondences, ref, profiles.get(cid), config=config)
        out[(est.camera_a, est.camera_b)] = est
    return out
