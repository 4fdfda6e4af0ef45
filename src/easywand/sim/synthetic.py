from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np

from easywand.correspondences import CorrespondenceRecord, CorrespondenceSet, Observation
from easywand.io.writers import write_camera_profiles, write_wand_points
from easywand.profiles import CameraProfile, ProfileStore, parse_camera_profile


def look_at(center: np.ndarray, target: np.ndarray, up: np.ndarray | None = None) -> np.ndarray:
    """
    World->camera rotation (rows x, y, z) for a camera at `center` looking at `target`.

    Camera convention: x right, y down, z forward.
    """
    center = np.asarray(center, dtype=np.float64).reshape(3)
    target = np.asarray(target, dtype=np.float64).reshape(3)
    up = np.array([0.0, 0.0, 1.0]) if up is None else np.asarray(up, dtype=np.float64).reshape(3)
    z = target - center
    z /= np.linalg.norm(z)
    y = -up + float(np.dot(up, z)) * z
    y /= np.linalg.norm(y)
    x = np.cross(y, z)
    return np.stack([x, y, z], axis=0)


def _skew(t: np.ndarray) -> np.ndarray:
    t = np.asarray(t, dtype=np.float64).reshape(3)
    return np.array([[0.0, -t[2], t[1]], [t[2], 0.0, -t[0]], [-t[1], t[0], 0.0]], dtype=np.float64)


@dataclass(frozen=True)
class SyntheticWandScene:
    """Pinhole cameras with known poses observing both ends of a moving wand."""

    profiles: ProfileStore
    wand: CorrespondenceSet
    rotations: dict[int, np.ndarray]  # camera_id -> R (3,3), X_cam = R X_world + t
    translations: dict[int, np.ndarray]  # camera_id -> t (3,)
    wand_ends_world: np.ndarray  # (frames, 2, 3)

    def fundamental(self, camera_a: int, camera_b: int) -> np.ndarray:
        """Ground-truth F (p_b^T F p_a = 0 in pixels), canonicalized with F[2,2] = 1."""
        Ra, ta = self.rotations[camera_a], self.translations[camera_a]
        Rb, tb = self.rotations[camera_b], self.translations[camera_b]
        R = Rb @ Ra.T
        t = tb - R @ ta
        E = _skew(t) @ R
        Ka = self.profiles.get(camera_a).K()
        Kb = self.profiles.get(camera_b).K()
        F = np.linalg.inv(Kb).T @ E @ np.linalg.inv(Ka)
        return F / F[2, 2]


def project(profile: CameraProfile, R: np.ndarray, t: np.ndarray, XYZ_world: np.ndarray) -> np.ndarray:
    XYZ_world = np.asarray(XYZ_world, dtype=np.float64).reshape(-1, 3)
    Xc = XYZ_world @ np.asarray(R, dtype=np.float64).T + np.asarray(t, dtype=np.float64).reshape(1, 3)
    if np.any(Xc[:, 2] <= 1e-9):
        raise ValueError("point behind camera")
    f = float(profile.focal_length)
    cx, cy = profile.principal_point
    return np.stack([f * Xc[:, 0] / Xc[:, 2] + cx, f * Xc[:, 1] / Xc[:, 2] + cy], axis=1)


def make_wand_scene(
    *,
    n_cameras: int = 2,
    n_frames: int = 30,
    wand_length: float = 0.5,
    volume_half_size: float = 0.4,
    distance: float = 3.0,
    width: int = 1280,
    height: int = 1024,
    noise_px: float = 0.0,
    seed: int = 0,
) -> SyntheticWandScene:
    if n_cameras < 2:
        raise ValueError("need at least 2 cameras")
    if n_frames < 1:
        raise ValueError("need at least 1 frame")
    rng = np.random.default_rng(seed)

    profiles: list[CameraProfile] = []
    rotations: dict[int, np.ndarray] = {}
    translations: dict[int, np.ndarray] = {}
    angles = np.deg2rad(np.linspace(-40.0, 40.0, n_cameras)) + rng.uniform(-0.05, 0.05, size=n_cameras)
    for k in range(n_cameras):
        cid = k + 1
        C = np.array(
            [distance * np.sin(angles[k]), -distance * np.cos(angles[k]), rng.uniform(0.2, 0.8)],
            dtype=np.float64,
        )
        # Distinct aim points keep the principal rays skew, so F[2,2] stays well away from 0.
        target = rng.uniform(-0.3, 0.3, size=3)
        R = look_at(C, target)
        rotations[cid] = R
        translations[cid] = -R @ C
        profiles.append(
            parse_camera_profile(
                cid,
                rng.uniform(1200.0, 1600.0),
                width,
                height,
                (width - 1) / 2.0 + rng.uniform(-20.0, 20.0),
                (height - 1) / 2.0 + rng.uniform(-20.0, 20.0),
            )
        )

    centers = rng.uniform(-volume_half_size, volume_half_size, size=(n_frames, 3))
    dirs = rng.normal(size=(n_frames, 3))
    dirs /= np.linalg.norm(dirs, axis=1, keepdims=True)
    ends = np.stack([centers - 0.5 * wand_length * dirs, centers + 0.5 * wand_length * dirs], axis=1)

    uv: dict[int, np.ndarray] = {}
    for p in profiles:
        pts = project(p, rotations[p.camera_id], translations[p.camera_id], ends.reshape(-1, 3))
        if noise_px > 0.0:
            pts = pts + rng.normal(scale=float(noise_px), size=pts.shape)
        uv[p.camera_id] = pts.reshape(n_frames, 2, 2)

    records = [
        CorrespondenceRecord(
            frame=i,
            marker=m,
            observations={cid: Observation(float(a[i, m, 0]), float(a[i, m, 1])) for cid, a in uv.items()},
        )
        for i in range(n_frames)
        for m in (0, 1)
    ]
    return SyntheticWandScene(
        profiles=ProfileStore(profiles),
        wand=CorrespondenceSet(records),
        rotations=rotations,
        translations=translations,
        wand_ends_world=ends,
    )


def write_synthetic_scene(out_dir: Path, scene: SyntheticWandScene) -> tuple[Path, Path]:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    profiles_path = write_camera_profiles(out_dir / "profiles.txt", scene.profiles)
    wand_path = write_wand_points(out_dir / "wand.csv", scene.wand)
    return profiles_path, wand_path
