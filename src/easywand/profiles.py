from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np

from easywand.errors import MalformedInput, MissingProfile


@dataclass(frozen=True)
class CameraProfile:
    """
    Pinhole intrinsics of one camera, in pixels.

    Convention: a pixel (u, v) maps to normalized camera coordinates
    x = (u - ppx) / f, y = (v - ppy) / f (single focal length, no skew).
    """

    camera_id: int
    focal_length: float
    resolution: tuple[int, int]
    principal_point: tuple[float, float]

    def K(self) -> np.ndarray:
        f = float(self.focal_length)
        cx, cy = (float(c) for c in self.principal_point)
        return np.array([[f, 0.0, cx], [0.0, f, cy], [0.0, 0.0, 1.0]], dtype=np.float64)


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise MalformedInput(msg)


def parse_camera_profile(
    camera_id: int,
    focal_length: float,
    width: int,
    height: int,
    ppx: float,
    ppy: float,
) -> CameraProfile:
    f = float(focal_length)
    _require(math.isfinite(f) and f != 0.0, f"camera {camera_id}: focal length must be finite and non-zero")
    w, h = int(width), int(height)
    _require(w > 0 and h > 0, f"camera {camera_id}: resolution must be > 0")
    cx, cy = float(ppx), float(ppy)
    _require(math.isfinite(cx) and math.isfinite(cy), f"camera {camera_id}: principal point must be finite")
    return CameraProfile(camera_id=int(camera_id), focal_length=f, resolution=(w, h), principal_point=(cx, cy))


class ProfileStore:
    """Read-only mapping camera id -> CameraProfile, in file order."""

    def __init__(self, profiles: Iterable[CameraProfile]) -> None:
        by_id: dict[int, CameraProfile] = {}
        for p in profiles:
            if p.camera_id in by_id:
                raise MalformedInput(f"duplicate camera profile for camera {p.camera_id}")
            by_id[p.camera_id] = p
        self._by_id = by_id

    def get(self, camera_id: int) -> CameraProfile:
        try:
            return self._by_id[int(camera_id)]
        except KeyError:
            raise MissingProfile(camera_id) from None

    @property
    def camera_ids(self) -> tuple[int, ...]:
        return tuple(self._by_id)

    def __contains__(self, camera_id: object) -> bool:
        return camera_id in self._by_id

    def __iter__(self) -> Iterator[CameraProfile]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def __repr__(self) -> str:
        return f"ProfileStore(camera_ids={self.camera_ids})"
