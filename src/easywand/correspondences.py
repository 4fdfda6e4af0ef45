from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

import numpy as np

from easywand.errors import MalformedInput


@dataclass(frozen=True)
class Observation:
    x: float
    y: float


@dataclass(frozen=True)
class CorrespondenceRecord:
    """
    All cameras' observations of one physical point in one frame.

    `marker` tells which point of the frame this is (wand end 0 or 1, or the
    index of a background point).
    """

    frame: int
    marker: int
    observations: Mapping[int, Observation]

    def __post_init__(self) -> None:
        object.__setattr__(self, "observations", MappingProxyType(dict(self.observations)))

    def observation(self, camera_id: int) -> Observation:
        try:
            return self.observations[int(camera_id)]
        except KeyError:
            raise MalformedInput(f"frame {self.frame} marker {self.marker}: camera {camera_id} not observed") from None


class CorrespondenceSet:
    """
    Ordered, immutable sequence of CorrespondenceRecord.

    Every record observes exactly the same cameras; per-camera coordinates are
    reached by camera id, never by column offsets.
    """

    def __init__(self, records: Sequence[CorrespondenceRecord], *, camera_ids: Sequence[int] | None = None) -> None:
        records = tuple(records)
        cams: tuple[int, ...] = ()
        if camera_ids is not None:
            cams = tuple(sorted({int(c) for c in camera_ids}))
        elif records:
            cams = tuple(sorted(records[0].observations))
        for r in records:
            if tuple(sorted(r.observations)) != cams:
                raise MalformedInput(
                    f"frame {r.frame} marker {r.marker}: cameras {sorted(r.observations)} != {list(cams)}"
                )
        self._records = records
        self._camera_ids = cams

    @classmethod
    def from_arrays(
        cls,
        points_by_camera: Mapping[int, np.ndarray],
        *,
        markers: Sequence[int] | None = None,
        frames: Sequence[int] | None = None,
    ) -> "CorrespondenceSet":
        """Build a set from `{camera_id: (N,2) pixels}` arrays of equal length."""
        arrays = {int(k): np.asarray(v, dtype=np.float64).reshape(-1, 2) for k, v in points_by_camera.items()}
        sizes = {a.shape[0] for a in arrays.values()}
        if len(sizes) > 1:
            raise MalformedInput(f"per-camera point arrays differ in length: {sorted(sizes)}")
        n = sizes.pop() if sizes else 0
        frames = list(range(n)) if frames is None else [int(f) for f in frames]
        markers = [0] * n if markers is None else [int(m) for m in markers]
        if len(frames) != n or len(markers) != n:
            raise MalformedInput("frames/markers must have one entry per point")
        records = [
            CorrespondenceRecord(
                frame=frames[i],
                marker=markers[i],
                observations={cid: Observation(float(a[i, 0]), float(a[i, 1])) for cid, a in arrays.items()},
            )
            for i in range(n)
        ]
        return cls(records, camera_ids=list(arrays))

    @property
    def camera_ids(self) -> tuple[int, ...]:
        return self._camera_ids

    @property
    def records(self) -> tuple[CorrespondenceRecord, ...]:
        return self._records

    def points(self, camera_id: int) -> np.ndarray:
        """Pixel coordinates (N,2) of one camera, in record order."""
        out = np.empty((len(self._records), 2), dtype=np.float64)
        for i, r in enumerate(self._records):
            o = r.observation(camera_id)
            out[i, 0] = o.x
            out[i, 1] = o.y
        return out

    def pairs(self, camera_a: int, camera_b: int) -> np.ndarray:
        """Stacked `(x, y, x', y')` rows, unprimed from camera_a, primed from camera_b."""
        return np.concatenate([self.points(camera_a), self.points(camera_b)], axis=1)

    def select_markers(self, *markers: int) -> "CorrespondenceSet":
        keep = {int(m) for m in markers}
        return CorrespondenceSet([r for r in self._records if r.marker in keep], camera_ids=self._camera_ids)

    def __iter__(self) -> Iterator[CorrespondenceRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"CorrespondenceSet(n={len(self._records)}, camera_ids={self._camera_ids})"
