from __future__ import annotations

from pathlib import Path

from easywand.correspondences import CorrespondenceRecord, CorrespondenceSet
from easywand.errors import MalformedInput
from easywand.profiles import ProfileStore


def write_camera_profiles(path: Path, profiles: ProfileStore) -> Path:
    path = Path(path)
    lines = []
    for p in profiles:
        w, h = p.resolution
        cx, cy = p.principal_point
        lines.append(f"{p.camera_id} {p.focal_length:.17g} {w} {h} {cx:.17g} {cy:.17g}")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def write_wand_points(path: Path, wand: CorrespondenceSet, *, header: bool = True) -> Path:
    """
    Write wand records back in the reader's layout (one line per frame, ends 0 then 1).
    """
    path = Path(path)
    cams = wand.camera_ids
    by_frame: dict[int, dict[int, CorrespondenceRecord]] = {}
    for r in wand:
        by_frame.setdefault(r.frame, {})[r.marker] = r

    lines = []
    if header:
        lines.append(",".join(f"pt{m + 1}_cam{c}_{ax}" for m in (0, 1) for c in cams for ax in ("X", "Y")))
    for frame in sorted(by_frame):
        ends = by_frame[frame]
        if set(ends) != {0, 1}:
            raise MalformedInput(f"frame {frame}: need wand ends 0 and 1, got {sorted(ends)}")
        vals = []
        for m in (0, 1):
            for c in cams:
                o = ends[m].observation(c)
                vals.extend([f"{o.x:.17g}", f"{o.y:.17g}"])
        lines.append(",".join(vals))
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
