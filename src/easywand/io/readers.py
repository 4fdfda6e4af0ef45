from __future__ import annotations

import math
import re
from collections.abc import Sequence
from pathlib import Path

from easywand.correspondences import CorrespondenceRecord, CorrespondenceSet, Observation
from easywand.errors import MalformedInput
from easywand.profiles import ProfileStore, parse_camera_profile

_SEP = re.compile(r"[,\s]+")


def _data_lines(path: Path) -> list[tuple[int, str]]:
    out: list[tuple[int, str]] = []
    for lineno, line in enumerate(Path(path).read_text(encoding="utf-8").splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        out.append((lineno, line))
    return out


def _tokens(line: str) -> list[str]:
    return [t for t in _SEP.split(line) if t]


def _is_number(tok: str) -> bool:
    try:
        float(tok)
    except ValueError:
        return False
    return True


def read_camera_profiles(path: Path) -> ProfileStore:
    """
    Read a camera profile file: one `camera_id focal_length width height ppx ppy` line per camera.
    """
    path = Path(path)
    profiles = []
    for lineno, line in _data_lines(path):
        tok = line.split()
        if len(tok) != 6:
            raise MalformedInput(f"{path}:{lineno}: expected 6 fields, got {len(tok)}")
        try:
            camera_id = int(tok[0])
            fl = float(tok[1])
            width, height = int(tok[2]), int(tok[3])
            ppx, ppy = float(tok[4]), float(tok[5])
        except ValueError as e:
            raise MalformedInput(f"{path}:{lineno}: {e}") from e
        try:
            profiles.append(parse_camera_profile(camera_id, fl, width, height, ppx, ppy))
        except MalformedInput as e:
            raise MalformedInput(f"{path}:{lineno}: {e}") from e
    if not profiles:
        raise MalformedInput(f"{path}: no camera profiles")
    return ProfileStore(profiles)


def _read_point_rows(path: Path, n_values: int) -> list[tuple[int, list[float]]]:
    rows: list[tuple[int, list[float]]] = []
    for i, (lineno, line) in enumerate(_data_lines(path)):
        tok = _tokens(line)
        if i == 0 and not all(_is_number(t) for t in tok):
            continue  # header
        if len(tok) != n_values:
            raise MalformedInput(f"{path}:{lineno}: expected {n_values} values, got {len(tok)}")
        try:
            vals = [float(t) for t in tok]
        except ValueError as e:
            raise MalformedInput(f"{path}:{lineno}: {e}") from e
        if not all(math.isfinite(v) for v in vals):
            raise MalformedInput(f"{path}:{lineno}: missing or non-finite coordinates")
        rows.append((lineno, vals))
    return rows


def read_wand_points(path: Path, camera_ids: Sequence[int]) -> CorrespondenceSet:
    """
    Read a wand points file.

    Each line is one frame with `4 * len(camera_ids)` values: `x y` of wand end 0
    for every camera (in `camera_ids` order), then `x y` of wand end 1 for every
    camera. Every line yields two records, with markers 0 and 1.
    """
    path = Path(path)
    cams = [int(c) for c in camera_ids]
    n = len(cams)
    records: list[CorrespondenceRecord] = []
    for frame, (_lineno, vals) in enumerate(_read_point_rows(path, 4 * n)):
        for marker in (0, 1):
            base = 2 * n * marker
            obs = {cid: Observation(vals[base + 2 * k], vals[base + 2 * k + 1]) for k, cid in enumerate(cams)}
            records.append(CorrespondenceRecord(frame=frame, marker=marker, observations=obs))
    return CorrespondenceSet(records, camera_ids=cams)


def read_background_points(path: Path, camera_ids: Sequence[int]) -> CorrespondenceSet:
    """Read a background points file: `x y` per camera, one static point per line."""
    path = Path(path)
    cams = [int(c) for c in camera_ids]
    records = [
        CorrespondenceRecord(
            frame=0,
            marker=i,
            observations={cid: Observation(vals[2 * k], vals[2 * k + 1]) for k, cid in enumerate(cams)},
        )
        for i, (_lineno, vals) in enumerate(_read_point_rows(path, 2 * len(cams)))
    ]
    return CorrespondenceSet(records, camera_ids=cams)
