from __future__ import annotations

from pathlib import Path
from typing import Any

from easywand.correspondences import CorrespondenceSet


def plot_wand_points(
    wand: CorrespondenceSet,
    camera_id: int,
    *,
    background: CorrespondenceSet | None = None,
    ax: Any = None,
    resolution: tuple[int, int] | None = None,
) -> Any:
    """
    Scatter the raw wand points seen by one camera (pixels, y down).

    Wand end 0 is dark grey, wand end 1 is white with a dark edge, background
    points are red crosses. Returns the matplotlib Axes.
    """
    import matplotlib.pyplot as plt  # type: ignore

    if ax is None:
        _fig, ax = plt.subplots(figsize=(6, 6))
        ax.set_facecolor((0.9, 0.9, 0.9))

    end0 = wand.select_markers(0).points(camera_id)
    end1 = wand.select_markers(1).points(camera_id)
    ax.scatter(end0[:, 0], end0[:, 1], s=12, c=[(100 / 255, 100 / 255, 100 / 255)], label="wand end 0")
    ax.scatter(end1[:, 0], end1[:, 1], s=12, c="white", edgecolors="0.3", linewidths=0.5, label="wand end 1")
    if background is not None and len(background):
        bk = background.points(camera_id)
        ax.scatter(bk[:, 0], bk[:, 1], s=30, c="tab:red", marker="x", label="background")

    if resolution is not None:
        w, h = resolution
        ax.set_xlim(0, w)
        ax.set_ylim(h, 0)
    elif not ax.yaxis_inverted():
        ax.invert_yaxis()
    ax.set_aspect("equal")
    ax.set_xlabel("x [px]")
    ax.set_ylabel("y [px]")
    ax.set_title(f"camera {camera_id}")
    ax.legend(loc="best", fontsize="small")
    return ax


def save_wand_plot(path: Path, ax: Any) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    ax.figure.savefig(path, dpi=120, bbox_inches="tight")
    return path
