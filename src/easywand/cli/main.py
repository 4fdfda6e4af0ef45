from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

import numpy as np

from easywand.api.estimate_io import save_fundamental_matrix
from easywand.config import DEFAULT_CONFIG, ConfigValidationError, load_calibration_config
from easywand.core.fundamental import calibrate_pairs
from easywand.errors import EasyWandError
from easywand.io.readers import read_background_points, read_camera_profiles, read_wand_points
from easywand.log import make_logger


def _cmd_calibrate(args: argparse.Namespace) -> int:
    config = load_calibration_config(args.config) if args.config else DEFAULT_CONFIG
    if args.debug and not config.debug:
        config = replace(config, debug=True)

    profiles = read_camera_profiles(args.profiles)
    wand = read_wand_points(args.wand, profiles.camera_ids)
    if args.background:
        background = read_background_points(args.background, profiles.camera_ids)
        print(f"Background points: {len(background)} (not used for estimation)")
    print(f"Cameras: {list(profiles.camera_ids)}  wand correspondences: {len(wand)}")

    results = calibrate_pairs(wand, profiles, reference=args.reference, config=config)
    for (a, b), est in results.items():
        print(f"F (camera {a} -> camera {b}), p_{b}^T F p_{a} = 0:")
        print(np.array2string(est.F, precision=10, suppress_small=False))
        print(
            f"  epipolar rms {est.diagnostics['epipolar_rms_px']:.4f} px, "
            f"max {est.diagnostics['epipolar_max_px']:.4f} px"
        )
        if args.out:
            path = save_fundamental_matrix(Path(args.out) / f"F_{a}_{b}.json", est)
            print(f"Wrote {path}")
    return 0


def _cmd_plot(args: argparse.Namespace) -> int:
    from easywand.plot import plot_wand_points, save_wand_plot

    profiles = read_camera_profiles(args.profiles)
    wand = read_wand_points(args.wand, profiles.camera_ids)
    background = read_background_points(args.background, profiles.camera_ids) if args.background else None
    profile = profiles.get(args.camera)
    ax = plot_wand_points(wand, profile.camera_id, background=background, resolution=profile.resolution)
    if args.out:
        print(f"Wrote {save_wand_plot(args.out, ax)}")
    else:
        import matplotlib.pyplot as plt  # type: ignore

        plt.show()
    return 0


def _cmd_generate(args: argparse.Namespace) -> int:
    from easywand.sim.synthetic import make_wand_scene, write_synthetic_scene

    scene = make_wand_scene(n_cameras=args.cameras, n_frames=args.frames, noise_px=args.noise_px, seed=args.seed)
    for path in write_synthetic_scene(args.out, scene):
        print(f"Wrote {path}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="easywand")
    sub = parser.add_subparsers(dest="cmd", required=True)

    cal = sub.add_parser("calibrate", help="Estimate pairwise fundamental matrices from wand points.")
    cal.add_argument("profiles", type=Path, help="Camera profile file (id f width height ppx ppy per line).")
    cal.add_argument("wand", type=Path, help="Wand points file (csv, 4 values per camera per frame).")
    cal.add_argument("--background", type=Path, default=None, help="Optional background points file.")
    cal.add_argument("--reference", type=int, default=None, help="Reference camera id (default: first camera).")
    cal.add_argument("--config", type=Path, default=None, help="Calibration config JSON.")
    cal.add_argument("--out", type=Path, default=None, help="Directory for F_<a>_<b>.json files.")
    cal.add_argument("--debug", action="store_true", help="Log intermediate matrices.")

    plot = sub.add_parser("plot", help="Scatter-plot the wand points seen by one camera.")
    plot.add_argument("profiles", type=Path)
    plot.add_argument("wand", type=Path)
    plot.add_argument("--camera", type=int, required=True)
    plot.add_argument("--background", type=Path, default=None)
    plot.add_argument("--out", type=Path, default=None, help="Save to an image file instead of showing.")

    gen = sub.add_parser("generate-synthetic", help="Write a synthetic profile + wand points pair.")
    gen.add_argument("--out", type=Path, required=True)
    gen.add_argument("--cameras", type=int, default=2)
    gen.add_argument("--frames", type=int, default=30)
    gen.add_argument("--noise-px", type=float, default=0.0)
    gen.add_argument("--seed", type=int, default=0)

    args = parser.parse_args(argv)
    make_logger("easywand", level=logging.DEBUG if getattr(args, "debug", False) else logging.INFO)

    handlers = {"calibrate": _cmd_calibrate, "plot": _cmd_plot, "generate-synthetic": _cmd_generate}
    try:
        return handlers[args.cmd](args)
    except (EasyWandError, ConfigValidationError) as e:
        print(f"error: {type(e).__name__}: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
