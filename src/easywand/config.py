from __future__ import annotations

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

SCHEMA_VERSION = "easywand.config.v0"


class ConfigValidationError(ValueError):
    pass


@dataclass(frozen=True)
class CalibrationConfig:
    """
    Numerical knobs of the fundamental-matrix pipeline.

    Passed explicitly to every stage; nothing reads process-wide state.
    """

    min_correspondences: int = 8
    target_mean_distance: float = math.sqrt(2.0)
    degenerate_rtol: float = 1e-8
    max_singular_ratio: float = 0.95
    scale_rtol: float = 1e-12
    debug: bool = False


DEFAULT_CONFIG = CalibrationConfig()


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise ConfigValidationError(msg)


def load_calibration_config(path: Path) -> CalibrationConfig:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    _require(isinstance(data, dict), "config must be a JSON object")
    return parse_calibration_config(data)


def parse_calibration_config(data: dict[str, Any]) -> CalibrationConfig:
    schema_version = data.get("schema_version", SCHEMA_VERSION)
    _require(schema_version == SCHEMA_VERSION, f"schema_version must be {SCHEMA_VERSION}")

    known = {
        "schema_version",
        "min_correspondences",
        "target_mean_distance",
        "degenerate_rtol",
        "max_singular_ratio",
        "scale_rtol",
        "debug",
    }
    unknown = sorted(set(data) - known)
    _require(not unknown, f"unknown config keys: {unknown}")

    d = DEFAULT_CONFIG
    min_corr = int(data.get("min_correspondences", d.min_correspondences))
    _require(min_corr >= 8, "min_correspondences must be >= 8")

    target = float(data.get("target_mean_distance", d.target_mean_distance))
    _require(math.isfinite(target) and target > 0.0, "target_mean_distance must be > 0")

    rtol = float(data.get("degenerate_rtol", d.degenerate_rtol))
    _require(0.0 < rtol < 1.0, "degenerate_rtol must be in (0, 1)")

    ratio = float(data.get("max_singular_ratio", d.max_singular_ratio))
    _require(0.0 < ratio <= 1.0, "max_singular_ratio must be in (0, 1]")

    scale_rtol = float(data.get("scale_rtol", d.scale_rtol))
    _require(math.isfinite(scale_rtol) and scale_rtol >= 0.0, "scale_rtol must be >= 0")

    debug = data.get("debug", d.debug)
    _require(isinstance(debug, bool), "debug must be true or false")

    return CalibrationConfig(
        min_correspondences=min_corr,
        target_mean_distance=target,
        degenerate_rtol=rtol,
        max_singular_ratio=ratio,
        scale_rtol=scale_rtol,
        debug=debug,
    )
