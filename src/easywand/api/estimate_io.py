from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np

from easywand.core.fundamental import FundamentalMatrixEstimate
from easywand.errors import MalformedInput

SCHEMA_VERSION = "easywand.fundamental.v0"


def _to_float_matrix(x: Any, shape: tuple[int, ...]) -> np.ndarray:
    x = np.asarray(x, dtype=np.float64)
    if x.size != int(np.prod(shape)):
        raise ValueError(f"expected {shape} values, got {x.shape}")
    x = x.reshape(shape)
    if not np.all(np.isfinite(x)):
        raise ValueError("non-finite values")
    return x


def save_fundamental_matrix(path: Path, estimate: FundamentalMatrixEstimate) -> Path:
    """
    Save an estimate as a small JSON document (F as nested lists plus diagnostics).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    doc: dict[str, Any] = {
        "schema_version": SCHEMA_VERSION,
        "camera_a": int(estimate.camera_a),
        "camera_b": int(estimate.camera_b),
        "convention": "p_b^T F p_a = 0, pixels, F[2][2] = 1",
        "F": np.asarray(estimate.F, dtype=np.float64).tolist(),
        "n_correspondences": int(estimate.n_correspondences),
        "diagnostics": {k: float(v) for k, v in estimate.diagnostics.items()},
    }
    path.write_text(json.dumps(doc, indent=2, sort_keys=True), encoding="utf-8")
    return path


def load_fundamental_matrix(path: Path) -> FundamentalMatrixEstimate:
    path = Path(path)
    try:
        doc = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise MalformedInput(f"{path}: invalid JSON: {e}") from e
    if not isinstance(doc, dict) or str(doc.get("schema_version")) != SCHEMA_VERSION:
        raise MalformedInput(f"{path}: unsupported fundamental matrix schema")
    try:
        return FundamentalMatrixEstimate(
            F=_to_float_matrix(doc["F"], (3, 3)),
            camera_a=int(doc["camera_a"]),
            camera_b=int(doc["camera_b"]),
            n_correspondences=int(doc.get("n_correspondences", 0)),
            diagnostics={str(k): float(v) for k, v in doc.get("diagnostics", {}).items()},
        )
    except KeyError as e:
        raise MalformedInput(f"{path}: missing field {e}") from e
    except (TypeError, ValueError) as e:
        raise MalformedInput(f"{path}: {e}") from e
