from __future__ import annotations

import numpy as np


def enforce_rank2(F0: np.ndarray) -> np.ndarray:
    """
    Closest rank-2 matrix to F0 in Frobenius norm.

    With F0 = U diag(r, s, t) V^T (r >= s >= t), returns U diag(r, s, 0) V^T.
    """
    F0 = np.asarray(F0, dtype=np.float64).reshape(3, 3)
    U, d, Vt = np.linalg.svd(F0)
    d = d.copy()
    d[2] = 0.0
    return U @ np.diag(d) @ Vt
