from easywand.api.estimate_io import load_fundamental_matrix, save_fundamental_matrix

__all__ = [
    "load_fundamental_matrix",
    "save_fundamental_matrix",
]
