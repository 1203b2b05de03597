from __future__ import annotations

import numpy as np

DISPLAY_DIMENSION = 3


def project_to_3d(points) -> np.ndarray:
    """
    Keep the first three coordinates, zero-filling missing ones.

    Works on a single vector (returns shape ``(3,)``) or an ``(n, d)`` stack
    (returns ``(n, 3)``).
    """
    arr = np.asarray(points, dtype=np.float64)
    single = arr.ndim == 1
    if single:
        arr = arr[np.newaxis, :]
    out = np.zeros((arr.shape[0], DISPLAY_DIMENSION), dtype=np.float64)
    keep = min(arr.shape[1], DISPLAY_DIMENSION)
    out[:, :keep] = arr[:, :keep]
    return out[0] if single else out


def view_points(points, dimension: int, *, verbose: bool = False) -> np.ndarray:
    """
    Points in the shape a viewer for ``dimension`` expects.

    2D and 3D lattices are passed through unchanged; higher dimensions are
    projected onto their first three coordinates.
    """
    arr = np.asarray(points, dtype=np.float64)
    if dimension <= DISPLAY_DIMENSION:
        return arr
    if verbose:
        print(f"[view] d={dimension}: only the first {DISPLAY_DIMENSION} coordinates are shown")
    return project_to_3d(arr)


__all__ = ["DISPLAY_DIMENSION", "project_to_3d", "view_points"]
