"""
Fundamental parallelepiped sampling.

Two modes share an offset vector ``o`` (random integers in ``[-L, L]**d``
unless supplied):

* ``corners``: the ``2**d`` vertices ``o + sum(B[j] for bits j set in m)``
  for every mask ``m``.  Guarded by ``EngineParams.max_corner_dimension``.
* ``random``: one point ``o + sum(a_j * B[j])`` with ``a_j ~ U[0, 1)`` for the
  active basis vectors, which works at any dimension.

Both return points already projected to three components.  Since projection
is linear, the offset and basis rows are projected first and the corners are
accumulated in 3D, so memory stays at ``2**d x 3`` floats.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
from numba import njit

from .basis import EngineParams, LatticeConfig
from .errors import InvalidBasisShape, TooManyVertices
from .projection import project_to_3d

CORNERS = "corners"
RANDOM_INTERIOR = "random"
MODES = (CORNERS, RANDOM_INTERIOR)


@njit(cache=True)
def _corner_kernel(offset3: np.ndarray, rows3: np.ndarray, out: np.ndarray) -> None:
    n_vertices = out.shape[0]
    d = rows3.shape[0]
    for m in range(n_vertices):
        for k in range(3):
            out[m, k] = offset3[k]
        for j in range(d):
            if (m >> j) & 1:
                for k in range(3):
                    out[m, k] += rows3[j, k]


def random_offset(dimension: int, sum_limit: int, rng: np.random.Generator) -> np.ndarray:
    """Integer offset drawn uniformly from ``[-L, L]**d``."""
    return rng.integers(-sum_limit, sum_limit + 1, size=dimension).astype(np.float64)


def _resolve_offset(config: LatticeConfig, offset, rng) -> np.ndarray:
    if offset is None:
        return random_offset(config.dimension, config.sum_limit, rng)
    arr = np.asarray(offset, dtype=np.float64)
    if arr.shape != (config.dimension,):
        raise InvalidBasisShape(
            f"Offset must have length {config.dimension}, got shape {arr.shape}"
        )
    return arr


def corner_vertices(
    config: LatticeConfig,
    params: Optional[EngineParams] = None,
    *,
    offset=None,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """
    Projected vertices of the cell spanned by the basis rows from ``offset``.

    Row ``m`` of the ``(2**d, 3)`` result is the corner selecting basis row
    ``j`` whenever bit ``j`` of ``m`` is set.
    """
    params = params or EngineParams()
    d = config.dimension
    if d > params.max_corner_dimension:
        raise TooManyVertices(
            f"Corner mode needs 2**{d} vertices; limit is d <= {params.max_corner_dimension}"
        )
    rng = rng if rng is not None else np.random.default_rng(params.seed)
    origin = _resolve_offset(config, offset, rng)

    out = np.empty((1 << d, 3), dtype=np.float64)
    _corner_kernel(project_to_3d(origin), project_to_3d(config.basis), out)
    return out


def sample_cell_point(
    config: LatticeConfig,
    rng: np.random.Generator,
    *,
    offset=None,
    active=None,
) -> np.ndarray:
    """
    One random point ``offset + a @ B`` inside the fundamental cell.

    ``active`` is an optional boolean mask of length ``d``; inactive basis
    vectors get coefficient 0, which places the point on the matching face.
    Returns a ``(1, 3)`` array.
    """
    d = config.dimension
    origin = _resolve_offset(config, offset, rng)
    weights = rng.random(d)
    if active is not None:
        mask = np.asarray(active, dtype=bool)
        if mask.shape != (d,):
            raise InvalidBasisShape(f"Mask must have length {d}, got shape {mask.shape}")
        weights = np.where(mask, weights, 0.0)
    point = origin + weights @ config.basis
    return project_to_3d(point[np.newaxis, :])


def sample_parallelepiped(
    config: LatticeConfig,
    mode: str = CORNERS,
    params: Optional[EngineParams] = None,
    *,
    offset=None,
    active=None,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """Dispatch to ``corner_vertices`` or ``sample_cell_point`` by mode."""
    params = params or EngineParams()
    rng = rng if rng is not None else np.random.default_rng(params.seed)
    if mode == CORNERS:
        return corner_vertices(config, params, offset=offset, rng=rng)
    if mode == RANDOM_INTERIOR:
        return sample_cell_point(config, rng, offset=offset, active=active)
    raise ValueError(f"Unknown parallelepiped mode: {mode!r} (expected one of {MODES})")


__all__ = [
    "CORNERS",
    "RANDOM_INTERIOR",
    "MODES",
    "random_offset",
    "corner_vertices",
    "sample_cell_point",
    "sample_parallelepiped",
]
