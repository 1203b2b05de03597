from __future__ import annotations

import time
import warnings
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import numpy as np

from .basis import EngineParams, LatticeConfig, validate_basis
from .enumeration import CoefficientStream
from .errors import InvalidBasisShape, PointBudgetExceeded


@dataclass
class LatticePointSet:
    """Points materialized by one generation call, with their bookkeeping."""

    points: np.ndarray
    count_before_cap: int
    point_budget: int
    timed_out: bool = False
    elapsed: float = 0.0
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return int(self.points.shape[0])

    @property
    def budget_exceeded(self) -> bool:
        return self.count_before_cap > self.point_budget

    @property
    def complete(self) -> bool:
        return self.count == self.count_before_cap


def combine(coefficients, basis) -> np.ndarray:
    """
    Map coefficient row vectors to lattice points: ``point = c @ B``.

    Accepts a single vector of length ``d`` or an ``(n, d)`` stack and returns
    the same rank.
    """
    b = np.asarray(basis, dtype=np.float64)
    c = np.asarray(coefficients)
    if b.ndim != 2 or c.shape[-1] != b.shape[0]:
        raise InvalidBasisShape(
            f"Coefficient length {c.shape[-1]} does not match basis shape {b.shape}"
        )
    return c @ b


def generate_lattice_points(
    config: LatticeConfig,
    params: Optional[EngineParams] = None,
    *,
    basis: Optional[np.ndarray] = None,
) -> LatticePointSet:
    """
    Enumerate ``{c @ B : c in [-L, L]**d}`` up to the point budget.

    The first ``point_budget`` vectors in lexicographic order are kept.  When
    more exist, a ``PointBudgetExceeded`` warning is issued and the result
    carries both the true and the materialized counts.  ``basis`` overrides
    ``config.basis`` (used for dual lattice points) and must match the
    config's dimension.
    """
    params = params or EngineParams()
    d = config.dimension
    b = config.basis if basis is None else validate_basis(basis, d)

    start_time = time.perf_counter()
    stream = CoefficientStream(d, config.sum_limit, params.point_budget)
    blocks = []
    timed_out = False

    while not stream.done:
        chunk = stream.next_chunk(params.chunk_size)
        blocks.append(chunk @ b)
        if (
            params.time_limit is not None
            and not stream.done
            and time.perf_counter() - start_time > params.time_limit
        ):
            timed_out = True
            break

    points = np.vstack(blocks) if blocks else np.empty((0, d), dtype=np.float64)
    elapsed = time.perf_counter() - start_time

    result = LatticePointSet(
        points=points,
        count_before_cap=stream.total,
        point_budget=params.point_budget,
        timed_out=timed_out,
        elapsed=elapsed,
        meta={
            "dimension": d,
            "sum_limit": config.sum_limit,
            "point_budget": params.point_budget,
        },
    )

    if result.budget_exceeded:
        warnings.warn(
            PointBudgetExceeded(
                f"{stream.total} coefficient vectors exist for d={d}, L={config.sum_limit}; "
                f"keeping the first {params.point_budget}"
            ),
            stacklevel=2,
        )
    if params.verbose:
        status = " (timed out)" if timed_out else ""
        print(
            f"[lattice] d={d} L={config.sum_limit}: {result.count}/{stream.total} points"
            f"{status}, elapsed={elapsed:.2f}s"
        )
    return result


__all__ = ["LatticePointSet", "combine", "generate_lattice_points"]
