"""
Basis matrix and session configuration.

A lattice session is described by three user-controlled values: the dimension
``d``, the ``d x d`` basis matrix (rows are basis vectors) and the sum limit
``L`` bounding every integer coefficient.  They live together in an immutable
``LatticeConfig``; every edit returns a new config so that derived quantities
(lattice points, dual basis) can never silently go stale.

Engine policy that is not user data (point budget, tolerances, time limit)
lives in ``EngineParams``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

from .errors import (
    InvalidBasisShape,
    InvalidBasisValue,
    InvalidDimension,
    InvalidSumLimit,
)

###############################################################################
# Constants
###############################################################################

MIN_DIMENSION = 2
MAX_DIMENSION = 400

DEFAULT_DIMENSION = 2
DEFAULT_SUM_LIMIT = 5
DEFAULT_POINT_BUDGET = 50_000

# 2**20 projected corners is ~25 MB; 2**24 is the hard ceiling.
DEFAULT_MAX_CORNER_DIMENSION = 20
MAX_CORNER_DIMENSION = 24

###############################################################################
# Validation helpers
###############################################################################


def check_dimension(dimension: int) -> int:
    """Return ``dimension`` as int, rejecting values outside 2..400."""
    d = int(dimension)
    if d != dimension or not MIN_DIMENSION <= d <= MAX_DIMENSION:
        raise InvalidDimension(
            f"Dimension must be an integer in [{MIN_DIMENSION}, {MAX_DIMENSION}], "
            f"got {dimension!r}"
        )
    return d


def check_sum_limit(sum_limit: int) -> int:
    try:
        limit = int(sum_limit)
    except (TypeError, ValueError) as exc:
        raise InvalidSumLimit(f"Sum limit must be an integer, got {sum_limit!r}") from exc
    if limit != sum_limit or limit < 0:
        raise InvalidSumLimit(f"Sum limit must be a non-negative integer, got {sum_limit!r}")
    return limit


def identity_basis(dimension: int) -> np.ndarray:
    """Identity basis used whenever the dimension is (re)set."""
    return np.eye(dimension, dtype=np.float64)


def validate_basis(basis, dimension: Optional[int] = None) -> np.ndarray:
    """
    Coerce ``basis`` to a float64 ``d x d`` array.

    Raises InvalidBasisShape when the matrix is not square or does not match
    ``dimension``, and InvalidBasisValue when an entry is NaN or infinite.
    """
    try:
        arr = np.array(basis, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        # ragged nested sequences cannot form a matrix
        raise InvalidBasisShape(f"Basis is not a rectangular matrix: {exc}") from exc

    if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        raise InvalidBasisShape(f"Basis must be a square matrix, got shape {arr.shape}")
    if dimension is not None and arr.shape[0] != dimension:
        raise InvalidBasisShape(
            f"Basis has {arr.shape[0]} rows but dimension is {dimension}"
        )
    if not np.all(np.isfinite(arr)):
        bad = np.argwhere(~np.isfinite(arr))[0]
        raise InvalidBasisValue(
            f"Basis entry ({bad[0]}, {bad[1]}) is not finite: {arr[bad[0], bad[1]]}"
        )
    return arr


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr = np.array(arr, dtype=np.float64, copy=True)
    arr.setflags(write=False)
    return arr


###############################################################################
# Config objects
###############################################################################


@dataclass(frozen=True, eq=False)
class LatticeConfig:
    """Immutable snapshot of the user-controlled lattice inputs."""

    dimension: int = DEFAULT_DIMENSION
    basis: Optional[np.ndarray] = None
    sum_limit: int = DEFAULT_SUM_LIMIT

    def __post_init__(self) -> None:
        d = check_dimension(self.dimension)
        basis = identity_basis(d) if self.basis is None else validate_basis(self.basis, d)
        object.__setattr__(self, "dimension", d)
        object.__setattr__(self, "basis", _frozen(basis))
        object.__setattr__(self, "sum_limit", check_sum_limit(self.sum_limit))

    @classmethod
    def from_basis(cls, basis, sum_limit: int = DEFAULT_SUM_LIMIT) -> "LatticeConfig":
        arr = validate_basis(basis)
        return cls(dimension=arr.shape[0], basis=arr, sum_limit=sum_limit)

    def with_dimension(self, dimension: int) -> "LatticeConfig":
        """New config of another dimension; the basis resets to the identity."""
        return LatticeConfig(dimension=dimension, basis=None, sum_limit=self.sum_limit)

    def with_basis(self, basis) -> "LatticeConfig":
        return replace(self, basis=validate_basis(basis, self.dimension))

    def with_basis_cell(self, row: int, col: int, value) -> "LatticeConfig":
        """Replace one basis entry. Strings are parsed as floats."""
        if not (0 <= row < self.dimension and 0 <= col < self.dimension):
            raise IndexError(
                f"Cell ({row}, {col}) outside {self.dimension}x{self.dimension} basis"
            )
        try:
            number = float(value)
        except (TypeError, ValueError) as exc:
            raise InvalidBasisValue(f"Cannot parse basis entry {value!r}") from exc
        basis = self.basis.copy()
        basis[row, col] = number
        return replace(self, basis=basis)

    def with_sum_limit(self, sum_limit: int) -> "LatticeConfig":
        return replace(self, sum_limit=sum_limit)

    def same_as(self, other: "LatticeConfig") -> bool:
        return (
            self.dimension == other.dimension
            and self.sum_limit == other.sum_limit
            and np.array_equal(self.basis, other.basis)
        )


@dataclass
class EngineParams:
    """Engine policy: budgets, tolerances and randomness."""

    point_budget: int = DEFAULT_POINT_BUDGET
    tolerance: Optional[float] = None  # None -> scaled to norm * eps * d
    time_limit: Optional[float] = None  # seconds per generation call
    max_corner_dimension: int = DEFAULT_MAX_CORNER_DIMENSION
    chunk_size: int = 4096
    seed: Optional[int] = None
    verbose: bool = False

    def __post_init__(self) -> None:
        if int(self.point_budget) != self.point_budget or self.point_budget < 0:
            raise ValueError(
                f"point_budget must be a non-negative integer, got {self.point_budget!r}"
            )
        if self.tolerance is not None and not self.tolerance >= 0.0:
            raise ValueError(f"tolerance must be >= 0, got {self.tolerance!r}")
        if self.time_limit is not None and not self.time_limit > 0.0:
            raise ValueError(f"time_limit must be > 0, got {self.time_limit!r}")
        if not 0 <= self.max_corner_dimension <= MAX_CORNER_DIMENSION:
            raise ValueError(
                f"max_corner_dimension must be in [0, {MAX_CORNER_DIMENSION}], "
                f"got {self.max_corner_dimension!r}"
            )
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {self.chunk_size!r}")
        self.point_budget = int(self.point_budget)


__all__ = [
    "MIN_DIMENSION",
    "MAX_DIMENSION",
    "DEFAULT_POINT_BUDGET",
    "DEFAULT_MAX_CORNER_DIMENSION",
    "MAX_CORNER_DIMENSION",
    "LatticeConfig",
    "EngineParams",
    "identity_basis",
    "validate_basis",
    "check_dimension",
    "check_sum_limit",
]
