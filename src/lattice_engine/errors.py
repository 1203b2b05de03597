"""Exception and warning types raised by the lattice engine."""

from __future__ import annotations


class LatticeError(Exception):
    """Base class for every engine failure."""


class InvalidDimension(LatticeError, ValueError):
    """Dimension outside the supported range."""


class InvalidSumLimit(LatticeError, ValueError):
    """Sum limit is not a non-negative integer."""


class InvalidBasisShape(LatticeError, ValueError):
    """Basis is not a ``d x d`` matrix for the declared dimension."""


class InvalidBasisValue(LatticeError, ValueError):
    """Basis contains NaN or infinite entries."""


class SingularBasisError(LatticeError, ValueError):
    """Gram matrix of the basis is not invertible within tolerance."""


class TooManyVertices(LatticeError, ValueError):
    """Corner enumeration of the parallelepiped would need ``2**d`` vertices."""


class PointBudgetExceeded(UserWarning):
    """More coefficient vectors exist than the point budget allows.

    Informational only: generation still returns the first ``point_budget``
    points in enumeration order.
    """


__all__ = [
    "LatticeError",
    "InvalidDimension",
    "InvalidSumLimit",
    "InvalidBasisShape",
    "InvalidBasisValue",
    "SingularBasisError",
    "TooManyVertices",
    "PointBudgetExceeded",
]
