"""
Dual (reciprocal) basis.

For a basis ``B`` whose rows are the basis vectors the dual basis is

    B* = B @ inv(B.T @ B)

which for square, non-singular ``B`` equals ``inv(B).T`` and satisfies
``B* @ B.T == I``.  The Gram matrix is factored once with LU; a pivot whose
magnitude falls below the tolerance marks the basis as singular.
"""

from __future__ import annotations

import warnings
from typing import Optional

import numpy as np
import scipy.linalg

from .basis import validate_basis
from .errors import SingularBasisError


def default_tolerance(gram: np.ndarray) -> float:
    """``||G||_inf * eps * d``: grows with both scale and dimension."""
    d = gram.shape[0]
    norm = float(np.linalg.norm(gram, ord=np.inf)) if d else 0.0
    return norm * np.finfo(np.float64).eps * max(d, 1)


def gram_matrix(basis) -> np.ndarray:
    b = validate_basis(basis)
    return b.T @ b


def dual_basis(basis, tolerance: Optional[float] = None) -> np.ndarray:
    """
    Compute the reciprocal basis of a square basis matrix.

    Raises InvalidBasisShape for non-square input and SingularBasisError when
    the Gram matrix has a pivot at or below ``tolerance`` (default:
    ``default_tolerance``).  Never returns NaN or infinite entries.
    """
    b = validate_basis(basis)
    gram = gram_matrix(b)
    tol = default_tolerance(gram) if tolerance is None else float(tolerance)

    with warnings.catch_warnings():
        # exact zero pivots are reported below as SingularBasisError
        warnings.simplefilter("ignore", scipy.linalg.LinAlgWarning)
        lu, piv = scipy.linalg.lu_factor(gram, check_finite=False)

    pivots = np.abs(np.diag(lu))
    smallest = float(pivots.min())
    if not smallest > tol:
        raise SingularBasisError(
            f"Gram matrix is singular: smallest pivot {smallest:.3e} <= tolerance {tol:.3e}"
        )

    gram_inv = scipy.linalg.lu_solve((lu, piv), np.eye(b.shape[0]), check_finite=False)
    dual = b @ gram_inv
    if not np.all(np.isfinite(dual)):
        raise SingularBasisError("Dual basis has non-finite entries")
    return dual


def is_reciprocal(basis, dual, atol: float = 1e-6) -> bool:
    """Check ``dual @ basis.T == I`` within ``atol``."""
    b = np.asarray(basis, dtype=np.float64)
    product = np.asarray(dual, dtype=np.float64) @ b.T
    return bool(np.max(np.abs(product - np.eye(b.shape[0]))) < atol)


__all__ = ["dual_basis", "default_tolerance", "gram_matrix", "is_reciprocal"]
