"""
Lattice Engine - Lattice Computation Core

This package enumerates and transforms integer lattices of dimension 2..400:
- generate_lattice_points: Bounded coefficient enumeration under a point budget
- dual_basis: Reciprocal basis via the Gram matrix
- sample_parallelepiped: Corners or a random interior point of the cell
- LatticeExplorer: Session manager tying config, dual cache and sampling together
"""

from .basis import EngineParams, LatticeConfig, identity_basis, validate_basis
from .dual import dual_basis
from .enumeration import count_coefficients, enumerate_coefficients, iter_coefficients
from .errors import (
    InvalidBasisShape,
    InvalidBasisValue,
    InvalidDimension,
    InvalidSumLimit,
    LatticeError,
    PointBudgetExceeded,
    SingularBasisError,
    TooManyVertices,
)
from .explorer import LatticeExplorer
from .parallelepiped import corner_vertices, sample_cell_point, sample_parallelepiped
from .points import LatticePointSet, combine, generate_lattice_points
from .projection import project_to_3d, view_points
from . import utils

__all__ = [
    # Session
    "LatticeExplorer",
    # Configuration classes
    "LatticeConfig",
    "EngineParams",
    "identity_basis",
    "validate_basis",
    # Engine
    "count_coefficients",
    "iter_coefficients",
    "enumerate_coefficients",
    "combine",
    "generate_lattice_points",
    "LatticePointSet",
    "dual_basis",
    "project_to_3d",
    "view_points",
    "corner_vertices",
    "sample_cell_point",
    "sample_parallelepiped",
    # Errors
    "LatticeError",
    "InvalidDimension",
    "InvalidSumLimit",
    "InvalidBasisShape",
    "InvalidBasisValue",
    "SingularBasisError",
    "TooManyVertices",
    "PointBudgetExceeded",
    # Utilities
    "utils",
]
