from __future__ import annotations

from typing import Optional

import numpy as np

from .basis import EngineParams, LatticeConfig
from .dual import dual_basis
from .errors import SingularBasisError
from .parallelepiped import CORNERS, sample_parallelepiped
from .points import LatticePointSet, generate_lattice_points
from .projection import view_points


class LatticeExplorer:
    """
    The session manager.

    Responsibilities:
    1. Hold the current immutable LatticeConfig and swap it on every edit.
    2. Cache the dual basis, clearing it whenever the basis or dimension changes.
    3. Own the seeded random generator used for parallelepiped sampling.
    """

    def __init__(
        self,
        config: LatticeConfig | None = None,
        params: EngineParams | None = None,
    ) -> None:
        self.config = config or LatticeConfig()
        self.params = params or EngineParams()
        self.rng = np.random.default_rng(self.params.seed)

        self.dual: Optional[np.ndarray] = None
        self.parallelepiped: Optional[np.ndarray] = None

    # ------------------------------------------------------------------ edits
    def _replace_basis(self, config: LatticeConfig) -> None:
        self.config = config
        self.dual = None
        self.parallelepiped = None

    def set_dimension(self, dimension: int) -> None:
        """Switch dimension; the basis resets to the identity."""
        self._replace_basis(self.config.with_dimension(dimension))

    def set_basis(self, basis) -> None:
        self._replace_basis(self.config.with_basis(basis))

    def set_basis_cell(self, row: int, col: int, value) -> None:
        self._replace_basis(self.config.with_basis_cell(row, col, value))

    def set_sum_limit(self, sum_limit: int) -> None:
        self.config = self.config.with_sum_limit(sum_limit)

    # ------------------------------------------------------------------ dual
    def compute_dual(self) -> np.ndarray:
        """Recompute and cache the dual basis of the current config."""
        self.dual = None
        try:
            self.dual = dual_basis(self.config.basis, self.params.tolerance)
        except SingularBasisError:
            if self.params.verbose:
                print(f"[dual] basis of dimension {self.config.dimension} is singular")
            raise
        return self.dual

    # ------------------------------------------------------------------ points
    def lattice_points(self) -> LatticePointSet:
        return generate_lattice_points(self.config, self.params)

    def dual_points(self) -> LatticePointSet:
        """Points of the dual lattice; requires an explicit compute_dual()."""
        if self.dual is None:
            raise RuntimeError("Dual basis not computed; call compute_dual() first")
        return generate_lattice_points(self.config, self.params, basis=self.dual)

    def view(self, point_set: LatticePointSet | None = None) -> np.ndarray:
        """Points ready for a 2D or 3D viewer."""
        if point_set is None:
            point_set = self.lattice_points()
        return view_points(point_set.points, self.config.dimension, verbose=self.params.verbose)

    # ------------------------------------------------------------------ cell
    def shade_parallelepiped(self, mode: str = CORNERS, *, offset=None, active=None) -> np.ndarray:
        self.parallelepiped = sample_parallelepiped(
            self.config,
            mode,
            self.params,
            offset=offset,
            active=active,
            rng=self.rng,
        )
        return self.parallelepiped

    def unshade_parallelepiped(self) -> None:
        self.parallelepiped = None

    def snapshot(self) -> dict:
        return {
            "dimension": self.config.dimension,
            "sum_limit": self.config.sum_limit,
            "has_dual": self.dual is not None,
            "shaded": self.parallelepiped is not None,
        }


__all__ = ["LatticeExplorer"]
