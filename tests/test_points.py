"""
Tests for lattice point generation and the point budget.
"""

import sys
import warnings
from pathlib import Path

import numpy as np
import pytest

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from lattice_engine import (
    EngineParams,
    InvalidBasisShape,
    LatticeConfig,
    PointBudgetExceeded,
    combine,
    generate_lattice_points,
)


def test_budget_enforcement():
    """d=3, L=10, budget=100: exactly 100 points, 21^3 reported."""
    config = LatticeConfig(dimension=3, sum_limit=10)
    with pytest.warns(PointBudgetExceeded):
        result = generate_lattice_points(config, EngineParams(point_budget=100))

    assert result.count == 100
    assert result.points.shape == (100, 3)
    assert result.count_before_cap == 9261
    assert result.budget_exceeded
    assert not result.complete
    assert not result.timed_out


def test_no_warning_within_budget():
    config = LatticeConfig(dimension=2, sum_limit=2)
    with warnings.catch_warnings():
        warnings.simplefilter("error", PointBudgetExceeded)
        result = generate_lattice_points(config, EngineParams(point_budget=25))
    assert result.count == 25
    assert result.complete


def test_capped_points_are_prefix_of_full_set():
    """Truncation keeps the first N points in enumeration order."""
    rng = np.random.default_rng(3)
    basis = rng.normal(size=(3, 3))
    config = LatticeConfig(dimension=3, basis=basis, sum_limit=2)

    full = generate_lattice_points(config, EngineParams(point_budget=1000))
    with pytest.warns(PointBudgetExceeded):
        capped = generate_lattice_points(config, EngineParams(point_budget=40, chunk_size=7))
    np.testing.assert_allclose(capped.points, full.points[:40])


def test_combine_is_linear():
    """combine(c1 + c2) == combine(c1) + combine(c2)."""
    rng = np.random.default_rng(11)
    basis = rng.normal(size=(5, 5))
    for _ in range(20):
        c1 = rng.integers(-10, 11, size=5)
        c2 = rng.integers(-10, 11, size=5)
        np.testing.assert_allclose(
            combine(c1 + c2, basis),
            combine(c1, basis) + combine(c2, basis),
            atol=1e-9,
        )


def test_combine_matches_row_formula():
    basis = np.array([[1.0, 2.0, 0.0], [0.0, 1.0, -1.0], [3.0, 0.0, 1.0]])
    coeff = np.array([2, -1, 1])
    expected = [sum(coeff[i] * basis[i][j] for i in range(3)) for j in range(3)]
    np.testing.assert_allclose(combine(coeff, basis), expected)


def test_combine_rejects_mismatched_shape():
    with pytest.raises(InvalidBasisShape):
        combine([1, 2, 3], np.eye(2))


def test_basis_override_must_match_dimension():
    config = LatticeConfig(dimension=2, sum_limit=1)
    with pytest.raises(InvalidBasisShape):
        generate_lattice_points(config, basis=np.eye(3))


def test_large_dimension_is_capped_quickly():
    config = LatticeConfig(dimension=400, sum_limit=10)
    with pytest.warns(PointBudgetExceeded):
        result = generate_lattice_points(config, EngineParams(point_budget=500))
    assert result.points.shape == (500, 400)
    assert result.count_before_cap == 21 ** 400
    # identity basis: points equal their coefficient vectors
    assert np.all(result.points[:, 0] == -10.0)


def test_time_limit_stops_between_chunks():
    """A tiny time budget stops after the first chunk and flags it."""
    config = LatticeConfig(dimension=6, sum_limit=3)
    params = EngineParams(point_budget=200_000, chunk_size=1, time_limit=1e-9)
    result = generate_lattice_points(config, params)

    assert result.timed_out
    assert result.count == 1
    assert result.count_before_cap == 7 ** 6


def test_zero_budget_returns_empty():
    config = LatticeConfig(dimension=2, sum_limit=1)
    with pytest.warns(PointBudgetExceeded):
        result = generate_lattice_points(config, EngineParams(point_budget=0))
    assert result.points.shape == (0, 2)
    assert result.count_before_cap == 9


def test_huge_budget_is_not_preallocated():
    """A 5e8 budget with an early time stop only stores what was generated."""
    config = LatticeConfig(dimension=6, sum_limit=30)
    params = EngineParams(point_budget=500_000_000, chunk_size=1, time_limit=1e-9)
    with pytest.warns(PointBudgetExceeded):
        result = generate_lattice_points(config, params)

    assert result.timed_out
    assert result.points.shape == (1, 6)
    assert result.points.nbytes == 6 * 8
    assert result.count_before_cap == 61 ** 6
