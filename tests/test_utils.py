import json
import sys
from pathlib import Path

import numpy as np
import pytest

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from lattice_engine import (
    EngineParams,
    InvalidBasisShape,
    InvalidBasisValue,
    InvalidSumLimit,
    LatticeConfig,
    PointBudgetExceeded,
    generate_lattice_points,
    utils,
)


def test_save_and_load_point_set(tmp_path):
    config = LatticeConfig(dimension=3, sum_limit=4)
    with pytest.warns(PointBudgetExceeded):
        point_set = generate_lattice_points(config, EngineParams(point_budget=50))

    path = tmp_path / "out" / "lattice.npz"
    utils.save_point_set(path, point_set, basis=config.basis)
    loaded, extras = utils.load_point_set(path)

    np.testing.assert_array_equal(loaded.points, point_set.points)
    assert loaded.count_before_cap == 729
    assert loaded.point_budget == 50
    assert loaded.meta["dimension"] == 3
    np.testing.assert_array_equal(extras["basis"], np.eye(3))
    assert "dual" not in extras


def test_save_refuses_overwrite(tmp_path):
    point_set = generate_lattice_points(LatticeConfig(sum_limit=1))
    path = tmp_path / "lattice.npz"
    utils.save_point_set(path, point_set)
    with pytest.raises(FileExistsError):
        utils.save_point_set(path, point_set, overwrite=False)


def test_huge_count_survives_round_trip(tmp_path):
    config = LatticeConfig(dimension=100, sum_limit=2)
    with pytest.warns(PointBudgetExceeded):
        point_set = generate_lattice_points(config, EngineParams(point_budget=3))
    path = tmp_path / "big.npz"
    utils.save_point_set(path, point_set)
    loaded, _ = utils.load_point_set(path)
    assert loaded.count_before_cap == 5 ** 100


def test_config_from_json(tmp_path):
    path = tmp_path / "params.json"
    path.write_text(json.dumps({
        "basis": [[2, 0], [0, 1]],
        "sum_limit": 1,
        "engine": {"point_budget": 9, "seed": 4},
        "verbose": True,
    }))
    config, params = utils.config_from_params(utils.load_params(path))
    assert config.dimension == 2
    assert config.sum_limit == 1
    assert params.point_budget == 9
    assert params.seed == 4
    assert params.verbose


def test_config_from_toml(tmp_path):
    path = tmp_path / "params.toml"
    path.write_text('dimension = 3\nsum_limit = 2\n\n[engine]\nmax_corner_dimension = 8\n')
    config, params = utils.config_from_params(utils.load_params(path))
    np.testing.assert_array_equal(config.basis, np.eye(3))
    assert params.max_corner_dimension == 8


def test_unknown_engine_key_rejected():
    with pytest.raises(ValueError):
        utils.config_from_params({"engine": {"budget": 3}})


def test_unsupported_suffix(tmp_path):
    path = tmp_path / "params.yaml"
    path.write_text("dimension: 2")
    with pytest.raises(ValueError):
        utils.load_params(path)


def test_config_validation():
    with pytest.raises(InvalidBasisShape):
        LatticeConfig(dimension=3, basis=np.eye(2))
    with pytest.raises(InvalidBasisShape):
        LatticeConfig(dimension=2, basis=[[1, 0], [0]])
    with pytest.raises(InvalidBasisValue):
        LatticeConfig(dimension=2, basis=[[1, np.nan], [0, 1]])
    with pytest.raises(InvalidBasisValue):
        LatticeConfig(dimension=2).with_basis_cell(0, 0, "abc")
    with pytest.raises(InvalidSumLimit):
        LatticeConfig(sum_limit=-1)
    with pytest.raises(InvalidSumLimit):
        LatticeConfig(sum_limit="two")
    with pytest.raises(InvalidSumLimit):
        LatticeConfig().with_sum_limit(1.5)
    with pytest.raises(ValueError):
        EngineParams(point_budget=-5)


def test_config_basis_is_read_only():
    config = LatticeConfig(dimension=2)
    with pytest.raises(ValueError):
        config.basis[0, 0] = 5.0
    edited = config.with_basis_cell(0, 0, 5)
    assert edited.basis[0, 0] == 5.0
    assert not edited.same_as(config)
    assert config.with_sum_limit(5).same_as(config)
