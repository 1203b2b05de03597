import sys
from pathlib import Path

import numpy as np

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from lattice_engine import project_to_3d, view_points


def test_truncates_high_dimension():
    np.testing.assert_array_equal(project_to_3d([1, 2, 3, 4, 5]), [1.0, 2.0, 3.0])


def test_pads_two_dimensions():
    np.testing.assert_array_equal(project_to_3d([7, 9]), [7.0, 9.0, 0.0])


def test_stack_projection():
    points = np.arange(12, dtype=float).reshape(3, 4)
    out = project_to_3d(points)
    assert out.shape == (3, 3)
    np.testing.assert_array_equal(out, points[:, :3])


def test_view_points_by_dimension():
    two = np.ones((4, 2))
    three = np.ones((4, 3))
    five = np.ones((4, 5))
    assert view_points(two, 2).shape == (4, 2)
    assert view_points(three, 3).shape == (4, 3)
    assert view_points(five, 5).shape == (4, 3)
