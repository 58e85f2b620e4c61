"""
Test SpatialIndexAdapter radius and nearest queries on both backends.
"""

import sys
import numpy as np
import pytest
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from petri.spatial_queries import SpatialIndexAdapter, points_within, nearest_within
from petri.spatial import normalize, bounce_off_walls, jitter_heading


BACKENDS = pytest.mark.parametrize("backend", [False, True], ids=["linear", "ckdtree"])


def _adapter(points, use_ckdtree):
    adapter = SpatialIndexAdapter(use_ckdtree=use_ckdtree)
    adapter.build(np.asarray(points, dtype=np.float64))
    return adapter


class TestAdapter:

    @BACKENDS
    def test_within_is_strict(self, backend):
        adapter = _adapter([[0.0, 0.0], [3.0, 4.0], [1.0, 0.0]], backend)

        rows, distances = adapter.within(np.array([0.0, 0.0]), 5.0)

        # (3, 4) sits exactly on the radius and is excluded
        assert rows.tolist() == [0, 2]
        assert distances.tolist() == [0.0, 1.0]

    @BACKENDS
    def test_nearest_ties_go_to_lowest_row(self, backend):
        adapter = _adapter([[5.0, 0.0], [0.0, 5.0], [-5.0, 0.0]], backend)

        row, dist = adapter.nearest_within(np.array([0.0, 0.0]), 10.0)

        assert row == 0
        assert dist == 5.0

    @BACKENDS
    def test_nearest_none_when_empty(self, backend):
        adapter = _adapter(np.empty((0, 2)), backend)

        row, dist = adapter.nearest_within(np.array([0.0, 0.0]), 10.0)

        assert row is None
        assert dist == float('inf')
        assert len(adapter) == 0

    def test_backends_agree_on_random_points(self):
        rng = np.random.default_rng(3)
        points = rng.uniform(0.0, 500.0, size=(400, 2))
        linear = _adapter(points, False)
        tree = _adapter(points, True)

        for query in rng.uniform(0.0, 500.0, size=(50, 2)):
            rows_a, dist_a = linear.within(query, 40.0)
            rows_b, dist_b = tree.within(query, 40.0)
            assert rows_a.tolist() == rows_b.tolist()
            assert np.array_equal(dist_a, dist_b)

        print("  [OK] Linear and cKDTree backends agree on 50 queries")

    def test_build_rejects_bad_shape(self):
        adapter = SpatialIndexAdapter()
        with pytest.raises(ValueError):
            adapter.build(np.zeros((4, 3)))

    @BACKENDS
    def test_rebuild_replaces_snapshot(self, backend):
        adapter = _adapter([[0.0, 0.0]], backend)
        adapter.build(np.array([[100.0, 100.0]]))

        row, _ = adapter.nearest_within(np.array([0.0, 0.0]), 10.0)
        assert row is None


def test_module_level_helpers():
    points = np.array([[1.0, 1.0], [2.0, 2.0]])

    rows, _ = points_within(points, np.array([0.0, 0.0]), 2.0)
    assert rows.tolist() == [0]

    row, dist = nearest_within(points, np.array([3.0, 3.0]), 2.0)
    assert row == 1
    assert dist == pytest.approx(np.sqrt(2.0))


class TestGeometry:

    def test_normalize_zero_vector(self):
        unit, length = normalize(np.zeros(2))
        assert length == 0.0
        assert unit.tolist() == [1.0, 0.0]

    def test_bounce_clamps_both_axes(self):
        position = np.array([-3.0, 710.0])
        velocity = np.array([-1.0, 1.0])

        bounce_off_walls(position, velocity, 1080.0, 700.0)

        assert position.tolist() == [0.0, 700.0]
        assert velocity.tolist() == [1.0, -1.0]

    def test_jitter_returns_unit_heading(self):
        heading = jitter_heading(np.array([3.0, 4.0]), 0.2)
        assert np.linalg.norm(heading) == pytest.approx(1.0)

