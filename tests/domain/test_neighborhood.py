"""Tests for complexity_drift.domain.neighborhood module."""

from __future__ import annotations

import numpy as np
import pytest

from complexity_drift.domain.grid import Grid
from complexity_drift.domain.neighborhood import build_template

RADIUS_4_OFFSETS = [
    (0, 0),
    (-1, 0), (0, -1), (0, 1), (1, 0),
    (-1, -1), (-1, 1), (1, -1), (1, 1),
    (-2, 0), (0, -2), (0, 2), (2, 0),
    (-2, -1), (-2, 1), (-1, -2), (-1, 2), (1, -2), (1, 2), (2, -1), (2, 1),
    (-2, -2), (-2, 2), (2, -2), (2, 2),
    (-3, 0), (0, -3), (0, 3), (3, 0),
    (-3, -1), (-3, 1), (-1, -3), (-1, 3), (1, -3), (1, 3), (3, -1), (3, 1),
    (-3, -2), (-3, 2), (-2, -3), (-2, 3), (2, -3), (2, 3), (3, -2), (3, 2),
    (-4, 0), (0, -4), (0, 4), (4, 0),
]  # fmt: skip


class TestBuildTemplate:
    def test_radius_4_matches_literal_ordering(self) -> None:
        template = build_template(4)
        assert template.pairs() == RADIUS_4_OFFSETS
        assert len(template) == 49

    def test_offsets_within_radius_and_unique(self) -> None:
        template = build_template(4)
        pairs = template.pairs()
        assert len(pairs) == len(set(pairs))
        assert all(dx * dx + dy * dy <= 16 for dx, dy in pairs)

    def test_sorted_by_distance_then_dx_then_dy(self) -> None:
        offsets = build_template(6).offsets
        keys = [(o.distance, o.dx, o.dy) for o in offsets]
        assert keys == sorted(keys)

    def test_radius_zero_is_center_only(self) -> None:
        assert build_template(0).pairs() == [(0, 0)]

    def test_negative_radius_raises(self) -> None:
        with pytest.raises(ValueError, match="radius"):
            build_template(-1)

    def test_cached_per_radius(self) -> None:
        assert build_template(3) is build_template(3)

    def test_index_arrays_are_read_only(self) -> None:
        template = build_template(2)
        with pytest.raises(ValueError):
            template.dx[0] = 5
        np.testing.assert_array_equal(template.dx, [dx for dx, _ in template.pairs()])
        np.testing.assert_array_equal(template.dy, [dy for _, dy in template.pairs()])


class TestNearestFree:
    def test_returns_center_when_free(self) -> None:
        assert build_template(1).nearest_free(Grid.empty(4), (2, 2)) == (2, 2)

    def test_follows_template_order(self) -> None:
        grid = Grid.empty(4)
        grid.set((2, 2), 255)
        grid.set((1, 2), 255)
        # (0,0) and (-1,0) taken; next offset is (0,-1)
        assert build_template(1).nearest_free(grid, (2, 2)) == (2, 1)

    def test_wraps_around_edges(self) -> None:
        grid = Grid.empty(3)
        grid.set((0, 0), 255)
        assert build_template(1).nearest_free(grid, (0, 0)) == (2, 0)

    def test_none_when_neighborhood_full(self) -> None:
        grid = Grid(2, np.full((2, 2), 255, dtype=np.uint8))
        assert build_template(1).nearest_free(grid, (0, 0)) is None
