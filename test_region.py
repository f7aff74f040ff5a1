"""
Tests for region truncation, equality and subdivision.
"""

import numpy as np
import pytest

from lodscape.engine import Region
from lodscape.errors import DimensionMismatchError


def _coverage(regions, width, height):
    counts = np.zeros((height, width), dtype=int)
    for r in regions:
        counts[r.y:r.y + r.y_span, r.x:r.x + r.x_span] += 1
    return counts


def test_components_are_truncated():
    region = Region(1.7, 2.2, 3.99, 4.5)
    assert region.as_tuple() == (1, 2, 3, 4)
    assert isinstance(region.x_span, int)


def test_equality_and_hashing():
    a = Region(0, 0, 4, 4)
    b = Region(0.5, 0.9, 4.2, 4.7)
    c = Region(0, 0, 4, 2)

    assert a == b
    assert a != c
    assert hash(a) == hash(b)
    assert len({a, b, c}) == 2


def test_regions_are_immutable():
    region = Region(0, 0, 4, 4)
    with pytest.raises(AttributeError):
        region.x = 2


def test_subdivide_row_major_order():
    children = Region(0, 0, 4, 4).subdivide(2, 2)

    assert [c.as_tuple() for c in children] == [
        (0, 0, 2, 2),
        (2, 0, 2, 2),
        (0, 2, 2, 2),
        (2, 2, 2, 2),
    ]


def test_subdivide_offset_parent():
    children = Region(8, 4, 8, 16).subdivide(2, 4)

    assert len(children) == 8
    assert children[0].as_tuple() == (8, 4, 4, 4)
    assert children[-1].as_tuple() == (12, 16, 4, 4)


def test_subdivide_exact_partition():
    parent = Region(0, 0, 64, 32)
    counts = _coverage(parent.subdivide(8, 4), 64, 32)

    assert (counts == 1).all()


def test_subdivide_truncation_leaves_only_a_far_edge_gap():
    parent = Region(0, 0, 10, 7)
    children = parent.subdivide(3, 2)
    counts = _coverage(children, 10, 7)

    # No overlaps anywhere
    assert counts.max() == 1
    # Spans truncate to floor(10 / 3) = 3 and floor(7 / 2) = 3
    assert all((c.x_span, c.y_span) == (3, 3) for c in children)
    assert [c.x for c in children[:3]] == [0, 3, 6]
    assert [c.y for c in children[::3]] == [0, 3]
    # Everything uncovered lies in the last column/row
    uncovered_y, uncovered_x = np.nonzero(counts == 0)
    assert ((uncovered_x >= 9) | (uncovered_y >= 6)).all()


def test_subdivide_grid_ranks_y_then_x():
    grid = Region(0, 0, 8, 4).subdivide_grid(4, 2)

    assert len(grid) == 2
    assert all(len(row) == 4 for row in grid)
    assert grid[1][3].as_tuple() == (6, 2, 2, 2)


def test_subdivide_rejects_zero_splits():
    with pytest.raises(DimensionMismatchError):
        Region(0, 0, 4, 4).subdivide(0, 1)
