import pytest
from cliptree.core.geo.intersect import (
    check_polygon_self_intersection,
    find_polygon_self_intersection,
)


def test_simple_polygons():
    square = [(0, 0), (10, 0), (10, 10), (0, 10)]
    assert not check_polygon_self_intersection(square)
    c_shape = [
        (0, 0), (4, 0), (4, 1), (1, 1), (1, 3), (4, 3), (4, 4), (0, 4)
    ]
    assert not check_polygon_self_intersection(c_shape)


def test_triangle_is_always_simple():
    assert find_polygon_self_intersection([(0, 0), (1, 0), (0, 1)]) is None


def test_bow_tie():
    bow_tie = [(0, 0), (2, 2), (2, 0), (0, 2)]
    hit = find_polygon_self_intersection(bow_tie)
    assert hit is not None
    i, j, point = hit
    assert (i, j) == (0, 2)
    assert point == pytest.approx((1, 1))
    assert check_polygon_self_intersection(bow_tie)


def test_touching_vertex():
    # Vertex (2, 0) lies on the edge from (4, 0) back to (0, 0)
    touching = [(0, 0), (2, 2), (2, 0), (3, 1), (4, 0)]
    assert check_polygon_self_intersection(touching)
