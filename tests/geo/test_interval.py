import pytest
from cliptree.core.geo.interval import (
    Interval,
    complement_sorted,
    consolidate,
    difference_sorted,
    intersect_sorted,
    sort_intervals,
    union_sorted,
)


def I(a, b):
    return Interval(a, b)


def test_interval_basics():
    r = I(0.25, 0.75)
    assert r.length == pytest.approx(0.5)
    assert not r.is_null()
    assert I(1, 0).is_null()
    assert r.contains(0.5)
    assert not r.contains(0.8)
    assert r.fraction_to_parameter(0.5) == pytest.approx(0.5)


def test_sort_and_consolidate():
    data = [I(0.5, 0.6), I(0, 0.2), I(0.2, 0.3), I(0.55, 0.7), I(1, 0)]
    assert sort_intervals(data)[0] == I(0, 0.2)
    assert consolidate(data) == [I(0, 0.3), I(0.5, 0.7)]


class TestDifference:
    def test_hole_in_the_middle(self):
        assert difference_sorted([I(0, 1)], [I(0.3, 0.6)]) == [
            I(0, 0.3),
            I(0.6, 1),
        ]

    def test_nothing_to_subtract(self):
        assert difference_sorted([I(0, 1)], []) == [I(0, 1)]

    def test_subtract_everything(self):
        assert difference_sorted([I(0.2, 0.4)], [I(0, 1)]) == []

    def test_b_spans_several_a(self):
        a = [I(0, 0.2), I(0.3, 0.5), I(0.6, 1)]
        b = [I(0.1, 0.7)]
        assert difference_sorted(a, b) == [I(0, 0.1), I(0.7, 1)]

    def test_several_b_in_one_a(self):
        a = [I(0, 1)]
        b = [I(0, 0.1), I(0.2, 0.3), I(0.9, 1)]
        assert difference_sorted(a, b) == [I(0.1, 0.2), I(0.3, 0.9)]

    def test_touching_b_leaves_a(self):
        assert difference_sorted([I(0.5, 1)], [I(0, 0.5)]) == [I(0.5, 1)]


def test_intersect():
    a = [I(0, 0.4), I(0.6, 1)]
    b = [I(0.2, 0.7)]
    assert intersect_sorted(a, b) == [I(0.2, 0.4), I(0.6, 0.7)]
    assert intersect_sorted(a, []) == []


def test_union():
    assert union_sorted([I(0, 0.4)], [I(0.3, 0.5), I(0.8, 1)]) == [
        I(0, 0.5),
        I(0.8, 1),
    ]


def test_complement():
    assert complement_sorted([I(0.2, 0.4), I(0.6, 1)]) == [
        I(0, 0.2),
        I(0.4, 0.6),
    ]
    assert complement_sorted([]) == [I(0, 1)]
    assert complement_sorted([I(0, 1)]) == []
