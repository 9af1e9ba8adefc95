import math

import numpy as np
import pytest
from cliptree.clipping.curve_clipper import CurveTreeClipper
from cliptree.clipping.tree import AlternatingClipTreeNode
from cliptree.core.geo.curves import (
    Arc,
    BezierCurve,
    BSplineCurve,
    CurveCollection,
    LineSegment,
    LineString,
)
from cliptree.core.geo.primitives import is_point_in_polygon


@pytest.fixture
def square_tree():
    return AlternatingClipTreeNode.create_for_polygon(
        [(0, 0), (10, 0), (10, 10), (0, 10)]
    )


@pytest.fixture
def c_tree():
    """A "C" open to the right with its notch at 1 < x, 1 < y < 3."""
    return AlternatingClipTreeNode.create_for_polygon(
        [(0, 0), (4, 0), (4, 1), (1, 1), (1, 3), (4, 3), (4, 4), (0, 4)]
    )


@pytest.fixture
def clipper():
    return CurveTreeClipper()


def fractions(intervals):
    return [(r.fraction0, r.fraction1) for r in intervals]


def assert_fractions(intervals, expected):
    got = fractions(intervals)
    assert len(got) == len(expected), got
    for g, e in zip(got, expected):
        assert g == pytest.approx(e)


class TestSegments:
    def test_fully_inside(self, square_tree, clipper):
        inside, outside = [], []
        clipper.append_curve_clip_intervals(
            square_tree, LineSegment((2, 5), (8, 5)), inside, outside
        )
        assert fractions(inside) == [(0.0, 1.0)]
        assert outside == []

    def test_crossing(self, square_tree, clipper):
        seg = LineSegment((-5, 5), (15, 5))
        inside, outside = [], []
        clipper.append_curve_clip_intervals(square_tree, seg, inside, outside)
        assert_fractions(inside, [(0.25, 0.75)])
        assert_fractions(outside, [(0, 0.25), (0.75, 1)])
        assert inside[0].curve is seg
        assert inside[0].start.point == pytest.approx((0, 5, 0))
        assert inside[0].end.point == pytest.approx((10, 5, 0))

    def test_fully_outside(self, square_tree, clipper):
        inside, outside = [], []
        clipper.append_curve_clip_intervals(
            square_tree, LineSegment((20, 0), (30, 0)), inside, outside
        )
        assert inside == []
        assert fractions(outside) == [(0.0, 1.0)]

    def test_across_the_notch(self, c_tree, clipper):
        # x = 3 runs through the lower arm, the notch and the upper arm
        inside, outside = [], []
        clipper.append_curve_clip_intervals(
            c_tree, LineSegment((3, -1), (3, 5)), inside, outside
        )
        assert_fractions(inside, [(1 / 6, 2 / 6), (4 / 6, 5 / 6)])
        assert_fractions(
            outside, [(0, 1 / 6), (2 / 6, 4 / 6), (5 / 6, 1)]
        )

    def test_inside_and_outside_cover_the_curve(self, c_tree, clipper):
        inside, outside = [], []
        clipper.append_curve_clip_intervals(
            c_tree, LineSegment((-1, 2), (5, 3.5)), inside, outside
        )
        pieces = sorted(fractions(inside) + fractions(outside))
        assert pieces[0][0] == 0.0
        assert pieces[-1][1] == 1.0
        for (_, end), (start, _) in zip(pieces, pieces[1:]):
            assert end == pytest.approx(start)

    def test_touching_piece_is_dropped(self, square_tree, clipper):
        # Grazes the corner (0, 10) and nothing else
        inside, outside = [], []
        clipper.append_curve_clip_intervals(
            square_tree, LineSegment((-1, 9), (1, 11)), inside, outside
        )
        assert inside == []
        assert fractions(outside) == [(0.0, 1.0)]

    def test_outside_is_optional(self, c_tree, clipper):
        inside = []
        clipper.append_curve_clip_intervals(
            c_tree, LineSegment((3, -1), (3, 5)), inside
        )
        assert len(inside) == 2


class TestCurves:
    def test_polyline_across_the_notch(self, c_tree, clipper):
        path = LineString([(-1, 2), (2, 2), (2, 5)])
        intervals = clipper.clip_fractions(c_tree, path)
        assert [(r.low, r.high) for r in intervals] == [
            pytest.approx((1 / 6, 1 / 3)),
            pytest.approx((2 / 3, 5 / 6)),
        ]

    def test_polyline_spline_matches_polyline(self, c_tree, clipper):
        spline = BSplineCurve.create_uniform([(-1, 2), (2, 2), (2, 5)], 1)
        intervals = clipper.clip_fractions(c_tree, spline)
        assert [(r.low, r.high) for r in intervals] == [
            pytest.approx((1 / 6, 1 / 3)),
            pytest.approx((2 / 3, 5 / 6)),
        ]

    def test_arc(self, square_tree, clipper):
        # Only the first quadrant of the circle is inside
        inside = []
        clipper.append_curve_clip_intervals(
            square_tree, Arc.create_xy((0, 0), 5), inside
        )
        assert_fractions(inside, [(0, 0.25)])
        s = 5 * math.sqrt(0.5)
        middle = inside[0].curve.fraction_to_point(0.125)
        assert middle == pytest.approx((s, s, 0))

    def test_arc_in_notch(self, c_tree, clipper):
        # A circle inside the notch is entirely outside the polygon
        inside, outside = [], []
        clipper.append_curve_clip_intervals(
            c_tree, Arc.create_xy((2.5, 2), 0.5), inside, outside
        )
        assert inside == []
        assert fractions(outside) == [(0.0, 1.0)]

    def test_bezier(self, square_tree, clipper):
        bezier = BezierCurve([(0, -5), (5, 15), (10, -5)])
        t0 = (1 - math.sqrt(0.5)) / 2
        t1 = (1 + math.sqrt(0.5)) / 2
        inside = []
        clipper.append_curve_clip_intervals(square_tree, bezier, inside)
        assert_fractions(inside, [(t0, t1)])
        assert inside[0].start.point[1] == pytest.approx(0, abs=1e-9)
        assert inside[0].end.point[1] == pytest.approx(0, abs=1e-9)


class TestCollections:
    def test_collection_flattens(self, c_tree, clipper):
        inner = CurveCollection([LineSegment((3, -1), (3, 5))])
        curves = CurveCollection(
            [LineSegment((0.5, 0.5), (0.5, 3.5)), inner]
        )
        inside, outside = [], []
        clipper.append_curve_collection_clip_intervals(
            c_tree, curves, inside, outside
        )
        assert len(inside) == 3
        assert fractions(inside[:1]) == [(0.0, 1.0)]
        assert all(r.curve is inner.children[0] for r in inside[1:])
        assert len(outside) == 3

    def test_node_shortcuts(self, c_tree):
        seg = LineSegment((3, -1), (3, 5))
        inside, outside = [], []
        c_tree.append_curve_clip_intervals(seg, inside, outside)
        assert_fractions(inside, [(1 / 6, 2 / 6), (4 / 6, 5 / 6)])

        inside = []
        c_tree.append_curve_collection_clip_intervals(
            CurveCollection([seg, seg]), inside
        )
        assert len(inside) == 4


class TestTolerance:
    def test_default_comes_from_config(self):
        from cliptree import config as clip_config

        clip_config.get_config().set_fraction_tolerance(0.5)
        assert CurveTreeClipper().fraction_tolerance == 0.5

    def test_short_pieces_are_dropped(self, c_tree):
        seg = LineSegment((3, -1), (3, 5))
        # Both inside pieces have length 1/6
        assert CurveTreeClipper(0.2).clip_fractions(c_tree, seg) == []
        assert len(CurveTreeClipper(0.1).clip_fractions(c_tree, seg)) == 2


class TestRandomPolygons:
    @pytest.mark.parametrize("seed", range(20))
    def test_segments_match_polygon_interior(
        self, seed, star_polygon, boundary_distance, clipper
    ):
        polygon = star_polygon(seed, 8 + seed % 13)
        tree = AlternatingClipTreeNode.create_for_polygon(polygon)
        rng = np.random.default_rng(2000 + seed)
        for _ in range(20):
            start, end = rng.uniform(-1.1, 1.1, (2, 2))
            seg = LineSegment(tuple(start), tuple(end))
            intervals = clipper.clip_fractions(tree, seg)
            ends = [f for r in intervals for f in (r.low, r.high)]
            for f in np.linspace(0.0, 1.0, 41):
                if any(abs(f - e) < 1e-6 for e in ends):
                    continue
                point = seg.fraction_to_point(f)
                if boundary_distance(point, polygon) < 1e-9:
                    continue
                got = any(r.low <= f <= r.high for r in intervals)
                assert got == is_point_in_polygon(point, polygon), (seed, f)

    def test_spiral(self, spiral_polygon, boundary_distance, clipper):
        tree = AlternatingClipTreeNode.create_for_polygon(spiral_polygon)
        # Along the x axis the band is crossed once per half turn
        seg = LineSegment((-6.5, 0.01), (6.5, 0.01))
        intervals = clipper.clip_fractions(tree, seg)
        assert len(intervals) >= 5
        for r in intervals:
            middle = seg.fraction_to_point((r.low + r.high) / 2)
            assert is_point_in_polygon(middle, spiral_polygon)
        for a, b in zip(intervals, intervals[1:]):
            gap = seg.fraction_to_point((a.high + b.low) / 2)
            assert not is_point_in_polygon(gap, spiral_polygon)
