import inspect

import pytest
from cliptree.clipping.convex import ConvexRegion
from cliptree.clipping.plane import ClipPlane
from cliptree.clipping.utils import ClipPlaneContainment
from cliptree.core.geo.analysis import polygon_signed_area_xy
from cliptree.core.geo.curves import Arc, BezierCurve
from cliptree.core.geo.tolerance import FRACTION_TOLERANCE, HUGE_FRACTION
from cliptree.core.matrix import Matrix


@pytest.fixture
def box():
    """0 <= x <= 2, 0 <= y <= 1, built from interior planes."""
    return ConvexRegion.xy_box(0, 0, 2, 1)


@pytest.fixture
def square():
    """The prism over the square [0, 10] x [0, 10]."""
    return ConvexRegion.from_convex_polygon_xy(
        [(0, 0), (10, 0), (10, 10), (0, 10)]
    )


class TestConstruction:
    def test_xy_box(self, box):
        assert len(box) == 4
        assert all(plane.interior for plane in box)
        assert box.is_point_on_or_inside((1, 0.5))
        assert not box.is_point_on_or_inside((3, 0.5))

    def test_empty_region_is_everything(self):
        region = ConvexRegion()
        assert region.is_point_on_or_inside((1e6, -1e6, 5))
        assert region.is_point_inside((0, 0, 0))

    def test_from_planes_skips_none(self):
        region = ConvexRegion.from_planes(
            [ClipPlane.from_normal_and_distance((0, 0, 0), 1), None]
        )
        assert len(region) == 0

    def test_polygon_winding_does_not_matter(self, square):
        cw = ConvexRegion.from_convex_polygon_xy(
            [(0, 10), (10, 10), (10, 0), (0, 0)]
        )
        for point in [(5, 5), (-1, 5), (5, 11), (9.9, 0.1)]:
            assert cw.is_point_on_or_inside(
                point
            ) == square.is_point_on_or_inside(point)

    def test_from_xy_polyline_flags(self):
        region = ConvexRegion.from_xy_polyline(
            [(0, 0), (1, 0), (1, 1)], interior=[True, False]
        )
        assert len(region) == 2
        assert region.planes[0].interior and region.planes[0].invisible
        assert not region.planes[1].interior
        # Left of both edges
        assert region.is_point_on_or_inside((0.5, 0.5))
        right = ConvexRegion.from_xy_polyline(
            [(0, 0), (1, 0)], left_is_inside=False
        )
        assert right.is_point_on_or_inside((0.5, -0.5))
        assert not right.is_point_on_or_inside((0.5, 0.5))

    def test_clone_and_equality(self, square):
        copy = square.clone()
        assert copy.is_almost_equal(square)
        copy.negate_all_planes()
        assert not copy.is_almost_equal(square)
        assert not ConvexRegion().is_almost_equal(square)


class TestPointContainment:
    def test_interior_planes_ignore_negative_tolerance(self, box, square):
        # Seam planes accept boundary points even when the caller shrinks
        assert box.is_point_on_or_inside((2, 0.5), -0.1)
        assert not square.is_point_on_or_inside((10, 5), -0.1)
        assert square.is_point_on_or_inside((10, 5))

    def test_strict_inside(self, square):
        assert square.is_point_inside((5, 5))
        assert not square.is_point_inside((10, 5))

    def test_sphere(self, square):
        assert square.is_sphere_inside((5, 5), 1)
        assert square.is_sphere_inside((-0.5, 5), 1)
        assert not square.is_sphere_inside((-2, 5), 1)

    def test_clip_points(self, square):
        inside, outside = square.clip_points_on_or_inside(
            [(1, 1), (10, 10), (11, 1)]
        )
        assert inside == [(1, 1), (10, 10)]
        assert outside == [(11, 1)]


class TestPolygonClip:
    def test_clip_to_box(self):
        region = ConvexRegion.from_convex_polygon_xy(
            [(1, 1), (3, 1), (3, 3), (1, 3)]
        )
        clipped = region.polygon_clip([(0, 0), (4, 0), (4, 4), (0, 4)])
        assert len(clipped) == 4
        assert abs(polygon_signed_area_xy(clipped)) == pytest.approx(4.0)

    def test_skip_plane(self):
        region = ConvexRegion.from_convex_polygon_xy(
            [(1, 1), (3, 1), (3, 3), (1, 3)]
        )
        skipped = region.planes[0]
        clipped = region.polygon_clip(
            [(0, 0), (4, 0), (4, 4), (0, 4)], plane_to_skip=skipped
        )
        # Without the y >= 1 plane the strip reaches down to y = 0
        assert abs(polygon_signed_area_xy(clipped)) == pytest.approx(6.0)

    def test_disjoint_polygon(self, square):
        assert square.polygon_clip([(20, 20), (21, 20), (21, 21)]) == []

    def test_convex_clip_in_place(self, square):
        points = [(-5, -5, 0), (5, -5, 0), (5, 5, 0), (-5, 5, 0)]
        square.clip_convex_polygon_in_place(points)
        assert abs(polygon_signed_area_xy(points)) == pytest.approx(25.0)

    def test_convex_clip_default_tolerance(self):
        tolerance = inspect.signature(
            ConvexRegion.clip_convex_polygon_in_place
        ).parameters["tolerance"]
        assert tolerance.default == FRACTION_TOLERANCE


class TestSegmentClip:
    def test_crossing_segment(self, box):
        r = box.clip_segment_interval(0, 1, (-1, 0.5), (3, 0.5))
        assert (r.low, r.high) == pytest.approx((0.25, 0.75))
        intervals = box.clip_segment_intervals(0, 1, (3, 0.5), (-1, 0.5))
        assert len(intervals) == 1
        assert (intervals[0].low, intervals[0].high) == pytest.approx(
            (0.25, 0.75)
        )

    def test_missing_segment(self, box):
        assert box.clip_segment_interval(0, 1, (-1, 2), (3, 2)) is None
        assert box.clip_segment_interval(0, 1, (3, 0.5), (5, 0.5)) is None
        assert box.clip_segment_intervals(0, 1, (-1, 2), (3, 2)) == []

    def test_unbounded(self, box):
        r = box.clip_unbounded_segment((0, 0.5), (1, 0.5))
        assert (r.low, r.high) == pytest.approx((0, 2))

        r = ConvexRegion().clip_unbounded_segment((0, 0), (1, 0))
        assert (r.low, r.high) == (-HUGE_FRACTION, HUGE_FRACTION)


class TestCurveClip:
    def test_arc_against_half_plane(self):
        region = ConvexRegion(
            [ClipPlane.from_normal_and_distance((1, 0, 0), 0)]
        )
        intervals = region.clip_arc_intervals(Arc.create_xy((0, 0), 1))
        assert [(r.low, r.high) for r in intervals] == [
            pytest.approx((0, 0.25)),
            pytest.approx((0.75, 1)),
        ]

    def test_arc_inside(self, square):
        intervals = square.clip_arc_intervals(Arc.create_xy((5, 5), 1))
        assert len(intervals) == 1
        assert (intervals[0].low, intervals[0].high) == (0, 1)

    def test_bezier(self, square):
        bezier = BezierCurve([(-5, 5), (5, 5), (15, 5)])
        intervals = square.clip_bezier_intervals(bezier)
        assert len(intervals) == 1
        assert (intervals[0].low, intervals[0].high) == pytest.approx(
            (0.25, 0.75)
        )


class TestQueries:
    def test_ray(self, square):
        r = square.has_intersection_with_ray((-5, 5), (1, 0))
        assert (r.low, r.high) == pytest.approx((5, 15))

        assert square.has_intersection_with_ray((-5, 20), (1, 0)) is None
        assert square.has_intersection_with_ray((-5, 5), (-1, 0)) is None

        # Starting inside, the range begins at the origin
        r = square.has_intersection_with_ray((5, 5), (0, 1))
        assert (r.low, r.high) == pytest.approx((0, 5))

        up = square.has_intersection_with_ray((5, 5, 0), (0, 0, 1))
        assert (up.low, up.high) == (0.0, HUGE_FRACTION)

    def test_classify(self, square):
        assert (
            square.classify_point_containment([(1, 1), (9, 9)])
            == ClipPlaneContainment.STRONGLY_INSIDE
        )
        assert (
            square.classify_point_containment([(11, 1), (12, 9)])
            == ClipPlaneContainment.STRONGLY_OUTSIDE
        )
        assert (
            square.classify_point_containment([(5, 5), (12, 5)])
            == ClipPlaneContainment.AMBIGUOUS
        )
        # Outside across a corner is not a single-plane rejection
        assert (
            square.classify_point_containment([(11, 5), (5, 11)])
            == ClipPlaneContainment.AMBIGUOUS
        )

    def test_classify_boundary(self, square):
        on_edge = [(10, 2), (10, 8)]
        assert (
            square.classify_point_containment(on_edge)
            == ClipPlaneContainment.STRONGLY_INSIDE
        )
        assert (
            square.classify_point_containment(on_edge, on_is_outside=True)
            == ClipPlaneContainment.STRONGLY_OUTSIDE
        )

    def test_accepted_points_are_never_strongly_outside(self, square):
        points = [(x + 0.5, y + 0.25) for x in range(10) for y in range(10)]
        assert all(square.is_point_on_or_inside(p) for p in points)
        for i in range(0, len(points), 7):
            status = square.classify_point_containment(points[i : i + 7])
            assert status != ClipPlaneContainment.STRONGLY_OUTSIDE

    def test_corner_points(self, square):
        region = square.clone()
        region.add_plane(ClipPlane.from_normal_and_distance((0, 0, 1), 0))
        region.add_plane(ClipPlane.from_normal_and_distance((0, 0, -1), -1))
        corners = region.compute_corner_points()
        assert len(corners) == 8
        assert sorted(corners) == [
            pytest.approx(c)
            for c in sorted(
                (x, y, z) for x in (0, 10) for y in (0, 10) for z in (0, 1)
            )
        ]

    def test_prism_has_no_corners(self, square):
        assert square.compute_corner_points() == []


class TestTransform:
    def test_translate(self, square):
        assert square.transform_in_place(Matrix.translation(100, 0))
        assert square.is_point_on_or_inside((105, 5))
        assert not square.is_point_on_or_inside((5, 5))

    def test_singular_matrix_changes_nothing(self, square):
        before = square.clone()
        assert square.transform_in_place(Matrix.scale(0, 1)) is False
        assert square.is_almost_equal(before)
