import logging
from itertools import combinations
from typing import Iterator, List, Optional, Sequence, Tuple

from ..core.geo.analysis import polygon_signed_area_xy
from ..core.geo.curves import Arc, BezierCurve
from ..core.geo.interval import Interval
from ..core.geo.primitives import Point3D, as_point3, subtract
from ..core.geo.tolerance import (
    CLASSIFY_TOLERANCE,
    FRACTION_TOLERANCE,
    HUGE_FRACTION,
    SMALL_METRIC_DISTANCE,
)
from ..core.matrix import Matrix
from .plane import (
    ClipPlane,
    conditional_divide_fraction,
    plane_plane_plane_intersection,
)
from .utils import ClipPlaneContainment, select_intervals_01

logger = logging.getLogger(__name__)


class ConvexRegion:
    """
    The intersection of a list of half spaces. A region with no planes is
    all of space. Plane order only affects how early tests can stop.
    """

    def __init__(self, planes: Optional[Sequence[ClipPlane]] = None):
        self.planes: List[ClipPlane] = list(planes or [])

    @classmethod
    def from_planes(cls, planes: Sequence[Optional[ClipPlane]]):
        region = cls()
        for plane in planes:
            region.add_plane(plane)
        return region

    @classmethod
    def xy_box(
        cls, x0: float, y0: float, x1: float, y1: float
    ) -> "ConvexRegion":
        """
        The region x0 <= x <= x1, y0 <= y <= y1, built from interior
        planes. A box with x0 > x1 or y0 > y1 is empty.
        """
        return cls.from_planes(
            [
                ClipPlane.from_normal_and_distance(
                    (-1.0, 0.0, 0.0), -x1, interior=True
                ),
                ClipPlane.from_normal_and_distance(
                    (1.0, 0.0, 0.0), x0, interior=True
                ),
                ClipPlane.from_normal_and_distance(
                    (0.0, -1.0, 0.0), -y1, interior=True
                ),
                ClipPlane.from_normal_and_distance(
                    (0.0, 1.0, 0.0), y0, interior=True
                ),
            ]
        )

    @classmethod
    def from_xy_polyline(
        cls,
        points: Sequence[Sequence[float]],
        interior: Optional[Sequence[bool]] = None,
        left_is_inside: bool = True,
    ) -> "ConvexRegion":
        """
        One vertical plane per polyline edge. `interior[i]` sets both the
        interior and invisible flag of the plane for edge i. The caller
        ensures the polyline is convex.
        """
        region = cls()
        for i in range(len(points) - 1):
            p0 = as_point3(points[i])
            edge = subtract(as_point3(points[i + 1]), p0)
            perp = (-edge[1], edge[0], 0.0)
            if not left_is_inside:
                perp = (edge[1], -edge[0], 0.0)
            flag = bool(interior[i]) if interior else False
            region.add_plane(
                ClipPlane.from_normal_and_point(perp, p0, flag, flag)
            )
        return region

    @classmethod
    def from_convex_polygon_xy(
        cls, points: Sequence[Sequence[float]]
    ) -> "ConvexRegion":
        """
        The prism above and below a convex XY polygon, in either winding.
        """
        closed = list(points) + [points[0]] if points else []
        left_is_inside = polygon_signed_area_xy(points) >= 0.0
        return cls.from_xy_polyline(closed, None, left_is_inside)

    def __repr__(self) -> str:
        return f"ConvexRegion({self.planes})"

    def __len__(self) -> int:
        return len(self.planes)

    def __iter__(self) -> Iterator[ClipPlane]:
        return iter(self.planes)

    def add_plane(self, plane: Optional[ClipPlane]) -> None:
        if plane is not None:
            self.planes.append(plane)

    def clone(self) -> "ConvexRegion":
        return ConvexRegion([p.clone() for p in self.planes])

    def is_almost_equal(self, other: "ConvexRegion") -> bool:
        if len(self.planes) != len(other.planes):
            return False
        return all(
            a.is_almost_equal(b) for a, b in zip(self.planes, other.planes)
        )

    def negate_all_planes(self) -> None:
        for plane in self.planes:
            plane.negate_in_place()

    def set_invisible(self, invisible: bool) -> None:
        for plane in self.planes:
            plane.set_invisible(invisible)

    def transform_in_place(self, matrix: Matrix) -> bool:
        """
        Transforms every plane, or none of them when any plane fails.
        """
        transformed = [p.clone() for p in self.planes]
        for plane in transformed:
            if not plane.transform_in_place(matrix):
                return False
        self.planes = transformed
        return True

    def is_point_inside(self, point: Sequence[float]) -> bool:
        return all(plane.is_point_inside(point) for plane in self.planes)

    def is_point_on_or_inside(
        self, point: Sequence[float], tolerance: float = SMALL_METRIC_DISTANCE
    ) -> bool:
        """
        Interior planes are seams between merged pieces and always use
        the absolute tolerance, so points on a seam pass from both sides.
        """
        interior_tolerance = abs(tolerance)
        for plane in self.planes:
            tol = interior_tolerance if plane.interior else tolerance
            if not plane.is_point_on_or_inside(point, tol):
                return False
        return True

    def is_sphere_inside(
        self, center: Sequence[float], radius: float
    ) -> bool:
        """
        True if the sphere reaches into the region on every plane's side.
        """
        r1 = abs(radius) + SMALL_METRIC_DISTANCE
        return all(
            plane.is_point_on_or_inside(center, r1) for plane in self.planes
        )

    def clip_points_on_or_inside(
        self, points: Sequence[Sequence[float]]
    ) -> Tuple[List[Sequence[float]], List[Sequence[float]]]:
        """Splits points into (inside or on, outside) with zero tolerance."""
        inside: List[Sequence[float]] = []
        outside: List[Sequence[float]] = []
        for point in points:
            if self.is_point_on_or_inside(point, 0.0):
                inside.append(point)
            else:
                outside.append(point)
        return inside, outside

    def clip_convex_polygon_in_place(
        self, points: List[Point3D], tolerance: float = FRACTION_TOLERANCE
    ) -> None:
        for plane in self.planes:
            plane.clip_convex_polygon_in_place(points, tolerance)
            if len(points) < 3:
                return

    def polygon_clip(
        self,
        points: Sequence[Sequence[float]],
        plane_to_skip: Optional[ClipPlane] = None,
    ) -> List[Point3D]:
        """
        Clipped copy of a polygon. A non-convex input may come back with
        doubled-back edges along the planes, which is still correct under
        parity rules.
        """
        output = [as_point3(p) for p in points]
        for plane in self.planes:
            if plane is plane_to_skip:
                continue
            if not output:
                break
            plane.clip_convex_polygon_in_place(output)
        return output

    def clip_segment_interval(
        self,
        f0: float,
        f1: float,
        point_a: Sequence[float],
        point_b: Sequence[float],
    ) -> Optional[Interval]:
        """
        The part of [f0, f1] along the line A -> B that is inside every
        plane, or None. f0 must not exceed f1.
        """
        if f1 < f0:
            return None
        for plane in self.planes:
            h_a = -plane.altitude(point_a)
            h_b = -plane.altitude(point_b)
            fraction = conditional_divide_fraction(-h_a, h_b - h_a)
            if fraction is None or h_a == h_b:
                # Parallel: all in or all out.
                if h_a > 0.0:
                    return None
            elif h_b > h_a:
                # Heading out.
                if fraction < f0:
                    return None
                f1 = min(f1, fraction)
            else:
                if fraction > f1:
                    return None
                f0 = max(f0, fraction)
        if f1 >= f0:
            return Interval(f0, f1)
        return None

    def clip_segment_intervals(
        self,
        f0: float,
        f1: float,
        point_a: Sequence[float],
        point_b: Sequence[float],
    ) -> List[Interval]:
        interval = self.clip_segment_interval(f0, f1, point_a, point_b)
        return [interval] if interval is not None else []

    def clip_unbounded_segment(
        self, point_a: Sequence[float], point_b: Sequence[float]
    ) -> Optional[Interval]:
        """
        The inside part of the infinite line through A and B. Unbounded
        ends come back as +/- HUGE_FRACTION.
        """
        return self.clip_segment_interval(
            -HUGE_FRACTION, HUGE_FRACTION, point_a, point_b
        )

    def clip_arc_intervals(self, arc: Arc) -> List[Interval]:
        breaks: List[float] = []
        for plane in self.planes:
            for radians in plane.arc_intersection_radians(arc):
                breaks.append(
                    arc.radians_to_positive_periodic_fraction(radians)
                )
        return select_intervals_01(arc, breaks, self)

    def clip_bezier_intervals(self, bezier: BezierCurve) -> List[Interval]:
        breaks: List[float] = []
        for plane in self.planes:
            breaks.extend(plane.bezier_crossing_fractions(bezier))
        return select_intervals_01(bezier, breaks, self)

    def has_intersection_with_ray(
        self, origin: Sequence[float], direction: Sequence[float]
    ) -> Optional[Interval]:
        """
        The range of t >= 0 for which origin + t * direction is inside the
        region, or None when the ray misses it. An unbounded end is
        HUGE_FRACTION.
        """
        t0 = 0.0
        t1 = HUGE_FRACTION
        for plane in self.planes:
            v_d = plane.velocity(direction)
            v_n = plane.altitude(origin)
            if v_d == 0.0:
                if v_n < 0.0:
                    return None
            else:
                fraction = -v_n / v_d
                if v_d < 0.0:
                    t1 = min(t1, fraction)
                else:
                    t0 = max(t0, fraction)
        if t1 < t0:
            return None
        return Interval(t0, t1)

    def classify_point_containment(
        self, points: Sequence[Sequence[float]], on_is_outside: bool = False
    ) -> ClipPlaneContainment:
        """
        Fast pre-filter for a polygon. STRONGLY_OUTSIDE only when a single
        plane has every point outside; a polygon that is outside across a
        corner reads as AMBIGUOUS.
        """
        on_tolerance = (
            CLASSIFY_TOLERANCE if on_is_outside else -CLASSIFY_TOLERANCE
        )
        all_inside = True
        for plane in self.planes:
            tol = CLASSIFY_TOLERANCE if plane.interior else on_tolerance
            num_outside = 0
            for point in points:
                if plane.altitude(point) < tol:
                    num_outside += 1
                    all_inside = False
            if points and num_outside == len(points):
                return ClipPlaneContainment.STRONGLY_OUTSIDE
        if all_inside:
            return ClipPlaneContainment.STRONGLY_INSIDE
        return ClipPlaneContainment.AMBIGUOUS

    def compute_corner_points(
        self, tolerance: float = SMALL_METRIC_DISTANCE
    ) -> List[Point3D]:
        """
        Every point where three of the planes meet and that lies inside
        all the other planes.
        """
        corners: List[Point3D] = []
        for a, b, c in combinations(self.planes, 3):
            point = plane_plane_plane_intersection(a, b, c)
            if point is None:
                continue
            if self.is_point_on_or_inside(point, tolerance):
                corners.append(point)
        logger.debug(
            f"Found {len(corners)} corners for {len(self.planes)} planes"
        )
        return corners
