"""
A single clip plane: the half space on the side of an inward unit normal.

    altitude(p) = dot(p, normal) - distance

Positive altitude is inside, zero is on the plane, negative is outside.
"""
import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..core.geo.curves import Arc, BezierCurve
from ..core.geo.interval import Interval
from ..core.geo.primitives import (
    Point3D,
    Vector3D,
    as_point3,
    cross,
    dot,
    interpolate,
    negate,
    normalize,
    rotate_vector_around_axis,
    scale,
    subtract,
)
from ..core.geo.roots import (
    bernstein_roots_01,
    unit_circle_line_intersections,
)
from ..core.geo.tolerance import FRACTION_TOLERANCE, SMALL_METRIC_DISTANCE
from ..core.matrix import Matrix
from .utils import select_intervals_01

logger = logging.getLogger(__name__)

# Denominators this much smaller than the numerator count as parallel.
LARGE_FRACTION_RESULT = 1.0e10


def conditional_divide_fraction(
    numerator: float, denominator: float
) -> Optional[float]:
    """numerator / denominator, or None when the ratio would be huge."""
    if abs(denominator) * LARGE_FRACTION_RESULT > abs(numerator):
        return numerator / denominator
    return None


class ClipPlane:
    def __init__(
        self,
        normal: Sequence[float],
        distance: float,
        invisible: bool = False,
        interior: bool = False,
    ):
        """
        Use the from_* constructors for unnormalized input; this
        initializer stores the normal as given.
        """
        self.normal: Vector3D = as_point3(normal)
        self.distance = float(distance)
        self.invisible = invisible
        self.interior = interior

    @classmethod
    def from_normal_and_distance(
        cls,
        normal: Sequence[float],
        distance: float,
        invisible: bool = False,
        interior: bool = False,
    ) -> Optional["ClipPlane"]:
        unit = normalize(as_point3(normal))
        if unit is None:
            return None
        return cls(unit, distance, invisible, interior)

    @classmethod
    def from_normal_and_point(
        cls,
        normal: Sequence[float],
        point: Sequence[float],
        invisible: bool = False,
        interior: bool = False,
    ) -> Optional["ClipPlane"]:
        unit = normalize(as_point3(normal))
        if unit is None:
            return None
        return cls(unit, dot(unit, as_point3(point)), invisible, interior)

    @classmethod
    def from_edge_and_up_vector(
        cls,
        point0: Sequence[float],
        point1: Sequence[float],
        up: Sequence[float],
        tilt_radians: float = 0.0,
    ) -> Optional["ClipPlane"]:
        """
        A wall through the edge point0 -> point1, containing the up vector
        and optionally tilted around the edge. Looking down the up vector,
        the inside is to the right of the edge.
        """
        p0 = as_point3(point0)
        edge = subtract(as_point3(point1), p0)
        normal = normalize(cross(as_point3(up), edge))
        if normal is None:
            return None
        if abs(tilt_radians) > 1.0e-12:
            tilted = rotate_vector_around_axis(normal, edge, tilt_radians)
            if tilted is not None:
                normal = tilted
        return cls.from_normal_and_point(negate(normal), p0)

    @classmethod
    def from_edge_xy(
        cls, point0: Sequence[float], point1: Sequence[float]
    ) -> Optional["ClipPlane"]:
        """A vertical plane through the edge with the inside to the left."""
        normal = (point0[1] - point1[1], point1[0] - point0[0], 0.0)
        return cls.from_normal_and_point(normal, as_point3(point0))

    def __repr__(self) -> str:
        flags = ""
        if self.interior:
            flags += ", interior"
        if self.invisible:
            flags += ", invisible"
        return f"ClipPlane({self.normal}, {self.distance}{flags})"

    def clone(self) -> "ClipPlane":
        return ClipPlane(
            self.normal, self.distance, self.invisible, self.interior
        )

    def clone_negated(self) -> "ClipPlane":
        plane = self.clone()
        plane.negate_in_place()
        return plane

    def is_almost_equal(
        self, other: "ClipPlane", tolerance: float = SMALL_METRIC_DISTANCE
    ) -> bool:
        return (
            abs(self.distance - other.distance) <= tolerance
            and all(
                abs(a - b) <= tolerance
                for a, b in zip(self.normal, other.normal)
            )
            and self.interior == other.interior
            and self.invisible == other.invisible
        )

    def set_invisible(self, invisible: bool) -> None:
        self.invisible = invisible

    def set_flags(self, invisible: bool, interior: bool) -> None:
        self.invisible = invisible
        self.interior = interior

    @property
    def origin(self) -> Point3D:
        """The point of the plane closest to the coordinate origin."""
        return scale(self.normal, self.distance)

    def altitude(self, point: Sequence[float]) -> float:
        return self.dot_normal(point) - self.distance

    def velocity(self, vector: Sequence[float]) -> float:
        return self.dot_normal(vector)

    def dot_normal(self, v: Sequence[float]) -> float:
        z = v[2] if len(v) > 2 else 0.0
        n = self.normal
        return v[0] * n[0] + v[1] * n[1] + z * n[2]

    def is_point_on(
        self, point: Sequence[float], tolerance: float = SMALL_METRIC_DISTANCE
    ) -> bool:
        return abs(self.altitude(point)) <= tolerance

    def is_point_inside(
        self, point: Sequence[float], tolerance: float = 0.0
    ) -> bool:
        return self.altitude(point) + tolerance > 0.0

    def is_point_on_or_inside(
        self, point: Sequence[float], tolerance: float = 0.0
    ) -> bool:
        return self.altitude(point) + tolerance >= 0.0

    def negate_in_place(self) -> None:
        """Swaps inside and outside."""
        self.normal = negate(self.normal)
        self.distance = -self.distance

    def offset_distance(self, offset: float) -> None:
        """Moves the plane inward by offset."""
        self.distance += offset

    def transform_in_place(self, matrix: Matrix) -> bool:
        """
        Maps the plane along with space. The point on the plane goes
        through the full matrix; the normal goes through the inverse
        transpose of its linear part.

        Returns False and leaves the plane unchanged for a singular matrix.
        """
        try:
            normal_map = matrix.inverse_transpose_linear()
        except np.linalg.LinAlgError:
            logger.warning("Cannot transform clip plane: singular matrix")
            return False
        new_origin = matrix.transform_point(self.origin)
        mapped = normal_map @ np.array(self.normal)
        new_normal = normalize(tuple(float(c) for c in mapped))
        if new_normal is None:
            return False
        self.normal = new_normal
        self.distance = dot(new_normal, new_origin)
        return True

    def clip_convex_polygon_in_place(
        self,
        points: List[Point3D],
        tolerance: float = FRACTION_TOLERANCE,
    ) -> None:
        """
        Clips a convex polygon (edges wrap from last to first) to the
        inside of the plane. The list is emptied when fewer than 3
        vertices survive and left as is when nothing is cut.
        """
        work: List[Point3D] = []
        num_negative = 0
        if len(points) > 2:
            p0 = points[-1]
            a0 = self.altitude(p0)
            for p1 in points:
                a1 = self.altitude(p1)
                if a1 < 0.0:
                    num_negative += 1
                if a0 * a1 < 0.0:
                    f = -a0 / (a1 - a0)
                    # A crossing at the kept endpoint would duplicate it.
                    if not (f > 1.0 - tolerance and a1 >= 0.0):
                        work.append(interpolate(p0, f, p1))
                if a1 >= 0.0:
                    work.append(p1)
                p0 = p1
                a0 = a1
        if len(work) <= 2:
            points.clear()
        elif num_negative > 0:
            points[:] = work

    def polygon_crossings(self, points: Sequence[Point3D]) -> List[Point3D]:
        """
        Points where the closed polygon crosses the plane, including
        vertices exactly on it.
        """
        crossings: List[Point3D] = []
        if len(points) < 2:
            return crossings
        p0 = points[-1]
        a0 = self.altitude(p0)
        for p1 in points:
            a1 = self.altitude(p1)
            if a0 * a1 < 0.0:
                crossings.append(interpolate(p0, -a0 / (a1 - a0), p1))
            if a1 == 0.0:
                crossings.append(p1)
            p0 = p1
            a0 = a1
        return crossings

    def split_convex_polygon(
        self,
        points: Sequence[Point3D],
        tolerance: float = FRACTION_TOLERANCE,
    ) -> Tuple[List[Point3D], List[Point3D], Optional[Interval]]:
        """
        Splits a convex polygon into its inside and outside parts.

        Returns (inside, outside, altitude_range); the range is None for
        fewer than 3 points.
        """
        inside: List[Point3D] = []
        outside: List[Point3D] = []
        if len(points) <= 2:
            return inside, outside, None
        p0 = points[-1]
        a0 = self.altitude(p0)
        low = high = a0
        for p1 in points:
            a1 = self.altitude(p1)
            low = min(low, a1)
            high = max(high, a1)
            near_zero = False
            if a0 * a1 < 0.0:
                f = -a0 / (a1 - a0)
                if f > 1.0 - tolerance and a1 >= 0.0:
                    near_zero = True
                else:
                    crossing = interpolate(p0, f, p1)
                    inside.append(crossing)
                    outside.append(crossing)
            if a1 >= 0.0 or near_zero:
                inside.append(p1)
            if a1 <= 0.0 or near_zero:
                outside.append(p1)
            p0 = p1
            a0 = a1
        return inside, outside, Interval(low, high)

    def bounded_segment_intersection(
        self, point_a: Sequence[float], point_b: Sequence[float]
    ) -> Optional[float]:
        """
        Fraction along A -> B where the segment meets the plane. None when
        both ends are strictly on one side or both are exactly on it.
        """
        h0 = self.altitude(point_a)
        h1 = self.altitude(point_b)
        if h0 * h1 > 0.0:
            return None
        if h0 == 0.0 and h1 == 0.0:
            return None
        return -h0 / (h1 - h0)

    def clip_segment_interval(
        self,
        f0: float,
        f1: float,
        point_a: Sequence[float],
        point_b: Sequence[float],
    ) -> Optional[Interval]:
        """
        The part of the fraction interval [f0, f1] (measured along the
        line A -> B) on the inside of the plane, or None.
        """
        if f1 < f0:
            return None
        h0 = -self.altitude(point_a)
        h1 = -self.altitude(point_b)
        delta = h1 - h0
        f = conditional_divide_fraction(-h0, delta)
        if f is None:
            # Parallel: all or nothing.
            if h0 <= 0.0:
                return Interval(f0, f1)
            return None
        if delta > 0.0:
            # Heading out.
            f1 = min(f1, f)
        else:
            f0 = max(f0, f)
        if f1 < f0:
            return None
        return Interval(f0, f1)

    def clip_segment_intervals(
        self,
        f0: float,
        f1: float,
        point_a: Sequence[float],
        point_b: Sequence[float],
    ) -> List[Interval]:
        interval = self.clip_segment_interval(f0, f1, point_a, point_b)
        return [interval] if interval is not None else []

    def arc_intersection_radians(self, arc: Arc) -> List[float]:
        """
        Angles where the full ellipse of the arc meets the plane,
        ignoring the arc's sweep limits.
        """
        alpha = self.altitude(arc.center)
        beta = self.velocity(arc.vector0)
        gamma = self.velocity(arc.vector90)
        return unit_circle_line_intersections(alpha, beta, gamma)

    def clip_arc_intervals(self, arc: Arc) -> List[Interval]:
        breaks = [
            arc.radians_to_positive_periodic_fraction(r)
            for r in self.arc_intersection_radians(arc)
        ]
        return select_intervals_01(arc, breaks, self)

    def bezier_crossing_fractions(self, bezier: BezierCurve) -> List[float]:
        """
        Fractions where a Bezier curve crosses the plane. The altitude
        along the curve is itself a polynomial whose Bernstein
        coefficients are the altitudes of the control points.
        """
        altitudes = [self.altitude(p) for p in bezier.control_points]
        return bernstein_roots_01(altitudes)

    def clip_bezier_intervals(self, bezier: BezierCurve) -> List[Interval]:
        return select_intervals_01(
            bezier, self.bezier_crossing_fractions(bezier), self
        )


def plane_plane_plane_intersection(
    a: ClipPlane, b: ClipPlane, c: ClipPlane
) -> Optional[Point3D]:
    """The common point of three planes, or None when they are dependent."""
    normals = np.array([a.normal, b.normal, c.normal])
    distances = np.array([a.distance, b.distance, c.distance])
    if abs(np.linalg.det(normals)) < 1.0e-12:
        return None
    try:
        solution = np.linalg.solve(normals, distances)
    except np.linalg.LinAlgError:
        return None
    if not np.all(np.isfinite(solution)):
        return None
    return (float(solution[0]), float(solution[1]), float(solution[2]))
