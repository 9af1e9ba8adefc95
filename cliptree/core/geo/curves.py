"""
Parametric curves that can be trimmed by the clipping regions.

Every curve primitive maps a fraction in [0, 1] to a point and can ask a
clip region (a ClipPlane, ConvexRegion or RegionUnion) for the fraction
intervals that lie inside it. The region does the geometric work; the curve
chooses which of the region's kernels applies to it (segment, arc or
Bezier) and maps local fractions back to its own parameterization.
"""
from __future__ import annotations
import bisect
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    Union,
)

import numpy as np

from .interval import Interval, consolidate
from .primitives import Point3D, add, as_point3, interpolate, scale
from .tolerance import SMALL_ANGLE_RADIANS

if TYPE_CHECKING:
    from ...clipping.plane import ClipPlane
    from ...clipping.convex import ConvexRegion
    from ...clipping.union import RegionUnion

    ClipRegion = Union[ClipPlane, ConvexRegion, RegionUnion]


@dataclass(frozen=True)
class CurveLocation:
    """A point on a curve together with its fraction parameter."""

    curve: "CurvePrimitive"
    fraction: float
    point: Point3D


@dataclass(frozen=True)
class CurveInterval:
    """One clipped piece of a curve, from `start` to `end`."""

    start: CurveLocation
    end: CurveLocation

    @property
    def curve(self) -> "CurvePrimitive":
        return self.start.curve

    @property
    def fraction0(self) -> float:
        return self.start.fraction

    @property
    def fraction1(self) -> float:
        return self.end.fraction

    @classmethod
    def from_fractions(
        cls, curve: "CurvePrimitive", f0: float, f1: float
    ) -> "CurveInterval":
        return cls(
            CurveLocation(curve, f0, curve.fraction_to_point(f0)),
            CurveLocation(curve, f1, curve.fraction_to_point(f1)),
        )


class CurvePrimitive(ABC):
    """Base for all clippable curves."""

    @abstractmethod
    def fraction_to_point(self, fraction: float) -> Point3D:
        pass

    @abstractmethod
    def clip_intervals(self, region: "ClipRegion") -> List[Interval]:
        """
        Returns the fraction intervals of this curve accepted by the
        region, sorted by their low end.
        """
        pass

    @abstractmethod
    def clone_partial(
        self, fraction0: float, fraction1: float
    ) -> Optional["CurvePrimitive"]:
        """The portion of the curve between two fractions."""
        pass

    @property
    def start_point(self) -> Point3D:
        return self.fraction_to_point(0.0)

    @property
    def end_point(self) -> Point3D:
        return self.fraction_to_point(1.0)


class LineSegment(CurvePrimitive):
    """A straight segment from point0 (fraction 0) to point1 (fraction 1)."""

    def __init__(self, point0: Sequence[float], point1: Sequence[float]):
        self.point0: Point3D = as_point3(point0)
        self.point1: Point3D = as_point3(point1)

    def __repr__(self) -> str:
        return f"LineSegment({self.point0}, {self.point1})"

    def fraction_to_point(self, fraction: float) -> Point3D:
        return interpolate(self.point0, fraction, self.point1)

    def clip_intervals(self, region: "ClipRegion") -> List[Interval]:
        result = region.clip_segment_intervals(
            0.0, 1.0, self.point0, self.point1
        )
        return sorted(result, key=lambda r: r.low)

    def clone_partial(
        self, fraction0: float, fraction1: float
    ) -> "LineSegment":
        return LineSegment(
            self.fraction_to_point(fraction0),
            self.fraction_to_point(fraction1),
        )


class LineString(CurvePrimitive):
    """
    A polyline. Fraction i / (n - 1) is the i-th vertex, so every segment
    takes an equal share of the parameter range.
    """

    def __init__(self, points: Sequence[Sequence[float]]):
        self.points: List[Point3D] = [as_point3(p) for p in points]

    def __repr__(self) -> str:
        return f"LineString({self.points})"

    def __len__(self) -> int:
        return len(self.points)

    def _segment_count(self) -> int:
        return len(self.points) - 1

    def fraction_to_point(self, fraction: float) -> Point3D:
        n = self._segment_count()
        if n < 1:
            return self.points[0]
        scaled = fraction * n
        i = min(max(int(math.floor(scaled)), 0), n - 1)
        return interpolate(self.points[i], scaled - i, self.points[i + 1])

    def clip_intervals(self, region: "ClipRegion") -> List[Interval]:
        n = self._segment_count()
        if n < 1:
            return []
        df = 1.0 / n
        result: List[Interval] = []
        for i in range(n):
            local = region.clip_segment_intervals(
                0.0, 1.0, self.points[i], self.points[i + 1]
            )
            for r in local:
                result.append(Interval((i + r.low) * df, (i + r.high) * df))
        return sorted(result, key=lambda r: r.low)

    def clone_partial(
        self, fraction0: float, fraction1: float
    ) -> Optional["LineString"]:
        n = self._segment_count()
        if n < 1:
            return None
        if fraction1 < fraction0:
            reversed_part = self.clone_partial(fraction1, fraction0)
            if reversed_part is not None:
                reversed_part.points.reverse()
            return reversed_part
        points = [self.fraction_to_point(fraction0)]
        for i in range(1, n):
            if fraction0 * n < i < fraction1 * n:
                points.append(self.points[i])
        points.append(self.fraction_to_point(fraction1))
        return LineString(points)


def _adjust_radians_0_to_2pi(radians: float) -> float:
    two_pi = 2.0 * math.pi
    result = math.fmod(radians, two_pi)
    if result < 0.0:
        result += two_pi
    return result


def _is_almost_equal_radians_periodic(a: float, b: float) -> bool:
    delta = abs(math.remainder(a - b, 2.0 * math.pi))
    return delta <= SMALL_ANGLE_RADIANS


class Arc(CurvePrimitive):
    """
    An elliptic (or circular) arc

        point(theta) = center + cos(theta) * vector0 + sin(theta) * vector90

    for theta running from start_radians to start_radians + sweep_radians.
    vector0 and vector90 need not be perpendicular or of equal length.
    """

    def __init__(
        self,
        center: Sequence[float],
        vector0: Sequence[float],
        vector90: Sequence[float],
        start_radians: float = 0.0,
        sweep_radians: float = 2.0 * math.pi,
    ):
        self.center: Point3D = as_point3(center)
        self.vector0: Point3D = as_point3(vector0)
        self.vector90: Point3D = as_point3(vector90)
        self.start_radians = float(start_radians)
        self.sweep_radians = float(sweep_radians)

    @classmethod
    def create_xy(
        cls,
        center: Sequence[float],
        radius: float,
        start_degrees: float = 0.0,
        end_degrees: float = 360.0,
    ) -> "Arc":
        """A circular arc in a plane parallel to XY."""
        return cls(
            center,
            (radius, 0.0, 0.0),
            (0.0, radius, 0.0),
            math.radians(start_degrees),
            math.radians(end_degrees - start_degrees),
        )

    def __repr__(self) -> str:
        return (
            f"Arc(center={self.center}, vector0={self.vector0}, "
            f"vector90={self.vector90}, start={self.start_radians}, "
            f"sweep={self.sweep_radians})"
        )

    @property
    def end_radians(self) -> float:
        return self.start_radians + self.sweep_radians

    def is_full_circle(self) -> bool:
        return abs(abs(self.sweep_radians) - 2.0 * math.pi) <= 1e-12

    def radians_to_point(self, radians: float) -> Point3D:
        c = math.cos(radians)
        s = math.sin(radians)
        return add(
            self.center,
            add(scale(self.vector0, c), scale(self.vector90, s)),
        )

    def fraction_to_radians(self, fraction: float) -> float:
        return self.start_radians + fraction * self.sweep_radians

    def fraction_to_point(self, fraction: float) -> Point3D:
        return self.radians_to_point(self.fraction_to_radians(fraction))

    def radians_to_positive_periodic_fraction(self, radians: float) -> float:
        """
        Maps an angle to the arc's fraction, measuring forward from the
        start in the sweep direction. Angles on the start or end map to
        exactly 0 or 1.
        """
        if _is_almost_equal_radians_periodic(radians, self.start_radians):
            return 0.0
        if _is_almost_equal_radians_periodic(radians, self.end_radians):
            return 1.0
        sweep = self.sweep_radians
        if sweep == 0.0:
            return 0.0
        delta = radians - self.start_radians
        if sweep > 0:
            return _adjust_radians_0_to_2pi(delta) / sweep
        return _adjust_radians_0_to_2pi(-delta) / -sweep

    def clip_intervals(self, region: "ClipRegion") -> List[Interval]:
        return region.clip_arc_intervals(self)

    def clone_partial(self, fraction0: float, fraction1: float) -> "Arc":
        r0 = self.fraction_to_radians(fraction0)
        r1 = self.fraction_to_radians(fraction1)
        return Arc(
            self.center, self.vector0, self.vector90, r0, r1 - r0
        )


def _de_casteljau(
    control_points: np.ndarray, t: float
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Evaluates a Bezier curve and splits it at t.

    Returns (point, left control points, right control points).
    """
    work = np.array(control_points, dtype=float)
    n = len(work)
    left = [work[0].copy()]
    right = [work[-1].copy()]
    for _ in range(1, n):
        work = (1.0 - t) * work[:-1] + t * work[1:]
        left.append(work[0].copy())
        right.append(work[-1].copy())
    return work[0], np.array(left), np.array(right[::-1])


class BezierCurve(CurvePrimitive):
    """A single-span Bezier curve of any degree."""

    def __init__(self, control_points: Sequence[Sequence[float]]):
        if len(control_points) < 2:
            raise ValueError("A Bezier curve needs at least 2 poles.")
        self.control_points: np.ndarray = np.array(
            [as_point3(p) for p in control_points], dtype=float
        )

    def __repr__(self) -> str:
        return f"BezierCurve({self.control_points.tolist()})"

    @property
    def degree(self) -> int:
        return len(self.control_points) - 1

    def fraction_to_point(self, fraction: float) -> Point3D:
        point, _, _ = _de_casteljau(self.control_points, fraction)
        return (float(point[0]), float(point[1]), float(point[2]))

    def clip_intervals(self, region: "ClipRegion") -> List[Interval]:
        return region.clip_bezier_intervals(self)

    def clone_partial(
        self, fraction0: float, fraction1: float
    ) -> "BezierCurve":
        if fraction1 < fraction0:
            part = self.clone_partial(fraction1, fraction0)
            return BezierCurve(part.control_points[::-1])
        _, _, right = _de_casteljau(self.control_points, fraction0)
        if fraction0 >= 1.0:
            return BezierCurve(right)
        local = (fraction1 - fraction0) / (1.0 - fraction0)
        _, left, _ = _de_casteljau(right, local)
        return BezierCurve(left)


class BSplineCurve(CurvePrimitive):
    """
    A non-rational B-spline with a clamped knot vector. Fraction 0 and 1
    map to the first and last active knot.
    """

    def __init__(
        self,
        control_points: Sequence[Sequence[float]],
        degree: int,
        knots: Sequence[float],
    ):
        self.control_points: np.ndarray = np.array(
            [as_point3(p) for p in control_points], dtype=float
        )
        self.degree = int(degree)
        self.knots: List[float] = [float(k) for k in knots]
        n = len(self.control_points)
        if self.degree < 1 or n < self.degree + 1:
            raise ValueError("Need at least degree + 1 control points.")
        if len(self.knots) != n + self.degree + 1:
            raise ValueError(
                f"Expected {n + self.degree + 1} knots, got {len(knots)}."
            )

    @classmethod
    def create_uniform(
        cls, control_points: Sequence[Sequence[float]], degree: int
    ) -> "BSplineCurve":
        """Clamped, uniformly spaced interior knots on [0, 1]."""
        n = len(control_points)
        num_spans = n - degree
        if num_spans < 1:
            raise ValueError("Need at least degree + 1 control points.")
        interior = [i / num_spans for i in range(1, num_spans)]
        knots = [0.0] * (degree + 1) + interior + [1.0] * (degree + 1)
        return cls(control_points, degree, knots)

    def __repr__(self) -> str:
        return (
            f"BSplineCurve(degree={self.degree}, knots={self.knots}, "
            f"poles={self.control_points.tolist()})"
        )

    @property
    def knot_start(self) -> float:
        return self.knots[self.degree]

    @property
    def knot_end(self) -> float:
        return self.knots[len(self.control_points)]

    def fraction_to_knot(self, fraction: float) -> float:
        return self.knot_start + fraction * (self.knot_end - self.knot_start)

    def knot_to_fraction(self, u: float) -> float:
        span = self.knot_end - self.knot_start
        return (u - self.knot_start) / span if span else 0.0

    def _find_span(self, u: float) -> int:
        n = len(self.control_points) - 1
        if u >= self.knots[n + 1]:
            return n
        if u <= self.knots[self.degree]:
            return self.degree
        return bisect.bisect_right(self.knots, u) - 1

    def fraction_to_point(self, fraction: float) -> Point3D:
        u = self.fraction_to_knot(fraction)
        p = self.degree
        k = self._find_span(u)
        d = [self.control_points[j + k - p].copy() for j in range(p + 1)]
        for r in range(1, p + 1):
            for j in range(p, r - 1, -1):
                i = j + k - p
                denom = self.knots[i + p - r + 1] - self.knots[i]
                alpha = (u - self.knots[i]) / denom if denom else 0.0
                d[j] = (1.0 - alpha) * d[j - 1] + alpha * d[j]
        point = d[p]
        return (float(point[0]), float(point[1]), float(point[2]))

    @staticmethod
    def _insert_knot(
        knots: List[float], poles: np.ndarray, degree: int, u: float
    ) -> Tuple[List[float], np.ndarray]:
        """Boehm single knot insertion."""
        p = degree
        n = len(poles) - 1
        k = bisect.bisect_right(knots, u) - 1
        k = min(k, n)
        new_poles = np.zeros((len(poles) + 1, poles.shape[1]))
        for i in range(len(new_poles)):
            if i <= k - p:
                new_poles[i] = poles[i]
            elif i >= k + 1:
                new_poles[i] = poles[i - 1]
            else:
                denom = knots[i + p] - knots[i]
                a = (u - knots[i]) / denom if denom else 0.0
                new_poles[i] = (1.0 - a) * poles[i - 1] + a * poles[i]
        new_knots = knots[: k + 1] + [u] + knots[k + 1:]
        return new_knots, new_poles

    def _split(
        self, u: float
    ) -> Tuple[Optional["BSplineCurve"], Optional["BSplineCurve"]]:
        """Splits at knot value u into (left, right) clamped curves."""
        if u <= self.knot_start:
            return None, self
        if u >= self.knot_end:
            return self, None
        p = self.degree
        knots = list(self.knots)
        poles = self.control_points
        multiplicity = knots.count(u)
        for _ in range(max(0, p - multiplicity)):
            knots, poles = self._insert_knot(knots, poles, p, u)
        r = knots.index(u)
        left = BSplineCurve(poles[:r], p, knots[: r + p] + [u])
        right = BSplineCurve(poles[r - 1:], p, [u] + knots[r:])
        return left, right

    def bezier_spans(self) -> List[Tuple[float, float, BezierCurve]]:
        """
        Decomposes the curve into Bezier spans. Returns
        (fraction0, fraction1, bezier) for each non-empty knot span.
        """
        interior = sorted(
            {
                k
                for k in self.knots
                if self.knot_start < k < self.knot_end
            }
        )
        result: List[Tuple[float, float, BezierCurve]] = []
        remainder: Optional[BSplineCurve] = self
        u0 = self.knot_start
        for u in interior:
            if remainder is None:
                break
            left, remainder = remainder._split(u)
            if left is not None:
                result.append(
                    (
                        self.knot_to_fraction(u0),
                        self.knot_to_fraction(u),
                        BezierCurve(left.control_points),
                    )
                )
            u0 = u
        if remainder is not None:
            result.append(
                (
                    self.knot_to_fraction(u0),
                    1.0,
                    BezierCurve(remainder.control_points),
                )
            )
        return result

    def clip_intervals(self, region: "ClipRegion") -> List[Interval]:
        result: List[Interval] = []
        for f0, f1, bezier in self.bezier_spans():
            for r in region.clip_bezier_intervals(bezier):
                result.append(
                    Interval(f0 + r.low * (f1 - f0), f0 + r.high * (f1 - f0))
                )
        # Spans meet at shared knots; rejoin pieces split only there.
        return consolidate(result)

    def clone_partial(
        self, fraction0: float, fraction1: float
    ) -> Optional["BSplineCurve"]:
        if fraction1 <= fraction0:
            return None
        _, right = self._split(self.fraction_to_knot(fraction0))
        if right is None:
            return None
        left, _ = right._split(self.fraction_to_knot(fraction1))
        return left


CurveMember = Union[CurvePrimitive, "CurveCollection"]


class CurveCollection:
    """An ordered group of curves and nested curve collections."""

    def __init__(self, children: Optional[Sequence[CurveMember]] = None):
        self.children: List[CurveMember] = list(children or [])

    def __iter__(self) -> Iterator[CurveMember]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)

    def add(self, child: CurveMember) -> None:
        self.children.append(child)

    def iter_primitives(self) -> Iterator[CurvePrimitive]:
        """All primitives, depth first, in order."""
        for child in self.children:
            if isinstance(child, CurvePrimitive):
                yield child
            elif isinstance(child, CurveCollection):
                yield from child.iter_primitives()
