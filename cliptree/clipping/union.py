from typing import Iterator, List, Optional, Sequence

from ..core.geo.curves import Arc, BezierCurve
from ..core.geo.interval import Interval
from ..core.geo.primitives import Point3D
from ..core.geo.tolerance import SMALL_METRIC_DISTANCE
from ..core.matrix import Matrix
from .convex import ConvexRegion
from .utils import ClipPlaneContainment


class RegionUnion:
    """
    A union of convex regions. A point is inside when any member region
    accepts it. Members may overlap; results are never merged.
    """

    def __init__(self, regions: Optional[Sequence[ConvexRegion]] = None):
        self.regions: List[ConvexRegion] = list(regions or [])

    def __repr__(self) -> str:
        return f"RegionUnion({self.regions})"

    def __len__(self) -> int:
        return len(self.regions)

    def __iter__(self) -> Iterator[ConvexRegion]:
        return iter(self.regions)

    def add_region(self, region: Optional[ConvexRegion]) -> None:
        if region is not None:
            self.regions.append(region)

    def clone(self) -> "RegionUnion":
        return RegionUnion([r.clone() for r in self.regions])

    def is_almost_equal(self, other: "RegionUnion") -> bool:
        if len(self.regions) != len(other.regions):
            return False
        return all(
            a.is_almost_equal(b) for a, b in zip(self.regions, other.regions)
        )

    def set_invisible(self, invisible: bool) -> None:
        for region in self.regions:
            region.set_invisible(invisible)

    def transform_in_place(self, matrix: Matrix) -> bool:
        """Transforms every member region, or none of them."""
        transformed = [r.clone() for r in self.regions]
        for region in transformed:
            if not region.transform_in_place(matrix):
                return False
        self.regions = transformed
        return True

    def is_point_inside(self, point: Sequence[float]) -> bool:
        return any(r.is_point_inside(point) for r in self.regions)

    def is_point_on_or_inside(
        self, point: Sequence[float], tolerance: float = SMALL_METRIC_DISTANCE
    ) -> bool:
        return any(
            r.is_point_on_or_inside(point, tolerance) for r in self.regions
        )

    def is_sphere_inside(
        self, center: Sequence[float], radius: float
    ) -> bool:
        return any(r.is_sphere_inside(center, radius) for r in self.regions)

    def is_any_point_in_or_on_segment(
        self, point_a: Sequence[float], point_b: Sequence[float]
    ) -> bool:
        return any(
            r.clip_segment_interval(0.0, 1.0, point_a, point_b) is not None
            for r in self.regions
        )

    def polygon_clip(
        self, points: Sequence[Sequence[float]]
    ) -> List[List[Point3D]]:
        """One clipped loop per member region that keeps any of it."""
        output: List[List[Point3D]] = []
        for region in self.regions:
            loop = region.polygon_clip(points)
            if loop:
                output.append(loop)
        return output

    def clip_segment_intervals(
        self,
        f0: float,
        f1: float,
        point_a: Sequence[float],
        point_b: Sequence[float],
    ) -> List[Interval]:
        """Each member's accepted interval, in member order."""
        result: List[Interval] = []
        for region in self.regions:
            interval = region.clip_segment_interval(f0, f1, point_a, point_b)
            if interval is not None:
                result.append(interval)
        return result

    def clip_arc_intervals(self, arc: Arc) -> List[Interval]:
        result: List[Interval] = []
        for region in self.regions:
            result.extend(region.clip_arc_intervals(arc))
        return result

    def clip_bezier_intervals(self, bezier: BezierCurve) -> List[Interval]:
        result: List[Interval] = []
        for region in self.regions:
            result.extend(region.clip_bezier_intervals(bezier))
        return result

    def classify_point_containment(
        self, points: Sequence[Sequence[float]], on_is_outside: bool = False
    ) -> ClipPlaneContainment:
        for region in self.regions:
            status = region.classify_point_containment(points, on_is_outside)
            if status != ClipPlaneContainment.STRONGLY_OUTSIDE:
                return status
        return ClipPlaneContainment.STRONGLY_OUTSIDE
