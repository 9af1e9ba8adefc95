from enum import Enum
from typing import TYPE_CHECKING, List, Sequence

from ..core.geo.interval import Interval

if TYPE_CHECKING:
    from ..core.geo.curves import CurvePrimitive
    from .union import RegionUnion


class ClipPlaneContainment(Enum):
    """Where a point set lies relative to a set of clip planes."""

    STRONGLY_INSIDE = 1
    AMBIGUOUS = 2
    STRONGLY_OUTSIDE = 3


class ClipStatus(Enum):
    """What must still be done to clip a piece of geometry."""

    CLIP_REQUIRED = 0
    TRIVIAL_REJECT = 1
    TRIVIAL_ACCEPT = 2


def select_intervals_01(
    curve: "CurvePrimitive", fractions: Sequence[float], clipper
) -> List[Interval]:
    """
    Splits [0, 1] at the given break fractions and keeps each piece whose
    midpoint the clipper accepts. `clipper` is anything with an
    `is_point_on_or_inside(point)` method.

    Adjacent accepted pieces are returned separately; callers that need
    maximal intervals consolidate them.
    """
    breaks = sorted(
        [0.0, 1.0] + [f for f in fractions if 0.0 < f < 1.0]
    )
    result: List[Interval] = []
    f0 = breaks[0]
    for f1 in breaks[1:]:
        if f1 > f0:
            mid = 0.5 * (f0 + f1)
            if clipper.is_point_on_or_inside(curve.fraction_to_point(mid)):
                result.append(Interval(f0, f1))
        f0 = f1
    return result


def collect_clipped_curves(
    curve: "CurvePrimitive", clipper
) -> List["CurvePrimitive"]:
    """Partial copies of the curve for each interval inside the clipper."""
    result = []
    for interval in curve.clip_intervals(clipper):
        if interval.high != interval.low:
            partial = curve.clone_partial(interval.low, interval.high)
            if partial is not None:
                result.append(partial)
    return result


def point_set_single_clip_status(
    points: Sequence[Sequence[float]],
    union: "RegionUnion",
    tolerance: float,
) -> ClipStatus:
    """
    Fast pre-filter: decides whether a point set (usually a polygon) is
    entirely inside one member region, entirely outside every member
    region because of a single plane, or needs real clipping.
    """
    if not union.regions:
        return ClipStatus.TRIVIAL_ACCEPT
    for region in union.regions:
        all_outside_single_plane = False
        any_outside = False
        for plane in region.planes:
            num_inside = 0
            num_outside = 0
            limit = plane.distance - tolerance
            for point in points:
                if plane.dot_normal(point) > limit:
                    num_inside += 1
                else:
                    num_outside += 1
            if num_outside:
                any_outside = True
            if num_inside == 0:
                all_outside_single_plane = True
                break
        if not any_outside:
            return ClipStatus.TRIVIAL_ACCEPT
        if not all_outside_single_plane:
            return ClipStatus.CLIP_REQUIRED
    return ClipStatus.TRIVIAL_REJECT
