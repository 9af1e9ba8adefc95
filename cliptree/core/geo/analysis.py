from typing import List, Sequence

from .primitives import (
    Point3D,
    as_point3,
    cross_product_xy,
    is_almost_equal_point,
)
from .tolerance import SMALL_METRIC_DISTANCE


def polygon_signed_area_xy(points: Sequence[Sequence[float]]) -> float:
    """
    Shoelace area of the polygon as projected to the XY plane. Positive for
    counter-clockwise order in a Y-up system. The closing edge is implied.
    """
    n = len(points)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        p1 = points[i]
        p2 = points[(i + 1) % n]
        area += (p1[0] * p2[1]) - (p2[0] * p1[1])
    return 0.5 * area


def get_polygon_winding_order(points: Sequence[Sequence[float]]) -> str:
    """
    Determines winding order ('cw', 'ccw', 'unknown') of a polygon.
    """
    if len(points) < 3:
        return "unknown"
    area = polygon_signed_area_xy(points)
    if abs(area) < 1e-9:
        return "unknown"
    elif area > 0:
        return "ccw"
    else:
        return "cw"


def index_of_max_x(points: Sequence[Sequence[float]]) -> int:
    """
    Index of the vertex with the largest x. The first one wins on ties, so
    the vertex is always on the convex hull.
    """
    k = 0
    for i in range(1, len(points)):
        if points[i][0] > points[k][0]:
            k = i
    return k


def normalize_polygon(
    points: Sequence[Sequence[float]],
    tolerance: float = SMALL_METRIC_DISTANCE,
) -> List[Point3D]:
    """
    Copies the polygon as 3D points, dropping consecutive duplicates and a
    closure point that repeats the first vertex.
    """
    result: List[Point3D] = []
    for p in points:
        p3 = as_point3(p)
        if result and is_almost_equal_point(result[-1], p3, tolerance):
            continue
        result.append(p3)
    while len(result) > 1 and is_almost_equal_point(
        result[0], result[-1], tolerance
    ):
        result.pop()
    return result


def convex_hull_indices_xy(points: Sequence[Sequence[float]]) -> List[int]:
    """
    Indices of the strict convex hull of the points in the XY plane,
    counter-clockwise. Vertices that lie on a hull edge are left out.
    Fewer than 3 indices come back when the points are all collinear.
    """
    order = sorted(
        range(len(points)), key=lambda i: (points[i][0], points[i][1])
    )
    if len(order) < 3:
        return order

    def half(indices):
        chain: List[int] = []
        for i in indices:
            while len(chain) > 1:
                turn = cross_product_xy(
                    points[chain[-2]], points[chain[-1]], points[i]
                )
                if turn > 0.0:
                    break
                chain.pop()
            chain.append(i)
        return chain

    lower = half(order)
    upper = half(reversed(order))
    return lower[:-1] + upper[:-1]
