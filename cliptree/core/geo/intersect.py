from typing import List, Optional, Sequence, Tuple

from .primitives import line_segment_intersection


def _polygon_edges(
    points: Sequence[Sequence[float]],
) -> List[Tuple[Sequence[float], Sequence[float]]]:
    n = len(points)
    return [(points[i], points[(i + 1) % n]) for i in range(n)]


def find_polygon_self_intersection(
    points: Sequence[Sequence[float]],
) -> Optional[Tuple[int, int, Tuple[float, float]]]:
    """
    Finds the first pair of crossing or touching edges of a closed polygon
    (XY). Edge i runs from points[i] to points[i + 1], wrapping around.

    Returns (i, j, point) for the first offending edge pair, or None when
    the polygon is simple. Neighboring edges may meet at their shared
    vertex without counting as an intersection.
    """
    edges = _polygon_edges(points)
    n = len(edges)
    if n < 4:
        return None

    for i in range(n):
        a1, a2 = edges[i]
        for j in range(i + 1, n):
            b1, b2 = edges[j]
            intersection = line_segment_intersection(a1, a2, b1, b2)
            if intersection is None:
                continue

            shared_vertex = None
            if j == i + 1:
                shared_vertex = a2
            elif i == 0 and j == n - 1:
                shared_vertex = a1

            if shared_vertex is not None:
                dist_sq = (intersection[0] - shared_vertex[0]) ** 2 + (
                    intersection[1] - shared_vertex[1]
                ) ** 2
                if dist_sq < 1e-12:
                    continue  # It's a connection, not a crossing

            return i, j, intersection
    return None


def check_polygon_self_intersection(
    points: Sequence[Sequence[float]],
) -> bool:
    """Checks if a closed polygon's boundary crosses or touches itself."""
    return find_polygon_self_intersection(points) is not None
