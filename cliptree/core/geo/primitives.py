import math
from typing import List, Optional, Sequence, Tuple

from .tolerance import SMALL_METRIC_DISTANCE

Point3D = Tuple[float, float, float]
Vector3D = Tuple[float, float, float]


def as_point3(point: Sequence[float]) -> Point3D:
    """Returns an (x, y, z) float tuple; 2D input lies at z = 0."""
    z = point[2] if len(point) > 2 else 0.0
    return (float(point[0]), float(point[1]), float(z))


def add(a: Sequence[float], b: Sequence[float]) -> Point3D:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def subtract(a: Sequence[float], b: Sequence[float]) -> Vector3D:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale(v: Sequence[float], s: float) -> Vector3D:
    return (v[0] * s, v[1] * s, v[2] * s)


def dot(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Sequence[float], b: Sequence[float]) -> Vector3D:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def magnitude(v: Sequence[float]) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def normalize(v: Sequence[float]) -> Optional[Vector3D]:
    """Returns the unit vector along v, or None for a zero-length v."""
    mag = magnitude(v)
    if mag == 0.0:
        return None
    return (v[0] / mag, v[1] / mag, v[2] / mag)


def negate(v: Sequence[float]) -> Vector3D:
    return (-v[0], -v[1], -v[2])


def interpolate(a: Sequence[float], f: float, b: Sequence[float]) -> Point3D:
    """Point at fraction f on the way from a to b."""
    return (
        a[0] + f * (b[0] - a[0]),
        a[1] + f * (b[1] - a[1]),
        a[2] + f * (b[2] - a[2]),
    )


def cross_product_xy(
    a: Sequence[float], b: Sequence[float], c: Sequence[float]
) -> float:
    """
    Z component of (b - a) x (c - a). Positive when a, b, c make a left
    (counter-clockwise) turn as seen from +Z.
    """
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def unit_perpendicular_xy(v: Sequence[float]) -> Optional[Vector3D]:
    """The xy part of v rotated 90 degrees counter-clockwise, normalized."""
    return normalize((-v[1], v[0], 0.0))


def rotate_vector_around_axis(
    v: Sequence[float], axis: Sequence[float], radians: float
) -> Optional[Vector3D]:
    """
    Rotates v around an axis through the origin (Rodrigues' formula).
    Returns None when the axis has zero length.
    """
    unit_axis = normalize(axis)
    if unit_axis is None:
        return None
    c = math.cos(radians)
    s = math.sin(radians)
    k_cross_v = cross(unit_axis, v)
    k_dot_v = dot(unit_axis, v)
    return (
        v[0] * c + k_cross_v[0] * s + unit_axis[0] * k_dot_v * (1.0 - c),
        v[1] * c + k_cross_v[1] * s + unit_axis[1] * k_dot_v * (1.0 - c),
        v[2] * c + k_cross_v[2] * s + unit_axis[2] * k_dot_v * (1.0 - c),
    )


def is_almost_equal_point(
    a: Sequence[float],
    b: Sequence[float],
    tolerance: float = SMALL_METRIC_DISTANCE,
) -> bool:
    return all(abs(a[i] - b[i]) <= tolerance for i in range(3))


def line_segment_intersection(
    p1: Sequence[float],
    p2: Sequence[float],
    p3: Sequence[float],
    p4: Sequence[float],
) -> Optional[Tuple[float, float]]:
    """
    Finds the XY intersection point of segments p1-p2 and p3-p4.

    Endpoints touching count as an intersection. Parallel and collinear
    segments return None.
    """
    x1, y1 = p1[0], p1[1]
    x2, y2 = p2[0], p2[1]
    x3, y3 = p3[0], p3[1]
    x4, y4 = p4[0], p4[1]

    den = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(den) < 1e-12:
        return None

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / den
    u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / den

    eps = 1e-9
    if -eps <= t <= 1 + eps and -eps <= u <= 1 + eps:
        return (x1 + t * (x2 - x1), y1 + t * (y2 - y1))
    return None


def is_point_in_polygon(
    point: Sequence[float], polygon: List[Sequence[float]]
) -> bool:
    """
    Checks if a point is inside a polygon (XY) using ray casting. Points on
    an edge count as inside.
    """
    x, y = point[0], point[1]
    n = len(polygon)
    if n < 3:
        return False

    # Boundary check first so that edges and corners are inside.
    for i in range(n):
        a = polygon[i]
        b = polygon[(i + 1) % n]
        if abs(cross_product_xy(a, b, point)) <= 1e-12:
            if (
                min(a[0], b[0]) - 1e-12 <= x <= max(a[0], b[0]) + 1e-12
                and min(a[1], b[1]) - 1e-12 <= y <= max(a[1], b[1]) + 1e-12
            ):
                return True

    inside = False
    p1x, p1y = polygon[0][0], polygon[0][1]
    for i in range(n + 1):
        p2x, p2y = polygon[i % n][0], polygon[i % n][1]
        if y > min(p1y, p2y):
            if y <= max(p1y, p2y):
                if x <= max(p1x, p2x):
                    if p1y != p2y:
                        xinters = (y - p1y) * (p2x - p1x) / (p2y - p1y) + p1x
                        if p1x == p2x or x <= xinters:
                            inside = not inside
        p1x, p1y = p2x, p2y
    return inside
