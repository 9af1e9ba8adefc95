import math

import numpy as np
import pytest


def _star_polygon(seed, count):
    rng = np.random.default_rng(seed)
    # One vertex per angular slot keeps every edge under half a turn, so
    # the polygon is simple.
    slots = np.arange(count) + rng.uniform(0.1, 0.9, count)
    angles = slots * 2 * math.pi / count
    radii = rng.uniform(0.2, 1.0, count)
    return [
        (float(r * math.cos(a)), float(r * math.sin(a)))
        for r, a in zip(radii, angles)
    ]


def _spiral_polygon(turns=3, width=0.2, pitch=0.3, step=0.2):
    """A band of the given width wound around the origin."""
    start = 0.5
    steps = int(turns * 2 * math.pi / step)
    thetas = [start + i * step for i in range(steps + 1)]
    outer = [
        ((pitch * t + width) * math.cos(t), (pitch * t + width) * math.sin(t))
        for t in thetas
    ]
    inner = [
        (pitch * t * math.cos(t), pitch * t * math.sin(t))
        for t in reversed(thetas)
    ]
    return outer + inner


def _boundary_distance(point, polygon):
    best = math.inf
    n = len(polygon)
    for i in range(n):
        a = polygon[i]
        b = polygon[(i + 1) % n]
        dx = b[0] - a[0]
        dy = b[1] - a[1]
        t = ((point[0] - a[0]) * dx + (point[1] - a[1]) * dy) / (
            dx * dx + dy * dy
        )
        t = min(1.0, max(0.0, t))
        best = min(
            best,
            math.hypot(point[0] - a[0] - t * dx, point[1] - a[1] - t * dy),
        )
    return best


@pytest.fixture
def star_polygon():
    """Builds a random polygon, star-shaped about the origin, from a seed."""
    return _star_polygon


@pytest.fixture
def spiral_polygon():
    return _spiral_polygon()


@pytest.fixture
def boundary_distance():
    return _boundary_distance
