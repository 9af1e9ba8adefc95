import math
from typing import List, Sequence

import numpy as np
from numpy.polynomial import polynomial as P

from .tolerance import ROOT_RELATIVE_TOLERANCE


def unit_circle_line_intersections(
    alpha: float,
    beta: float,
    gamma: float,
    rel_tol: float = ROOT_RELATIVE_TOLERANCE,
) -> List[float]:
    """
    Solves alpha + beta*cos(theta) + gamma*sin(theta) = 0.

    Returns 0, 1 or 2 angles in radians. A line that only grazes the unit
    circle (within rel_tol) yields its single tangency angle. A degenerate
    line (beta = gamma = 0) has no isolated roots.
    """
    delta2 = beta * beta + gamma * gamma
    if delta2 <= 0.0:
        return []

    two_tol = 2.0 * rel_tol if rel_tol >= 0.0 else 0.0
    lam = -alpha / delta2
    d2 = 1.0 - alpha * alpha / delta2
    if d2 < -two_tol:
        return []
    if d2 < two_tol:
        # Tangent: closest approach of the line to the origin.
        return [math.atan2(lam * gamma, lam * beta)]

    mu = math.sqrt(d2 / delta2)
    c0 = lam * beta
    s0 = lam * gamma
    return [
        math.atan2(s0 + mu * beta, c0 - mu * gamma),
        math.atan2(s0 - mu * beta, c0 + mu * gamma),
    ]


def bernstein_to_power(coefficients: Sequence[float]) -> np.ndarray:
    """
    Converts Bernstein coefficients of a degree-n polynomial on [0, 1] to
    power basis coefficients (lowest order first).
    """
    n = len(coefficients) - 1
    result = np.zeros(n + 1)
    for i, b in enumerate(coefficients):
        if b == 0.0:
            continue
        # C(n, i) * t^i * (1 - t)^(n - i)
        term = P.polymul(
            P.polypow([0.0, 1.0], i), P.polypow([1.0, -1.0], n - i)
        )
        result[: len(term)] += math.comb(n, i) * b * term
    return result


def bernstein_roots_01(
    coefficients: Sequence[float], imag_tol: float = 1e-9
) -> List[float]:
    """
    Real roots in [0, 1] of the polynomial with the given Bernstein
    coefficients, sorted ascending. A polynomial that is identically zero
    has no isolated roots.
    """
    coeffs = np.asarray(coefficients, dtype=float)
    if len(coeffs) < 2:
        return []
    # All coefficients of one strict sign: no root (convex hull property).
    if np.all(coeffs > 0.0) or np.all(coeffs < 0.0):
        return []

    power = P.polytrim(bernstein_to_power(coeffs), tol=0.0)
    if len(power) < 2:
        return []
    roots = P.polyroots(power)
    scale = max(1.0, float(np.max(np.abs(coeffs))))
    result = []
    for r in roots:
        if abs(r.imag) > imag_tol * scale:
            continue
        t = float(r.real)
        if -1e-12 <= t <= 1.0 + 1e-12:
            result.append(min(1.0, max(0.0, t)))
    return sorted(result)
