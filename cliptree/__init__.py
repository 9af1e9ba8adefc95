"""
cliptree represents simple polygons, convex or concave, as trees of convex
clip regions, and uses them to test points and trim curves.
"""

from .core.matrix import Matrix
from .core.geo.interval import Interval
from .core.geo.curves import (
    CurvePrimitive,
    LineSegment,
    LineString,
    Arc,
    BezierCurve,
    BSplineCurve,
    CurveCollection,
    CurveLocation,
    CurveInterval,
)
from .clipping import (
    ClipPlane,
    ConvexRegion,
    RegionUnion,
    ClipPlaneContainment,
    ClipStatus,
    CurveTreeClipper,
    AlternatingClipTreeNode,
    TreeBuilder,
    NonSimplePolygonError,
)

__all__ = [
    "Matrix",
    "Interval",
    "CurvePrimitive",
    "LineSegment",
    "LineString",
    "Arc",
    "BezierCurve",
    "BSplineCurve",
    "CurveCollection",
    "CurveLocation",
    "CurveInterval",
    "ClipPlane",
    "ConvexRegion",
    "RegionUnion",
    "ClipPlaneContainment",
    "ClipStatus",
    "CurveTreeClipper",
    "AlternatingClipTreeNode",
    "TreeBuilder",
    "NonSimplePolygonError",
]
