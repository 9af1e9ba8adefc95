"""
The clipping module contains the half-space clip primitives (planes, convex
regions and their unions) and the alternating clip tree that represents an
arbitrary simple polygon as nested convex regions.
"""

from .plane import ClipPlane
from .convex import ConvexRegion
from .union import RegionUnion
from .utils import (
    ClipPlaneContainment,
    ClipStatus,
    select_intervals_01,
    collect_clipped_curves,
    point_set_single_clip_status,
)
from .curve_clipper import CurveTreeClipper
from .tree import AlternatingClipTreeNode, TreeBuilder, NonSimplePolygonError

__all__ = [
    "ClipPlane",
    "ConvexRegion",
    "RegionUnion",
    "ClipPlaneContainment",
    "ClipStatus",
    "select_intervals_01",
    "collect_clipped_curves",
    "point_set_single_clip_status",
    "CurveTreeClipper",
    "AlternatingClipTreeNode",
    "TreeBuilder",
    "NonSimplePolygonError",
]
