import logging
from typing import TYPE_CHECKING, List, Optional

from .. import config as clip_config
from ..core.geo.curves import CurveCollection, CurveInterval, CurvePrimitive
from ..core.geo.interval import (
    Interval,
    complement_sorted,
    consolidate,
    difference_sorted,
)

if TYPE_CHECKING:
    from .tree import AlternatingClipTreeNode

logger = logging.getLogger(__name__)


class CurveTreeClipper:
    """
    Trims curves against an alternating clip tree.

    At each node the curve is clipped to the node's region, then every
    child's (recursively computed) intervals are subtracted. Each call
    works on its own lists, so one tree can be queried from many threads.
    """

    def __init__(self, fraction_tolerance: Optional[float] = None):
        if fraction_tolerance is None:
            fraction_tolerance = clip_config.get_config().fraction_tolerance
        self.fraction_tolerance = fraction_tolerance

    def _clip_node(
        self, node: "AlternatingClipTreeNode", curve: CurvePrimitive
    ) -> List[Interval]:
        intervals = consolidate(curve.clip_intervals(node.region))
        if not intervals:
            return intervals
        for child in node.children:
            child_intervals = self._clip_node(child, curve)
            if child_intervals:
                intervals = difference_sorted(intervals, child_intervals)
            if not intervals:
                break
        return intervals

    def clip_fractions(
        self, root: "AlternatingClipTreeNode", curve: CurvePrimitive
    ) -> List[Interval]:
        """
        Sorted, disjoint fraction intervals of the curve inside the tree.
        Pieces no longer than the fraction tolerance are dropped.
        """
        return [
            r
            for r in self._clip_node(root, curve)
            if r.length > self.fraction_tolerance
        ]

    def append_curve_clip_intervals(
        self,
        root: "AlternatingClipTreeNode",
        curve: CurvePrimitive,
        inside: List[CurveInterval],
        outside: Optional[List[CurveInterval]] = None,
    ) -> None:
        """
        Appends a CurveInterval to `inside` for each piece of the curve in
        the tree. When `outside` is given, it receives the remaining
        pieces of [0, 1].
        """
        intervals = self.clip_fractions(root, curve)
        logger.debug(
            f"Clipped {type(curve).__name__} into {len(intervals)} pieces"
        )
        for r in intervals:
            inside.append(CurveInterval.from_fractions(curve, r.low, r.high))
        if outside is None:
            return
        for r in complement_sorted(intervals):
            if r.length > self.fraction_tolerance:
                outside.append(
                    CurveInterval.from_fractions(curve, r.low, r.high)
                )

    def append_curve_collection_clip_intervals(
        self,
        root: "AlternatingClipTreeNode",
        curves: CurveCollection,
        inside: List[CurveInterval],
        outside: Optional[List[CurveInterval]] = None,
    ) -> None:
        for member in curves:
            if isinstance(member, CurvePrimitive):
                self.append_curve_clip_intervals(
                    root, member, inside, outside
                )
            elif isinstance(member, CurveCollection):
                self.append_curve_collection_clip_intervals(
                    root, member, inside, outside
                )
