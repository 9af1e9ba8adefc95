"""
Alternating convex clip trees.

A tree node holds a convex region and a list of child nodes. A point is
inside a node when it is inside the node's region and not inside any child:

    inside(node, p) = inside(node.region, p)
                      and not any(inside(child, p) for child in children)

so the children of a node are holes, their children are islands in those
holes, and so on. TreeBuilder turns a simple polygon, concave or not, into
such a tree by taking the convex hull of the polygon at the root and
recursing into each pocket the hull skips over.
"""
import logging
from typing import Iterator, List, Optional, Sequence

from .. import config as clip_config
from ..core.geo.analysis import (
    convex_hull_indices_xy,
    index_of_max_x,
    normalize_polygon,
    polygon_signed_area_xy,
)
from ..core.geo.curves import CurveCollection, CurvePrimitive
from ..core.geo.intersect import find_polygon_self_intersection
from ..core.geo.primitives import Point3D, cross_product_xy
from .convex import ConvexRegion
from .curve_clipper import CurveTreeClipper
from .plane import ClipPlane

logger = logging.getLogger(__name__)

UP_VECTOR = (0.0, 0.0, 1.0)


class NonSimplePolygonError(ValueError):
    """Raised for a polygon whose boundary crosses or touches itself."""

    def __init__(self, edge_a: int, edge_b: int, point):
        super().__init__(
            f"Polygon is not simple: edges {edge_a} and {edge_b} "
            f"intersect at ({point[0]}, {point[1]})"
        )
        self.edge_a = edge_a
        self.edge_b = edge_b
        self.point = point


class AlternatingClipTreeNode:
    def __init__(self, start_index: int = -1, num_points: int = -1):
        self.region = ConvexRegion()
        self.children: List["AlternatingClipTreeNode"] = []
        # Hull chain that produced this node.
        self.points: List[Point3D] = []
        # Index range into the builder's polygon; only used while building.
        self.start_index = start_index
        self.num_points = num_points

    @classmethod
    def create_for_polygon(
        cls,
        points: Sequence[Sequence[float]],
        validate: Optional[bool] = None,
    ) -> Optional["AlternatingClipTreeNode"]:
        """
        Builds the tree for a simple polygon in either winding. Returns
        None for fewer than 3 distinct vertices or zero area.

        Raises NonSimplePolygonError for a self-intersecting polygon when
        validating (the default comes from the active ClipConfig).
        """
        return TreeBuilder(points, validate=validate).build()

    def __repr__(self) -> str:
        return (
            f"AlternatingClipTreeNode(planes={len(self.region.planes)}, "
            f"children={len(self.children)})"
        )

    @property
    def planes(self) -> List[ClipPlane]:
        return self.region.planes

    def add_plane(self, plane: Optional[ClipPlane]) -> None:
        self.region.add_plane(plane)

    def add_empty_child(
        self, start_index: int, num_points: int
    ) -> "AlternatingClipTreeNode":
        child = AlternatingClipTreeNode(start_index, num_points)
        self.children.append(child)
        return child

    def is_point_on_or_inside(
        self, point: Sequence[float], tolerance: float = 0.0
    ) -> bool:
        if not self.region.is_point_on_or_inside(point, tolerance):
            return False
        for child in self.children:
            if child.is_point_on_or_inside(point, tolerance):
                return False
        return True

    def clone(self) -> "AlternatingClipTreeNode":
        """Deep copy of the node and its whole subtree."""
        result = AlternatingClipTreeNode(self.start_index, self.num_points)
        result.region = self.region.clone()
        result.points = list(self.points)
        result.children = [child.clone() for child in self.children]
        return result

    def depth(self) -> int:
        """Number of levels in the subtree, counting this node."""
        if not self.children:
            return 1
        return 1 + max(child.depth() for child in self.children)

    def node_count(self) -> int:
        return 1 + sum(child.node_count() for child in self.children)

    def iter_nodes(self) -> Iterator["AlternatingClipTreeNode"]:
        """All nodes of the subtree, depth first, parents before children."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def append_curve_clip_intervals(
        self,
        curve: CurvePrimitive,
        inside: list,
        outside: Optional[list] = None,
    ) -> None:
        CurveTreeClipper().append_curve_clip_intervals(
            self, curve, inside, outside
        )

    def append_curve_collection_clip_intervals(
        self,
        curves: CurveCollection,
        inside: list,
        outside: Optional[list] = None,
    ) -> None:
        CurveTreeClipper().append_curve_collection_clip_intervals(
            self, curves, inside, outside
        )


class TreeBuilder:
    """
    Builds an AlternatingClipTreeNode tree from one polygon.

    The polygon is copied, cleaned of repeated vertices and a closure
    point, and reordered counter-clockwise. Each node covers a walk along
    the polygon: the root walks all the way round, a child walks one
    pocket between two hull vertices of its parent. The node's planes come
    from the hull edges of its walk and face the other way at every level,
    since pocket walks run clockwise around the pocket.
    """

    def __init__(
        self,
        points: Sequence[Sequence[float]],
        validate: Optional[bool] = None,
        tolerance: Optional[float] = None,
    ):
        settings = clip_config.get_config()
        self.validate = (
            settings.validate_polygons if validate is None else validate
        )
        self.tolerance = (
            settings.small_metric_distance if tolerance is None else tolerance
        )
        self.points: List[Point3D] = normalize_polygon(points, self.tolerance)

    @property
    def period(self) -> int:
        return len(self.points)

    def index_after(self, i: int) -> int:
        return (i + 1) % self.period

    def build(self) -> Optional[AlternatingClipTreeNode]:
        n = self.period
        if n < 3:
            logger.warning(
                f"Cannot build clip tree: {n} distinct vertices, need 3"
            )
            return None

        area = polygon_signed_area_xy(self.points)
        if area == 0.0:
            logger.warning("Cannot build clip tree: polygon has zero area")
            return None

        if self.validate:
            hit = find_polygon_self_intersection(self.points)
            if hit is not None:
                raise NonSimplePolygonError(*hit)

        if area < 0.0:
            self.points.reverse()

        root = AlternatingClipTreeNode(index_of_max_x(self.points), n + 1)
        self._build_node(root, True)
        logger.debug(
            f"Built clip tree for {n} vertices: "
            f"{root.node_count()} nodes, depth {root.depth()}"
        )
        return root

    def _collect_hull_chain(self, start: int, count: int) -> List[int]:
        """
        The vertices of the `count` step walk from `start` that lie on the
        convex hull of that walk, in walk order. The root walk returns to
        its start vertex, so its chain is closed.
        """
        points = self.points
        if count <= 2:
            return []
        walk = [(start + i) % self.period for i in range(count)]
        distinct = list(dict.fromkeys(walk))
        hull = [
            points[distinct[i]]
            for i in convex_hull_indices_xy([points[k] for k in distinct])
        ]
        if len(hull) < 3:
            return walk
        edges = list(zip(hull, hull[1:] + hull[:1]))
        chain = [walk[0]]
        for k in walk[1:-1]:
            # A zero cross keeps a vertex lying on a hull edge on the chain.
            if min(cross_product_xy(a, b, points[k]) for a, b in edges) <= 0:
                chain.append(k)
        chain.append(walk[-1])
        return chain

    def _add_edge_plane(
        self,
        node: AlternatingClipTreeNode,
        k0: int,
        k1: int,
        positive_area: bool,
    ) -> None:
        plane = ClipPlane.from_edge_and_up_vector(
            self.points[k0 % self.period],
            self.points[k1 % self.period],
            UP_VECTOR,
        )
        if plane is None:
            return
        if positive_area:
            plane.negate_in_place()
        node.add_plane(plane)

    def _skipped_vertices_on_chord(self, k0: int, k1: int) -> bool:
        """True if every vertex strictly between k0 and k1 is on the chord."""
        a = self.points[k0 % self.period]
        b = self.points[k1 % self.period]
        length = ((b[0] - a[0]) ** 2 + (b[1] - a[1]) ** 2) ** 0.5
        if length == 0.0:
            return False
        for k in range(k0 + 1, k1):
            p = self.points[k % self.period]
            if abs(cross_product_xy(a, b, p)) > self.tolerance * length:
                return False
        return True

    def _build_node(
        self, node: AlternatingClipTreeNode, positive_area: bool
    ) -> None:
        chain = self._collect_hull_chain(node.start_index, node.num_points)
        node.points = [self.points[k] for k in chain]

        for k0, k1 in zip(chain, chain[1:]):
            if k1 == self.index_after(k0):
                self._add_edge_plane(node, k0, k1, positive_area)
                continue
            if k1 < k0:
                k1 += self.period
            # The chord is a hull edge, so the region stays the full hull.
            self._add_edge_plane(node, k0, k1, positive_area)
            if self._skipped_vertices_on_chord(k0, k1):
                continue
            count = k1 - k0 + 1
            if count >= node.num_points:
                logger.warning(
                    f"Skipping pocket {k0}..{k1}: it does not shrink "
                    f"the range of {node.num_points} vertices"
                )
                continue
            node.add_empty_child(k0, count)

        for child in node.children:
            self._build_node(child, not positive_area)
