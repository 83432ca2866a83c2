"""Incremental Delaunay triangulator.

The algorithm, per call:

1. wrap every input point in a super triangle built around the bounding box,
2. insert the points one by one in input order: locate the triangle holding
   the point, split it (or the two triangles sharing the edge the point lies
   on) and restore the Delaunay criterion with local edge flips,
3. delete every triangle touching a super vertex and close the concave gaps
   this leaves on the boundary, then run one more flip pass.

Triangles are rows of a :class:`~deltri.core.mesh.TriangleMesh` arena and
refer to their neighbors by index. The mesh and the repair queue belong to
a single call; nothing is shared between calls.
"""
from __future__ import annotations

import time
from collections import deque
from typing import Iterable, List, Optional, Sequence

import numpy as np

from .config import TriangulatorConfig
from .constants import INDEX_NOT_FOUND, NO_NEIGHBOR, PLACEHOLDER, SUPER_EDGE_FACTOR
from .geometry import Point, PointSide, as_point_array, polar_angle_key, side
from .locate import make_locator
from .logging_utils import get_logger
from .mesh import MeshInvariantError, PositionKind, Triangle, TriangleMesh
from .stats import TriangulationStats

__all__ = [
    'DegenerateInputError',
    'Triangulation',
    'Triangulator',
    'triangulate',
]

logger = get_logger('deltri.triangulator')

# Arena indices of the three super vertices; input points start after them.
_N_SUPER = 3


class DegenerateInputError(ValueError):
    """The input has fewer than 3 distinct points or all points are colinear."""


class Triangulation(Sequence[Triangle]):
    """Result of :func:`triangulate`: a read-only sequence of triangles.

    ``points`` holds the inserted (distinct) input points in input order and
    ``triangles`` indexes into it. ``input_indices[k]`` is the position of
    ``points[k]`` in the caller's input.
    """

    def __init__(self, mesh: Optional[TriangleMesh], triangle_ids: List[int],
                 input_indices: Sequence[int], stats: TriangulationStats):
        self.mesh = mesh
        self._ids = list(triangle_ids)
        self.input_indices = np.asarray(input_indices, dtype=np.int64)
        self.stats = stats
        if mesh is None:
            self.points = np.empty((0, 2), dtype=np.float64)
            self.triangles = np.empty((0, 3), dtype=np.int32)
        else:
            self.points = mesh.points_array()[_N_SUPER:]
            if self._ids:
                rows = [mesh.vertices(t) for t in self._ids]
                self.triangles = np.ascontiguousarray(np.array(rows, dtype=np.int32) - _N_SUPER)
            else:
                self.triangles = np.empty((0, 3), dtype=np.int32)

    @classmethod
    def empty(cls, stats: Optional[TriangulationStats] = None) -> 'Triangulation':
        return cls(None, [], [], stats or TriangulationStats())

    def __len__(self) -> int:
        return len(self._ids)

    def __getitem__(self, i):
        if isinstance(i, slice):
            return [Triangle(self.mesh, t) for t in self._ids[i]]
        return Triangle(self.mesh, self._ids[i])

    @property
    def circumcenters(self) -> np.ndarray:
        if not self._ids:
            return np.empty((0, 2), dtype=np.float64)
        return np.array([self.mesh.circumcenter(t).as_tuple() for t in self._ids], dtype=np.float64)

    @property
    def circumradii(self) -> np.ndarray:
        return np.array([self.mesh.circumradius(t) for t in self._ids], dtype=np.float64)

    def locate(self, point) -> List[int]:
        """Positions of the triangles that do not classify ``point`` as OUTSIDE."""
        p = Point.of(point)
        return [k for k, t in enumerate(self._ids) if not self.mesh.classify(t, p).is_outside]


def _degenerate_reason(points: List[Point]) -> Optional[str]:
    distinct = []
    seen = set()
    for p in points:
        key = p.as_tuple()
        if key not in seen:
            seen.add(key)
            distinct.append(p)
            if len(distinct) >= 3:
                break
    if len(distinct) < 3:
        return f"need at least 3 distinct points, got {len(distinct)}"
    a, b = distinct[0], distinct[1]
    for p in points:
        if side(a, b, p) is not PointSide.CENTER:
            return None
    return "all points are colinear"


class Triangulator:
    """Builds a Delaunay triangulation of one point set.

    Parameters
    ----------
    points : sequence of Point, (x, y) pairs, or (N,2) array
    config : TriangulatorConfig, optional
    """

    def __init__(self, points, config: Optional[TriangulatorConfig] = None):
        self.config = config or TriangulatorConfig()
        arr = as_point_array(points)
        self.points = [Point(float(x), float(y)) for x, y in arr]
        self.stats = TriangulationStats()
        self.mesh: Optional[TriangleMesh] = None
        self.super_vertices: List[int] = []
        self._input_indices: List[int] = []
        self._queue: deque = deque()
        self._queued: set = set()
        self._locator = None

    # ------------------------------------------------------------------
    # driver
    # ------------------------------------------------------------------
    def triangulate(self) -> Triangulation:
        reason = _degenerate_reason(self.points)
        if reason is not None:
            if self.config.degenerate_policy == 'empty':
                logger.warning("degenerate input (%s); returning an empty triangulation", reason)
                return Triangulation.empty(self.stats)
            raise DegenerateInputError(reason)

        self.mesh = TriangleMesh()
        self._queue.clear()
        self._queued.clear()
        self._input_indices = []
        self._locator = make_locator(self.config.locator, self.config.max_walk_steps, self.config.walk_seed)

        t0 = time.perf_counter()
        self._add_super_structure()
        for i, p in enumerate(self.points):
            if self._insert_point(p):
                self._input_indices.append(i)
        t1 = time.perf_counter()
        self._remove_super_structure()
        t2 = time.perf_counter()
        self.stats.time_insert = t1 - t0
        self.stats.time_hull = t2 - t1
        self.stats.walk_fallbacks = getattr(self._locator, 'fallbacks', 0)

        result = Triangulation(self.mesh, list(self.mesh.active_indices()), self._input_indices, self.stats)
        logger.info(
            "triangulated %d points (%d duplicates) into %d triangles: flips=%d hull_fills=%d in %.3fs",
            self.stats.inserted, self.stats.duplicates, len(result), self.stats.flips,
            self.stats.hull_fills, self.stats.time_total)
        if self.config.validate:
            self._validate(result)
        return result

    def _validate(self, result: Triangulation) -> None:
        from .conformity import check_adjacency_symmetry, check_delaunay, check_coverage
        ok, msgs = check_adjacency_symmetry(self.mesh)
        if ok:
            ok, msgs = check_delaunay(result)
        if ok:
            ok, msgs = check_coverage(result)
        if not ok:
            raise MeshInvariantError("; ".join(msgs[:5]))

    # ------------------------------------------------------------------
    # super structure
    # ------------------------------------------------------------------
    def _add_super_structure(self) -> None:
        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]
        min_x, max_x = min(xs), max(xs)
        min_y, max_y = min(ys), max(ys)
        dx = max_x - min_x
        dy = max_y - min_y
        cx = min_x + 0.5 * dx
        cy = min_y + 0.5 * dy

        # side of the square the super triangle is built around
        edge = SUPER_EDGE_FACTOR * max(dx, dy)
        left = Point(cx - 1.5 * edge, cy - 0.5 * edge)
        top = Point(cx, cy + edge)
        right = Point(cx + 1.5 * edge, cy - 0.5 * edge)

        self.super_vertices = [self.mesh.add_point(p) for p in (left, top, right)]
        t = self.mesh.add_triangle(*self.super_vertices)
        self._locator.notify(t)

    def _remove_super_structure(self) -> None:
        for sv in self.super_vertices:
            self._remove_super_vertex(sv)
        self._drain()

    def _remove_super_vertex(self, super_vertex: int) -> None:
        mesh = self.mesh
        # dicts keep insertion order so the repair is deterministic
        hurt = {}
        free = {}

        for t in list(mesh.active_indices()):
            if not mesh.has_vertex(t, super_vertex):
                continue
            hurt.pop(t, None)
            for n in mesh.adjacent(t):
                if n >= 0:
                    hurt[n] = None
                    mesh.change_adjacent(n, t, PLACEHOLDER)
            for v in mesh.vertices(t):
                if v != super_vertex:
                    free[v] = None
            mesh.remove_triangle(t)
            self.stats.removed_super_triangles += 1

        # the last super vertex can leave no mesh triangle behind; its free
        # chain still needs closing
        if len(free) >= 3:
            pivot = mesh.point(super_vertex)
            angle = polar_angle_key(pivot)
            ordered = sorted(free, key=lambda v: angle(mesh.point(v)))
            # Walk the boundary counter-clockwise around the removed corner;
            # a left turn marks a concave notch to close with a new triangle.
            stack = ordered[:2]
            for nxt in ordered[2:]:
                while len(stack) >= 2 and side(mesh.point(stack[-2]), mesh.point(stack[-1]),
                                               mesh.point(nxt)) is PointSide.LEFT:
                    self._fill_hull_gap(stack[-2], stack[-1], nxt, hurt)
                    stack.pop()
                stack.append(nxt)

        for t in hurt:
            for slot, n in enumerate(mesh.adjacent(t)):
                if n == PLACEHOLDER:
                    mesh.set_adjacent(t, slot, NO_NEIGHBOR)

    def _fill_hull_gap(self, begin: int, end: int, nxt: int, hurt: dict) -> None:
        """Close the notch begin -> end -> nxt with triangle (begin, nxt, end).

        The new triangle borders the existing mesh along (nxt, end) and
        (end, begin); its (begin, nxt) side stays a placeholder until a later
        fill claims it or the removal finishes.
        """
        mesh = self.mesh
        new = mesh.add_triangle(begin, nxt, end, PLACEHOLDER, PLACEHOLDER, PLACEHOLDER)
        for h in hurt:
            k = mesh.edge_index(h, end, nxt)
            if k != INDEX_NOT_FOUND:
                mesh.set_adjacent(h, k, new)
                mesh.set_adjacent(new, 0, h)
            k = mesh.edge_index(h, begin, end)
            if k != INDEX_NOT_FOUND:
                mesh.set_adjacent(h, k, new)
                mesh.set_adjacent(new, 1, h)

        for h in [h for h in hurt if PLACEHOLDER not in mesh.adjacent(h)]:
            del hurt[h]
        hurt[new] = None

        self.stats.hull_fills += 1
        logger.debug("hull fill %d: (%d, %d, %d)", new, begin, nxt, end)
        self._register(new)

    # ------------------------------------------------------------------
    # insertion
    # ------------------------------------------------------------------
    def _insert_point(self, point: Point) -> bool:
        found = self._locator.locate(self.mesh, point)
        if found is None:
            raise MeshInvariantError(f"no triangle contains point ({point.x}, {point.y})")
        t, pos = found
        if pos.kind is PositionKind.VERTEX:
            self.stats.duplicates += 1
            logger.debug("dropping duplicate point (%g, %g)", point.x, point.y)
            return False

        v = self.mesh.add_point(point)
        if pos.kind is PositionKind.INSIDE:
            self._insert_inside(v, t)
        elif pos.kind is PositionKind.ON_EDGE:
            self._insert_on_edge(v, t, pos.edge)
        else:
            raise MeshInvariantError(f"locator returned {pos!r} for triangle {t}")
        self.stats.inserted += 1
        self._drain()
        return True

    def _insert_inside(self, p: int, t: int) -> None:
        """Split ``t`` = (v0, v1, v2) into a fan of three around ``p``.

        t becomes (v0, v1, p); the new rows are (v1, v2, p) and (v2, v0, p).
        """
        mesh = self.mesh
        v0, v1, v2 = mesh.vertices(t)
        old0, old1, old2 = mesh.adjacent(t)

        t0 = mesh.add_triangle(v1, v2, p, NO_NEIGHBOR, t, old0)
        t1 = mesh.add_triangle(v2, v0, p, t, t0, old1)
        mesh.set_adjacent(t0, 0, t1)

        mesh.change_vertex(t, v2, p)
        mesh.set_adjacent(t, 0, t0)
        mesh.set_adjacent(t, 1, t1)

        if old0 >= 0:
            mesh.change_adjacent(old0, t, t0)
        if old1 >= 0:
            mesh.change_adjacent(old1, t, t1)

        self.stats.triangle_splits += 1
        self._locator.notify(t)
        for x in (t, t0, t1, old0, old1, old2):
            self._register(x)

    def _insert_on_edge(self, p: int, t: int, edge: int) -> None:
        """Split ``t`` and its neighbor across the edge opposite ``vertices[edge]``.

        With t = (v0, v2, v3) and the neighbor u = (v1, v3, v2) sharing
        v2-v3, the result is t = (v0, p, v3), u = (v1, v3, p) and the new rows
        (p, v0, v2) and (p, v2, v1).
        """
        mesh = self.mesh
        u = mesh.adjacent(t)[edge]
        if u < 0:
            raise MeshInvariantError(f"point on hull edge of triangle {t}; super structure should enclose it")

        v0 = mesh.vertices(t)[edge]
        v1 = mesh.opposite_vertex(u, t)
        if v1 == INDEX_NOT_FOUND:
            raise MeshInvariantError(f"triangle {u} does not link back to its neighbor {t}")
        v2 = mesh.vertices(t)[(edge + 1) % 3]
        v3 = mesh.vertices(t)[(edge + 2) % 3]

        old20 = mesh.opposite_triangle(t, v2)
        old30 = mesh.opposite_triangle(t, v3)
        old21 = mesh.opposite_triangle(u, v2)
        old31 = mesh.opposite_triangle(u, v3)
        if old21 is None or old31 is None:
            raise MeshInvariantError(f"triangles {t} and {u} do not share edge ({v2}, {v3})")

        t2 = mesh.add_triangle(p, v0, v2, old30, NO_NEIGHBOR, t)
        t3 = mesh.add_triangle(p, v2, v1, old31, u, t2)
        mesh.set_adjacent(t2, 1, t3)

        mesh.change_vertex(t, v2, p)
        mesh.change_opposite_triangle(t, v3, t2)
        mesh.change_vertex(u, v2, p)
        mesh.change_opposite_triangle(u, v3, t3)

        if old30 >= 0:
            mesh.change_adjacent(old30, t, t2)
        if old31 >= 0:
            mesh.change_adjacent(old31, u, t3)

        self.stats.edge_splits += 1
        self._locator.notify(t)
        for x in (t, u, t2, t3, old20, old30, old21, old31):
            self._register(x)

    # ------------------------------------------------------------------
    # Delaunay repair
    # ------------------------------------------------------------------
    def _register(self, t: int) -> None:
        if t < 0 or t in self._queued:
            return
        self._queued.add(t)
        self._queue.append(t)

    def _drain(self) -> None:
        while self._queue:
            t = self._queue.popleft()
            self._queued.discard(t)
            if self.mesh.is_active(t):
                self._apply_delaunay_criterion(t)

    def _apply_delaunay_criterion(self, t: int) -> None:
        """Flip ``t`` against the first neighbor violating the criterion, at most once."""
        mesh = self.mesh
        tol = self.config.incircle_tolerance
        for n in mesh.adjacent(t):
            if n < 0:
                continue
            v = mesh.opposite_vertex(n, t)
            if v == INDEX_NOT_FOUND:
                raise MeshInvariantError(f"triangle {n} does not link back to its neighbor {t}")
            if mesh.strictly_in_circumcircle(t, mesh.point(v), tol):
                self._flip(t, n)
                return

    def _flip(self, t: int, o: int) -> None:
        if not self.mesh.flip(t, o):
            raise MeshInvariantError(f"cannot flip non-adjacent triangles {t} and {o}")
        self.stats.flips += 1
        # includes t and o themselves
        for x in self.mesh.adjacent(t) + self.mesh.adjacent(o):
            self._register(x)


def triangulate(points: Iterable, config: Optional[TriangulatorConfig] = None) -> Triangulation:
    """Delaunay triangulation of ``points``.

    Parameters
    ----------
    points : sequence of Point, (x, y) pairs, or (N,2) array
        Exact duplicates are dropped; the order of the remaining points is
        the insertion order.
    config : TriangulatorConfig, optional

    Returns
    -------
    Triangulation
        Triangles covering the convex hull of the points, each with no other
        point strictly inside its circumcircle.

    Raises
    ------
    DegenerateInputError
        Fewer than 3 distinct points or all points colinear, unless
        ``config.degenerate_policy == 'empty'``.
    MeshInvariantError
        An internal adjacency invariant was broken.
    """
    if not isinstance(points, np.ndarray):
        points = list(points)
    return Triangulator(points, config).triangulate()
