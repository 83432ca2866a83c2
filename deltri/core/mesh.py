"""Arena-backed vertex/triangle adjacency mesh.

Triangles live in flat tables and refer to their neighbors by arena index.
Row ``t`` stores

- ``vertices[t]``: three vertex indices in clockwise order,
- ``adjacent[t]``: ``adjacent[t][i]`` is the triangle across the edge
  opposite ``vertices[t][i]``, or one of the sentinels ``NO_NEIGHBOR``
  (hull edge) and ``PLACEHOLDER`` (neighbor deleted, not yet replaced),
- the cached circumcenter and circumradius, recomputed on every vertex change.

Deleted rows are tombstoned (vertices ``[-1, -1, -1]``) and never reused, so
an index stays a stable identity for the lifetime of the mesh.

:class:`Triangle` is a light handle ``(mesh, index)`` exposing the per-cell
queries; the triangulator itself works with raw indices.
"""
from __future__ import annotations

import enum
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .constants import INDEX_NOT_FOUND, NO_NEIGHBOR
from .geometry import Point, PointSide, circumcircle, side

__all__ = [
    'MeshInvariantError',
    'PositionKind',
    'PointPosition',
    'TriangleMesh',
    'Triangle',
]

_TOMBSTONE = [-1, -1, -1]


class MeshInvariantError(RuntimeError):
    """An adjacency or geometric invariant of the mesh does not hold."""


class PositionKind(enum.Enum):
    VERTEX = 'vertex'
    INSIDE = 'inside'
    OUTSIDE = 'outside'
    ON_EDGE = 'on_edge'


class PointPosition:
    """Classification of a point against one triangle.

    ``edge`` is set only for ON_EDGE and holds the index of the vertex
    opposite the edge the point lies on.
    """
    __slots__ = ('kind', 'edge')

    def __init__(self, kind: PositionKind, edge: Optional[int] = None):
        if (kind is PositionKind.ON_EDGE) != (edge is not None):
            raise ValueError("edge index is required for ON_EDGE and only for it")
        self.kind = kind
        self.edge = edge

    @classmethod
    def vertex(cls) -> 'PointPosition':
        return cls(PositionKind.VERTEX)

    @classmethod
    def inside(cls) -> 'PointPosition':
        return cls(PositionKind.INSIDE)

    @classmethod
    def outside(cls) -> 'PointPosition':
        return cls(PositionKind.OUTSIDE)

    @classmethod
    def on_edge(cls, edge: int) -> 'PointPosition':
        return cls(PositionKind.ON_EDGE, int(edge))

    @property
    def is_outside(self) -> bool:
        return self.kind is PositionKind.OUTSIDE

    def __eq__(self, other):
        if not isinstance(other, PointPosition):
            return NotImplemented
        return self.kind is other.kind and self.edge == other.edge

    def __hash__(self):
        return hash((self.kind, self.edge))

    def __repr__(self):
        if self.kind is PositionKind.ON_EDGE:
            return f"PointPosition.on_edge({self.edge})"
        return f"PointPosition.{self.kind.value}()"


class TriangleMesh:
    """Flat tables of points and triangles with index-based adjacency."""

    def __init__(self):
        self._points: List[Point] = []
        self._vertices: List[List[int]] = []
        self._adjacent: List[List[int]] = []
        self._centers: List[Optional[Point]] = []
        self._radii: List[float] = []
        self._n_active = 0

    # --- points ---
    def add_point(self, point: Point) -> int:
        self._points.append(Point.of(point))
        return len(self._points) - 1

    def point(self, v: int) -> Point:
        return self._points[v]

    def find_point(self, point) -> int:
        """Index of the first stored point equal to ``point``, or INDEX_NOT_FOUND."""
        p = Point.of(point)
        for v, q in enumerate(self._points):
            if q == p:
                return v
        return INDEX_NOT_FOUND

    @property
    def n_points(self) -> int:
        return len(self._points)

    # --- triangle rows ---
    def add_triangle(self, v0: int, v1: int, v2: int,
                     a0: int = NO_NEIGHBOR, a1: int = NO_NEIGHBOR, a2: int = NO_NEIGHBOR) -> int:
        t = len(self._vertices)
        self._vertices.append([v0, v1, v2])
        self._adjacent.append([a0, a1, a2])
        self._centers.append(None)
        self._radii.append(0.0)
        self._n_active += 1
        self._update_circumcircle(t)
        return t

    def remove_triangle(self, t: int) -> None:
        self._require_active(t)
        self._vertices[t] = list(_TOMBSTONE)
        self._adjacent[t] = [NO_NEIGHBOR] * 3
        self._centers[t] = None
        self._n_active -= 1

    def is_active(self, t: int) -> bool:
        return 0 <= t < len(self._vertices) and self._vertices[t][0] >= 0

    def active_indices(self) -> Iterator[int]:
        for t, row in enumerate(self._vertices):
            if row[0] >= 0:
                yield t

    def __len__(self) -> int:
        return self._n_active

    def __iter__(self) -> Iterator['Triangle']:
        for t in self.active_indices():
            yield Triangle(self, t)

    def __getitem__(self, t: int) -> 'Triangle':
        self._require_active(t)
        return Triangle(self, t)

    def compact(self) -> List['Triangle']:
        """Dense list of handles on the live rows, in arena order."""
        return [Triangle(self, t) for t in self.active_indices()]

    @property
    def capacity(self) -> int:
        """Number of rows ever allocated, tombstones included."""
        return len(self._vertices)

    def vertices(self, t: int) -> Tuple[int, int, int]:
        v = self._vertices[t]
        return (v[0], v[1], v[2])

    def adjacent(self, t: int) -> Tuple[int, int, int]:
        a = self._adjacent[t]
        return (a[0], a[1], a[2])

    def circumcenter(self, t: int) -> Point:
        return self._centers[t]

    def circumradius(self, t: int) -> float:
        return self._radii[t]

    def _require_active(self, t: int) -> None:
        if not self.is_active(t):
            raise MeshInvariantError(f"triangle {t} is not part of the mesh")

    def _update_circumcircle(self, t: int) -> None:
        a, b, c = (self._points[v] for v in self._vertices[t])
        try:
            center, radius = circumcircle(a, b, c)
        except ValueError as exc:
            raise MeshInvariantError(f"triangle {t} is degenerate: {exc}") from exc
        self._centers[t] = center
        self._radii[t] = radius

    # --- index lookups ---
    def find_vertex_index(self, t: int, v: int) -> int:
        row = self._vertices[t]
        for i in range(3):
            if row[i] == v:
                return i
        return INDEX_NOT_FOUND

    def find_adjacent_index(self, t: int, other: int) -> int:
        row = self._adjacent[t]
        for i in range(3):
            if row[i] == other:
                return i
        return INDEX_NOT_FOUND

    def opposite_vertex(self, t: int, adjacent: int) -> int:
        """Vertex of ``t`` opposite its neighbor ``adjacent``, or INDEX_NOT_FOUND."""
        i = self.find_adjacent_index(t, adjacent)
        return self._vertices[t][i] if i != INDEX_NOT_FOUND else INDEX_NOT_FOUND

    def opposite_triangle(self, t: int, v: int) -> Optional[int]:
        """Neighbor of ``t`` across the edge opposite vertex ``v``.

        Returns None when ``v`` is not a vertex of ``t``; the returned value
        may be a sentinel.
        """
        i = self.find_vertex_index(t, v)
        return self._adjacent[t][i] if i != INDEX_NOT_FOUND else None

    def edge_index(self, t: int, begin: int, end: int) -> int:
        """Index of the vertex opposite the directed edge begin->end of ``t``."""
        i = self.find_vertex_index(t, begin)
        if i == INDEX_NOT_FOUND:
            return INDEX_NOT_FOUND
        if self._vertices[t][(i + 1) % 3] != end:
            return INDEX_NOT_FOUND
        return (i + 2) % 3

    def has_vertex(self, t: int, v: int) -> bool:
        return self.find_vertex_index(t, v) != INDEX_NOT_FOUND

    def has_edge(self, t: int, begin: int, end: int) -> bool:
        return self.edge_index(t, begin, end) != INDEX_NOT_FOUND

    def has_adjacent(self, t: int, other: int) -> bool:
        return self.find_adjacent_index(t, other) != INDEX_NOT_FOUND

    # --- mutation ---
    def set_adjacent(self, t: int, slot: int, value: int) -> None:
        self._adjacent[t][slot] = value

    def change_vertex(self, t: int, old: int, new: int) -> bool:
        i = self.find_vertex_index(t, old)
        if i == INDEX_NOT_FOUND:
            return False
        self._vertices[t][i] = new
        self._update_circumcircle(t)
        return True

    def change_adjacent(self, t: int, old: int, new: int) -> bool:
        """Replace neighbor ``old`` by ``new``; sentinels in ``t`` are left alone."""
        if t < 0:
            return False
        i = self.find_adjacent_index(t, old)
        if i == INDEX_NOT_FOUND:
            return False
        self._adjacent[t][i] = new
        return True

    def change_opposite_triangle(self, t: int, opposite_vertex: int, new: int) -> bool:
        i = self.find_vertex_index(t, opposite_vertex)
        if i == INDEX_NOT_FOUND:
            return False
        self._adjacent[t][i] = new
        return True

    # --- predicates ---
    def classify(self, t: int, point: Point) -> PointPosition:
        """Position of ``point`` relative to triangle ``t``.

        Vertex coincidence wins; otherwise any LEFT side means OUTSIDE, then a
        CENTER side means the point is on that edge.
        """
        a, b, c = (self._points[v] for v in self._vertices[t])
        if point == a or point == b or point == c:
            return PointPosition.vertex()
        # edge (v0,v1) is opposite v2, (v1,v2) opposite v0, (v2,v0) opposite v1
        sides = (
            (side(a, b, point), 2),
            (side(b, c, point), 0),
            (side(c, a, point), 1),
        )
        for s, _ in sides:
            if s is PointSide.LEFT:
                return PointPosition.outside()
        for s, opposite in sides:
            if s is PointSide.CENTER:
                return PointPosition.on_edge(opposite)
        return PointPosition.inside()

    def contains_in_circumcircle(self, t: int, point: Point) -> bool:
        """Boundary-inclusive circumcircle containment."""
        return self._centers[t].distance_to(point) <= self._radii[t]

    def strictly_in_circumcircle(self, t: int, point: Point, tol: float) -> bool:
        """True when ``point`` lies inside the circumcircle by more than ``tol * radius``."""
        r = self._radii[t]
        return r - self._centers[t].distance_to(point) > tol * r

    # --- topology transforms ---
    def flip(self, t: int, o: int) -> bool:
        """Swap the diagonal shared by ``t`` and ``o``.

        t: (v0, v3, v2) -> (v0, v1, v2)
        o: (v1, v2, v3) -> (v1, v0, v3)

        Outer neighbors are re-linked to whichever triangle now owns their
        edge. Returns False (no-op) when the two are not adjacent.
        """
        if t == o or t < 0 or o < 0 or self.find_adjacent_index(t, o) == INDEX_NOT_FOUND:
            return False
        v0 = self.opposite_vertex(t, o)
        v1 = self.opposite_vertex(o, t)
        if v1 == INDEX_NOT_FOUND:
            raise MeshInvariantError(f"triangle {o} does not link back to its neighbor {t}")

        tv = self._vertices[t]; ta = self._adjacent[t]
        ov = self._vertices[o]; oa = self._adjacent[o]
        i0 = tv.index(v0)
        i3 = (i0 + 1) % 3
        i2 = (i0 + 2) % 3
        j1 = ov.index(v1)
        j2 = (j1 + 1) % 3
        j3 = (j1 + 2) % 3
        v3 = tv[i3]
        v2 = tv[i2]
        if ov[j2] != v2 or ov[j3] != v3:
            raise MeshInvariantError(f"triangles {t} and {o} do not share an oppositely oriented edge")

        t_old3 = ta[i3]
        t_old2 = ta[i2]
        o_old3 = oa[j3]
        o_old2 = oa[j2]

        self._vertices[t] = [v0, v1, v2]
        self._adjacent[t] = [o_old3, t_old3, o]
        self._update_circumcircle(t)

        self._vertices[o] = [v1, v0, v3]
        self._adjacent[o] = [t_old2, o_old2, t]
        self._update_circumcircle(o)

        if t_old2 >= 0:
            self.change_adjacent(t_old2, t, o)
        if o_old3 >= 0:
            self.change_adjacent(o_old3, o, t)
        return True

    # --- export ---
    def points_array(self) -> np.ndarray:
        if not self._points:
            return np.empty((0, 2), dtype=np.float64)
        return np.ascontiguousarray(np.array([p.as_tuple() for p in self._points], dtype=np.float64))

    def triangles_array(self, include_tombstones: bool = False) -> np.ndarray:
        """Vertex table as (M,3) int32; tombstoned rows are dropped unless requested."""
        rows = self._vertices if include_tombstones else [self._vertices[t] for t in self.active_indices()]
        if not rows:
            return np.empty((0, 3), dtype=np.int32)
        return np.ascontiguousarray(np.array(rows, dtype=np.int32))

    def adjacency_array(self, include_tombstones: bool = False) -> np.ndarray:
        rows = self._adjacent if include_tombstones else [self._adjacent[t] for t in self.active_indices()]
        if not rows:
            return np.empty((0, 3), dtype=np.int32)
        return np.ascontiguousarray(np.array(rows, dtype=np.int32))


class Triangle:
    """Handle on one live row of a :class:`TriangleMesh`.

    Handles compare equal when they point at the same row of the same mesh.
    Neighbor arguments accept either handles or raw indices.
    """
    __slots__ = ('mesh', 'index')

    def __init__(self, mesh: TriangleMesh, index: int):
        self.mesh = mesh
        self.index = int(index)

    def __eq__(self, other):
        if not isinstance(other, Triangle):
            return NotImplemented
        return self.mesh is other.mesh and self.index == other.index

    def __hash__(self):
        return hash((id(self.mesh), self.index))

    def __repr__(self):
        pts = ", ".join(f"({p.x:g}, {p.y:g})" for p in self.points)
        return f"Triangle#{self.index}[{pts}]"

    def _handle(self, t: Optional[int]) -> Optional['Triangle']:
        if t is None or t < 0:
            return None
        return Triangle(self.mesh, t)

    @staticmethod
    def _index(other) -> int:
        return other.index if isinstance(other, Triangle) else int(other)

    def _vertex_id(self, vertex) -> int:
        if isinstance(vertex, Point):
            for v in self.mesh.vertices(self.index):
                if self.mesh.point(v) == vertex:
                    return v
            return INDEX_NOT_FOUND
        return int(vertex)

    @property
    def vertex_ids(self) -> Tuple[int, int, int]:
        return self.mesh.vertices(self.index)

    @property
    def points(self) -> Tuple[Point, Point, Point]:
        return tuple(self.mesh.point(v) for v in self.mesh.vertices(self.index))

    # alias kept for renderers that only look at coordinates
    vertices = points

    @property
    def adjacent(self) -> Tuple[Optional['Triangle'], ...]:
        return tuple(self._handle(a) for a in self.mesh.adjacent(self.index))

    @property
    def circumcenter(self) -> Point:
        return self.mesh.circumcenter(self.index)

    @property
    def circumradius(self) -> float:
        return self.mesh.circumradius(self.index)

    def opposite_vertex_of(self, adjacent) -> Optional[Point]:
        v = self.mesh.opposite_vertex(self.index, self._index(adjacent))
        return self.mesh.point(v) if v != INDEX_NOT_FOUND else None

    def opposite_triangle_of(self, vertex) -> Optional['Triangle']:
        v = self._vertex_id(vertex)
        if v == INDEX_NOT_FOUND:
            return None
        return self._handle(self.mesh.opposite_triangle(self.index, v))

    def edge_index_of(self, begin, end) -> int:
        b = self._vertex_id(begin)
        e = self._vertex_id(end)
        if b == INDEX_NOT_FOUND or e == INDEX_NOT_FOUND:
            return INDEX_NOT_FOUND
        return self.mesh.edge_index(self.index, b, e)

    def has_vertex(self, vertex) -> bool:
        v = self._vertex_id(vertex)
        return v != INDEX_NOT_FOUND and self.mesh.has_vertex(self.index, v)

    def has_edge(self, begin, end) -> bool:
        return self.edge_index_of(begin, end) != INDEX_NOT_FOUND

    def has_adjacent(self, other) -> bool:
        return self.mesh.has_adjacent(self.index, self._index(other))

    def classify(self, point) -> PointPosition:
        return self.mesh.classify(self.index, Point.of(point))

    def contains_in_circumcircle(self, point) -> bool:
        return self.mesh.contains_in_circumcircle(self.index, Point.of(point))

    def change_vertex(self, old, new) -> bool:
        new_id = self.mesh.find_point(new) if isinstance(new, Point) else int(new)
        if new_id == INDEX_NOT_FOUND:
            return False
        return self.mesh.change_vertex(self.index, self._vertex_id(old), new_id)

    def change_adjacent(self, old, new) -> bool:
        new_idx = NO_NEIGHBOR if new is None else self._index(new)
        old_idx = NO_NEIGHBOR if old is None else self._index(old)
        return self.mesh.change_adjacent(self.index, old_idx, new_idx)

    def change_opposite_triangle(self, opposite_vertex, new) -> bool:
        new_idx = NO_NEIGHBOR if new is None else self._index(new)
        return self.mesh.change_opposite_triangle(self.index, self._vertex_id(opposite_vertex), new_idx)

    def flip_with(self, other) -> bool:
        return self.mesh.flip(self.index, self._index(other))

    def area(self) -> float:
        """Unsigned area."""
        a, b, c = self.points
        return 0.5 * abs((b.x - a.x) * (c.y - a.y) - (b.y - a.y) * (c.x - a.x))
