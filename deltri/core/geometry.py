"""Geometry primitives: points, side predicate, polar ordering, circumcircles.

The scalar predicates work on :class:`Point` values and are the single
source of truth for inside/outside/on-edge decisions in the triangulator.
The vectorized helpers at the bottom operate on canonical numpy arrays
(points: (N,2) float64, triangles: (M,3) int32) and are used by the
validators and the renderer.
"""
from __future__ import annotations
import math
import enum
from dataclasses import dataclass
from typing import Callable, Iterable, Tuple

import numpy as np
from scipy.spatial import ConvexHull, QhullError

from .constants import EPS_SIDE, EPS_EQUAL

__all__ = [
	'Point','PointSide','side','cross_product','circumcircle',
	'polar_angle_key','PolarAngleComparator',
	'as_point_array','triangle_area','triangles_signed_areas','convex_hull_area',
]


@dataclass(frozen=True, eq=False)
class Point:
	"""2D coordinate with tolerance-based equality.

	Two points are equal when they coincide exactly or when the sum of the
	absolute coordinate differences is below EPS_EQUAL.
	"""
	x: float
	y: float

	def __eq__(self, other):
		if not isinstance(other, Point):
			return NotImplemented
		if self.x == other.x and self.y == other.y:
			return True
		return abs(self.x - other.x) + abs(self.y - other.y) < EPS_EQUAL

	def __hash__(self):
		return hash((self.x, self.y))

	def __iter__(self):
		yield self.x
		yield self.y

	def distance_to(self, other: 'Point') -> float:
		return math.hypot(self.x - other.x, self.y - other.y)

	def as_tuple(self) -> Tuple[float, float]:
		return (self.x, self.y)

	@classmethod
	def of(cls, value) -> 'Point':
		"""Coerce a Point, an (x, y) pair or a length-2 array into a Point."""
		if isinstance(value, Point):
			return value
		x, y = value
		return cls(float(x), float(y))


class PointSide(enum.Enum):
	LEFT = 'left'
	CENTER = 'center'
	RIGHT = 'right'


def cross_product(beg1: Point, end1: Point, beg2: Point, end2: Point) -> float:
	"""Cross product of vectors (end1 - beg1) and (end2 - beg2)."""
	x1 = end1.x - beg1.x
	y1 = end1.y - beg1.y
	x2 = end2.x - beg2.x
	y2 = end2.y - beg2.y
	return x1 * y2 - x2 * y1


def side(begin: Point, end: Point, point: Point) -> PointSide:
	"""Side of ``point`` relative to the directed line begin->end.

	LEFT is the counter-clockwise side in a y-up frame. CENTER is returned
	only when the cross product magnitude is below EPS_SIDE, which makes it an
	exact colinearity test.
	"""
	d = cross_product(begin, point, begin, end)
	if abs(d) < EPS_SIDE:
		return PointSide.CENTER
	if d < 0:
		return PointSide.LEFT
	return PointSide.RIGHT


def circumcircle(a: Point, b: Point, c: Point) -> Tuple[Point, float]:
	"""Return (center, radius) of the circle through a, b and c.

	Raises ValueError when the three points are colinear.
	"""
	bx = b.x - a.x
	by = b.y - a.y
	cx = c.x - a.x
	cy = c.y - a.y
	d = 2.0 * (bx * cy - by * cx)
	if d == 0.0:
		raise ValueError(f"colinear points have no circumcircle: {a}, {b}, {c}")
	b2 = bx * bx + by * by
	c2 = cx * cx + cy * cy
	ox = (cy * b2 - by * c2) / d
	oy = (bx * c2 - cx * b2) / d
	center = Point(ox + a.x, oy + a.y)
	return center, center.distance_to(a)


def polar_angle_key(center: Point) -> Callable[[Point], Tuple[float, float]]:
	"""Sort key ordering points counter-clockwise around ``center``.

	Angles come from atan2 and lie in (-pi, pi]; equal angles are ordered by
	increasing distance from the pivot.
	"""
	def key(p: Point) -> Tuple[float, float]:
		return (math.atan2(p.y - center.y, p.x - center.x), center.distance_to(p))
	return key


class PolarAngleComparator:
	"""cmp-style comparator by polar angle around a pivot.

	Usable with ``functools.cmp_to_key``; returns a negative number when the
	first point comes first in counter-clockwise order.
	"""
	__slots__ = ('center',)

	def __init__(self, center: Point):
		self.center = center

	def __call__(self, fst: Point, snd: Point) -> int:
		a1 = math.atan2(fst.y - self.center.y, fst.x - self.center.x)
		a2 = math.atan2(snd.y - self.center.y, snd.x - self.center.x)
		return (a1 > a2) - (a1 < a2)


# ---------------------------------------------------------------------------
# Array helpers
# ---------------------------------------------------------------------------

def as_point_array(points) -> np.ndarray:
	"""Canonical (N,2) float64 C-contiguous copy of ``points``.

	Accepts Point objects, (x, y) pairs or an array. Raises ValueError for a
	wrong shape or non-finite coordinates.
	"""
	if isinstance(points, np.ndarray):
		arr = np.asarray(points, dtype=np.float64)
	else:
		seq = list(points)
		if not seq:
			return np.empty((0, 2), dtype=np.float64)
		arr = np.asarray([tuple(Point.of(p)) for p in seq], dtype=np.float64)
	if arr.size == 0:
		return np.empty((0, 2), dtype=np.float64)
	if arr.ndim != 2 or arr.shape[1] != 2:
		raise ValueError(f"points must have shape (N,2), got {arr.shape}")
	if not np.all(np.isfinite(arr)):
		raise ValueError("points must have finite coordinates")
	return np.ascontiguousarray(arr)


def triangle_area(p0, p1, p2):
	"""Signed area; negative for clockwise vertex order."""
	p0 = np.asarray(tuple(p0), dtype=np.float64)
	p1 = np.asarray(tuple(p1), dtype=np.float64)
	p2 = np.asarray(tuple(p2), dtype=np.float64)
	d1 = p1 - p0; d2 = p2 - p0
	return 0.5 * float(d1[0] * d2[1] - d1[1] * d2[0])


def triangles_signed_areas(points, tris):
	"""Vectorized signed area for a batch of triangles.

	points: (N,2) float array
	tris:   (M,3) int array
	Returns: (M,) float64 array of signed areas (0.5 * cross).
	"""
	pts = np.asarray(points, dtype=np.float64)
	T = np.asarray(tris, dtype=np.int32)
	if T.size == 0:
		return np.empty((0,), dtype=float)
	p0 = pts[T[:, 0]]; p1 = pts[T[:, 1]]; p2 = pts[T[:, 2]]
	d1 = p1 - p0; d2 = p2 - p0
	return 0.5 * (d1[:, 0] * d2[:, 1] - d1[:, 1] * d2[:, 0])


def convex_hull_area(points: Iterable) -> float:
	"""Area of the convex hull of ``points``; 0.0 for degenerate sets."""
	pts = as_point_array(points)
	if pts.shape[0] < 3:
		return 0.0
	try:
		# in 2D qhull reports the enclosed area as ``volume``
		return float(ConvexHull(pts).volume)
	except QhullError:
		return 0.0
