"""Structural and geometric checks for triangulations.

Every check returns ``(ok, messages)``; messages are capped so a badly
broken mesh does not flood the caller.
"""
from __future__ import annotations
from collections import defaultdict
from typing import List, Tuple

import numpy as np

from .constants import (
	NO_NEIGHBOR, PLACEHOLDER, INDEX_NOT_FOUND, EPS_AREA, EPS_CHECK_DELAUNAY, EPS_CHECK_COVERAGE,
)
from .geometry import triangles_signed_areas, convex_hull_area
from .mesh import PositionKind

__all__ = [
	'build_edge_to_tri_map','check_mesh_conformity','check_adjacency_symmetry',
	'check_orientation','check_delaunay','check_coverage','check_vertices_present',
	'check_triangulation',
]

_MAX_MSGS = 50

CheckResult = Tuple[bool, List[str]]


def build_edge_to_tri_map(triangles):
	"""Map undirected edge (min, max) -> list of triangle rows using it."""
	edge_map = defaultdict(list)
	for ti, tri in enumerate(np.asarray(triangles, dtype=np.int32)):
		if np.all(tri == -1):
			continue
		a, b, c = int(tri[0]), int(tri[1]), int(tri[2])
		for u, v in ((a, b), (b, c), (c, a)):
			edge_map[(min(u, v), max(u, v))].append(ti)
	return edge_map


def check_mesh_conformity(points, triangles) -> CheckResult:
	"""Index range, non-zero area and at most two triangles per edge."""
	triangles = np.ascontiguousarray(np.asarray(triangles, dtype=np.int32))
	points = np.ascontiguousarray(np.asarray(points, dtype=np.float64))
	if triangles.size == 0:
		return False, ["No active triangles."]
	msgs = []
	ok = True
	if triangles.max() >= len(points) or triangles.min() < 0:
		return False, ["Triangle indices out of range."]
	areas = np.abs(triangles_signed_areas(points, triangles))
	for li in np.nonzero(areas < EPS_AREA)[0][:_MAX_MSGS]:
		msgs.append(f"Triangle {int(li)} has near-zero area ({areas[li]:.3e}).")
		ok = False
	for edge, tris in build_edge_to_tri_map(triangles).items():
		if len(tris) > 2:
			msgs.append(f"Edge {edge} shared by {len(tris)} triangles: {tris}")
			ok = False
			if len(msgs) >= _MAX_MSGS:
				break
	return ok, msgs


def check_adjacency_symmetry(mesh) -> CheckResult:
	"""Every neighbor link is mirrored and the two rows share the edge."""
	msgs = []
	for t in mesh.active_indices():
		verts = mesh.vertices(t)
		for i, n in enumerate(mesh.adjacent(t)):
			if n == NO_NEIGHBOR:
				continue
			if n == PLACEHOLDER:
				msgs.append(f"Triangle {t} slot {i} still holds the placeholder.")
			elif not mesh.is_active(n):
				msgs.append(f"Triangle {t} slot {i} points at deleted triangle {n}.")
			else:
				back = mesh.find_adjacent_index(n, t)
				begin, end = verts[(i + 1) % 3], verts[(i + 2) % 3]
				if back == INDEX_NOT_FOUND:
					msgs.append(f"Triangle {n} does not link back to {t}.")
				elif mesh.edge_index(n, end, begin) != back:
					msgs.append(f"Triangles {t} and {n} are linked but do not share edge ({begin}, {end}).")
			if len(msgs) >= _MAX_MSGS:
				return False, msgs
	return not msgs, msgs


def check_orientation(points, triangles) -> CheckResult:
	"""All triangles are stored clockwise (negative signed area)."""
	areas = triangles_signed_areas(points, triangles)
	bad = np.nonzero(areas >= 0.0)[0]
	msgs = [f"Triangle {int(i)} is not clockwise (area {areas[i]:.3e})." for i in bad[:_MAX_MSGS]]
	return bad.size == 0, msgs


def check_delaunay(tri, tol: float = EPS_CHECK_DELAUNAY, chunk: int = 256) -> CheckResult:
	"""Brute-force empty-circumcircle check of a Triangulation.

	A point violates a triangle when it is not one of its vertices and lies
	inside the circumcircle by more than ``tol * radius``.
	"""
	pts = np.asarray(tri.points, dtype=np.float64)
	T = np.asarray(tri.triangles, dtype=np.int32)
	if T.size == 0:
		return True, []
	centers = tri.circumcenters
	radii = tri.circumradii
	msgs = []
	for s in range(0, T.shape[0], chunk):
		c = centers[s:s + chunk]
		r = radii[s:s + chunk]
		d = np.sqrt(((c[:, None, :] - pts[None, :, :]) ** 2).sum(axis=2))
		inside = (r[:, None] - d) > tol * r[:, None]
		rows = np.arange(c.shape[0])
		for k in range(3):
			inside[rows, T[s:s + chunk, k]] = False
		for li, pi in zip(*np.nonzero(inside)):
			msgs.append(f"Point {int(pi)} lies inside the circumcircle of triangle {s + int(li)}.")
			if len(msgs) >= _MAX_MSGS:
				return False, msgs
	return not msgs, msgs


def check_coverage(tri, rel_tol: float = EPS_CHECK_COVERAGE) -> CheckResult:
	"""Triangles tile the convex hull: total area equals the hull area."""
	pts = np.asarray(tri.points, dtype=np.float64)
	area = float(np.abs(triangles_signed_areas(pts, tri.triangles)).sum())
	hull = convex_hull_area(pts)
	if abs(area - hull) > rel_tol * max(hull, 1.0):
		return False, [f"Triangle area {area:.12g} differs from convex hull area {hull:.12g}."]
	return True, []


def check_vertices_present(tri) -> CheckResult:
	"""Every inserted point is classified VERTEX by at least one triangle."""
	msgs = []
	for k, (x, y) in enumerate(np.asarray(tri.points)):
		if not any(t.classify((x, y)).kind is PositionKind.VERTEX for t in tri):
			msgs.append(f"Point {k} ({x:g}, {y:g}) is not a vertex of any triangle.")
			if len(msgs) >= _MAX_MSGS:
				break
	return not msgs, msgs


def check_triangulation(tri, tol: float = EPS_CHECK_DELAUNAY) -> CheckResult:
	"""Run every check above and concatenate the messages."""
	if len(tri) == 0:
		# only a degenerate point set may come back without triangles
		if convex_hull_area(tri.points) == 0.0:
			return True, []
		return False, [f"No triangles for {len(tri.points)} points with a non-zero hull area."]
	msgs = []
	for ok, m in (
		check_mesh_conformity(tri.points, tri.triangles),
		check_adjacency_symmetry(tri.mesh),
		check_orientation(tri.points, tri.triangles),
		check_delaunay(tri, tol=tol),
		check_coverage(tri),
	):
		if not ok:
			msgs.extend(m)
	return not msgs, msgs
