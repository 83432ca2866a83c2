"""Validators must accept good meshes and report each kind of breakage."""
import numpy as np

from deltri.core.constants import PLACEHOLDER
from deltri.core.conformity import (
    build_edge_to_tri_map, check_mesh_conformity, check_adjacency_symmetry,
    check_orientation, check_delaunay, check_coverage, check_triangulation,
)
from deltri.core.geometry import Point
from deltri.core.mesh import TriangleMesh
from deltri.core.triangulator import Triangulation, triangulate


def square_points_and_triangles():
    points = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])
    triangles = np.array([[0, 3, 2], [2, 1, 0]], dtype=np.int32)
    return points, triangles


def test_edge_map_counts_shared_edges():
    _, triangles = square_points_and_triangles()
    edge_map = build_edge_to_tri_map(triangles)
    assert len(edge_map) == 5
    assert sorted(edge_map[(0, 2)]) == [0, 1]
    assert edge_map[(0, 1)] == [1]


def test_edge_map_skips_tombstones():
    triangles = np.array([[0, 1, 2], [-1, -1, -1]], dtype=np.int32)
    assert len(build_edge_to_tri_map(triangles)) == 3


def test_mesh_conformity_detects_problems():
    points, triangles = square_points_and_triangles()
    ok, msgs = check_mesh_conformity(points, triangles)
    assert ok, msgs

    ok, msgs = check_mesh_conformity(points, np.array([[0, 1, 7]]))
    assert not ok and "out of range" in msgs[0]

    flat = np.vstack([points, [[2.0, 0.0]]])
    ok, msgs = check_mesh_conformity(flat, np.array([[0, 1, 4]]))
    assert not ok and "near-zero area" in msgs[0]

    # a third triangle on the 0-2 diagonal
    extra = np.vstack([points, [[2.0, -1.0]]])
    tris = np.vstack([triangles, [[0, 2, 4]]])
    ok, msgs = check_mesh_conformity(extra, tris)
    assert not ok and any("shared by 3" in m for m in msgs)

    ok, msgs = check_mesh_conformity(points, np.empty((0, 3), dtype=np.int32))
    assert not ok


def test_orientation():
    points, triangles = square_points_and_triangles()
    assert check_orientation(points, triangles) == (True, [])
    ok, msgs = check_orientation(points, triangles[:, ::-1])
    assert not ok and len(msgs) == 2


def test_adjacency_symmetry_reports_one_sided_link():
    mesh = TriangleMesh()
    for p in [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]:
        mesh.add_point(Point(*p))
    t = mesh.add_triangle(0, 3, 2)
    o = mesh.add_triangle(2, 1, 0)
    mesh.set_adjacent(t, 1, o)
    ok, msgs = check_adjacency_symmetry(mesh)
    assert not ok and "does not link back" in msgs[0]

    mesh.set_adjacent(o, 1, t)
    assert check_adjacency_symmetry(mesh) == (True, [])

    mesh.set_adjacent(t, 0, PLACEHOLDER)
    ok, msgs = check_adjacency_symmetry(mesh)
    assert not ok and "placeholder" in msgs[0]


def test_adjacency_symmetry_reports_wrong_edge():
    mesh = TriangleMesh()
    for p in [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]:
        mesh.add_point(Point(*p))
    t = mesh.add_triangle(0, 3, 2)
    o = mesh.add_triangle(2, 1, 0)
    # linked through slots whose edges differ
    mesh.set_adjacent(t, 0, o)
    mesh.set_adjacent(o, 0, t)
    ok, msgs = check_adjacency_symmetry(mesh)
    assert not ok and "do not share edge" in msgs[0]


class _FakeTriangulation:
    """Just the attributes the array-based checks read."""

    def __init__(self, points, triangles):
        from deltri.core.geometry import circumcircle
        self.points = np.asarray(points, dtype=float)
        self.triangles = np.asarray(triangles, dtype=np.int32)
        circles = [circumcircle(*(Point(*self.points[v]) for v in row)) for row in self.triangles]
        self.circumcenters = np.array([c.as_tuple() for c, _ in circles])
        self.circumradii = np.array([r for _, r in circles])

    def __len__(self):
        return len(self.triangles)


def test_delaunay_check_flags_bad_diagonal():
    # thin rhombus: the long diagonal 0-2 violates the empty-circle property
    points = [(0.0, 0.0), (1.0, -0.2), (2.0, 0.0), (1.0, 0.2)]
    bad = _FakeTriangulation(points, [[0, 3, 2], [2, 1, 0]])
    ok, msgs = check_delaunay(bad)
    assert not ok and msgs

    good = _FakeTriangulation(points, [[3, 1, 0], [1, 3, 2]])
    assert check_delaunay(good) == (True, [])


def test_coverage_flags_missing_triangle():
    points, triangles = square_points_and_triangles()
    assert check_coverage(_FakeTriangulation(points, triangles)) == (True, [])
    ok, msgs = check_coverage(_FakeTriangulation(points, triangles[:1]))
    assert not ok and "convex hull area" in msgs[0]


def test_check_triangulation_on_real_result(rng):
    tri = triangulate(rng.rand(40, 2))
    assert check_triangulation(tri) == (True, [])


def test_check_triangulation_rejects_empty_result_for_real_hull():
    points, _ = square_points_and_triangles()
    ok, msgs = check_triangulation(_FakeTriangulation(points, np.empty((0, 3))))
    assert not ok and "No triangles" in msgs[0]


def test_check_triangulation_accepts_empty_degenerate_result():
    assert check_triangulation(Triangulation.empty()) == (True, [])
    colinear = _FakeTriangulation([(0.0, 0.0), (1.0, 1.0), (2.0, 2.0)], np.empty((0, 3)))
    assert check_triangulation(colinear) == (True, [])
