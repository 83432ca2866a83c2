"""Tests for point-set persistence and VTK export."""
import numpy as np
import pytest

from deltri.core.io import read_points, write_points, write_vtk
from deltri.core.triangulator import triangulate


def test_points_roundtrip_is_exact(tmp_path, rng):
    pts = rng.uniform(-1e3, 1e3, size=(25, 2))
    path = tmp_path / "points.txt"
    write_points(str(path), pts)
    back = read_points(str(path))
    assert back.dtype == np.float64
    np.testing.assert_array_equal(back, pts)


def test_read_points_ignores_comments_and_blank_lines(tmp_path):
    path = tmp_path / "points.txt"
    path.write_text("# saved session\n0 0\n\n1.5 2\n-3 4e-1\n")
    back = read_points(str(path))
    assert back.tolist() == [[0.0, 0.0], [1.5, 2.0], [-3.0, 0.4]]


def test_read_points_single_line(tmp_path):
    path = tmp_path / "one.txt"
    path.write_text("1 2\n")
    assert read_points(str(path)).shape == (1, 2)


def test_read_points_empty_file(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("")
    assert read_points(str(path)).shape == (0, 2)


def test_read_points_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_points(str(tmp_path / "missing.txt"))
    bad = tmp_path / "bad.txt"
    bad.write_text("1 2 3\n4 5 6\n")
    with pytest.raises(ValueError):
        read_points(str(bad))


def test_write_points_accepts_point_lists(tmp_path):
    path = tmp_path / "pts.txt"
    write_points(str(path), [(0.25, 0.5), (1, 2)])
    assert path.read_text().split() == ["0.25", "0.5", "1", "2"]


def test_write_vtk_basic(tmp_path):
    points = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0]], dtype=np.float64)
    triangles = np.array([[0, 1, 2]], dtype=np.int32)
    output_file = tmp_path / "mesh.vtk"
    write_vtk(str(output_file), points, triangles, title="Test Mesh")

    content = output_file.read_text()
    assert "# vtk DataFile Version 2.0" in content
    assert "Test Mesh" in content
    assert "DATASET UNSTRUCTURED_GRID" in content
    assert "POINTS 3 double" in content
    assert "CELLS 1 4" in content
    assert "CELL_TYPES 1" in content
    assert "3 0 1 2" in content


def test_write_vtk_triangulation_with_cell_data(tmp_path, square_with_center):
    tri = triangulate(square_with_center)
    output_file = tmp_path / "delaunay.vtk"
    write_vtk(str(output_file), tri.points, tri.triangles,
              cell_data={'circumradius': tri.circumradii},
              point_data={'shift': np.zeros((5, 2))})
    content = output_file.read_text()
    assert "POINTS 5 double" in content
    assert "CELLS 4 16" in content
    assert "CELL_DATA 4" in content
    assert "SCALARS circumradius double 1" in content
    assert "POINT_DATA 5" in content
    assert "VECTORS shift double" in content


def test_write_vtk_warns_on_unsupported_field(tmp_path):
    points = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0]])
    with pytest.warns(UserWarning, match="unsupported shape"):
        write_vtk(str(tmp_path / "w.vtk"), points, [[0, 1, 2]],
                  cell_data={'bad': np.zeros((1, 4))})


def test_write_vtk_invalid_shapes(tmp_path):
    with pytest.raises(ValueError, match="points must be"):
        write_vtk(str(tmp_path / "x.vtk"), np.zeros((3, 4)), [[0, 1, 2]])
    with pytest.raises(ValueError, match="triangles must be"):
        write_vtk(str(tmp_path / "x.vtk"), np.zeros((3, 2)), [[0, 1]])


def test_write_vtk_cell_block(tmp_path):
    points = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])
    output_file = tmp_path / "two.vtk"
    write_vtk(str(output_file), points, [[0, 3, 2], [2, 1, 0]])
    lines = output_file.read_text().splitlines()
    cells = lines.index("CELLS 2 8")
    assert lines[cells + 1:cells + 3] == ["3 0 3 2", "3 2 1 0"]
    types = lines.index("CELL_TYPES 2")
    assert lines[types + 1:types + 3] == ["5", "5"]
    assert lines[lines.index("POINTS 4 double") + 1].split()[2] == "0.0000000000000000e+00"
