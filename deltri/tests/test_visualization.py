from deltri.core.triangulator import triangulate, Triangulation
from deltri.core.visualization import plot_triangulation


def test_plot_with_probe(tmp_path, square_with_center):
    tri = triangulate(square_with_center)
    out = tmp_path / "tri.png"
    hits = plot_triangulation(tri, str(out), probe=(0.5, 0.2), show_circumcircles=True)
    assert out.exists() and out.stat().st_size > 0
    assert len(hits) == 1


def test_plot_probe_outside(tmp_path, square_with_center):
    tri = triangulate(square_with_center)
    assert plot_triangulation(tri, str(tmp_path / "out.png"), probe=(5.0, 5.0)) == []


def test_plot_empty(tmp_path):
    out = tmp_path / "empty.png"
    assert plot_triangulation(Triangulation.empty(), str(out)) == []
    assert out.exists()
