"""Smoke test to ensure the flat top-level API imports and resolves."""


def test_import_deltri_smoke():
    import deltri
    assert isinstance(deltri.__version__, str)
    tri = deltri.triangulate([(0, 0), (1, 0), (0, 1)])
    assert len(tri) == 1
    assert issubclass(deltri.DegenerateInputError, ValueError)
    assert issubclass(deltri.MeshInvariantError, RuntimeError)
    # lazy proxy resolves on attribute access
    assert callable(deltri.visualization.plot_triangulation)
    for name in deltri.__all__:
        assert hasattr(deltri, name), name


def test_visualization_proxy_loads_once():
    import deltri
    from deltri.core import visualization
    first = deltri.visualization.plot_triangulation
    assert first is visualization.plot_triangulation
    assert deltri.visualization.plot_triangulation is first
    assert 'plot_triangulation' in dir(deltri.visualization)
