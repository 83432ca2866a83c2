"""Public package API for deltri, incremental 2D Delaunay triangulation.

This facade provides a flat import surface on top of the internal
implementation package ``deltri.core`` while deferring the matplotlib
import until the renderer is first used, keeping ``import deltri`` fast.

Example
-------
    from deltri import triangulate
    tri = triangulate([(0, 0), (1, 0), (0, 1), (1, 1), (0.5, 0.5)])
    tri.triangles      # (M, 3) int32 into tri.points

The deeper modules (``deltri.core.*``) are considered internal and may
change; rely on this layer for public symbols.
"""
from importlib import import_module as _imp
import logging as _logging

try:
    from importlib.metadata import version as _pkg_version, PackageNotFoundError as _NotFound
    __version__ = _pkg_version("deltri-mesh")  # populated when installed
except _NotFound:  # pragma: no cover - source checkout
    __version__ = "0.0.0+dev"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

# Eager light-weight submodules
_geom = _imp('deltri.core.geometry')
_const = _imp('deltri.core.constants')
_conf = _imp('deltri.core.conformity')
_mesh = _imp('deltri.core.mesh')
_tri = _imp('deltri.core.triangulator')
_config = _imp('deltri.core.config')
_stats = _imp('deltri.core.stats')
_io = _imp('deltri.core.io')
_points = _imp('deltri.core.points')
_log = _imp('deltri.core.logging_utils')


def _lazy_module(mod_name):
    class _ModuleProxy:
        __slots__ = ('_m',)
        def _load(self):  # type: ignore
            # read the slot directly; a miss must not re-enter __getattr__
            try:
                return object.__getattribute__(self, '_m')
            except AttributeError:
                m = _imp(mod_name)
                object.__setattr__(self, '_m', m)
                return m
        def __getattr__(self, item):  # type: ignore
            return getattr(self._load(), item)
        def __dir__(self):  # type: ignore
            return dir(self._load())
    return _ModuleProxy()


# matplotlib is only imported when a plot is requested
visualization = _lazy_module('deltri.core.visualization')

# Entry points
triangulate = _tri.triangulate
Triangulation = _tri.Triangulation
Triangulator = _tri.Triangulator
TriangulatorConfig = _config.TriangulatorConfig
TriangulationStats = _stats.TriangulationStats
PointProvider = _points.PointProvider

# Geometry primitives
Point = _geom.Point
PointSide = _geom.PointSide
side = _geom.side
Triangle = _mesh.Triangle
PositionKind = _mesh.PositionKind
PointPosition = _mesh.PointPosition

# Errors
DegenerateInputError = _tri.DegenerateInputError
MeshInvariantError = _mesh.MeshInvariantError

# Logging
configure_logging = _log.configure_logging
get_logger = _log.get_logger

# I/O functions
read_points = _io.read_points
write_points = _io.write_points
write_vtk = _io.write_vtk

# Namespace submodules for exploratory users
geometry = _geom
constants = _const
conformity = _conf
mesh = _mesh
stats = _stats
io = _io

__all__ = [
    '__version__',
    # triangulation
    'triangulate','Triangulation','Triangulator','TriangulatorConfig','TriangulationStats',
    # geometry primitives
    'Point','PointSide','side','Triangle','PositionKind','PointPosition',
    # errors
    'DegenerateInputError','MeshInvariantError',
    # utilities
    'PointProvider','configure_logging','get_logger','read_points','write_points','write_vtk',
    # submodules / namespaces
    'geometry','constants','conformity','mesh','stats','io','visualization',
]
