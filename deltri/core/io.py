"""Point-set persistence and mesh export for deltri.

- read_points / write_points: plain text, one ``x y`` pair per line
- write_vtk: export a triangulation to legacy VTK for ParaView/VisIt

All functions use the canonical array format:
    points: (N, 2) float64 array
    triangles: (M, 3) int32 array
"""
from __future__ import annotations
import os
import numpy as np
from typing import Optional, Dict
import warnings

from .geometry import as_point_array


def read_points(filepath: str) -> np.ndarray:
    """Read points written by :func:`write_points`.

    Blank lines and lines starting with ``#`` are ignored. Returns an
    (N, 2) float64 array; an empty file yields shape (0, 2).

    Raises
    ------
    FileNotFoundError
        If ``filepath`` does not exist.
    ValueError
        If a line does not hold exactly two numbers.
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Point file not found: {filepath}")
    with warnings.catch_warnings():
        # numpy warns on empty input; an empty point file is valid
        warnings.simplefilter('ignore', UserWarning)
        data = np.loadtxt(filepath, dtype=np.float64, comments='#', ndmin=2)
    if data.size == 0:
        return np.empty((0, 2), dtype=np.float64)
    if data.shape[1] != 2:
        raise ValueError(f"expected 2 columns in {filepath}, got {data.shape[1]}")
    return as_point_array(data)


def write_points(filepath: str, points) -> None:
    """Write points as ``x y`` lines with full double precision."""
    pts = as_point_array(points)
    np.savetxt(filepath, pts, fmt='%.17g', delimiter=' ')


def _write_field(f, name: str, data: np.ndarray, kind: str) -> None:
    if data.ndim == 1:
        f.write(f"SCALARS {name} double 1\n")
        f.write("LOOKUP_TABLE default\n")
        for val in data:
            f.write(f"{val:.16e}\n")
    elif data.ndim == 2 and data.shape[1] in (2, 3):
        if data.shape[1] == 2:
            data = np.column_stack([data, np.zeros(len(data))])
        f.write(f"VECTORS {name} double\n")
        for vec in data:
            f.write(f"{vec[0]:.16e} {vec[1]:.16e} {vec[2]:.16e}\n")
    else:
        warnings.warn(f"Skipping {kind}['{name}'] with unsupported shape {data.shape}")


def write_vtk(filepath: str,
              points: np.ndarray,
              triangles: np.ndarray,
              point_data: Optional[Dict[str, np.ndarray]] = None,
              cell_data: Optional[Dict[str, np.ndarray]] = None,
              title: str = "deltri triangulation") -> None:
    """Write ``tri.points`` / ``tri.triangles`` as an ASCII legacy VTK grid.

    2D points get z=0. Fields are scalars (length N or M) or 2/3-vectors,
    e.g. ``cell_data={'circumradius': tri.circumradii}``.
    """
    xyz = np.asarray(points, dtype=np.float64)
    cells = np.asarray(triangles)
    if xyz.ndim != 2 or xyz.shape[1] not in (2, 3):
        raise ValueError(f"points must be (N, 2) or (N, 3), got shape {xyz.shape}")
    if cells.size == 0:
        cells = np.empty((0, 3), dtype=np.int32)
    if cells.ndim != 2 or cells.shape[1] != 3:
        raise ValueError(f"triangles must be (M, 3), got shape {cells.shape}")
    if xyz.shape[1] == 2:
        xyz = np.column_stack([xyz, np.zeros(len(xyz))])
    n, m = len(xyz), len(cells)

    with open(filepath, 'w') as f:
        f.write(f"# vtk DataFile Version 2.0\n{title}\nASCII\nDATASET UNSTRUCTURED_GRID\n")
        f.write(f"POINTS {n} double\n")
        np.savetxt(f, xyz, fmt='%.16e')
        # leading 3 is the index count; cell type 5 is VTK_TRIANGLE
        f.write(f"\nCELLS {m} {4 * m}\n")
        np.savetxt(f, np.column_stack([np.full(m, 3), cells]).astype(np.int64), fmt='%d')
        f.write(f"\nCELL_TYPES {m}\n")
        f.write("5\n" * m)

        if point_data:
            f.write(f"\nPOINT_DATA {n}\n")
            for name, data in point_data.items():
                _write_field(f, name, np.asarray(data), 'point_data')
        if cell_data:
            f.write(f"\nCELL_DATA {m}\n")
            for name, data in cell_data.items():
                _write_field(f, name, np.asarray(data), 'cell_data')


__all__ = ['read_points', 'write_points', 'write_vtk']
