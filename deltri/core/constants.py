"""Central numerical tolerances and mesh sentinels.

This module centralizes the tiny numeric thresholds used by the predicates
and the triangulator so they can be referenced without scattering literals.
"""
from __future__ import annotations

import math

# Geometry tolerances
EPS_SIDE: float = math.ulp(0.0)       # |cross| below this is treated as colinear
EPS_EQUAL: float = math.ulp(0.0)      # |dx| + |dy| below this means coincident points
EPS_INCIRCLE: float = 1e-12           # relative margin for the strict flip criterion

# Validation tolerances
EPS_AREA: float = 1e-12               # triangles below this absolute area count as degenerate
EPS_CHECK_DELAUNAY: float = 1e-9      # relative margin allowed by the brute-force Delaunay check
EPS_CHECK_COVERAGE: float = 1e-9      # relative mismatch allowed between mesh and hull area

# Adjacency sentinels (arena indices are >= 0)
NO_NEIGHBOR: int = -1                 # hull edge
PLACEHOLDER: int = -2                 # neighbor deleted during super-structure removal
INDEX_NOT_FOUND: int = -1

# Super-structure sizing relative to the larger bounding box dimension
SUPER_EDGE_FACTOR: float = 1.5

__all__ = [
    'EPS_SIDE',
    'EPS_EQUAL',
    'EPS_INCIRCLE',
    'EPS_AREA',
    'EPS_CHECK_DELAUNAY',
    'EPS_CHECK_COVERAGE',
    'NO_NEIGHBOR',
    'PLACEHOLDER',
    'INDEX_NOT_FOUND',
    'SUPER_EDGE_FACTOR',
]
