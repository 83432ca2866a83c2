"""Point-location strategies for the triangulator.

A locator answers one question: which live triangle of the mesh holds a
point, and how (inside, on an edge, or at a vertex). Both strategies return
``(triangle_index, PointPosition)`` or ``None`` when no triangle claims the
point.

- :class:`LinearScanLocator` classifies every live triangle in arena order
  and returns the first one that does not report OUTSIDE. O(n) per query.
- :class:`WalkLocator` starts from the most recent hit and steps across an
  edge that separates the current triangle from the point, choosing among
  candidate edges at random to avoid cycling. When the walk runs out of steps
  or reaches the hull it falls back to the linear scan.
"""
from __future__ import annotations

import random
from typing import Optional, Tuple

from .geometry import Point, PointSide, side
from .mesh import PointPosition, TriangleMesh
from .logging_utils import get_logger

__all__ = ['Locator', 'LinearScanLocator', 'WalkLocator', 'make_locator']

logger = get_logger('deltri.locate')

LocateResult = Optional[Tuple[int, PointPosition]]


class Locator:
    """Base class; subclasses implement :meth:`locate`."""

    def locate(self, mesh: TriangleMesh, point: Point) -> LocateResult:  # pragma: no cover - interface
        raise NotImplementedError

    def notify(self, t: int) -> None:
        """Hint that triangle ``t`` was just created or modified."""


class LinearScanLocator(Locator):

    def locate(self, mesh: TriangleMesh, point: Point) -> LocateResult:
        for t in mesh.active_indices():
            pos = mesh.classify(t, point)
            if not pos.is_outside:
                return t, pos
        return None


class WalkLocator(Locator):
    """Stochastic visibility walk with a linear-scan fallback.

    The walk terminates on Delaunay meshes, which is what the triangulator
    keeps between insertions; ``max_steps`` guards the intermediate states.
    """

    def __init__(self, max_steps: int = 10000, seed: int = 0):
        self.max_steps = int(max_steps)
        self._rng = random.Random(seed)
        self._last = -1
        self._fallback = LinearScanLocator()
        self.fallbacks = 0

    def notify(self, t: int) -> None:
        self._last = t

    def _start(self, mesh: TriangleMesh) -> int:
        if mesh.is_active(self._last):
            return self._last
        for t in mesh.active_indices():
            return t
        return -1

    def locate(self, mesh: TriangleMesh, point: Point) -> LocateResult:
        t = self._start(mesh)
        steps = 0
        while t >= 0 and steps < self.max_steps:
            pos = mesh.classify(t, point)
            if not pos.is_outside:
                self._last = t
                return t, pos
            v = [mesh.point(i) for i in mesh.vertices(t)]
            adj = mesh.adjacent(t)
            # (edge begin, edge end, slot of the neighbor across it)
            edges = [(v[0], v[1], 2), (v[1], v[2], 0), (v[2], v[0], 1)]
            candidates = [adj[slot] for b, e, slot in edges
                          if adj[slot] >= 0 and side(b, e, point) is PointSide.LEFT]
            if not candidates:
                break
            t = candidates[0] if len(candidates) == 1 else self._rng.choice(candidates)
            steps += 1
        self.fallbacks += 1
        logger.debug("walk gave up after %d steps at (%g, %g); scanning", steps, point.x, point.y)
        found = self._fallback.locate(mesh, point)
        if found is not None:
            self._last = found[0]
        return found


def make_locator(name: str, max_walk_steps: int = 10000, seed: int = 0) -> Locator:
    if name == 'linear':
        return LinearScanLocator()
    if name == 'walk':
        return WalkLocator(max_steps=max_walk_steps, seed=seed)
    raise ValueError(f"unknown locator {name!r}")
