"""Reproducible point sources for demos and benchmarks."""
from __future__ import annotations

import os
from typing import List, Optional

import numpy as np

from .geometry import Point
from .io import read_points, write_points
from .logging_utils import get_logger

__all__ = ['PointProvider']

logger = get_logger('deltri.points')


class PointProvider:
    """Hands out points one at a time, replaying a saved session first.

    On construction the provider loads ``filename`` when it exists. Each
    :meth:`next_point` returns the next stored point; once the history is
    exhausted it draws a uniform random point in
    ``[min_x, max_x) x [min_y, max_y)`` and appends it to the history, so
    :meth:`save` persists exactly the sequence handed out so far plus any
    replayed points not yet consumed.
    """

    def __init__(self, filename: Optional[str], min_x: float, max_x: float,
                 min_y: float, max_y: float, seed: Optional[int] = None):
        if not (max_x > min_x and max_y > min_y):
            raise ValueError(f"empty bounds: x [{min_x}, {max_x}), y [{min_y}, {max_y})")
        self.filename = filename
        self.min_x = float(min_x)
        self.max_x = float(max_x)
        self.min_y = float(min_y)
        self.max_y = float(max_y)
        self._rng = np.random.RandomState(seed)
        self._next = 0
        self.points: List[Point] = []
        if filename and os.path.exists(filename):
            self.points = [Point(float(x), float(y)) for x, y in read_points(filename)]
            logger.info("replaying %d points from %s", len(self.points), filename)

    def __len__(self) -> int:
        return len(self.points)

    def _random_point(self) -> Point:
        x = self._rng.uniform(self.min_x, self.max_x)
        y = self._rng.uniform(self.min_y, self.max_y)
        return Point(float(x), float(y))

    def next_point(self) -> Point:
        if self._next >= len(self.points):
            self.points.append(self._random_point())
        p = self.points[self._next]
        self._next += 1
        return p

    def take(self, n: int) -> List[Point]:
        return [self.next_point() for _ in range(int(n))]

    def reset(self) -> None:
        """Forget the history; the next point is freshly generated."""
        self.points.clear()
        self._next = 0

    def save(self) -> None:
        if not self.filename:
            raise ValueError("PointProvider has no filename to save to")
        write_points(self.filename, [p.as_tuple() for p in self.points] or np.empty((0, 2)))
        logger.debug("saved %d points to %s", len(self.points), self.filename)
