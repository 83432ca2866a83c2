"""Configuration objects for the triangulator."""
from __future__ import annotations

from dataclasses import dataclass

from .constants import EPS_INCIRCLE

LOCATORS = ('linear', 'walk')
DEGENERATE_POLICIES = ('raise', 'empty')


@dataclass
class TriangulatorConfig:
    """Triangulator settings.

    Attributes
    ----------
    locator : str
        Point-location strategy: 'linear' scans every live triangle (first
        match wins), 'walk' follows adjacency from the last hit and falls back
        to the linear scan when the walk gives up.
    degenerate_policy : str
        'raise' rejects fewer than 3 distinct points or an all-colinear set
        with DegenerateInputError; 'empty' returns an empty triangulation.
    incircle_tolerance : float
        Relative margin a neighbor's opposite vertex must clear inside the
        circumcircle before a flip happens. Cocircular quads are not flipped.
    validate : bool
        Run the conformity checks on the finished mesh and raise
        MeshInvariantError on failure.
    max_walk_steps : int
        Step budget of the walking locator before it falls back.
    walk_seed : int
        Seed of the walking locator's edge choice.
    """
    locator: str = 'linear'
    degenerate_policy: str = 'raise'
    incircle_tolerance: float = EPS_INCIRCLE
    validate: bool = False
    max_walk_steps: int = 10000
    walk_seed: int = 0

    def __post_init__(self):
        if self.locator not in LOCATORS:
            raise ValueError(f"unknown locator {self.locator!r}; expected one of {LOCATORS}")
        if self.degenerate_policy not in DEGENERATE_POLICIES:
            raise ValueError(
                f"unknown degenerate_policy {self.degenerate_policy!r}; expected one of {DEGENERATE_POLICIES}")
        if self.incircle_tolerance < 0.0:
            raise ValueError("incircle_tolerance must be non-negative")
        if self.max_walk_steps < 1:
            raise ValueError("max_walk_steps must be >= 1")


__all__ = ['TriangulatorConfig', 'LOCATORS', 'DEGENERATE_POLICIES']
