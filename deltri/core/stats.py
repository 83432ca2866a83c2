"""Triangulation statistics and presentation utilities."""
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Any


@dataclass
class TriangulationStats:
    inserted: int = 0
    duplicates: int = 0
    triangle_splits: int = 0
    edge_splits: int = 0
    flips: int = 0
    hull_fills: int = 0
    removed_super_triangles: int = 0
    walk_fallbacks: int = 0
    # Timing (seconds)
    time_insert: float = 0.0
    time_hull: float = 0.0

    @property
    def time_total(self) -> float:
        return self.time_insert + self.time_hull

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d['time_total'] = self.time_total
        d['flips_per_point'] = (self.flips / self.inserted) if self.inserted else 0.0
        return d


def format_stats_table(stats) -> str:
    """Return a human readable two-column table of a stats object or dict."""
    d = stats.to_dict() if hasattr(stats, 'to_dict') else dict(stats)
    if not d:
        return "<no stats>"
    rows = []
    for k, v in d.items():
        if isinstance(v, float):
            rows.append((k, f"{v:.6g}"))
        else:
            rows.append((k, str(v)))
    kw = max(len("counter"), max(len(k) for k, _ in rows))
    vw = max(len("value"), max(len(v) for _, v in rows))
    lines = [f"{'counter'.ljust(kw)} {'value'.rjust(vw)}", "-" * (kw + vw + 1)]
    lines += [f"{k.ljust(kw)} {v.rjust(vw)}" for k, v in rows]
    return "\n".join(lines)


__all__ = ['TriangulationStats', 'format_stats_table']
