"""Rendering helpers for triangulations.

Draws the triangle edges and vertices, optionally every circumcircle, and
highlights the triangles that contain a probe point together with their
circumcircles.
"""
from __future__ import annotations

import os as _os
import matplotlib as _mpl
# Non-interactive backend in headless environments, before importing pyplot
if not _os.environ.get('MPLBACKEND'):
    _mpl.use('Agg')
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Circle as _Circle

from .geometry import Point
from .logging_utils import get_logger

logger = get_logger('deltri.viz')


def _draw_circle(ax, center: Point, radius: float, color, lw: float) -> None:
    ax.add_patch(_Circle((center.x, center.y), radius, fill=False, edgecolor=color, linewidth=lw))


def plot_triangulation(tri, outname="triangulation.png", probe=None,
                       show_circumcircles: bool = False, title=None):
    """Render ``tri`` to ``outname``.

    Args:
        tri: Triangulation returned by ``triangulate``
        outname: output image path
        probe: optional (x, y); triangles not classifying it OUTSIDE are filled
            and their circumcircles drawn
        show_circumcircles: draw the circumcircle of every triangle
        title: figure title, defaults to a short summary

    Returns:
        list of positions in ``tri`` of the highlighted triangles
    """
    pts = np.asarray(tri.points)
    fig, ax = plt.subplots(figsize=(6, 6))
    hits = []
    if len(tri) == 0:
        if pts.shape[0]:
            ax.scatter(pts[:, 0], pts[:, 1], s=6, color='black')
        ax.set_title(title or 'empty triangulation')
    else:
        ax.triplot(pts[:, 0], pts[:, 1], tri.triangles, lw=0.6, color=(0.2, 0.3, 0.6))
        # scale markers by vertex count
        s = max(0.6, min(8.0, 200.0 / float(max(1, pts.shape[0]))))
        ax.scatter(pts[:, 0], pts[:, 1], s=s, color='black', zorder=3)
        if show_circumcircles:
            for t in tri:
                _draw_circle(ax, t.circumcenter, t.circumradius, (0.6, 0.6, 0.6), 0.4)
        if probe is not None:
            p = Point.of(probe)
            hits = tri.locate(p)
            for k in hits:
                t = tri[k]
                corners = np.array([q.as_tuple() for q in t.points])
                ax.fill(corners[:, 0], corners[:, 1], facecolor='orange', alpha=0.5, edgecolor='none')
                _draw_circle(ax, t.circumcenter, t.circumradius, 'crimson', 1.0)
            ax.plot([p.x], [p.y], marker='x', color='crimson')
            logger.debug("probe (%g, %g) hits %d triangles", p.x, p.y, len(hits))
        ax.set_title(title or f"{pts.shape[0]} points, {len(tri)} triangles")
    ax.set_aspect('equal')
    fig.savefig(outname, dpi=150)
    plt.close(fig)
    return hits


__all__ = ['plot_triangulation']
