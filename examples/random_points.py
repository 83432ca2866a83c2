"""
deltri Example: Delaunay triangulation of random points

1. Draw points with a PointProvider (replaying a saved session if present)
2. Triangulate them
3. Print the statistics table
4. Render the mesh, optionally highlighting the triangles around a probe
5. Optionally export to VTK and save the point session

Usage:
    python examples/random_points.py --npts 200 --probe 0.4 0.6 --out tri.png
"""

import argparse

from deltri import (
    triangulate, TriangulatorConfig, PointProvider, configure_logging, write_vtk,
)
from deltri.core.stats import format_stats_table
from deltri.core.visualization import plot_triangulation


def main():
    parser = argparse.ArgumentParser(
        description="Triangulate random points and render the result.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--npts', type=int, default=100,
                        help='Number of points to draw (default: 100)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for new points')
    parser.add_argument('--bounds', type=float, nargs=4, default=[0.0, 1.0, 0.0, 1.0],
                        metavar=('MIN_X', 'MAX_X', 'MIN_Y', 'MAX_Y'),
                        help='Sampling rectangle (default: unit square)')
    parser.add_argument('--session', type=str, default=None,
                        help='Point file to replay from and save to')
    parser.add_argument('--locator', choices=['linear', 'walk'], default='linear',
                        help='Point location strategy (default: linear)')
    parser.add_argument('--probe', type=float, nargs=2, default=None, metavar=('X', 'Y'),
                        help='Highlight the triangles containing this point')
    parser.add_argument('--circles', action='store_true',
                        help='Draw every circumcircle')
    parser.add_argument('--out', type=str, default='triangulation.png',
                        help='Output image (default: triangulation.png)')
    parser.add_argument('--vtk', type=str, default=None,
                        help='Also export the mesh to this .vtk file')
    parser.add_argument('--validate', action='store_true',
                        help='Run the conformity checks after triangulating')
    parser.add_argument('--log-level', type=str, default='INFO',
                        help='Logging level (default: INFO)')
    args = parser.parse_args()

    configure_logging(args.log_level)

    min_x, max_x, min_y, max_y = args.bounds
    provider = PointProvider(args.session, min_x, max_x, min_y, max_y, seed=args.seed)
    points = provider.take(args.npts)

    config = TriangulatorConfig(locator=args.locator, validate=args.validate)
    tri = triangulate(points, config)

    print(f"{len(tri.points)} points -> {len(tri)} triangles")
    print(format_stats_table(tri.stats))

    hits = plot_triangulation(tri, args.out, probe=args.probe, show_circumcircles=args.circles)
    if args.probe is not None:
        print(f"probe ({args.probe[0]:g}, {args.probe[1]:g}) lies in {len(hits)} triangle(s)")
    print(f"wrote {args.out}")

    if args.vtk:
        write_vtk(args.vtk, tri.points, tri.triangles, cell_data={'circumradius': tri.circumradii})
        print(f"wrote {args.vtk}")
    if args.session:
        provider.save()
        print(f"saved {len(provider)} points to {args.session}")


if __name__ == "__main__":
    main()
