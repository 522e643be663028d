"""Dome demo: project a cube onto the image plane and the flattened dome.

This example demonstrates:
1. Posing the cube with zx'z'' Euler angles
2. Running one projection update for both surfaces
3. Reporting vertex images and vanishing point pairs
4. Exporting the drawable polylines to JSON for an external renderer

Usage:
    python dome_demo.py                            # Default cube and viewpoint
    python dome_demo.py --euler 30 40 50           # Rotated cube
    python dome_demo.py --radius 9 --viewpoint 1 2 10
    python dome_demo.py --config dome.yaml --output build/frame.json
"""

import argparse
import json
import logging
from pathlib import Path

from cubeproj.config import DEFAULT_CONFIG, ProjectionContext, load_config
from cubeproj.cube import AXIS_NAMES, CubePose
from cubeproj.manager import ProjectionManager


def fmt(p):
    if p is None:
        return "none"
    return f"({p[0]:8.4f}, {p[1]:8.4f})"


def report(frame):
    lin = frame.linear.projection
    hemi = frame.hemi.projection

    print(f"image plane z = {lin.plane_z:.4f}, dome boundary radius = {hemi.boundary_radius:.4f}")
    print("vertex   linear                  hemispherical")
    for i, (a, b) in enumerate(zip(lin.points2d, hemi.points2d)):
        print(f"  {i}      {fmt(a)}    {fmt(b)}")

    print("axis     linear vp               inside vp               outside vp")
    for axis, (vp, pair) in enumerate(zip(lin.vanishing_points, hemi.pairs)):
        flag = "  degenerate" if pair.degenerate else ""
        print(f"  {AXIS_NAMES[axis]}      {fmt(vp)}    {fmt(pair.inside.point)}"
              f"    {fmt(pair.outside.point)}{flag}")

    for name, surface in (("linear", frame.linear), ("hemispherical", frame.hemi)):
        kinds = {}
        for g in surface.guides:
            kinds[g.kind] = kinds.get(g.kind, 0) + 1
        fallbacks = sum(1 for e in surface.edges if e.fallback)
        print(f"{name}: {len(surface.edges)} edges ({fallbacks} straight), guides {kinds}")


def surface_to_dict(surface):
    def arcs(items):
        return [{"axis": a.axis, "kind": a.kind, "fallback": a.fallback,
                 "points": [p[:2] for p in a.points]} for a in items]
    return {
        "boundary": [p[:2] for p in surface.boundary],
        "edges": arcs(surface.edges),
        "guides": arcs(surface.guides),
        "construction": arcs(surface.construction),
    }


def export_json(frame, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "viewpoint": frame.context.viewpoint[:3],
        "radius": frame.context.radius,
        "linear": surface_to_dict(frame.linear),
        "hemispherical": surface_to_dict(frame.hemi),
    }
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def main():
    parser = argparse.ArgumentParser(
        description="Project a cube onto the image plane and the flattened dome"
    )
    parser.add_argument(
        "--euler",
        type=float,
        nargs=3,
        metavar=("ALPHA", "BETA", "GAMMA"),
        help="zx'z'' Euler angles in degrees"
    )
    parser.add_argument(
        "--viewpoint",
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        help="Eye position, also the centre of the dome"
    )
    parser.add_argument(
        "--radius", "-r",
        type=float,
        help="Projection radius (clamped to the configured range)"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML file of configuration overrides"
    )
    parser.add_argument(
        "--construction",
        action="store_true",
        help="Include the circles that locate the vanishing points"
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Write the drawable geometry to this JSON file"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    config = load_config(args.config) if args.config else DEFAULT_CONFIG
    pose = CubePose(size=config.cube_size)
    if args.euler:
        pose.set_mode("precise")
        pose.set_euler(*args.euler)
    context = ProjectionContext.create(
        viewpoint=args.viewpoint,
        radius=args.radius,
        config=config,
        show_construction=args.construction,
    )

    frame = ProjectionManager(config).update(pose, context)
    report(frame)
    if args.output:
        out_path = export_json(frame, args.output)
        print(f"Geometry written to {out_path}")


if __name__ == "__main__":
    main()
