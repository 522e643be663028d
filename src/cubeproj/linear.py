"""Planar ("linear") perspective projection of the cube.

The image plane sits a distance ``R`` below the viewpoint, at
``z = viewpoint.z - R``, and is ``2R`` wide.  Every planar result is
expressed relative to the viewpoint's own projection, so the viewpoint
always lands on the origin.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from cubeproj.cube import AXIS_VERTEX_PAIRS, axis_directions
from cubeproj.geom import epsilon, mag, point, sub
from cubeproj.config import LINEAR_SHAPES

logger = logging.getLogger(__name__)

## a direction whose z component is below this fraction of its length
## is treated as parallel to the image plane
PARALLEL_TOLERANCE = 1.0e-4


def image_plane_z(viewpoint: Sequence[float], radius: float) -> float:
    return viewpoint[2] - radius


def project_point(vertex: Sequence[float], viewpoint: Sequence[float],
                  plane_z: float) -> Optional[list]:
    """Project a world point onto the image plane by similar triangles.

    Returns ``None`` for a point level with the viewpoint, which would
    project to infinity.
    """

    rel = sub(vertex, viewpoint)
    if abs(rel[2]) <= epsilon * max(1.0, mag(rel)):
        return None
    scale = (plane_z - viewpoint[2]) / rel[2]
    return point(rel[0] * scale, rel[1] * scale)


def vanishing_point(direction: Sequence[float], viewpoint: Sequence[float],
                    plane_z: float) -> Optional[list]:
    """Image of the point at infinity along ``direction``.

    A direction parallel to the image plane has no finite vanishing
    point; that is reported as ``None``, not as an error.
    """

    dz = direction[2]
    if abs(dz) <= PARALLEL_TOLERANCE * mag(direction):
        return None
    t = (plane_z - viewpoint[2]) / dz
    return point(t * direction[0], t * direction[1])


def linear_boundary(radius: float, shape: str = "square", segments: int = 64) -> List[list]:
    """Closed outline of the usable image plane: a square of half-extent
    ``radius`` or a circle of that radius."""

    if shape not in LINEAR_SHAPES:
        raise ValueError(f"unknown linear boundary shape: {shape!r}")
    if shape == "square":
        r = radius
        return [point(-r, -r), point(r, -r), point(r, r), point(-r, r), point(-r, -r)]
    return [point(radius * math.cos(2.0 * math.pi * i / segments),
                  radius * math.sin(2.0 * math.pi * i / segments))
            for i in range(segments)] + [point(radius, 0)]


@dataclass
class LinearProjection:
    """Result of projecting the cube onto the image plane."""

    points2d: List[Optional[list]]
    vanishing_points: List[Optional[list]]
    plane_z: float
    radius: float
    boundary: List[list] = field(default_factory=list)
    viewpoint2d: list = field(default_factory=lambda: point(0, 0))
    rays: List[List[list]] = field(default_factory=list)

    @property
    def boundary_radius(self) -> float:
        return self.radius

    def guide_lines(self) -> List[dict]:
        """Straight guides from each vertex of an axis to that axis'
        vanishing point.  Axes without a finite vanishing point get no
        guides."""

        guides = []
        for axis, vp in enumerate(self.vanishing_points):
            if vp is None:
                continue
            for pair in AXIS_VERTEX_PAIRS[axis]:
                for index in pair:
                    p = self.points2d[index]
                    if p is None:
                        continue
                    guides.append({"axis": axis, "vertex": index, "points": [list(p), list(vp)]})
        return guides


def linearProject(vertices: Sequence[Sequence[float]], viewpoint: Sequence[float],
                  radius: float, shape: str = "square", rays: bool = False) -> LinearProjection:
    """Project the 8 world-space cube vertices and the 3 axis vanishing
    points onto the image plane.

    ``rays`` adds a 3D segment from the viewpoint to every vertex, for
    display alongside the cube.
    """

    if len(vertices) != 8:
        raise ValueError(f"a cube has 8 vertices, got {len(vertices)}")
    if radius <= 0:
        raise ValueError(f"projection radius must be positive, got {radius}")

    vp = point(list(viewpoint))
    plane_z = image_plane_z(vp, radius)
    points2d = [project_point(v, vp, plane_z) for v in vertices]
    vanishing = [vanishing_point(d, vp, plane_z) for d in axis_directions(vertices)]

    result = LinearProjection(
        points2d=points2d,
        vanishing_points=vanishing,
        plane_z=plane_z,
        radius=radius,
        boundary=linear_boundary(radius, shape),
    )
    if rays:
        result.rays = [[list(vp), point(list(v))] for v in vertices]

    logger.debug("linear projection: %d of 8 vertices, vanishing points on axes %s",
                 sum(p is not None for p in points2d),
                 [i for i, p in enumerate(vanishing) if p is not None])
    return result


__all__ = [
    "LinearProjection",
    "PARALLEL_TOLERANCE",
    "image_plane_z",
    "linearProject",
    "linear_boundary",
    "project_point",
    "vanishing_point",
]
