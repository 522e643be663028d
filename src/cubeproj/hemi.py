"""Hemispherical perspective projection of the cube.

A dome of radius ``R`` is centred on the viewpoint.  Vertices are
located by casting a ray from the viewpoint, intersecting it with the
dome and flattening the hit with the Postel (azimuthal equidistant)
mapping, whose pole lies directly below the viewpoint.  The flattened
dome is a disc of radius ``(pi/2)*R``, the *boundary radius*.

Each cube axis has a pair of vanishing points: the *inside* one, for
the axis direction that points down into the dome, and the *outside*
one, its inversion through the boundary circle.  When the axis is
parallel to the viewing plane both land on the boundary circle and the
pair is *degenerate*.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from cubeproj.config import DEFAULT_CONFIG, VERTEX_MAPPINGS, ProjectionConfig
from cubeproj.cube import AXIS_NAMES, axis_directions
from cubeproj.geom import (
    add,
    circleCircleIntersectXY,
    circleFromThreePoints,
    intersectRaySphere,
    iscircle,
    lineCircleIntersectXY,
    lineLineIntersectXY,
    mag2,
    point,
    postelProjection,
    scale3,
    scaletol,
    sub,
    tolfloor,
    unit,
)

logger = logging.getLogger(__name__)

## angles (radians) within this of zero, or of +/-pi/2, are snapped
ANGLE_TOLERANCE = 0.001


def boundary_radius(radius: float) -> float:
    """Radius of the flattened dome: a quarter great circle."""

    return (math.pi / 2.0) * radius


def hemi_boundary(radius: float, segments: int = 64) -> List[list]:
    """Closed outline of the flattened dome."""

    b = boundary_radius(radius)
    return [point(b * math.cos(2.0 * math.pi * i / segments),
                  b * math.sin(2.0 * math.pi * i / segments))
            for i in range(segments)] + [point(b, 0)]


class VPKind(enum.Enum):
    """How a vanishing point turned out."""

    NONE = "none"
    FINITE = "finite"
    BOUNDARY = "boundary"


@dataclass(frozen=True)
class VanishingPoint:
    """A tagged vanishing point: missing, an ordinary planar point, or a
    point on the boundary circle."""

    kind: VPKind
    point: Optional[list] = None

    @classmethod
    def none(cls) -> "VanishingPoint":
        return cls(VPKind.NONE, None)

    @classmethod
    def classify(cls, p: Optional[list], boundary: float,
                 tolerance: float = 0.01) -> "VanishingPoint":
        """Tag ``p`` as boundary-incident when its distance from the
        centre is within ``tolerance * boundary`` of the boundary radius."""

        if p is None:
            return cls.none()
        if abs(mag2(p) - boundary) < tolerance * boundary:
            return cls(VPKind.BOUNDARY, p)
        return cls(VPKind.FINITE, p)

    @property
    def isvalid(self) -> bool:
        return self.kind is not VPKind.NONE

    @property
    def distance(self) -> Optional[float]:
        if self.point is None:
            return None
        return mag2(self.point)


@dataclass(frozen=True)
class VanishingPair:
    """The inside and outside vanishing points of one cube axis."""

    inside: VanishingPoint
    outside: VanishingPoint
    boundary_radius: float

    @property
    def degenerate(self) -> bool:
        """Both points on the boundary circle: the axis is parallel to
        the viewing plane."""

        return self.inside.kind is VPKind.BOUNDARY and self.outside.kind is VPKind.BOUNDARY

    def central(self, tolerance: float = 0.01) -> bool:
        """Is the inside point at the centre of the disc?"""

        return self.inside.isvalid and self.inside.distance < tolerance * self.boundary_radius

    def as_dict(self) -> dict:
        return {
            "inside": self.inside.point,
            "outside": self.outside.point,
            "degenerate": self.degenerate,
        }


## vertex mapping

def project_vertex_postel(vertex: Sequence[float], viewpoint: Sequence[float],
                          radius: float, eps: float = 0.001) -> Optional[list]:
    """Cast a ray from the viewpoint through ``vertex``, intersect it with
    the dome and flatten the hit.  ``None`` if there is no usable hit,
    including a hit on the upper half of the sphere: the dome only
    spans the directions at or below the viewpoint."""

    direction = unit(sub(vertex, viewpoint))
    if direction is None:
        return None
    hit = intersectRaySphere(viewpoint, direction, viewpoint, radius, eps)
    if hit is None or above_dome(hit[2] - viewpoint[2], radius):
        return None
    return postelProjection(hit, viewpoint, radius)


def above_dome(dz: float, radius: float) -> bool:
    """Does a height ``dz`` relative to the viewpoint lie above the dome's
    rim, beyond a tolerance scaled to ``radius``?"""

    return dz > scaletol(point(radius, 0))


def direction_angles(direction: Sequence[float]) -> Tuple[float, float, float]:
    """Return ``(theta, phi, psi)`` for a direction.

    ``theta`` is the elevation of the direction's projection onto the
    y-z plane, ``phi`` that of its projection onto the x-z plane, both
    measured from the viewing axis.  ``psi`` is the direction's bearing
    in the x-y plane.
    """

    x, y, z = direction[0], direction[1], direction[2]
    theta = math.atan2(y, abs(z))
    phi = math.atan2(x, abs(z))
    psi = math.atan2(y, x)
    return theta, phi, psi


def construction_curves(theta: float, phi: float, radius: float) -> Tuple[list, list]:
    """The two auxiliary curves that locate a direction on the disc.

    The first passes through ``(0, R*theta)`` and the two x-axis
    boundary anchors, the second through ``(R*phi, 0)`` and the two
    y-axis anchors.  Each is a circle, or the line from its defining
    point to the negative anchor when the three points are collinear.
    """

    b = boundary_radius(radius)
    p_theta = point(0, radius * theta)
    p_phi = point(radius * phi, 0)
    x1, x2 = point(b, 0), point(-b, 0)
    y1, y2 = point(0, b), point(0, -b)

    c1 = circleFromThreePoints(p_theta, x1, x2)
    c2 = circleFromThreePoints(p_phi, y1, y2)
    curve1 = c1 if c1 is not None else [p_theta, x2]
    curve2 = c2 if c2 is not None else [p_phi, y2]
    return curve1, curve2


def intersect_curves(curve1: list, curve2: list) -> List[list]:
    """Intersect two construction curves, each a circle or a line."""

    if iscircle(curve1) and iscircle(curve2):
        return circleCircleIntersectXY(curve1, curve2)
    if iscircle(curve1):
        return lineCircleIntersectXY(curve2, curve1)
    if iscircle(curve2):
        return lineCircleIntersectXY(curve1, curve2)
    hit = lineLineIntersectXY(curve1, curve2, inside=True)
    return [] if hit is None else [hit]


def select_intersection(candidates: Sequence[list], boundary: float) -> Optional[list]:
    """Pick the candidate nearest the centre that lies within the
    boundary circle.  A lone candidate is taken as is."""

    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]
    limit = boundary + scaletol(point(boundary, 0))
    best = None
    best_dist = math.inf
    for c in candidates:
        d = mag2(c)
        if d <= limit and d < best_dist:
            best, best_dist = c, d
    return best


def locate_by_arcs(direction: Sequence[float], radius: float) -> Optional[list]:
    """Locate a direction on the disc with the two-circle construction."""

    theta, phi, _ = direction_angles(direction)
    theta_zero = abs(theta) < ANGLE_TOLERANCE
    phi_zero = abs(phi) < ANGLE_TOLERANCE
    if theta_zero and phi_zero:
        return point(0, 0)
    if theta_zero:
        return point(radius * phi, 0)
    if phi_zero:
        return point(0, radius * theta)
    curve1, curve2 = construction_curves(theta, phi, radius)
    return select_intersection(intersect_curves(curve1, curve2), boundary_radius(radius))


## vanishing points

def downward(direction: Sequence[float]) -> list:
    """Of ``direction`` and its negation, the one pointing more toward -z."""

    d = list(direction)
    if -d[2] > d[2]:
        return d
    return scale3(d, -1.0)


def on_boundary(theta: float, phi: float) -> bool:
    return (abs(abs(theta) - math.pi / 2.0) < ANGLE_TOLERANCE or
            abs(abs(phi) - math.pi / 2.0) < ANGLE_TOLERANCE)


def inside_vanishing_point(direction: Sequence[float], radius: float) -> Optional[list]:
    """Planar position of the vanishing point of the axis ``direction``
    that points down into the dome."""

    d = unit(direction)
    if d is None:
        return None
    d = downward(d)
    theta, phi, psi = direction_angles(d)
    if on_boundary(theta, phi):
        b = boundary_radius(radius)
        return point(b * math.cos(psi), b * math.sin(psi))
    return locate_by_arcs(d, radius)


def outside_from_inside(inside: Optional[list], boundary: float) -> Optional[list]:
    """Invert ``inside`` through the boundary circle and turn it half a
    revolution.  Undefined for a point at the centre."""

    if inside is None:
        return None
    d = mag2(inside)
    if d <= max(tolfloor, scaletol(point(boundary, 0))):
        return None
    out_dist = boundary * boundary / d
    out_ang = math.atan2(inside[1], inside[0]) + math.pi
    return point(out_dist * math.cos(out_ang), out_dist * math.sin(out_ang))


def vanishing_pair(direction: Sequence[float], radius: float,
                   tolerance: float = 0.01) -> VanishingPair:
    b = boundary_radius(radius)
    inside = inside_vanishing_point(direction, radius)
    outside = outside_from_inside(inside, b)
    return VanishingPair(
        inside=VanishingPoint.classify(inside, b, tolerance),
        outside=VanishingPoint.classify(outside, b, tolerance),
        boundary_radius=b,
    )


@dataclass
class HemisphericalProjection:
    """Result of projecting the cube onto the flattened dome."""

    points2d: List[Optional[list]]
    pairs: List[VanishingPair]
    radius: float
    boundary: List[list] = field(default_factory=list)
    viewpoint2d: list = field(default_factory=lambda: point(0, 0))
    rays: List[List[list]] = field(default_factory=list)
    ## (axis, curve1, curve2) for every axis located with the
    ## two-circle construction
    construction: List[Tuple[int, list, list]] = field(default_factory=list)

    @property
    def boundary_radius(self) -> float:
        return boundary_radius(self.radius)

    @property
    def vanishing_point_pairs(self) -> List[dict]:
        return [p.as_dict() for p in self.pairs]

    def degenerate_axes(self) -> List[int]:
        return [axis for axis, p in enumerate(self.pairs) if p.degenerate]


def hemisphericalProject(vertices: Sequence[Sequence[float]], viewpoint: Sequence[float],
                         radius: float, config: ProjectionConfig = DEFAULT_CONFIG,
                         mapping: str = "postel", rays: bool = False,
                         construction: bool = False) -> HemisphericalProjection:
    """Project the 8 world-space cube vertices and the vanishing point
    pairs of the 3 axes onto the flattened dome centred on ``viewpoint``.

    ``mapping`` selects how vertices are located: ``"postel"`` (ray
    cast and azimuthal equidistant flattening) or ``"arcs"`` (the
    two-circle construction used for vanishing points).  ``rays`` adds
    a 3D segment of length ``config.ray_length`` from the viewpoint
    toward each vertex.  ``construction`` keeps the auxiliary curves
    used to locate each inside vanishing point.
    """

    if len(vertices) != 8:
        raise ValueError(f"a cube has 8 vertices, got {len(vertices)}")
    if radius <= 0:
        raise ValueError(f"projection radius must be positive, got {radius}")
    if mapping not in VERTEX_MAPPINGS:
        raise ValueError(f"unknown vertex mapping: {mapping!r}")

    vp = point(list(viewpoint))
    b = boundary_radius(radius)

    if mapping == "postel":
        points2d = [project_vertex_postel(v, vp, radius, config.ray_epsilon) for v in vertices]
    else:
        points2d = []
        for v in vertices:
            d = unit(sub(v, vp))
            if d is None or above_dome(d[2] * radius, radius):
                points2d.append(None)
            else:
                points2d.append(locate_by_arcs(d, radius))

    result = HemisphericalProjection(
        points2d=points2d,
        pairs=[],
        radius=radius,
        boundary=hemi_boundary(radius),
    )

    for axis, direction in enumerate(axis_directions(vertices)):
        pair = vanishing_pair(direction, radius, config.boundary_tolerance)
        result.pairs.append(pair)
        if pair.degenerate:
            logger.debug("%s axis is parallel to the viewing plane; vanishing points on boundary",
                         AXIS_NAMES[axis])
        if construction:
            d = unit(direction)
            if d is None:
                continue
            theta, phi, _ = direction_angles(downward(d))
            if (on_boundary(theta, phi) or abs(theta) < ANGLE_TOLERANCE
                    or abs(phi) < ANGLE_TOLERANCE):
                continue
            curve1, curve2 = construction_curves(theta, phi, radius)
            result.construction.append((axis, curve1, curve2))

    if rays:
        for v in vertices:
            d = unit(sub(v, vp))
            if d is not None:
                result.rays.append([list(vp), add(vp, scale3(d, config.ray_length))])

    logger.debug("hemispherical projection: %d of 8 vertices, boundary radius %.4f",
                 sum(p is not None for p in points2d), b)
    return result


__all__ = [
    "ANGLE_TOLERANCE",
    "HemisphericalProjection",
    "VPKind",
    "VanishingPair",
    "VanishingPoint",
    "above_dome",
    "boundary_radius",
    "construction_curves",
    "direction_angles",
    "downward",
    "hemi_boundary",
    "hemisphericalProject",
    "inside_vanishing_point",
    "intersect_curves",
    "locate_by_arcs",
    "outside_from_inside",
    "project_vertex_postel",
    "select_intersection",
    "vanishing_pair",
]
