"""Drawable edge and guide geometry for both projection surfaces.

``buildEdgeGeometry`` and ``buildGuideGeometry`` accept the vanishing
point data of either surface: a list of three planar points (or
``None``) from the linear projector, or a list of three
:class:`~cubeproj.hemi.VanishingPair` from the hemispherical one.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

from cubeproj.arcs import Arc, arc_sweep, createArc, createEdgeArc, polyline, sample_arc, sampleCircle
from cubeproj.config import DEFAULT_CONFIG, ProjectionConfig
from cubeproj.cube import AXIS_NAMES, AXIS_VERTEX_PAIRS, edge_axis
from cubeproj.geom import (
    circleFromThreePoints,
    collinearXY,
    dist,
    iscircle,
    isbetweenCCW,
    lerp,
    mag2,
    point,
    polarangle,
    samplecircle,
    unit,
)
from cubeproj.hemi import VanishingPair

logger = logging.getLogger(__name__)


def _is_hemi(vanishing: Sequence) -> bool:
    return all(isinstance(v, VanishingPair) for v in vanishing)


def _check_vanishing(vanishing: Sequence) -> None:
    if len(vanishing) != 3:
        raise ValueError(f"expected vanishing data for 3 axes, got {len(vanishing)}")


def _near_far(v1: list, v2: list, ref: list):
    """order two points by distance from ``ref``, nearest first; ties
    keep the given order"""
    if dist(v1, ref) <= dist(v2, ref):
        return v1, v2
    return v2, v1


## edges

def buildEdgeGeometry(points2d: Sequence[Optional[list]],
                      edges: Sequence[Sequence[int]],
                      vanishing: Sequence,
                      config: ProjectionConfig = DEFAULT_CONFIG) -> List[Arc]:
    """One drawable per cube edge whose two vertices both projected.

    Linear edges are straight segments.  Hemispherical edges are arcs
    whose curvature comes from the inside vanishing point of the edge's
    axis; an edge whose axis has no inside vanishing point, or has one
    at the centre of the disc, is a straight fallback segment.
    """

    _check_vanishing(vanishing)
    hemi = _is_hemi(vanishing)
    result = []
    for i, j in edges:
        axis = edge_axis(i, j)
        if axis is None:
            raise ValueError(f"({i}, {j}) is not a cube edge")
        v1, v2 = points2d[i], points2d[j]
        if v1 is None or v2 is None:
            continue
        if not hemi:
            result.append(polyline([v1, v2], axis=axis, edge=(i, j)))
            continue

        pair = vanishing[axis]
        if not pair.inside.isvalid or pair.central(config.center_tolerance):
            result.append(polyline([v1, v2], fallback=True, axis=axis, edge=(i, j)))
            continue
        arc = createEdgeArc(v1, v2, pair.inside.point, config.edge_sampling)
        arc.axis = axis
        arc.edge = (i, j)
        result.append(arc)
    return result


## guides

def _linear_guides(points2d, vanishing) -> List[Arc]:
    result = []
    for axis, vp in enumerate(vanishing):
        if vp is None:
            continue
        for pair in AXIS_VERTEX_PAIRS[axis]:
            for index in pair:
                p = points2d[index]
                if p is not None:
                    result.append(polyline([p, vp], axis=axis, edge=pair, kind="guide"))
    return result


def _central_guides(axis: int, points2d, center: list, boundary: float) -> List[Arc]:
    """Straight guides out of a vanishing point at the centre of the
    disc: from the centre through both vertices to twice the boundary
    radius."""

    result = []
    origin = point(0, 0)
    for i, j in AXIS_VERTEX_PAIRS[axis]:
        v1, v2 = points2d[i], points2d[j]
        if v1 is None or v2 is None:
            continue
        near, far = _near_far(v1, v2, origin)
        direction = unit([far[0] - center[0], far[1] - center[1], 0, 1])
        if direction is None or dist(far, center) <= 0.001:
            continue
        ext = point(center[0] + direction[0] * 2.0 * boundary,
                    center[1] + direction[1] * 2.0 * boundary)
        result.append(polyline([center, near, far, ext], fallback=True,
                               axis=axis, edge=(i, j), kind="guide"))
    return result


def _guides_to(axis: int, points2d, vp: list, inside: list, boundary: float,
               config: ProjectionConfig) -> List[Arc]:
    """Guide arcs from each of the axis' edges to one vanishing point.

    For a point within the boundary the arc runs from the vertex nearer
    to it; for a point beyond the boundary, from the vertex farther
    from the inside vanishing point.  Either way the arc avoids the
    other vertex.
    """

    result = []
    vp_inside = mag2(vp) < boundary
    for i, j in AXIS_VERTEX_PAIRS[axis]:
        v1, v2 = points2d[i], points2d[j]
        if v1 is None or v2 is None:
            continue
        if collinearXY(v1, v2, vp):
            result.append(polyline([v1, vp], fallback=True, axis=axis, edge=(i, j), kind="guide"))
            result.append(polyline([vp, v2], fallback=True, axis=axis, edge=(i, j), kind="guide"))
            continue
        if vp_inside:
            start, other = _near_far(v1, v2, vp)
        else:
            other, start = _near_far(v1, v2, inside)
        arc = createArc(start, vp, other, config.arc_sampling)
        arc.axis = axis
        arc.edge = (i, j)
        result.append(arc)
    return result


def buildGuideGeometry(points2d: Sequence[Optional[list]],
                       vanishing: Sequence,
                       config: ProjectionConfig = DEFAULT_CONFIG) -> List[Arc]:
    """Guide curves from the cube's edges toward their vanishing points.

    On the image plane these are straight lines from every vertex of an
    axis to that axis' vanishing point.  On the disc, an axis gets
    straight guides if its inside vanishing point is at the centre,
    extended guides (see :func:`extendGuides`) if its pair is
    degenerate, and otherwise one arc per edge to each of its two
    vanishing points.
    """

    _check_vanishing(vanishing)
    if not _is_hemi(vanishing):
        return _linear_guides(points2d, vanishing)

    result = []
    for axis, pair in enumerate(vanishing):
        if not pair.inside.isvalid:
            continue
        b = pair.boundary_radius
        if pair.central(config.center_tolerance):
            result.extend(_central_guides(axis, points2d, pair.inside.point, b))
            continue
        if pair.degenerate:
            result.extend(extendGuides(axis, points2d, pair, config))
            continue
        result.extend(_guides_to(axis, points2d, pair.inside.point, pair.inside.point, b, config))
        if pair.outside.isvalid:
            result.extend(_guides_to(axis, points2d, pair.outside.point, pair.inside.point, b, config))
    return result


## extended guides for boundary-incident vanishing points

def clipToBoundary(points: Sequence[list], boundary: float, tolerance: float = 0.01) -> List[list]:
    """The first run of consecutive points lying within the boundary
    circle, widened by ``tolerance`` of its radius."""

    limit = boundary * (1.0 + tolerance)
    run = []
    for p in points:
        if mag2(p) <= limit:
            run.append(p)
        elif run:
            break
    return run


def _extension_arc(circ, outside, inside, near, far, boundary, config) -> tuple:
    center = circ[0]
    r = circ[1][0]
    a_out = polarangle(center, outside)
    a_in = polarangle(center, inside)
    ## head from the outside point toward the far vertex first
    ccw = isbetweenCCW(polarangle(center, far), a_out, polarangle(center, near))
    sweep = arc_sweep(a_out, a_in, ccw)
    segments = config.guide_sampling.segments(abs(sweep) * r)
    step = sweep / segments

    ## keep going past the inside point until the curve reaches twice
    ## the boundary radius or closes on itself
    total = segments
    while abs(step) * (total + 1) <= 2.0 * math.pi:
        p = samplecircle(circ, a_out + step * (total + 1))
        if mag2(p) > 2.0 * boundary:
            break
        total += 1
    pts = sample_arc(circ, a_out, step * total, total)
    return pts, ccw


def extendGuides(axis: int, points2d: Sequence[Optional[list]], pair: VanishingPair,
                 config: ProjectionConfig = DEFAULT_CONFIG) -> List[Arc]:
    """Continuous guide curves for an axis parallel to the viewing plane.

    Each of the axis' edges gets one curve starting at the outside
    vanishing point, passing through the vertex farther from the inside
    vanishing point, then the nearer one, and carrying on toward twice
    the boundary radius.  The sampled curve is clipped to the boundary
    circle.  If the outside point and the two vertices are collinear
    the curve is the straight run from the outside point toward twice
    the boundary radius along the inside point's direction.
    """

    inside = pair.inside.point
    outside = pair.outside.point
    if inside is None or outside is None:
        return []
    b = pair.boundary_radius
    tol = config.boundary_tolerance

    result = []
    for i, j in AXIS_VERTEX_PAIRS[axis]:
        v1, v2 = points2d[i], points2d[j]
        if v1 is None or v2 is None:
            continue
        near, far = _near_far(v1, v2, inside)
        circ = circleFromThreePoints(outside, far, near)
        if circ is not None:
            pts, ccw = _extension_arc(circ, outside, inside, near, far, b, config)
        else:
            direction = unit([inside[0], inside[1], 0, 1])
            ext = point(direction[0] * 2.0 * b, direction[1] * 2.0 * b)
            segments = config.guide_sampling.segments(dist(outside, ext))
            pts = [point(lerp(outside, ext, k / segments)[:2]) for k in range(segments + 1)]
            ccw = None
        clipped = clipToBoundary(pts, b, tol)
        if len(clipped) < 2:
            logger.debug("extended %s guide for edge (%d, %d) lies outside the boundary",
                         AXIS_NAMES[axis], i, j)
            continue
        result.append(Arc(points=clipped, fallback=circ is None, circle=circ,
                          counterclockwise=ccw, axis=axis, edge=(i, j), kind="extension"))
    return result


## construction circles

def buildConstructionGeometry(construction: Sequence[tuple],
                              config: ProjectionConfig = DEFAULT_CONFIG) -> List[Arc]:
    """Sample the auxiliary curves used to locate inside vanishing
    points: full circles, or the straight lines that replace them."""

    result = []
    for axis, curve1, curve2 in construction:
        for curve in (curve1, curve2):
            if iscircle(curve):
                result.append(sampleCircle(curve, config.circle_sampling, axis=axis))
            else:
                result.append(polyline(curve, fallback=True, axis=axis, kind="construction"))
    return result


__all__ = [
    "buildConstructionGeometry",
    "buildEdgeGeometry",
    "buildGuideGeometry",
    "clipToBoundary",
    "extendGuides",
]
