## circular arc construction for projected cube edges and guides
## Copyright (c) 2025 cubeproj contributors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""circular arc construction for **cubeproj**

Arcs are returned as sampled polylines wrapped in an ``Arc`` record.
An ``Arc`` whose ``fallback`` flag is set was drawn as straight
segments because its three defining points were collinear.

Direction selection
===================

Given a circle through a start point, an end point and a third point,
``arc_direction()`` tests whether the third point's angle lies strictly
between the start and end angles going counter-clockwise, and samples
in the direction *opposite* to that test.  The resulting polyline runs
from start to end along the part of the circle that does not contain
the third point: an edge arc stays between its two vertices, and a
guide arc runs from a vertex to a vanishing point without doubling back
through the other vertex.

"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cmp_to_key
from math import *
from typing import List, Optional, Sequence, Tuple

from cubeproj.config import DEFAULT_CONFIG, Sampling
from cubeproj.geom import (
    circleFromThreePoints,
    dist,
    isbetweenCCW,
    pi2,
    point,
    polarangle,
)


@dataclass
class Arc:
    """A sampled planar curve, tagged with how it was made."""

    points: List[list]
    fallback: bool = False
    circle: Optional[list] = None
    counterclockwise: Optional[bool] = None
    axis: Optional[int] = None
    edge: Optional[Tuple[int, int]] = None
    kind: str = "edge"

    def length(self) -> float:
        return sum(dist(a, b) for a, b in zip(self.points, self.points[1:]))

    @property
    def start(self) -> list:
        return self.points[0]

    @property
    def end(self) -> list:
        return self.points[-1]


def polyline(points: Sequence[Sequence[float]], fallback: bool = False, **tags) -> Arc:
    """wrap a list of points as a straight-segment ``Arc``"""
    return Arc(points=[point(list(p)) for p in points], fallback=fallback, **tags)


## sort collinear points left to right, then bottom to top, so the
## straight path does not cross itself
def _xy_order(a, b):
    if abs(a[0] - b[0]) > 1.0e-6:
        return -1 if a[0] < b[0] else 1
    if a[1] == b[1]:
        return 0
    return -1 if a[1] < b[1] else 1


def sort_collinear(points: Sequence[list]) -> List[list]:
    return sorted((point(list(p)) for p in points), key=cmp_to_key(_xy_order))


def arc_direction(start: float, mid: float, end: float) -> bool:
    """sampling direction for the arc from ``start`` to ``end`` given the
    angle ``mid`` of the third defining point; ``True`` is counter-clockwise"""
    return not isbetweenCCW(mid, start, end)


def arc_sweep(start: float, end: float, ccw: bool) -> float:
    """signed angle swept going from ``start`` to ``end`` in the given
    direction; both angles in ``[0, 2*pi)``"""
    if ccw:
        if start < end:
            return end - start
        return end + pi2 - start
    if start > end:
        return -(start - end)
    return -(start + pi2 - end)


def sample_arc(circ: list, start: float, sweep: float, segments: int) -> List[list]:
    cx, cy = circ[0][0], circ[0][1]
    r = circ[1][0]
    pts = []
    for i in range(segments + 1):
        ang = start + sweep * i / segments
        pts.append(point(cx + r * cos(ang), cy + r * sin(ang)))
    return pts


def _build(start_pt, end_pt, through_pt, sampling: Sampling, collinear_points, kind: str) -> Arc:
    circ = circleFromThreePoints(start_pt, through_pt, end_pt)
    if circ is None:
        return polyline(collinear_points, fallback=True, kind=kind)

    center = circ[0]
    a0 = polarangle(center, start_pt)
    a1 = polarangle(center, through_pt)
    a2 = polarangle(center, end_pt)
    ccw = arc_direction(a0, a1, a2)
    sweep = arc_sweep(a0, a2, ccw)
    segments = sampling.segments(abs(sweep) * circ[1][0])
    pts = sample_arc(circ, a0, sweep, segments)
    ## pin the endpoints to the exact inputs
    pts[0] = point(start_pt[0], start_pt[1])
    pts[-1] = point(end_pt[0], end_pt[1])
    return Arc(points=pts, fallback=False, circle=circ, counterclockwise=ccw, kind=kind)


def createArc(p1, p2, through, sampling: Sampling = DEFAULT_CONFIG.arc_sampling) -> Arc:
    """Arc from ``p1`` to ``p2`` on the circle through ``p1``, ``p2``
    and ``through``.

    When the three points are collinear the result is the three points
    as a straight path, sorted so that it does not fold back on itself.
    """

    return _build(p1, p2, through, sampling, sort_collinear([p1, p2, through]), "guide")


def createEdgeArc(v1, v2, vanishing, sampling: Sampling = DEFAULT_CONFIG.edge_sampling) -> Arc:
    """Arc between two projected vertices whose curvature is set by a
    vanishing point.  The vanishing point is not an endpoint; collinear
    input gives the straight segment ``v1``-``v2``."""

    return _build(v1, v2, vanishing, sampling, [v1, v2], "edge")


def sampleCircle(circ: list, sampling: Sampling = DEFAULT_CONFIG.circle_sampling,
                 **tags) -> Arc:
    """sample a full circle, counter-clockwise from angle zero"""
    r = circ[1][0]
    segments = sampling.segments(pi2 * r)
    pts = sample_arc(circ, 0.0, pi2, segments)
    tags.setdefault("kind", "construction")
    return Arc(points=pts, circle=circ, counterclockwise=True, **tags)


def createCircle(p1, p2, p3, sampling: Sampling = DEFAULT_CONFIG.circle_sampling) -> Arc:
    """Full circle through three points; collinear points give the
    sorted straight path through them."""

    circ = circleFromThreePoints(p1, p2, p3)
    if circ is None:
        return polyline(sort_collinear([p1, p2, p3]), fallback=True, kind="construction")
    return sampleCircle(circ, sampling)


__all__ = [
    "Arc",
    "arc_direction",
    "arc_sweep",
    "createArc",
    "createCircle",
    "createEdgeArc",
    "polyline",
    "sampleCircle",
    "sample_arc",
    "sort_collinear",
]
