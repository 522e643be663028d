"""Cube topology and the cube's pose in world space.

The topology is fixed: 8 vertices, 12 edges, 3 axes.  Vertex ``i`` of
the unit layout sits at ``VERTEX_SIGNS[i] * size/2`` in the cube's own
frame, so vertices 0-3 form the -z face and 4-7 the +z face.

:class:`CubePose` owns the cube's orientation and position, supports
two rotation styles (incremental local rotations and zx'z'' Euler
angles), and produces world-space vertices through a one-slot cache
keyed by the pose fingerprint.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from cubeproj.geom import point, sub
from cubeproj.xform import (
    EulerXYZ,
    EulerZXZ,
    Matrix,
    Rotation,
    Translation,
    XAXIS,
    YAXIS,
    ZAXIS,
    eulerXYZ,
    eulerZXZ,
)

logger = logging.getLogger(__name__)

X, Y, Z = 0, 1, 2
AXES = (X, Y, Z)
AXIS_NAMES = ("x", "y", "z")

VERTEX_SIGNS: Tuple[Tuple[int, int, int], ...] = (
    (-1, -1, -1), (1, -1, -1), (1, 1, -1), (-1, 1, -1),
    (-1, -1, 1), (1, -1, 1), (1, 1, 1), (-1, 1, 1),
)

EDGES: Tuple[Tuple[int, int], ...] = (
    (0, 1), (1, 2), (2, 3), (3, 0),
    (4, 5), (5, 6), (6, 7), (7, 4),
    (0, 4), (1, 5), (2, 6), (3, 7),
)

## axis of each entry of EDGES
EDGE_AXIS: Tuple[int, ...] = (X, Y, X, Y, X, Y, X, Y, Z, Z, Z, Z)

## the four vertex pairs spanning each axis, used for guide construction
AXIS_VERTEX_PAIRS: Tuple[Tuple[Tuple[int, int], ...], ...] = (
    ((0, 1), (3, 2), (4, 5), (7, 6)),
    ((0, 3), (1, 2), (4, 7), (5, 6)),
    ((0, 4), (1, 5), (2, 6), (3, 7)),
)

## vertex pairs whose difference is each axis' direction
AXIS_DIRECTION_PAIRS: Tuple[Tuple[int, int], ...] = ((0, 1), (0, 3), (0, 4))

ROTATION_MODES = ("local", "precise")


def edge_axis(i: int, j: int) -> Optional[int]:
    """Return the axis of the edge joining vertices ``i`` and ``j``, or
    ``None`` if they are not joined by an edge."""

    for k, (a, b) in enumerate(EDGES):
        if (a, b) == (i, j) or (b, a) == (i, j):
            return EDGE_AXIS[k]
    return None


def axis_directions(vertices: Sequence[list]) -> List[list]:
    """Direction vectors of the three cube axes, taken from edges of a
    set of 8 world vertices."""

    if len(vertices) != 8:
        raise ValueError(f"a cube has 8 vertices, got {len(vertices)}")
    return [sub(vertices[b], vertices[a]) for a, b in AXIS_DIRECTION_PAIRS]


def validate_euler_angles(alpha, beta, gamma) -> List[float]:
    """Coerce Euler angles to floats in ``[-180, 180)``; non-numbers
    become zero."""

    out = []
    for a in (alpha, beta, gamma):
        try:
            a = float(a)
        except (TypeError, ValueError):
            a = 0.0
        if math.isnan(a) or math.isinf(a):
            a = 0.0
        out.append(((a + 180.0) % 360.0) - 180.0)
    return out


class CubePose:
    """Orientation, position and size of the cube."""

    def __init__(self, size: float = 4.0, position: Sequence[float] = (0, 0, 0),
                 mode: str = "local"):
        if size <= 0:
            raise ValueError(f"cube size must be positive, got {size}")
        if mode not in ROTATION_MODES:
            raise ValueError(f"unknown rotation mode: {mode!r}")
        self.size = float(size)
        self.position = point(list(position))
        self.mode = mode
        self.rotation = Matrix()
        # accumulated local drag angles, degrees (x, y, z)
        self.local_angles = [0.0, 0.0, 0.0]
        # zx'z'' Euler angles for precise mode, degrees
        self.euler = [0.0, 0.0, 0.0]
        # XYZ Euler angles of the current orientation, the rebuild source
        # for local mode
        self.orientation = [0.0, 0.0, 0.0]
        self._cache_key = None
        self._cache: Optional[List[list]] = None

    ## rotation

    def rotate_local(self, axis, angle: float) -> None:
        """Rotate about one of the cube's own axes by ``angle`` degrees."""

        self.rotation = self.rotation.mul(Rotation(axis, angle))
        for i, a in enumerate((XAXIS, YAXIS, ZAXIS)):
            if list(axis[:3]) == a[:3]:
                self.local_angles[i] += angle
        self.orientation = eulerXYZ(self.rotation)

    def drag(self, dx: float, dy: float, sensitivity: float = 0.005) -> bool:
        """Apply a mouse drag of ``dx``, ``dy`` pixels: yaw about the
        local y axis, then pitch about the local x axis.  Ignored in
        precise mode; returns whether the pose changed."""

        if self.mode != "local":
            return False
        self.rotate_local(YAXIS, math.degrees(dx * sensitivity))
        self.rotate_local(XAXIS, math.degrees(dy * sensitivity))
        return True

    def set_euler(self, alpha, beta, gamma) -> None:
        """Set the orientation from zx'z'' Euler angles in degrees."""

        self.euler = validate_euler_angles(alpha, beta, gamma)
        self.rotation = EulerZXZ(*self.euler)
        self.orientation = eulerXYZ(self.rotation)

    def set_mode(self, mode: str) -> None:
        """Switch rotation mode, carrying the current orientation over."""

        if mode not in ROTATION_MODES:
            raise ValueError(f"unknown rotation mode: {mode!r}")
        if mode == self.mode:
            return
        if mode == "precise":
            self.euler = validate_euler_angles(*eulerZXZ(self.rotation))
        else:
            self.local_angles = [0.0, 0.0, 0.0]
        self.mode = mode

    def reset(self) -> None:
        self.rotation = Matrix()
        self.local_angles = [0.0, 0.0, 0.0]
        self.euler = [0.0, 0.0, 0.0]
        self.orientation = [0.0, 0.0, 0.0]

    def move_to(self, position: Sequence[float]) -> None:
        self.position = point(list(position))

    ## numerical hygiene

    def repair(self, tolerance: float = 0.01) -> bool:
        """Rebuild the rotation from the stored angle state if its
        determinant has drifted more than ``tolerance`` from 1.  Returns
        ``True`` if a rebuild happened."""

        det = self.rotation.determinant()
        if abs(det - 1.0) <= tolerance:
            return False
        if self.mode == "precise":
            self.rotation = EulerZXZ(*self.euler)
        else:
            self.rotation = EulerXYZ(*self.orientation)
        logger.warning("cube rotation determinant drifted to %.6f; rebuilt from %s angles",
                       det, self.mode)
        return True

    ## world geometry

    def matrix(self) -> Matrix:
        """World transform: rotation about the cube centre, then translation."""

        return Translation(self.position).mul(self.rotation)

    def fingerprint(self) -> tuple:
        return (self.size, tuple(self.position[:3]), self.rotation.fingerprint())

    def world_vertices(self, tolerance: float = 0.01) -> List[list]:
        """The 8 world-space vertices, recomputed only when the pose
        has changed since the last call."""

        self.repair(tolerance)
        key = self.fingerprint()
        if key == self._cache_key and self._cache is not None:
            logger.debug("world vertex cache hit")
        else:
            h = self.size / 2.0
            m = self.matrix()
            self._cache = [m.mul(point(sx * h, sy * h, sz * h)) for sx, sy, sz in VERTEX_SIGNS]
            self._cache_key = key
        return [list(v) for v in self._cache]


__all__ = [
    "AXES",
    "AXIS_DIRECTION_PAIRS",
    "AXIS_NAMES",
    "AXIS_VERTEX_PAIRS",
    "CubePose",
    "EDGES",
    "EDGE_AXIS",
    "ROTATION_MODES",
    "VERTEX_SIGNS",
    "X",
    "Y",
    "Z",
    "axis_directions",
    "edge_axis",
    "validate_euler_angles",
]
