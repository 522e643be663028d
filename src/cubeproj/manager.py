"""One update tick: project the cube onto both surfaces and build
everything a renderer needs to draw them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Union

from cubeproj.arcs import Arc
from cubeproj.config import DEFAULT_CONFIG, ProjectionConfig, ProjectionContext
from cubeproj.cube import AXIS_NAMES, EDGES, CubePose
from cubeproj.guides import buildConstructionGeometry, buildEdgeGeometry, buildGuideGeometry
from cubeproj.hemi import HemisphericalProjection, hemisphericalProject
from cubeproj.linear import LinearProjection, linearProject

logger = logging.getLogger(__name__)


@dataclass
class SurfaceFrame:
    """Drawables for one projection surface."""

    projection: Union[LinearProjection, HemisphericalProjection]
    edges: List[Arc] = field(default_factory=list)
    guides: List[Arc] = field(default_factory=list)
    construction: List[Arc] = field(default_factory=list)

    @property
    def boundary(self) -> List[list]:
        return self.projection.boundary

    @property
    def rays(self) -> List[List[list]]:
        return self.projection.rays


@dataclass
class Frame:
    vertices: List[list]
    linear: SurfaceFrame
    hemi: SurfaceFrame
    context: ProjectionContext


class ProjectionManager:
    """Coordinates the two projectors.

    The manager holds no projection state of its own; the world vertex
    cache lives on the :class:`~cubeproj.cube.CubePose`.  It remembers
    the key of the last update so that a scheduler can skip ticks in
    which nothing changed.
    """

    def __init__(self, config: ProjectionConfig = DEFAULT_CONFIG):
        self.config = config
        self._last_key = None

    def update_key(self, pose: CubePose, context: ProjectionContext) -> tuple:
        return (pose.fingerprint(), pose.mode, context.fingerprint())

    def needs_update(self, pose: CubePose, context: ProjectionContext) -> bool:
        return self.update_key(pose, context) != self._last_key

    def update(self, pose: CubePose, context: ProjectionContext) -> Frame:
        cfg = self.config
        toggles = context.toggles

        vertices = pose.world_vertices(cfg.determinant_tolerance)

        lin = linearProject(vertices, context.viewpoint, context.radius,
                            shape=toggles.linear_shape, rays=toggles.show_rays)
        linear = SurfaceFrame(
            projection=lin,
            edges=buildEdgeGeometry(lin.points2d, EDGES, lin.vanishing_points, cfg),
        )
        if toggles.show_guides:
            linear.guides = buildGuideGeometry(lin.points2d, lin.vanishing_points, cfg)

        ## world vertices come from the pose cache on this second request
        vertices = pose.world_vertices(cfg.determinant_tolerance)
        hp = hemisphericalProject(vertices, context.viewpoint, context.radius, cfg,
                                  mapping=toggles.vertex_mapping,
                                  rays=toggles.show_rays,
                                  construction=toggles.show_construction)
        hemi = SurfaceFrame(
            projection=hp,
            edges=buildEdgeGeometry(hp.points2d, EDGES, hp.pairs, cfg),
        )
        if toggles.show_guides:
            hemi.guides = buildGuideGeometry(hp.points2d, hp.pairs, cfg)
        if toggles.show_construction:
            hemi.construction = buildConstructionGeometry(hp.construction, cfg)

        self._last_key = self.update_key(pose, context)
        degenerate = [AXIS_NAMES[a] for a in hp.degenerate_axes()]
        logger.debug("update: %d linear edges, %d hemispherical edges, degenerate axes %s",
                     len(linear.edges), len(hemi.edges), degenerate or "none")
        return Frame(vertices=vertices, linear=linear, hemi=hemi, context=context)


__all__ = ["Frame", "ProjectionManager", "SurfaceFrame"]
