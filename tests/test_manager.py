import logging

import pytest

from cubeproj.config import ProjectionContext
from cubeproj.cube import CubePose
from cubeproj.geom import mag2, point, vclose
from cubeproj.hemi import VPKind
from cubeproj.manager import Frame, ProjectionManager


@pytest.fixture
def manager():
    return ProjectionManager()


@pytest.fixture
def context():
    return ProjectionContext.create()


class TestUpdate:
    def test_scenario(self, manager, context):
        frame = manager.update(CubePose(), context)
        assert isinstance(frame, Frame)
        assert len(frame.vertices) == 8

        lin = frame.linear
        assert vclose(lin.projection.points2d[6], point(2, 0))
        assert vclose(lin.projection.points2d[0], point(-1.2, -2.4))
        assert lin.projection.vanishing_points[:2] == [None, None]
        assert len(lin.edges) == 12
        assert len(lin.guides) == 8
        assert len(lin.boundary) == 5

        hemi = frame.hemi
        b = hemi.projection.boundary_radius
        assert hemi.projection.degenerate_axes() == [0, 1]
        assert hemi.projection.pairs[2].outside.kind is VPKind.NONE
        assert vclose(hemi.projection.pairs[0].inside.point, point(-b, 0))
        assert vclose(hemi.projection.pairs[1].inside.point, point(0, -b))
        assert len(hemi.edges) == 12
        assert len(hemi.guides) == 12
        assert sum(1 for g in hemi.guides if g.kind == "extension") == 8
        assert all(mag2(p) == pytest.approx(b) for p in hemi.boundary)

    def test_pure(self, manager, context):
        pose = CubePose(mode="precise")
        pose.set_euler(30, 40, 50)
        a = manager.update(pose, context)
        b = ProjectionManager().update(pose, context)
        assert a.vertices == b.vertices
        assert a.linear.projection.points2d == b.linear.projection.points2d
        assert a.hemi.projection.pairs == b.hemi.projection.pairs
        assert [g.points for g in a.hemi.guides] == [g.points for g in b.hemi.guides]

    def test_guides_off(self, manager):
        ctx = ProjectionContext.create(show_guides=False)
        frame = manager.update(CubePose(), ctx)
        assert frame.linear.guides == []
        assert frame.hemi.guides == []
        assert len(frame.hemi.edges) == 12

    def test_rays(self, manager):
        ctx = ProjectionContext.create(show_rays=True)
        frame = manager.update(CubePose(), ctx)
        assert len(frame.linear.rays) == 8
        assert len(frame.hemi.rays) == 8
        assert manager.update(CubePose(), ProjectionContext.create()).hemi.rays == []

    def test_construction(self, manager):
        pose = CubePose(mode="precise")
        pose.set_euler(30, 40, 50)
        frame = manager.update(pose, ProjectionContext.create(show_construction=True))
        assert frame.hemi.construction
        assert all(a.kind == "construction" for a in frame.hemi.construction)
        assert len(frame.hemi.construction) == 2 * len(frame.hemi.projection.construction)
        assert manager.update(pose, ProjectionContext.create()).hemi.construction == []

    def test_circle_boundary(self, manager):
        ctx = ProjectionContext.create(linear_shape="circle")
        frame = manager.update(CubePose(), ctx)
        assert all(mag2(p) == pytest.approx(ctx.radius) for p in frame.linear.boundary)


class TestNeedsUpdate:
    def test_tracks_changes(self, manager, context):
        pose = CubePose()
        assert manager.needs_update(pose, context)
        manager.update(pose, context)
        assert not manager.needs_update(pose, context)
        assert manager.needs_update(pose, context.with_radius(8))
        assert manager.needs_update(pose, ProjectionContext.create(show_rays=True))
        pose.drag(10, 0)
        assert manager.needs_update(pose, context)

    def test_mode_change(self, manager, context):
        pose = CubePose()
        manager.update(pose, context)
        pose.set_mode("precise")
        assert manager.needs_update(pose, context)


class TestLogging:
    def test_vertex_cache(self, manager, context, caplog):
        with caplog.at_level(logging.DEBUG, logger="cubeproj.cube"):
            manager.update(CubePose(), context)
        assert "world vertex cache hit" in caplog.text

    def test_drift_repaired(self, manager, context, caplog):
        pose = CubePose()
        pose.rotation = pose.rotation.mul(1.5)
        with caplog.at_level(logging.WARNING, logger="cubeproj.cube"):
            frame = manager.update(pose, context)
        assert "determinant drifted" in caplog.text
        assert pose.rotation.determinant() == pytest.approx(1.0)
        assert vclose(frame.linear.projection.points2d[6], point(2, 0))
