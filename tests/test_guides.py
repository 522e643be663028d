import pytest

from cubeproj.config import DEFAULT_CONFIG
from cubeproj.cube import EDGES, CubePose
from cubeproj.geom import circle, mag2, point, vclose
from cubeproj.guides import (
    buildConstructionGeometry,
    buildEdgeGeometry,
    buildGuideGeometry,
    clipToBoundary,
    extendGuides,
)
from cubeproj.hemi import VanishingPair, VanishingPoint, hemisphericalProject
from cubeproj.linear import linearProject

VIEWPOINT = point(0, 2, 8)
RADIUS = 6.0


@pytest.fixture
def cube_vertices():
    return CubePose().world_vertices()


@pytest.fixture
def rotated_vertices():
    pose = CubePose(mode="precise")
    pose.set_euler(30, 40, 50)
    return pose.world_vertices()


class TestLinear:
    def test_edges_are_straight(self, cube_vertices):
        lin = linearProject(cube_vertices, VIEWPOINT, RADIUS)
        edges = buildEdgeGeometry(lin.points2d, EDGES, lin.vanishing_points)
        assert len(edges) == 12
        for arc in edges:
            i, j = arc.edge
            assert len(arc.points) == 2
            assert not arc.fallback
            assert vclose(arc.start, lin.points2d[i])
            assert vclose(arc.end, lin.points2d[j])

    def test_missing_vertex_skips_edges(self, cube_vertices):
        lin = linearProject(cube_vertices, VIEWPOINT, RADIUS)
        points2d = list(lin.points2d)
        points2d[0] = None
        edges = buildEdgeGeometry(points2d, EDGES, lin.vanishing_points)
        assert len(edges) == 9
        assert all(0 not in arc.edge for arc in edges)

    def test_bad_input(self, cube_vertices):
        lin = linearProject(cube_vertices, VIEWPOINT, RADIUS)
        with pytest.raises(ValueError):
            buildEdgeGeometry(lin.points2d, [(0, 6)], lin.vanishing_points)
        with pytest.raises(ValueError):
            buildEdgeGeometry(lin.points2d, EDGES, lin.vanishing_points[:2])
        with pytest.raises(ValueError):
            buildGuideGeometry(lin.points2d, [])

    def test_guides(self, cube_vertices):
        lin = linearProject(cube_vertices, VIEWPOINT, RADIUS)
        guides = buildGuideGeometry(lin.points2d, lin.vanishing_points)
        ## only the z axis has a vanishing point
        assert len(guides) == 8
        for arc in guides:
            assert arc.axis == 2
            assert arc.kind == "guide"
            assert vclose(arc.end, lin.vanishing_points[2])


class TestHemispherical:
    def test_edges(self, cube_vertices):
        hp = hemisphericalProject(cube_vertices, VIEWPOINT, RADIUS)
        edges = buildEdgeGeometry(hp.points2d, EDGES, hp.pairs)
        assert len(edges) == 12
        z_edges = [arc for arc in edges if arc.axis == 2]
        assert len(z_edges) == 4
        ## the z vanishing point sits at the centre of the disc
        assert all(arc.fallback and len(arc.points) == 2 for arc in z_edges)
        for arc in edges:
            i, j = arc.edge
            assert vclose(arc.start, hp.points2d[i])
            assert vclose(arc.end, hp.points2d[j])

    def test_vertex_above_viewpoint_skips_edges(self, cube_vertices):
        vertices = list(cube_vertices)
        vertices[6] = point(2, 2, 12)
        hp = hemisphericalProject(vertices, VIEWPOINT, RADIUS)
        edges = buildEdgeGeometry(hp.points2d, EDGES, hp.pairs)
        assert len(edges) == 9
        assert all(6 not in arc.edge for arc in edges)
        guides = buildGuideGeometry(hp.points2d, hp.pairs)
        assert all(6 not in g.edge for g in guides)

    def test_scenario_guides(self, cube_vertices):
        hp = hemisphericalProject(cube_vertices, VIEWPOINT, RADIUS)
        guides = buildGuideGeometry(hp.points2d, hp.pairs)
        central = [g for g in guides if g.axis == 2]
        extended = [g for g in guides if g.kind == "extension"]
        assert len(central) == 4
        assert len(extended) == 8
        assert len(guides) == 12
        for g in central:
            assert g.fallback
            assert vclose(g.start, hp.pairs[2].inside.point)
            assert mag2(g.end) == pytest.approx(2.0 * hp.boundary_radius)
        limit = hp.boundary_radius * (1.0 + DEFAULT_CONFIG.boundary_tolerance)
        for g in extended:
            assert g.axis in (0, 1)
            assert len(g.points) >= 2
            assert all(mag2(p) <= limit for p in g.points)

    def test_collinear_extension_is_straight(self, cube_vertices):
        hp = hemisphericalProject(cube_vertices, VIEWPOINT, RADIUS)
        guides = extendGuides(0, hp.points2d, hp.pairs[0])
        assert len(guides) == 4
        ## vertices 2, 3, 6 and 7 share the viewpoint's y, so their
        ## images lie on the line through both x vanishing points
        straight = [g for g in guides if g.fallback]
        assert sorted(g.edge for g in straight) == [(3, 2), (7, 6)]
        for g in straight:
            assert g.circle is None
            assert all(abs(p[1]) < 1.0e-9 for p in g.points)

    def test_extension_needs_both_points(self, cube_vertices):
        hp = hemisphericalProject(cube_vertices, VIEWPOINT, RADIUS)
        pair = VanishingPair(VanishingPoint.none(), VanishingPoint.none(), hp.boundary_radius)
        assert extendGuides(0, hp.points2d, pair) == []

    def test_general_guides_reach_vanishing_points(self, rotated_vertices):
        hp = hemisphericalProject(rotated_vertices, VIEWPOINT, RADIUS)
        guides = buildGuideGeometry(hp.points2d, hp.pairs)
        assert guides
        for g in guides:
            if g.kind != "guide":
                continue
            pair = hp.pairs[g.axis]
            targets = [vp.point for vp in (pair.inside, pair.outside) if vp.isvalid]
            assert any(vclose(g.start, t, 1.0e-6) or vclose(g.end, t, 1.0e-6)
                       for t in targets)

    def test_guides_off_axis(self, rotated_vertices):
        hp = hemisphericalProject(rotated_vertices, VIEWPOINT, RADIUS)
        edges = buildEdgeGeometry(hp.points2d, EDGES, hp.pairs)
        assert len(edges) == 12
        assert any(not arc.fallback for arc in edges)


class TestClip:
    def test_first_run(self):
        pts = [point(0, 0), point(1, 0), point(5, 0), point(0.5, 0)]
        assert clipToBoundary(pts, 2.0) == [point(0, 0), point(1, 0)]

    def test_starts_outside(self):
        pts = [point(5, 0), point(1, 0), point(0, 1), point(9, 9), point(0, 0)]
        assert clipToBoundary(pts, 2.0) == [point(1, 0), point(0, 1)]

    def test_tolerance(self):
        assert clipToBoundary([point(2.01, 0)], 2.0) == [point(2.01, 0)]
        assert clipToBoundary([point(2.01, 0)], 2.0, tolerance=0.0) == []


def test_construction_geometry():
    construction = [(1, circle(point(0, 0), 1.0), [point(-1, 0), point(1, 0)])]
    arcs = buildConstructionGeometry(construction)
    assert len(arcs) == 2
    assert not arcs[0].fallback
    assert len(arcs[0].points) == 257
    assert arcs[1].fallback
    assert all(a.axis == 1 and a.kind == "construction" for a in arcs)


## zx'z'' poses that leave two cube axes parallel to the viewing plane
TWO_PARALLEL_AXES = [
    ((0, 0, 0), [0, 1]),
    ((0, 90, 0), [0, 2]),
    ((90, 90, 90), [1, 2]),
]


@pytest.mark.parametrize("euler,parallel", TWO_PARALLEL_AXES)
@pytest.mark.parametrize("radius", [1.0, 6.0, 15.0])
class TestTwoParallelAxes:
    def _vertices(self, euler):
        pose = CubePose(mode="precise")
        pose.set_euler(*euler)
        return pose.world_vertices()

    def test_linear_vanishing_points(self, euler, parallel, radius):
        lin = linearProject(self._vertices(euler), VIEWPOINT, radius)
        for axis in range(3):
            if axis in parallel:
                assert lin.vanishing_points[axis] is None
            else:
                assert vclose(lin.vanishing_points[axis], point(0, 0), 1.0e-6)
        guides = buildGuideGeometry(lin.points2d, lin.vanishing_points)
        assert len(guides) == 8
        assert all(g.axis not in parallel for g in guides)

    def test_extended_guides(self, euler, parallel, radius):
        hp = hemisphericalProject(self._vertices(euler), VIEWPOINT, radius)
        assert hp.degenerate_axes() == parallel
        guides = buildGuideGeometry(hp.points2d, hp.pairs)
        extended = [g for g in guides if g.kind == "extension"]
        assert len(extended) == 8
        assert sorted({g.axis for g in extended}) == parallel
        for axis in parallel:
            assert len(extendGuides(axis, hp.points2d, hp.pairs[axis])) == 4
