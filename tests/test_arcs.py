import math

import pytest

from cubeproj.arcs import (
    Arc,
    arc_direction,
    arc_sweep,
    createArc,
    createCircle,
    createEdgeArc,
    polyline,
    sampleCircle,
    sort_collinear,
)
from cubeproj.config import Sampling
from cubeproj.geom import circle, dist, mag2, point, vclose

pi = math.pi


class TestSweep:
    def test_ccw(self):
        assert arc_sweep(0, pi / 2, True) == pytest.approx(pi / 2)
        assert arc_sweep(3 * pi / 2, pi / 2, True) == pytest.approx(pi)

    def test_cw(self):
        assert arc_sweep(pi / 2, 0, False) == pytest.approx(-pi / 2)
        assert arc_sweep(0, pi / 2, False) == pytest.approx(-3 * pi / 2)

    def test_direction_is_inverted(self):
        ## the through angle lies on the counter-clockwise path, so the
        ## arc is sampled clockwise
        assert arc_direction(0, pi / 2, pi) is False
        assert arc_direction(0, 3 * pi / 2, pi) is True


class TestCreateArc:
    def test_avoids_through_point(self):
        arc = createArc(point(1, 0), point(-1, 0), point(0, 1))
        assert not arc.fallback
        assert arc.counterclockwise is False
        assert arc.start == point(1, 0)
        assert arc.end == point(-1, 0)
        assert all(mag2(p) == pytest.approx(1.0) for p in arc.points)
        assert max(p[1] for p in arc.points) < 1.0e-9
        assert arc.length() == pytest.approx(pi, rel=1.0e-3)

    def test_collinear_sorted(self):
        arc = createArc(point(2, 0), point(0, 0), point(1, 0))
        assert arc.fallback
        assert arc.circle is None
        assert arc.points == [point(0, 0), point(1, 0), point(2, 0)]

    def test_collinear_vertical(self):
        arc = createArc(point(0, 2), point(0, 0), point(0, 1))
        assert arc.points == [point(0, 0), point(0, 1), point(0, 2)]

    def test_segment_cap(self):
        arc = createArc(point(1000, 0), point(-1000, 0), point(0, 1000))
        assert len(arc.points) == 257

    def test_adaptive_segments(self):
        arc = createArc(point(10, 0), point(-10, 0), point(0, -10))
        ## half of a radius 10 circle needs 63 segments of at most 0.5,
        ## fewer than the base count of 64
        assert len(arc.points) == 65
        arc = createArc(point(20, 0), point(-20, 0), point(0, -20))
        assert len(arc.points) == math.ceil(20 * pi / 0.5) + 1

    def test_custom_sampling(self):
        arc = createArc(point(1, 0), point(-1, 0), point(0, 1), Sampling(8, 16))
        assert len(arc.points) == 9


class TestCreateEdgeArc:
    def test_spans_vertices_only(self):
        arc = createEdgeArc(point(1, 0), point(0, 1), point(-1, 0))
        assert arc.counterclockwise is True
        assert arc.start == point(1, 0)
        assert arc.end == point(0, 1)
        assert len(arc.points) == 33
        assert all(p[0] > -1.0e-9 and p[1] > -1.0e-9 for p in arc.points)
        assert all(dist(p, point(-1, 0)) > 1.0 for p in arc.points)

    def test_collinear(self):
        arc = createEdgeArc(point(1, 1), point(3, 3), point(5, 5))
        assert arc.fallback
        assert arc.points == [point(1, 1), point(3, 3)]


class TestCircle:
    def test_full_circle(self):
        arc = createCircle(point(1, 0), point(0, 1), point(-1, 0))
        assert len(arc.points) == 257
        assert vclose(arc.points[0], arc.points[-1])
        assert arc.kind == "construction"

    def test_collinear(self):
        arc = createCircle(point(0, 0), point(2, 0), point(1, 0))
        assert arc.fallback
        assert len(arc.points) == 3

    def test_sample_circle_tags(self):
        arc = sampleCircle(circle(point(3, 4), 100.0), axis=2)
        assert arc.axis == 2
        assert len(arc.points) == 1025
        assert all(dist(p, point(3, 4)) == pytest.approx(100.0) for p in arc.points)


def test_polyline():
    arc = polyline([(0, 0), (3, 4)], axis=1, kind="guide")
    assert isinstance(arc, Arc)
    assert arc.length() == 5.0
    assert arc.points[1] == point(3, 4)
    assert not arc.fallback


def test_sort_collinear():
    pts = sort_collinear([point(1, 5), point(1, -5), point(0, 9)])
    assert pts == [point(0, 9), point(1, -5), point(1, 5)]
