"""Tests for point-in-polygon classification and viewport centers."""

import math

import pytest

from quakefilter.geometry import (
    InvalidGeometry,
    center_of,
    compile_geometry,
    point_in_polygon,
    polygons,
)
from tests.conftest import make_country, square


class TestPointInPolygon:
    def test_inside_outside_and_corner(self, square_geometry):
        assert point_in_polygon(square_geometry, (5, 5)) is True
        assert point_in_polygon(square_geometry, (15, 15)) is False
        # boundary counts as inside
        assert point_in_polygon(square_geometry, (0, 0)) is True

    def test_points_on_edges_are_inside(self, square_geometry):
        for pt in [(5, 0), (10, 5), (5, 10), (0, 5)]:
            assert point_in_polygon(square_geometry, pt) is True

    def test_just_outside_an_edge(self, square_geometry):
        assert point_in_polygon(square_geometry, (10.000001, 5)) is False
        assert point_in_polygon(square_geometry, (5, -0.000001)) is False

    def test_point_in_hole_is_outside(self, holed_geometry):
        assert point_in_polygon(holed_geometry, (5, 5)) is False
        assert point_in_polygon(holed_geometry, (1, 1)) is True
        assert point_in_polygon(holed_geometry, (8.5, 5)) is True

    def test_hole_edge_is_inside(self, holed_geometry):
        assert point_in_polygon(holed_geometry, (3, 5)) is True

    def test_multipolygon_any_part(self, island_geometry):
        assert point_in_polygon(island_geometry, (15, 15)) is True
        assert point_in_polygon(island_geometry, (101, 1)) is True
        assert point_in_polygon(island_geometry, (50, 5)) is False

    def test_accepts_country_records(self):
        c = make_country("SQR", "Square", square(0, 0, 10, 10))
        assert point_in_polygon(c, (2, 3)) is True
        assert point_in_polygon(c, (-2, 3)) is False

    def test_unclosed_ring_is_accepted(self):
        g = {"type": "Polygon", "coordinates": [[[0, 0], [4, 0], [4, 4], [0, 4]]]}
        assert point_in_polygon(g, (2, 2)) is True

    def test_bad_point_is_rejected(self, square_geometry):
        with pytest.raises(ValueError):
            point_in_polygon(square_geometry, (math.nan, 1))
        with pytest.raises(ValueError):
            point_in_polygon(square_geometry, ("x",))

    def test_deterministic(self, holed_geometry):
        answers = {point_in_polygon(holed_geometry, (3, 5)) for _ in range(5)}
        assert answers == {True}


class TestInvalidGeometry:
    @pytest.mark.parametrize("geometry", [
        {"type": "Polygon", "coordinates": [[[0, 0], [1, 1], [0, 0]]]},
        {"type": "Polygon", "coordinates": [[[0, 0], [1, 1], [2, 2], [0, 0]]]},
        {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, math.inf], [0, 0]]]},
        {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, float("nan")], [0, 0]]]},
        {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], ["a", "b"], [0, 0]]]},
        {"type": "Polygon", "coordinates": [[[0, 0], [1], [1, 1], [0, 0]]]},
        {"type": "Polygon", "coordinates": []},
        {"type": "MultiPolygon", "coordinates": []},
        {"type": "Point", "coordinates": [1, 2]},
        {"type": "Polygon"},
    ])
    def test_rejected_everywhere(self, geometry):
        with pytest.raises(InvalidGeometry):
            point_in_polygon(geometry, (0.5, 0.5))
        with pytest.raises(InvalidGeometry):
            center_of(geometry)
        with pytest.raises(InvalidGeometry):
            compile_geometry(geometry)

    def test_degenerate_hole(self):
        g = {"type": "Polygon", "coordinates": [
            [[0, 0], [10, 0], [10, 10], [0, 10], [0, 0]],
            [[2, 2], [3, 3], [2, 2]],
        ]}
        with pytest.raises(InvalidGeometry):
            point_in_polygon(g, (5, 5))

    @pytest.mark.parametrize("ring", [
        [[0, 0], [2, 2], [2, 0], [0, 2], [0, 0]],
        [[0, 0], [4, 4], [4, 0], [0, 3], [0, 0]],
    ])
    def test_self_intersecting_ring(self, ring):
        g = {"type": "Polygon", "coordinates": [ring]}
        with pytest.raises(InvalidGeometry, match="Self-intersection"):
            point_in_polygon(g, (1, 0.5))
        with pytest.raises(InvalidGeometry, match="Self-intersection"):
            compile_geometry(g)

    def test_collinear_ring_message(self):
        g = {"type": "Polygon", "coordinates": [[[0, 0], [1, 1], [2, 2], [0, 0]]]}
        with pytest.raises(InvalidGeometry, match="collapses to a line"):
            center_of(g)

    def test_not_a_mapping(self):
        with pytest.raises(InvalidGeometry):
            center_of([[0, 0], [1, 0], [1, 1]])

    def test_is_a_value_error(self):
        assert issubclass(InvalidGeometry, ValueError)


class TestCenterOf:
    def test_square_centroid_is_exact(self, square_geometry):
        assert center_of(square_geometry) == (5.0, 5.0)

    def test_holes_are_ignored(self):
        g = {"type": "Polygon", "coordinates": [
            [[0, 0], [10, 0], [10, 10], [0, 10], [0, 0]],
            [[1, 1], [1, 3], [3, 3], [3, 1], [1, 1]],
        ]}
        assert center_of(g) == pytest.approx((5.0, 5.0))

    def test_area_weighted_not_vertex_average(self):
        # extra collinear vertices along the bottom edge must not pull the center down
        g = {"type": "Polygon", "coordinates": [
            [[0, 0], [1, 0], [2, 0], [3, 0], [4, 0], [4, 4], [0, 4], [0, 0]],
        ]}
        assert center_of(g) == pytest.approx((2.0, 2.0))

    def test_multipolygon_uses_largest_part(self, island_geometry):
        assert center_of(island_geometry) == pytest.approx((15.0, 15.0))

    def test_multipolygon_tie_goes_to_first_part(self):
        g = {"type": "MultiPolygon", "coordinates": [
            [[[20, 20], [24, 20], [24, 24], [20, 24], [20, 20]]],
            [[[0, 0], [4, 0], [4, 4], [0, 4], [0, 0]]],
        ]}
        assert center_of(g) == pytest.approx((22.0, 22.0))

    def test_clockwise_ring(self):
        g = {"type": "Polygon", "coordinates": [[[0, 0], [0, 6], [6, 6], [6, 0], [0, 0]]]}
        assert center_of(g) == pytest.approx((3.0, 3.0))


class TestCompiledGeometry:
    def test_agrees_with_point_in_polygon(self, holed_geometry, island_geometry):
        probes = [(5, 5), (1, 1), (3, 5), (0, 0), (10, 10), (11, 5), (15, 15), (101, 1), (-1, -1)]
        for g in (holed_geometry, island_geometry):
            compiled = compile_geometry(g)
            for pt in probes:
                assert compiled.covers(pt) == point_in_polygon(g, pt), (g["type"], pt)

    def test_bounds(self, island_geometry):
        compiled = compile_geometry(island_geometry)
        assert compiled.bounds == (10.0, 0.0, 102.0, 20.0)


def test_polygons_returns_float_rings(holed_geometry):
    parts = polygons(holed_geometry)
    assert len(parts) == 1
    outer, hole = parts[0]
    assert outer[0] == (0.0, 0.0)
    assert hole[1] == (3.0, 7.0)
