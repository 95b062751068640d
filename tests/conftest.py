"""Shared fixtures for quakefilter tests."""

import pytest

from quakefilter.models import Country, Earthquake


def square(x0, y0, x1, y1):
    """Closed counter-clockwise ring for an axis-aligned box."""
    return ((x0, y0), (x1, y0), (x1, y1), (x0, y1), (x0, y0))


def make_country(iso, name, *rings):
    return Country(iso_a3=iso, name=name, geometry_type="Polygon", coordinates=tuple(rings))


def make_quake(event_id, lon, lat, mag=4.5, title=None):
    return Earthquake(
        event_id=event_id,
        source_id=f"us{event_id:04d}",
        title=title or f"M {mag} - quake {event_id}",
        magnitude=mag,
        time_ms=1507425650893 + event_id,
        longitude=lon,
        latitude=lat,
        depth=10.0,
    )


# ---------------------------------------------------------------------------
# Geometry fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def square_geometry():
    """The 10x10 square with a corner at the origin."""
    return {"type": "Polygon", "coordinates": [[[0, 0], [10, 0], [10, 10], [0, 10], [0, 0]]]}


@pytest.fixture
def holed_geometry():
    """10x10 square with a 4x4 hole in the middle."""
    return {
        "type": "Polygon",
        "coordinates": [
            [[0, 0], [10, 0], [10, 10], [0, 10], [0, 0]],
            [[3, 3], [3, 7], [7, 7], [7, 3], [3, 3]],
        ],
    }


@pytest.fixture
def island_geometry():
    """A large square (mainland) plus a small square far away (island)."""
    return {
        "type": "MultiPolygon",
        "coordinates": [
            [[[100, 0], [102, 0], [102, 2], [100, 2], [100, 0]]],
            [[[10, 10], [20, 10], [20, 20], [10, 20], [10, 10]]],
        ],
    }


# ---------------------------------------------------------------------------
# Dataset fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def country_a():
    return make_country("AAA", "A", square(0, 0, 10, 10))


@pytest.fixture
def country_b():
    return make_country("BBB", "B", square(40, 40, 60, 60))


@pytest.fixture
def country_empty():
    """A real country that contains none of the sample earthquakes."""
    return make_country("EMP", "Emptyland", square(100, 10, 110, 20))


@pytest.fixture
def no_data_country():
    return make_country("-99", "Somaliland", square(-20, -20, -10, -10))


@pytest.fixture
def countries(country_a, country_b, country_empty, no_data_country):
    return [country_a, country_b, country_empty, no_data_country]


@pytest.fixture
def events():
    return [make_quake(0, 1, 1), make_quake(1, 50, 50), make_quake(2, -50, -50)]
