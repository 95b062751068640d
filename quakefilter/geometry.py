"""
Geometry helpers (point-in-polygon, centers)
============================================

Pure functions over GeoJSON `Polygon` / `MultiPolygon` geometries. Any object
exposing `__geo_interface__` (a `Country`, a shapely shape) is accepted as well
as a plain mapping.

Policies:
- Coordinates are treated as planar (longitude, latitude) degrees.
- A point lying exactly on a boundary (outer ring or hole) counts as INSIDE.
- A multi-polygon contains a point if any of its polygons does.
- The center of a multi-polygon is the centroid of its largest polygon
  (outer-ring area), so islands far away do not drag the view off the mainland.
- Holes are ignored when computing centers.

Every geometry is validated before use; malformed input raises
`InvalidGeometry` instead of answering with a default.
"""

from __future__ import annotations
from typing import Any, List, Mapping, Tuple
import math

from shapely.geometry import MultiPoint, Point, Polygon
from shapely.prepared import prep
from shapely.validation import explain_validity

Coordinate = Tuple[float, float]
Ring = List[Coordinate]
Bounds = Tuple[float, float, float, float]

class InvalidGeometry(ValueError):
    """Raised for geometry that cannot be classified against."""

def _as_mapping(geometry: Any) -> Mapping[str, Any]:
    if hasattr(geometry, "__geo_interface__"):
        geometry = geometry.__geo_interface__
    if not isinstance(geometry, Mapping):
        raise InvalidGeometry(f"Expected a GeoJSON geometry, got {type(geometry).__name__}")
    return geometry

def _ring(raw: Any, where: str) -> Ring:
    """Validate one ring and return it as a list of float pairs."""
    if not isinstance(raw, (list, tuple)):
        raise InvalidGeometry(f"{where}: ring must be a sequence of positions")
    pts: Ring = []
    for v in raw:
        if not isinstance(v, (list, tuple)) or len(v) < 2:
            raise InvalidGeometry(f"{where}: {v!r} is not a coordinate pair")
        try:
            x, y = float(v[0]), float(v[1])
        except (TypeError, ValueError):
            raise InvalidGeometry(f"{where}: {v!r} is not numeric") from None
        if not (math.isfinite(x) and math.isfinite(y)):
            raise InvalidGeometry(f"{where}: non-finite coordinate {v!r}")
        pts.append((x, y))
    if len(set(pts)) < 3:
        raise InvalidGeometry(f"{where}: ring needs at least 3 distinct points")
    if MultiPoint(pts).convex_hull.geom_type != "Polygon":
        raise InvalidGeometry(f"{where}: ring collapses to a line")
    ring = Polygon(pts)
    if not ring.is_valid:
        raise InvalidGeometry(f"{where}: {explain_validity(ring)}")
    return pts

def _polygon_rings(raw: Any, where: str) -> List[Ring]:
    if not isinstance(raw, (list, tuple)) or not raw:
        raise InvalidGeometry(f"{where}: polygon has no rings")
    return [_ring(r, f"{where} ring {i}") for i, r in enumerate(raw)]

def polygons(geometry: Any) -> List[List[Ring]]:
    """Return validated polygons as lists of rings (first ring = outer boundary)."""
    g = _as_mapping(geometry)
    gtype = g.get("type")
    coords = g.get("coordinates")
    if gtype == "Polygon":
        return [_polygon_rings(coords, "Polygon")]
    if gtype == "MultiPolygon":
        if not isinstance(coords, (list, tuple)) or not coords:
            raise InvalidGeometry("MultiPolygon has no polygons")
        return [_polygon_rings(p, f"MultiPolygon part {i}") for i, p in enumerate(coords)]
    raise InvalidGeometry(f"Unsupported geometry type: {gtype!r}")

def _point(point: Any) -> Coordinate:
    try:
        x, y = float(point[0]), float(point[1])
    except (TypeError, ValueError, IndexError):
        raise ValueError(f"Not a coordinate pair: {point!r}") from None
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValueError(f"Non-finite coordinate: {point!r}")
    return x, y

class CompiledGeometry:
    """A validated geometry prepared for many containment tests.

    Each polygon is a prepared shapely geometry, so repeated `covers` calls
    short-circuit on its bounding box before walking the edges.
    """

    def __init__(self, geometry: Any) -> None:
        self.parts = [Polygon(rings[0], rings[1:]) for rings in polygons(geometry)]
        self._prepared = [prep(p) for p in self.parts]
        xs = [b for p in self.parts for b in (p.bounds[0], p.bounds[2])]
        ys = [b for p in self.parts for b in (p.bounds[1], p.bounds[3])]
        self.bounds: Bounds = (min(xs), min(ys), max(xs), max(ys))

    def covers(self, point: Any) -> bool:
        x, y = _point(point)
        minx, miny, maxx, maxy = self.bounds
        if x < minx or x > maxx or y < miny or y > maxy:
            return False
        pt = Point(x, y)
        return any(p.covers(pt) for p in self._prepared)

def compile_geometry(geometry: Any) -> CompiledGeometry:
    return CompiledGeometry(geometry)

def point_in_polygon(geometry: Any, point: Any) -> bool:
    """Return True if `point` (lon, lat) lies inside or on the boundary of `geometry`."""
    x, y = _point(point)
    pt = Point(x, y)
    for rings in polygons(geometry):
        if Polygon(rings[0], rings[1:]).covers(pt):
            return True
    return False

def center_of(geometry: Any) -> Coordinate:
    """Return a (lon, lat) point to center a view on.

    Polygon: area-weighted centroid of the outer ring.
    MultiPolygon: the same, for the polygon with the largest outer ring.
    """
    best = None
    best_area = -1.0
    for rings in polygons(geometry):
        outer = Polygon(rings[0])
        if outer.area > best_area:
            best, best_area = outer, outer.area
    c = best.centroid
    return (c.x, c.y)
