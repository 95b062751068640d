"""
Data model (Country, Earthquake, FilterResult)
==============================================

Every feature of the two GeoJSON datasets is converted into an immutable
record. We keep them frozen (`frozen=True`) so that:
- records cannot be accidentally modified after loading, and
- a filter result only *selects* records, it never edits them.

`FilterResult` is derived data: it is recomputed in full on every selection
change and handed to whatever draws the map.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
import math

from .config import ANY, NO_DATA_ID

__all__ = ["ANY", "NO_DATA_ID", "Country", "Earthquake", "FilterResult"]

Coordinate = Tuple[float, float]

@dataclass(frozen=True)
class Country:
    """One country boundary feature.

    `coordinates` keeps the GeoJSON nesting (as tuples, so the record is
    hashable): rings of (lon, lat) pairs for a Polygon, a list of those for a
    MultiPolygon.
    """
    iso_a3: str
    name: str
    geometry_type: str
    coordinates: Tuple[Any, ...]

    @property
    def is_selectable(self) -> bool:
        """False for the no-data sentinel countries."""
        return self.iso_a3 != NO_DATA_ID

    @property
    def geometry(self) -> Dict[str, Any]:
        return {"type": self.geometry_type, "coordinates": self.coordinates}

    @property
    def __geo_interface__(self) -> Dict[str, Any]:
        return self.geometry

@dataclass(frozen=True)
class Earthquake:
    """One earthquake record.

    Coordinates may be missing in the source feed; such events still belong to
    the full collection but can never be inside a country.
    """
    event_id: int
    source_id: str
    title: str
    magnitude: Optional[float]
    time_ms: Optional[int]
    longitude: Optional[float]
    latitude: Optional[float]
    # depth (km) is carried for display; filtering ignores it
    depth: Optional[float] = None

    @property
    def coordinates(self) -> Optional[Coordinate]:
        """Return (lon, lat), or None if the event has no usable position."""
        if self.longitude is None or self.latitude is None:
            return None
        if not (math.isfinite(self.longitude) and math.isfinite(self.latitude)):
            return None
        return (self.longitude, self.latitude)

    def timestamp(self) -> Optional[datetime]:
        if self.time_ms is None:
            return None
        return datetime.fromtimestamp(self.time_ms / 1000.0, tz=timezone.utc)

@dataclass(frozen=True)
class FilterResult:
    """Output of one selection change.

    - events: earthquakes to draw
    - countries: boundaries to draw (everything, or just the selected country)
    - center: where to re-center the view, or None for the default view
    - country: the resolved country, or None when showing everything
    """
    events: List[Earthquake] = field(default_factory=list)
    countries: List[Country] = field(default_factory=list)
    center: Optional[Coordinate] = None
    country: Optional[Country] = None

    @property
    def is_filtered(self) -> bool:
        return self.country is not None

    @property
    def is_empty(self) -> bool:
        """True when the selection is valid but encloses no earthquakes."""
        return not self.events
