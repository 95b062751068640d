"""
Dataset loader (GeoJSON -> Country / Earthquake lists)
======================================================

This module reads the two static GeoJSON FeatureCollections and converts each
feature into an immutable record.

Key ideas:
- We try multiple property names because exports vary (ADMIN vs NAME, ...).
- Conversion helpers (_to_int/_to_float/_to_str) handle blanks safely.
- Country geometry is stored as-is; it is validated when a country is
  selected, so one broken boundary does not block loading the rest.
- Earthquakes without a usable position are still loaded: they belong to the
  full collection, they just never fall inside a country.
"""

from __future__ import annotations
from typing import Any, List, Optional, Sequence
import json, logging, re

import pandas as pd

from .config import (
    COUNTRY_ID_FIELDS,
    COUNTRY_NAME_FIELDS,
    EVENT_MAGNITUDE_FIELDS,
    EVENT_TIME_FIELDS,
    EVENT_TITLE_FIELDS,
)
from .models import Country, Earthquake

logger = logging.getLogger(__name__)

POLYGON_TYPES = ("Polygon", "MultiPolygon")

class DatasetError(ValueError):
    """Raised when an input file is not a GeoJSON FeatureCollection."""

def _is_missing(x) -> bool:
    if isinstance(x, (list, tuple, dict)):
        return False
    return x is None or bool(pd.isna(x))

def _to_int(x) -> Optional[int]:
    """Convert a cell to int, returning None if missing/invalid."""
    if _is_missing(x): return None
    try: return int(float(x))
    except (TypeError, ValueError, OverflowError): return None

def _to_float(x) -> Optional[float]:
    """Convert a cell to float, returning None if missing/invalid."""
    if _is_missing(x): return None
    try: return float(x)
    except (TypeError, ValueError): return None

def _to_str(x) -> str:
    if _is_missing(x): return ""
    return str(x).strip()

def _norm(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())

def _prop(props: dict, names: Sequence[str]) -> Any:
    """Return the first property present under any of `names` (exact, then normalized)."""
    for n in names:
        if n in props:
            return props[n]
    norm_map = {_norm(k): k for k in props}
    for n in names:
        k = norm_map.get(_norm(n))
        if k is not None:
            return props[k]
    return None

def _freeze(x):
    """Lists -> tuples, recursively (keeps records hashable)."""
    if isinstance(x, (list, tuple)):
        return tuple(_freeze(v) for v in x)
    return x

def _read_features(path: str) -> List[dict]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return features_of(data, source=path)

def features_of(data: Any, source: str = "<data>") -> List[dict]:
    if not isinstance(data, dict) or data.get("type") != "FeatureCollection":
        raise DatasetError(f"{source}: not a GeoJSON FeatureCollection")
    features = data.get("features")
    if not isinstance(features, list):
        raise DatasetError(f"{source}: 'features' must be a list")
    return features

def countries_from_features(features: Sequence[dict]) -> List[Country]:
    countries: List[Country] = []
    for i, feat in enumerate(features):
        props = (feat or {}).get("properties") or {}
        geom = (feat or {}).get("geometry") or {}
        gtype = geom.get("type")
        if gtype not in POLYGON_TYPES:
            logger.warning("Skipping country feature %d: geometry type %r", i, gtype)
            continue
        countries.append(Country(
            iso_a3=_to_str(_prop(props, COUNTRY_ID_FIELDS)),
            name=_to_str(_prop(props, COUNTRY_NAME_FIELDS)),
            geometry_type=gtype,
            coordinates=_freeze(geom.get("coordinates") or ()),
        ))
    return countries

def _position(coords) -> tuple:
    """Return (lon, lat, depth) from a GeoJSON Point position; missing parts -> None."""
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        return None, None, None
    depth = _to_float(coords[2]) if len(coords) >= 3 else None
    return _to_float(coords[0]), _to_float(coords[1]), depth

def earthquakes_from_features(features: Sequence[dict]) -> List[Earthquake]:
    if not features:
        return []
    df = pd.json_normalize(list(features))
    props = {c[len("properties."):]: c for c in df.columns if c.startswith("properties.")}
    mag_col = _prop(props, EVENT_MAGNITUDE_FIELDS)
    time_col = _prop(props, EVENT_TIME_FIELDS)
    title_col = _prop(props, EVENT_TITLE_FIELDS)
    coord_col = "geometry.coordinates" if "geometry.coordinates" in df.columns else None
    id_col = "id" if "id" in df.columns else None

    events: List[Earthquake] = []
    missing = 0
    for i, row in df.iterrows():
        lon, lat, depth = _position(row[coord_col]) if coord_col else (None, None, None)
        e = Earthquake(
            event_id=int(i),
            source_id=_to_str(row[id_col]) if id_col else "",
            title=_to_str(row[title_col]) if title_col else "",
            magnitude=_to_float(row[mag_col]) if mag_col else None,
            time_ms=_to_int(row[time_col]) if time_col else None,
            longitude=lon,
            latitude=lat,
            depth=depth,
        )
        if e.coordinates is None:
            missing += 1
        events.append(e)
    if missing:
        logger.warning("%d earthquake(s) have no usable coordinates and will never match a country", missing)
    return events

def load_countries(path: str) -> List[Country]:
    """Load the country boundary FeatureCollection."""
    countries = countries_from_features(_read_features(path))
    logger.info("Loaded %d countries from %s", len(countries), path)
    return countries

def load_earthquakes(path: str) -> List[Earthquake]:
    """Load the earthquake FeatureCollection (e.g. a USGS GeoJSON summary feed)."""
    events = earthquakes_from_features(_read_features(path))
    logger.info("Loaded %d earthquakes from %s", len(events), path)
    return events
