"""
quakefilter configuration and constants.
"""

# ---------------------------------------------------------------------------
# Selection sentinels
# ---------------------------------------------------------------------------
# Reserved selection value meaning "show every earthquake and every country".
ANY = "ANY"

# Natural Earth marks countries without an ISO code with this value. They stay
# in the boundary collection but are never offered for selection.
NO_DATA_ID = "-99"

# ---------------------------------------------------------------------------
# GeoJSON property names (first match wins)
# ---------------------------------------------------------------------------
COUNTRY_ID_FIELDS = ("ISO_A3", "iso_a3", "ADM0_A3", "adm0_a3")
COUNTRY_NAME_FIELDS = ("ADMIN", "admin", "NAME", "name")

EVENT_MAGNITUDE_FIELDS = ("mag", "magnitude")
EVENT_TIME_FIELDS = ("time", "timestamp")
EVENT_TITLE_FIELDS = ("title", "place")

# ---------------------------------------------------------------------------
# Viewport (consumed by the presentation layer only)
# ---------------------------------------------------------------------------
DEFAULT_CENTER = (-100.0, 40.0)  # (lon, lat)
DEFAULT_ZOOM = 1.5
COUNTRY_ZOOM = 3.0

# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------
DEFAULT_COUNTRIES_PATH = "data/countries.json"
DEFAULT_EARTHQUAKES_PATH = "data/earthquakes.json"
MAX_LIST_ROWS = 50
