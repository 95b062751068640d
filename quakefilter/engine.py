"""
Core engine
===========

This is the heart of the project. It works like a tiny offline map filter:

1) Load datasets -> lists of Country / Earthquake records (immutable)
2) Build a country index -> fast lookups for the selection resolver
3) On every selection change, recompute a full `FilterResult`:
   - "ANY" (or an unknown country) -> everything, default view
   - a country -> only the earthquakes inside it, that country's boundary,
     and a center to fly to
4) Keep the current selection plus undo/redo history in a session

`apply()` is a pure function. `QuakeFilter` is the stateful session the CLI
talks to; it never keeps a half-computed result.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, List, Optional, Sequence
import csv, json, logging, time

from shapely.geometry import Point, shape

from .config import ANY
from .geometry import CompiledGeometry, center_of
from .indices import CountryIndex, build_indices, resolve
from .models import Country, Earthquake, FilterResult

logger = logging.getLogger(__name__)

@lru_cache(maxsize=64)
def _compiled(country: Country) -> CompiledGeometry:
    # Countries are immutable, so their prepared geometry can be reused across selections.
    return CompiledGeometry(country)

def classify_events(events: Sequence[Earthquake], country: Country) -> List[Earthquake]:
    """Return the events inside `country`, in their original order.

    The geometry is validated before any event is looked at, so a broken
    boundary raises InvalidGeometry instead of yielding a partial answer.
    """
    geom = _compiled(country)
    out: List[Earthquake] = []
    for e in events:
        pt = e.coordinates
        if pt is None:
            continue
        if geom.covers(pt):
            out.append(e)
    return out

def apply(
    all_events: Sequence[Earthquake],
    all_countries: Sequence[Country],
    selection: str,
    index: Optional[CountryIndex] = None,
) -> FilterResult:
    """Compute the filter result for one selection.

    `index`, when given, must have been built from `all_countries`.
    """
    if selection == ANY:
        return FilterResult(events=list(all_events), countries=list(all_countries))

    country = index.resolve(selection) if index is not None else resolve(all_countries, selection)
    if country is None:
        logger.info("No country matches %r; showing all earthquakes", selection)
        return FilterResult(events=list(all_events), countries=list(all_countries))

    t0 = time.perf_counter()
    center = center_of(country)
    events = classify_events(all_events, country)
    logger.debug("Classified %d events against %s in %.2fms",
                 len(all_events), country.name, (time.perf_counter() - t0) * 1000)
    return FilterResult(events=events, countries=[country], center=center, country=country)

@dataclass
class SelectionState:
    """The current selection and the result computed for it."""
    selection: str
    result: FilterResult

@dataclass
class QuakeFilter:
    """Earthquake filter session.

    The session stores:
    - events / countries: the full datasets (never modified)
    - idx: precomputed country lookups
    - state: current selection and its FilterResult

    Selection changes always recompute the result from the full datasets.
    """
    events: List[Earthquake]
    countries: List[Country]
    idx: CountryIndex = field(init=False)
    # Selection changes that took effect, in order (failed or no-op commands are not logged)
    command_log: List[str] = field(default_factory=list, init=False)
    state: SelectionState = field(init=False)

    # Stacks for undo/redo (store previous selections)
    _undo: List[str] = field(default_factory=list, init=False)
    _redo: List[str] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.idx = build_indices(self.countries)
        self.state = SelectionState(selection=ANY, result=self._compute(ANY))

    @property
    def result(self) -> FilterResult:
        return self.state.result

    def _compute(self, selection: str) -> FilterResult:
        return apply(self.events, self.countries, selection, index=self.idx)

    def _switch(self, selection: str) -> FilterResult:
        # Compute first: if the geometry is broken, the current state survives.
        result = self._compute(selection)
        self.state = SelectionState(selection=selection, result=result)
        return result

    # ---------------- Selection ----------------
    def select(self, identifier: str) -> FilterResult:
        """Select a country by ISO code or display name ("ANY" resets)."""
        result = self._compute(identifier)
        self._undo.append(self.state.selection)
        self._redo.clear()
        self.state = SelectionState(selection=identifier, result=result)
        self.command_log.append(f"select {identifier}")
        return result

    def reset(self) -> FilterResult:
        """Show all earthquakes and all countries."""
        return self.select(ANY)

    # ---------------- History (Stacks) ----------------
    def undo(self) -> bool:
        if not self._undo:
            return False
        current = self.state.selection
        self._switch(self._undo[-1])
        self._undo.pop()
        self._redo.append(current)
        self.command_log.append("undo")
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        nxt = self._redo[-1]
        current = self.state.selection
        self._switch(nxt)
        self._redo.pop()
        self._undo.append(current)
        self.command_log.append("redo")
        return True

    # ---------------- Output operations ----------------
    def event(self, event_id: int) -> Earthquake:
        """Look up one of the currently shown events (for popups)."""
        for e in self.result.events:
            if e.event_id == event_id:
                return e
        if 0 <= event_id < len(self.events):
            raise ValueError(f"Earthquake {event_id} is not shown in the current selection")
        raise ValueError(f"No earthquake with id {event_id}")

    def export_geojson(self, path: str) -> None:
        """Write the current filtered earthquakes as a GeoJSON FeatureCollection."""
        features = []
        for e in self.result.events:
            coords = [e.longitude, e.latitude] + ([e.depth] if e.depth is not None else [])
            features.append({
                "type": "Feature",
                "id": e.source_id or None,
                "properties": {"mag": e.magnitude, "time": e.time_ms, "title": e.title},
                "geometry": {"type": "Point", "coordinates": coords},
            })
        payload = {"type": "FeatureCollection", "features": features}
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False)

    def export_csv(self, path: str) -> None:
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(["event_id", "source_id", "title", "magnitude", "time_ms",
                        "longitude", "latitude", "depth"])
            for e in self.result.events:
                w.writerow([e.event_id, e.source_id, e.title, e.magnitude, e.time_ms,
                            e.longitude, e.latitude, e.depth])

    def bench(self, identifier: str, rounds: int = 10) -> Dict[str, float]:
        """Time a plain shapely scan against the prepared scan for one country."""
        country = self.idx.resolve(identifier)
        if country is None:
            raise ValueError(f"Unknown country: {identifier}")

        prepared_hits = classify_events(self.events, country)

        def naive():
            g = shape(country)
            return [e for e in self.events
                    if e.coordinates is not None and g.covers(Point(e.coordinates))]

        def prepared():
            return classify_events(self.events, country)

        t0 = time.perf_counter()
        for _ in range(rounds): naive()
        t1 = time.perf_counter()
        for _ in range(rounds): prepared()
        t2 = time.perf_counter()
        return {"naive_ms": (t1-t0)*1000/rounds, "prepared_ms": (t2-t1)*1000/rounds,
                "matches": float(len(prepared_hits))}
