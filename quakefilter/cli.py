"""
quakefilter Command Line Interface (CLI)
========================================

This file provides the interactive terminal program you run like:

    python -m quakefilter.cli --countries data/countries.json --earthquakes data/earthquakes.json

It plays the part of the map UI:
- `countries` is the dropdown (no-data countries are not listed)
- `select` / `reset` change the selection
- `legend` / `info` show the count message and the popup fields
- after every selection the new view center and zoom are printed

The CLI DOES NOT modify the dataset files. It loads them once and works on an
in-memory selection.
"""

from __future__ import annotations
from typing import Optional, Sequence
import argparse, logging, shlex

from .config import (
    ANY,
    COUNTRY_ZOOM,
    DEFAULT_CENTER,
    DEFAULT_COUNTRIES_PATH,
    DEFAULT_EARTHQUAKES_PATH,
    DEFAULT_ZOOM,
    MAX_LIST_ROWS,
)
from .engine import QuakeFilter
from .loader import load_countries, load_earthquakes
from .models import Earthquake, FilterResult

HELP_TEXT = """
quakefilter commands (grouped)
------------------------------

1) View / Inspect
   help
   stats
   countries [prefix]               (example: countries ind)
   show [n]                         (example: show 20)
   legend
   info <event_id>                  (example: info 42)

2) Selection
   select "<Country or ISO_A3>"     (example: select "Japan" or select JPN)
   select ANY                       (same as reset)
   reset

3) History
   undo
   redo

4) Export (current selection)
   export geojson "<out.geojson>"
   export csv "<out.csv>"

5) Benchmarking
   bench "<Country>" [rounds]       (example: bench "United States of America" 5)

6) Exit
   quit
"""

NO_EVENTS_MESSAGE = "**There are no earthquakes in the selected country**"
CLICK_HINT = "Use 'info <event_id>' to see an earthquake"

def viewport(result: FilterResult) -> tuple:
    """Return (center, zoom) the map should fly to for `result`."""
    if result.center is None:
        return DEFAULT_CENTER, DEFAULT_ZOOM
    return result.center, COUNTRY_ZOOM

def legend_lines(result: FilterResult, event: Optional[Earthquake] = None) -> list:
    if event is not None:
        lines = []
        if event.title:
            lines.append(f"title: {event.title}")
        if event.magnitude is not None:
            lines.append(f"magnitude: {event.magnitude}")
        ts = event.timestamp()
        if ts is not None:
            lines.append(f"timestamp: {ts.isoformat()}")
        return lines
    return [NO_EVENTS_MESSAGE if result.is_empty else CLICK_HINT]

def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for the CLI.

    1) Load datasets
    2) Build the session (indices + initial "ANY" result)
    3) Start an interactive REPL
    """
    ap = argparse.ArgumentParser(description="Filter earthquakes by country")
    ap.add_argument("--countries", default=DEFAULT_COUNTRIES_PATH, help="Country boundaries GeoJSON")
    ap.add_argument("--earthquakes", default=DEFAULT_EARTHQUAKES_PATH, help="Earthquake GeoJSON feed")
    ap.add_argument("--log-level", default="WARNING", help="DEBUG, INFO, WARNING, ...")
    args = ap.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    print("Loading datasets...")
    engine = QuakeFilter(
        events=load_earthquakes(args.earthquakes),
        countries=load_countries(args.countries),
    )

    print(f"Loaded {len(engine.events)} earthquakes and {len(engine.idx.selectable)} countries. "
          "Type 'help' for commands.")
    while True:
        try:
            line = input("quake> ")
        except EOFError:
            break
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.lower() in ("quit", "exit"):
            break
        try:
            handle(engine, stripped)
        except Exception as e:
            print(f"Error: {e}")

def handle(engine: QuakeFilter, line: str) -> None:
    """Handle one CLI command line."""
    parts = shlex.split(line)
    cmd = parts[0].lower()

    if cmd == "help":
        print(HELP_TEXT)
        return

    if cmd == "stats":
        r = engine.result
        print(f"Selection: {engine.state.selection} | Earthquakes shown: {len(r.events)}/{len(engine.events)}")
        print(f"Countries: {len(engine.idx.selectable)} selectable, {len(engine.countries)} boundaries")
        if engine.idx.duplicate_names:
            print(f"Duplicate display names: {', '.join(engine.idx.duplicate_names)}")
        if engine.command_log:
            print(f"History: {' -> '.join(engine.command_log)}")
        return

    if cmd == "countries":
        prefix = parts[1] if len(parts) >= 2 else ""
        names = engine.idx.names(prefix)
        for n in names[:MAX_LIST_ROWS]:
            print(n)
        if len(names) > MAX_LIST_ROWS:
            print(f"... ({len(names)} total, showing {MAX_LIST_ROWS})")
        return

    if cmd in ("select", "reset"):
        if cmd == "reset":
            result = engine.reset()
        else:
            if len(parts) < 2:
                print('Usage: select "<Country>"  OR  select ANY')
                return
            result = engine.select(" ".join(parts[1:]))
        _print_selection(engine.state.selection, result)
        return

    if cmd == "undo":
        print("Undone." if engine.undo() else "Nothing to undo.")
        _print_selection(engine.state.selection, engine.result)
        return

    if cmd == "redo":
        print("Redone." if engine.redo() else "Nothing to redo.")
        _print_selection(engine.state.selection, engine.result)
        return

    if cmd == "show":
        n = int(parts[1]) if len(parts) >= 2 else 10
        _print_rows(engine.result.events[:n])
        return

    if cmd == "legend":
        for ln in legend_lines(engine.result):
            print(ln)
        return

    if cmd == "info":
        if len(parts) < 2:
            print("Usage: info <event_id>")
            return
        for ln in legend_lines(engine.result, engine.event(int(parts[1]))):
            print(ln)
        return

    if cmd == "export":
        if len(parts) < 3:
            print('Usage: export geojson "out.geojson"  OR  export csv "out.csv"')
            return
        fmt, out_path = parts[1].lower(), parts[2]
        if fmt == "geojson":
            engine.export_geojson(out_path)
        elif fmt == "csv":
            engine.export_csv(out_path)
        else:
            print("Unknown export format. Use: geojson or csv")
            return
        print(f"Exported {len(engine.result.events)} earthquakes to {out_path}")
        return

    if cmd == "bench":
        if len(parts) < 2:
            print('Usage: bench "<Country>" [rounds]')
            return
        rounds = int(parts[2]) if len(parts) >= 3 else 10
        res = engine.bench(parts[1], rounds=rounds)
        print(f"naive={res['naive_ms']:.3f}ms | prepared={res['prepared_ms']:.3f}ms | matches={int(res['matches'])}")
        return

    print("Unknown command. Type 'help'.")

def _print_selection(selection: str, result: FilterResult) -> None:
    (lon, lat), zoom = viewport(result)
    label = result.country.name if result.country is not None else "all countries"
    if selection != ANY and result.country is None:
        label += f" (no country matches {selection!r})"
    print(f"Showing {label}: {len(result.events)} earthquake(s). View -> center=({lon:.3f}, {lat:.3f}) zoom={zoom}")
    if result.is_empty:
        print(NO_EVENTS_MESSAGE)

def _print_rows(rows) -> None:
    for e in rows:
        pos = e.coordinates
        where = f"({pos[0]:.3f}, {pos[1]:.3f})" if pos else "(no position)"
        print(f"[{e.event_id}] M{e.magnitude if e.magnitude is not None else '?'} | {e.title} | {where}")

if __name__ == "__main__":
    main()
