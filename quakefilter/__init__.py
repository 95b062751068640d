"""
quakefilter package
===================

This package contains the earthquake country filter engine.

- The CLI entry point is in `quakefilter/cli.py`.
- The core engine (selection, classification, reset) is in `quakefilter/engine.py`.
- Polygon tests and centers are in `quakefilter/geometry.py`.
- Dataset loading is in `quakefilter/loader.py`.
"""

__version__ = '0.3.0'
