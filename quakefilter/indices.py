"""
Country lookup (selection resolver + precomputed index)
=======================================================

A selection arrives as a single string from the UI. We resolve it to one
`Country`:

1) exact match on the stable identifier (`ISO_A3`), then
2) exact match on the display name, first match in collection order.

The no-data sentinel identifier (-99) is shared by several countries, and an
empty identifier names nothing, so neither is used as a lookup key.

`resolve()` is the plain linear version. `CountryIndex` precomputes the same
answers as dictionaries (and remembers which display names are duplicated).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .config import ANY
from .models import Country

def _check_identifier(identifier: str) -> None:
    if identifier == ANY:
        raise ValueError(f"{ANY!r} is the reset selection, not a country identifier")

def resolve(countries: Sequence[Country], identifier: str) -> Optional[Country]:
    """Return the country matching `identifier`, or None if nothing matches."""
    _check_identifier(identifier)
    for c in countries:
        if c.is_selectable and c.iso_a3 and c.iso_a3 == identifier:
            return c
    for c in countries:
        if c.name == identifier:
            return c
    return None

@dataclass
class CountryIndex:
    """Container of precomputed country lookups."""
    by_id: Dict[str, Country]
    by_name: Dict[str, Country]
    selectable: List[Country]
    duplicate_names: List[str]

    def resolve(self, identifier: str) -> Optional[Country]:
        """Same result as the module-level `resolve`, using the dictionaries."""
        _check_identifier(identifier)
        hit = self.by_id.get(identifier)
        if hit is not None:
            return hit
        return self.by_name.get(identifier)

    def names(self, prefix: str = "") -> List[str]:
        """Display names offered for selection, in dataset order."""
        p = prefix.lower()
        return [c.name for c in self.selectable if c.name.lower().startswith(p)]

def build_indices(countries: Sequence[Country]) -> CountryIndex:
    """Build lookup tables from the loaded countries.

    Only the first country per identifier / name is kept, which matches the
    first-match rule of `resolve`.
    """
    by_id: Dict[str, Country] = {}
    by_name: Dict[str, Country] = {}
    seen_twice: Dict[str, None] = {}

    for c in countries:
        if c.is_selectable and c.iso_a3:
            by_id.setdefault(c.iso_a3, c)
        if c.name in by_name:
            seen_twice[c.name] = None
        else:
            by_name[c.name] = c

    selectable = [c for c in countries if c.is_selectable]
    return CountryIndex(by_id=by_id, by_name=by_name, selectable=selectable,
                        duplicate_names=list(seen_twice))
