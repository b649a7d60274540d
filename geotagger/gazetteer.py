"""
Administrative-division gazetteer.

A multi-valued dictionary from place name to the GeoUnits carrying that
name, built once from a three-level province → city → district hierarchy.

Design:
  - Codes encode the hierarchy by prefix: 2 digits = province,
    4 digits = city, 6+ digits = district/county.
  - Every GeoUnit keeps a reference to its parent; the chain is at most
    three units long.
  - "Filler" city labels (市辖区 and friends) describe directly governed
    districts with no city identity of their own. They are not registered;
    their districts hang off the province instead.
  - A name can map to several units in different provinces (朝阳区 exists
    in Beijing and in Changchun). Disambiguation is the resolver's job.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

from pydantic import TypeAdapter

from geotagger.models import GazetteerNode

logger = logging.getLogger(__name__)

# City/district labels that are skipped when loading
FILLER_LABELS = frozenset({"市辖区", "城区", "矿区", "郊区", "省直辖县级行政区划"})

PROVINCE = 1
CITY = 2

_NODES = TypeAdapter(list[GazetteerNode])


@dataclass(frozen=True)
class GeoUnit:
    code: str
    name: str
    parent: Optional[GeoUnit] = None

    @property
    def level(self) -> int:
        level = 1
        parent = self.parent
        while parent is not None:
            parent = parent.parent
            level += 1
        return level

    def ancestors(self) -> Iterator[GeoUnit]:
        """Enclosing units, nearest first."""
        parent = self.parent
        while parent is not None:
            yield parent
            parent = parent.parent

    def is_descendant_of(self, code: Optional[str]) -> bool:
        """True if a strict ancestor carries exactly ``code``."""
        if not code:
            return False
        return any(ancestor.code == code for ancestor in self.ancestors())

    def __repr__(self) -> str:
        return f"GeoUnit({self.name!r}, code={self.code!r})"


class Gazetteer:
    """Name → GeoUnits multimap. Read-only once built."""

    def __init__(self) -> None:
        self._units: dict[str, list[GeoUnit]] = {}

    def _register(self, unit: GeoUnit) -> None:
        self._units.setdefault(unit.name, []).append(unit)

    @classmethod
    def from_nodes(cls, provinces: Iterable[GazetteerNode]) -> Gazetteer:
        gazetteer = cls()
        for province in provinces:
            province_unit = GeoUnit(province.code, province.name)
            gazetteer._register(province_unit)

            for city in province.children:
                if city.name in FILLER_LABELS:
                    parent = province_unit
                else:
                    parent = GeoUnit(city.code, city.name, province_unit)
                    gazetteer._register(parent)

                for district in city.children:
                    if district.name in FILLER_LABELS:
                        continue
                    gazetteer._register(GeoUnit(district.code, district.name, parent))
        return gazetteer

    @classmethod
    def from_dicts(cls, data: list[dict]) -> Gazetteer:
        """Validate the whole raw hierarchy first, then build."""
        return cls.from_nodes(_NODES.validate_python(data))

    def lookup(self, name: str) -> tuple[GeoUnit, ...]:
        return tuple(self._units.get(name, ()))

    def __contains__(self, name: str) -> bool:
        return name in self._units

    def __len__(self) -> int:
        return len(self._units)

    def names(self) -> Iterator[str]:
        return iter(self._units)

    def units(self) -> Iterator[GeoUnit]:
        for units in self._units.values():
            yield from units


def load_gazetteer(path: str | Path) -> Gazetteer:
    """
    Read a nested ``[{name, code, childs: [...]}, ...]`` JSON file.
    Raises on any malformed entry; never returns a partial gazetteer.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    gazetteer = Gazetteer.from_dicts(data)
    logger.info(
        "Loaded gazetteer from %s: %d names, %d units",
        path, len(gazetteer), sum(1 for _ in gazetteer.units()),
    )
    return gazetteer
