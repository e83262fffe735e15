"""Place/area/station lookup.

The geography (which stations are nearest to which forecast area) is
computed offline; at request time the core only asks a lookup for an area
record and its stations in rank order. ``ConfigAreaLookup`` serves that
data from the ``areas`` section of the config.
"""

from typing import Protocol

from bomfeed.config.schema import AreaConfig, BomConfig
from bomfeed.models.common import AreaCode
from bomfeed.models.observation import Station


class AreaLookup(Protocol):
    def find_areas(self, query: str, limit: int = 10) -> list[AreaConfig]: ...

    def get_area(self, area_code: AreaCode) -> AreaConfig | None: ...

    def stations_for(self, area_code: AreaCode) -> list[Station]: ...


class ConfigAreaLookup:
    def __init__(self, config: BomConfig):
        self._areas: dict[AreaCode, AreaConfig] = {
            a.area_code: a for a in config.areas
        }

    def find_areas(self, query: str, limit: int = 10) -> list[AreaConfig]:
        """Areas whose name contains ``query`` (case-insensitive), prefix matches first."""
        q = query.strip().casefold()
        if not q:
            return []
        hits = [a for a in self._areas.values() if q in a.name.casefold()]
        hits.sort(key=lambda a: (not a.name.casefold().startswith(q), a.name))
        return hits[:limit]

    def get_area(self, area_code: AreaCode) -> AreaConfig | None:
        return self._areas.get(area_code)

    def stations_for(self, area_code: AreaCode) -> list[Station]:
        area = self._areas.get(area_code)
        if area is None:
            return []
        return [s.to_station() for s in sorted(area.stations, key=lambda s: s.rank)]
