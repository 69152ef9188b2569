from __future__ import annotations

from typing import Protocol

from homebase.domain.entities.region import RegionProfile


class RegionReader(Protocol):
    def list_regions(self) -> list[RegionProfile]: ...

    def get_region(self, name: str) -> RegionProfile | None: ...

    def region_for_climate_zone(self, zone: str) -> str: ...
