"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from homebase.application.repositories.region import RegionReader
from homebase.infrastructure.data.seasonal_tasks import StaticRegionRepository

_regions = StaticRegionRepository()


def get_regions() -> RegionReader:
    return _regions


RegionsDep = Annotated[RegionReader, Depends(get_regions)]
