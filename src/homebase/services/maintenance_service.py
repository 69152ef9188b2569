from __future__ import annotations

import re
from datetime import date

from homebase.application.exceptions import NotFoundError, ValidationError
from homebase.application.repositories.region import RegionReader
from homebase.domain.entities.maintenance_task import MaintenanceTask
from homebase.domain.entities.region import RegionProfile
from homebase.domain.value_objects.enums import Priority, TaskSource
from homebase.services.task_enrichment import enrich_task


def _slug(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


def resolve_region(
    regions: RegionReader,
    region: str | None = None,
    climate_zone: str | None = None,
) -> RegionProfile:
    if not region and not climate_zone:
        raise ValidationError("region or climateZone is required")
    name = region or regions.region_for_climate_zone(climate_zone or "")
    profile = regions.get_region(name)
    if profile is None:
        raise NotFoundError(f"Unknown region: {name}")
    return profile


def monthly_tasks(
    regions: RegionReader,
    *,
    region: str | None = None,
    climate_zone: str | None = None,
    month: int | None = None,
    include_year_round: bool = False,
    today: date | None = None,
) -> list[MaintenanceTask]:
    """Enriched recommendations for one region and month (default: this month)."""
    if month is None:
        month = (today or date.today()).month
    if not 1 <= month <= 12:
        raise ValidationError(f"month must be between 1 and 12, got {month}")

    profile = resolve_region(regions, region, climate_zone)
    block = profile.monthly_tasks.get(month)
    base = block.priority if block else Priority.MEDIUM
    prefix = _slug(profile.region)

    entries: list[tuple[TaskSource, str]] = []
    if block:
        entries += [(TaskSource.SEASONAL, title) for title in block.seasonal]
        entries += [(TaskSource.WEATHER_SPECIFIC, title) for title in block.weather_specific]

    tasks = [
        enrich_task(
            MaintenanceTask(
                id=f"{prefix}-{month}-{source.value}-{idx}",
                title=title,
                description="",
                region=profile.region,
                month=month,
                source=source,
            ),
            profile.region,
            base,
        )
        for idx, (source, title) in enumerate(entries)
    ]

    if include_year_round:
        tasks += [
            enrich_task(
                MaintenanceTask(
                    id=f"{prefix}-{TaskSource.YEAR_ROUND.value}-{idx}",
                    title=title,
                    description="",
                    region=profile.region,
                    month=None,
                    source=TaskSource.YEAR_ROUND,
                ),
                profile.region,
                Priority.MEDIUM,
            )
            for idx, title in enumerate(profile.year_round_tasks)
        ]
    return tasks


def region_considerations(regions: RegionReader, region: str) -> list[str]:
    profile = regions.get_region(region)
    if profile is None:
        raise NotFoundError(f"Unknown region: {region}")
    return list(profile.special_considerations)
