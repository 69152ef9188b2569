from __future__ import annotations

from dataclasses import dataclass, field

from homebase.domain.value_objects.enums import Priority


@dataclass(frozen=True, slots=True)
class MonthlyTasks:
    seasonal: tuple[str, ...]
    weather_specific: tuple[str, ...]
    priority: Priority


@dataclass(frozen=True, slots=True)
class RegionProfile:
    region: str
    climate_zone: str
    monthly_tasks: dict[int, MonthlyTasks] = field(default_factory=dict)
    year_round_tasks: tuple[str, ...] = ()
    special_considerations: tuple[str, ...] = ()
