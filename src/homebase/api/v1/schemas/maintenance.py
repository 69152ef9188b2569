from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from homebase.domain.entities.maintenance_task import MaintenanceTask
from homebase.domain.entities.region import RegionProfile
from homebase.domain.value_objects.enums import (
    Difficulty,
    Priority,
    TaskCategory,
    TaskSource,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CostEstimateResponse(CamelModel):
    diy_min: int
    diy_max: int
    pro_min: int
    pro_max: int
    currency: str
    label: str


class TaskContentResponse(CamelModel):
    action_summary: str
    steps: list[str]
    tools_and_supplies: list[str]


class MaintenanceTaskResponse(CamelModel):
    id: str
    title: str
    description: str
    region: str
    month: int | None
    source: TaskSource
    priority: Priority | None
    category: TaskCategory | None
    difficulty: Difficulty | None
    cost_estimate: CostEstimateResponse | None
    content: TaskContentResponse | None

    @classmethod
    def from_entity(cls, task: MaintenanceTask) -> MaintenanceTaskResponse:
        return cls.model_validate(task)


class RegionResponse(CamelModel):
    region: str
    climate_zone: str
    year_round_tasks: list[str]
    special_considerations: list[str]

    @classmethod
    def from_entity(cls, profile: RegionProfile) -> RegionResponse:
        return cls(
            region=profile.region,
            climate_zone=profile.climate_zone,
            year_round_tasks=list(profile.year_round_tasks),
            special_considerations=list(profile.special_considerations),
        )


class ContentRequest(CamelModel):
    title: str
    description: str = ""
