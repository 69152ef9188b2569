from __future__ import annotations

from fastapi import APIRouter, Query

from homebase.api.deps import RegionsDep
from homebase.api.v1.schemas.maintenance import (
    ContentRequest,
    MaintenanceTaskResponse,
    RegionResponse,
    TaskContentResponse,
)
from homebase.services import maintenance_service
from homebase.services.task_content import generate_task_content

router = APIRouter(prefix="/api/maintenance-tasks", tags=["maintenance"])


@router.get("/regions", response_model=list[RegionResponse])
async def list_regions(regions: RegionsDep) -> list[RegionResponse]:
    return [RegionResponse.from_entity(r) for r in regions.list_regions()]


@router.get("/regions/{region}/considerations", response_model=list[str])
async def region_considerations(region: str, regions: RegionsDep) -> list[str]:
    return maintenance_service.region_considerations(regions, region)


@router.get(
    "/regional",
    response_model=list[MaintenanceTaskResponse],
    response_model_by_alias=True,
)
async def regional_tasks(
    regions: RegionsDep,
    region: str | None = Query(None),
    climate_zone: str | None = Query(None, alias="climateZone"),
    month: int | None = Query(None),
    include_year_round: bool = Query(False, alias="includeYearRound"),
) -> list[MaintenanceTaskResponse]:
    tasks = maintenance_service.monthly_tasks(
        regions,
        region=region,
        climate_zone=climate_zone,
        month=month,
        include_year_round=include_year_round,
    )
    return [MaintenanceTaskResponse.from_entity(t) for t in tasks]


@router.post("/content", response_model=TaskContentResponse)
async def task_content(body: ContentRequest) -> TaskContentResponse:
    content = generate_task_content(body.title, body.description)
    return TaskContentResponse.model_validate(content)
