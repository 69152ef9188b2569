from __future__ import annotations

from fastapi import APIRouter

from homebase.api.deps import RegionsDep

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(regions: RegionsDep) -> dict[str, str | int]:
    return {"status": "ready", "regions": len(regions.list_regions())}
