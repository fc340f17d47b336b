"""Power plant endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from powerplants.api.deps import get_power_plant_service
from powerplants.models import PowerPlantCreate, PowerPlantPatch, PowerPlantRead, PowerPlantUpdate
from powerplants.services import PowerPlantService

router = APIRouter(prefix="/power-plants", tags=["power-plants"])


class PowerPlantPage(BaseModel):
    items: List[PowerPlantRead]
    next_last_id: Optional[int] = None


@router.post("", response_model=PowerPlantRead, status_code=201)
def create_power_plant(
    payload: PowerPlantCreate,
    service: PowerPlantService = Depends(get_power_plant_service),
) -> PowerPlantRead:
    return service.create_power_plant(payload.name, payload.latitude, payload.longitude)


@router.put("/{plant_id}", response_model=PowerPlantRead)
def update_power_plant(
    plant_id: int,
    payload: PowerPlantUpdate,
    service: PowerPlantService = Depends(get_power_plant_service),
) -> PowerPlantRead:
    """Replace the record; ``revision`` must match the stored one."""

    return service.update_power_plant(
        plant_id, payload.revision, payload.name, payload.latitude, payload.longitude
    )


@router.patch("/{plant_id}", response_model=PowerPlantRead)
def patch_power_plant(
    plant_id: int,
    payload: PowerPlantPatch,
    service: PowerPlantService = Depends(get_power_plant_service),
) -> PowerPlantRead:
    return service.patch_power_plant(plant_id, payload)


@router.get("/{plant_id}", response_model=PowerPlantRead)
def get_power_plant(
    plant_id: int,
    forecast_days: Optional[int] = Query(default=None),
    service: PowerPlantService = Depends(get_power_plant_service),
) -> PowerPlantRead:
    return service.get_power_plant(plant_id, forecast_days)


@router.get("", response_model=PowerPlantPage)
def list_power_plants(
    last_id: int = Query(default=0),
    count: int = Query(default=0),
    forecast_days: Optional[int] = Query(default=None),
    service: PowerPlantService = Depends(get_power_plant_service),
) -> PowerPlantPage:
    items = service.list_power_plants(last_id, count, forecast_days)
    return PowerPlantPage(items=items, next_last_id=items[-1].id if items else None)
