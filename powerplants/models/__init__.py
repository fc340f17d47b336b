"""Database and API models."""

from .power_plant import (
    Coordinate,
    HourlySample,
    PowerPlant,
    PowerPlantBase,
    PowerPlantCreate,
    PowerPlantPatch,
    PowerPlantRead,
    PowerPlantUpdate,
    WeatherForecast,
)

__all__ = [
    "Coordinate",
    "HourlySample",
    "PowerPlant",
    "PowerPlantBase",
    "PowerPlantCreate",
    "PowerPlantPatch",
    "PowerPlantRead",
    "PowerPlantUpdate",
    "WeatherForecast",
]
