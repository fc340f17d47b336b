"""Service layer."""

from .open_meteo import OpenMeteoClient
from .power_plants import PowerPlantService, PowerPlantStore, WeatherProvider

__all__ = ["OpenMeteoClient", "PowerPlantService", "PowerPlantStore", "WeatherProvider"]
