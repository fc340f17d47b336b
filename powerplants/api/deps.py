"""API dependencies."""

from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, Header, Request
from sqlmodel import Session

from powerplants.core.config import settings
from powerplants.core.context import RequestContext
from powerplants.core.logging_config import request_logger
from powerplants.db.power_plants import SQLPowerPlantStore
from powerplants.db.session import get_session
from powerplants.services import PowerPlantService, WeatherProvider


def get_db() -> Generator[Session, None, None]:
    with get_session() as session:
        yield session


def get_weather_provider(request: Request) -> WeatherProvider:
    return request.app.state.weather_provider


def get_request_context(
    x_request_id: str | None = Header(default=None),
    x_request_timeout: float | None = Header(default=None),
) -> RequestContext:
    timeout = settings.request_timeout_seconds
    if x_request_timeout is not None and x_request_timeout > 0:
        timeout = x_request_timeout
    return RequestContext.with_timeout(timeout, logger=request_logger(x_request_id))


def get_power_plant_service(
    session: Session = Depends(get_db),
    weather: WeatherProvider = Depends(get_weather_provider),
    context: RequestContext = Depends(get_request_context),
) -> PowerPlantService:
    return PowerPlantService(SQLPowerPlantStore(session), weather, context)
