"""Open-Meteo forecast and elevation client.

Docs: https://open-meteo.com/en/docs and https://open-meteo.com/en/docs/elevation-api
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx
from pydantic import ValidationError

from powerplants.core.config import settings
from powerplants.core.errors import WeatherProviderError
from powerplants.models import Coordinate, HourlySample, WeatherForecast

logger = logging.getLogger(__name__)

HOURLY_VARIABLES = ("temperature_2m", "precipitation", "wind_speed_10m", "wind_direction_10m")
DAILY_VARIABLES = ("precipitation_sum",)


class OpenMeteoClient:
    """Thin wrapper around the Open-Meteo forecast and elevation APIs.

    Batched calls send comma-joined coordinate lists; the provider answers in
    request order, which callers rely on for positional merging.
    """

    def __init__(
        self,
        forecast_url: str | None = None,
        elevation_url: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.forecast_url = (forecast_url or settings.open_meteo_forecast_url).rstrip("/")
        self.elevation_url = (elevation_url or settings.open_meteo_elevation_url).rstrip("/")
        self.timeout = timeout or settings.open_meteo_timeout
        self.client = client or httpx.Client()

    def close(self) -> None:
        self.client.close()

    def forecast_one(
        self, coordinate: Coordinate, forecast_days: int, timeout: float | None = None
    ) -> WeatherForecast:
        payload = self._request(
            f"{self.forecast_url}/v1/forecast",
            self._forecast_params([coordinate], forecast_days),
            timeout,
        )
        if isinstance(payload, list):
            if len(payload) != 1:
                raise WeatherProviderError(f"unexpected number of forecasts: {len(payload)}")
            payload = payload[0]
        return parse_forecast(payload)

    def forecast_batch(
        self, coordinates: Sequence[Coordinate], forecast_days: int, timeout: float | None = None
    ) -> list[WeatherForecast]:
        if not coordinates:
            return []
        payload = self._request(
            f"{self.forecast_url}/v1/forecast",
            self._forecast_params(coordinates, forecast_days),
            timeout,
        )
        # A single location comes back as a bare object.
        if isinstance(payload, dict):
            payload = [payload]
        if not isinstance(payload, list):
            raise WeatherProviderError("unexpected forecast payload")
        return [parse_forecast(item) for item in payload]

    def elevation_one(self, coordinate: Coordinate, timeout: float | None = None) -> float:
        elevations = self.elevation_batch([coordinate], timeout)
        if len(elevations) != 1:
            raise WeatherProviderError(f"unexpected number of elevations: {len(elevations)}")
        return elevations[0]

    def elevation_batch(
        self, coordinates: Sequence[Coordinate], timeout: float | None = None
    ) -> list[float]:
        if not coordinates:
            return []
        payload = self._request(
            f"{self.elevation_url}/v1/elevation",
            _coordinate_params(coordinates),
            timeout,
        )
        values = payload.get("elevation") if isinstance(payload, dict) else None
        if not isinstance(values, list):
            raise WeatherProviderError("missing elevation data")
        try:
            return [float(value) for value in values]
        except (TypeError, ValueError) as exc:
            raise WeatherProviderError("invalid elevation value") from exc

    def _forecast_params(self, coordinates: Sequence[Coordinate], forecast_days: int) -> dict[str, str]:
        params = _coordinate_params(coordinates)
        params.update(
            {
                "forecast_days": str(forecast_days),
                "daily": ",".join(DAILY_VARIABLES),
                "hourly": ",".join(HOURLY_VARIABLES),
            }
        )
        return params

    def _request(self, url: str, params: dict[str, str], timeout: float | None) -> Any:
        effective_timeout = self.timeout if timeout is None else min(timeout, self.timeout)
        try:
            logger.debug("Open-Meteo request: GET %s params=%s", url, params)
            response = self.client.get(url, params=params, timeout=effective_timeout)
        except httpx.TimeoutException as exc:
            raise WeatherProviderError(f"request timed out after {effective_timeout:.2f}s") from exc
        except httpx.HTTPError as exc:
            raise WeatherProviderError(f"request failed: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            message = f"unexpected status code: {response.status_code}"
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("error"):
                message += f", reason: {body.get('reason')}"
            raise WeatherProviderError(message)

        try:
            return response.json()
        except ValueError as exc:
            raise WeatherProviderError("invalid json") from exc


def _coordinate_params(coordinates: Sequence[Coordinate]) -> dict[str, str]:
    return {
        "latitude": ",".join(str(coordinate.latitude) for coordinate in coordinates),
        "longitude": ",".join(str(coordinate.longitude) for coordinate in coordinates),
    }


def parse_forecast(payload: Any) -> WeatherForecast:
    """Convert one Open-Meteo forecast object into a ``WeatherForecast``."""

    if not isinstance(payload, dict):
        raise WeatherProviderError("unexpected forecast payload")
    try:
        return WeatherForecast(
            has_precipitation_today=_has_precipitation_today(payload.get("daily") or {}),
            hourly=_hourly_samples(payload.get("hourly") or {}),
        )
    except (TypeError, ValueError, AttributeError) as exc:
        raise WeatherProviderError(f"invalid forecast payload: {exc}") from exc


def _hourly_samples(hourly: dict[str, Any]) -> list[HourlySample]:
    times = hourly.get("time") or []
    series = [hourly.get(name) or [] for name in HOURLY_VARIABLES]
    if any(len(values) != len(times) for values in series):
        raise WeatherProviderError(
            "invalid data length, time %d, %s"
            % (
                len(times),
                ", ".join(f"{name} {len(values)}" for name, values in zip(HOURLY_VARIABLES, series)),
            )
        )

    temperature, precipitation, wind_speed, wind_direction = series
    try:
        return [
            HourlySample(
                time=times[idx],
                temperature=temperature[idx],
                precipitation=precipitation[idx],
                wind_speed=wind_speed[idx],
                wind_direction=wind_direction[idx],
            )
            for idx in range(len(times))
        ]
    except ValidationError as exc:
        raise WeatherProviderError("invalid hourly sample") from exc


def _has_precipitation_today(daily: dict[str, Any]) -> bool:
    times = daily.get("time") or []
    sums = daily.get("precipitation_sum") or []
    if not times or len(times) != len(sums):
        raise WeatherProviderError(
            f"invalid data length time {len(times)}, precipitation {len(sums)}"
        )
    # The first daily entry is always today.
    return (sums[0] or 0) > 0


__all__ = ["OpenMeteoClient", "parse_forecast", "HOURLY_VARIABLES", "DAILY_VARIABLES"]
