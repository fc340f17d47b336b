"""Power plant use cases: validated mutations and forecast-enriched reads."""

from __future__ import annotations

from contextlib import AbstractContextManager, contextmanager
from typing import Iterator, Protocol, Sequence

from sqlalchemy.exc import SQLAlchemyError

from powerplants.core.config import settings
from powerplants.core.context import RequestContext
from powerplants.core.errors import (
    DeadlineExceeded,
    Internal,
    NotFound,
    RecordNotFound,
    WeatherProviderError,
)
from powerplants.models import (
    Coordinate,
    PowerPlant,
    PowerPlantPatch,
    PowerPlantRead,
    WeatherForecast,
)
from powerplants.services.validation import (
    validate_create,
    validate_forecast_days,
    validate_get,
    validate_page,
    validate_patch,
    validate_update,
)


class PowerPlantStore(Protocol):
    def transaction(self, timeout: float | None = None) -> AbstractContextManager[None]: ...

    def create(self, plant: PowerPlant) -> PowerPlant: ...

    def update(self, plant: PowerPlant) -> PowerPlant: ...

    def get(self, plant_id: int) -> PowerPlant: ...

    def get_for_update(self, plant_id: int) -> PowerPlant: ...

    def list(self, last_id: int, count: int) -> list[PowerPlant]: ...


class WeatherProvider(Protocol):
    def forecast_one(
        self, coordinate: Coordinate, forecast_days: int, timeout: float | None = None
    ) -> WeatherForecast: ...

    def forecast_batch(
        self, coordinates: Sequence[Coordinate], forecast_days: int, timeout: float | None = None
    ) -> list[WeatherForecast]: ...

    def elevation_one(self, coordinate: Coordinate, timeout: float | None = None) -> float: ...

    def elevation_batch(
        self, coordinates: Sequence[Coordinate], timeout: float | None = None
    ) -> list[float]: ...


class PowerPlantService:
    """Orchestrates the store and the weather provider for one request.

    Mutations run inside a single store transaction and never touch the
    provider. Reads close their store transaction before calling the provider,
    so no row lock or open transaction spans a network round trip.
    """

    def __init__(
        self,
        store: PowerPlantStore,
        weather: WeatherProvider,
        context: RequestContext | None = None,
        default_forecast_days: int | None = None,
        default_page_size: int | None = None,
        max_page_size: int | None = None,
    ) -> None:
        self.store = store
        self.weather = weather
        self.context = context or RequestContext()
        self.log = self.context.logger
        self.default_forecast_days = default_forecast_days or settings.default_forecast_days
        self.default_page_size = default_page_size or settings.default_page_size
        self.max_page_size = max_page_size or settings.max_page_size

    def create_power_plant(self, name: str, latitude: float, longitude: float) -> PowerPlantRead:
        validate_create(name, latitude, longitude)

        with self._store_errors("creating power plant"):
            with self.store.transaction(self.context.check()):
                record = self.store.create(
                    PowerPlant(name=name, latitude=latitude, longitude=longitude)
                )

        self.log.info("power plant created", extra={"plant_id": record.id})
        return PowerPlantRead.from_record(record)

    def update_power_plant(
        self, plant_id: int, revision: int, name: str, latitude: float, longitude: float
    ) -> PowerPlantRead:
        """Replace all fields if ``revision`` is still current (optimistic lock).

        A stale revision and an unknown id are reported the same way; callers
        re-read the record and resubmit with the fresh revision.
        """

        validate_update(plant_id, revision, name, latitude, longitude)

        with self._store_errors("updating power plant", not_found="id/revision pair not found"):
            with self.store.transaction(self.context.check()):
                record = self.store.update(
                    PowerPlant(
                        id=plant_id,
                        revision=revision,
                        name=name,
                        latitude=latitude,
                        longitude=longitude,
                    )
                )

        self.log.info(
            "power plant updated", extra={"plant_id": record.id, "revision": record.revision}
        )
        return PowerPlantRead.from_record(record)

    def patch_power_plant(self, plant_id: int, patch: PowerPlantPatch) -> PowerPlantRead:
        """Apply only the supplied fields under a row lock (pessimistic lock)."""

        fields = validate_patch(plant_id, patch)

        with self._store_errors("patching power plant"):
            with self.store.transaction(self.context.check()):
                current = self.store.get_for_update(plant_id)
                record = self.store.update(
                    PowerPlant(
                        id=current.id,
                        revision=current.revision,
                        name=fields.get("name", current.name),
                        latitude=fields.get("latitude", current.latitude),
                        longitude=fields.get("longitude", current.longitude),
                    )
                )

        self.log.info(
            "power plant patched",
            extra={"plant_id": record.id, "revision": record.revision, "fields": sorted(fields)},
        )
        return PowerPlantRead.from_record(record)

    def get_power_plant(self, plant_id: int, forecast_days: int | None = None) -> PowerPlantRead:
        if forecast_days is None:
            forecast_days = self.default_forecast_days
        validate_get(plant_id, forecast_days)

        with self._store_errors("getting power plant"):
            with self.store.transaction(self.context.check()):
                record = self.store.get(plant_id)

        coordinate = record.coordinate
        with self._provider_errors("getting weather forecast"):
            forecast = self.weather.forecast_one(
                coordinate, forecast_days, timeout=self.context.check()
            )
        with self._provider_errors("getting elevation"):
            elevation = self.weather.elevation_one(coordinate, timeout=self.context.check())

        return PowerPlantRead.from_record(record, forecast=forecast, elevation=elevation)

    def list_power_plants(
        self, last_id: int = 0, count: int | None = None, forecast_days: int | None = None
    ) -> list[PowerPlantRead]:
        """Return the page after ``last_id`` (keyset cursor), enriched in one batch."""

        count = count or self.default_page_size
        if forecast_days is None:
            forecast_days = self.default_forecast_days
        validate_page(last_id, count, self.max_page_size)
        validate_forecast_days(forecast_days)

        with self._store_errors("listing power plants"):
            with self.store.transaction(self.context.check()):
                records = self.store.list(last_id, count)

        if not records:
            return []

        coordinates = [record.coordinate for record in records]
        with self._provider_errors("getting weather forecasts"):
            forecasts = self.weather.forecast_batch(
                coordinates, forecast_days, timeout=self.context.check()
            )
        with self._provider_errors("getting elevations"):
            elevations = self.weather.elevation_batch(coordinates, timeout=self.context.check())

        # Results are matched to records by position.
        if len(forecasts) != len(records) or len(elevations) != len(records):
            self.log.error(
                "weather batch size mismatch: records %d, forecasts %d, elevations %d",
                len(records),
                len(forecasts),
                len(elevations),
            )
            raise Internal("weather batch size mismatch")

        return [
            PowerPlantRead.from_record(record, forecast=forecast, elevation=elevation)
            for record, forecast, elevation in zip(records, forecasts, elevations)
        ]

    @contextmanager
    def _store_errors(self, action: str, not_found: str = "id not found") -> Iterator[None]:
        try:
            yield
        except RecordNotFound as exc:
            raise NotFound(not_found) from exc
        except (DeadlineExceeded, SQLAlchemyError) as exc:
            self.log.error("error %s: %s", action, exc, exc_info=True)
            raise Internal(f"{action}: {exc}") from exc

    @contextmanager
    def _provider_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except (DeadlineExceeded, WeatherProviderError) as exc:
            self.log.error("error %s: %s", action, exc, exc_info=True)
            raise Internal(f"{action}: {exc}") from exc


__all__ = ["PowerPlantService", "PowerPlantStore", "WeatherProvider"]
