"""
Pytest configuration for the power plant service.

Provides fixtures for:
- In-memory fakes of the store and weather provider protocols
- SQLite-backed SQLModel sessions for store tests
- Open-Meteo payload builders
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Generator, Iterator, Sequence

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from powerplants.core.context import RequestContext
from powerplants.core.errors import DeadlineExceeded, RecordNotFound, WeatherProviderError
from powerplants.db.power_plants import SQLPowerPlantStore
from powerplants.db.session import new_session
from powerplants.models import Coordinate, HourlySample, PowerPlant, WeatherForecast
from powerplants.models.power_plant import utcnow
from powerplants.services import PowerPlantService


def _copy(row: PowerPlant) -> PowerPlant:
    return PowerPlant(**row.model_dump())


class FakeStore:
    """Dict-backed store that records calls and lock state."""

    def __init__(self) -> None:
        self.rows: dict[int, PowerPlant] = {}
        self.next_id = 1
        self.calls: list[str] = []
        self.in_transaction = False
        self.locked: set[int] = set()
        self.fail_with: Exception | None = None

    @contextmanager
    def transaction(self, timeout: float | None = None) -> Iterator[None]:
        self.calls.append("transaction")
        if timeout is not None and timeout <= 0:
            raise DeadlineExceeded("deadline exceeded before store call")
        self.in_transaction = True
        try:
            yield
        finally:
            self.in_transaction = False
            self.locked.clear()

    def _maybe_fail(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_with is not None:
            raise self.fail_with

    def create(self, plant: PowerPlant) -> PowerPlant:
        self._maybe_fail("create")
        row = PowerPlant(
            id=self.next_id,
            name=plant.name,
            latitude=plant.latitude,
            longitude=plant.longitude,
            revision=1,
            created_at=utcnow(),
        )
        self.rows[row.id] = row
        self.next_id += 1
        return _copy(row)

    def update(self, plant: PowerPlant) -> PowerPlant:
        self._maybe_fail("update")
        row = self.rows.get(plant.id)
        if row is None or row.revision != plant.revision:
            raise RecordNotFound(f"power plant {plant.id} revision {plant.revision}")
        updated = PowerPlant(
            id=row.id,
            name=plant.name,
            latitude=plant.latitude,
            longitude=plant.longitude,
            revision=row.revision + 1,
            created_at=row.created_at,
            updated_at=utcnow(),
        )
        self.rows[row.id] = updated
        return _copy(updated)

    def get(self, plant_id: int) -> PowerPlant:
        self._maybe_fail("get")
        if plant_id not in self.rows:
            raise RecordNotFound(f"power plant {plant_id}")
        return _copy(self.rows[plant_id])

    def get_for_update(self, plant_id: int) -> PowerPlant:
        self._maybe_fail("get_for_update")
        if plant_id not in self.rows:
            raise RecordNotFound(f"power plant {plant_id}")
        self.locked.add(plant_id)
        return _copy(self.rows[plant_id])

    def list(self, last_id: int, count: int) -> list[PowerPlant]:
        self._maybe_fail("list")
        ids = sorted(plant_id for plant_id in self.rows if plant_id > last_id)[:count]
        return [_copy(self.rows[plant_id]) for plant_id in ids]


class FakeWeatherProvider:
    """Deterministic provider: one hourly sample per forecast hour.

    Temperature carries the latitude and wind direction the longitude so
    tests can check which coordinate a forecast belongs to.
    """

    def __init__(self, store: FakeStore | None = None) -> None:
        self.store = store
        self.calls: list[tuple[str, tuple[Coordinate, ...], int | None]] = []
        self.fail_with: Exception | None = None
        self.drop_last = False
        self.timeouts: list[float | None] = []
        self.called_inside_transaction = False

    def _record(self, name: str, coordinates: Sequence[Coordinate], days: int | None, timeout: float | None) -> None:
        self.calls.append((name, tuple(coordinates), days))
        self.timeouts.append(timeout)
        if self.store is not None and self.store.in_transaction:
            self.called_inside_transaction = True
        if self.fail_with is not None:
            raise self.fail_with

    @staticmethod
    def forecast_for(coordinate: Coordinate, days: int) -> WeatherForecast:
        return WeatherForecast(
            has_precipitation_today=coordinate.latitude > 0,
            hourly=[
                HourlySample(
                    time=f"2024-09-{6 + hour // 24:02d}T{hour % 24:02d}:00",
                    temperature=coordinate.latitude,
                    precipitation=0.0,
                    wind_speed=float(hour),
                    wind_direction=coordinate.longitude,
                )
                for hour in range(days * 24)
            ],
        )

    @staticmethod
    def elevation_for(coordinate: Coordinate) -> float:
        return round(coordinate.latitude + coordinate.longitude, 4)

    def forecast_one(self, coordinate: Coordinate, forecast_days: int, timeout: float | None = None) -> WeatherForecast:
        self._record("forecast_one", [coordinate], forecast_days, timeout)
        return self.forecast_for(coordinate, forecast_days)

    def forecast_batch(
        self, coordinates: Sequence[Coordinate], forecast_days: int, timeout: float | None = None
    ) -> list[WeatherForecast]:
        self._record("forecast_batch", coordinates, forecast_days, timeout)
        forecasts = [self.forecast_for(coordinate, forecast_days) for coordinate in coordinates]
        return forecasts[:-1] if self.drop_last else forecasts

    def elevation_one(self, coordinate: Coordinate, timeout: float | None = None) -> float:
        self._record("elevation_one", [coordinate], None, timeout)
        return self.elevation_for(coordinate)

    def elevation_batch(self, coordinates: Sequence[Coordinate], timeout: float | None = None) -> list[float]:
        self._record("elevation_batch", coordinates, None, timeout)
        return [self.elevation_for(coordinate) for coordinate in coordinates]


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def fake_weather(fake_store: FakeStore) -> FakeWeatherProvider:
    return FakeWeatherProvider(fake_store)


@pytest.fixture
def service(fake_store: FakeStore, fake_weather: FakeWeatherProvider) -> PowerPlantService:
    return PowerPlantService(fake_store, fake_weather, RequestContext.with_timeout(5.0))


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Generator[Session, None, None]:
    with new_session(engine) as session:
        yield session


@pytest.fixture
def sql_store(session: Session) -> SQLPowerPlantStore:
    return SQLPowerPlantStore(session)


@pytest.fixture
def forecast_payload() -> Callable[..., dict[str, Any]]:
    """Build an Open-Meteo ``/v1/forecast`` object for one location."""

    def _build(latitude: float = 52.52, longitude: float = 13.41, hours: int = 2, rain_today: float = 0.0) -> dict[str, Any]:
        return {
            "latitude": latitude,
            "longitude": longitude,
            "elevation": 38.0,
            "generationtime_ms": 0.1,
            "utc_offset_seconds": 0,
            "timezone": "GMT",
            "timezone_abbreviation": "GMT",
            "hourly": {
                "time": [f"2024-09-06T{hour:02d}:00" for hour in range(hours)],
                "temperature_2m": [latitude + hour for hour in range(hours)],
                "precipitation": [0.1 * hour for hour in range(hours)],
                "wind_speed_10m": [3.3 + hour for hour in range(hours)],
                "wind_direction_10m": [longitude + hour for hour in range(hours)],
            },
            "daily": {
                "time": ["2024-09-06", "2024-09-07"],
                "precipitation_sum": [rain_today, 1.5],
            },
        }

    return _build


@pytest.fixture
def provider_error() -> WeatherProviderError:
    return WeatherProviderError("unexpected status code: 503, reason: upstream secret detail")
