"""Power plant records and the transient forecast enrichment."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import NamedTuple, Optional

from pydantic import BaseModel
from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Coordinate(NamedTuple):
    latitude: float
    longitude: float


class PowerPlantBase(SQLModel):
    name: str = Field(max_length=255)
    latitude: float = Field(description="Latitude in degrees")
    longitude: float = Field(description="Longitude in degrees")

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


class PowerPlant(PowerPlantBase, table=True):
    """Persisted power plant row. ``revision`` is the optimistic concurrency token."""

    __tablename__ = "power_plants"

    id: Optional[int] = Field(default=None, primary_key=True)
    revision: int = Field(default=1, nullable=False)
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
    )


class HourlySample(SQLModel):
    time: str
    temperature: float
    precipitation: float
    wind_speed: float
    wind_direction: float


class WeatherForecast(SQLModel):
    """Forecast block merged into a record on every read; never stored."""

    has_precipitation_today: bool = False
    hourly: list[HourlySample] = Field(default_factory=list)


class PowerPlantRead(PowerPlantBase):
    id: int
    revision: int
    created_at: datetime
    updated_at: Optional[datetime] = None
    elevation: Optional[float] = None
    forecast: Optional[WeatherForecast] = None

    @classmethod
    def from_record(
        cls,
        record: PowerPlant,
        forecast: WeatherForecast | None = None,
        elevation: float | None = None,
    ) -> "PowerPlantRead":
        return cls(
            id=record.id,
            name=record.name,
            latitude=record.latitude,
            longitude=record.longitude,
            revision=record.revision,
            created_at=record.created_at,
            updated_at=record.updated_at,
            elevation=elevation,
            forecast=forecast,
        )


class PowerPlantCreate(BaseModel):
    name: str = ""
    latitude: float = 0.0
    longitude: float = 0.0


class PowerPlantUpdate(BaseModel):
    """Full replacement guarded by the last revision the caller has seen."""

    revision: int = 0
    name: str = ""
    latitude: float = 0.0
    longitude: float = 0.0


class PowerPlantPatch(BaseModel):
    """Partial update; only fields present in ``model_fields_set`` are applied."""

    name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def supplied(self) -> dict[str, str | float]:
        return {
            key: value
            for key, value in self.model_dump(include=self.model_fields_set).items()
            if value is not None
        }


__all__ = [
    "Coordinate",
    "PowerPlant",
    "PowerPlantBase",
    "PowerPlantRead",
    "PowerPlantCreate",
    "PowerPlantUpdate",
    "PowerPlantPatch",
    "HourlySample",
    "WeatherForecast",
    "utcnow",
]
