"""Input checks run before any store or provider call."""

from __future__ import annotations

from powerplants.core.errors import InvalidArgument
from powerplants.models import PowerPlantPatch

VALID_FORECAST_DAYS = frozenset({1, 3, 7, 14, 16})


def _check_name(name: str | None) -> None:
    if not name:
        raise InvalidArgument("name is required")


def _check_coordinate_presence(latitude: float | None, longitude: float | None) -> None:
    # Zero is treated as "not supplied" rather than as the equator/meridian.
    if latitude is not None and latitude == 0:
        raise InvalidArgument("latitude is required")
    if longitude is not None and longitude == 0:
        raise InvalidArgument("longitude is required")


def _check_coordinate_range(latitude: float | None, longitude: float | None) -> None:
    if latitude is not None and not -90 <= latitude <= 90:
        raise InvalidArgument("latitude must be between -90 and 90")
    if longitude is not None and not -180 <= longitude <= 180:
        raise InvalidArgument("longitude must be between -180 and 180")


def _check_id(plant_id: int | None) -> None:
    if not plant_id or plant_id < 0:
        raise InvalidArgument("id is required")


def validate_create(name: str, latitude: float, longitude: float) -> None:
    """Check name, then coordinate presence, then coordinate ranges."""

    _check_name(name)
    _check_coordinate_presence(latitude or 0, longitude or 0)
    _check_coordinate_range(latitude, longitude)


def validate_update(
    plant_id: int, revision: int, name: str, latitude: float, longitude: float
) -> None:
    _check_id(plant_id)
    if not revision or revision < 0:
        raise InvalidArgument("revision is required")
    validate_create(name, latitude, longitude)


def validate_patch(plant_id: int, patch: PowerPlantPatch) -> dict[str, str | float]:
    """Validate only the supplied fields and return them."""

    _check_id(plant_id)
    fields = patch.supplied()
    if not fields:
        raise InvalidArgument("at least one field must be supplied")
    if "name" in fields:
        _check_name(fields["name"])
    latitude = fields.get("latitude")
    longitude = fields.get("longitude")
    _check_coordinate_presence(latitude, longitude)
    _check_coordinate_range(latitude, longitude)
    return fields


def validate_forecast_days(forecast_days: int) -> None:
    if forecast_days not in VALID_FORECAST_DAYS:
        allowed = ", ".join(str(days) for days in sorted(VALID_FORECAST_DAYS))
        raise InvalidArgument(f"forecast_days must be one of {allowed}")


def validate_get(plant_id: int, forecast_days: int) -> None:
    _check_id(plant_id)
    validate_forecast_days(forecast_days)


def validate_page(last_id: int, count: int, max_page_size: int) -> None:
    if last_id < 0:
        raise InvalidArgument("last_id must not be negative")
    if count < 0:
        raise InvalidArgument("count must not be negative")
    if count > max_page_size:
        raise InvalidArgument(f"count must not exceed {max_page_size}")


__all__ = [
    "VALID_FORECAST_DAYS",
    "validate_create",
    "validate_update",
    "validate_patch",
    "validate_forecast_days",
    "validate_get",
    "validate_page",
]
