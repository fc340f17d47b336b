"""SQL-backed power plant store."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlmodel import Session, select, update

from powerplants.core.errors import DeadlineExceeded, RecordNotFound
from powerplants.models import PowerPlant
from powerplants.models.power_plant import utcnow


class SQLPowerPlantStore:
    """Power plant persistence over a request-scoped SQLModel session.

    Methods never commit on their own. Callers group them with
    ``transaction()``, which commits on success and rolls back (releasing any
    row locks) on every exception, cancellation included.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    @contextmanager
    def transaction(self, timeout: float | None = None) -> Iterator[None]:
        if timeout is not None and timeout <= 0:
            raise DeadlineExceeded("deadline exceeded before store call")
        try:
            if timeout is not None and self.session.get_bind().dialect.name == "postgresql":
                # SET does not accept bind parameters; the value is an int.
                self.session.connection().exec_driver_sql(
                    f"SET LOCAL statement_timeout = {max(1, int(timeout * 1000))}"
                )
            yield
            self.session.commit()
        except BaseException:
            self.session.rollback()
            raise

    def create(self, plant: PowerPlant) -> PowerPlant:
        """Insert a new row. Revision starts at 1 and ``updated_at`` stays unset."""

        record = PowerPlant(name=plant.name, latitude=plant.latitude, longitude=plant.longitude)
        self.session.add(record)
        self.session.flush()
        self.session.refresh(record)
        return record

    def update(self, plant: PowerPlant) -> PowerPlant:
        """Conditionally replace name and coordinates.

        The row must still carry ``plant.revision``. A miss (absent id or
        stale revision) raises ``RecordNotFound``.
        """

        stmt = (
            update(PowerPlant)
            .where(PowerPlant.id == plant.id, PowerPlant.revision == plant.revision)
            .values(
                name=plant.name,
                latitude=plant.latitude,
                longitude=plant.longitude,
                revision=PowerPlant.revision + 1,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = self.session.exec(stmt)
        if result.rowcount != 1:
            raise RecordNotFound(f"power plant {plant.id} revision {plant.revision}")
        return self._fetch(plant.id)

    def get(self, plant_id: int) -> PowerPlant:
        return self._fetch(plant_id)

    def get_for_update(self, plant_id: int) -> PowerPlant:
        """Read the row under an exclusive lock held until the transaction ends."""

        return self._fetch(plant_id, for_update=True)

    def list(self, last_id: int, count: int) -> list[PowerPlant]:
        """Return up to ``count`` rows with ``id > last_id`` in ascending id order."""

        stmt = (
            select(PowerPlant)
            .where(PowerPlant.id > last_id)
            .order_by(PowerPlant.id)
            .limit(count)
        )
        return list(self.session.exec(stmt).all())

    def _fetch(self, plant_id: int, for_update: bool = False) -> PowerPlant:
        stmt = (
            select(PowerPlant)
            .where(PowerPlant.id == plant_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        record = self.session.exec(stmt).first()
        if record is None:
            raise RecordNotFound(f"power plant {plant_id}")
        return record


__all__ = ["SQLPowerPlantStore"]
