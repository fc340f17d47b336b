"""SQLModel session management."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from powerplants.core.config import settings

engine = create_engine(settings.database_url, echo=settings.database_echo, pool_pre_ping=True)


def init_db(bind: Engine | None = None) -> None:
    SQLModel.metadata.create_all(bind or engine)


def new_session(bind: Engine | None = None) -> Session:
    # Records outlive their transaction: reads are committed before the weather calls.
    return Session(bind or engine, expire_on_commit=False)


@contextmanager
def get_session() -> Iterator[Session]:
    """Get a database session as a context manager; FastAPI wraps it in ``api.deps.get_db``."""
    session = new_session()
    try:
        yield session
    finally:
        session.close()

