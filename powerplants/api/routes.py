"""Service liveness and database reachability."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from powerplants.api.deps import get_db

logger = logging.getLogger(__name__)

health_router = APIRouter(tags=["system"])


@health_router.get("/health", summary="Service and database health")
def healthcheck(session: Session = Depends(get_db)):
    """Report ``ok`` when the power plant database answers a trivial query."""
    try:
        session.connection().execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        return JSONResponse(status_code=503, content={"status": "degraded", "database": "unreachable"})
    return {"status": "ok", "database": "ok"}
