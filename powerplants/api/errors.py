"""Translate service failures into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from powerplants.core.errors import ErrorCode, Internal, ServiceError

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.BAD_REQUEST: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INTERNAL: 500,
}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        return JSONResponse(status_code=STATUS_BY_CODE.get(exc.code, 500), content=exc.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error for %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content=Internal().to_dict())


__all__ = ["register_exception_handlers", "STATUS_BY_CODE"]
