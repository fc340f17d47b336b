"""Power plant registry FastAPI application package."""

import logging

from fastapi import FastAPI

from .api import api_router
from .api.errors import register_exception_handlers
from .core.config import settings
from .core.logging_config import setup_logging
from .db.session import init_db
from .services import OpenMeteoClient, WeatherProvider


def create_app(weather_provider: WeatherProvider | None = None) -> FastAPI:
    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("Initializing %s API", settings.app_name)

    app = FastAPI(title=settings.app_name, version=settings.app_version)
    app.state.weather_provider = weather_provider or OpenMeteoClient()
    app.include_router(api_router, prefix=settings.api_prefix)
    register_exception_handlers(app)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Provide a friendly landing response for the bare hostname."""

        return {
            "message": (
                f"{settings.app_name} API is online. Try GET "
                f"{settings.api_prefix}/health for a health check."
            )
        }

    @app.on_event("startup")
    def _init_db() -> None:
        init_db()

    @app.on_event("shutdown")
    def _close_weather_provider() -> None:
        close = getattr(app.state.weather_provider, "close", None)
        if close is not None:
            close()

    return app


__all__ = ["create_app"]
