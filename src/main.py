"""
Main FastAPI application entrypoint.
"""
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional
import logging

from fastapi import FastAPI

from src.config import Settings, settings as default_settings
from src.api.health import router as health_router, VERSION
from src.api.landing import router as landing_router
from src.i18n import LocaleNegotiator, LocaleRedirectMiddleware

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application with locale detection installed.

    The negotiator is built once here and shared read-only by every request.
    """
    settings = settings or default_settings
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting Locale Redirect service on {settings.host}:{settings.port}")
        logger.info(f"Debug mode: {settings.debug}")

        yield

        logger.info("Shutting down Locale Redirect service")

    app = FastAPI(
        title="Locale Redirect",
        description="Detects the client locale and redirects first visits to a language prefix",
        version=VERSION,
        debug=settings.debug,
        lifespan=lifespan,
    )

    negotiator = LocaleNegotiator.from_identifiers(
        settings.supported_locale_list,
        cookie_name=settings.locale_cookie_name,
    )
    app.state.locale_negotiator = negotiator

    app.add_middleware(
        LocaleRedirectMiddleware,
        negotiator=negotiator,
        cookie_ttl=timedelta(hours=settings.locale_cookie_ttl_hours),
    )

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(landing_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host=default_settings.host, port=default_settings.port)
