import logging

from fastapi import FastAPI

from app import models  # noqa: F401
from app.api.auth import router as auth_router
from app.api.beers import router as beer_router
from app.api.health import router as health_router
from app.api.observability import router as observability_router
from app.api.stats import router as stats_router
from app.core.config import settings
from app.core.database import Base, engine
from app.core.observability_middleware import ObservabilityMiddleware


def include_routers(app: FastAPI) -> None:
    app.include_router(health_router, prefix=settings.api_prefix)
    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(beer_router, prefix=settings.api_prefix)
    app.include_router(stats_router, prefix=settings.api_prefix)
    app.include_router(observability_router, prefix=settings.api_prefix)


def create_app() -> FastAPI:
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title=settings.app_name)
    app.add_middleware(ObservabilityMiddleware)

    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)

    include_routers(app)
    return app


app = create_app()
