import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from skladito import models  # noqa: F401
from skladito.api.auth import router as auth_router
from skladito.api.categories import router as categories_router
from skladito.api.containers import router as containers_router
from skladito.api.errors import install_error_handlers
from skladito.api.health import router as health_router
from skladito.api.items import router as items_router
from skladito.api.sync import router as sync_router
from skladito.api.users import router as users_router
from skladito.core.config import settings
from skladito.core.database import Base, SessionLocal, engine
from skladito.core.logging_middleware import RequestLoggingMiddleware
from skladito.core.store import SqlRecordStore
from skladito.services.seed import seed_defaults

logger = logging.getLogger("skladito")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)

    if settings.seed_defaults:
        with SessionLocal() as db:
            seed_defaults(SqlRecordStore(db), settings)

    logger.info("%s %s ready", settings.app_name, settings.version)
    yield
    engine.dispose()


def include_routers(app: FastAPI) -> None:
    app.include_router(health_router, prefix=settings.api_prefix)
    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(sync_router, prefix=settings.api_prefix)
    app.include_router(containers_router, prefix=settings.api_prefix)
    app.include_router(items_router, prefix=settings.api_prefix)
    app.include_router(categories_router, prefix=settings.api_prefix)
    app.include_router(users_router, prefix=settings.api_prefix)


def create_app() -> FastAPI:
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)
    include_routers(app)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("skladito.main:app", host="0.0.0.0", port=3000, log_level=settings.log_level.lower())
