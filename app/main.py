from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from app.core.cache import cache
from app.core.config import settings
from app.core.database.db import engine
from app.core.database.base import Base
from app.core.logging import configure_logging
from shared.wiring import get_secret_store

# Routers
from content.routers import contents_router
from featured_images.routers import featured_image_router, preview_router, settings_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # fail at startup, not on the first settings request, if ENCRYPTION_SECRET is missing
    get_secret_store()
    await cache.init()
    # dev-friendly table creation (migrations/ holds the Alembic revisions for prod)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s started (cache backend: %s)", settings.app_name, settings.cache_backend)
    yield
    # Shutdown
    await engine.dispose()
    await cache.close()


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    debug=settings.debug,
    docs_url="/docs",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


@app.get("/health", tags=["system"])
async def health():
    return {"status": "ok"}


# Content
app.include_router(contents_router)

# Featured images
app.include_router(featured_image_router)
app.include_router(preview_router)
app.include_router(settings_router)
