import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from manamarket.api import cart_router, catalog_router, health_router
from manamarket.config import settings
from manamarket.models.failure import KnownError, create_known_failure
from manamarket.services.catalog_store import load_catalog
from manamarket.services.shop import get_shop

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    if settings.load_catalog_on_startup:
        try:
            await load_catalog(get_shop().catalog_store)
        except KnownError as e:
            # Serve with an empty catalog; /ready reports not ready
            logger.error("Startup catalog load failed: %s (%s)", e.message, e.detail)
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("manamarket"),
    lifespan=lifespan,
)

app.include_router(cart_router)
app.include_router(catalog_router)
app.include_router(health_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Render domain errors as a classified failure envelope."""
    response = create_known_failure(exc)
    return JSONResponse(status_code=exc.status_code, content=response.model_dump(mode="json"))
