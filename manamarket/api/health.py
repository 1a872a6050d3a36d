"""
Health check endpoints.

Provides liveness and readiness probes. Readiness means a catalog with at
least one entry has been loaded.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from manamarket.services.shop import Shop, get_shop

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    catalog_entries: int | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running.
    Does not check the catalog.
    """
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    shop: Annotated[Shop, Depends(get_shop)],
) -> HealthResponse:
    """
    Readiness probe.

    Returns 503 until a catalog sync has produced entries.
    """
    entries = len(shop.catalog_store.catalog)
    if entries == 0:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", catalog_entries=0)
    return HealthResponse(status="ready", catalog_entries=entries)
