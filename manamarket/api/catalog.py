"""
Catalog API endpoints.

Loads the catalog from inventory + Scryfall and serves list, filter,
search and detail views.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from manamarket.config import DISPLAY_CURRENCY
from manamarket.models.catalog import CardCategory, CatalogEntry, ManaColor
from manamarket.services.catalog_assembler import AssemblyReport
from manamarket.services.catalog_search import ALL, query_catalog
from manamarket.services.catalog_store import UnknownItemError, load_catalog
from manamarket.services.shop import Shop, get_shop

router = APIRouter(prefix="/catalog", tags=["catalog"])


class CatalogEntryResponse(BaseModel):
    """A sellable card."""

    id: str
    name: str
    category: CardCategory
    color: ManaColor
    mana_cost: str
    power: str | None = None
    toughness: str | None = None
    text: str = ""
    price: float = Field(..., description="Unit price in local currency, unrounded")
    currency: str = DISPLAY_CURRENCY
    stock: int
    in_stock: bool
    rarity: str
    set_name: str
    image_url: str | None = None
    scryfall_uri: str | None = None

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> "CatalogEntryResponse":
        return cls(
            id=entry.id,
            name=entry.name,
            category=entry.category,
            color=entry.color,
            mana_cost=entry.mana_cost,
            power=entry.power,
            toughness=entry.toughness,
            text=entry.text,
            price=entry.price_local,
            stock=entry.stock_quantity,
            in_stock=entry.in_stock,
            rarity=entry.rarity,
            set_name=entry.set_name,
            image_url=entry.image_url,
            scryfall_uri=entry.scryfall_uri,
        )


class CatalogListResponse(BaseModel):
    """Catalog entries matching the requested filters."""

    entries: list[CatalogEntryResponse] = Field(default_factory=list)
    count: int = 0


class LookupFailureResponse(BaseModel):
    """An inventory row that couldn't be resolved."""

    name: str
    reason: str


class AssemblyReportResponse(BaseModel):
    """Outcome of a catalog sync."""

    attempted: int
    succeeded: int
    failed: int
    entries: int
    failures: list[LookupFailureResponse] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: AssemblyReport) -> "AssemblyReportResponse":
        return cls(
            attempted=report.attempted,
            succeeded=report.succeeded,
            failed=report.failed,
            entries=len(report.catalog),
            failures=[
                LookupFailureResponse(name=f.name, reason=f.reason) for f in report.failures
            ],
        )


@router.post("/load", response_model=AssemblyReportResponse)
async def load(shop: Annotated[Shop, Depends(get_shop)]) -> AssemblyReportResponse:
    """
    Rebuild the catalog from the inventory file.

    Returns per-row failures alongside the counts. Fails with
    source_unavailable if the inventory can't be read and with
    empty_catalog if no row resolved.
    """
    report = await load_catalog(shop.catalog_store)
    return AssemblyReportResponse.from_report(report)


@router.get("", response_model=CatalogListResponse)
async def list_catalog(
    shop: Annotated[Shop, Depends(get_shop)],
    category: Annotated[str, Query(description="Card category or 'all'")] = ALL,
    color: Annotated[str, Query(description="Primary color or 'all'")] = ALL,
    q: Annotated[str, Query(description="Search name, text, category and color")] = "",
) -> CatalogListResponse:
    """List catalog entries, optionally filtered and searched."""
    results = query_catalog(shop.catalog_store.catalog, category=category, color=color, text=q)
    return CatalogListResponse(
        entries=[CatalogEntryResponse.from_entry(entry) for entry in results],
        count=len(results),
    )


@router.get("/{item_id}", response_model=CatalogEntryResponse)
async def get_entry(
    item_id: str,
    shop: Annotated[Shop, Depends(get_shop)],
) -> CatalogEntryResponse:
    """Detail view for one catalog entry."""
    entry = shop.catalog_store.catalog.get(item_id)
    if entry is None:
        raise UnknownItemError(item_id)
    return CatalogEntryResponse.from_entry(entry)
