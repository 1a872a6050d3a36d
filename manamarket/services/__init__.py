"""
ManaMarket services.

Catalog assembly from inventory + Scryfall, and the stock-bounded cart.
"""

from manamarket.services.cart_engine import (
    CartEngine,
    CartLineView,
    CheckoutReceipt,
    EmptyCartError,
    OutOfStockError,
    StockExceededError,
)
from manamarket.services.catalog_assembler import (
    AssemblyReport,
    CardLookup,
    LookupFailure,
    assemble,
    build_entry,
)
from manamarket.services.catalog_search import (
    InvalidFilterError,
    filter_by_category,
    filter_by_color,
    query_catalog,
    search_entries,
)
from manamarket.services.catalog_store import (
    CatalogStore,
    EmptyCatalogError,
    UnknownItemError,
    load_catalog,
    sync_catalog,
)
from manamarket.services.rate_limiter import IntervalRateLimiter
from manamarket.services.scryfall_client import LookupFailedError, ScryfallClient
from manamarket.services.shop import Shop, create_shop, get_shop, reset_shop

__all__ = [
    # Catalog assembly
    "AssemblyReport",
    "CardLookup",
    "LookupFailure",
    "assemble",
    "build_entry",
    "IntervalRateLimiter",
    "LookupFailedError",
    "ScryfallClient",
    # Catalog store
    "CatalogStore",
    "EmptyCatalogError",
    "UnknownItemError",
    "load_catalog",
    "sync_catalog",
    # Catalog search
    "InvalidFilterError",
    "filter_by_category",
    "filter_by_color",
    "query_catalog",
    "search_entries",
    # Cart
    "CartEngine",
    "CartLineView",
    "CheckoutReceipt",
    "EmptyCartError",
    "OutOfStockError",
    "StockExceededError",
    # Shop state
    "Shop",
    "create_shop",
    "get_shop",
    "reset_shop",
]
