"""
Process-wide shop state.

Bundles the catalog store and the cart engine that reads it. The API gets
it through `get_shop`, which tests replace with a fresh instance.
"""

from dataclasses import dataclass

from manamarket.services.cart_engine import CartEngine
from manamarket.services.catalog_store import CatalogStore


@dataclass
class Shop:
    """Catalog store plus the cart engine bound to it."""

    catalog_store: CatalogStore
    cart: CartEngine


def create_shop(catalog_store: CatalogStore | None = None) -> Shop:
    """Build a shop with an empty cart over the given (or an empty) store."""
    store = catalog_store if catalog_store is not None else CatalogStore()
    return Shop(catalog_store=store, cart=CartEngine(store))


# Singleton shop instance
_shop: Shop | None = None


def get_shop() -> Shop:
    """Get the global shop instance."""
    global _shop
    if _shop is None:
        _shop = create_shop()
    return _shop


def reset_shop() -> None:
    """Reset the global shop (for testing)."""
    global _shop
    _shop = None
