from manamarket.api.cart import router as cart_router
from manamarket.api.catalog import router as catalog_router
from manamarket.api.health import router as health_router

__all__ = [
    "cart_router",
    "catalog_router",
    "health_router",
]
