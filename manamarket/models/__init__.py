from manamarket.models.cart import Cart, CartLine
from manamarket.models.catalog import CardCategory, Catalog, CatalogEntry, ManaColor
from manamarket.models.failure import (
    STANDARD_MESSAGES,
    STANDARD_SUGGESTIONS,
    ApiResponse,
    FailureDetail,
    FailureKind,
    KnownError,
    OutcomeType,
    create_known_failure,
    create_success,
    create_unknown_failure,
    finalize_response,
    is_finalized,
)
from manamarket.models.inventory import InventoryRow

__all__ = [
    "ApiResponse",
    "CardCategory",
    "Cart",
    "CartLine",
    "Catalog",
    "CatalogEntry",
    "FailureDetail",
    "FailureKind",
    "InventoryRow",
    "KnownError",
    "ManaColor",
    "OutcomeType",
    "STANDARD_MESSAGES",
    "STANDARD_SUGGESTIONS",
    "create_known_failure",
    "create_success",
    "create_unknown_failure",
    "finalize_response",
    "is_finalized",
]
