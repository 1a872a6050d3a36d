"""
Catalog store and sync.

CatalogStore owns the live catalog. A sync loads the inventory file,
assembles a new catalog and swaps it in whole. Replacement and cart
mutation share the store's lock, so a cart operation never sees a
half-applied sync.
"""

import logging
from collections.abc import Callable
from pathlib import Path
from threading import RLock

from manamarket.config import settings
from manamarket.models.catalog import Catalog
from manamarket.models.failure import FailureKind, KnownError
from manamarket.parsers.inventory_csv import load_inventory
from manamarket.services.catalog_assembler import AssemblyReport, CardLookup, assemble
from manamarket.services.rate_limiter import IntervalRateLimiter
from manamarket.services.scryfall_client import ScryfallClient

logger = logging.getLogger(__name__)


class UnknownItemError(KnownError):
    """Exception raised for an item id that isn't in the catalog or the cart."""

    def __init__(self, item_id: str, where: str = "catalog"):
        self.item_id = item_id
        self.where = where
        super().__init__(
            kind=FailureKind.UNKNOWN_ITEM,
            message=f"Item '{item_id}' is not in the {where}.",
            status_code=404,
        )


class EmptyCatalogError(KnownError):
    """
    Exception raised when a sync attempted rows but resolved none.

    Not fatal to the process; the store holds an empty catalog.
    """

    def __init__(self, report: AssemblyReport):
        self.report = report
        super().__init__(
            kind=FailureKind.EMPTY_CATALOG,
            message="No cards could be loaded into the catalog.",
            detail=f"0 of {report.attempted} inventory rows resolved",
            suggestion="Scryfall may be unreachable. Try reloading the catalog later.",
            status_code=503,
        )


class CatalogStore:
    """
    Holder of the current catalog.

    Listeners registered with `subscribe` run under the store lock right
    after each replacement.
    """

    def __init__(self, catalog: Catalog | None = None) -> None:
        self.lock = RLock()
        self._catalog = catalog if catalog is not None else Catalog()
        self._last_report: AssemblyReport | None = None
        self._listeners: list[Callable[[Catalog], None]] = []

    @property
    def catalog(self) -> Catalog:
        """The current catalog snapshot."""
        with self.lock:
            return self._catalog

    @property
    def last_report(self) -> AssemblyReport | None:
        """Report from the most recent sync, None before the first."""
        return self._last_report

    @property
    def loaded(self) -> bool:
        """True once a sync has produced at least one entry."""
        with self.lock:
            return len(self._catalog) > 0

    def subscribe(self, listener: Callable[[Catalog], None]) -> None:
        """Call `listener` with the new catalog after every replacement."""
        self._listeners.append(listener)

    def replace(self, catalog: Catalog, report: AssemblyReport | None = None) -> None:
        """Swap in a new catalog and notify listeners."""
        with self.lock:
            self._catalog = catalog
            self._last_report = report
            for listener in self._listeners:
                listener(catalog)


async def sync_catalog(
    store: CatalogStore,
    inventory_path: Path,
    lookup: CardLookup,
    limiter: IntervalRateLimiter | None = None,
    timeout: float | None = None,
) -> AssemblyReport:
    """
    Rebuild the store's catalog from an inventory file.

    Args:
        store: Store to replace the catalog in
        inventory_path: Inventory CSV
        lookup: Card name resolver
        limiter: Request scheduler (see assemble)
        timeout: Per-lookup time bound in seconds

    Returns:
        The assembly report

    Raises:
        SourceUnavailableError: If the inventory can't be read (store untouched)
        EmptyCatalogError: If every lookup failed (store holds an empty catalog)
    """
    rows = load_inventory(inventory_path)

    report = await assemble(rows, lookup, limiter=limiter, timeout=timeout)
    store.replace(report.catalog, report)

    if report.is_empty:
        logger.error(
            "Catalog sync produced no entries (%d rows attempted)",
            report.attempted,
        )
        raise EmptyCatalogError(report)

    return report


async def load_catalog(store: CatalogStore, inventory_path: Path | None = None) -> AssemblyReport:
    """
    Sync the catalog from the configured inventory file against Scryfall.

    Raises:
        SourceUnavailableError: If the inventory can't be read
        EmptyCatalogError: If every lookup failed
    """
    path = inventory_path or settings.inventory_path

    async with ScryfallClient() as scryfall:
        return await sync_catalog(
            store,
            path,
            scryfall.lookup,
            limiter=IntervalRateLimiter(settings.lookup_interval_seconds),
            timeout=settings.lookup_timeout_seconds,
        )
