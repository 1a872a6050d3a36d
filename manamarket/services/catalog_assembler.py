"""
Catalog assembly.

Joins inventory rows to Scryfall metadata and builds the catalog.

Every row gets exactly one rate-limited lookup. A failed lookup drops that
row and is recorded in the report; it never aborts the batch. Results are
collected per row and merged in inventory order, so the outcome doesn't
depend on which response arrived first.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field

import httpx

from manamarket.config import USD_TO_CLP, settings
from manamarket.models.catalog import Catalog, CatalogEntry
from manamarket.models.inventory import InventoryRow
from manamarket.parsers.scryfall import (
    CardMetadata,
    MalformedCardError,
    classify_category,
    primary_color,
    rarity_label,
)
from manamarket.services.rate_limiter import IntervalRateLimiter
from manamarket.services.scryfall_client import LookupFailedError

logger = logging.getLogger(__name__)

# Resolves a card name to metadata, raising LookupFailedError on failure
CardLookup = Callable[[str], Awaitable[CardMetadata]]


@dataclass(frozen=True, slots=True)
class LookupFailure:
    """An inventory row that could not be resolved."""

    name: str
    reason: str


@dataclass
class AssemblyReport:
    """
    Outcome of one catalog assembly.

    `attempted` counts inventory rows looked up, `succeeded` counts rows
    resolved. The catalog can hold fewer entries than `succeeded` when two
    rows resolve to the same printing.
    """

    catalog: Catalog
    attempted: int
    succeeded: int
    failures: list[LookupFailure] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def is_empty(self) -> bool:
        """True when rows were attempted but none produced an entry."""
        return self.attempted > 0 and len(self.catalog) == 0


def build_entry(
    row: InventoryRow,
    metadata: CardMetadata,
    rate: float = USD_TO_CLP,
) -> CatalogEntry:
    """
    Merge an inventory row with its Scryfall metadata.

    Stock comes from the inventory row only; price is the row's USD cost
    converted at `rate`.
    """
    return CatalogEntry(
        id=metadata.id,
        name=metadata.name,
        category=classify_category(metadata.type_line),
        color=primary_color(metadata.colors),
        mana_cost=metadata.mana_cost or "0",
        power=metadata.power,
        toughness=metadata.toughness,
        text=metadata.oracle_text,
        price_local=row.unit_cost_usd * rate,
        stock_quantity=row.quantity_on_hand,
        rarity=rarity_label(metadata.rarity),
        set_name=metadata.set_name,
        image_url=metadata.image_url,
        scryfall_uri=metadata.scryfall_uri,
    )


async def _resolve_row(
    row: InventoryRow,
    lookup: CardLookup,
    limiter: IntervalRateLimiter,
    timeout: float | None,
) -> CardMetadata | LookupFailure:
    await limiter.acquire()

    try:
        if timeout is None:
            return await lookup(row.name)
        return await asyncio.wait_for(lookup(row.name), timeout)
    except LookupFailedError as e:
        reason = e.reason
    except TimeoutError:
        reason = f"timed out after {timeout}s"
    except (MalformedCardError, httpx.HTTPError) as e:
        reason = str(e) or type(e).__name__
    except Exception as e:
        logger.exception("Unexpected error looking up %r", row.name)
        reason = f"{type(e).__name__}: {e}"

    logger.warning("Lookup failed for %r: %s", row.name, reason)
    return LookupFailure(name=row.name, reason=reason)


async def assemble(
    rows: Sequence[InventoryRow],
    lookup: CardLookup,
    limiter: IntervalRateLimiter | None = None,
    timeout: float | None = None,
    rate: float = USD_TO_CLP,
) -> AssemblyReport:
    """
    Build a catalog from inventory rows.

    Args:
        rows: Inventory rows, one lookup each
        lookup: Name -> metadata resolver (fuzzy matching is the resolver's job)
        limiter: Request scheduler. Defaults to one request per
            settings.lookup_interval_seconds
        timeout: Per-lookup time bound in seconds, None for no bound
        rate: USD -> local currency conversion

    Returns:
        AssemblyReport with the catalog and per-row failures. Never raises
        for lookup problems; an all-failed batch yields an empty catalog.
    """
    if limiter is None:
        limiter = IntervalRateLimiter(settings.lookup_interval_seconds)

    logger.info("Assembling catalog from %d inventory rows", len(rows))

    results = await asyncio.gather(
        *(_resolve_row(row, lookup, limiter, timeout) for row in rows)
    )

    entries: dict[str, CatalogEntry] = {}
    failures: list[LookupFailure] = []
    duplicates: list[str] = []
    succeeded = 0

    for row, result in zip(rows, results, strict=True):
        if isinstance(result, LookupFailure):
            failures.append(result)
            continue

        succeeded += 1
        if result.id in entries:
            # Same printing reached from two rows; first row wins
            logger.warning(
                "Row %r resolved to %s already in catalog; keeping first",
                row.name,
                result.id,
            )
            duplicates.append(row.name)
            continue

        entries[result.id] = build_entry(row, result, rate)

    report = AssemblyReport(
        catalog=Catalog(entries=entries),
        attempted=len(rows),
        succeeded=succeeded,
        failures=failures,
        duplicates=duplicates,
    )

    logger.info(
        "Catalog assembled: %d attempted, %d succeeded, %d failed",
        report.attempted,
        report.succeeded,
        report.failed,
    )
    return report
