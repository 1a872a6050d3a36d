"""
Sync the catalog from the inventory file.

Run this job to check an inventory file against Scryfall before serving
it: every row is looked up and the report lists the rows that failed.

    python -m manamarket.jobs.sync_catalog [inventory.csv]
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from manamarket.models.failure import KnownError
from manamarket.services.catalog_assembler import AssemblyReport
from manamarket.services.catalog_store import CatalogStore, load_catalog

logger = logging.getLogger(__name__)


async def run_sync(inventory_path: Path | None = None) -> AssemblyReport:
    """Assemble the catalog once and log the outcome."""
    logger.info("Syncing catalog from %s...", inventory_path or "configured inventory")

    try:
        report = await load_catalog(CatalogStore(), inventory_path)
    except KnownError as e:
        logger.error("Catalog sync failed: %s (%s)", e.message, e.detail)
        raise

    for failure in report.failures:
        logger.warning("Unresolved: %s (%s)", failure.name, failure.reason)
    logger.info(
        "Catalog sync complete: %d of %d rows resolved, %d entries",
        report.succeeded,
        report.attempted,
        len(report.catalog),
    )
    return report


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Sync the card catalog against Scryfall")
    parser.add_argument("inventory", nargs="?", type=Path, help="Inventory CSV path")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        asyncio.run(run_sync(args.inventory))
    except KnownError:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
