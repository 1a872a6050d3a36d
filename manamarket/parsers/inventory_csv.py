"""
Parser for the store's inventory spreadsheet.

Expected columns (header row, case-insensitive, any order, extra columns ignored):
    - Name
    - Purchase price (USD)
    - Quantity

Parsing is lenient: a price or quantity that can't be read becomes 0
instead of rejecting the row. Only an unreadable file, a missing Name
column, or a file with no data rows fails the load.
"""

import csv
import logging
import math
from io import StringIO
from pathlib import Path

from manamarket.models.failure import FailureKind, KnownError
from manamarket.models.inventory import InventoryRow

logger = logging.getLogger(__name__)

NAME_COLUMN = "name"
PRICE_COLUMN = "purchase price"
QUANTITY_COLUMN = "quantity"


class SourceUnavailableError(KnownError):
    """
    Exception raised when the inventory source can't be used.

    Fatal to a catalog sync: no catalog is produced.
    """

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(
            kind=FailureKind.SOURCE_UNAVAILABLE,
            message="The inventory file could not be loaded.",
            detail=f"{source}: {reason}",
            suggestion="Check that the inventory CSV exists and has a Name column.",
            status_code=503,
        )


def _parse_price(raw: str | None) -> float:
    """Parse a USD price, falling back to 0 for blanks and garbage."""
    if not raw:
        return 0.0
    try:
        price = float(raw.strip())
    except ValueError:
        return 0.0
    if not math.isfinite(price) or price < 0:
        return 0.0
    return price


def _parse_quantity(raw: str | None) -> int:
    """Parse a copy count, falling back to 0 for blanks and garbage."""
    if not raw:
        return 0
    raw = raw.strip()
    try:
        quantity = int(raw)
    except ValueError:
        # Spreadsheets sometimes export counts as "3.0"
        try:
            value = float(raw)
        except ValueError:
            return 0
        if not math.isfinite(value):
            return 0
        quantity = int(value)
    return max(quantity, 0)


def parse_inventory_text(text: str, source: str = "<text>") -> list[InventoryRow]:
    """
    Parse inventory CSV text into rows.

    Args:
        text: Raw CSV content including the header row
        source: Label used in error details (usually the file path)

    Returns:
        One InventoryRow per non-blank data line, in file order.

    Raises:
        SourceUnavailableError: If the CSV is malformed, the Name column is
            missing or there are no rows
    """
    try:
        return _read_rows(csv.DictReader(StringIO(text)), source)
    except csv.Error as e:
        raise SourceUnavailableError(source, f"malformed CSV: {e}") from e


def _read_rows(reader: csv.DictReader, source: str) -> list[InventoryRow]:
    if not reader.fieldnames:
        raise SourceUnavailableError(source, "file is empty")

    # Map normalized header -> header as written
    columns = {col.strip().lower(): col for col in reader.fieldnames if col}

    name_col = columns.get(NAME_COLUMN)
    if name_col is None:
        raise SourceUnavailableError(source, "missing required column 'Name'")

    price_col = columns.get(PRICE_COLUMN)
    qty_col = columns.get(QUANTITY_COLUMN)
    if price_col is None or qty_col is None:
        logger.warning(
            "Inventory %s lacks a price or quantity column; missing values read as 0",
            source,
        )

    rows: list[InventoryRow] = []
    for record in reader:
        name = (record.get(name_col) or "").strip()
        if not name:
            continue

        rows.append(
            InventoryRow(
                name=name,
                unit_cost_usd=_parse_price(record.get(price_col) if price_col else None),
                quantity_on_hand=_parse_quantity(record.get(qty_col) if qty_col else None),
            )
        )

    if not rows:
        raise SourceUnavailableError(source, "no inventory rows")

    logger.info("Loaded %d inventory rows from %s", len(rows), source)
    return rows


def load_inventory(path: Path) -> list[InventoryRow]:
    """
    Load inventory rows from a CSV file.

    Raises:
        SourceUnavailableError: If the file can't be read or has no usable rows
    """
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnavailableError(str(path), str(e)) from e

    return parse_inventory_text(text, source=str(path))
