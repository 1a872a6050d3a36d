from manamarket.parsers.inventory_csv import (
    SourceUnavailableError,
    load_inventory,
    parse_inventory_text,
)
from manamarket.parsers.scryfall import (
    CardMetadata,
    MalformedCardError,
    classify_category,
    parse_card_metadata,
    primary_color,
    rarity_label,
)

__all__ = [
    "CardMetadata",
    "MalformedCardError",
    "SourceUnavailableError",
    "classify_category",
    "load_inventory",
    "parse_card_metadata",
    "parse_inventory_text",
    "primary_color",
    "rarity_label",
]
