from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum


class CardCategory(str, Enum):
    """Primary card type used for storefront filtering."""

    CREATURE = "creature"
    INSTANT = "instant"
    SORCERY = "sorcery"
    ENCHANTMENT = "enchantment"
    ARTIFACT = "artifact"
    PLANESWALKER = "planeswalker"
    LAND = "land"
    OTHER = "other"


class ManaColor(str, Enum):
    """Primary color of a card. Multicolor cards take their first listed color."""

    WHITE = "white"
    BLUE = "blue"
    BLACK = "black"
    RED = "red"
    GREEN = "green"
    COLORLESS = "colorless"


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """
    A sellable card: Scryfall metadata merged with our inventory numbers.

    Attributes:
        id: Scryfall card id (stable per printing)
        name: Canonical card name from Scryfall
        category: Primary type, see CardCategory
        color: Primary color, see ManaColor
        mana_cost: Mana cost symbols (e.g. "{1}{R}"), "0" when the card has none
        power: Creature power, None for non-creatures
        toughness: Creature toughness, None for non-creatures
        text: Oracle text
        price_local: Unit price in local currency (unit cost USD x USD_TO_CLP)
        stock_quantity: Copies on hand when the catalog was assembled
        rarity: Display label for the printing's rarity
        set_name: Edition the printing belongs to
        image_url: Card image, when Scryfall provides one
        scryfall_uri: Card detail page on Scryfall
    """

    id: str
    name: str
    category: CardCategory
    color: ManaColor
    mana_cost: str
    power: str | None
    toughness: str | None
    text: str
    price_local: float
    stock_quantity: int
    rarity: str
    set_name: str
    image_url: str | None = None
    scryfall_uri: str | None = None

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0


@dataclass
class Catalog:
    """
    All sellable cards keyed by id, in inventory order.

    Built once per sync by the catalog assembler and treated as read-only
    afterwards; a re-sync replaces the whole catalog.
    """

    entries: dict[str, CatalogEntry] = field(default_factory=dict)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self.entries.values())

    def get(self, item_id: str) -> CatalogEntry | None:
        """Get an entry by id, or None if it isn't in the catalog."""
        return self.entries.get(item_id)

    def stock_of(self, item_id: str) -> int:
        """Copies available for an item. Unknown items have no stock."""
        entry = self.entries.get(item_id)
        return entry.stock_quantity if entry else 0
