"""
Scryfall card payload mapping.

Turns a card object from the Scryfall API into the metadata the storefront
needs, and classifies it into a storefront category and primary color.

Card objects: https://scryfall.com/docs/api/cards
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from manamarket.models.catalog import CardCategory, ManaColor


class MalformedCardError(ValueError):
    """Raised when a Scryfall payload lacks the fields a catalog entry needs."""


@dataclass(frozen=True, slots=True)
class CardMetadata:
    """Descriptive card data resolved from Scryfall."""

    id: str
    name: str
    type_line: str
    colors: list[str] = field(default_factory=list)
    mana_cost: str = ""
    power: str | None = None
    toughness: str | None = None
    oracle_text: str = ""
    rarity: str = ""
    set_name: str = ""
    image_url: str | None = None
    scryfall_uri: str | None = None


# =============================================================================
# CLASSIFICATION TABLES
# =============================================================================


def _type_line_contains(word: str) -> Callable[[str], bool]:
    def predicate(type_line: str) -> bool:
        return word in type_line.lower()

    return predicate


# Order is precedence: an "Artifact Creature" is a creature, a
# "Land Creature" is a creature, an "Enchantment Artifact" is an enchantment.
CATEGORY_RULES: tuple[tuple[Callable[[str], bool], CardCategory], ...] = (
    (_type_line_contains("creature"), CardCategory.CREATURE),
    (_type_line_contains("instant"), CardCategory.INSTANT),
    (_type_line_contains("sorcery"), CardCategory.SORCERY),
    (_type_line_contains("enchantment"), CardCategory.ENCHANTMENT),
    (_type_line_contains("artifact"), CardCategory.ARTIFACT),
    (_type_line_contains("planeswalker"), CardCategory.PLANESWALKER),
    (_type_line_contains("land"), CardCategory.LAND),
)

COLOR_SYMBOLS: dict[str, ManaColor] = {
    "W": ManaColor.WHITE,
    "U": ManaColor.BLUE,
    "B": ManaColor.BLACK,
    "R": ManaColor.RED,
    "G": ManaColor.GREEN,
}

RARITY_LABELS: dict[str, str] = {
    "common": "Common",
    "uncommon": "Uncommon",
    "rare": "Rare",
    "mythic": "Mythic Rare",
}


def classify_category(type_line: str) -> CardCategory:
    """
    Pick the storefront category for a type line.

    The first matching rule in CATEGORY_RULES wins; no match is OTHER.
    """
    for predicate, category in CATEGORY_RULES:
        if predicate(type_line):
            return category
    return CardCategory.OTHER


def primary_color(colors: list[str] | None) -> ManaColor:
    """
    Map the first Scryfall color symbol to a ManaColor.

    Empty, missing, or unrecognized colors are COLORLESS.
    """
    if not colors:
        return ManaColor.COLORLESS
    return COLOR_SYMBOLS.get(colors[0], ManaColor.COLORLESS)


def rarity_label(rarity: str) -> str:
    """Display label for a rarity tier. Unknown tiers pass through unchanged."""
    return RARITY_LABELS.get(rarity, rarity)


def _image_url(card: dict[str, Any]) -> str | None:
    image_uris = card.get("image_uris")
    if image_uris:
        return image_uris.get("normal")

    # Double-faced cards keep images on each face
    faces = card.get("card_faces") or []
    if faces and faces[0].get("image_uris"):
        return faces[0]["image_uris"].get("normal")

    return None


def parse_card_metadata(card: dict[str, Any]) -> CardMetadata:
    """
    Build CardMetadata from a Scryfall card object.

    Args:
        card: Decoded JSON from /cards/named or any card endpoint

    Returns:
        CardMetadata with optional fields defaulted

    Raises:
        MalformedCardError: If id, name or type_line is missing
    """
    if not isinstance(card, dict):
        raise MalformedCardError(f"Expected a card object, got {type(card).__name__}")

    missing = [key for key in ("id", "name", "type_line") if not card.get(key)]
    if missing:
        raise MalformedCardError(f"Card payload missing {', '.join(missing)}")

    colors = card.get("colors")
    if colors is None:
        # Double-faced cards list colors per face
        faces = card.get("card_faces") or []
        colors = faces[0].get("colors", []) if faces else []

    return CardMetadata(
        id=str(card["id"]),
        name=str(card["name"]),
        type_line=str(card["type_line"]),
        colors=list(colors),
        mana_cost=card.get("mana_cost") or "",
        power=card.get("power"),
        toughness=card.get("toughness"),
        oracle_text=card.get("oracle_text") or "",
        rarity=card.get("rarity") or "",
        set_name=card.get("set_name") or "",
        image_url=_image_url(card),
        scryfall_uri=card.get("scryfall_uri"),
    )
