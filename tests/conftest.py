from collections.abc import Callable
from typing import Any

import pytest

from manamarket.models import failure as failure_module
from manamarket.models.catalog import CardCategory, Catalog, CatalogEntry, ManaColor
from manamarket.services.shop import reset_shop


@pytest.fixture(autouse=True)
def clear_finalized_responses():
    """Clear the finalized responses set between tests.

    Python reuses memory addresses for new objects, so stale ids from a
    previous test could make an unfinalized response look finalized.
    """
    failure_module._finalized_responses.clear()
    yield
    failure_module._finalized_responses.clear()


@pytest.fixture(autouse=True)
def fresh_shop():
    """Each test starts with no global shop state."""
    reset_shop()
    yield
    reset_shop()


@pytest.fixture
def sample_inventory_csv() -> str:
    """Inventory export as the store keeps it."""
    return """Name,Set,Purchase price,Quantity
Lightning Bolt,M10,2,3
Counterspell,MH2,1.25,4
"Sheoldred, the Apocalypse",DMU,72.5,1
Sol Ring,CMR,1.8,0
"""


@pytest.fixture
def scryfall_card() -> Callable[..., dict[str, Any]]:
    """Build a Scryfall card object with overridable fields."""

    def build(name: str = "Lightning Bolt", **overrides: Any) -> dict[str, Any]:
        card: dict[str, Any] = {
            "object": "card",
            "id": f"id-{name.lower().replace(' ', '-').replace(',', '')}",
            "name": name,
            "type_line": "Instant",
            "colors": ["R"],
            "mana_cost": "{R}",
            "oracle_text": "Lightning Bolt deals 3 damage to any target.",
            "rarity": "common",
            "set_name": "Magic 2010",
            "image_uris": {"normal": f"https://cards.scryfall.io/normal/{name}.jpg"},
            "scryfall_uri": f"https://scryfall.com/card/m10/146/{name}",
        }
        card.update(overrides)
        return card

    return build


@pytest.fixture
def make_entry() -> Callable[..., CatalogEntry]:
    """Build a CatalogEntry with overridable fields."""

    def build(item_id: str = "bolt", **overrides: Any) -> CatalogEntry:
        fields: dict[str, Any] = {
            "id": item_id,
            "name": item_id.title(),
            "category": CardCategory.INSTANT,
            "color": ManaColor.RED,
            "mana_cost": "{R}",
            "power": None,
            "toughness": None,
            "text": "",
            "price_local": 1500.0,
            "stock_quantity": 3,
            "rarity": "Common",
            "set_name": "Magic 2010",
        }
        fields.update(overrides)
        return CatalogEntry(**fields)

    return build


@pytest.fixture
def sample_catalog(make_entry: Callable[..., CatalogEntry]) -> Catalog:
    """Small catalog covering stock levels 3, 1 and 0."""
    entries = [
        make_entry("bolt", name="Lightning Bolt", price_local=1500.0, stock_quantity=3),
        make_entry(
            "sheoldred",
            name="Sheoldred, the Apocalypse",
            category=CardCategory.CREATURE,
            color=ManaColor.BLACK,
            mana_cost="{2}{B}{B}",
            power="4",
            toughness="5",
            text="Deathtouch. Whenever you draw a card, you gain 2 life.",
            price_local=54375.0,
            stock_quantity=1,
            rarity="Mythic Rare",
        ),
        make_entry(
            "sol-ring",
            name="Sol Ring",
            category=CardCategory.ARTIFACT,
            color=ManaColor.COLORLESS,
            mana_cost="{1}",
            text="{T}: Add {C}{C}.",
            price_local=1350.0,
            stock_quantity=0,
            rarity="Uncommon",
        ),
    ]
    return Catalog(entries={entry.id: entry for entry in entries})
