"""
Catalog search service.

Filters the storefront catalog for list views:
- by category ("creature", "instant", ...), "all" disables the filter
- by primary color ("red", "colorless", ...), "all" disables the filter
- by free text, matched case-insensitively against name, oracle text,
  category and color
"""

from collections.abc import Iterable

from manamarket.models.catalog import CardCategory, Catalog, CatalogEntry, ManaColor
from manamarket.models.failure import FailureKind, KnownError

ALL = "all"


class InvalidFilterError(KnownError):
    """Exception raised for a category or color the catalog doesn't use."""

    def __init__(self, field_name: str, value: str, allowed: Iterable[str]):
        self.field_name = field_name
        self.value = value
        options = ", ".join([ALL, *allowed])
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=f"Unknown {field_name} '{value}'.",
            detail=f"Valid options: {options}",
            status_code=400,
        )


def _parse_category(value: CardCategory | str) -> CardCategory | None:
    if isinstance(value, CardCategory):
        return value
    value = value.strip().lower()
    if value == ALL:
        return None
    try:
        return CardCategory(value)
    except ValueError as e:
        raise InvalidFilterError("category", value, (c.value for c in CardCategory)) from e


def _parse_color(value: ManaColor | str) -> ManaColor | None:
    if isinstance(value, ManaColor):
        return value
    value = value.strip().lower()
    if value == ALL:
        return None
    try:
        return ManaColor(value)
    except ValueError as e:
        raise InvalidFilterError("color", value, (c.value for c in ManaColor)) from e


def filter_by_category(
    entries: Iterable[CatalogEntry], category: CardCategory | str
) -> list[CatalogEntry]:
    """Keep entries of one category. "all" keeps everything."""
    wanted = _parse_category(category)
    if wanted is None:
        return list(entries)
    return [entry for entry in entries if entry.category == wanted]


def filter_by_color(
    entries: Iterable[CatalogEntry], color: ManaColor | str
) -> list[CatalogEntry]:
    """Keep entries of one primary color. "all" keeps everything."""
    wanted = _parse_color(color)
    if wanted is None:
        return list(entries)
    return [entry for entry in entries if entry.color == wanted]


def _matches(entry: CatalogEntry, term: str) -> bool:
    return (
        term in entry.name.lower()
        or term in entry.text.lower()
        or term in entry.category.value
        or term in entry.color.value
    )


def search_entries(entries: Iterable[CatalogEntry], text: str) -> list[CatalogEntry]:
    """
    Free-text search over name, oracle text, category and color.

    Blank text matches everything.
    """
    term = text.strip().lower()
    if not term:
        return list(entries)
    return [entry for entry in entries if _matches(entry, term)]


def query_catalog(
    catalog: Catalog,
    category: CardCategory | str = ALL,
    color: ManaColor | str = ALL,
    text: str = "",
) -> list[CatalogEntry]:
    """
    Apply category, color and text filters together.

    Returns:
        Matching entries in catalog order.

    Raises:
        InvalidFilterError: If category or color isn't a known value
    """
    results = filter_by_category(catalog, category)
    results = filter_by_color(results, color)
    return search_entries(results, text)
