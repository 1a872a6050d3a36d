from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class InventoryRow:
    """
    One line of the local inventory spreadsheet.

    Attributes:
        name: Card name as typed in the spreadsheet (may be misspelled)
        unit_cost_usd: Purchase price per copy, in USD
        quantity_on_hand: Copies available for sale
    """

    name: str
    unit_cost_usd: float
    quantity_on_hand: int
