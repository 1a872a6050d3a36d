from dataclasses import dataclass, field


@dataclass
class CartLine:
    """
    Purchase intent for one catalog item.

    Quantity is always between 1 and the item's stock; a line that would
    drop to zero is removed from the cart instead.
    """

    item_id: str
    quantity: int = 1


@dataclass
class Cart:
    """
    A shopper's cart.

    Lines keep insertion order so the cart renders the same way every time.
    Each item id appears at most once.
    """

    lines: list[CartLine] = field(default_factory=list)

    def find(self, item_id: str) -> CartLine | None:
        """Get the line for an item, or None if it isn't in the cart."""
        for line in self.lines:
            if line.item_id == item_id:
                return line
        return None

    def remove(self, item_id: str) -> bool:
        """Drop the line for an item. Returns True if a line was removed."""
        before = len(self.lines)
        self.lines = [line for line in self.lines if line.item_id != item_id]
        return len(self.lines) != before

    def clear(self) -> None:
        """Remove every line."""
        self.lines.clear()

    def is_empty(self) -> bool:
        return not self.lines

    def item_count(self) -> int:
        """Total copies across all lines."""
        return sum(line.quantity for line in self.lines)
