"""
Cart engine: stock-bounded purchase intent.

Owns the shopper's cart and applies every cart command against the
current catalog.

INVARIANTS:
- A line's quantity is between 1 and its item's stock after every call
- An item id appears on at most one line
- A rejected command leaves the cart untouched
- Count and total are derived from the cart on demand, never cached

Line lifecycle: absent -> present(1) -> present(n <= stock) -> absent
"""

import logging
from dataclasses import dataclass, field

from manamarket.models.cart import Cart, CartLine
from manamarket.models.catalog import Catalog, CatalogEntry
from manamarket.models.failure import FailureKind, KnownError
from manamarket.services.catalog_store import CatalogStore, UnknownItemError

logger = logging.getLogger(__name__)


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================


class OutOfStockError(KnownError):
    """Exception raised when adding an item that has no stock."""

    def __init__(
        self,
        entry: CatalogEntry,
        kind: FailureKind = FailureKind.OUT_OF_STOCK,
        message: str | None = None,
    ):
        self.item_id = entry.id
        self.stock = entry.stock_quantity
        super().__init__(
            kind=kind,
            message=message or f"Sorry, {entry.name} is out of stock.",
            detail=f"stock: {entry.stock_quantity}",
            status_code=409,
        )


class StockExceededError(OutOfStockError):
    """
    Exception raised when a line is already at the item's stock.

    Subclasses OutOfStockError: for this shopper the item has run out.
    """

    def __init__(self, entry: CatalogEntry):
        super().__init__(
            entry,
            kind=FailureKind.STOCK_EXCEEDED,
            message=f"Sorry, only {entry.stock_quantity} of {entry.name} in stock.",
        )


class EmptyCartError(KnownError):
    """Exception raised when checking out an empty cart."""

    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.EMPTY_CART,
            message="Your cart is empty.",
            suggestion="Add some cards before checking out.",
            status_code=409,
        )


# =============================================================================
# READ MODELS
# =============================================================================


@dataclass(frozen=True, slots=True)
class CartLineView:
    """A cart line joined with catalog data for display."""

    item_id: str
    name: str
    unit_price: float
    quantity: int
    stock_quantity: int

    @property
    def subtotal(self) -> float:
        return self.unit_price * self.quantity


@dataclass(frozen=True, slots=True)
class CheckoutReceipt:
    """Summary of a completed checkout. No payment is taken."""

    item_count: int
    total: float
    lines: list[CartLineView] = field(default_factory=list)


# =============================================================================
# ENGINE
# =============================================================================


class CartEngine:
    """
    Applies cart commands against the catalog in a CatalogStore.

    Commands run under the store lock, so they serialize with each other
    and with catalog replacement. After a replacement, lines are clamped
    to the new stock and lines for vanished or sold-out items are dropped.
    """

    def __init__(self, catalog_store: CatalogStore, cart: Cart | None = None) -> None:
        self._store = catalog_store
        self.cart = cart if cart is not None else Cart()
        catalog_store.subscribe(self._reconcile)

    def _entry(self, item_id: str) -> CatalogEntry:
        entry = self._store.catalog.get(item_id)
        if entry is None:
            raise UnknownItemError(item_id)
        return entry

    def _line(self, item_id: str) -> CartLine:
        line = self.cart.find(item_id)
        if line is None:
            raise UnknownItemError(item_id, where="cart")
        return line

    def _reject(self, event: str, entry: CatalogEntry, quantity: int) -> None:
        logger.info(
            event,
            extra={
                "item_id": entry.id,
                "quantity": quantity,
                "stock": entry.stock_quantity,
            },
        )

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def add_to_cart(self, item_id: str) -> CartLine:
        """
        Add one copy of an item.

        Creates the line at quantity 1, or bumps an existing line.

        Raises:
            UnknownItemError: If the item isn't in the catalog
            OutOfStockError: If the item has no stock
            StockExceededError: If the line already holds all the stock
        """
        with self._store.lock:
            entry = self._entry(item_id)

            if entry.stock_quantity <= 0:
                self._reject("CART_ADD_OUT_OF_STOCK", entry, 0)
                raise OutOfStockError(entry)

            line = self.cart.find(item_id)
            if line is None:
                line = CartLine(item_id=item_id, quantity=1)
                self.cart.lines.append(line)
                return CartLine(line.item_id, line.quantity)

            if line.quantity >= entry.stock_quantity:
                self._reject("CART_ADD_STOCK_EXCEEDED", entry, line.quantity)
                raise StockExceededError(entry)

            line.quantity += 1
            return CartLine(line.item_id, line.quantity)

    def increase_quantity(self, item_id: str) -> CartLine:
        """
        Add one copy to an existing line.

        Raises:
            UnknownItemError: If the item has no cart line or left the catalog
            StockExceededError: If the line already holds all the stock
        """
        with self._store.lock:
            line = self._line(item_id)
            entry = self._entry(item_id)

            if line.quantity >= entry.stock_quantity:
                self._reject("CART_INCREASE_STOCK_EXCEEDED", entry, line.quantity)
                raise StockExceededError(entry)

            line.quantity += 1
            return CartLine(line.item_id, line.quantity)

    def decrease_quantity(self, item_id: str) -> CartLine | None:
        """
        Remove one copy from a line.

        Returns:
            The updated line, or None if the line was removed or never existed
        """
        with self._store.lock:
            line = self.cart.find(item_id)
            if line is None:
                return None

            if line.quantity <= 1:
                self.cart.remove(item_id)
                return None

            line.quantity -= 1
            return CartLine(line.item_id, line.quantity)

    def remove_from_cart(self, item_id: str) -> None:
        """Drop an item's line. No-op if the item isn't in the cart."""
        with self._store.lock:
            self.cart.remove(item_id)

    def clear_cart(self) -> None:
        """Empty the cart."""
        with self._store.lock:
            self.cart.clear()

    def checkout(self) -> CheckoutReceipt:
        """
        Finish the purchase and empty the cart.

        Demo checkout: no payment or stock change takes place.

        Raises:
            EmptyCartError: If the cart has no lines
        """
        with self._store.lock:
            if self.cart.is_empty():
                raise EmptyCartError()

            receipt = CheckoutReceipt(
                item_count=self.cart_item_count(),
                total=self.cart_total(),
                lines=self.lines(),
            )
            self.cart.clear()

        logger.info(
            "CHECKOUT_COMPLETED",
            extra={"item_count": receipt.item_count, "total": receipt.total},
        )
        return receipt

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def cart_item_count(self) -> int:
        """Total copies in the cart."""
        with self._store.lock:
            return self.cart.item_count()

    def cart_total(self) -> float:
        """Sum of unit price x quantity over all lines, in local currency."""
        with self._store.lock:
            catalog = self._store.catalog
            total = 0.0
            for line in self.cart.lines:
                entry = catalog.get(line.item_id)
                if entry is not None:
                    total += entry.price_local * line.quantity
            return total

    def lines(self) -> list[CartLineView]:
        """Cart lines joined with catalog name and price, in insertion order."""
        with self._store.lock:
            catalog = self._store.catalog
            views: list[CartLineView] = []
            for line in self.cart.lines:
                entry = catalog.get(line.item_id)
                if entry is None:
                    continue
                views.append(
                    CartLineView(
                        item_id=line.item_id,
                        name=entry.name,
                        unit_price=entry.price_local,
                        quantity=line.quantity,
                        stock_quantity=entry.stock_quantity,
                    )
                )
            return views

    # -------------------------------------------------------------------------
    # Catalog replacement
    # -------------------------------------------------------------------------

    def _reconcile(self, catalog: Catalog) -> None:
        """Clamp lines to the new catalog's stock. Runs under the store lock."""
        kept: list[CartLine] = []
        for line in self.cart.lines:
            stock = catalog.stock_of(line.item_id)
            if stock <= 0:
                logger.info(
                    "CART_LINE_DROPPED_ON_SYNC",
                    extra={"item_id": line.item_id, "quantity": line.quantity},
                )
                continue
            if line.quantity > stock:
                logger.info(
                    "CART_LINE_CLAMPED_ON_SYNC",
                    extra={"item_id": line.item_id, "quantity": line.quantity, "stock": stock},
                )
                line.quantity = stock
            kept.append(line)
        self.cart.lines = kept
