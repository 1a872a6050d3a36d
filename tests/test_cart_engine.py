"""
Tests for the cart engine.

INVARIANTS:
- Line quantity stays between 1 and the item's stock after every call
- Rejected commands leave the cart untouched
- Count and total always match the current lines
"""

import random
from collections.abc import Callable

import pytest

from manamarket.models.catalog import Catalog, CatalogEntry
from manamarket.models.failure import FailureKind, KnownError
from manamarket.services.cart_engine import (
    CartEngine,
    EmptyCartError,
    OutOfStockError,
    StockExceededError,
)
from manamarket.services.catalog_store import CatalogStore, UnknownItemError


@pytest.fixture
def engine(sample_catalog: Catalog) -> CartEngine:
    return CartEngine(CatalogStore(sample_catalog))


def _quantities(engine: CartEngine) -> dict[str, int]:
    return {line.item_id: line.quantity for line in engine.cart.lines}


class TestAddToCart:
    def test_first_add_creates_line(self, engine: CartEngine) -> None:
        line = engine.add_to_cart("bolt")

        assert line.quantity == 1
        assert _quantities(engine) == {"bolt": 1}

    def test_repeat_add_increments(self, engine: CartEngine) -> None:
        engine.add_to_cart("bolt")
        line = engine.add_to_cart("bolt")

        assert line.quantity == 2
        assert len(engine.cart.lines) == 1

    def test_add_beyond_stock_fails(self, engine: CartEngine) -> None:
        """Bolt has 3 in stock: three adds succeed, the fourth is rejected."""
        for _ in range(3):
            engine.add_to_cart("bolt")

        with pytest.raises(StockExceededError) as exc_info:
            engine.add_to_cart("bolt")

        assert exc_info.value.kind == FailureKind.STOCK_EXCEEDED
        assert exc_info.value.stock == 3
        assert _quantities(engine) == {"bolt": 3}

    def test_stock_exceeded_is_out_of_stock(self, engine: CartEngine) -> None:
        engine.add_to_cart("sheoldred")

        with pytest.raises(OutOfStockError) as exc_info:
            engine.add_to_cart("sheoldred")

        error = exc_info.value
        assert error.item_id == "sheoldred"
        assert error.status_code == 409
        assert error.detail == "stock: 1"
        assert "only 1 of" in error.message

    def test_zero_stock_fails(self, engine: CartEngine) -> None:
        with pytest.raises(OutOfStockError) as exc_info:
            engine.add_to_cart("sol-ring")

        assert exc_info.value.kind == FailureKind.OUT_OF_STOCK
        assert "out of stock" in exc_info.value.message
        assert engine.cart.is_empty()

    def test_unknown_item_fails(self, engine: CartEngine) -> None:
        with pytest.raises(UnknownItemError) as exc_info:
            engine.add_to_cart("black-lotus")

        assert exc_info.value.status_code == 404
        assert engine.cart.is_empty()

    def test_lines_keep_insertion_order(self, engine: CartEngine) -> None:
        engine.add_to_cart("sheoldred")
        engine.add_to_cart("bolt")
        engine.add_to_cart("bolt")

        assert [line.item_id for line in engine.cart.lines] == ["sheoldred", "bolt"]

    def test_returned_line_is_a_copy(self, engine: CartEngine) -> None:
        line = engine.add_to_cart("bolt")
        line.quantity = 99

        assert _quantities(engine) == {"bolt": 1}


class TestIncreaseQuantity:
    def test_increments_existing_line(self, engine: CartEngine) -> None:
        engine.add_to_cart("bolt")

        assert engine.increase_quantity("bolt").quantity == 2

    def test_at_stock_fails(self, engine: CartEngine) -> None:
        engine.add_to_cart("sheoldred")

        with pytest.raises(StockExceededError):
            engine.increase_quantity("sheoldred")

        assert _quantities(engine) == {"sheoldred": 1}

    def test_absent_line_fails(self, engine: CartEngine) -> None:
        """Increase never silently creates a line."""
        with pytest.raises(UnknownItemError) as exc_info:
            engine.increase_quantity("bolt")

        assert exc_info.value.where == "cart"
        assert engine.cart.is_empty()


class TestDecreaseQuantity:
    def test_decrements(self, engine: CartEngine) -> None:
        engine.add_to_cart("bolt")
        engine.add_to_cart("bolt")

        line = engine.decrease_quantity("bolt")

        assert line is not None
        assert line.quantity == 1

    def test_decrease_to_zero_removes_line(self, engine: CartEngine) -> None:
        engine.add_to_cart("bolt")

        assert engine.decrease_quantity("bolt") is None
        assert engine.cart.is_empty()

    def test_increase_after_removal_fails(self, engine: CartEngine) -> None:
        engine.add_to_cart("bolt")
        engine.decrease_quantity("bolt")

        with pytest.raises(UnknownItemError):
            engine.increase_quantity("bolt")

    def test_absent_line_is_noop(self, engine: CartEngine) -> None:
        assert engine.decrease_quantity("bolt") is None
        assert engine.cart.is_empty()


class TestRemoveAndClear:
    def test_remove_drops_line(self, engine: CartEngine) -> None:
        engine.add_to_cart("bolt")
        engine.add_to_cart("sheoldred")

        engine.remove_from_cart("bolt")

        assert _quantities(engine) == {"sheoldred": 1}

    def test_remove_twice_is_same_as_once(self, engine: CartEngine) -> None:
        engine.add_to_cart("bolt")
        engine.add_to_cart("sheoldred")

        engine.remove_from_cart("bolt")
        after_first = _quantities(engine)
        engine.remove_from_cart("bolt")

        assert _quantities(engine) == after_first

    def test_clear_empties_cart(self, engine: CartEngine) -> None:
        engine.add_to_cart("bolt")
        engine.add_to_cart("sheoldred")

        engine.clear_cart()

        assert engine.cart.is_empty()
        assert engine.cart_item_count() == 0


class TestCheckout:
    def test_returns_receipt_and_empties_cart(self, engine: CartEngine) -> None:
        engine.add_to_cart("bolt")
        engine.add_to_cart("bolt")
        engine.add_to_cart("sheoldred")

        receipt = engine.checkout()

        assert receipt.item_count == 3
        assert receipt.total == pytest.approx(2 * 1500.0 + 54375.0)
        assert [view.item_id for view in receipt.lines] == ["bolt", "sheoldred"]
        assert engine.cart.is_empty()
        assert engine.cart_total() == 0

    def test_empty_cart_fails(self, engine: CartEngine) -> None:
        with pytest.raises(EmptyCartError) as exc_info:
            engine.checkout()

        assert exc_info.value.kind == FailureKind.EMPTY_CART


class TestQueries:
    def test_count_and_total(self, engine: CartEngine) -> None:
        engine.add_to_cart("bolt")
        engine.add_to_cart("bolt")
        engine.add_to_cart("sheoldred")

        assert engine.cart_item_count() == 3
        assert engine.cart_total() == pytest.approx(3000.0 + 54375.0)

    def test_empty_cart_totals(self, engine: CartEngine) -> None:
        assert engine.cart_item_count() == 0
        assert engine.cart_total() == 0

    def test_line_views(self, engine: CartEngine) -> None:
        engine.add_to_cart("bolt")
        engine.add_to_cart("bolt")

        [view] = engine.lines()

        assert view.name == "Lightning Bolt"
        assert view.unit_price == 1500.0
        assert view.subtotal == 3000.0
        assert view.stock_quantity == 3


class TestCatalogResync:
    def test_lines_clamped_to_new_stock(
        self, sample_catalog: Catalog, make_entry: Callable[..., CatalogEntry]
    ) -> None:
        store = CatalogStore(sample_catalog)
        engine = CartEngine(store)
        for _ in range(3):
            engine.add_to_cart("bolt")

        store.replace(Catalog(entries={"bolt": make_entry("bolt", stock_quantity=2)}))

        assert _quantities(engine) == {"bolt": 2}

    def test_vanished_and_sold_out_lines_dropped(
        self, sample_catalog: Catalog, make_entry: Callable[..., CatalogEntry]
    ) -> None:
        store = CatalogStore(sample_catalog)
        engine = CartEngine(store)
        engine.add_to_cart("bolt")
        engine.add_to_cart("sheoldred")

        store.replace(Catalog(entries={"bolt": make_entry("bolt", stock_quantity=0)}))

        assert engine.cart.is_empty()

    def test_total_uses_new_prices(
        self, sample_catalog: Catalog, make_entry: Callable[..., CatalogEntry]
    ) -> None:
        store = CatalogStore(sample_catalog)
        engine = CartEngine(store)
        engine.add_to_cart("bolt")

        store.replace(Catalog(entries={"bolt": make_entry("bolt", price_local=2000.0)}))

        assert engine.cart_total() == 2000.0


class TestInvariants:
    def test_random_command_sequences_respect_stock(self, sample_catalog: Catalog) -> None:
        """Any mix of commands keeps 1 <= quantity <= stock and consistent totals."""
        rng = random.Random(1234)
        item_ids = ["bolt", "sheoldred", "sol-ring", "missing"]

        for _ in range(50):
            engine = CartEngine(CatalogStore(sample_catalog))
            for _ in range(40):
                command = rng.choice(
                    [
                        engine.add_to_cart,
                        engine.increase_quantity,
                        engine.decrease_quantity,
                        engine.remove_from_cart,
                    ]
                )
                item_id = rng.choice(item_ids)
                before = _quantities(engine)
                try:
                    command(item_id)
                except KnownError:
                    assert _quantities(engine) == before

                seen: set[str] = set()
                for line in engine.cart.lines:
                    assert line.item_id not in seen
                    seen.add(line.item_id)
                    assert 1 <= line.quantity <= sample_catalog.stock_of(line.item_id)

                assert engine.cart_item_count() == sum(_quantities(engine).values())
                assert engine.cart_total() == pytest.approx(
                    sum(
                        sample_catalog.get(item).price_local * qty
                        for item, qty in _quantities(engine).items()
                    )
                )
