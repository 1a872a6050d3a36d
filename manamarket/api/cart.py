"""
Cart API endpoints.

Every command returns the full cart so the client can re-render from
one response. Stock rule violations come back as known failures.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from manamarket.config import DISPLAY_CURRENCY
from manamarket.services.cart_engine import CartEngine, CartLineView
from manamarket.services.shop import Shop, get_shop

router = APIRouter(prefix="/cart", tags=["cart"])


class CartLineResponse(BaseModel):
    """One cart line with display data."""

    item_id: str
    name: str
    unit_price: float
    quantity: int
    subtotal: float
    stock: int

    @classmethod
    def from_view(cls, view: CartLineView) -> "CartLineResponse":
        return cls(
            item_id=view.item_id,
            name=view.name,
            unit_price=view.unit_price,
            quantity=view.quantity,
            subtotal=view.subtotal,
            stock=view.stock_quantity,
        )


class CartResponse(BaseModel):
    """Current cart contents and totals."""

    lines: list[CartLineResponse] = Field(default_factory=list)
    item_count: int = 0
    total: float = 0.0
    currency: str = DISPLAY_CURRENCY


class CheckoutResponse(BaseModel):
    """Result of a demo checkout."""

    item_count: int
    total: float
    currency: str = DISPLAY_CURRENCY
    lines: list[CartLineResponse] = Field(default_factory=list)
    message: str = "Thank you for your purchase! This is a demo; no payment was taken."


def _cart_response(engine: CartEngine) -> CartResponse:
    return CartResponse(
        lines=[CartLineResponse.from_view(view) for view in engine.lines()],
        item_count=engine.cart_item_count(),
        total=engine.cart_total(),
    )


@router.get("", response_model=CartResponse)
async def get_cart(shop: Annotated[Shop, Depends(get_shop)]) -> CartResponse:
    """Get the cart."""
    return _cart_response(shop.cart)


@router.post("/items/{item_id}", response_model=CartResponse)
async def add_item(item_id: str, shop: Annotated[Shop, Depends(get_shop)]) -> CartResponse:
    """Add one copy of an item to the cart."""
    shop.cart.add_to_cart(item_id)
    return _cart_response(shop.cart)


@router.post("/items/{item_id}/increase", response_model=CartResponse)
async def increase_item(item_id: str, shop: Annotated[Shop, Depends(get_shop)]) -> CartResponse:
    """Add one copy to an existing cart line."""
    shop.cart.increase_quantity(item_id)
    return _cart_response(shop.cart)


@router.post("/items/{item_id}/decrease", response_model=CartResponse)
async def decrease_item(item_id: str, shop: Annotated[Shop, Depends(get_shop)]) -> CartResponse:
    """Remove one copy; the line goes away at zero."""
    shop.cart.decrease_quantity(item_id)
    return _cart_response(shop.cart)


@router.delete("/items/{item_id}", response_model=CartResponse)
async def remove_item(item_id: str, shop: Annotated[Shop, Depends(get_shop)]) -> CartResponse:
    """Remove an item's line. Removing an absent item is a no-op."""
    shop.cart.remove_from_cart(item_id)
    return _cart_response(shop.cart)


@router.delete("", response_model=CartResponse)
async def clear_cart(shop: Annotated[Shop, Depends(get_shop)]) -> CartResponse:
    """Empty the cart."""
    shop.cart.clear_cart()
    return _cart_response(shop.cart)


@router.post("/checkout", response_model=CheckoutResponse)
async def checkout(shop: Annotated[Shop, Depends(get_shop)]) -> CheckoutResponse:
    """Check out and empty the cart. Fails with empty_cart when there is nothing to buy."""
    receipt = shop.cart.checkout()
    return CheckoutResponse(
        item_count=receipt.item_count,
        total=receipt.total,
        lines=[CartLineResponse.from_view(view) for view in receipt.lines],
    )
