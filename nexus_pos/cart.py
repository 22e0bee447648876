"""Pure cart reducers and totals.

A cart is an insertion-ordered tuple of ``CartItem`` lines, unique by product
id. Every function returns a new tuple and never mutates its input.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from nexus_pos.config import TAX_RATE
from nexus_pos.models import CartItem, Product, Totals

Cart = tuple[CartItem, ...]

EMPTY_CART: Cart = ()


def find_line(cart: Cart, product_id: str) -> CartItem | None:
    for item in cart:
        if item.product_id == product_id:
            return item
    return None


def add_product(cart: Cart, product: Product) -> Cart:
    """Add one unit of ``product``; an existing line is incremented in place."""
    if find_line(cart, product.product_id) is None:
        return (*cart, CartItem.from_product(product))
    return tuple(
        replace(item, quantity=item.quantity + 1) if item.product_id == product.product_id else item
        for item in cart
    )


def adjust_quantity(cart: Cart, product_id: str, delta: int) -> Cart:
    """Change a line's quantity by ``delta``.

    Reaching zero removes the line. A result below zero, or a product that is
    not in the cart, leaves the cart unchanged.
    """
    line = find_line(cart, product_id)
    if line is None:
        return cart

    new_quantity = line.quantity + delta
    if new_quantity < 0:
        return cart
    if new_quantity == 0:
        return remove_line(cart, product_id)
    return tuple(replace(item, quantity=new_quantity) if item is line else item for item in cart)


def remove_line(cart: Cart, product_id: str) -> Cart:
    return tuple(item for item in cart if item.product_id != product_id)


def set_note(cart: Cart, product_id: str, note: str | None) -> Cart:
    """Attach free text to a line; blank text clears the note."""
    normalized = (note or "").strip() or None
    return tuple(replace(item, note=normalized) if item.product_id == product_id else item for item in cart)


def item_count(cart: Iterable[CartItem]) -> int:
    return sum(item.quantity for item in cart)


def compute_totals(cart: Iterable[CartItem]) -> Totals:
    subtotal = sum((item.price * item.quantity for item in cart), 0.0)
    tax = subtotal * TAX_RATE
    return Totals(subtotal=subtotal, tax=tax, total=subtotal + tax)
