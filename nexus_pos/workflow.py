"""Order, kitchen and checkout transitions across the stores.

Each function validates everything it needs before the first mutation, so a
rejected call leaves the state untouched. Subscribers are notified after every
successful transition.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from nexus_pos import cart as cart_ops
from nexus_pos.cart import EMPTY_CART, Cart
from nexus_pos.errors import EmptyCartError, NotFoundError, ValidationError
from nexus_pos.models import DIRECT_SALE_ORDER_ID, Order, OrderStatus, PaymentMethod, Sale, Totals
from nexus_pos.state import AppState

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid4().hex[:9].upper()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def cart_for(state: AppState, table_id: str) -> Cart:
    state.tables.get(table_id)
    return state.carts.get(table_id, EMPTY_CART)


def open_table(state: AppState, table_id: str) -> Cart:
    """Return the working cart for a table, continuing its open order if any."""
    state.tables.get(table_id)
    if table_id not in state.carts:
        order = state.ledger.active_for_table(table_id)
        state.carts[table_id] = order.items if order is not None else EMPTY_CART
    return state.carts[table_id]


def cart_totals(state: AppState, table_id: str) -> Totals:
    return cart_ops.compute_totals(cart_for(state, table_id))


def _store_cart(state: AppState, table_id: str, cart: Cart) -> Cart:
    state.carts[table_id] = cart
    state.notify()
    return cart


def add_item(state: AppState, table_id: str, product_id: str) -> Cart:
    cart = open_table(state, table_id)
    product = state.catalog.get(product_id)
    return _store_cart(state, table_id, cart_ops.add_product(cart, product))


def adjust_item(state: AppState, table_id: str, product_id: str, delta: int) -> Cart:
    """Change a line's quantity; zero removes it, below zero is ignored."""
    cart = open_table(state, table_id)
    updated = cart_ops.adjust_quantity(cart, product_id, delta)
    if updated is cart:
        return cart
    return _store_cart(state, table_id, updated)


def remove_item(state: AppState, table_id: str, product_id: str) -> Cart:
    cart = open_table(state, table_id)
    return _store_cart(state, table_id, cart_ops.remove_line(cart, product_id))


def set_item_note(state: AppState, table_id: str, product_id: str, note: str | None) -> Cart:
    cart = open_table(state, table_id)
    if cart_ops.find_line(cart, product_id) is None:
        raise NotFoundError("Cart line", product_id)
    return _store_cart(state, table_id, cart_ops.set_note(cart, product_id, note))


def dispatch_to_kitchen(state: AppState, table_id: str) -> Order:
    """Send the table's cart to the kitchen. No money moves."""
    cart = open_table(state, table_id)
    if not cart:
        raise EmptyCartError(table_id)

    existing = state.ledger.active_for_table(table_id)
    # A Ready order that gets more items stays Ready; status never moves back.
    status = OrderStatus.IN_KITCHEN
    if existing is not None and existing.status.rank > status.rank:
        status = existing.status
    totals = cart_ops.compute_totals(cart)
    order = Order(
        order_id=existing.order_id if existing is not None else _new_id(),
        table_id=table_id,
        items=cart,
        status=status,
        subtotal=totals.subtotal,
        tax=totals.tax,
        total=totals.total,
        created_at=existing.created_at if existing is not None else _utc_now(),
    )
    state.ledger.upsert(order)
    logger.info(
        "kitchen_dispatch order=%s table=%s lines=%d total=%.2f new=%s",
        order.order_id,
        table_id,
        len(cart),
        order.total,
        existing is None,
    )
    state.notify()
    return order


def checkout(state: AppState, table_id: str, payment_method: PaymentMethod | str) -> Sale:
    """Finalize the table's sale, settle it into the open drawer and free the table.

    An open cash session is a hard precondition.
    """
    table = state.tables.get(table_id)
    cart = open_table(state, table_id)
    if not cart:
        raise EmptyCartError(table_id)
    try:
        method = PaymentMethod(payment_method)
    except ValueError:
        raise ValidationError(f"Unknown payment method {payment_method!r}") from None
    session = state.cash.require_open()

    existing = state.ledger.active_for_table(table_id)
    sale = Sale(
        sale_id=_new_id(),
        created_at=_utc_now(),
        items=cart,
        total=cart_ops.compute_totals(cart).total,
        payment_method=method,
        session_id=session.session_id,
        order_id=existing.order_id if existing is not None else DIRECT_SALE_ORDER_ID,
        table_id=table_id,
        table_number=table.number,
    )

    # Settlement is the only step that writes to disk; the rest cannot fail.
    state.cash.record_settlement(sale.total)
    state.sales.record(sale)
    if existing is not None:
        state.ledger.remove(existing.order_id)
    state.tables.release(table_id)
    if state.decrement_stock_on_sale:
        _decrement_stock(state, sale)
    state.carts.pop(table_id, None)

    logger.info("checkout sale=%s table=%s total=%.2f", sale.sale_id, table_id, sale.total)
    state.notify()
    return sale


def mark_order_ready(state: AppState, order_id: str) -> Order:
    """Kitchen-complete action: In Kitchen -> Ready."""
    order = state.ledger.mark_ready(order_id)
    state.notify()
    return order


def _decrement_stock(state: AppState, sale: Sale) -> None:
    for item in sale.items:
        try:
            state.catalog.decrement_stock(item.product_id, item.quantity)
        except NotFoundError:
            logger.warning("stock_decrement_skipped product=%s removed from catalog", item.product_id)
