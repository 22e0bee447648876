from __future__ import annotations

import sqlite3

import pytest

from nexus_pos import persistence, workflow
from nexus_pos.errors import EmptyCartError, NotFoundError, PreconditionError, SessionNotOpenError, ValidationError
from nexus_pos.models import DIRECT_SALE_ORDER_ID, OrderStatus, PaymentMethod, TableStatus


def test_add_item_builds_table_cart(state):
    workflow.add_item(state, "t1", "1")
    workflow.add_item(state, "t1", "1")
    workflow.add_item(state, "t1", "4")

    cart = workflow.cart_for(state, "t1")
    assert [(item.product_id, item.quantity) for item in cart] == [("1", 2), ("4", 1)]
    assert workflow.cart_for(state, "t2") == ()


def test_unknown_table_and_product_are_rejected(state):
    with pytest.raises(NotFoundError):
        workflow.add_item(state, "t99", "1")
    with pytest.raises(NotFoundError):
        workflow.add_item(state, "t1", "nope")

    assert workflow.cart_for(state, "t1") == ()


def test_adjust_to_zero_removes_line(state):
    workflow.add_item(state, "t1", "1")
    workflow.adjust_item(state, "t1", "1", -1)

    assert workflow.cart_for(state, "t1") == ()


def test_adjust_missing_line_is_noop(state):
    workflow.add_item(state, "t1", "1")
    before = workflow.cart_for(state, "t1")

    assert workflow.adjust_item(state, "t1", "4", -1) is before


def test_note_on_missing_line_is_rejected(state):
    with pytest.raises(NotFoundError):
        workflow.set_item_note(state, "t1", "1", "well done")


def test_dispatch_marks_table_and_creates_single_order(state):
    workflow.add_item(state, "t3", "2")
    order = workflow.dispatch_to_kitchen(state, "t3")

    table = state.tables.get("t3")
    assert table.status is TableStatus.OCCUPIED
    assert table.current_order_id == order.order_id
    assert order.status is OrderStatus.IN_KITCHEN
    assert [o.table_id for o in state.ledger.all()] == ["t3"]
    assert order.total == pytest.approx(8.5 * 1.16)


def test_redispatch_reuses_order_id(state):
    workflow.add_item(state, "t3", "2")
    first = workflow.dispatch_to_kitchen(state, "t3")
    workflow.add_item(state, "t3", "4")
    second = workflow.dispatch_to_kitchen(state, "t3")

    assert second.order_id == first.order_id
    assert second.created_at == first.created_at
    assert len(state.ledger) == 1
    assert len(second.items) == 2
    assert second.subtotal == pytest.approx(8.5 + 2.5)


def test_dispatch_moves_no_money(open_drawer):
    workflow.add_item(open_drawer, "t1", "5")
    workflow.dispatch_to_kitchen(open_drawer, "t1")

    assert open_drawer.cash.current.total_sales == 0
    assert len(open_drawer.sales) == 0


def test_dispatch_empty_cart_is_rejected(state):
    with pytest.raises(EmptyCartError):
        workflow.dispatch_to_kitchen(state, "t1")

    assert len(state.ledger) == 0
    assert state.tables.get("t1").status is TableStatus.FREE


def test_open_table_continues_existing_order(state):
    workflow.add_item(state, "t2", "3")
    order = workflow.dispatch_to_kitchen(state, "t2")
    state.carts.clear()

    assert workflow.open_table(state, "t2") == order.items


def test_checkout_scenario(open_drawer):
    state = open_drawer
    workflow.add_item(state, "t1", "1")
    # Reprice the seeded pizza to make the numbers round.
    state.catalog.update_product("1", price=10.0)
    state.carts.clear()
    workflow.add_item(state, "t1", "1")
    workflow.add_item(state, "t1", "1")

    totals = workflow.cart_totals(state, "t1")
    assert totals.subtotal == pytest.approx(20.0)
    assert totals.tax == pytest.approx(3.2)
    assert totals.total == pytest.approx(23.2)

    sale = workflow.checkout(state, "t1", PaymentMethod.CASH)

    session = state.cash.current
    assert session.total_sales == pytest.approx(23.2)
    assert session.expected_balance == pytest.approx(123.2)
    assert state.sales.all()[0] is sale
    assert sale.total == pytest.approx(23.2)
    assert sale.table_id == "t1"
    assert sale.table_number == 1
    assert sale.order_id == DIRECT_SALE_ORDER_ID
    assert sale.session_id == session.session_id
    assert state.tables.get("t1").status is TableStatus.FREE
    assert workflow.cart_for(state, "t1") == ()


def test_checkout_after_kitchen_closes_the_order(open_drawer):
    state = open_drawer
    workflow.add_item(state, "t4", "2")
    order = workflow.dispatch_to_kitchen(state, "t4")
    before = state.cash.current

    sale = workflow.checkout(state, "t4", "Card")

    assert len(state.sales) == 1
    assert sale.order_id == order.order_id
    assert sale.payment_method is PaymentMethod.CARD
    assert state.ledger.active_for_table("t4") is None
    assert len(state.ledger) == 0
    table = state.tables.get("t4")
    assert table.status is TableStatus.FREE
    assert table.current_order_id is None
    after = state.cash.current
    assert after.total_sales - before.total_sales == pytest.approx(sale.total)
    assert after.expected_balance - before.expected_balance == pytest.approx(sale.total)
    assert after.expected_balance == pytest.approx(after.opening_balance + after.total_sales)


def test_sales_are_newest_first(open_drawer):
    workflow.add_item(open_drawer, "t1", "4")
    first = workflow.checkout(open_drawer, "t1", PaymentMethod.CASH)
    workflow.add_item(open_drawer, "t2", "6")
    second = workflow.checkout(open_drawer, "t2", PaymentMethod.CASH)

    assert open_drawer.sales.all() == [second, first]


def test_checkout_without_open_session_is_blocked(logged_in):
    state = logged_in
    workflow.add_item(state, "t1", "1")
    workflow.dispatch_to_kitchen(state, "t1")

    with pytest.raises(SessionNotOpenError):
        workflow.checkout(state, "t1", PaymentMethod.CASH)

    assert len(state.sales) == 0
    assert state.ledger.active_for_table("t1") is not None
    assert state.tables.get("t1").status is TableStatus.OCCUPIED
    assert len(workflow.cart_for(state, "t1")) == 1


def test_checkout_empty_cart_is_rejected(open_drawer):
    with pytest.raises(EmptyCartError):
        workflow.checkout(open_drawer, "t1", PaymentMethod.CASH)

    assert len(open_drawer.sales) == 0
    assert open_drawer.cash.current.total_sales == 0


def test_checkout_unknown_payment_method(open_drawer):
    workflow.add_item(open_drawer, "t1", "1")

    with pytest.raises(ValidationError):
        workflow.checkout(open_drawer, "t1", "Cheque")
    assert len(open_drawer.sales) == 0


def test_stock_untouched_by_default(open_drawer):
    workflow.add_item(open_drawer, "t1", "5")
    workflow.checkout(open_drawer, "t1", PaymentMethod.CASH)

    assert open_drawer.catalog.get("5").stock == 12


def test_stock_decrement_option(open_drawer):
    open_drawer.decrement_stock_on_sale = True
    open_drawer.catalog.set_stock("5", 1)
    workflow.add_item(open_drawer, "t1", "5")
    workflow.add_item(open_drawer, "t1", "5")
    workflow.checkout(open_drawer, "t1", PaymentMethod.CASH)

    assert open_drawer.catalog.get("5").stock == 0


def test_mark_ready_is_forward_only(state):
    workflow.add_item(state, "t5", "1")
    order = workflow.dispatch_to_kitchen(state, "t5")

    ready = workflow.mark_order_ready(state, order.order_id)

    assert ready.status is OrderStatus.READY
    assert state.ledger.in_kitchen() == []
    with pytest.raises(PreconditionError):
        workflow.mark_order_ready(state, order.order_id)


def test_subscribers_are_notified(state):
    calls = []
    unsubscribe = state.subscribe(lambda: calls.append(1))

    workflow.add_item(state, "t1", "1")
    workflow.dispatch_to_kitchen(state, "t1")
    unsubscribe()
    workflow.add_item(state, "t1", "1")

    assert len(calls) == 2


def test_sales_are_tagged_with_session_and_origin(open_drawer):
    workflow.add_item(open_drawer, "t1", "4")
    direct = workflow.checkout(open_drawer, "t1", PaymentMethod.CASH)
    workflow.add_item(open_drawer, "t2", "4")
    workflow.dispatch_to_kitchen(open_drawer, "t2")
    served = workflow.checkout(open_drawer, "t2", PaymentMethod.CASH)

    assert direct.is_direct
    assert not served.is_direct
    session_id = open_drawer.cash.current.session_id
    assert open_drawer.sales.for_session(session_id) == [served, direct]
    assert open_drawer.sales.for_session("other") == []
    assert open_drawer.sales.get(direct.sale_id) is direct


def test_redispatch_of_ready_order_stays_ready(state):
    workflow.add_item(state, "t5", "1")
    order = workflow.dispatch_to_kitchen(state, "t5")
    workflow.mark_order_ready(state, order.order_id)
    workflow.add_item(state, "t5", "4")

    again = workflow.dispatch_to_kitchen(state, "t5")

    assert again.order_id == order.order_id
    assert again.status is OrderStatus.READY
    assert state.ledger.get(order.order_id).status is OrderStatus.READY
    assert len(again.items) == 2


def test_failed_settlement_leaves_checkout_unapplied(open_drawer, monkeypatch):
    state = open_drawer
    workflow.add_item(state, "t1", "2")
    order = workflow.dispatch_to_kitchen(state, "t1")

    def broken_save(key, value):
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(persistence, "save_value", broken_save)
    with pytest.raises(sqlite3.OperationalError):
        workflow.checkout(state, "t1", PaymentMethod.CASH)

    assert len(state.sales) == 0
    assert state.ledger.get(order.order_id).status is OrderStatus.IN_KITCHEN
    assert state.tables.get("t1").status is TableStatus.OCCUPIED
    assert state.cash.current.total_sales == 0
    assert len(workflow.cart_for(state, "t1")) == 1
