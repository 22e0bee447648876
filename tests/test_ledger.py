from __future__ import annotations

from datetime import datetime, timezone

import pytest

from nexus_pos.data import seed_tables
from nexus_pos.errors import NotFoundError, PreconditionError
from nexus_pos.ledger import OrderLedger
from nexus_pos.models import Order, OrderStatus, TableStatus
from nexus_pos.tables import TableRegistry


def _order(order_id: str, table_id: str, status: OrderStatus = OrderStatus.IN_KITCHEN, total: float = 11.6) -> Order:
    return Order(
        order_id=order_id,
        table_id=table_id,
        items=(),
        status=status,
        subtotal=total / 1.16,
        tax=total - total / 1.16,
        total=total,
        created_at=datetime(2024, 5, 1, 13, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def tables() -> TableRegistry:
    return TableRegistry(seed_tables())


@pytest.fixture
def ledger(tables: TableRegistry) -> OrderLedger:
    return OrderLedger(tables)


def test_upsert_occupies_table(ledger, tables):
    ledger.upsert(_order("A1", "t2"))

    table = tables.get("t2")
    assert table.status is TableStatus.OCCUPIED
    assert table.current_order_id == "A1"


def test_upsert_replaces_in_place(ledger):
    ledger.upsert(_order("A1", "t1"))
    ledger.upsert(_order("B2", "t2"))
    ledger.upsert(_order("A1", "t1", total=23.2))

    assert [order.order_id for order in ledger.all()] == ["A1", "B2"]
    assert ledger.get("A1").total == 23.2


def test_second_open_order_for_table_is_rejected(ledger):
    ledger.upsert(_order("A1", "t1"))

    with pytest.raises(PreconditionError):
        ledger.upsert(_order("B2", "t1"))
    assert len(ledger) == 1


def test_upsert_unknown_table_is_rejected(ledger):
    with pytest.raises(NotFoundError):
        ledger.upsert(_order("A1", "t42"))
    assert len(ledger) == 0


def test_remove_is_idempotent(ledger):
    ledger.upsert(_order("A1", "t1"))

    ledger.remove("A1")
    ledger.remove("A1")
    ledger.remove("never-existed")

    assert ledger.all() == []
    assert ledger.active_for_table("t1") is None


def test_in_kitchen_filters_by_status(ledger):
    ledger.upsert(_order("A1", "t1"))
    ledger.upsert(_order("B2", "t2", status=OrderStatus.PENDING))

    assert [order.order_id for order in ledger.in_kitchen()] == ["A1"]


def test_advance_never_moves_backwards(ledger):
    ledger.upsert(_order("A1", "t1"))
    ledger.advance("A1", OrderStatus.READY)

    with pytest.raises(PreconditionError):
        ledger.advance("A1", OrderStatus.IN_KITCHEN)
    assert ledger.get("A1").status is OrderStatus.READY


def test_mark_ready_requires_in_kitchen(ledger):
    ledger.upsert(_order("A1", "t1", status=OrderStatus.PENDING))

    with pytest.raises(PreconditionError):
        ledger.mark_ready("A1")
    with pytest.raises(NotFoundError):
        ledger.mark_ready("missing")


def test_release_frees_table(tables):
    tables.occupy("t3", "X")
    table = tables.release("t3")

    assert table.status is TableStatus.FREE
    assert table.current_order_id is None


def test_tables_by_status(ledger, tables):
    ledger.upsert(_order("A1", "t1"))
    tables.set_status("t2", TableStatus.CLEANING)

    assert [table.table_id for table in tables.by_status(TableStatus.OCCUPIED)] == ["t1"]
    assert [table.table_id for table in tables.by_status(TableStatus.CLEANING)] == ["t2"]
    assert len(tables.by_status(TableStatus.FREE)) == 6


def test_upsert_never_moves_status_backwards(ledger):
    ledger.upsert(_order("A1", "t1"))
    ledger.mark_ready("A1")

    with pytest.raises(PreconditionError):
        ledger.upsert(_order("A1", "t1", status=OrderStatus.IN_KITCHEN))
    assert ledger.get("A1").status is OrderStatus.READY
