"""Active orders awaiting kitchen or payment action."""

from __future__ import annotations

import logging
from dataclasses import replace

from nexus_pos.errors import NotFoundError, PreconditionError
from nexus_pos.models import Order, OrderStatus
from nexus_pos.tables import TableRegistry

logger = logging.getLogger(__name__)


class OrderLedger:
    """Insertion-ordered in-flight orders, at most one open order per table.

    The ledger is the source of truth for orders; every upsert also points the
    owning table at the order and marks it occupied.
    """

    def __init__(self, tables: TableRegistry) -> None:
        self._tables = tables
        self._orders: list[Order] = []

    def __len__(self) -> int:
        return len(self._orders)

    def all(self) -> list[Order]:
        return list(self._orders)

    def get(self, order_id: str) -> Order:
        for order in self._orders:
            if order.order_id == order_id:
                return order
        raise NotFoundError("Order", order_id)

    def active_for_table(self, table_id: str) -> Order | None:
        for order in self._orders:
            if order.table_id == table_id and order.status is not OrderStatus.PAID:
                return order
        return None

    def in_kitchen(self) -> list[Order]:
        return [order for order in self._orders if order.status is OrderStatus.IN_KITCHEN]

    def upsert(self, order: Order) -> Order:
        # Validates the table before touching the ledger.
        self._tables.get(order.table_id)

        existing = self.active_for_table(order.table_id)
        if existing is not None and existing.order_id != order.order_id:
            raise PreconditionError(
                f"Table {order.table_id!r} already has open order {existing.order_id}"
            )

        stored = next((current for current in self._orders if current.order_id == order.order_id), None)
        if stored is not None and order.status.rank < stored.status.rank:
            raise PreconditionError(
                f"Order {order.order_id} cannot go from {stored.status.value} back to {order.status.value}"
            )

        if stored is not None:
            self._orders = [order if current.order_id == order.order_id else current for current in self._orders]
            logger.debug("order_replaced id=%s status=%s", order.order_id, order.status.value)
        else:
            self._orders.append(order)
            logger.debug("order_inserted id=%s table=%s", order.order_id, order.table_id)

        self._tables.occupy(order.table_id, order.order_id)
        return order

    def remove(self, order_id: str) -> None:
        self._orders = [order for order in self._orders if order.order_id != order_id]

    def advance(self, order_id: str, status: OrderStatus) -> Order:
        """Move an order forward through its lifecycle; backward moves are rejected."""
        order = self.get(order_id)
        if status.rank < order.status.rank:
            raise PreconditionError(
                f"Order {order_id} cannot go from {order.status.value} back to {status.value}"
            )
        updated = replace(order, status=status)
        self._orders = [updated if current.order_id == order_id else current for current in self._orders]
        return updated

    def mark_ready(self, order_id: str) -> Order:
        order = self.get(order_id)
        if order.status is not OrderStatus.IN_KITCHEN:
            raise PreconditionError(f"Order {order_id} is {order.status.value}, not In Kitchen")
        updated = self.advance(order_id, OrderStatus.READY)
        logger.info("order_ready id=%s table=%s", order_id, order.table_id)
        return updated
