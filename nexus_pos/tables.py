"""Fixed floor plan and table occupancy."""

from __future__ import annotations

import logging

from nexus_pos.errors import NotFoundError
from nexus_pos.models import Table, TableStatus

logger = logging.getLogger(__name__)


class TableRegistry:
    """Tables are created once from the seed list and never deleted."""

    def __init__(self, tables: list[Table]) -> None:
        self._tables: list[Table] = list(tables)

    def all(self) -> list[Table]:
        return list(self._tables)

    def get(self, table_id: str) -> Table:
        for table in self._tables:
            if table.table_id == table_id:
                return table
        raise NotFoundError("Table", table_id)

    def by_status(self, status: TableStatus) -> list[Table]:
        return [table for table in self._tables if table.status == status]

    def occupy(self, table_id: str, order_id: str) -> Table:
        table = self.get(table_id)
        table.status = TableStatus.OCCUPIED
        table.current_order_id = order_id
        logger.debug("table_occupied table=%s order=%s", table_id, order_id)
        return table

    def release(self, table_id: str) -> Table:
        table = self.get(table_id)
        table.status = TableStatus.FREE
        table.current_order_id = None
        logger.debug("table_released table=%s", table_id)
        return table

    def set_status(self, table_id: str, status: TableStatus) -> Table:
        """Mark a table for billing or cleaning; the order back-reference is kept."""
        table = self.get(table_id)
        table.status = status
        if status is TableStatus.FREE:
            table.current_order_id = None
        return table
