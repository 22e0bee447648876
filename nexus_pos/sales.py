"""Append-only log of finalized sales."""

from __future__ import annotations

import logging

from nexus_pos.errors import NotFoundError
from nexus_pos.models import Sale

logger = logging.getLogger(__name__)


class SaleRecorder:
    """Newest sale first. Records are immutable and never removed."""

    def __init__(self) -> None:
        self._sales: list[Sale] = []

    def __len__(self) -> int:
        return len(self._sales)

    def record(self, sale: Sale) -> Sale:
        self._sales.insert(0, sale)
        logger.info(
            "sale_recorded id=%s table=%s order=%s total=%.2f method=%s",
            sale.sale_id,
            sale.table_id,
            sale.order_id,
            sale.total,
            sale.payment_method.value,
        )
        return sale

    def all(self) -> list[Sale]:
        return list(self._sales)

    def latest(self, count: int = 5) -> list[Sale]:
        return self._sales[: max(0, count)]

    def get(self, sale_id: str) -> Sale:
        for sale in self._sales:
            if sale.sale_id == sale_id:
                return sale
        raise NotFoundError("Sale", sale_id)

    def for_session(self, session_id: str) -> list[Sale]:
        return [sale for sale in self._sales if sale.session_id == session_id]
