"""Application state aggregate shared by the workflow and the UI."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from nexus_pos import persistence
from nexus_pos.cart import Cart
from nexus_pos.cash import CashSessionManager
from nexus_pos.catalog import CatalogStore
from nexus_pos.config import DECREMENT_STOCK_ON_SALE, SESSION_IDENTITY_KEY
from nexus_pos.data import seed_products, seed_tables
from nexus_pos.ledger import OrderLedger
from nexus_pos.models import User
from nexus_pos.sales import SaleRecorder
from nexus_pos.tables import TableRegistry

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


@dataclass
class AppState:
    """Owns every store. Passed by reference to the workflow functions."""

    catalog: CatalogStore
    tables: TableRegistry
    ledger: OrderLedger
    cash: CashSessionManager
    sales: SaleRecorder
    current_user: User | None = None
    decrement_stock_on_sale: bool = DECREMENT_STOCK_ON_SALE
    carts: dict[str, Cart] = field(default_factory=dict)
    _listeners: list[Listener] = field(default_factory=list, repr=False)

    @classmethod
    def fresh(cls, decrement_stock_on_sale: bool = DECREMENT_STOCK_ON_SALE) -> AppState:
        """Seeded stores with nothing restored from disk."""
        tables = TableRegistry(seed_tables())
        return cls(
            catalog=CatalogStore(seed_products()),
            tables=tables,
            ledger=OrderLedger(tables),
            cash=CashSessionManager(),
            sales=SaleRecorder(),
            decrement_stock_on_sale=decrement_stock_on_sale,
        )

    @classmethod
    def bootstrap(cls, decrement_stock_on_sale: bool = DECREMENT_STOCK_ON_SALE) -> AppState:
        """Seeded stores plus the logged-in user and open drawer from disk."""
        persistence.bootstrap_schema()
        state = cls.fresh(decrement_stock_on_sale=decrement_stock_on_sale)
        state.cash = CashSessionManager.load()
        state.current_user = persistence.load_user(SESSION_IDENTITY_KEY)
        logger.info(
            "state_bootstrapped user=%s cash_open=%s",
            state.current_user.username if state.current_user else None,
            state.cash.is_open,
        )
        return state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change callback; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self) -> None:
        for listener in list(self._listeners):
            listener()
