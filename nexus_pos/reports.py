"""Read-only sales reporting and dashboard figures."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Iterable

from nexus_pos.config import LOW_STOCK_THRESHOLD
from nexus_pos.models import Order, PaymentMethod, Sale
from nexus_pos.state import AppState


@dataclass(frozen=True)
class HourlySales:
    label: str
    total: float


@dataclass(frozen=True)
class DashboardSummary:
    sales_total: float
    sale_count: int
    kitchen_orders: list[Order]
    low_stock_count: int
    recent_sales: list[Sale]


def sales_total(sales: Iterable[Sale]) -> float:
    return sum((sale.total for sale in sales), 0.0)


def sales_by_hour(
    sales: Iterable[Sale],
    start_hour: int = 9,
    hours: int = 12,
    tz: tzinfo | None = None,
) -> list[HourlySales]:
    """Bucket sale totals by hour of day, ``start_hour`` onwards.

    Hours are read in ``tz`` (local time when ``None``). Sales outside the
    window are left out.
    """
    buckets = [0.0] * hours
    for sale in sales:
        hour = sale.created_at.astimezone(tz).hour
        index = hour - start_hour
        if 0 <= index < hours:
            buckets[index] += sale.total
    return [HourlySales(label=f"{start_hour + idx}:00", total=total) for idx, total in enumerate(buckets)]


def payment_breakdown(sales: Iterable[Sale]) -> dict[PaymentMethod, float]:
    totals = {method: 0.0 for method in PaymentMethod}
    for sale in sales:
        totals[sale.payment_method] += sale.total
    return totals


def dashboard_summary(state: AppState, recent: int = 5) -> DashboardSummary:
    sales = state.sales.all()
    return DashboardSummary(
        sales_total=sales_total(sales),
        sale_count=len(sales),
        kitchen_orders=state.ledger.in_kitchen(),
        low_stock_count=len(state.catalog.low_stock(LOW_STOCK_THRESHOLD)),
        recent_sales=state.sales.latest(recent),
    )
