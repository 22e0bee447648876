"""Rich rendering helpers for tables, orders, cart lines and products."""

from __future__ import annotations

from typing import assert_never

from rich.text import Text

from nexus_pos.amounts import format_money
from nexus_pos.data import icon_glyph
from nexus_pos.models import CartItem, OrderStatus, Product, Table, TableStatus


def table_status_style(status: TableStatus) -> str:
    match status:
        case TableStatus.FREE:
            return "bold #0b1f0f on #5fbf72"
        case TableStatus.OCCUPIED:
            return "bold #ffffff on #b23a48"
        case TableStatus.BILL:
            return "bold #1f1400 on #e0a526"
        case TableStatus.CLEANING:
            return "bold #ffffff on #2f6db5"
        case _:
            assert_never(status)


def order_status_style(status: OrderStatus) -> str:
    match status:
        case OrderStatus.PENDING:
            return "bold #1f1400 on #e0a526"
        case OrderStatus.IN_KITCHEN:
            return "bold #ffffff on #b23a48"
        case OrderStatus.READY:
            return "bold #0b1f0f on #5fbf72"
        case OrderStatus.PAID:
            return "dim"
        case _:
            assert_never(status)


def format_table_label(table: Table, order_total: float | None = None) -> Text:
    """Render a table row: number, capacity, status badge and open order total."""
    text = Text()
    text.append(f"Table {table.number:<2} ")
    text.append(f"cap {table.capacity}  ", style="dim")
    text.append(f" {table.status.value} ", style=table_status_style(table.status))
    if order_total is not None:
        text.append(f"  {format_money(order_total)}")
    return text


def format_product_label(product: Product) -> Text:
    text = Text()
    text.append(f"{icon_glyph(product.icon)} {product.name}")
    text.append(f"  {format_money(product.price)}", style="bold")
    if product.out_of_stock:
        text.append("  out of stock", style="bold #b23a48")
    elif product.low_stock:
        text.append(f"  low: {product.stock}", style="#e0a526")
    return text


def format_cart_line(item: CartItem) -> Text:
    text = Text()
    text.append(f"{item.quantity:>2} x {item.name}")
    text.append(f"  {format_money(item.line_total)}", style="bold")
    if item.note:
        text.append(f"\n      [{item.note}]", style="white")
    return text


def format_order_status(status: OrderStatus) -> Text:
    return Text(f" {status.value} ", style=order_status_style(status))
