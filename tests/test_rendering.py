from __future__ import annotations

from dataclasses import replace

import pytest

from nexus_pos.data import seed_products, seed_tables
from nexus_pos.models import CartItem, OrderStatus, TableStatus
from nexus_pos.rendering import (
    format_cart_line,
    format_order_status,
    format_product_label,
    format_table_label,
    order_status_style,
    table_status_style,
)


@pytest.mark.parametrize("status", list(TableStatus))
def test_every_table_status_has_a_style(status):
    assert table_status_style(status)


@pytest.mark.parametrize("status", list(OrderStatus))
def test_every_order_status_has_a_style(status):
    assert order_status_style(status)


def test_table_label():
    table = seed_tables()[2]

    assert format_table_label(table).plain == "Table 3  cap 4   Free "
    assert format_table_label(table, 23.2).plain.endswith("$23.20")


def test_product_label_flags_stock():
    pizza = seed_products()[0]

    assert "Pepperoni Pizza" in format_product_label(pizza).plain
    assert "$12.99" in format_product_label(pizza).plain
    assert "out of stock" not in format_product_label(pizza).plain


def test_cart_line_shows_note():
    item = CartItem.from_product(seed_products()[1], quantity=2)

    assert format_cart_line(item).plain == " 2 x Pro Burger  $17.00"
    noted = replace(item, note="no onions")
    assert "[no onions]" in format_cart_line(noted).plain


def test_order_status_badge():
    assert format_order_status(OrderStatus.IN_KITCHEN).plain == " In Kitchen "
