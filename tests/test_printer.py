from __future__ import annotations

from datetime import datetime, timezone

import pytest

from nexus_pos import printer
from nexus_pos.models import CartItem, Category, Order, OrderStatus
from nexus_pos.printer import ticket_lines, ticket_sections, to_ticket_label


def _item(product_id: str, name: str, category: Category, quantity: int = 1, note: str | None = None) -> CartItem:
    return CartItem(
        product_id=product_id,
        name=name,
        price=1.0,
        category=category,
        icon="Utensils",
        quantity=quantity,
        note=note,
    )


def _order(*items: CartItem) -> Order:
    return Order(
        order_id="K1",
        table_id="t1",
        items=items,
        status=OrderStatus.IN_KITCHEN,
        subtotal=0.0,
        tax=0.0,
        total=0.0,
        created_at=datetime(2024, 5, 1, 13, 0, tzinfo=timezone.utc),
    )


def test_ticket_label():
    assert to_ticket_label(_item("1", "Pro Burger", Category.FOOD, 3)) == "3x Pro Burger"


def test_kitchen_items_print_before_bar():
    order = _order(
        _item("4", "Espresso", Category.DRINKS, 2, note="no sugar"),
        _item("1", "Pepperoni Pizza", Category.FOOD),
        _item("9", "Charger", Category.ELECTRONICS),
        _item("7", "Vanilla Ice Cream", Category.DESSERTS),
    )

    assert ticket_lines(order) == [
        "1x Pepperoni Pizza",
        "1x Vanilla Ice Cream",
        "-" * 16,
        "2x Espresso",
        "    no sugar",
        "-" * 16,
        "1x Charger",
    ]


def test_empty_sections_are_dropped():
    order = _order(_item("4", "Espresso", Category.DRINKS))

    assert len(ticket_sections(order)) == 1
    assert ticket_lines(order) == ["1x Espresso"]


def test_font_override_wins(tmp_path, monkeypatch):
    font = tmp_path / "ticket.ttf"
    font.write_bytes(b"")
    monkeypatch.setenv("NEXUS_POS_PRINTER_FONT_PATH", str(font))

    assert printer.resolve_printer_font_path() == str(font)


def test_missing_fonts_raise(tmp_path, monkeypatch):
    monkeypatch.delenv("NEXUS_POS_PRINTER_FONT_PATH", raising=False)
    monkeypatch.setattr(printer, "PRINTER_FONT_PATH", str(tmp_path / "none.ttf"))
    monkeypatch.setattr(printer, "_LINUX_FONT_FALLBACKS", ())

    with pytest.raises(RuntimeError, match="NEXUS_POS_PRINTER_FONT_PATH"):
        printer.resolve_printer_font_path()
