"""Add/edit product form modal screen."""

from __future__ import annotations

from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from nexus_pos.constant import AVAILABLE_ICONS, DEFAULT_ICON
from nexus_pos.data import icon_glyph
from nexus_pos.errors import PosError
from nexus_pos.models import Category, Product

ProductForm = dict[str, str]


class ProductFormModal(ModalScreen[Product | None]):
    """Collects name, category, price, stock and icon.

    Text fields are typed; category and icon cycle with left/right. The
    ``on_submit`` callback validates and stores the product; its errors are
    shown inline and keep the form open.
    """

    CSS = """
    ProductFormModal {
        align: center middle;
        background: $background 60%;
    }

    #product-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #product-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #product-fields {
        color: white;
        margin-bottom: 1;
    }

    #product-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #product-help {
        color: #dddddd;
    }
    """

    _FIELDS = ("name", "category", "price", "stock", "icon")
    _TEXT_FIELDS = {"name", "price", "stock"}
    _NUMERIC_FIELDS = {"price", "stock"}

    def __init__(self, on_submit: Callable[[ProductForm], Product], product: Product | None = None) -> None:
        super().__init__()
        self.on_submit = on_submit
        self.editing = product is not None
        self.values: ProductForm = {
            "name": product.name if product else "",
            "category": product.category.value if product else Category.FOOD.value,
            "price": f"{product.price:.2f}" if product else "",
            "stock": str(product.stock) if product else "",
            "icon": product.icon if product else DEFAULT_ICON,
        }
        self.cursor_index = 0
        self.error = ""

    @property
    def active_field(self) -> str:
        return self._FIELDS[self.cursor_index]

    def compose(self) -> ComposeResult:
        with Container(id="product-dialog"):
            yield Static("Edit product" if self.editing else "New product", id="product-title")
            yield Static(id="product-fields")
            yield Static(id="product-error")
            yield Static("Tab/↑/↓ field, ←/→ change choice, Enter save, Esc cancel", id="product-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        field = self.active_field
        if event.key == "escape":
            self.dismiss(None)
        elif event.key == "enter":
            self._confirm()
        elif event.key in {"tab", "down"}:
            self.cursor_index = (self.cursor_index + 1) % len(self._FIELDS)
        elif event.key in {"shift+tab", "up"}:
            self.cursor_index = (self.cursor_index - 1) % len(self._FIELDS)
        elif event.key in {"left", "right"} and field not in self._TEXT_FIELDS:
            self._cycle_choice(field, 1 if event.key == "right" else -1)
        elif event.key == "backspace" and field in self._TEXT_FIELDS:
            self.values[field] = self.values[field][:-1]
        elif event.is_printable and event.character and field in self._TEXT_FIELDS:
            if field not in self._NUMERIC_FIELDS or event.character.isdigit() or event.character == ".":
                self.values[field] += event.character
                self.error = ""
        self._refresh_content()
        event.stop()

    def _cycle_choice(self, field: str, delta: int) -> None:
        choices = [category.value for category in Category] if field == "category" else list(AVAILABLE_ICONS)
        current = self.values[field]
        idx = choices.index(current) if current in choices else 0
        self.values[field] = choices[(idx + delta) % len(choices)]

    def _confirm(self) -> None:
        missing = [name for name in ("name", "price", "stock") if not self.values[name].strip()]
        if missing:
            self.error = "Please fill in all required fields."
            self._refresh_content()
            return
        try:
            product = self.on_submit(dict(self.values))
        except PosError as exc:
            self.error = str(exc)
            self._refresh_content()
            return
        self.dismiss(product)

    def _refresh_content(self) -> None:
        content = Text(style="white")
        for idx, name in enumerate(self._FIELDS):
            if idx > 0:
                content.append("\n")
            is_active = idx == self.cursor_index
            pointer = "➤ " if is_active else "  "
            value = self.values[name]
            if name == "icon":
                value = f"{icon_glyph(value)} {value}"
            if name in self._TEXT_FIELDS:
                shown = f"{value}|" if is_active else value
            else:
                shown = f"◀ {value} ▶" if is_active else value
            content.append(f"{pointer}{name.capitalize():<9} {shown}", style="bold white" if is_active else "white")
        self.query_one("#product-fields", Static).update(content)
        self.query_one("#product-error", Static).update(self.error or "")
