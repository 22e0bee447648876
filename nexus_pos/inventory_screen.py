"""Inventory management screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Header, Static

from nexus_pos.amounts import format_money
from nexus_pos.data import icon_glyph
from nexus_pos.models import Product
from nexus_pos.product_form_modal import ProductForm, ProductFormModal
from nexus_pos.state import AppState


class InventoryScreen(Screen[None]):
    """Browse the catalog, adjust stock, add, edit and delete products."""

    BINDINGS = [
        ("escape", "close", "Back"),
        ("q", "close", "Back"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("up", "move_cursor(-1)", "Previous"),
        ("plus", "adjust_stock(1)", "Stock +1"),
        ("minus", "adjust_stock(-1)", "Stock -1"),
        ("a", "add_product", "Add"),
        ("e", "edit_product", "Edit"),
        ("x", "delete_product", "Delete"),
    ]

    CSS = """
    #inventory-pane {
        border: round $primary;
        padding: 1;
        height: 1fr;
    }

    #inventory-list {
        height: 1fr;
    }

    #inventory-status {
        color: $text-muted;
        margin-top: 1;
    }
    """

    def __init__(self, state: AppState) -> None:
        super().__init__()
        self.state = state
        self.cursor_index = 0
        self.pending_delete: str | None = None
        self.status = ""

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="inventory-pane"):
            yield Static("Inventory", classes="pane-title")
            yield Static(id="inventory-list")
            yield Static(id="inventory-status")

    def on_mount(self) -> None:
        self._refresh_content()

    def action_close(self) -> None:
        self.dismiss()

    def action_move_cursor(self, delta: int) -> None:
        products = self.state.catalog.all()
        if not products:
            return
        self.cursor_index = (self.cursor_index + delta) % len(products)
        self.pending_delete = None
        self._refresh_content()

    def action_adjust_stock(self, delta: int) -> None:
        product = self._selected_product()
        if product is None:
            return
        updated = self.state.catalog.set_stock(product.product_id, product.stock + delta)
        self.status = f"{updated.name}: stock {updated.stock}"
        self.state.notify()
        self._refresh_content()

    def action_add_product(self) -> None:
        self.app.push_screen(ProductFormModal(self._create_product), self._after_form)

    def action_edit_product(self) -> None:
        product = self._selected_product()
        if product is None:
            return

        def save(values: ProductForm) -> Product:
            return self.state.catalog.update_product(product.product_id, **values)

        self.app.push_screen(ProductFormModal(save, product), self._after_form)

    def action_delete_product(self) -> None:
        product = self._selected_product()
        if product is None:
            return
        if self.pending_delete != product.product_id:
            self.pending_delete = product.product_id
            self.status = f"Press x again to delete {product.name}. This cannot be undone."
            self._refresh_content()
            return
        self.state.catalog.delete_product(product.product_id)
        self.pending_delete = None
        self.status = f"Deleted {product.name}"
        self.state.notify()
        self._refresh_content()

    def _create_product(self, values: ProductForm) -> Product:
        product = self.state.catalog.add_product(
            name=values["name"],
            category=values["category"],
            price=values["price"],
            stock=values["stock"],
            icon=values["icon"],
        )
        self.cursor_index = 0
        return product

    def _after_form(self, product: Product | None) -> None:
        if product is None:
            return
        self.status = f"Saved {product.name}"
        self.state.notify()
        self._refresh_content()

    def _selected_product(self) -> Product | None:
        products = self.state.catalog.all()
        if not products:
            return None
        self.cursor_index = min(self.cursor_index, len(products) - 1)
        return products[self.cursor_index]

    def _refresh_content(self) -> None:
        products = self.state.catalog.all()
        lines = Text()
        if not products:
            lines.append("(no products)")
        for idx, product in enumerate(products):
            if idx > 0:
                lines.append("\n")
            pointer = "➤ " if idx == self.cursor_index else "  "
            lines.append(f"{pointer}{icon_glyph(product.icon)} {product.name:<24}")
            lines.append(f"{product.category.value:<12}", style="dim")
            lines.append(f"{format_money(product.price):>10}  ")
            if product.out_of_stock:
                lines.append("OUT OF STOCK", style="bold #b23a48")
            elif product.low_stock:
                lines.append(f"{product.stock} (low)", style="#e0a526")
            else:
                lines.append(f"{product.stock}", style="#5fbf72")
        self.query_one("#inventory-list", Static).update(lines)
        help_line = "J/K move, +/- stock, A add, E edit, X delete, Esc back"
        self.query_one("#inventory-status", Static).update(f"{help_line}\n{self.status}" if self.status else help_line)
