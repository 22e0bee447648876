"""Point-of-sale terminal: tables, menu search and the open order side by side."""

from __future__ import annotations

import logging

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.widgets import Header, Static

from nexus_pos import auth, workflow
from nexus_pos.amount_modal import AmountModal
from nexus_pos.amounts import format_money
from nexus_pos.config import INVOICE_DIR
from nexus_pos.dashboard_screen import DashboardScreen
from nexus_pos.errors import PosError, SessionNotOpenError
from nexus_pos.inventory_screen import InventoryScreen
from nexus_pos.invoice import export_invoice_pdf
from nexus_pos.login_modal import LoginModal
from nexus_pos.models import CartItem, Category, PaymentMethod, Product, Role, Sale, Table, TableStatus, User
from nexus_pos.note_modal import NoteModal
from nexus_pos.printer import check_printer_dependencies, print_kitchen_ticket
from nexus_pos.rendering import format_cart_line, format_order_status, format_product_label, format_table_label
from nexus_pos.state import AppState

logger = logging.getLogger(__name__)

_CATEGORY_CYCLE: list[Category | None] = [None, *Category]
_EDIT_KEYS = {"+", "=", "-", "/"}


class NexusPosApp(App):
    """A Textual app for table service: order entry, kitchen dispatch and checkout."""

    TITLE = "Nexus POS"
    SUB_TITLE = "Restaurant"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #tables-pane {
        width: 2fr;
        border: round $primary;
        padding: 1;
    }

    #search-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #order-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 4;
    }

    #results, #tables-list, #cart-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #totals {
        height: auto;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    search_query = reactive("")
    selected_index = reactive(0)
    table_index = reactive(0)
    line_index = reactive(None)

    BINDINGS = [
        ("tab", "cycle_results(1)", "Next result"),
        ("up", "cycle_results(-1)", "Previous result"),
        ("down", "cycle_results(1)", "Next result"),
        ("enter", "register_selected", "Add item"),
        ("backspace", "backspace_query", "Delete query char"),
        Binding("ctrl+s", "send_to_kitchen", "Send to kitchen", priority=True),
        Binding("ctrl+y", "checkout", "Charge table", priority=True),
        Binding("ctrl+l", "logout", "Log out", priority=True),
        ("ctrl+c", "cancel_active_mode", "Exit search"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, state: AppState | None = None) -> None:
        super().__init__()
        self.state = state if state is not None else AppState.bootstrap()
        self.category: Category | None = None
        self.payment_method = PaymentMethod.CASH
        self.system_status = ""
        self.printer_ready = False
        self.last_sale: Sale | None = None
        self._unsubscribe = self.state.subscribe(self._refresh_all)

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="tables-pane"):
                yield Static("Tables", classes="pane-title")
                yield Static(id="tables-list")
            with Vertical(id="search-pane"):
                yield Static(id="search-bar")
                yield Static(id="results")
            with Vertical(id="order-pane"):
                yield Static("Order", id="order-title", classes="pane-title")
                yield Static("(empty)", id="cart-list")
                yield Static(id="totals")

    def on_mount(self) -> None:
        self.printer_ready, msg = check_printer_dependencies()
        self.system_status = msg
        logger.debug("on_mount printer_status=%r", msg)
        self._refresh_all()
        if self.state.current_user is None:
            self._prompt_login()

    def on_unmount(self) -> None:
        self._unsubscribe()

    def on_key(self, event: Key) -> None:
        # While another screen is active, let it own keyboard handling.
        if not self._on_main_screen():
            return

        if not event.is_printable or event.character is None or len(event.character) != 1:
            return
        if not (event.character.isalnum() or event.character in _EDIT_KEYS):
            return

        if self.input_state == "active":
            self.search_query += event.character
            self.selected_index = 0
            self._refresh_search()
            event.stop()
            return

        key = event.character.lower()
        handlers = {
            "j": lambda: self._move_table_selection(1),
            "k": lambda: self._move_table_selection(-1),
            "l": lambda: self._move_line_selection(1),
            "h": lambda: self._move_line_selection(-1),
            "+": lambda: self._adjust_selected_line(1),
            "=": lambda: self._adjust_selected_line(1),
            "-": lambda: self._adjust_selected_line(-1),
            "d": self._delete_selected_line,
            "e": self._edit_selected_note,
            "c": self._cycle_category,
            "m": self._toggle_payment_method,
            "b": self._request_bill,
            "o": self._open_or_close_drawer,
            "i": self._export_last_invoice,
            "v": self._open_inventory,
            "g": self._open_dashboard,
        }
        if key in {"s", "/"}:
            if self._guard("tables"):
                self.input_state = "active"
                self.search_query = ""
                self.selected_index = 0
                self._refresh_search()
            event.stop()
            return

        handler = handlers.get(key)
        if handler is None:
            return
        handler()
        event.stop()

    def action_cancel_active_mode(self) -> None:
        if self.input_state == "normal":
            return
        self.input_state = "normal"
        self.search_query = ""
        self.selected_index = 0
        self._refresh_search()

    def action_cycle_results(self, delta: int) -> None:
        if self.input_state != "active":
            return
        results = self._filtered_results()
        if not results:
            self.selected_index = 0
            self._refresh_results(results)
            return
        self.selected_index = (self.selected_index + delta) % len(results)
        self._refresh_results(results)

    def action_register_selected(self) -> None:
        if self.input_state != "active":
            return
        results = self._filtered_results()
        table = self._selected_table()
        if not results or table is None:
            return
        product = results[self.selected_index]
        self._run(lambda: workflow.add_item(self.state, table.table_id, product.product_id))
        cart = workflow.cart_for(self.state, table.table_id)
        self.line_index = next(
            (idx for idx, item in enumerate(cart) if item.product_id == product.product_id), None
        )
        self._refresh_cart()

    def action_backspace_query(self) -> None:
        if self.input_state != "active" or not self.search_query:
            return
        self.search_query = self.search_query[:-1]
        self.selected_index = 0
        self._refresh_search()

    def action_send_to_kitchen(self) -> None:
        if not self._on_main_screen():
            return
        table = self._selected_table()
        if table is None or not self._guard("tables"):
            return
        order = self._run(lambda: workflow.dispatch_to_kitchen(self.state, table.table_id))
        if order is None:
            return
        self.system_status = f"Table {table.number}: order {order.order_id} sent to kitchen"
        if self.printer_ready:
            try:
                print_kitchen_ticket(order, table.number)
            except Exception as exc:
                self.system_status = f"Sent {order.order_id} but ticket print failed: {exc}"
                logger.warning("kitchen_print_failed order=%s error=%r", order.order_id, exc)
        self._refresh_all()

    def action_checkout(self) -> None:
        if not self._on_main_screen():
            return
        table = self._selected_table()
        if table is None or not self._guard("tables"):
            return
        try:
            sale = workflow.checkout(self.state, table.table_id, self.payment_method)
        except SessionNotOpenError as exc:
            self.system_status = "Open the cash drawer (O) before charging a table"
            logger.warning("checkout_rejected table=%s error=%s", table.table_id, exc)
            self._refresh_search()
            return
        except PosError as exc:
            self.system_status = str(exc)
            logger.warning("checkout_rejected table=%s error=%s", table.table_id, exc)
            self._refresh_search()
            return
        self.last_sale = sale
        self.line_index = None
        self.system_status = (
            f"Paid #{sale.sale_id} {format_money(sale.total)} ({sale.payment_method.value}). I = invoice"
        )
        self._refresh_all()

    def action_logout(self) -> None:
        if not self._on_main_screen() or self.state.current_user is None:
            return
        auth.logout(self.state)
        self._prompt_login()

    def _on_main_screen(self) -> bool:
        return self.screen is self.screen_stack[0]

    def _run(self, operation):
        """Run a workflow call, surfacing rejections in the status line."""
        try:
            return operation()
        except PosError as exc:
            self.system_status = str(exc)
            logger.warning("operation_rejected error=%s", exc)
            self._refresh_search()
            return None

    def _guard(self, destination: str) -> bool:
        user = self.state.current_user
        if auth.can_access(user, destination):
            return True
        role = user.role.value if user else "guest"
        self.system_status = f"{destination.capitalize()} is not available for {role}"
        self._refresh_search()
        return False

    def _prompt_login(self) -> None:
        self.push_screen(
            LoginModal(lambda username, password: auth.login(self.state, username, password)),
            self._after_login,
        )

    def _after_login(self, user: User | None) -> None:
        if user is None:
            return
        self.system_status = f"Welcome, {user.name}"
        self._refresh_all()
        if user.role is Role.COOK:
            self._open_dashboard()

    def _open_or_close_drawer(self) -> None:
        if not self._guard("cash"):
            return
        if self.state.cash.is_open:
            session = self.state.cash.current
            prompt = f"Expected in drawer: {format_money(session.expected_balance)}. Enter the counted cash."
            self.push_screen(AmountModal("Close Cash Drawer", prompt), self._after_close_amount)
        else:
            self.push_screen(
                AmountModal("Open Cash Drawer", "Opening balance (cash float)"), self._after_open_amount
            )

    def _after_open_amount(self, amount: float | None) -> None:
        if amount is None:
            return
        session = self._run(lambda: self.state.cash.open(amount, self.state.current_user))
        if session is None:
            return
        self.system_status = f"Drawer open with {format_money(session.opening_balance)}"
        self.state.notify()

    def _after_close_amount(self, amount: float | None) -> None:
        if amount is None:
            return
        summary = self._run(lambda: self.state.cash.close(amount))
        if summary is None:
            return
        self.system_status = (
            f"Drawer closed. Expected {format_money(summary.expected_balance)}, "
            f"counted {format_money(summary.counted_amount)}, variance {format_money(summary.variance)}"
        )
        self.state.notify()

    def _export_last_invoice(self) -> None:
        if self.last_sale is None:
            self.system_status = "No sale to invoice yet"
            self._refresh_search()
            return
        try:
            path = export_invoice_pdf(self.last_sale, INVOICE_DIR)
        except OSError as exc:
            self.system_status = f"Invoice export failed: {exc}"
            logger.warning("invoice_export_failed sale=%s error=%r", self.last_sale.sale_id, exc)
        else:
            self.system_status = f"Invoice saved: {path}"
        self._refresh_search()

    def _open_inventory(self) -> None:
        if self._guard("inventory"):
            self.push_screen(InventoryScreen(self.state), lambda _: self._refresh_all())

    def _open_dashboard(self) -> None:
        if self._guard("dashboard"):
            show_reports = auth.can_access(self.state.current_user, "reports")
            self.push_screen(DashboardScreen(self.state, show_reports), lambda _: self._refresh_all())

    def _cycle_category(self) -> None:
        idx = _CATEGORY_CYCLE.index(self.category)
        self.category = _CATEGORY_CYCLE[(idx + 1) % len(_CATEGORY_CYCLE)]
        self.selected_index = 0
        self._refresh_search()

    def _toggle_payment_method(self) -> None:
        self.payment_method = PaymentMethod.CARD if self.payment_method is PaymentMethod.CASH else PaymentMethod.CASH
        self._refresh_cart()

    def _request_bill(self) -> None:
        table = self._selected_table()
        if table is None or not self._guard("tables"):
            return
        if table.status is not TableStatus.OCCUPIED:
            self.system_status = f"Table {table.number} has no order to bill"
            self._refresh_search()
            return
        self.state.tables.set_status(table.table_id, TableStatus.BILL)
        self.state.notify()

    def _filtered_results(self) -> list[Product]:
        return self.state.catalog.filter(self.category, self.search_query)

    def _selected_table(self) -> Table | None:
        tables = self.state.tables.all()
        if not tables:
            return None
        self.table_index = min(self.table_index, len(tables) - 1)
        return tables[self.table_index]

    def _selected_cart(self) -> tuple[CartItem, ...]:
        table = self._selected_table()
        if table is None:
            return ()
        return workflow.open_table(self.state, table.table_id)

    def _selected_line(self) -> CartItem | None:
        cart = self._selected_cart()
        if self.line_index is None or not (0 <= self.line_index < len(cart)):
            return None
        return cart[self.line_index]

    def _move_table_selection(self, delta: int) -> None:
        tables = self.state.tables.all()
        if not tables:
            return
        self.table_index = (self.table_index + delta) % len(tables)
        self.line_index = None
        self._refresh_all()

    def _move_line_selection(self, delta: int) -> None:
        cart = self._selected_cart()
        if not cart:
            return
        if self.line_index is None:
            self.line_index = 0 if delta > 0 else len(cart) - 1
        else:
            self.line_index = (self.line_index + delta) % len(cart)
        self._refresh_cart()

    def _adjust_selected_line(self, delta: int) -> None:
        table = self._selected_table()
        line = self._selected_line()
        if table is None or line is None or not self._guard("tables"):
            return
        self._run(lambda: workflow.adjust_item(self.state, table.table_id, line.product_id, delta))

    def _delete_selected_line(self) -> None:
        table = self._selected_table()
        line = self._selected_line()
        if table is None or line is None or not self._guard("tables"):
            return
        self._run(lambda: workflow.remove_item(self.state, table.table_id, line.product_id))

    def _edit_selected_note(self) -> None:
        table = self._selected_table()
        line = self._selected_line()
        if table is None or line is None or not self._guard("tables"):
            return

        def apply(note: str | None) -> None:
            if note is None:
                return
            self._run(lambda: workflow.set_item_note(self.state, table.table_id, line.product_id, note))

        self.push_screen(NoteModal(line), apply)

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            start = max(0, selected - rows // 2)
            start = min(start, total - rows)

        return (start, start + rows)

    def _refresh_all(self) -> None:
        self._refresh_header()
        self._refresh_tables()
        self._refresh_cart()
        self._refresh_search()

    def _refresh_header(self) -> None:
        user = self.state.current_user
        drawer = "DRAWER OPEN" if self.state.cash.is_open else "DRAWER CLOSED"
        self.sub_title = f"{user.name} ({user.role.value}) | {drawer}" if user else drawer

    def _refresh_tables(self) -> None:
        try:
            tables_widget = self.query_one("#tables-list", Static)
        except NoMatches:
            return
        tables = self.state.tables.all()
        lines = Text()
        for idx, table in enumerate(tables):
            if idx > 0:
                lines.append("\n")
            order = self.state.ledger.active_for_table(table.table_id)
            pointer = "➤ " if idx == self.table_index else "  "
            lines.append(pointer)
            lines.append_text(format_table_label(table, order.total if order else None))
        tables_widget.update(lines)

    def _refresh_cart(self) -> None:
        try:
            cart_widget = self.query_one("#cart-list", Static)
            totals_widget = self.query_one("#totals", Static)
            title_widget = self.query_one("#order-title", Static)
        except NoMatches:
            return
        table = self._selected_table()
        if table is None:
            return
        cart = self._selected_cart()
        order = self.state.ledger.active_for_table(table.table_id)

        title = Text(f"Table {table.number} order ", style="bold")
        if order is not None:
            title.append_text(format_order_status(order.status))
            title.append(f" #{order.order_id}", style="dim")
        title_widget.update(title)

        if not cart:
            self.line_index = None
            cart_widget.update("(empty)")
        else:
            if self.line_index is not None and self.line_index >= len(cart):
                self.line_index = len(cart) - 1
            start, end = self._window_bounds(len(cart), self._visible_rows(cart_widget), self.line_index)
            lines = Text()
            if start > 0:
                lines.append("⋮\n", style="dim")
            for idx in range(start, end):
                if idx > start:
                    lines.append("\n")
                pointer = "➤ " if idx == self.line_index else "  "
                lines.append(pointer)
                lines.append_text(format_cart_line(cart[idx]))
            if end < len(cart):
                lines.append("\n⋮", style="dim")
            cart_widget.update(lines)

        totals = workflow.cart_totals(self.state, table.table_id)
        summary = Text()
        summary.append(f"Subtotal {format_money(totals.subtotal):>12}\n")
        summary.append(f"Tax 16%  {format_money(totals.tax):>12}\n")
        summary.append(f"Total    {format_money(totals.total):>12}\n", style="bold")
        summary.append(f"Payment  {self.payment_method.value:>12}", style="dim")
        totals_widget.update(summary)

    def _refresh_search(self) -> None:
        self._refresh_search_bar()
        self._refresh_results(self._filtered_results())

    def _refresh_search_bar(self) -> None:
        try:
            bar = self.query_one("#search-bar", Static)
        except NoMatches:
            return
        category = self.category.value if self.category else "All"
        if self.input_state == "normal":
            status = self.system_status or "Ready"
            bar.update(
                f"[{category}] S search, C category, J/K table, H/L line, Ctrl+S kitchen, Ctrl+Y charge\n{status}"
            )
            return

        text = Text()
        text.append(f" {category} ", style="bold #ffffff on #2f6db5")
        text.append(f": {self.search_query}|")
        bar.update(text)

    def _refresh_results(self, results: list[Product]) -> None:
        try:
            results_widget = self.query_one("#results", Static)
        except NoMatches:
            return
        if not results:
            results_widget.update("No results")
            return

        if self.selected_index >= len(results):
            self.selected_index = 0
        active = self.input_state == "active"

        visible_rows = self._visible_rows(results_widget)
        start, end = self._window_bounds(len(results), visible_rows, self.selected_index if active else None)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")
        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            pointer = "➤ " if active and idx == self.selected_index else "  "
            lines.append(pointer)
            lines.append_text(format_product_label(results[idx]))
        if end < len(results):
            lines.append("\n⋮", style="dim")
        results_widget.update(lines)
