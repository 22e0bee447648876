"""Dashboard, kitchen monitor and sales report screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Header, Static

from nexus_pos import reports, workflow
from nexus_pos.amounts import format_money
from nexus_pos.errors import PosError
from nexus_pos.models import PaymentMethod, TableStatus
from nexus_pos.rendering import format_order_status
from nexus_pos.state import AppState

_BAR_WIDTH = 30


class DashboardScreen(Screen[None]):
    """Today's figures and the kitchen queue; the report pane is shown when allowed."""

    BINDINGS = [
        ("escape", "close", "Back"),
        ("q", "close", "Back"),
        ("j", "move_cursor(1)", "Next order"),
        ("k", "move_cursor(-1)", "Previous order"),
        ("r", "mark_ready", "Mark ready"),
    ]

    CSS = """
    #dashboard-layout {
        height: 1fr;
    }

    #kitchen-pane {
        width: 1fr;
        border: round $primary;
        padding: 1;
    }

    #report-pane {
        width: 1fr;
        border: round $secondary;
        padding: 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    def __init__(self, state: AppState, show_reports: bool) -> None:
        super().__init__()
        self.state = state
        self.show_reports = show_reports
        self.cursor_index = 0
        self.status = ""
        self._unsubscribe = state.subscribe(self._refresh_content)

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="dashboard-layout"):
            with Vertical(id="kitchen-pane"):
                yield Static("Dashboard", classes="pane-title")
                yield Static(id="summary")
                yield Static(id="kitchen-list")
            if self.show_reports:
                with Vertical(id="report-pane"):
                    yield Static("Reports", classes="pane-title")
                    yield Static(id="report-body")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_unmount(self) -> None:
        self._unsubscribe()

    def action_close(self) -> None:
        self.dismiss()

    def action_move_cursor(self, delta: int) -> None:
        orders = self.state.ledger.in_kitchen()
        if not orders:
            return
        self.cursor_index = (self.cursor_index + delta) % len(orders)
        self._refresh_content()

    def action_mark_ready(self) -> None:
        orders = self.state.ledger.in_kitchen()
        if not orders:
            return
        order = orders[min(self.cursor_index, len(orders) - 1)]
        try:
            workflow.mark_order_ready(self.state, order.order_id)
        except PosError as exc:
            self.status = str(exc)
        else:
            self.status = f"Order {order.order_id} ready"
        self._refresh_content()

    def _refresh_content(self) -> None:
        if not self.is_mounted:
            return
        summary = reports.dashboard_summary(self.state)

        head = Text()
        head.append("Sales today   ", style="dim")
        head.append(f"{format_money(summary.sales_total)} ({summary.sale_count})\n", style="bold")
        head.append("In kitchen    ", style="dim")
        head.append(f"{len(summary.kitchen_orders)}\n", style="bold")
        head.append("Low stock     ", style="dim")
        head.append(f"{summary.low_stock_count}\n", style="bold")
        session = self.state.cash.current
        head.append("Drawer        ", style="dim")
        if session is None:
            head.append("closed\n", style="bold")
        else:
            settled = len(self.state.sales.for_session(session.session_id))
            head.append(f"{format_money(session.expected_balance)} expected, {settled} sales\n", style="bold")
        free = len(self.state.tables.by_status(TableStatus.FREE))
        head.append("Free tables   ", style="dim")
        head.append(f"{free}/{len(self.state.tables.all())}\n", style="bold")
        self.query_one("#summary", Static).update(head)

        kitchen = Text()
        kitchen.append("Kitchen monitor\n", style="bold")
        if not summary.kitchen_orders:
            kitchen.append("No orders waiting in the kitchen", style="dim")
        self.cursor_index = min(self.cursor_index, max(0, len(summary.kitchen_orders) - 1))
        for idx, order in enumerate(summary.kitchen_orders):
            table = self.state.tables.get(order.table_id)
            pointer = "➤ " if idx == self.cursor_index else "  "
            kitchen.append(f"{pointer}Table {table.number} #{order.order_id} ")
            kitchen.append_text(format_order_status(order.status))
            kitchen.append(f" {order.created_at.astimezone():%H:%M}\n", style="dim")
            for item in order.items:
                kitchen.append(f"      {item.quantity} x {item.name}\n")
        kitchen.append("\nJ/K move, R mark ready, Esc back", style="dim")
        if self.status:
            kitchen.append(f"\n{self.status}")
        self.query_one("#kitchen-list", Static).update(kitchen)

        if self.show_reports:
            self.query_one("#report-body", Static).update(self._report_text(summary))

    def _report_text(self, summary: reports.DashboardSummary) -> Text:
        sales = self.state.sales.all()
        body = Text()
        body.append("Sales by hour\n", style="bold")
        hourly = reports.sales_by_hour(sales)
        peak = max((bucket.total for bucket in hourly), default=0.0)
        for bucket in hourly:
            width = int(round(_BAR_WIDTH * bucket.total / peak)) if peak > 0 else 0
            body.append(f"{bucket.label:>6} ")
            body.append("█" * width, style="#6366f1")
            body.append(f" {format_money(bucket.total)}\n" if bucket.total else "\n")

        body.append("\nPayment methods\n", style="bold")
        breakdown = reports.payment_breakdown(sales)
        for method in PaymentMethod:
            body.append(f"  {method.value:<6} {format_money(breakdown[method])}\n")

        body.append("\nRecent sales\n", style="bold")
        if not summary.recent_sales:
            body.append("  No sales recorded", style="dim")
        for sale in summary.recent_sales:
            origin = "direct" if sale.is_direct else "kitchen"
            body.append(
                f"  #{sale.sale_id} Table {sale.table_number} {sale.payment_method.value:<5} "
                f"{format_money(sale.total)} ({origin})\n"
            )
        return body
