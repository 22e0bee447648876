"""Currency amount entry modal screen."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from nexus_pos.amounts import parse_amount
from nexus_pos.errors import ValidationError


class AmountModal(ModalScreen[float | None]):
    """Prompt for a non-negative amount such as an opening balance or a drawer count."""

    CSS = """
    AmountModal {
        align: center middle;
        background: $background 60%;
    }

    #amount-dialog {
        width: 56;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #amount-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #amount-prompt {
        color: white;
        margin-bottom: 1;
    }

    #amount-value {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #amount-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #amount-help {
        color: #dddddd;
    }
    """

    _MAX_LENGTH = 12

    def __init__(self, title: str, prompt: str) -> None:
        super().__init__()
        self.title_text = title
        self.prompt_text = prompt
        self.value = ""
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="amount-dialog"):
            yield Static(self.title_text, id="amount-title")
            yield Static(self.prompt_text, id="amount-prompt")
            yield Static(id="amount-value")
            yield Static(id="amount-error")
            yield Static("Digits and '.' only. Enter confirm. Backspace delete. Esc cancel.", id="amount-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key == "backspace":
            if self.value:
                self.value = self.value[:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character and (event.character.isdigit() or event.character == "."):
            if event.character == "." and "." in self.value:
                event.stop()
                return
            if len(self.value) < self._MAX_LENGTH:
                self.value += event.character
            self.error = ""
            self._refresh_content()
            event.stop()

    def _confirm(self) -> None:
        try:
            amount = parse_amount(self.value)
        except ValidationError as exc:
            self.error = str(exc).capitalize()
            self._refresh_content()
            return
        self.dismiss(amount)

    def _refresh_content(self) -> None:
        value_widget = self.query_one("#amount-value", Static)
        error_widget = self.query_one("#amount-error", Static)
        value_widget.update(f"$ {self.value}" if self.value else "$ ")
        error_widget.update(self.error or "")
