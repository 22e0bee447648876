"""Cart line note editor modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from nexus_pos.models import CartItem
from nexus_pos.rendering import format_cart_line


class NoteModal(ModalScreen[str | None]):
    """Edit the free-text kitchen note of one cart line.

    Dismisses with the new text (empty string clears the note) or ``None``
    when cancelled.
    """

    CSS = """
    NoteModal {
        align: center middle;
        background: $background 60%;
    }

    #note-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #note-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #note-body {
        margin-bottom: 1;
        color: white;
    }

    #note-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    _MAX_LENGTH = 60

    def __init__(self, item: CartItem) -> None:
        super().__init__()
        self.item = item
        self.value = item.note or ""

    def compose(self) -> ComposeResult:
        with Container(id="note-dialog"):
            yield Static("Note", id="note-title")
            yield Static(id="note-body")
            yield Static("Type text, Enter save, Ctrl+U clear, Esc cancel", id="note-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key == "escape":
            self.dismiss(None)
        elif event.key == "enter":
            self.dismiss(self.value.strip())
        elif event.key == "ctrl+u":
            self.value = ""
            self._refresh_content()
        elif event.key == "backspace":
            self.value = self.value[:-1]
            self._refresh_content()
        elif event.is_printable and event.character:
            if len(self.value) < self._MAX_LENGTH:
                self.value += event.character
            self._refresh_content()
        # Every key belongs to the editor while it is open.
        event.stop()

    def _refresh_content(self) -> None:
        content = Text(style="white")
        content.append_text(format_cart_line(self.item))
        content.append("\n\n")
        content.append(f"➤ {self.value}|", style="bold white")
        self.query_one("#note-body", Static).update(content)
