"""Staff login modal screen."""

from __future__ import annotations

from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from nexus_pos.errors import AuthenticationError
from nexus_pos.models import User


class LoginModal(ModalScreen[User]):
    """Username/password prompt. Only dismisses on a successful login."""

    CSS = """
    LoginModal {
        align: center middle;
        background: $background 80%;
    }

    #login-dialog {
        width: 56;
        height: auto;
        border: round $primary;
        background: $panel;
        padding: 1 2;
    }

    #login-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #login-fields {
        color: white;
        margin-bottom: 1;
    }

    #login-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #login-help {
        color: #dddddd;
    }
    """

    _FIELDS = ("username", "password")

    def __init__(self, on_submit: Callable[[str, str], User]) -> None:
        super().__init__()
        self.on_submit = on_submit
        self.values = {"username": "", "password": ""}
        self.active_field = "username"
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="login-dialog"):
            yield Static("Nexus Resto POS", id="login-title")
            yield Static(id="login-fields")
            yield Static(id="login-error")
            yield Static("Tab switch field. Enter sign in. Ctrl+Q quit.", id="login-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"tab", "up", "down"}:
            idx = self._FIELDS.index(self.active_field)
            self.active_field = self._FIELDS[(idx + 1) % len(self._FIELDS)]
            self._refresh_content()
            event.stop()
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key == "backspace":
            current = self.values[self.active_field]
            if current:
                self.values[self.active_field] = current[:-1]
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character and not event.character.isspace():
            self.values[self.active_field] += event.character
            self.error = ""
            self._refresh_content()
            event.stop()

    def _confirm(self) -> None:
        if self.active_field == "username" and not self.values["password"]:
            self.active_field = "password"
            self._refresh_content()
            return
        try:
            user = self.on_submit(self.values["username"], self.values["password"])
        except AuthenticationError as exc:
            self.error = str(exc)
            self.values["password"] = ""
            self.active_field = "password"
            self._refresh_content()
            return
        self.dismiss(user)

    def _refresh_content(self) -> None:
        fields = Text(style="white")
        for idx, name in enumerate(self._FIELDS):
            if idx > 0:
                fields.append("\n")
            pointer = "➤ " if name == self.active_field else "  "
            shown = self.values[name] if name == "username" else "•" * len(self.values[name])
            cursor = "|" if name == self.active_field else ""
            fields.append(f"{pointer}{name.capitalize():<9} {shown}{cursor}")
        self.query_one("#login-fields", Static).update(fields)
        self.query_one("#login-error", Static).update(self.error or "")
