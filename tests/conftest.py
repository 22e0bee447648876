from __future__ import annotations

import pytest

from nexus_pos import auth, persistence
from nexus_pos.data import USERS
from nexus_pos.models import Role, User
from nexus_pos.state import AppState


@pytest.fixture(autouse=True)
def temp_db(tmp_path, monkeypatch):
    db_path = tmp_path / "pos.db"
    monkeypatch.setattr(persistence, "DB_PATH", str(db_path))
    persistence.bootstrap_schema()
    return db_path


@pytest.fixture
def state() -> AppState:
    return AppState.fresh()


@pytest.fixture
def cashier() -> User:
    return next(user for user in USERS if user.role is Role.CASHIER)


@pytest.fixture
def logged_in(state: AppState) -> AppState:
    auth.login(state, "admin", "123")
    return state


@pytest.fixture
def open_drawer(logged_in: AppState) -> AppState:
    logged_in.cash.open(100, logged_in.current_user)
    return logged_in
