from __future__ import annotations

import sqlite3
from datetime import datetime, timezone

from nexus_pos import auth, persistence
from nexus_pos.cash import CashSessionManager
from nexus_pos.config import ACTIVE_CASH_SESSION_KEY, SESSION_IDENTITY_KEY
from nexus_pos.models import CashSession, CashSessionStatus
from nexus_pos.state import AppState


def test_missing_key_is_none():
    assert persistence.load_value("nothing-here") is None


def test_save_overwrites_and_delete_is_idempotent():
    persistence.save_value("k", {"a": 1})
    persistence.save_value("k", {"a": 2})

    assert persistence.load_value("k") == {"a": 2}
    persistence.delete_value("k")
    persistence.delete_value("k")
    assert persistence.load_value("k") is None


def test_unreadable_json_is_treated_as_absent(temp_db):
    with sqlite3.connect(temp_db) as conn:
        conn.execute(
            "INSERT INTO kv_state (key, value, updated_at) VALUES (?, ?, ?)",
            (ACTIVE_CASH_SESSION_KEY, "{not json", "now"),
        )

    assert persistence.load_value(ACTIVE_CASH_SESSION_KEY) is None
    assert not CashSessionManager.load().is_open


def test_cash_session_codec():
    session = CashSession(
        session_id="ABC",
        status=CashSessionStatus.OPEN,
        opened_at=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
        opening_balance=100.0,
        total_sales=23.2,
        expected_balance=123.2,
        user_id="2",
        user_name="Juan Cobros",
    )

    assert persistence.cash_session_from_dict(persistence.cash_session_to_dict(session)) == session


def test_user_slot_never_stores_credential():
    state = AppState.fresh()
    auth.login(state, "cashier", "123")

    raw = persistence.load_value(SESSION_IDENTITY_KEY)
    assert raw["username"] == "cashier"
    assert "password" not in raw


def test_bootstrap_restores_both_slots():
    first = AppState.fresh()
    auth.login(first, "admin", "123")
    first.cash.open(75, first.current_user)

    restored = AppState.bootstrap()

    assert restored.current_user.username == "admin"
    assert restored.cash.current.opening_balance == 75
    assert restored.ledger.all() == []
    assert len(restored.sales) == 0


def test_logout_clears_identity_slot():
    state = AppState.fresh()
    auth.login(state, "admin", "123")
    auth.logout(state)

    assert state.current_user is None
    assert AppState.bootstrap().current_user is None
