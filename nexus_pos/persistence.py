"""SQLite key/value persistence for the two durable session slots."""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from nexus_pos.config import DB_PATH
from nexus_pos.models import CashSession, CashSessionStatus, Role, User

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _connect() -> sqlite3.Connection:
    db_file = Path(DB_PATH)
    db_file.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(db_file)


def bootstrap_schema() -> None:
    """Create the key/value table if it does not already exist."""
    with _connect() as conn:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS kv_state (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
            """
        )


def load_value(key: str) -> Any | None:
    """Return the decoded JSON stored under ``key``, or ``None`` when absent."""
    with _connect() as conn:
        row = conn.execute("SELECT value FROM kv_state WHERE key = ?", (key,)).fetchone()
    if row is None:
        return None
    try:
        return json.loads(row[0])
    except json.JSONDecodeError:
        logger.warning("kv_state key=%s holds unreadable JSON; treating as absent", key)
        return None


def save_value(key: str, value: Any) -> None:
    payload = json.dumps(value, sort_keys=True)
    with _connect() as conn:
        with conn:
            conn.execute(
                """
                INSERT INTO kv_state (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, payload, _utc_now_iso()),
            )


def delete_value(key: str) -> None:
    with _connect() as conn:
        with conn:
            conn.execute("DELETE FROM kv_state WHERE key = ?", (key,))


def user_to_dict(user: User) -> dict[str, Any]:
    """Serialize the logged-in user. The credential is never written."""
    return {
        "id": user.user_id,
        "username": user.username,
        "name": user.name,
        "role": user.role.value,
        "avatar": user.avatar,
    }


def user_from_dict(raw: dict[str, Any]) -> User:
    return User(
        user_id=str(raw["id"]),
        username=str(raw["username"]),
        name=str(raw["name"]),
        role=Role(raw["role"]),
        avatar=str(raw.get("avatar", "")),
    )


def cash_session_to_dict(session: CashSession) -> dict[str, Any]:
    return {
        "id": session.session_id,
        "status": session.status.value,
        "openedAt": session.opened_at.isoformat(),
        "closedAt": session.closed_at.isoformat() if session.closed_at else None,
        "openingBalance": session.opening_balance,
        "totalSales": session.total_sales,
        "expectedBalance": session.expected_balance,
        "userId": session.user_id,
        "userName": session.user_name,
    }


def cash_session_from_dict(raw: dict[str, Any]) -> CashSession:
    closed_at = raw.get("closedAt")
    return CashSession(
        session_id=str(raw["id"]),
        status=CashSessionStatus(raw["status"]),
        opened_at=datetime.fromisoformat(raw["openedAt"]),
        closed_at=datetime.fromisoformat(closed_at) if closed_at else None,
        opening_balance=float(raw["openingBalance"]),
        total_sales=float(raw["totalSales"]),
        expected_balance=float(raw["expectedBalance"]),
        user_id=str(raw["userId"]),
        user_name=str(raw["userName"]),
    )


def load_user(key: str) -> User | None:
    raw = load_value(key)
    if raw is None:
        return None
    try:
        return user_from_dict(raw)
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("kv_state key=%s is not a user record (%s); treating as absent", key, exc)
        return None


def load_cash_session(key: str) -> CashSession | None:
    raw = load_value(key)
    if raw is None:
        return None
    try:
        return cash_session_from_dict(raw)
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("kv_state key=%s is not a cash session (%s); treating as absent", key, exc)
        return None
