"""Cash drawer session: at most one open process-wide."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from uuid import uuid4

from nexus_pos import persistence
from nexus_pos.amounts import parse_amount
from nexus_pos.config import ACTIVE_CASH_SESSION_KEY
from nexus_pos.errors import PreconditionError, SessionAlreadyOpenError, SessionNotOpenError
from nexus_pos.models import CashCloseSummary, CashSession, CashSessionStatus, User

logger = logging.getLogger(__name__)


class CashSessionManager:
    """Tracks the open drawer and persists it in the ``active-cash-session`` slot.

    While a session is open ``expected_balance == opening_balance + total_sales``.
    """

    def __init__(self, current: CashSession | None = None) -> None:
        self._current = current

    @classmethod
    def load(cls) -> CashSessionManager:
        """Restore the session that was open when the process last stopped."""
        session = persistence.load_cash_session(ACTIVE_CASH_SESSION_KEY)
        if session is not None and session.status is not CashSessionStatus.OPEN:
            logger.warning("cash_session_slot holds closed session %s; discarding", session.session_id)
            persistence.delete_value(ACTIVE_CASH_SESSION_KEY)
            session = None
        return cls(session)

    @property
    def current(self) -> CashSession | None:
        return self._current

    @property
    def is_open(self) -> bool:
        return self._current is not None

    def require_open(self) -> CashSession:
        if self._current is None:
            raise SessionNotOpenError()
        return self._current

    def open(self, opening_balance: str | float, user: User | None) -> CashSession:
        if self._current is not None:
            raise SessionAlreadyOpenError(self._current.session_id)
        if user is None:
            raise PreconditionError("Log in before opening the cash drawer")
        balance = parse_amount(opening_balance, "opening balance")

        session = CashSession(
            session_id=uuid4().hex[:10].upper(),
            status=CashSessionStatus.OPEN,
            opened_at=datetime.now(timezone.utc),
            opening_balance=balance,
            total_sales=0.0,
            expected_balance=balance,
            user_id=user.user_id,
            user_name=user.name,
        )
        persistence.save_value(ACTIVE_CASH_SESSION_KEY, persistence.cash_session_to_dict(session))
        self._current = session
        logger.info("cash_session_opened id=%s user=%s balance=%.2f", session.session_id, user.username, balance)
        return session

    def record_settlement(self, amount: float) -> CashSession:
        """Credit one finalized sale into the open session."""
        current = self.require_open()
        value = parse_amount(amount, "settlement amount")
        total_sales = current.total_sales + value
        updated = replace(
            current,
            total_sales=total_sales,
            expected_balance=current.opening_balance + total_sales,
        )
        persistence.save_value(ACTIVE_CASH_SESSION_KEY, persistence.cash_session_to_dict(updated))
        self._current = updated
        logger.debug("cash_settlement id=%s amount=%.2f", updated.session_id, value)
        return updated

    def close(self, counted_amount: str | float) -> CashCloseSummary:
        """End the session and report the drawer variance.

        The variance is informational; no reconciliation record is kept.
        """
        current = self.require_open()
        counted = parse_amount(counted_amount, "counted amount")
        closed = replace(current, status=CashSessionStatus.CLOSED, closed_at=datetime.now(timezone.utc))
        persistence.delete_value(ACTIVE_CASH_SESSION_KEY)
        self._current = None

        summary = CashCloseSummary(session=closed, counted_amount=counted, expected_balance=closed.expected_balance)
        logger.info(
            "cash_session_closed id=%s expected=%.2f counted=%.2f variance=%.2f",
            closed.session_id,
            summary.expected_balance,
            counted,
            summary.variance,
        )
        return summary
