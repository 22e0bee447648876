from __future__ import annotations

import pytest

from nexus_pos import auth
from nexus_pos.errors import AuthenticationError, NotFoundError
from nexus_pos.models import Role


def test_login_sets_current_user(state):
    user = auth.login(state, "cashier", "123")

    assert state.current_user == user
    assert user.role is Role.CASHIER


@pytest.mark.parametrize("username, password", [("admin", "wrong"), ("nobody", "123"), ("Admin", "123"), ("", "")])
def test_bad_credentials_are_rejected(state, username, password):
    with pytest.raises(AuthenticationError, match="Try admin/123"):
        auth.login(state, username, password)
    assert state.current_user is None


def test_logout_notifies(state):
    calls = []
    auth.login(state, "admin", "123")
    state.subscribe(lambda: calls.append(state.current_user))

    auth.logout(state)

    assert calls == [None]


@pytest.mark.parametrize(
    "role, expected",
    [
        (Role.ADMIN, ["dashboard", "tables", "cash", "inventory", "reports"]),
        (Role.CASHIER, ["dashboard", "tables", "cash"]),
        (Role.WAITER, ["tables"]),
        (Role.COOK, ["dashboard"]),
    ],
)
def test_destinations_by_role(role, expected):
    assert auth.destinations_for(role) == expected


def test_can_access(state):
    assert not auth.can_access(None, "tables")

    waiter = auth.authenticate("waiter", "123")
    assert auth.can_access(waiter, "tables")
    assert not auth.can_access(waiter, "cash")
    with pytest.raises(NotFoundError):
        auth.can_access(waiter, "payroll")
