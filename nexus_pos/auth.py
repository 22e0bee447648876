"""Roster login and role-gated destinations."""

from __future__ import annotations

import logging

from nexus_pos import persistence
from nexus_pos.config import SESSION_IDENTITY_KEY
from nexus_pos.data import DESTINATIONS, ROLES_BY_DESTINATION, USERS
from nexus_pos.errors import AuthenticationError, NotFoundError
from nexus_pos.models import Role, User
from nexus_pos.state import AppState

logger = logging.getLogger(__name__)


def authenticate(username: str, password: str) -> User:
    """Exact-match lookup against the static roster."""
    for user in USERS:
        if user.username == username and user.password == password:
            return user
    raise AuthenticationError("Invalid credentials. Try admin/123")


def login(state: AppState, username: str, password: str) -> User:
    user = authenticate(username, password)
    persistence.save_value(SESSION_IDENTITY_KEY, persistence.user_to_dict(user))
    state.current_user = user
    logger.info("login user=%s role=%s", user.username, user.role.value)
    state.notify()
    return user


def logout(state: AppState) -> None:
    persistence.delete_value(SESSION_IDENTITY_KEY)
    if state.current_user is not None:
        logger.info("logout user=%s", state.current_user.username)
    state.current_user = None
    state.notify()


def destinations_for(role: Role) -> list[str]:
    return [destination for destination in DESTINATIONS if role in ROLES_BY_DESTINATION[destination]]


def can_access(user: User | None, destination: str) -> bool:
    if user is None:
        return False
    if destination not in ROLES_BY_DESTINATION:
        raise NotFoundError("Destination", destination)
    return user.role in ROLES_BY_DESTINATION[destination]
