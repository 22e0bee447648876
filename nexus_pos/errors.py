"""Errors raised by the point-of-sale core.

Every error is recoverable by the operator: the UI shows the message and the
state is left exactly as it was before the rejected call.
"""

from __future__ import annotations


class PosError(Exception):
    """Base class for rejected point-of-sale operations."""


class ValidationError(PosError, ValueError):
    """Invalid operator input such as a negative or non-numeric amount."""


class NotFoundError(PosError, LookupError):
    """A table, product, order or sale identifier that is not registered."""

    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(f"{kind} {identifier!r} not found")
        self.kind = kind
        self.identifier = identifier


class PreconditionError(PosError):
    """The operation is not allowed in the current state."""


class EmptyCartError(PreconditionError):
    def __init__(self, table_id: str) -> None:
        super().__init__(f"Cart for table {table_id!r} is empty")
        self.table_id = table_id


class SessionNotOpenError(PreconditionError):
    def __init__(self) -> None:
        super().__init__("No cash session is open")


class SessionAlreadyOpenError(PreconditionError):
    def __init__(self, session_id: str) -> None:
        super().__init__(f"Cash session {session_id} is already open")
        self.session_id = session_id


class AuthenticationError(PosError):
    """Username and password do not match the roster."""
