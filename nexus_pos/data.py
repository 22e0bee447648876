"""Seed records built from the static configuration."""

from __future__ import annotations

from nexus_pos.constant import (
    AVAILABLE_ICONS,
    DEFAULT_ICON,
    ICON_GLYPHS,
    INITIAL_PRODUCTS,
    INITIAL_TABLES,
    ROLE_DESTINATIONS,
    STAFF_ROSTER,
)
from nexus_pos.models import Category, Product, Role, Table, TableStatus, User

DESTINATIONS: list[str] = list(ROLE_DESTINATIONS)


def seed_products() -> list[Product]:
    """Build a fresh copy of the initial catalog."""
    return [
        Product(
            product_id=str(raw["id"]),
            name=str(raw["name"]),
            price=float(raw["price"]),  # type: ignore[arg-type]
            category=Category(raw["category"]),
            stock=int(raw["stock"]),  # type: ignore[call-overload]
            icon=str(raw["icon"]),
        )
        for raw in INITIAL_PRODUCTS
    ]


def seed_tables() -> list[Table]:
    """Build a fresh copy of the floor plan, every table free."""
    return [
        Table(
            table_id=str(raw["id"]),
            number=int(raw["number"]),  # type: ignore[call-overload]
            capacity=int(raw["capacity"]),  # type: ignore[call-overload]
            status=TableStatus.FREE,
        )
        for raw in INITIAL_TABLES
    ]


USERS: list[User] = [
    User(
        user_id=raw["id"],
        username=raw["username"],
        password=raw["password"],
        name=raw["name"],
        role=Role(raw["role"]),
        avatar=raw["avatar"],
    )
    for raw in STAFF_ROSTER
]

ROLES_BY_DESTINATION: dict[str, frozenset[Role]] = {
    destination: frozenset(Role(role) for role in roles) for destination, roles in ROLE_DESTINATIONS.items()
}


def icon_glyph(icon: str) -> str:
    """Terminal glyph for an icon name, falling back to the default icon."""
    return ICON_GLYPHS.get(icon, ICON_GLYPHS[DEFAULT_ICON])


def is_known_icon(icon: str) -> bool:
    return icon in AVAILABLE_ICONS
