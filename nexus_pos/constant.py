"""Editable static catalog, floor plan and staff roster."""

from __future__ import annotations

AVAILABLE_ICONS: list[str] = [
    "Pizza",
    "Utensils",
    "Sandwich",
    "Coffee",
    "Wine",
    "Cookie",
    "IceCream",
    "Smartphone",
    "Laptop",
    "Tv",
]

DEFAULT_ICON = "Utensils"

# Single-glyph stand-ins for the icon names in the terminal.
ICON_GLYPHS: dict[str, str] = {
    "Pizza": "🍕",
    "Utensils": "🍴",
    "Sandwich": "🥪",
    "Coffee": "☕",
    "Wine": "🍷",
    "Cookie": "🍪",
    "IceCream": "🍨",
    "Smartphone": "📱",
    "Laptop": "💻",
    "Tv": "📺",
}

INITIAL_TABLES: list[dict[str, object]] = [
    {"id": "t1", "number": 1, "capacity": 2},
    {"id": "t2", "number": 2, "capacity": 2},
    {"id": "t3", "number": 3, "capacity": 4},
    {"id": "t4", "number": 4, "capacity": 4},
    {"id": "t5", "number": 5, "capacity": 6},
    {"id": "t6", "number": 6, "capacity": 6},
    {"id": "t7", "number": 7, "capacity": 8},
    {"id": "t8", "number": 8, "capacity": 4},
]

INITIAL_PRODUCTS: list[dict[str, object]] = [
    {"id": "1", "name": "Pepperoni Pizza", "price": 12.99, "category": "Food", "icon": "Pizza", "stock": 50},
    {"id": "2", "name": "Pro Burger", "price": 8.50, "category": "Food", "icon": "Utensils", "stock": 30},
    {"id": "3", "name": "Club Sandwich", "price": 6.75, "category": "Food", "icon": "Sandwich", "stock": 25},
    {"id": "4", "name": "Espresso", "price": 2.50, "category": "Drinks", "icon": "Coffee", "stock": 100},
    {"id": "5", "name": "Red Wine", "price": 15.00, "category": "Drinks", "icon": "Wine", "stock": 12},
    {"id": "6", "name": "Chocolate Cookies", "price": 1.20, "category": "Snacks", "icon": "Cookie", "stock": 60},
    {"id": "7", "name": "Vanilla Ice Cream", "price": 3.50, "category": "Desserts", "icon": "IceCream", "stock": 20},
]

# Plaintext credentials compared by exact match.
STAFF_ROSTER: list[dict[str, str]] = [
    {
        "id": "1",
        "username": "admin",
        "password": "123",
        "name": "Super Admin",
        "role": "Admin",
        "avatar": "https://api.dicebear.com/7.x/avataaars/svg?seed=Felix",
    },
    {
        "id": "2",
        "username": "cashier",
        "password": "123",
        "name": "Juan Cobros",
        "role": "Cashier",
        "avatar": "https://api.dicebear.com/7.x/avataaars/svg?seed=Aneka",
    },
    {
        "id": "3",
        "username": "waiter",
        "password": "123",
        "name": "Luis Pedidos",
        "role": "Waiter",
        "avatar": "https://api.dicebear.com/7.x/avataaars/svg?seed=Max",
    },
    {
        "id": "4",
        "username": "chef",
        "password": "123",
        "name": "Chef Gordon",
        "role": "Cook",
        "avatar": "https://api.dicebear.com/7.x/avataaars/svg?seed=Oliver",
    },
]

ROLE_DESTINATIONS: dict[str, list[str]] = {
    "dashboard": ["Admin", "Cashier", "Cook"],
    "tables": ["Admin", "Cashier", "Waiter"],
    "cash": ["Admin", "Cashier"],
    "inventory": ["Admin"],
    "reports": ["Admin"],
}

MERCHANT_NAME = "NEXUS POS"
MERCHANT_IDENTITY: list[str] = [
    "Nexus Solutions S.A. de C.V.",
    "RFC: NEX123456ABC",
    "Calle Innovación #101, Tech City",
]
INVOICE_FOOTER: list[str] = [
    "This document is a printed representation of a CFDI.",
    "Thank you for your purchase!",
]
