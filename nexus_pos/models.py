"""Domain models for nexus-pos."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from nexus_pos.config import LOW_STOCK_THRESHOLD

DIRECT_SALE_ORDER_ID = "DIRECT"


class Category(str, Enum):
    FOOD = "Food"
    DRINKS = "Drinks"
    SNACKS = "Snacks"
    DESSERTS = "Desserts"
    ELECTRONICS = "Electronics"


class TableStatus(str, Enum):
    FREE = "Free"
    OCCUPIED = "Occupied"
    BILL = "Bill"
    CLEANING = "Cleaning"


class OrderStatus(str, Enum):
    """Order lifecycle; declaration order is the only allowed direction."""

    PENDING = "Pending"
    IN_KITCHEN = "In Kitchen"
    READY = "Ready"
    PAID = "Paid"

    @property
    def rank(self) -> int:
        return list(OrderStatus).index(self)


class PaymentMethod(str, Enum):
    CASH = "Cash"
    CARD = "Card"


class Role(str, Enum):
    ADMIN = "Admin"
    COOK = "Cook"
    WAITER = "Waiter"
    CASHIER = "Cashier"


class CashSessionStatus(str, Enum):
    OPEN = "Open"
    CLOSED = "Closed"


@dataclass(frozen=True)
class Product:
    """A sellable catalog item."""

    product_id: str
    name: str
    price: float
    category: Category
    stock: int
    icon: str

    @property
    def out_of_stock(self) -> bool:
        return self.stock == 0

    @property
    def low_stock(self) -> bool:
        return 0 < self.stock < LOW_STOCK_THRESHOLD


@dataclass
class Table:
    """A physical table and its occupancy."""

    table_id: str
    number: int
    capacity: int
    status: TableStatus = TableStatus.FREE
    current_order_id: str | None = None


@dataclass(frozen=True)
class CartItem:
    """A product snapshot with a quantity and an optional note."""

    product_id: str
    name: str
    price: float
    category: Category
    icon: str
    quantity: int = 1
    note: str | None = None

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> CartItem:
        return cls(
            product_id=product.product_id,
            name=product.name,
            price=product.price,
            category=product.category,
            icon=product.icon,
            quantity=quantity,
        )

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


@dataclass(frozen=True)
class Totals:
    subtotal: float
    tax: float
    total: float


@dataclass(frozen=True)
class Order:
    """A table's dispatched cart awaiting payment."""

    order_id: str
    table_id: str
    items: tuple[CartItem, ...]
    status: OrderStatus
    subtotal: float
    tax: float
    total: float
    created_at: datetime


@dataclass(frozen=True)
class CashSession:
    """An open drawer and the sales settled into it."""

    session_id: str
    status: CashSessionStatus
    opened_at: datetime
    opening_balance: float
    total_sales: float
    expected_balance: float
    user_id: str
    user_name: str
    closed_at: datetime | None = None


@dataclass(frozen=True)
class CashCloseSummary:
    """Close-out figures shown to the operator; never persisted."""

    session: CashSession
    counted_amount: float
    expected_balance: float

    @property
    def variance(self) -> float:
        return self.counted_amount - self.expected_balance


@dataclass(frozen=True)
class Sale:
    """A finalized, paid transaction."""

    sale_id: str
    created_at: datetime
    items: tuple[CartItem, ...]
    total: float
    payment_method: PaymentMethod
    session_id: str
    order_id: str
    table_id: str
    table_number: int

    @property
    def is_direct(self) -> bool:
        return self.order_id == DIRECT_SALE_ORDER_ID


@dataclass(frozen=True)
class User:
    """A staff member from the static roster."""

    user_id: str
    username: str
    name: str
    role: Role
    avatar: str
    password: str | None = None
