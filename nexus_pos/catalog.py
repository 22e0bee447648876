"""In-memory product catalog and inventory edits."""

from __future__ import annotations

import logging
from dataclasses import replace
from uuid import uuid4

from nexus_pos.amounts import parse_amount, parse_stock
from nexus_pos.config import LOW_STOCK_THRESHOLD
from nexus_pos.constant import DEFAULT_ICON
from nexus_pos.data import is_known_icon
from nexus_pos.errors import NotFoundError, ValidationError
from nexus_pos.models import Category, Product

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {"name", "category", "price", "stock", "icon"}


class CatalogStore:
    """Holds the menu. Read by order entry, mutated by inventory edits."""

    def __init__(self, products: list[Product]) -> None:
        self._products: list[Product] = list(products)

    def __len__(self) -> int:
        return len(self._products)

    def all(self) -> list[Product]:
        return list(self._products)

    def get(self, product_id: str) -> Product:
        for product in self._products:
            if product.product_id == product_id:
                return product
        raise NotFoundError("Product", product_id)

    def filter(self, category: Category | None = None, query: str = "") -> list[Product]:
        """Products in ``category`` (all when ``None``) whose name contains ``query``."""
        needle = query.strip().lower()
        return [
            product
            for product in self._products
            if (category is None or product.category == category) and needle in product.name.lower()
        ]

    def low_stock(self, threshold: int = LOW_STOCK_THRESHOLD) -> list[Product]:
        return [product for product in self._products if product.stock < threshold]

    def add_product(
        self,
        name: str,
        category: Category | str,
        price: str | float,
        stock: str | int,
        icon: str = DEFAULT_ICON,
    ) -> Product:
        """Validate form input and list the new product first."""
        product = Product(
            product_id=uuid4().hex[:12],
            name=_clean_name(name),
            price=parse_amount(price, "price"),
            category=_coerce_category(category),
            stock=parse_stock(stock),
            icon=_clean_icon(icon),
        )
        self._products.insert(0, product)
        logger.info("product_added id=%s name=%r", product.product_id, product.name)
        return product

    def update_product(self, product_id: str, **fields: object) -> Product:
        unknown = set(fields) - _EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown product fields: {', '.join(sorted(unknown))}")

        current = self.get(product_id)
        changes: dict[str, object] = {}
        if "name" in fields:
            changes["name"] = _clean_name(str(fields["name"]))
        if "category" in fields:
            changes["category"] = _coerce_category(fields["category"])  # type: ignore[arg-type]
        if "price" in fields:
            changes["price"] = parse_amount(fields["price"], "price")  # type: ignore[arg-type]
        if "stock" in fields:
            changes["stock"] = parse_stock(fields["stock"])  # type: ignore[arg-type]
        if "icon" in fields:
            changes["icon"] = _clean_icon(str(fields["icon"]))

        updated = replace(current, **changes)
        self._replace(updated)
        logger.info("product_updated id=%s fields=%s", product_id, sorted(changes))
        return updated

    def delete_product(self, product_id: str) -> None:
        self.get(product_id)
        self._products = [product for product in self._products if product.product_id != product_id]
        logger.info("product_deleted id=%s", product_id)

    def set_stock(self, product_id: str, stock: int) -> Product:
        """Direct stock edit; negative values clamp to zero."""
        updated = replace(self.get(product_id), stock=max(0, int(stock)))
        self._replace(updated)
        return updated

    def decrement_stock(self, product_id: str, quantity: int) -> Product:
        current = self.get(product_id)
        return self.set_stock(product_id, current.stock - quantity)

    def _replace(self, updated: Product) -> None:
        self._products = [
            updated if product.product_id == updated.product_id else product for product in self._products
        ]


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValidationError("name is required")
    return cleaned


def _coerce_category(category: Category | str) -> Category:
    try:
        return Category(category)
    except ValueError:
        raise ValidationError(f"Unknown category {category!r}") from None


def _clean_icon(icon: str) -> str:
    return icon if is_known_icon(icon) else DEFAULT_ICON
