from __future__ import annotations

import pytest

from nexus_pos.catalog import CatalogStore
from nexus_pos.constant import DEFAULT_ICON
from nexus_pos.data import seed_products
from nexus_pos.errors import NotFoundError, ValidationError
from nexus_pos.models import Category


@pytest.fixture
def catalog() -> CatalogStore:
    return CatalogStore(seed_products())


def test_seed_catalog(catalog):
    assert len(catalog) == 7
    assert catalog.get("1").name == "Pepperoni Pizza"
    assert catalog.get("5").stock == 12


def test_seed_is_a_fresh_copy(catalog):
    catalog.set_stock("1", 0)

    assert CatalogStore(seed_products()).get("1").stock == 50


def test_add_product_is_listed_first(catalog):
    product = catalog.add_product("Lemonade", "Drinks", "$2.75", "40", "Coffee")

    assert catalog.all()[0] == product
    assert product.category is Category.DRINKS
    assert product.price == 2.75
    assert product.stock == 40
    assert len(catalog) == 8


def test_add_product_unknown_icon_uses_default(catalog):
    product = catalog.add_product("Gadget", Category.ELECTRONICS, 10, 1, icon="Rocket")

    assert product.icon == DEFAULT_ICON


@pytest.mark.parametrize(
    "name, category, price, stock",
    [
        ("", "Food", "1", "1"),
        ("Soup", "Soups", "1", "1"),
        ("Soup", "Food", "-1", "1"),
        ("Soup", "Food", "abc", "1"),
        ("Soup", "Food", "1", "-3"),
        ("Soup", "Food", "1", "2.5"),
    ],
)
def test_add_product_rejects_bad_input(catalog, name, category, price, stock):
    with pytest.raises(ValidationError):
        catalog.add_product(name, category, price, stock)
    assert len(catalog) == 7


def test_update_product(catalog):
    updated = catalog.update_product("4", price="3.10", name="Double Espresso")

    assert updated.price == pytest.approx(3.10)
    assert catalog.get("4").name == "Double Espresso"
    assert catalog.all()[3].product_id == "4"


def test_update_rejects_unknown_field(catalog):
    with pytest.raises(ValidationError):
        catalog.update_product("4", colour="red")


def test_delete_product(catalog):
    catalog.delete_product("6")

    with pytest.raises(NotFoundError):
        catalog.get("6")
    with pytest.raises(NotFoundError):
        catalog.delete_product("6")


def test_stock_edits_clamp_at_zero(catalog):
    assert catalog.set_stock("2", -5).stock == 0
    assert catalog.decrement_stock("7", 25).stock == 0
    assert catalog.decrement_stock("1", 3).stock == 47


def test_filter_by_category_and_query(catalog):
    assert [p.name for p in catalog.filter(Category.DRINKS)] == ["Espresso", "Red Wine"]
    assert [p.name for p in catalog.filter(query="  PIZ ")] == ["Pepperoni Pizza"]
    assert catalog.filter(Category.DESSERTS, "pizza") == []
    assert len(catalog.filter()) == 7


def test_low_stock_includes_sold_out(catalog):
    catalog.set_stock("5", 3)
    catalog.set_stock("6", 0)

    assert {p.product_id for p in catalog.low_stock()} == {"5", "6"}
    assert catalog.get("5").low_stock
    assert catalog.get("6").out_of_stock
    assert not catalog.get("6").low_stock
