from __future__ import annotations

from datetime import datetime, timezone

import pytest

from smartcart.catalog.index import CatalogIndex
from smartcart.catalog.models import (
    CartItem,
    CatalogSnapshot,
    Customer,
    Product,
    ProductLocation,
    Transaction,
    TransactionItem,
)
from smartcart.navigation.navigator import sample_store

NOW = datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)


def _product(pid, category, subcategory, price, rating=4.0, aisle=1, discount=0.0, in_stock=True):
    return Product(
        id=pid,
        name=pid.replace("_", " ").title(),
        category=category,
        subcategory=subcategory,
        price=price,
        rating=rating,
        discount=discount,
        in_stock=in_stock,
        location=ProductLocation(aisle=aisle, shelf="A1", section=category),
    )


def _txn(tid, day, *lines):
    return Transaction(
        id=tid,
        date=day,
        items=[TransactionItem(product_id=pid, quantity=qty, price=1.0) for pid, qty in lines],
    )


SAMPLE_PRODUCTS = [
    _product("shampoo", "personal_care", "hair_care", 600, rating=4.5, aisle=2),
    _product("soap", "personal_care", "body_care", 600, rating=4.0, aisle=3),
    _product("budget_shampoo", "personal_care", "hair_care", 250, rating=3.8, aisle=2),
    _product("cheap_shampoo", "personal_care", "hair_care", 100, rating=4.9, aisle=2, in_stock=False),
    _product("mid_shampoo", "personal_care", "hair_care", 400, rating=4.2, aisle=1, discount=10),
    _product("chips", "food_beverages", "snacks", 50, rating=4.6, aisle=5),
    _product("cola", "food_beverages", "beverages", 40, rating=3.5, aisle=4, discount=20),
    _product("detergent", "household", "laundry", 200, rating=4.1, aisle=9),
    _product("vitamin_c", "health_wellness", "vitamins", 300, rating=4.8, aisle=11),
    _product("charger", "electronics", "mobile_accessories", 900, rating=3.9, aisle=12),
]

SAMPLE_TRANSACTIONS = [
    _txn("t1", datetime(2024, 6, 25, tzinfo=timezone.utc), ("shampoo", 1), ("chips", 2)),
    _txn("t2", datetime(2024, 6, 20, tzinfo=timezone.utc), ("shampoo", 1), ("chips", 1), ("cola", 3)),
    _txn("t3", datetime(2024, 5, 1, tzinfo=timezone.utc), ("soap", 1), ("detergent", 5)),
    _txn("t4", datetime(2024, 6, 28, tzinfo=timezone.utc), ("cola", 2), ("vitamin_c", 1)),
    # "ghost" is not in the catalog
    _txn("t5", datetime(2024, 6, 29, tzinfo=timezone.utc), ("shampoo", 1), ("ghost", 10)),
]

SAMPLE_CUSTOMER = Customer(
    id="c1",
    name="Asha",
    preferences=["health_wellness", "electronics", "household"],
    membership_level="gold",
)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def products() -> dict[str, Product]:
    return {p.id: p for p in SAMPLE_PRODUCTS}


@pytest.fixture
def customer() -> Customer:
    return SAMPLE_CUSTOMER


@pytest.fixture
def catalog() -> CatalogIndex:
    return CatalogIndex(
        products=SAMPLE_PRODUCTS,
        customers=[SAMPLE_CUSTOMER],
        transactions=SAMPLE_TRANSACTIONS,
    )


@pytest.fixture
def snapshot() -> CatalogSnapshot:
    return CatalogSnapshot(
        products=SAMPLE_PRODUCTS,
        customers=[SAMPLE_CUSTOMER],
        transactions=SAMPLE_TRANSACTIONS,
        stores=[sample_store("small", store_id="store_1")],
    )


@pytest.fixture
def cart(products):
    """Build cart lines: ``cart(("shampoo", 2), ("soap", 1))``."""

    def _build(*lines: tuple[str, int]) -> list[CartItem]:
        return [CartItem.from_product(products[pid], qty) for pid, qty in lines]

    return _build
