from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone

import pandas as pd

from .models import (
    CatalogSnapshot,
    CatalogSummary,
    Customer,
    Product,
    Store,
    Transaction,
)

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS: list[str] = [
    "id",
    "category",
    "subcategory",
    "price",
    "discount",
    "rating",
    "in_stock",
]

LINE_COLUMNS: list[str] = ["txn", "product_id", "quantity", "date"]


def as_utc(value: datetime) -> datetime:
    """Read naive datetimes as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _first_by_id(records: Iterable, kind: str) -> dict:
    by_id: dict = {}
    for record in records:
        if record.id in by_id:
            logger.debug("Duplicate %s id %s ignored", kind, record.id)
            continue
        by_id[record.id] = record
    return by_id


class CatalogIndex:
    """Read-only snapshot of products, customers, transactions and stores.

    Lookups by id are memoized once at construction. ``products_frame`` and
    ``lines_frame`` are pandas views used for filtering and aggregation; they
    are never mutated after construction.
    """

    def __init__(
        self,
        products: Iterable[Product] = (),
        customers: Iterable[Customer] = (),
        transactions: Iterable[Transaction] = (),
        stores: Iterable[Store] = (),
    ) -> None:
        self._products: dict[str, Product] = _first_by_id(products, "product")
        self._customers: dict[str, Customer] = _first_by_id(customers, "customer")
        self._stores: dict[str, Store] = _first_by_id(stores, "store")
        self._transactions: tuple[Transaction, ...] = tuple(transactions)

        self.products_frame = self._build_products_frame()
        self.lines_frame = self._build_lines_frame()

    @classmethod
    def from_snapshot(cls, snapshot: CatalogSnapshot) -> "CatalogIndex":
        return cls(
            products=snapshot.products,
            customers=snapshot.customers,
            transactions=snapshot.transactions,
            stores=snapshot.stores,
        )

    def _build_products_frame(self) -> pd.DataFrame:
        rows = [
            (p.id, p.category, p.subcategory, p.price, p.discount, p.rating, p.in_stock)
            for p in self._products.values()
        ]
        return pd.DataFrame(rows, columns=PRODUCT_COLUMNS)

    def _build_lines_frame(self) -> pd.DataFrame:
        rows = [
            (pos, item.product_id, item.quantity, as_utc(txn.date))
            for pos, txn in enumerate(self._transactions)
            for item in txn.items
        ]
        df = pd.DataFrame(rows, columns=LINE_COLUMNS)
        df["date"] = pd.to_datetime(df["date"], utc=True)
        return df

    # -- lookups -----------------------------------------------------------

    def product(self, product_id: str) -> Product | None:
        return self._products.get(product_id)

    def customer(self, customer_id: str) -> Customer | None:
        return self._customers.get(customer_id)

    def store(self, store_id: str) -> Store | None:
        return self._stores.get(store_id)

    def products_for(self, ids: Iterable[str]) -> list[Product]:
        """Resolve ids to products in the given order, skipping unknown ids."""
        found: list[Product] = []
        for pid in ids:
            product = self._products.get(pid)
            if product is None:
                logger.debug("Product %s not in catalog, skipped", pid)
                continue
            found.append(product)
        return found

    @property
    def products(self) -> list[Product]:
        return list(self._products.values())

    @property
    def customers(self) -> list[Customer]:
        return list(self._customers.values())

    @property
    def stores(self) -> list[Store]:
        return list(self._stores.values())

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._transactions

    @property
    def total_transactions(self) -> int:
        return len(self._transactions)

    def summary(self) -> CatalogSummary:
        counts = {
            "products": len(self._products),
            "customers": len(self._customers),
            "transactions": len(self._transactions),
            "stores": len(self._stores),
        }
        return CatalogSummary(**counts, total_records=sum(counts.values()))
