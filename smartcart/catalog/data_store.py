from __future__ import annotations

from ..navigation.navigator import StoreNavigator
from .index import CatalogIndex
from .models import CatalogSnapshot

_catalog: CatalogIndex = CatalogIndex()
_navigators: dict[str, StoreNavigator] = {}


def get_catalog() -> CatalogIndex:
    """Return the in-memory catalog snapshot (empty until one is loaded)."""
    return _catalog


def set_catalog(snapshot: CatalogSnapshot) -> CatalogIndex:
    """Replace the catalog wholesale and drop navigators built for the old one."""
    global _catalog
    _catalog = CatalogIndex.from_snapshot(snapshot)
    _navigators.clear()
    return _catalog


def get_navigator(store_id: str) -> StoreNavigator | None:
    """Return the cached navigator for *store_id*, building it on first use."""
    navigator = _navigators.get(store_id)
    if navigator is None:
        store = _catalog.store(store_id)
        if store is None:
            return None
        navigator = _navigators[store_id] = StoreNavigator(store)
    return navigator


def clear_catalog() -> None:
    global _catalog
    _catalog = CatalogIndex()
    _navigators.clear()
