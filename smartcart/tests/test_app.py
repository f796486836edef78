from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from smartcart.app import app
from smartcart.catalog.data_store import clear_catalog, get_navigator
from smartcart.catalog.models import CartItem
from smartcart.navigation.navigator import StoreNavigator

client = TestClient(app)


@pytest.fixture(autouse=True)
def loaded_catalog(snapshot):
    resp = client.put("/catalog", json=snapshot.model_dump(mode="json"))
    assert resp.status_code == 200
    yield
    clear_catalog()


def _cart(products, *lines):
    return [CartItem.from_product(products[pid], qty).model_dump(mode="json") for pid, qty in lines]


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


# ── Catalog ──────────────────────────────────────────────────────────────


class TestCatalog:
    def test_summary_after_load(self):
        body = client.get("/catalog/summary").json()
        assert body == {
            "products": 10,
            "customers": 1,
            "transactions": 5,
            "stores": 1,
            "total_records": 17,
        }

    def test_clear_empties_catalog(self):
        clear_catalog()
        assert client.get("/catalog/summary").json()["total_records"] == 0

    def test_invalid_snapshot_rejected(self):
        resp = client.put("/catalog", json={
            "products": [{"id": "p", "category": "c", "price": 1, "rating": 7,
                          "location": {"aisle": 1}}],
        })
        assert resp.status_code == 422
        # previous catalog untouched
        assert client.get("/catalog/summary").json()["products"] == 10


# ── Recommendations and budget ───────────────────────────────────────────


class TestRecommendations:
    def test_returns_ranked_items(self, products):
        resp = client.post("/recommendations", json={"cart": _cart(products, ("shampoo", 1))})
        assert resp.status_code == 200
        body = resp.json()
        assert body["count"] == len(body["recommendations"]) == 4
        assert body["recommendations"][0]["id"] == "similar_mid_shampoo"
        scores = [r["score"] for r in body["recommendations"]]
        assert scores == sorted(scores, reverse=True)

    def test_respects_limit(self, products):
        resp = client.post(
            "/recommendations",
            json={"cart": _cart(products, ("shampoo", 1)), "limit": 2},
        )
        assert resp.json()["count"] == 2

    def test_customer_enables_personalized(self, products):
        resp = client.post(
            "/recommendations",
            json={"cart": _cart(products, ("shampoo", 1)), "customer_id": "c1", "limit": 10},
        )
        types = {r["type"] for r in resp.json()["recommendations"]}
        assert "personalized" in types

    def test_unknown_customer(self, products):
        resp = client.post(
            "/recommendations",
            json={"cart": _cart(products, ("shampoo", 1)), "customer_id": "nobody"},
        )
        assert resp.status_code == 404

    def test_empty_cart(self):
        assert client.post("/recommendations", json={}).json() == {
            "recommendations": [],
            "count": 0,
        }

    def test_limit_out_of_range(self):
        assert client.post("/recommendations", json={"limit": 0}).status_code == 422


class TestBudget:
    def test_over_budget(self, products):
        resp = client.post(
            "/budget", json={"cart": _cart(products, ("shampoo", 2)), "budget": 1000},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["is_over_budget"] is True
        assert body["current_total"] == 1200
        assert body["budget_utilization"] == 120.0
        assert [s["type"] for s in body["suggestions"]] == ["alternative", "discount"]

    def test_within_budget(self, products):
        body = client.post(
            "/budget", json={"cart": _cart(products, ("chips", 1)), "budget": 100},
        ).json()
        assert body["remaining_budget"] == 50
        assert body["suggestions"] == []

    def test_negative_budget_rejected(self):
        assert client.post("/budget", json={"cart": [], "budget": -5}).status_code == 422


# ── Navigation ───────────────────────────────────────────────────────────


class TestNavigation:
    def test_store_map(self):
        resp = client.get("/stores/store_1/map")
        assert resp.status_code == 200
        layout = resp.json()["layout"]
        assert (layout["width"], layout["height"]) == (400, 300)
        assert len(layout["aisles"]) == 8

    def test_unknown_store(self):
        assert client.get("/stores/nowhere/map").status_code == 404
        assert client.post("/stores/nowhere/path", json={"items": []}).status_code == 404

    def test_shopping_path(self, products):
        resp = client.post(
            "/stores/store_1/path",
            json={"items": _cart(products, ("chips", 1), ("shampoo", 1))},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert [w["aisle"] for w in body["waypoints"]] == [None, 2, 5, None]
        assert body["distance"] == 11
        assert body["estimated_time"] == 1

    def test_nearest_facility(self):
        resp = client.get(
            "/stores/store_1/facilities/nearest", params={"type": "restroom", "x": 0, "y": 0},
        )
        assert resp.status_code == 200
        assert resp.json()["id"] == "restrooms"

    def test_nearest_facility_missing(self):
        resp = client.get("/stores/store_1/facilities/nearest", params={"type": "pharmacy"})
        assert resp.status_code == 404

    def test_nearest_facility_requires_type(self):
        assert client.get("/stores/store_1/facilities/nearest").status_code == 422

    def test_has_facility(self):
        assert client.get("/stores/store_1/facilities/atm").json() == {
            "store_id": "store_1",
            "facility": "atm",
            "available": True,
        }
        assert client.get("/stores/store_1/facilities/pharmacy").json()["available"] is False


class TestNavigatorCache:
    @patch("smartcart.catalog.data_store.StoreNavigator", wraps=StoreNavigator)
    def test_built_once_per_store(self, built):
        first = get_navigator("store_1")
        client.get("/stores/store_1/map")
        assert get_navigator("store_1") is first
        assert built.call_count == 1

    def test_reload_drops_cached_navigators(self, snapshot):
        first = get_navigator("store_1")
        client.put("/catalog", json=snapshot.model_dump(mode="json"))
        assert get_navigator("store_1") is not first

    def test_unknown_store_not_cached(self):
        assert get_navigator("nowhere") is None
