from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Query

from .catalog.data_store import get_catalog, get_navigator, set_catalog
from .catalog.models import CatalogSnapshot, CatalogSummary
from .navigation.models import (
    FacilityLayout,
    NavigationPath,
    PathRequest,
    Point,
    StoreMap,
)
from .navigation.navigator import StoreNavigator
from .recommendations.budget import analyze_budget
from .recommendations.models import (
    BudgetAnalysis,
    BudgetRequest,
    RecommendationRequest,
    RecommendationResponse,
)
from .recommendations.retrieval import generate_recommendations

logger = logging.getLogger(__name__)

app = FastAPI(title="SmartCart Advisor API", version="1.0.0")


def _navigator_or_404(store_id: str) -> StoreNavigator:
    navigator = get_navigator(store_id)
    if navigator is None:
        raise HTTPException(status_code=404, detail=f"Unknown store: {store_id}")
    return navigator


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Catalog endpoints ────────────────────────────────────────────────────


@app.put("/catalog", response_model=CatalogSummary)
def load_catalog(body: CatalogSnapshot) -> CatalogSummary:
    summary = set_catalog(body).summary()
    logger.info("Catalog replaced: %d records", summary.total_records)
    return summary


@app.get("/catalog/summary", response_model=CatalogSummary)
def catalog_summary() -> CatalogSummary:
    return get_catalog().summary()


# ── Advice endpoints ─────────────────────────────────────────────────────


@app.post("/recommendations", response_model=RecommendationResponse)
def recommendations(body: RecommendationRequest) -> RecommendationResponse:
    catalog = get_catalog()
    customer = None
    if body.customer_id:
        customer = catalog.customer(body.customer_id)
        if customer is None:
            raise HTTPException(status_code=404, detail=f"Unknown customer: {body.customer_id}")

    items = generate_recommendations(catalog, body.cart, limit=body.limit, customer=customer)
    return RecommendationResponse(recommendations=items, count=len(items))


@app.post("/budget", response_model=BudgetAnalysis)
def budget(body: BudgetRequest) -> BudgetAnalysis:
    return analyze_budget(get_catalog(), body.cart, body.budget)


# ── Navigation endpoints ─────────────────────────────────────────────────


@app.get("/stores/{store_id}/map", response_model=StoreMap)
def store_map(store_id: str) -> StoreMap:
    return _navigator_or_404(store_id).get_store_map()


@app.post("/stores/{store_id}/path", response_model=NavigationPath)
def shopping_path(store_id: str, body: PathRequest) -> NavigationPath:
    return _navigator_or_404(store_id).generate_shopping_path(body.items)


@app.get("/stores/{store_id}/facilities/nearest", response_model=FacilityLayout)
def nearest_facility(
    store_id: str,
    type: str = Query(..., min_length=1),
    x: float = 0.0,
    y: float = 0.0,
) -> FacilityLayout:
    facility = _navigator_or_404(store_id).find_nearest_facility(Point(x=x, y=y), type)
    if facility is None:
        raise HTTPException(status_code=404, detail=f"No {type} in store {store_id}")
    return facility


@app.get("/stores/{store_id}/facilities/{facility}")
def has_facility(store_id: str, facility: str) -> dict:
    available = _navigator_or_404(store_id).has_facility(facility)
    return {"store_id": store_id, "facility": facility, "available": available}
