from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

import pandas as pd

from ..catalog.index import CatalogIndex, as_utc
from ..catalog.models import CartItem, Customer, Product
from .config import DEFAULT_ADVISOR_CONFIG, AdvisorConfig
from .models import AIRecommendation, RecommendationType

logger = logging.getLogger(__name__)


def _cart_ids(cart_items: Sequence[CartItem]) -> list[str]:
    return list(dict.fromkeys(item.id for item in cart_items))


def _top_rated(catalog: CatalogIndex, mask: pd.Series, n: int) -> list[Product]:
    """Return up to *n* products selected by *mask*, best rating first."""
    df = catalog.products_frame
    picked = df.loc[mask].sort_values("rating", ascending=False, kind="stable")
    return catalog.products_for(picked["id"].head(n))


def frequently_bought_together(
    catalog: CatalogIndex,
    cart_items: Sequence[CartItem],
    config: AdvisorConfig = DEFAULT_ADVISOR_CONFIG,
) -> list[AIRecommendation]:
    """Mine transactions for products bought alongside anything in the cart.

    Each transaction holding at least one cart product adds one count to every
    other (non-cart) product it contains. Score is ``count / total``.
    """
    cart_ids = _cart_ids(cart_items)
    lines = catalog.lines_frame
    total = catalog.total_transactions
    if not cart_ids or lines.empty or total == 0:
        return []

    hit_txns = lines.loc[lines["product_id"].isin(cart_ids), "txn"].unique()
    together = lines.loc[
        lines["txn"].isin(hit_txns) & ~lines["product_id"].isin(cart_ids)
    ].drop_duplicates(["txn", "product_id"])

    counts = together.groupby("product_id", sort=False).size()
    counts = counts.sort_values(ascending=False, kind="stable")

    recommendations: list[AIRecommendation] = []
    for product_id, count in counts.items():
        if len(recommendations) >= config.fbt_candidates:
            break
        if catalog.product(product_id) is None:
            logger.debug("Co-purchased product %s not in catalog", product_id)
            continue
        recommendations.append(AIRecommendation(
            id=f"fbt_{product_id}",
            product_id=product_id,
            type=RecommendationType.frequently_bought_together,
            score=int(count) / total,
            reason="Customers who bought items in your cart also bought this",
            related_products=cart_ids,
        ))
    return recommendations


def similar_products(
    catalog: CatalogIndex,
    cart_items: Sequence[CartItem],
    config: AdvisorConfig = DEFAULT_ADVISOR_CONFIG,
) -> list[AIRecommendation]:
    """Best-rated in-stock products from each category already in the cart."""
    df = catalog.products_frame
    if df.empty:
        return []
    cart_ids = _cart_ids(cart_items)
    not_in_cart = df["in_stock"] & ~df["id"].isin(cart_ids)

    recommendations: list[AIRecommendation] = []
    for category in dict.fromkeys(item.category for item in cart_items):
        mask = not_in_cart & (df["category"] == category)
        for product in _top_rated(catalog, mask, config.similar_per_category):
            recommendations.append(AIRecommendation(
                id=f"similar_{product.id}",
                product_id=product.id,
                type=RecommendationType.similar_products,
                score=product.rating / 5.0,
                reason="Similar to items in your cart",
            ))
    return recommendations


def personalized_products(
    catalog: CatalogIndex,
    cart_items: Sequence[CartItem],
    customer: Customer,
    config: AdvisorConfig = DEFAULT_ADVISOR_CONFIG,
) -> list[AIRecommendation]:
    """Top-rated pick per preferred category of *customer*."""
    df = catalog.products_frame
    if df.empty:
        return []
    eligible = (
        df["in_stock"]
        & (df["rating"] >= config.personalized_min_rating)
        & ~df["id"].isin(_cart_ids(cart_items))
    )

    recommendations: list[AIRecommendation] = []
    for category in dict.fromkeys(customer.preferences):
        for product in _top_rated(catalog, eligible & (df["category"] == category), 1):
            recommendations.append(AIRecommendation(
                id=f"personalized_{product.id}",
                product_id=product.id,
                type=RecommendationType.personalized,
                score=config.personalized_score,
                reason="Based on your shopping preferences",
            ))
    return recommendations


def trending_products(
    catalog: CatalogIndex,
    cart_items: Sequence[CartItem],
    now: datetime | None = None,
    config: AdvisorConfig = DEFAULT_ADVISOR_CONFIG,
) -> list[AIRecommendation]:
    """Best sellers by quantity within the trending window ending at *now*."""
    lines = catalog.lines_frame
    if lines.empty:
        return []

    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    since = pd.Timestamp(now - timedelta(days=config.trending_window_days))
    recent = lines.loc[lines["date"] >= since]

    sales = recent.groupby("product_id", sort=False)["quantity"].sum()
    sales = sales.sort_values(ascending=False, kind="stable")

    cart_ids = set(_cart_ids(cart_items))
    recommendations: list[AIRecommendation] = []
    for product_id in sales.index:
        if len(recommendations) >= config.trending_limit:
            break
        if product_id in cart_ids or catalog.product(product_id) is None:
            continue
        recommendations.append(AIRecommendation(
            id=f"trending_{product_id}",
            product_id=product_id,
            type=RecommendationType.trending,
            score=config.trending_score,
            reason="Trending this month",
        ))
    return recommendations


def generate_recommendations(
    catalog: CatalogIndex,
    cart_items: Sequence[CartItem],
    limit: int | None = None,
    customer: Customer | None = None,
    now: datetime | None = None,
    config: AdvisorConfig = DEFAULT_ADVISOR_CONFIG,
) -> list[AIRecommendation]:
    """Merge the head of each strategy, rank by score (stable) and keep the top *limit*."""
    limit = config.default_limit if limit is None else limit
    if not cart_items or limit <= 0:
        return []

    recommendations: list[AIRecommendation] = []
    recommendations.extend(
        frequently_bought_together(catalog, cart_items, config)[: config.fbt_merged]
    )
    recommendations.extend(
        similar_products(catalog, cart_items, config)[: config.similar_merged]
    )
    if customer is not None:
        personalized = personalized_products(catalog, cart_items, customer, config)
        recommendations.extend(personalized[: config.personalized_merged])
    recommendations.extend(
        trending_products(catalog, cart_items, now, config)[: config.trending_merged]
    )

    # sorted() is stable, so equal scores keep strategy order
    ranked = sorted(recommendations, key=lambda r: r.score, reverse=True)
    return ranked[:limit]


def score_product(
    product: Product,
    cart_items: Sequence[CartItem],
    customer: Customer | None = None,
) -> float:
    """Composite relevance of a single product against the cart, in [0, 1]."""
    score = (product.rating / 5.0) * 0.3

    if customer is not None and product.category in customer.preferences:
        score += 0.3

    if cart_items:
        avg_price = sum(item.price for item in cart_items) / len(cart_items)
        if avg_price > 0:
            price_ratio = min(product.price / avg_price, 2.0)
            score += (2.0 - price_ratio) * 0.2

    if product.in_stock:
        score += 0.1

    if product.discount > 0:
        score += (product.discount / 100.0) * 0.1

    return min(score, 1.0)
