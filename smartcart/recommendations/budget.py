from __future__ import annotations

import logging
from collections.abc import Sequence

from ..catalog.index import CatalogIndex
from ..catalog.models import CartItem, Product
from .config import DEFAULT_ADVISOR_CONFIG, AdvisorConfig
from .models import BudgetAnalysis, BudgetSuggestion, SuggestionType

logger = logging.getLogger(__name__)


def cart_total(cart_items: Sequence[CartItem]) -> float:
    return sum(item.price * item.quantity for item in cart_items)


def total_saved(cart_items: Sequence[CartItem]) -> float:
    """Savings already banked by lines that replaced a costlier original."""
    return sum(
        max(0.0, (item.original_price - item.price) * item.quantity)
        for item in cart_items
        if item.original_price is not None
    )


def _original_product(catalog: CatalogIndex, item: CartItem) -> Product | None:
    product = catalog.product(item.id)
    if product is None:
        logger.debug("Cart product %s not in catalog, no suggestion", item.id)
    return product


def cheapest_alternative(catalog: CatalogIndex, item: CartItem) -> Product | None:
    """Cheapest in-stock product of the same subcategory priced below *item*."""
    df = catalog.products_frame
    if df.empty:
        return None
    mask = (
        (df["category"] == item.category)
        & (df["subcategory"] == item.subcategory)
        & (df["price"] < item.price)
        & (df["id"] != item.id)
        & df["in_stock"]
    )
    picked = df.loc[mask].sort_values("price", kind="stable")
    found = catalog.products_for(picked["id"].head(1))
    return found[0] if found else None


def alternative_suggestions(
    catalog: CatalogIndex,
    cart_items: Sequence[CartItem],
    config: AdvisorConfig = DEFAULT_ADVISOR_CONFIG,
) -> list[BudgetSuggestion]:
    suggestions: list[BudgetSuggestion] = []
    for item in cart_items:
        alternative = cheapest_alternative(catalog, item)
        if alternative is None:
            continue
        original = _original_product(catalog, item)
        if original is None:
            continue
        suggestions.append(BudgetSuggestion(
            id=f"alternative_{item.id}_{alternative.id}",
            type=SuggestionType.alternative,
            original=original,
            alternative=alternative,
            savings=(item.price - alternative.price) * item.quantity,
            reason=f"Save money with a similar {item.category} product",
            confidence=config.alternative_confidence,
        ))
    return suggestions


def discount_suggestions(
    catalog: CatalogIndex,
    cart_items: Sequence[CartItem],
    config: AdvisorConfig = DEFAULT_ADVISOR_CONFIG,
) -> list[BudgetSuggestion]:
    """Discounted products from the cart's categories, biggest discount first.

    Each is paired with the first cart line of its category.
    """
    df = catalog.products_frame
    if df.empty or not cart_items:
        return []
    categories = list(dict.fromkeys(item.category for item in cart_items))
    mask = df["category"].isin(categories) & (df["discount"] > 0) & df["in_stock"]
    picked = df.loc[mask].sort_values("discount", ascending=False, kind="stable")

    suggestions: list[BudgetSuggestion] = []
    for product in catalog.products_for(picked["id"].head(config.discount_candidates)):
        line = next(item for item in cart_items if item.category == product.category)
        original = _original_product(catalog, line)
        if original is None:
            continue
        suggestions.append(BudgetSuggestion(
            id=f"discount_{line.id}_{product.id}",
            type=SuggestionType.discount,
            original=original,
            alternative=product,
            savings=max(0.0, (line.price - product.price) * line.quantity),
            reason=f"{product.discount:g}% off on {product.name}",
            confidence=config.discount_confidence,
        ))
    return suggestions


def bulk_suggestions(
    catalog: CatalogIndex,
    cart_items: Sequence[CartItem],
    config: AdvisorConfig = DEFAULT_ADVISOR_CONFIG,
) -> list[BudgetSuggestion]:
    suggestions: list[BudgetSuggestion] = []
    for item in cart_items:
        if item.quantity != 1 or item.category not in config.bulk_categories:
            continue
        original = _original_product(catalog, item)
        if original is None:
            continue
        suggestions.append(BudgetSuggestion(
            id=f"bulk_{item.id}",
            type=SuggestionType.bulk,
            original=original,
            savings=item.price * config.bulk_discount_rate,
            reason=f"Buy 3 or more for {config.bulk_discount_rate:.0%} off",
            confidence=config.bulk_confidence,
        ))
    return suggestions


def generate_budget_suggestions(
    catalog: CatalogIndex,
    cart_items: Sequence[CartItem],
    budget: float,
    config: AdvisorConfig = DEFAULT_ADVISOR_CONFIG,
) -> list[BudgetSuggestion]:
    """Rank ways to bring an over-budget cart back under *budget*.

    Returns an empty list while the cart total is within budget. The cart is
    never modified here; acting on a suggestion is up to the caller.
    """
    if not cart_items or cart_total(cart_items) <= budget:
        return []

    suggestions = (
        alternative_suggestions(catalog, cart_items, config)
        + discount_suggestions(catalog, cart_items, config)
        + bulk_suggestions(catalog, cart_items, config)
    )
    ranked = sorted(suggestions, key=lambda s: s.savings, reverse=True)
    return ranked[: config.max_suggestions]


def analyze_budget(
    catalog: CatalogIndex,
    cart_items: Sequence[CartItem],
    budget: float,
    config: AdvisorConfig = DEFAULT_ADVISOR_CONFIG,
) -> BudgetAnalysis:
    total = cart_total(cart_items)
    return BudgetAnalysis(
        total_budget=budget,
        current_total=total,
        remaining_budget=budget - total,
        budget_utilization=round(total / budget * 100, 1) if budget > 0 else 0.0,
        total_saved=total_saved(cart_items),
        is_over_budget=total > budget,
        suggestions=generate_budget_suggestions(catalog, cart_items, budget, config),
    )
