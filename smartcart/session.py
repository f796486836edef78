"""
Cart-state holder that drives both engines.

A ``ShoppingSession`` owns the cart lines and the budget. Every mutation
re-runs the recommendation engine, the budget advisor and (when a store is
selected) the route planner, so ``recommendations``, ``suggestions`` and
``path`` always describe the current cart.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from .catalog.index import CatalogIndex
from .catalog.models import CartItem, Customer, Product
from .navigation.models import NavigationPath
from .navigation.navigator import StoreNavigator
from .recommendations.budget import analyze_budget, generate_budget_suggestions
from .recommendations.config import DEFAULT_ADVISOR_CONFIG, AdvisorConfig
from .recommendations.models import AIRecommendation, BudgetAnalysis, BudgetSuggestion
from .recommendations.retrieval import generate_recommendations

logger = logging.getLogger(__name__)

DEFAULT_BUDGET = 1000.0


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ShoppingSession:
    def __init__(
        self,
        catalog: CatalogIndex,
        budget: float = DEFAULT_BUDGET,
        customer: Customer | None = None,
        navigator: StoreNavigator | None = None,
        recommendation_limit: int = 5,
        config: AdvisorConfig = DEFAULT_ADVISOR_CONFIG,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.catalog = catalog
        self.customer = customer
        self.navigator = navigator
        self.recommendation_limit = recommendation_limit
        self.config = config
        self._clock = clock or _utc_now
        self._budget = budget
        self._items: list[CartItem] = []
        self._dismissed: set[str] = set()

        self.recommendations: list[AIRecommendation] = []
        self.suggestions: list[BudgetSuggestion] = []
        self.path: NavigationPath | None = None
        self._refresh()

    # -- derived state -----------------------------------------------------

    @property
    def items(self) -> list[CartItem]:
        return [item.model_copy() for item in self._items]

    @property
    def budget(self) -> float:
        return self._budget

    def analysis(self) -> BudgetAnalysis:
        result = analyze_budget(self.catalog, self._items, self._budget, self.config)
        result.suggestions = list(self.suggestions)
        return result

    def _line(self, product_id: str) -> CartItem | None:
        return next((item for item in self._items if item.id == product_id), None)

    def _refresh(self) -> None:
        self.recommendations = generate_recommendations(
            self.catalog,
            self._items,
            limit=self.recommendation_limit,
            customer=self.customer,
            now=self._clock(),
            config=self.config,
        )
        self.suggestions = [
            s
            for s in generate_budget_suggestions(self.catalog, self._items, self._budget, self.config)
            if s.id not in self._dismissed
        ]
        if self.navigator is not None:
            self.path = self.navigator.generate_shopping_path(self._items)

    # -- mutations ---------------------------------------------------------

    def set_budget(self, budget: float) -> None:
        self._budget = budget
        self._refresh()

    def select_store(self, navigator: StoreNavigator | None) -> None:
        self.navigator = navigator
        self.path = None
        self._refresh()

    def add(self, product: Product, quantity: int = 1) -> None:
        """Add *quantity* of *product*, merging into an existing line.

        A merged total of zero or below removes the line. A non-positive
        quantity for a product not yet in the cart is ignored.
        """
        line = self._line(product.id)
        if line is not None:
            self.update_quantity(product.id, line.quantity + quantity)
            return
        if quantity <= 0:
            logger.debug("Ignored add of %s with quantity %d", product.id, quantity)
            return
        self._items.append(CartItem.from_product(product, quantity))
        self._refresh()

    def remove(self, product_id: str) -> None:
        self._items = [item for item in self._items if item.id != product_id]
        self._refresh()

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """Set a line's quantity; zero or below removes the line."""
        if quantity <= 0:
            self.remove(product_id)
            return
        line = self._line(product_id)
        if line is None:
            return
        line.quantity = quantity
        self._refresh()

    def clear(self) -> None:
        self._items = []
        self._dismissed.clear()
        self._refresh()

    def accept(self, suggestion_id: str) -> bool:
        """Apply a suggestion to the cart. Returns ``False`` if it is unknown.

        Alternatives replace the original line (quantity kept, original price
        recorded). Bulk suggestions carry no product swap and are only retired.
        """
        suggestion = next((s for s in self.suggestions if s.id == suggestion_id), None)
        if suggestion is None:
            return False
        self._dismissed.add(suggestion_id)

        original = self._line(suggestion.original.id)
        alternative = suggestion.alternative
        if original is not None and alternative is not None and alternative.id != original.id:
            self._items.remove(original)
            existing = self._line(alternative.id)
            if existing is not None:
                existing.quantity += original.quantity
            else:
                replacement = CartItem.from_product(alternative, original.quantity)
                replacement.original_price = original.price
                self._items.append(replacement)
            logger.debug("Replaced %s with %s", original.id, alternative.id)

        self._refresh()
        return True

    def dismiss(self, suggestion_id: str) -> bool:
        if not any(s.id == suggestion_id for s in self.suggestions):
            return False
        self._dismissed.add(suggestion_id)
        self.suggestions = [s for s in self.suggestions if s.id != suggestion_id]
        return True
