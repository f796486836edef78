from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from ..catalog.models import CartItem, Product


class RecommendationType(str, Enum):
    frequently_bought_together = "frequently_bought_together"
    similar_products = "similar_products"
    trending = "trending"
    personalized = "personalized"


class SuggestionType(str, Enum):
    alternative = "alternative"
    discount = "discount"
    bulk = "bulk"
    seasonal = "seasonal"


class AIRecommendation(BaseModel):
    id: str
    product_id: str
    type: RecommendationType
    score: float = Field(..., ge=0.0, le=1.0)
    reason: str
    related_products: list[str] | None = None


class BudgetSuggestion(BaseModel):
    id: str
    type: SuggestionType
    original: Product
    alternative: Product | None = None
    savings: float = Field(..., ge=0.0)
    reason: str
    confidence: float = Field(..., ge=0.0, le=1.0)


class BudgetAnalysis(BaseModel):
    total_budget: float
    current_total: float
    remaining_budget: float
    budget_utilization: float
    total_saved: float
    is_over_budget: bool
    suggestions: list[BudgetSuggestion] = Field(default_factory=list)


class RecommendationRequest(BaseModel):
    cart: list[CartItem] = Field(default_factory=list)
    limit: int = Field(default=5, ge=1, le=50)
    customer_id: str | None = Field(
        default=None, description="Enables personalized recommendations"
    )


class RecommendationResponse(BaseModel):
    recommendations: list[AIRecommendation]
    count: int


class BudgetRequest(BaseModel):
    cart: list[CartItem] = Field(default_factory=list)
    budget: float = Field(..., ge=0.0)
