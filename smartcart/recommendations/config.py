from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class AdvisorConfig:
    # Recommendations
    default_limit: int = 5
    fbt_candidates: int = 3
    fbt_merged: int = 2
    similar_per_category: int = 2
    similar_merged: int = 2
    personalized_min_rating: float = 4.0
    personalized_score: float = 0.7
    personalized_merged: int = 2
    trending_window_days: int = int(os.getenv("SMARTCART_TRENDING_WINDOW_DAYS", "30"))
    trending_limit: int = 3
    trending_score: float = 0.6
    trending_merged: int = 1

    # Budget suggestions
    max_suggestions: int = int(os.getenv("SMARTCART_MAX_SUGGESTIONS", "5"))
    alternative_confidence: float = 0.8
    discount_candidates: int = 3
    discount_confidence: float = 0.9
    bulk_discount_rate: float = float(os.getenv("SMARTCART_BULK_DISCOUNT_RATE", "0.10"))
    bulk_confidence: float = 0.7
    bulk_categories: tuple[str, ...] = ("food_beverages", "household")


DEFAULT_ADVISOR_CONFIG = AdvisorConfig()
