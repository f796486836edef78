from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class NavigationConfig:
    pixels_per_meter: float = float(os.getenv("SMARTCART_PIXELS_PER_METER", "50"))
    walking_speed_mps: float = float(os.getenv("SMARTCART_WALKING_SPEED_MPS", "1.4"))
    aisle_width: int = 60
    aisle_height: int = 120
    aisle_spacing: int = 20
    aisle_origin_x: int = 100
    aisle_origin_y: int = 100
    base_checkouts: int = 3
    checkouts_per_row: int = 6


DEFAULT_NAVIGATION_CONFIG = NavigationConfig()


class Anchor(NamedTuple):
    """Box placed relative to the canvas: ``x = rel_x * width + off_x``."""

    rel_x: float
    off_x: int
    rel_y: float
    off_y: int
    width: int
    height: int

    def resolve(self, canvas_width: int, canvas_height: int) -> tuple[int, int]:
        return (
            int(self.rel_x * canvas_width + self.off_x),
            int(self.rel_y * canvas_height + self.off_y),
        )


class PlacedArea(NamedTuple):
    id: str
    name: str
    type: str
    anchor: Anchor


# (width, height) of the canvas per store size
MAP_DIMENSIONS: dict[str, tuple[int, int]] = {
    "small": (400, 300),
    "medium": (600, 450),
    "large": (800, 600),
}

AISLE_CATEGORIES: dict[int, str] = {
    1: "personal_care",
    2: "personal_care",
    3: "personal_care",
    4: "food_beverages",
    5: "food_beverages",
    6: "food_beverages",
    7: "food_beverages",
    8: "food_beverages",
    9: "household",
    10: "household",
    11: "health_wellness",
    12: "electronics",
}
DEFAULT_AISLE_CATEGORY = "general"

# Sections every store gets, in map order
FIXED_SECTIONS: list[PlacedArea] = [
    PlacedArea("entrance_main", "Main Entrance", "entrance", Anchor(0, 50, 1, -80, 80, 40)),
    PlacedArea("checkout_1", "Checkout 1", "checkout", Anchor(0, 50, 0, 50, 40, 30)),
    PlacedArea("checkout_2", "Checkout 2", "checkout", Anchor(0, 100, 0, 50, 40, 30)),
    PlacedArea("checkout_3", "Checkout 3", "checkout", Anchor(0, 150, 0, 50, 40, 30)),
    PlacedArea(
        "customer_service", "Customer Service", "customer_service", Anchor(1, -120, 0, 50, 80, 40)
    ),
]

SIDE_ENTRANCE = PlacedArea("entrance_side", "Side Entrance", "entrance", Anchor(1, -50, 0.5, 0, 40, 80))

# Keyed by the store's facility list entry
FACILITY_AREAS: dict[str, PlacedArea] = {
    "restrooms": PlacedArea("restrooms", "Restrooms", "restroom", Anchor(1, -100, 1, -100, 60, 40)),
    "atm": PlacedArea("atm", "ATM", "atm", Anchor(0, 200, 0, 50, 30, 20)),
    "pharmacy": PlacedArea("pharmacy", "Pharmacy", "pharmacy", Anchor(1, -100, 0.5, -100, 60, 40)),
    "food_court": PlacedArea("food_court", "Food Court", "food_court", Anchor(0.5, -60, 1, -70, 120, 50)),
}

SAMPLE_STORE_LAYOUTS: dict[str, dict] = {
    "small": {
        "aisle_count": 8,
        "sections": ["personal_care", "food_beverages", "household", "health_wellness"],
        "entrances": ["main"],
        "checkout_count": 3,
        "facilities": ["restrooms", "atm"],
    },
    "medium": {
        "aisle_count": 12,
        "sections": ["personal_care", "food_beverages", "household", "health_wellness", "electronics"],
        "entrances": ["main", "side"],
        "checkout_count": 6,
        "facilities": ["restrooms", "atm", "pharmacy"],
    },
    "large": {
        "aisle_count": 16,
        "sections": ["personal_care", "food_beverages", "household", "health_wellness", "electronics"],
        "entrances": ["main", "side", "back"],
        "checkout_count": 10,
        "facilities": ["restrooms", "atm", "pharmacy", "food_court"],
    },
}
