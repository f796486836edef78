from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np

from ..catalog.models import CartItem, Product, Store, StoreLayout, StoreSize
from .config import (
    AISLE_CATEGORIES,
    DEFAULT_AISLE_CATEGORY,
    DEFAULT_NAVIGATION_CONFIG,
    FACILITY_AREAS,
    FIXED_SECTIONS,
    MAP_DIMENSIONS,
    SAMPLE_STORE_LAYOUTS,
    SIDE_ENTRANCE,
    NavigationConfig,
    PlacedArea,
)
from .models import (
    AisleLayout,
    FacilityLayout,
    MapLayout,
    NavigationPath,
    Point,
    SectionLayout,
    StoreMap,
    Waypoint,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Map generation
# ---------------------------------------------------------------------------


def _place(area: PlacedArea, width: int, height: int, cls: type[SectionLayout]) -> SectionLayout:
    x, y = area.anchor.resolve(width, height)
    return cls(
        id=area.id,
        name=area.name,
        x=x,
        y=y,
        width=area.anchor.width,
        height=area.anchor.height,
        type=area.type,
    )


def _layout_aisles(count: int, config: NavigationConfig) -> list[AisleLayout]:
    """Near-square grid, row-major, numbered from 1."""
    if count <= 0:
        return []
    per_row = math.ceil(math.sqrt(count))
    step_x = config.aisle_width + config.aisle_spacing
    step_y = config.aisle_height + config.aisle_spacing

    aisles: list[AisleLayout] = []
    for i in range(count):
        row, col = divmod(i, per_row)
        aisles.append(AisleLayout(
            id=i + 1,
            x=config.aisle_origin_x + col * step_x,
            y=config.aisle_origin_y + row * step_y,
            width=config.aisle_width,
            height=config.aisle_height,
            category=AISLE_CATEGORIES.get(i + 1, DEFAULT_AISLE_CATEGORY),
        ))
    return aisles


def _layout_sections(
    layout: StoreLayout, width: int, height: int, config: NavigationConfig
) -> list[SectionLayout]:
    sections = [_place(area, width, height, SectionLayout) for area in FIXED_SECTIONS]

    for i in range(config.base_checkouts + 1, layout.checkout_count + 1):
        row, col = divmod(i - 1, config.checkouts_per_row)
        sections.append(SectionLayout(
            id=f"checkout_{i}",
            name=f"Checkout {i}",
            x=50 + col * 50,
            y=50 + row * 40,
            width=40,
            height=30,
            type="checkout",
        ))

    if "side" in layout.entrances:
        sections.append(_place(SIDE_ENTRANCE, width, height, SectionLayout))
    return sections


def build_store_map(
    store: Store, config: NavigationConfig = DEFAULT_NAVIGATION_CONFIG
) -> StoreMap:
    """Deterministic geometric layout of *store*; no collision handling."""
    width, height = MAP_DIMENSIONS[store.size]
    layout = store.layout
    facilities = [
        _place(area, width, height, FacilityLayout)
        for key, area in FACILITY_AREAS.items()
        if key in layout.facilities
    ]
    return StoreMap(
        id=f"map_{store.id}",
        store_id=store.id,
        layout=MapLayout(
            width=width,
            height=height,
            aisles=_layout_aisles(layout.aisle_count, config),
            sections=_layout_sections(layout, width, height, config),
            facilities=facilities,
        ),
    )


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------


def _route_length(waypoints: Sequence[Waypoint]) -> float:
    """Sum of straight segments between consecutive waypoints, in pixels."""
    if len(waypoints) < 2:
        return 0.0
    coords = np.array([(w.x, w.y) for w in waypoints], dtype=float)
    steps = np.diff(coords, axis=0)
    return float(np.hypot(steps[:, 0], steps[:, 1]).sum())


def build_shopping_path(
    store_map: StoreMap,
    products: Sequence[Product | CartItem],
    config: NavigationConfig = DEFAULT_NAVIGATION_CONFIG,
) -> NavigationPath:
    """Route from the main entrance through each needed aisle to checkout.

    Aisles are visited in ascending id order, once each. Products whose aisle
    is not on the map are left off the route.
    """
    aisles_by_id = {aisle.id: aisle for aisle in store_map.layout.aisles}

    visited: dict[int, AisleLayout] = {}
    for product in products:
        aisle = aisles_by_id.get(product.location.aisle)
        if aisle is None:
            logger.debug(
                "Aisle %s for product %s not on %s", product.location.aisle, product.id, store_map.id
            )
            continue
        visited.setdefault(aisle.id, aisle)

    waypoints: list[Waypoint] = []
    sections = store_map.layout.sections

    entrance = next((s for s in sections if s.id == "entrance_main"), None)
    if entrance is not None:
        waypoints.append(Waypoint(x=entrance.x + entrance.width / 2, y=entrance.y))

    for aisle_id in sorted(visited):
        cx, cy = visited[aisle_id].center
        waypoints.append(Waypoint(x=cx, y=cy, aisle=aisle_id))

    checkout = next((s for s in sections if s.type == "checkout"), None)
    if checkout is not None:
        waypoints.append(Waypoint(x=checkout.x + checkout.width / 2, y=checkout.y))

    meters = _route_length(waypoints) / config.pixels_per_meter
    minutes = meters / config.walking_speed_mps / 60

    return NavigationPath(
        start=waypoints[0] if waypoints else None,
        end=waypoints[-1] if waypoints else None,
        waypoints=waypoints,
        distance=int(math.floor(meters + 0.5)),
        estimated_time=math.ceil(minutes),
    )


def _xy(point: Point | tuple[float, float]) -> tuple[float, float]:
    if isinstance(point, Point):
        return point.x, point.y
    return float(point[0]), float(point[1])


class StoreNavigator:
    """Navigation for a single store.

    The map is computed once in the constructor and reused by every query;
    build a new navigator for a different store.
    """

    def __init__(self, store: Store, config: NavigationConfig = DEFAULT_NAVIGATION_CONFIG) -> None:
        self._store = store
        self._config = config
        self._store_map = build_store_map(store, config)

    @property
    def store(self) -> Store:
        return self._store

    def get_store_map(self) -> StoreMap:
        return self._store_map

    def generate_shopping_path(self, products: Sequence[Product | CartItem]) -> NavigationPath:
        return build_shopping_path(self._store_map, products, self._config)

    def get_product_aisle(self, product: Product | CartItem) -> AisleLayout | None:
        return next(
            (a for a in self._store_map.layout.aisles if a.id == product.location.aisle),
            None,
        )

    def find_nearest_facility(
        self, point: Point | tuple[float, float], facility_type: str
    ) -> FacilityLayout | None:
        """Closest facility of *facility_type* by straight-line distance."""
        px, py = _xy(point)
        nearest: FacilityLayout | None = None
        best = math.inf
        for facility in self._store_map.layout.facilities:
            if facility.type != facility_type:
                continue
            dist = math.hypot(facility.x - px, facility.y - py)
            if dist < best:
                nearest, best = facility, dist
        return nearest

    def has_facility(self, facility: str) -> bool:
        return facility in self._store.layout.facilities


def sample_store(size: StoreSize, store_id: str | None = None, name: str = "") -> Store:
    """Store built from the fixed sample layout for *size*."""
    return Store(
        id=store_id or f"sample_{size}",
        name=name or f"Sample {size.title()} Store",
        size=size,
        layout=StoreLayout(**SAMPLE_STORE_LAYOUTS[size]),
    )
