from __future__ import annotations

from pydantic import BaseModel, Field

from ..catalog.models import CartItem, Product


class AisleLayout(BaseModel):
    id: int
    x: int
    y: int
    width: int
    height: int
    category: str

    model_config = {"frozen": True}

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


class SectionLayout(BaseModel):
    id: str
    name: str
    x: int
    y: int
    width: int
    height: int
    type: str

    model_config = {"frozen": True}


class FacilityLayout(SectionLayout):
    pass


class MapLayout(BaseModel):
    width: int
    height: int
    aisles: list[AisleLayout] = Field(default_factory=list)
    sections: list[SectionLayout] = Field(default_factory=list)
    facilities: list[FacilityLayout] = Field(default_factory=list)

    model_config = {"frozen": True}


class StoreMap(BaseModel):
    id: str
    store_id: str
    layout: MapLayout

    model_config = {"frozen": True}


class Point(BaseModel):
    x: float
    y: float


class Waypoint(Point):
    aisle: int | None = None


class NavigationPath(BaseModel):
    start: Waypoint | None = None
    end: Waypoint | None = None
    waypoints: list[Waypoint] = Field(default_factory=list)
    distance: int = Field(default=0, ge=0, description="Meters")
    estimated_time: int = Field(default=0, ge=0, description="Minutes")


class PathRequest(BaseModel):
    items: list[Product | CartItem] = Field(default_factory=list)
