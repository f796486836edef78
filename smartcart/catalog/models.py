from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

StoreSize = Literal["small", "medium", "large"]
MembershipLevel = Literal["bronze", "silver", "gold", "platinum"]


class ProductLocation(BaseModel):
    aisle: int
    shelf: str = ""
    section: str = ""

    model_config = {"frozen": True}


class Product(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = ""
    category: str
    subcategory: str = ""
    brand: str | None = None
    price: float = Field(..., ge=0.0)
    discount: float = Field(default=0.0, ge=0.0, le=100.0)
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    review_count: int = Field(default=0, ge=0)
    in_stock: bool = True
    tags: list[str] = Field(default_factory=list)
    location: ProductLocation

    model_config = {"frozen": True}


class CartItem(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = ""
    price: float = Field(..., ge=0.0)
    quantity: int = Field(default=1, ge=1)
    category: str
    subcategory: str = ""
    discount: float = Field(default=0.0, ge=0.0, le=100.0)
    location: ProductLocation
    original_price: float | None = Field(default=None, ge=0.0)

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> "CartItem":
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            quantity=quantity,
            category=product.category,
            subcategory=product.subcategory,
            discount=product.discount,
            location=product.location,
        )

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class Customer(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = ""
    preferences: list[str] = Field(default_factory=list)
    membership_level: MembershipLevel = "bronze"

    model_config = {"frozen": True}


class TransactionItem(BaseModel):
    product_id: str
    quantity: int = Field(default=1, ge=1)
    price: float = Field(default=0.0, ge=0.0)
    discount: float = Field(default=0.0, ge=0.0, le=100.0)

    model_config = {"frozen": True}


class Transaction(BaseModel):
    id: str
    customer_id: str | None = None
    store_id: str | None = None
    date: datetime
    items: list[TransactionItem] = Field(default_factory=list)

    model_config = {"frozen": True}


class StoreLayout(BaseModel):
    aisle_count: int = Field(..., ge=0)
    sections: list[str] = Field(default_factory=list)
    entrances: list[str] = Field(default_factory=lambda: ["main"])
    checkout_count: int = Field(default=3, ge=0)
    facilities: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class Store(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = ""
    size: StoreSize = "medium"
    layout: StoreLayout

    model_config = {"frozen": True}


class CatalogSnapshot(BaseModel):
    products: list[Product] = Field(default_factory=list)
    customers: list[Customer] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
    stores: list[Store] = Field(default_factory=list)


class CatalogSummary(BaseModel):
    products: int
    customers: int
    transactions: int
    stores: int
    total_records: int
