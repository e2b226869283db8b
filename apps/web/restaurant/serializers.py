"""
Pydantic schemas for menu API requests and responses.

These schemas define the public API contract for menu data and the
payloads accepted by the dashboard API.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from apps.web.core.serializers import RestaurantTheme

Price = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]
CENTS = Decimal("0.01")


# =============================================================================
# Dashboard payloads
# =============================================================================


class MenuCategoryCreate(BaseModel):
    """Request body for POST /dashboard/api/categories."""

    restaurant_id: UUID
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    display_order: int = 0
    is_active: bool = True


class MenuCategoryUpdate(BaseModel):
    """Request body for PATCH /dashboard/api/categories/{id}."""

    restaurant_id: UUID | None = None
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    display_order: int | None = None
    is_active: bool | None = None


class MenuItemCreate(BaseModel):
    """Request body for POST /dashboard/api/items."""

    category_id: UUID
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    price: Price
    image_url: str = Field(default="", max_length=500)
    is_vegetarian: bool = False
    is_vegan: bool = False
    is_spicy: bool = False
    is_available: bool = True
    display_order: int = 0


class MenuItemUpdate(BaseModel):
    """Request body for PATCH /dashboard/api/items/{id}."""

    category_id: UUID | None = None
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    price: Price | None = None
    image_url: str | None = Field(default=None, max_length=500)
    is_vegetarian: bool | None = None
    is_vegan: bool | None = None
    is_spicy: bool | None = None
    is_available: bool | None = None
    display_order: int | None = None


# =============================================================================
# Dashboard responses
# =============================================================================


class MenuCategorySchema(BaseModel):
    """A category as seen by the admin surface."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    restaurant_id: UUID
    restaurant_name: str
    name: str
    description: str
    display_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class MenuItemSchema(BaseModel):
    """A menu item as seen by the admin surface."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    category_id: UUID
    category_name: str
    restaurant_name: str
    name: str
    description: str
    price: Decimal
    image_url: str
    is_vegetarian: bool
    is_vegan: bool
    is_spicy: bool
    is_available: bool
    display_order: int
    created_at: datetime
    updated_at: datetime

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> str:
        return str(price.quantize(CENTS))


# =============================================================================
# Public menu
# =============================================================================


class PublicRestaurantSchema(BaseModel):
    """A restaurant card on the public restaurant list."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    description: str
    logo_url: str
    banner_image_url: str
    contact_phone: str
    contact_email: str
    address: str
    theme: RestaurantTheme


class PublicMenuItemSchema(BaseModel):
    """An available item on the public menu."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str
    price: Decimal
    image_url: str
    is_vegetarian: bool
    is_vegan: bool
    is_spicy: bool

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> str:
        return str(price.quantize(CENTS))


class PublicMenuCategorySchema(BaseModel):
    """An active category with its available items."""

    id: UUID
    name: str
    description: str
    items: list[PublicMenuItemSchema] = Field(default_factory=list)


class RestaurantListResponse(BaseModel):
    """Response for GET /api/restaurants."""

    restaurants: list[PublicRestaurantSchema]


class RestaurantMenuResponse(BaseModel):
    """Response for GET /api/restaurants/{slug}."""

    restaurant: PublicRestaurantSchema
    categories: list[PublicMenuCategorySchema]
    diet: Literal["all", "veg", "non-veg"] = "all"
