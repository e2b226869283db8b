"""
Pydantic schemas for restaurant and role payloads.

Create schemas list required fields; update schemas make every field
optional and are dumped with exclude_unset so only sent fields change.
Timestamps and ids are never accepted from callers.
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import FontFamily, Role

HexColor = Annotated[str, Field(pattern=r"^#[0-9A-Fa-f]{6}$")]
Slug = Annotated[
    str,
    Field(min_length=1, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$"),
]
ImageRef = Annotated[str, Field(max_length=500)]


def _check_font(value: str | None) -> str | None:
    if value is not None and value not in FontFamily.values:
        raise ValueError(f"Unsupported font '{value}'")
    return value


def _check_role(value: str | None) -> str | None:
    if value is not None and value not in Role.values:
        raise ValueError(f"Unknown role '{value}'")
    return value


# =============================================================================
# Restaurant
# =============================================================================


class RestaurantTheme(BaseModel):
    """Visual theme of the public menu page."""

    model_config = ConfigDict(from_attributes=True)

    theme_color: HexColor = "#FF6B35"
    background_color: HexColor = "#FFF5F0"
    text_color: HexColor = "#FFFFFF"
    card_color: HexColor = "#242a38"
    card_text_color: HexColor = "#FFFFFF"
    price_color: HexColor = "#FF8A4C"
    category_header_color: HexColor = "#FF8A4C"
    header_gradient_start: HexColor = "#000000"
    header_gradient_end: HexColor = "#1a1f2e"
    button_color: HexColor = "#FF6B35"
    button_text_color: HexColor = "#FFFFFF"
    border_color: HexColor = "#2a3441"
    font_family: str = FontFamily.INTER.value

    @field_validator("font_family")
    @classmethod
    def check_font(cls, value: str | None) -> str | None:
        return _check_font(value)


class RestaurantCreate(RestaurantTheme):
    """Request body for POST /dashboard/api/restaurants."""

    name: str = Field(..., min_length=1, max_length=200)
    slug: Slug
    description: str = ""
    logo_url: ImageRef = ""
    banner_image_url: ImageRef = ""
    contact_phone: str = Field(default="", max_length=30)
    contact_email: str = Field(default="", max_length=254)
    address: str = ""
    is_active: bool = True


class RestaurantUpdate(BaseModel):
    """Request body for PATCH /dashboard/api/restaurants/{id}."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    slug: Slug | None = None
    description: str | None = None
    logo_url: ImageRef | None = None
    banner_image_url: ImageRef | None = None
    theme_color: HexColor | None = None
    background_color: HexColor | None = None
    text_color: HexColor | None = None
    card_color: HexColor | None = None
    card_text_color: HexColor | None = None
    price_color: HexColor | None = None
    category_header_color: HexColor | None = None
    header_gradient_start: HexColor | None = None
    header_gradient_end: HexColor | None = None
    button_color: HexColor | None = None
    button_text_color: HexColor | None = None
    border_color: HexColor | None = None
    font_family: str | None = None
    contact_phone: str | None = Field(default=None, max_length=30)
    contact_email: str | None = Field(default=None, max_length=254)
    address: str | None = None
    is_active: bool | None = None

    @field_validator("font_family")
    @classmethod
    def check_font(cls, value: str | None) -> str | None:
        return _check_font(value)


class RestaurantSchema(RestaurantTheme):
    """A restaurant as seen by the admin surface."""

    id: UUID
    name: str
    slug: str
    description: str
    logo_url: str
    banner_image_url: str
    contact_phone: str
    contact_email: str
    address: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


# =============================================================================
# Roles
# =============================================================================


class UserRoleCreate(BaseModel):
    """Request body for POST /dashboard/api/roles."""

    user_id: int
    role: str = Role.USER.value
    restaurant_id: UUID | None = None

    @field_validator("role")
    @classmethod
    def check_role(cls, value: str | None) -> str | None:
        return _check_role(value)


class UserRoleUpdate(BaseModel):
    """Request body for PATCH /dashboard/api/roles/{id}."""

    role: str | None = None
    restaurant_id: UUID | None = None

    @field_validator("role")
    @classmethod
    def check_role(cls, value: str | None) -> str | None:
        return _check_role(value)


class UserRoleSchema(BaseModel):
    """A role grant."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: int
    role: str
    restaurant_id: UUID | None
    created_at: datetime
