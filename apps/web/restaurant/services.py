"""
Menu services - public menu assembly and admin listings.

Every query starts from store.select(), so the access policy applies
before any filter added here.
"""

import logging
from uuid import UUID

from django.db.models import F, Prefetch, Q, QuerySet

from apps.web.core import store
from apps.web.core.auth import Caller
from apps.web.core.exceptions import NotFound, ValidationFailed
from apps.web.core.models import Restaurant
from apps.web.core.serializers import RestaurantTheme

from .models import DietFilter, MenuCategory, MenuItem
from .serializers import (
    MenuCategorySchema,
    MenuItemSchema,
    PublicMenuCategorySchema,
    PublicMenuItemSchema,
    PublicRestaurantSchema,
    RestaurantMenuResponse,
)

logger = logging.getLogger(__name__)

DIET_FILTERS = {
    DietFilter.ALL: Q(),
    DietFilter.VEG: Q(is_vegetarian=True) | Q(is_vegan=True),
    DietFilter.NON_VEG: Q(is_vegetarian=False, is_vegan=False),
}


# =============================================================================
# Public menu
# =============================================================================


def serialize_public_restaurant(restaurant: Restaurant) -> PublicRestaurantSchema:
    """Serialize a Restaurant with its theme nested."""
    return PublicRestaurantSchema(
        id=restaurant.pk,
        name=restaurant.name,
        slug=restaurant.slug,
        description=restaurant.description,
        logo_url=restaurant.logo_url,
        banner_image_url=restaurant.banner_image_url,
        contact_phone=restaurant.contact_phone,
        contact_email=restaurant.contact_email,
        address=restaurant.address,
        theme=RestaurantTheme.model_validate(restaurant),
    )


def list_public_restaurants(caller: Caller) -> QuerySet[Restaurant]:
    """Active restaurants, ordered by name."""
    return store.select(caller, Restaurant).filter(is_active=True).order_by("name")


def parse_diet(value: str | None) -> DietFilter:
    """
    Parse the diet query parameter.

    Raises:
        ValidationFailed: for values other than all, veg, non-veg
    """
    if not value:
        return DietFilter.ALL
    if value not in DietFilter.values:
        raise ValidationFailed(
            "Invalid diet filter",
            details=[{"field": "diet", "message": "Must be one of all, veg, non-veg"}],
        )
    return DietFilter(value)


def get_public_menu(
    caller: Caller, slug: str, diet: DietFilter = DietFilter.ALL
) -> RestaurantMenuResponse:
    """
    Build the public menu for a restaurant.

    Inactive and missing restaurants raise the same NotFound, so the public
    surface never reveals that an inactive tenant exists.

    Raises:
        NotFound: if no active restaurant has this slug
    """
    restaurant = list_public_restaurants(caller).filter(slug=slug).first()
    if restaurant is None:
        raise NotFound("Restaurant not found")

    items = (
        store.select(caller, MenuItem)
        .filter(is_available=True)
        .filter(DIET_FILTERS[diet])
        .order_by("display_order", "name")
    )
    categories = (
        store.select(caller, MenuCategory)
        .filter(restaurant=restaurant, is_active=True)
        .order_by("display_order", "name")
        .prefetch_related(Prefetch("items", queryset=items))
    )

    return RestaurantMenuResponse(
        restaurant=serialize_public_restaurant(restaurant),
        categories=[
            PublicMenuCategorySchema(
                id=category.pk,
                name=category.name,
                description=category.description,
                items=[
                    PublicMenuItemSchema.model_validate(item)
                    for item in category.items.all()
                ],
            )
            for category in categories
        ],
        diet=diet.value,
    )


# =============================================================================
# Admin listings
# =============================================================================


def serialize_category(category: MenuCategory) -> MenuCategorySchema:
    """Serialize a MenuCategory with its restaurant's name."""
    restaurant_name = getattr(category, "restaurant_name", None)
    if restaurant_name is None:
        restaurant_name = category.restaurant.name
    return MenuCategorySchema(
        id=category.pk,
        restaurant_id=category.restaurant_id,
        restaurant_name=restaurant_name,
        name=category.name,
        description=category.description,
        display_order=category.display_order,
        is_active=category.is_active,
        created_at=category.created_at,
        updated_at=category.updated_at,
    )


def serialize_item(item: MenuItem) -> MenuItemSchema:
    """Serialize a MenuItem with its category and restaurant names."""
    category_name = getattr(item, "category_name", None)
    restaurant_name = getattr(item, "restaurant_name", None)
    if category_name is None or restaurant_name is None:
        category_name = item.category.name
        restaurant_name = item.category.restaurant.name
    return MenuItemSchema(
        id=item.pk,
        category_id=item.category_id,
        category_name=category_name,
        restaurant_name=restaurant_name,
        name=item.name,
        description=item.description,
        price=item.price,
        image_url=item.image_url,
        is_vegetarian=item.is_vegetarian,
        is_vegan=item.is_vegan,
        is_spicy=item.is_spicy,
        is_available=item.is_available,
        display_order=item.display_order,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def list_categories(
    caller: Caller, restaurant_id: UUID | str | None = None
) -> QuerySet[MenuCategory]:
    """Categories the caller may read, optionally for one restaurant."""
    categories = store.select(caller, MenuCategory).annotate(
        restaurant_name=F("restaurant__name")
    )
    if restaurant_id:
        categories = categories.filter(restaurant_id=restaurant_id)
    return categories.order_by("display_order", "name")


def list_items(
    caller: Caller,
    restaurant_id: UUID | str | None = None,
    category_id: UUID | str | None = None,
) -> QuerySet[MenuItem]:
    """Items the caller may read, optionally for one restaurant or category."""
    items = store.select(caller, MenuItem).annotate(
        category_name=F("category__name"),
        restaurant_name=F("category__restaurant__name"),
    )
    if restaurant_id:
        items = items.filter(category__restaurant_id=restaurant_id)
    if category_id:
        items = items.filter(category_id=category_id)
    return items.order_by("display_order", "name")
