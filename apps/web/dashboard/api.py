"""
Dashboard JSON API - admin CRUD over restaurants, menus and roles.

Every handler acts on behalf of request.caller through the data store, so
the access policy decides what each call may see and change:

    GET    /dashboard/api/restaurants            list
    POST   /dashboard/api/restaurants            create
    GET    /dashboard/api/restaurants/{id}       detail
    PATCH  /dashboard/api/restaurants/{id}       partial update
    DELETE /dashboard/api/restaurants/{id}       delete with cascade

categories, items and roles follow the same shape.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar
from uuid import UUID

from django.db import models
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_http_methods

from pydantic import BaseModel, ValidationError

from apps.web.core import store
from apps.web.core.auth import Caller
from apps.web.core.decorators import store_errors_as_json
from apps.web.core.exceptions import ValidationFailed
from apps.web.core.models import Restaurant, UserRole
from apps.web.core.serializers import (
    RestaurantCreate,
    RestaurantSchema,
    RestaurantUpdate,
    UserRoleCreate,
    UserRoleSchema,
    UserRoleUpdate,
)
from apps.web.restaurant import services
from apps.web.restaurant.models import MenuCategory, MenuItem
from apps.web.restaurant.serializers import (
    MenuCategoryCreate,
    MenuCategoryUpdate,
    MenuItemCreate,
    MenuItemUpdate,
)

logger = logging.getLogger(__name__)

_S = TypeVar("_S", bound=BaseModel)


# =============================================================================
# Request helpers
# =============================================================================


def parse_body(request: HttpRequest, schema: type[_S]) -> _S:
    """
    Validate a JSON request body against a pydantic schema.

    Raises:
        ValidationFailed: with one detail per invalid field
    """
    try:
        return schema.model_validate_json(request.body or b"{}")
    except ValidationError as exc:
        raise ValidationFailed(
            "Invalid request body",
            details=[
                {
                    "field": ".".join(str(part) for part in error["loc"]) or "body",
                    "message": error["msg"],
                }
                for error in exc.errors()
            ],
        ) from exc


def _uuid_param(request: HttpRequest, name: str) -> UUID | None:
    value = request.GET.get(name)
    if not value:
        return None
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValidationFailed(
            "Invalid query parameter",
            details=[{"field": name, "message": "Must be a UUID"}],
        ) from exc


def _caller(request: HttpRequest) -> Caller:
    return request.caller  # type: ignore[attr-defined,no-any-return]


def _serialize_restaurant(restaurant: Restaurant) -> dict[str, Any]:
    return RestaurantSchema.model_validate(restaurant).model_dump(mode="json")


def _serialize_role(grant: UserRole) -> dict[str, Any]:
    return UserRoleSchema.model_validate(grant).model_dump(mode="json")


def _serialize_category(category: MenuCategory) -> dict[str, Any]:
    return services.serialize_category(category).model_dump(mode="json")


def _serialize_item(item: MenuItem) -> dict[str, Any]:
    return services.serialize_item(item).model_dump(mode="json")


def _detail(
    request: HttpRequest,
    model: type[models.Model],
    pk: UUID,
    update_schema: type[BaseModel],
    serialize: Callable[[Any], dict[str, Any]],
) -> JsonResponse:
    """GET, PATCH and DELETE on one row."""
    caller = _caller(request)

    if request.method == "PATCH":
        payload = parse_body(request, update_schema)
        row = store.update(caller, model, pk, payload.model_dump(exclude_unset=True))
        return JsonResponse(serialize(row))

    if request.method == "DELETE":
        deleted = store.delete(caller, model, pk)
        return JsonResponse({"deleted": deleted})

    return JsonResponse(serialize(store.get(caller, model, pk)))


# =============================================================================
# Restaurants
# =============================================================================


@require_http_methods(["GET", "POST"])
@store_errors_as_json
def restaurants(request: HttpRequest) -> JsonResponse:
    """
    GET  /dashboard/api/restaurants - restaurants the caller may read
    POST /dashboard/api/restaurants - create a restaurant
    """
    caller = _caller(request)

    if request.method == "POST":
        payload = parse_body(request, RestaurantCreate)
        restaurant = store.insert(caller, Restaurant, payload.model_dump())
        return JsonResponse(_serialize_restaurant(restaurant), status=201)

    rows = store.select(caller, Restaurant).order_by("name")
    return JsonResponse({"restaurants": [_serialize_restaurant(r) for r in rows]})


@require_http_methods(["GET", "PATCH", "DELETE"])
@store_errors_as_json
def restaurant_detail(request: HttpRequest, pk: UUID) -> JsonResponse:
    """GET/PATCH/DELETE /dashboard/api/restaurants/{id}"""
    return _detail(request, Restaurant, pk, RestaurantUpdate, _serialize_restaurant)


# =============================================================================
# Menu categories
# =============================================================================


@require_http_methods(["GET", "POST"])
@store_errors_as_json
def categories(request: HttpRequest) -> JsonResponse:
    """
    GET  /dashboard/api/categories?restaurant={id}
    POST /dashboard/api/categories
    """
    caller = _caller(request)

    if request.method == "POST":
        payload = parse_body(request, MenuCategoryCreate)
        category = store.insert(caller, MenuCategory, payload.model_dump())
        return JsonResponse(_serialize_category(category), status=201)

    rows = services.list_categories(caller, restaurant_id=_uuid_param(request, "restaurant"))
    return JsonResponse({"categories": [_serialize_category(c) for c in rows]})


@require_http_methods(["GET", "PATCH", "DELETE"])
@store_errors_as_json
def category_detail(request: HttpRequest, pk: UUID) -> JsonResponse:
    """GET/PATCH/DELETE /dashboard/api/categories/{id}"""
    return _detail(request, MenuCategory, pk, MenuCategoryUpdate, _serialize_category)


# =============================================================================
# Menu items
# =============================================================================


@require_http_methods(["GET", "POST"])
@store_errors_as_json
def items(request: HttpRequest) -> JsonResponse:
    """
    GET  /dashboard/api/items?restaurant={id}&category={id}
    POST /dashboard/api/items
    """
    caller = _caller(request)

    if request.method == "POST":
        payload = parse_body(request, MenuItemCreate)
        item = store.insert(caller, MenuItem, payload.model_dump())
        return JsonResponse(_serialize_item(item), status=201)

    rows = services.list_items(
        caller,
        restaurant_id=_uuid_param(request, "restaurant"),
        category_id=_uuid_param(request, "category"),
    )
    return JsonResponse({"items": [_serialize_item(i) for i in rows]})


@require_http_methods(["GET", "PATCH", "DELETE"])
@store_errors_as_json
def item_detail(request: HttpRequest, pk: UUID) -> JsonResponse:
    """GET/PATCH/DELETE /dashboard/api/items/{id}"""
    return _detail(request, MenuItem, pk, MenuItemUpdate, _serialize_item)


# =============================================================================
# Role grants
# =============================================================================


@require_http_methods(["GET", "POST"])
@store_errors_as_json
def roles(request: HttpRequest) -> JsonResponse:
    """
    GET  /dashboard/api/roles - own grants, or every grant for admins
    POST /dashboard/api/roles - grant a role
    """
    caller = _caller(request)

    if request.method == "POST":
        payload = parse_body(request, UserRoleCreate)
        grant = store.insert(caller, UserRole, payload.model_dump())
        return JsonResponse(_serialize_role(grant), status=201)

    rows = store.select(caller, UserRole).order_by("created_at")
    return JsonResponse({"roles": [_serialize_role(g) for g in rows]})


@require_http_methods(["GET", "PATCH", "DELETE"])
@store_errors_as_json
def role_detail(request: HttpRequest, pk: UUID) -> JsonResponse:
    """GET/PATCH/DELETE /dashboard/api/roles/{id}"""
    return _detail(request, UserRole, pk, UserRoleUpdate, _serialize_role)
