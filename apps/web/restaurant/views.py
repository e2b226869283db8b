"""
Public menu API views - no authentication required.

These endpoints back the diner-facing pages:
- Restaurant directory (active restaurants)
- Per-restaurant themed menu (active categories, available items)
"""

from collections.abc import Callable
from functools import wraps
from typing import Any

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.cache import add_never_cache_headers
from django.views.decorators.cache import cache_control
from django.views.decorators.http import require_GET

from apps.web.core.decorators import store_errors_as_json
from apps.web.restaurant import services
from apps.web.restaurant.serializers import RestaurantListResponse


def _cors_headers() -> dict[str, str]:
    """CORS headers for public menu pages hosted elsewhere."""
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }


def _json_response(data: dict[str, Any], status: int = 200) -> JsonResponse:
    """Create a JSON response with CORS headers."""
    response = JsonResponse(data, status=status)
    for key, value in _cors_headers().items():
        response[key] = value
    return response


def public_errors(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Report store errors as uncacheable JSON with CORS headers.

    Apply outside cache_control: error responses are never cached.
    """
    handler = store_errors_as_json(view_func)

    @wraps(view_func)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        response: HttpResponse = handler(request, *args, **kwargs)
        if response.status_code >= 400:
            for key, value in _cors_headers().items():
                response[key] = value
            add_never_cache_headers(response)
        return response

    return wrapper


@require_GET
@public_errors
@cache_control(max_age=60, public=True)
def restaurant_list(request: HttpRequest) -> JsonResponse:
    """
    GET /api/restaurants

    Returns all active restaurants ordered by name.
    """
    restaurants = services.list_public_restaurants(request.caller)  # type: ignore[attr-defined]
    response = RestaurantListResponse(
        restaurants=[services.serialize_public_restaurant(r) for r in restaurants],
    )
    return _json_response(response.model_dump(mode="json"))


@require_GET
@public_errors
@cache_control(max_age=60, public=True)
def restaurant_menu(request: HttpRequest, slug: str) -> JsonResponse:
    """
    GET /api/restaurants/{slug}?diet=all|veg|non-veg

    Returns the restaurant, its active categories, and their available
    items. Inactive and unknown slugs both return 404.
    """
    diet = services.parse_diet(request.GET.get("diet"))
    menu = services.get_public_menu(request.caller, slug, diet)  # type: ignore[attr-defined]
    return _json_response(menu.model_dump(mode="json"))
