"""
Dashboard views - session authentication and the admin shell.
"""

import logging

from django.contrib.auth import authenticate, login, logout
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from pydantic import BaseModel, Field

from apps.web.core import store
from apps.web.core.decorators import store_errors_as_json
from apps.web.core.models import Role, UserRole
from apps.web.core.policy import has_role

from .api import parse_body

logger = logging.getLogger(__name__)


class LoginRequest(BaseModel):
    """Request body for POST /dashboard/login/."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


@require_POST
@store_errors_as_json
def login_view(request: HttpRequest) -> JsonResponse:
    """
    POST /dashboard/login/

    Start a session from username/password credentials.
    """
    credentials = parse_body(request, LoginRequest)
    user = authenticate(
        request,
        username=credentials.username.strip(),
        password=credentials.password,
    )
    if user is None:
        logger.info("Failed login for %s", credentials.username)
        return JsonResponse(
            {"error": "invalid_credentials", "message": "Invalid username or password"},
            status=401,
        )

    login(request, user)
    return JsonResponse({"user_id": user.pk, "username": user.get_username()})


@require_POST
def logout_view(request: HttpRequest) -> JsonResponse:
    """
    POST /dashboard/logout/

    End the session.
    """
    logout(request)
    return JsonResponse({"status": "ok"})


@require_GET
def home(request: HttpRequest) -> JsonResponse:
    """
    GET /dashboard/

    Admin gate for the dashboard client. This check only decides what the
    client shows; every data call is still checked by the store.
    """
    caller = request.caller  # type: ignore[attr-defined]
    if caller.is_anonymous:
        return JsonResponse({"error": "not_authenticated"}, status=401)
    if not has_role(caller, Role.ADMIN):
        return JsonResponse(
            {"error": "access_denied", "message": "Access denied. Admin privileges required."},
            status=403,
        )
    return JsonResponse({"status": "ok", "is_admin": True})


@require_GET
@ensure_csrf_cookie
def me(request: HttpRequest) -> JsonResponse:
    """
    GET /dashboard/api/me

    The caller's identity and role grants.
    """
    caller = request.caller  # type: ignore[attr-defined]
    if caller.is_anonymous:
        return JsonResponse({"user_id": None, "roles": [], "is_admin": False})

    grants = store.select(caller, UserRole).filter(user_id=caller.user_id)
    return JsonResponse(
        {
            "user_id": caller.user_id,
            "username": request.user.get_username(),
            "roles": [
                {
                    "role": grant.role,
                    "restaurant_id": str(grant.restaurant_id) if grant.restaurant_id else None,
                }
                for grant in grants
            ],
            "is_admin": has_role(caller, Role.ADMIN),
        }
    )
