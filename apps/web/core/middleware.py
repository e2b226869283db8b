"""
Caller middleware - attaches the verified caller identity to the request.
"""

from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from .auth import Caller


class CallerMiddleware:
    """
    Middleware that attaches the current Caller to the request.

    The identity comes only from request.user, which Django's
    AuthenticationMiddleware resolved from the session. Headers, query
    parameters and bodies are never consulted.

    Sets request.caller (anonymous when nobody is logged in).
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        user = getattr(request, "user", None)
        request.caller = Caller.from_user(user)  # type: ignore[attr-defined]
        return self.get_response(request)
