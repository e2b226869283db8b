"""
Decorators for request handling and error reporting.
"""

import logging
from collections.abc import Callable
from functools import wraps
from typing import Any

from django.http import HttpRequest, JsonResponse

from .exceptions import AccessDenied, StoreError

logger = logging.getLogger(__name__)


def store_errors_as_json(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator that reports data store failures as JSON error responses.

    AccessDenied always returns the same body so responses never reveal
    which rule was missing. Other store errors carry their message and
    field details.

    Usage:
        @store_errors_as_json
        def restaurant_detail(request, pk):
            ...
    """

    @wraps(view_func)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
        try:
            return view_func(request, *args, **kwargs)
        except AccessDenied as e:
            return JsonResponse({"error": e.code}, status=e.status_code)
        except StoreError as e:
            logger.info("%s %s failed: %s", request.method, request.path, e.message)
            body: dict[str, Any] = {"error": e.code, "message": e.message}
            if e.details:
                body["details"] = e.details
            return JsonResponse(body, status=e.status_code)

    return wrapper
