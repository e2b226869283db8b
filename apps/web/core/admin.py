"""Admin registrations for core models."""

from typing import Any

from django.contrib import admin
from django.db import models, transaction
from django.http import HttpRequest

from .auth import Caller
from .models import THEME_FIELDS, Restaurant, UserRole
from .policy import Operation, authorize, can_perform, can_read, can_write, read_filter


def _caller(request: HttpRequest) -> Caller:
    caller = getattr(request, "caller", None)
    return caller if caller is not None else Caller.from_user(request.user)


class PolicyAdminMixin:
    """
    Routes admin site permission checks through the access policy.

    Staff status only opens the admin site; what a user can see or change
    there is decided by the same rules as every other caller.
    """

    model: type[models.Model]

    def get_queryset(self, request: HttpRequest) -> models.QuerySet[Any]:
        queryset = super().get_queryset(request)  # type: ignore[misc]
        return read_filter(_caller(request), queryset)

    def has_module_permission(self, request: HttpRequest) -> bool:
        return can_perform(_caller(request), self.model, Operation.SELECT)

    def has_view_permission(self, request: HttpRequest, obj: Any = None) -> bool:
        if obj is None:
            return can_perform(_caller(request), self.model, Operation.SELECT)
        return can_read(_caller(request), obj)

    def has_add_permission(self, request: HttpRequest, *args: Any) -> bool:
        return can_perform(_caller(request), self.model, Operation.INSERT)

    def has_change_permission(self, request: HttpRequest, obj: Any = None) -> bool:
        if obj is None:
            return can_perform(_caller(request), self.model, Operation.UPDATE)
        return can_write(_caller(request), obj, Operation.UPDATE)

    def has_delete_permission(self, request: HttpRequest, obj: Any = None) -> bool:
        if obj is None:
            return can_perform(_caller(request), self.model, Operation.DELETE)
        return can_write(_caller(request), obj, Operation.DELETE)

    def save_model(self, request: HttpRequest, obj: Any, form: Any, change: bool) -> None:
        operation = Operation.UPDATE if change else Operation.INSERT
        authorize(_caller(request), obj, operation)
        super().save_model(request, obj, form, change)  # type: ignore[misc]

    def delete_model(self, request: HttpRequest, obj: Any) -> None:
        authorize(_caller(request), obj, Operation.DELETE)
        with transaction.atomic():
            super().delete_model(request, obj)  # type: ignore[misc]

    def delete_queryset(self, request: HttpRequest, queryset: Any) -> None:
        caller = _caller(request)
        for obj in queryset:
            authorize(caller, obj, Operation.DELETE)
        with transaction.atomic():
            super().delete_queryset(request, queryset)  # type: ignore[misc]


@admin.register(Restaurant)
class RestaurantAdmin(PolicyAdminMixin, admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["name", "slug", "contact_email", "is_active", "updated_at"]
    list_filter = ["is_active"]
    search_fields = ["name", "slug", "contact_email"]
    prepopulated_fields = {"slug": ("name",)}
    readonly_fields = ["created_at", "updated_at"]
    fieldsets = [
        (None, {"fields": ["name", "slug", "description", "is_active"]}),
        ("Images", {"fields": ["logo_url", "banner_image_url"]}),
        ("Theme", {"fields": THEME_FIELDS, "classes": ["collapse"]}),
        ("Contact", {"fields": ["contact_phone", "contact_email", "address"]}),
        ("Timestamps", {"fields": ["created_at", "updated_at"]}),
    ]


@admin.register(UserRole)
class UserRoleAdmin(PolicyAdminMixin, admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["user", "role", "restaurant", "created_at"]
    list_filter = ["role"]
    search_fields = ["user__username", "user__email", "restaurant__name"]
    raw_id_fields = ["user"]
    readonly_fields = ["created_at"]
