"""Admin registration for menu models."""

from django.contrib import admin

from apps.web.core.admin import PolicyAdminMixin
from apps.web.restaurant.models import MenuCategory, MenuItem


@admin.register(MenuCategory)
class MenuCategoryAdmin(PolicyAdminMixin, admin.ModelAdmin):  # type: ignore[type-arg]
    """Admin for menu categories."""

    list_display = ["name", "restaurant", "display_order", "is_active"]
    list_filter = ["is_active", "restaurant"]
    search_fields = ["name", "restaurant__name"]
    readonly_fields = ["created_at", "updated_at"]


@admin.register(MenuItem)
class MenuItemAdmin(PolicyAdminMixin, admin.ModelAdmin):  # type: ignore[type-arg]
    """Admin for menu items."""

    list_display = [
        "name",
        "category",
        "price",
        "is_available",
        "is_vegetarian",
        "is_vegan",
        "is_spicy",
    ]
    list_filter = ["is_available", "is_vegetarian", "is_vegan", "is_spicy"]
    search_fields = ["name", "category__name", "category__restaurant__name"]
    readonly_fields = ["created_at", "updated_at"]

    fieldsets = [
        (None, {"fields": ["category", "name", "description", "price", "image_url"]}),
        ("Dietary", {"fields": ["is_vegetarian", "is_vegan", "is_spicy"]}),
        ("Display", {"fields": ["is_available", "display_order"]}),
        ("Timestamps", {"fields": ["created_at", "updated_at"]}),
    ]
