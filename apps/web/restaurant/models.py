"""
Restaurant models - Menu categories and items.

Both follow the TimeStampedModel pattern. Categories belong to a
Restaurant and items belong to a category; deletes cascade down the chain.
"""

from django.core.validators import MinValueValidator
from django.db import models

from apps.web.core.models import Restaurant, TimeStampedModel


class DietFilter(models.TextChoices):
    """Dietary filter offered on the public menu page."""

    ALL = "all", "All"
    VEG = "veg", "Vegetarian or vegan"
    NON_VEG = "non-veg", "Neither vegetarian nor vegan"


class MenuCategory(TimeStampedModel):
    """
    Category within a restaurant's menu (e.g., Starters, Mains, Desserts).

    display_order orders categories within one restaurant only.
    """

    restaurant = models.ForeignKey(
        Restaurant,
        on_delete=models.CASCADE,
        related_name="categories",
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    display_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["display_order", "name"]
        verbose_name_plural = "menu categories"
        indexes = [
            models.Index(fields=["restaurant", "is_active"], name="category_restaurant_idx"),
            models.Index(fields=["display_order"], name="category_order_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.restaurant.name} > {self.name}"


class MenuItem(TimeStampedModel):
    """
    Individual menu item.

    is_available=False hides the item from the public menu. Vegetarian and
    vegan are independent flags; nothing stops both being set.
    """

    category = models.ForeignKey(
        MenuCategory,
        on_delete=models.CASCADE,
        related_name="items",
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(0)],
    )
    image_url = models.CharField(max_length=500, blank=True)

    # Dietary information
    is_vegetarian = models.BooleanField(default=False)
    is_vegan = models.BooleanField(default=False)
    is_spicy = models.BooleanField(default=False)

    is_available = models.BooleanField(default=True)
    display_order = models.IntegerField(default=0)

    class Meta:
        ordering = ["display_order", "name"]
        indexes = [
            models.Index(fields=["category", "is_available"], name="item_category_idx"),
            models.Index(fields=["display_order"], name="item_order_idx"),
        ]

    def __str__(self) -> str:
        return self.name

    @property
    def is_veg(self) -> bool:
        """Vegetarian or vegan, as the diet filter groups them."""
        return self.is_vegetarian or self.is_vegan
