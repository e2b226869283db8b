"""
Core models - Multi-tenancy foundation.

Restaurant is the tenant root. Mutable tenant data inherits from
TimeStampedModel; UserRole grants drive the access policy.
"""

import uuid
from typing import Any

from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models

from .managers import PolicyManager, TimeStampedManager

hex_color_validator = RegexValidator(
    regex=r"^#[0-9A-Fa-f]{6}$",
    message="Enter a hex color like #FF6B35",
)


class TimeStampedModel(models.Model):
    """
    Abstract base for mutable, policy-governed tables.

    Provides:
    - UUID primary key
    - created_at, written once at insert
    - updated_at, rewritten on every update whatever the caller sent
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TimeStampedManager()

    class Meta:
        abstract = True

    def save(self, *args: Any, **kwargs: Any) -> None:
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            fields = set(update_fields)
            fields.discard("created_at")
            fields.add("updated_at")
            kwargs["update_fields"] = fields
        elif not self._state.adding:
            # created_at is write-once
            kwargs["update_fields"] = [
                f.name
                for f in self._meta.concrete_fields
                if not f.primary_key and f.name != "created_at"
            ]
        super().save(*args, **kwargs)


class FontFamily(models.TextChoices):
    """Fonts offered for the public menu page."""

    INTER = "Inter", "Inter (Modern)"
    POPPINS = "Poppins", "Poppins (Friendly)"
    PLAYFAIR_DISPLAY = "Playfair Display", "Playfair Display (Elegant)"
    MONTSERRAT = "Montserrat", "Montserrat (Clean)"
    ROBOTO = "Roboto", "Roboto (Classic)"
    LORA = "Lora", "Lora (Serif)"
    NUNITO = "Nunito", "Nunito (Rounded)"
    RALEWAY = "Raleway", "Raleway (Stylish)"
    OPEN_SANS = "Open Sans", "Open Sans (Readable)"
    OSWALD = "Oswald", "Oswald (Bold)"


THEME_FIELDS = [
    "theme_color",
    "background_color",
    "text_color",
    "card_color",
    "card_text_color",
    "price_color",
    "category_header_color",
    "header_gradient_start",
    "header_gradient_end",
    "button_color",
    "button_text_color",
    "border_color",
    "font_family",
]


def _color(default: str) -> models.CharField:  # type: ignore[type-arg]
    return models.CharField(
        max_length=7,
        default=default,
        validators=[hex_color_validator],
    )


class Restaurant(TimeStampedModel):
    """
    Tenant - a restaurant and its public menu page.

    Categories and items belong to a Restaurant and are deleted with it.
    """

    slug = models.SlugField(
        max_length=100,
        unique=True,
        help_text="URL-safe identifier used in public links",
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    logo_url = models.CharField(max_length=500, blank=True)
    banner_image_url = models.CharField(max_length=500, blank=True)

    # Theme
    theme_color = _color("#FF6B35")
    background_color = _color("#FFF5F0")
    text_color = _color("#FFFFFF")
    card_color = _color("#242a38")
    card_text_color = _color("#FFFFFF")
    price_color = _color("#FF8A4C")
    category_header_color = _color("#FF8A4C")
    header_gradient_start = _color("#000000")
    header_gradient_end = _color("#1a1f2e")
    button_color = _color("#FF6B35")
    button_text_color = _color("#FFFFFF")
    border_color = _color("#2a3441")
    font_family = models.CharField(
        max_length=50,
        choices=FontFamily.choices,
        default=FontFamily.INTER,
    )

    # Contact
    contact_phone = models.CharField(max_length=30, blank=True)
    contact_email = models.EmailField(blank=True)
    address = models.TextField(blank=True)

    # Status
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["is_active"], name="restaurant_active_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class Role(models.TextChoices):
    """Roles a user can be granted."""

    ADMIN = "admin", "Admin"
    MANAGER = "manager", "Manager"
    USER = "user", "User"


class UserRole(models.Model):
    """
    Role grant for a user, optionally scoped to one restaurant.

    A null restaurant is a global grant. The same role cannot be granted
    twice for the same scope.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="role_grants",
    )
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.USER,
    )
    restaurant = models.ForeignKey(
        Restaurant,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="role_grants",
        help_text="Null for global grants",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = PolicyManager()
    # Unfiltered path for role checks; only the policy engine uses it.
    grants = models.Manager()

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "role", "restaurant"],
                name="unique_role_per_user_and_restaurant",
            ),
            models.UniqueConstraint(
                fields=["user", "role"],
                condition=models.Q(restaurant__isnull=True),
                name="unique_global_role_per_user",
            ),
        ]
        indexes = [
            models.Index(fields=["user"], name="user_role_user_idx"),
        ]

    def __str__(self) -> str:
        if self.restaurant_id:
            return f"{self.user} - {self.role} ({self.restaurant})"
        return f"{self.user} - {self.role}"
