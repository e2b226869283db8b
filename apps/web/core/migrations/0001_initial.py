import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

hex_color = django.core.validators.RegexValidator(
    message="Enter a hex color like #FF6B35", regex="^#[0-9A-Fa-f]{6}$"
)


def color(default):
    return models.CharField(default=default, max_length=7, validators=[hex_color])


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Restaurant",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "slug",
                    models.SlugField(
                        help_text="URL-safe identifier used in public links",
                        max_length=100,
                        unique=True,
                    ),
                ),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("logo_url", models.CharField(blank=True, max_length=500)),
                ("banner_image_url", models.CharField(blank=True, max_length=500)),
                ("theme_color", color("#FF6B35")),
                ("background_color", color("#FFF5F0")),
                ("text_color", color("#FFFFFF")),
                ("card_color", color("#242a38")),
                ("card_text_color", color("#FFFFFF")),
                ("price_color", color("#FF8A4C")),
                ("category_header_color", color("#FF8A4C")),
                ("header_gradient_start", color("#000000")),
                ("header_gradient_end", color("#1a1f2e")),
                ("button_color", color("#FF6B35")),
                ("button_text_color", color("#FFFFFF")),
                ("border_color", color("#2a3441")),
                (
                    "font_family",
                    models.CharField(
                        choices=[
                            ("Inter", "Inter (Modern)"),
                            ("Poppins", "Poppins (Friendly)"),
                            ("Playfair Display", "Playfair Display (Elegant)"),
                            ("Montserrat", "Montserrat (Clean)"),
                            ("Roboto", "Roboto (Classic)"),
                            ("Lora", "Lora (Serif)"),
                            ("Nunito", "Nunito (Rounded)"),
                            ("Raleway", "Raleway (Stylish)"),
                            ("Open Sans", "Open Sans (Readable)"),
                            ("Oswald", "Oswald (Bold)"),
                        ],
                        default="Inter",
                        max_length=50,
                    ),
                ),
                ("contact_phone", models.CharField(blank=True, max_length=30)),
                ("contact_email", models.EmailField(blank=True, max_length=254)),
                ("address", models.TextField(blank=True)),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={
                "ordering": ["name"],
                "abstract": False,
                "indexes": [
                    models.Index(fields=["is_active"], name="restaurant_active_idx")
                ],
            },
        ),
        migrations.CreateModel(
            name="UserRole",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("admin", "Admin"),
                            ("manager", "Manager"),
                            ("user", "User"),
                        ],
                        default="user",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "restaurant",
                    models.ForeignKey(
                        blank=True,
                        help_text="Null for global grants",
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="role_grants",
                        to="core.restaurant",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="role_grants",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["user"], name="user_role_user_idx")
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user", "role", "restaurant"),
                        name="unique_role_per_user_and_restaurant",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("restaurant__isnull", True)),
                        fields=("user", "role"),
                        name="unique_global_role_per_user",
                    ),
                ],
            },
        ),
    ]
