"""Access rules for menu tables."""

from apps.web.core.policy import ALL_OPERATIONS, FieldIs, Operation, Rule, register
from apps.web.core.rules import is_admin

from .models import MenuCategory, MenuItem


def register_rules() -> None:
    register(
        MenuCategory,
        Rule("Anyone can view active categories", {Operation.SELECT}, FieldIs("is_active", True)),
        Rule("Admins can manage categories", ALL_OPERATIONS, is_admin),
    )
    register(
        MenuItem,
        Rule("Anyone can view available items", {Operation.SELECT}, FieldIs("is_available", True)),
        Rule("Admins can manage items", ALL_OPERATIONS, is_admin),
    )
