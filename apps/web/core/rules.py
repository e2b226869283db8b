"""Access rules for tenant and role tables."""

from .models import Restaurant, Role, UserRole
from .policy import (
    ALL_OPERATIONS,
    FieldIs,
    HasRole,
    IsAuthenticated,
    Operation,
    OwnedByCaller,
    Rule,
    register,
)

is_admin = IsAuthenticated() & HasRole(Role.ADMIN)


def register_rules() -> None:
    register(
        Restaurant,
        Rule("Anyone can view active restaurants", {Operation.SELECT}, FieldIs("is_active", True)),
        Rule("Admins can manage restaurants", ALL_OPERATIONS, is_admin),
    )
    register(
        UserRole,
        Rule(
            "Users can view their own roles",
            {Operation.SELECT},
            IsAuthenticated() & (OwnedByCaller("user_id") | HasRole(Role.ADMIN)),
        ),
        Rule("Admins can manage all roles", ALL_OPERATIONS, is_admin),
    )
