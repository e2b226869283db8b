"""
Authorization policy engine.

Each table registers a list of allow rules. A rule names the operations it
covers and a condition evaluated against the caller and, for row
predicates, the target row. An operation is allowed when at least one
registered rule for that table and operation matches; anything else is
denied. There are no deny rules.

Conditions evaluate two ways:
- matches(caller, row) for a single row (writes, detail reads)
- q(caller) for querysets, returning a Q or a constant True/False

Usage:
    register(
        Restaurant,
        Rule("public read", {Operation.SELECT}, FieldIs("is_active", True)),
        Rule("admin manage", ALL_OPERATIONS, IsAuthenticated() & HasRole(Role.ADMIN)),
    )
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeVar

from django.db import models
from django.db.models import Q

from .auth import Caller
from .exceptions import AccessDenied

logger = logging.getLogger(__name__)

_T = TypeVar("_T", bound=models.Model)


class Operation(StrEnum):
    """Data store operations subject to policy."""

    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


WRITE_OPERATIONS = frozenset({Operation.INSERT, Operation.UPDATE, Operation.DELETE})
ALL_OPERATIONS = frozenset(Operation)


# =============================================================================
# Role check (privileged)
# =============================================================================


def has_role(caller: Caller, role: str) -> bool:
    """
    Check whether the caller holds a role grant, in any restaurant scope.

    Reads grants through UserRole.grants, which is never filtered by policy,
    so evaluating a rule does not depend on the caller being able to read
    the UserRole table.
    """
    if caller.is_anonymous:
        return False

    # Lazy import to avoid circular dependency
    from .models import UserRole

    return UserRole.grants.filter(user_id=caller.user_id, role=role).exists()


# =============================================================================
# Conditions
# =============================================================================


class Condition:
    """Base condition. Subclasses implement q() and matches()."""

    def q(self, caller: Caller) -> Q | bool:
        raise NotImplementedError

    def matches(self, caller: Caller, row: models.Model) -> bool:
        raise NotImplementedError

    def __or__(self, other: "Condition") -> "AnyOf":
        return AnyOf(self, other)

    def __and__(self, other: "Condition") -> "AllOf":
        return AllOf(self, other)


class IsAuthenticated(Condition):
    """Caller has a verified identity."""

    def q(self, caller: Caller) -> Q | bool:
        return caller.is_authenticated

    def matches(self, caller: Caller, row: models.Model) -> bool:
        return caller.is_authenticated

    def __repr__(self) -> str:
        return "IsAuthenticated()"


class HasRole(Condition):
    """Caller holds the given role."""

    def __init__(self, role: str) -> None:
        self.role = role

    def q(self, caller: Caller) -> Q | bool:
        return has_role(caller, self.role)

    def matches(self, caller: Caller, row: models.Model) -> bool:
        return has_role(caller, self.role)

    def __repr__(self) -> str:
        return f"HasRole({self.role!r})"


class FieldIs(Condition):
    """Row column equals a constant."""

    def __init__(self, field: str, value: Any) -> None:
        self.field = field
        self.value = value

    def q(self, caller: Caller) -> Q | bool:
        return Q(**{self.field: self.value})

    def matches(self, caller: Caller, row: models.Model) -> bool:
        return bool(getattr(row, self.field) == self.value)

    def __repr__(self) -> str:
        return f"FieldIs({self.field!r}, {self.value!r})"


class OwnedByCaller(Condition):
    """Row's user column is the caller's id."""

    def __init__(self, field: str = "user_id") -> None:
        self.field = field

    def q(self, caller: Caller) -> Q | bool:
        if caller.is_anonymous:
            return False
        return Q(**{self.field: caller.user_id})

    def matches(self, caller: Caller, row: models.Model) -> bool:
        return caller.is_authenticated and getattr(row, self.field) == caller.user_id

    def __repr__(self) -> str:
        return f"OwnedByCaller({self.field!r})"


class AnyOf(Condition):
    """At least one condition holds."""

    def __init__(self, *conditions: Condition) -> None:
        self.conditions = conditions

    def q(self, caller: Caller) -> Q | bool:
        parts: list[Q] = []
        for condition in self.conditions:
            result = condition.q(caller)
            if result is True:
                return True
            if result is not False:
                parts.append(result)
        return _combine(parts, Q.OR) if parts else False

    def matches(self, caller: Caller, row: models.Model) -> bool:
        return any(c.matches(caller, row) for c in self.conditions)

    def __repr__(self) -> str:
        return f"AnyOf{self.conditions!r}"


class AllOf(Condition):
    """Every condition holds."""

    def __init__(self, *conditions: Condition) -> None:
        self.conditions = conditions

    def q(self, caller: Caller) -> Q | bool:
        parts: list[Q] = []
        for condition in self.conditions:
            result = condition.q(caller)
            if result is False:
                return False
            if result is not True:
                parts.append(result)
        return _combine(parts, Q.AND) if parts else True

    def matches(self, caller: Caller, row: models.Model) -> bool:
        return all(c.matches(caller, row) for c in self.conditions)

    def __repr__(self) -> str:
        return f"AllOf{self.conditions!r}"


def _combine(parts: list[Q], connector: str) -> Q:
    combined = parts[0]
    for part in parts[1:]:
        combined = combined | part if connector == Q.OR else combined & part
    return combined


# =============================================================================
# Rules and registry
# =============================================================================


@dataclass(frozen=True)
class Rule:
    """An allow rule for one table."""

    name: str
    operations: Iterable[Operation]
    condition: Condition

    def __post_init__(self) -> None:
        object.__setattr__(self, "operations", frozenset(self.operations))


_registry: dict[type[models.Model], list[Rule]] = {}


def register(model: type[models.Model], *rules: Rule) -> None:
    """Register allow rules for a table. Called from AppConfig.ready()."""
    _registry.setdefault(model._meta.concrete_model, []).extend(rules)


def rules_for(model: type[models.Model], operation: Operation) -> list[Rule]:
    """Rules covering an operation on a table. Empty means always denied."""
    rules = _registry.get(model._meta.concrete_model, [])
    return [r for r in rules if operation in r.operations]


# =============================================================================
# Guards
# =============================================================================


def is_allowed(caller: Caller, row: models.Model, operation: Operation) -> bool:
    """Evaluate the rule table for a single row."""
    for rule in rules_for(type(row), operation):
        if rule.condition.matches(caller, row):
            logger.debug(
                "Allowed %s on %s for %s by rule %r",
                operation,
                row._meta.label,
                caller,
                rule.name,
            )
            return True
    logger.debug("Denied %s on %s for %s", operation, row._meta.label, caller)
    return False


def can_read(caller: Caller, row: models.Model) -> bool:
    return is_allowed(caller, row, Operation.SELECT)


def can_write(caller: Caller, row: models.Model, operation: Operation) -> bool:
    if operation not in WRITE_OPERATIONS:
        raise ValueError(f"{operation} is not a write operation")
    return is_allowed(caller, row, operation)


def can_perform(caller: Caller, model: type[models.Model], operation: Operation) -> bool:
    """
    Check whether any row of the table could be acted on.

    Used for table-level gates (e.g. the admin site) where no row is at hand.
    Only rules whose condition ignores row columns can be decided here, so a
    rule is counted when its queryset form is not a constant False.
    """
    return any(r.condition.q(caller) is not False for r in rules_for(model, operation))


def authorize(caller: Caller, row: models.Model, operation: Operation) -> None:
    """
    Raise AccessDenied unless a rule allows the operation on the row.

    Raises:
        AccessDenied: generic, never names the rule that would have allowed it
    """
    if not is_allowed(caller, row, operation):
        logger.warning(
            "Access denied: %s on %s for %s", operation, row._meta.label, caller
        )
        raise AccessDenied()


def read_filter(caller: Caller, queryset: models.QuerySet[_T]) -> models.QuerySet[_T]:
    """Narrow a queryset to the rows the caller may select."""
    conditions = [r.condition for r in rules_for(queryset.model, Operation.SELECT)]
    if not conditions:
        return queryset.none()

    predicate = AnyOf(*conditions).q(caller)
    if predicate is True:
        return queryset
    if predicate is False:
        return queryset.none()
    return queryset.filter(predicate)
