"""
Data store - policy-guarded access to every table.

All reads and writes made on behalf of a caller go through these functions.
Each one evaluates the access policy before the database is touched:

    select(caller, Restaurant)              -> rows the caller may read
    get(caller, MenuItem, pk)               -> one readable row or NotFound
    insert(caller, MenuCategory, values)    -> new row
    update(caller, MenuItem, pk, values)    -> updated row
    delete(caller, Restaurant, pk)          -> cascade counts

Writes to a missing row raise AccessDenied rather than NotFound when the
caller could not have written to the table at all, so denied callers learn
nothing about which rows exist.
"""

import logging
from typing import Any, TypeVar
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError, models, transaction

from .auth import Caller
from .exceptions import AccessDenied, NotFound, ReferentialError, ValidationFailed
from .policy import Operation, authorize, can_perform

logger = logging.getLogger(__name__)

_T = TypeVar("_T", bound=models.Model)

# Maintained by the store, never taken from caller input
PROTECTED_FIELDS = frozenset({"id", "pk", "created_at", "updated_at"})


def select(caller: Caller, model: type[_T]) -> models.QuerySet[_T]:
    """Rows of the table the caller may read."""
    return model._default_manager.for_caller(caller)  # type: ignore[attr-defined,no-any-return]


def get(caller: Caller, model: type[_T], pk: UUID | str) -> _T:
    """
    Fetch one row the caller may read.

    Raises:
        NotFound: if the row does not exist or is not readable by the caller
    """
    try:
        return select(caller, model).get(pk=pk)
    except (model.DoesNotExist, DjangoValidationError, ValueError) as exc:  # type: ignore[attr-defined]
        raise NotFound(f"{model._meta.verbose_name.capitalize()} not found") from exc


def insert(caller: Caller, model: type[_T], values: dict[str, Any]) -> _T:
    """
    Insert a row on behalf of the caller.

    Raises:
        AccessDenied: if no insert rule allows the new row
        ValidationFailed: if a value fails field validation
        ReferentialError: if a foreign key or unique constraint is violated
    """
    row = model(**_writable_values(model, values))
    authorize(caller, row, Operation.INSERT)
    _save(row)
    logger.info("Inserted %s %s for %s", model._meta.label, row.pk, caller)
    return row


def update(caller: Caller, model: type[_T], pk: UUID | str, values: dict[str, Any]) -> _T:
    """
    Update a row on behalf of the caller.

    The rule is checked against the row as stored and again against the
    row with the new values applied. Concurrent updates are last-write-wins.
    """
    row = _get_for_write(caller, model, pk, Operation.UPDATE)
    for name, value in _writable_values(model, values).items():
        setattr(row, name, value)
    authorize(caller, row, Operation.UPDATE)
    _save(row)
    logger.info("Updated %s %s for %s", model._meta.label, row.pk, caller)
    return row


def delete(caller: Caller, model: type[models.Model], pk: UUID | str) -> dict[str, int]:
    """
    Delete a row and everything that cascades from it, atomically.

    Returns:
        Deleted row counts keyed by model label
    """
    row = _get_for_write(caller, model, pk, Operation.DELETE)
    with transaction.atomic():
        total, per_model = row.delete()
    logger.info(
        "Deleted %s %s for %s (%d rows total)", model._meta.label, pk, caller, total
    )
    return per_model


def _get_for_write(
    caller: Caller, model: type[_T], pk: UUID | str, operation: Operation
) -> _T:
    try:
        row = model._base_manager.filter(pk=pk).first()
    except (DjangoValidationError, ValueError):
        row = None

    if row is None:
        if not can_perform(caller, model, operation):
            logger.warning(
                "Access denied: %s on %s for %s", operation, model._meta.label, caller
            )
            raise AccessDenied()
        raise NotFound(f"{model._meta.verbose_name.capitalize()} not found")

    authorize(caller, row, operation)
    return row


def _writable_values(model: type[models.Model], values: dict[str, Any]) -> dict[str, Any]:
    # Relations are written through their column, e.g. restaurant_id
    allowed = {field.attname for field in model._meta.concrete_fields}

    writable = {k: v for k, v in values.items() if k not in PROTECTED_FIELDS}
    unknown = sorted(set(writable) - allowed)
    if unknown:
        raise ValidationFailed(
            "Unknown fields",
            details=[{"field": name, "message": "Unknown field"} for name in unknown],
        )
    return writable


def _check_references(row: models.Model) -> None:
    """Reject foreign keys that point at rows that do not exist."""
    for field in row._meta.concrete_fields:
        if not field.is_relation or not field.many_to_one:
            continue
        value = getattr(row, field.attname)
        if value is None:
            continue
        related = field.related_model._base_manager  # type: ignore[union-attr]
        try:
            exists = related.filter(pk=value).exists()
        except (DjangoValidationError, ValueError):
            exists = False
        if not exists:
            raise ReferentialError(
                f"Referenced {field.verbose_name} does not exist",
                details=[{"field": field.name, "message": "Does not exist"}],
            )


def _save(row: models.Model) -> None:
    _check_references(row)

    try:
        row.full_clean(validate_unique=False, validate_constraints=False)
    except DjangoValidationError as exc:
        raise ValidationFailed(
            "Invalid values",
            details=[
                {"field": field, "message": message}
                for field, messages in exc.message_dict.items()
                for message in messages
            ],
        ) from exc

    try:
        with transaction.atomic():
            row.save()
    except IntegrityError as exc:
        logger.warning("Save failed for %s: %s", row._meta.label, exc)
        raise ReferentialError(f"Failed to save {row._meta.verbose_name}") from exc
    except DatabaseError as exc:
        # An update whose row was deleted since it was read
        if row._state.adding:
            raise
        logger.warning("Save failed for %s %s: %s", row._meta.label, row.pk, exc)
        raise NotFound(f"{row._meta.verbose_name.capitalize()} not found") from exc
