"""
Custom managers for policy-scoped data access.

PolicyQuerySet.for_caller() filters rows by the read rules registered for
the model. TimeStampedQuerySet keeps updated_at in step with bulk updates.
"""

from typing import TYPE_CHECKING, Any, TypeVar

from django.db import models
from django.utils import timezone

if TYPE_CHECKING:
    from .auth import Caller

_T = TypeVar("_T", bound=models.Model)


class PolicyQuerySet(models.QuerySet[_T]):
    """
    QuerySet that can narrow itself to the rows a caller may read.

    Usage in views and services:
        restaurants = Restaurant.objects.for_caller(caller).order_by("name")

    SECURITY: Always use for_caller() for caller-facing reads, never raw querysets.
    """

    def for_caller(self, caller: "Caller") -> "PolicyQuerySet[_T]":
        # Lazy import to avoid circular dependency
        from .policy import read_filter

        return read_filter(caller, self)


class TimeStampedQuerySet(PolicyQuerySet[_T]):
    """QuerySet whose bulk update() always stamps updated_at."""

    def update(self, **kwargs: Any) -> int:
        kwargs.pop("created_at", None)
        kwargs["updated_at"] = timezone.now()
        return super().update(**kwargs)


class PolicyManager(models.Manager[_T]):
    """Default manager for policy-governed tables."""

    def get_queryset(self) -> PolicyQuerySet[_T]:
        return PolicyQuerySet(self.model, using=self._db)

    def for_caller(self, caller: "Caller") -> PolicyQuerySet[_T]:
        return self.get_queryset().for_caller(caller)


class TimeStampedManager(PolicyManager[_T]):
    """Default manager for mutable, timestamped tables."""

    def get_queryset(self) -> TimeStampedQuerySet[_T]:
        return TimeStampedQuerySet(self.model, using=self._db)
