"""
Caller identity - who is performing a data store operation.

A Caller is built once per request from the identity Django's
authentication middleware has already verified, and is then passed
explicitly to every store call. Nothing in the store reads identity
from request input.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Caller:
    """
    Verified identity of the caller.

    Usage:
        caller = Caller.from_user(request.user)
        restaurants = store.select(caller, Restaurant)
    """

    user_id: int | None = None

    @classmethod
    def anonymous(cls) -> "Caller":
        return cls()

    @classmethod
    def from_user(cls, user: Any) -> "Caller":
        """Build a caller from an authenticated (or anonymous) Django user."""
        if user is None or not user.is_authenticated:
            return cls.anonymous()
        return cls(user_id=user.pk)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None

    def __str__(self) -> str:
        if self.is_anonymous:
            return "anonymous"
        return f"user:{self.user_id}"
