"""Data store exceptions."""


class StoreError(Exception):
    """Base exception for failures raised by the data store."""

    status_code = 400
    code = "store_error"

    def __init__(self, message: str, details: list[dict[str, str]] | None = None) -> None:
        self.message = message
        self.details = details or []
        super().__init__(message)


class AccessDenied(StoreError):
    """
    No policy rule allowed the operation.

    The message is deliberately generic; callers never learn which rule
    would have permitted the operation.
    """

    status_code = 403
    code = "access_denied"

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class ValidationFailed(StoreError):
    """Payload rejected before reaching the database."""

    code = "validation_error"


class ReferentialError(StoreError):
    """Save rejected by a foreign key or unique constraint."""

    code = "save_failed"


class NotFound(StoreError):
    """Row does not exist or is not visible to the caller."""

    status_code = 404
    code = "not_found"
