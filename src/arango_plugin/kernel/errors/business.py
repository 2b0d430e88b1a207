"""Business errors – everything a Dao operation reports to its caller."""

from __future__ import annotations

from typing import Any

from arango_plugin.kernel.errors.base import BaseError


class BusinessError(BaseError):
    """Tagged error surfaced by a Dao / Service / Controller operation."""

    default_code = "business_error"


class ValidationError(BusinessError):
    """Input does not meet the operation's schema.

    Raised before any query is issued. ``errors`` is a list of field-level
    failures (``loc`` / ``msg`` / ``type``).
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class UniquenessViolationError(BusinessError):
    """A single-result query returned more than one row."""

    default_code = "uniqueness_violation"

    def __init__(self, operation: str, count: int, **kwargs: Any) -> None:
        super().__init__(f"{operation} expected a single result, got {count}", **kwargs)
        self.operation = operation
        self.count = count


class NotFoundError(BusinessError):
    """A write expected to touch an active record and matched none."""

    default_code = "not_found"

    def __init__(self, resource: str, identifier: Any = None, **kwargs: Any) -> None:
        msg = f"{resource} not found"
        if identifier is not None:
            msg = f"{resource} '{identifier}' not found"
        super().__init__(msg, **kwargs)
        self.resource = resource
        self.identifier = identifier


class ExecutionError(BusinessError):
    """The database rejected or failed to run a query."""

    default_code = "execution_error"

    def __init__(self, operation: str, message: str, **kwargs: Any) -> None:
        super().__init__(f"{operation} failed: {message}", **kwargs)
        self.operation = operation


__all__ = [
    "BusinessError",
    "ExecutionError",
    "NotFoundError",
    "UniquenessViolationError",
    "ValidationError",
]
