"""Kernel – framework-agnostic building blocks (errors, time, text)."""

from arango_plugin.kernel.errors import (
    BaseError,
    BusinessError,
    ConnectionError,
    ExecutionError,
    InfrastructureError,
    NotFoundError,
    UniquenessViolationError,
    ValidationError,
)

__all__ = [
    "BaseError",
    "BusinessError",
    "ConnectionError",
    "ExecutionError",
    "InfrastructureError",
    "NotFoundError",
    "UniquenessViolationError",
    "ValidationError",
]
