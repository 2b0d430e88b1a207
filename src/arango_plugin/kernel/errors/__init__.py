"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── BusinessError               (business.py)
    │   ├── ValidationError
    │   ├── UniquenessViolationError
    │   ├── NotFoundError
    │   └── ExecutionError
    └── InfrastructureError         (infrastructure.py)
        └── ConnectionError
"""

from arango_plugin.kernel.errors.base import BaseError
from arango_plugin.kernel.errors.business import (
    BusinessError,
    ExecutionError,
    NotFoundError,
    UniquenessViolationError,
    ValidationError,
)
from arango_plugin.kernel.errors.infrastructure import ConnectionError, InfrastructureError

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
