"""Observability – structured logging helpers."""
from arango_plugin.observability.logging.factory import JsonLoggerFactory
from arango_plugin.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter
from arango_plugin.observability.logging.processors import RedactionProcessor, get_logger

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "JsonLoggerFactory",
    "RedactionProcessor",
    "SensitiveFieldsFilter",
    "get_logger",
]
