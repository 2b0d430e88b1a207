"""Data access – collection descriptors, parameter schemas, executor and engine."""
from arango_plugin.dao.descriptor import CollectionDescriptor, collection_name_for, vertex_collections_for
from arango_plugin.dao.engine import WRITE_PROTECTED_ATTRIBUTES, Dao
from arango_plugin.dao.executor import ArangoConnectorPort, QueryExecutor, first_or_none, validate_count
from arango_plugin.dao.params import validate
from arango_plugin.dao.registry import DaoRegistry

__all__ = [
    "WRITE_PROTECTED_ATTRIBUTES",
    "ArangoConnectorPort",
    "CollectionDescriptor",
    "Dao",
    "DaoRegistry",
    "QueryExecutor",
    "collection_name_for",
    "first_or_none",
    "validate",
    "validate_count",
    "vertex_collections_for",
]
