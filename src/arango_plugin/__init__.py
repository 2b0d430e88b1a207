"""
arango_plugin – ArangoDB query-fragment engine and Dao / Service / Controller layers.

Import path convention::

    from arango_plugin.aql import aql, bind, literal
    from arango_plugin.dao import CollectionDescriptor, Dao, DaoRegistry, QueryExecutor
    from arango_plugin.application import BaseController, BaseService
    from arango_plugin.adapters.arango import ArangoConnector, connect
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
