"""Application layer – services and controllers over the Dao engine."""
from arango_plugin.application.controller import SUCCESS_CODE, BaseController
from arango_plugin.application.service import DAO_OPERATIONS, BaseService

__all__ = ["DAO_OPERATIONS", "SUCCESS_CODE", "BaseController", "BaseService"]
