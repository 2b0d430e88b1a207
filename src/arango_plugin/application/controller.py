"""Application – BaseController: validate, call the service, wrap the result."""
from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, TypeAdapter

from arango_plugin.aql.pagination import PageResult
from arango_plugin.application.service import BaseService
from arango_plugin.dao.params import Params, validate
from arango_plugin.kernel.errors import NotFoundError
from arango_plugin.observability.logging import get_logger

logger = get_logger(__name__)

SUCCESS_CODE: Final = 0


class BaseController:
    """Thin request boundary over a :class:`BaseService`.

    ``params_schema`` / ``result_schema`` accept anything pydantic can build a
    ``TypeAdapter`` for: a model class, ``list[Model]``, ``dict[str, Any]``...
    """

    def __init__(self, service: BaseService) -> None:
        self.service = service

    async def call_service(
        self,
        name: str,
        params: Any = None,
        params_schema: Any = None,
        result_schema: Any = None,
    ) -> dict[str, Any]:
        operation = f"{type(self).__name__}.{name}"
        method = getattr(self.service, name, None)
        if method is None or not callable(method):
            raise NotFoundError("service operation", name)

        if params_schema is not None:
            params = validate(TypeAdapter(params_schema), params, operation=operation)
            if isinstance(params, BaseModel) and not isinstance(params, Params):
                params = params.model_dump(by_alias=True)

        logger.debug("controller.call", operation=operation)
        result = await method(params)

        if result_schema is not None:
            validate(TypeAdapter(result_schema), _plain(result), operation=f"{operation}.result")
        return self.success(result)

    @staticmethod
    def success(data: Any) -> dict[str, Any]:
        """``{"code": 0, "data": data}``; page results are rendered as dicts."""
        return {"code": SUCCESS_CODE, "data": _plain(data)}


def _plain(data: Any) -> Any:
    if isinstance(data, PageResult):
        return data.to_dict()
    return data


__all__ = ["SUCCESS_CODE", "BaseController"]
