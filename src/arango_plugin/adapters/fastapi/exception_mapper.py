"""FastAPI adapter – FastAPIExceptionMapper."""
from __future__ import annotations

from typing import Any, Callable

from arango_plugin.observability.logging import get_logger

logger = get_logger(__name__)


def _require_fastapi() -> None:
    try:
        import fastapi  # noqa: F401
    except ImportError as exc:
        raise ImportError(
            "Install 'arango-plugin[fastapi]' to use the FastAPI adapter"
        ) from exc


class FastAPIExceptionMapper:
    """Register error → HTTP status-code mappings on a FastAPI app.

    Error body schema::

        {"code": "not_found", "message": "...", "detail": {...}}

    Mappings
    --------
    ``ValidationError``           → 400
    ``NotFoundError``             → 404
    ``UniquenessViolationError``  → 409
    ``InfrastructureError``       → 503
    ``BaseError`` (anything else) → 500
    """

    def __init__(self) -> None:
        _require_fastapi()
        from arango_plugin.kernel.errors import (
            BaseError,
            InfrastructureError,
            NotFoundError,
            UniquenessViolationError,
            ValidationError,
        )

        # more-specific subtypes first
        self._map: list[tuple[type[Exception], int]] = [
            (ValidationError, 400),
            (NotFoundError, 404),
            (UniquenessViolationError, 409),
            (InfrastructureError, 503),
            (BaseError, 500),
        ]

    @property
    def mappings(self) -> list[tuple[type[Exception], int]]:
        return list(self._map)

    def status_for(self, exc: BaseException) -> int:
        for exc_type, status in self._map:
            if isinstance(exc, exc_type):
                return status
        return 500

    @staticmethod
    def body_for(exc: BaseException) -> dict[str, Any]:
        from arango_plugin.kernel.errors import BaseError

        if isinstance(exc, BaseError):
            body = exc.to_dict()
            body.pop("cause", None)
            return body
        return {"code": "error", "message": str(exc), "detail": {}}

    def register(self, app: Any) -> None:
        """Register all error handlers on a ``FastAPI`` or ``Starlette`` app."""
        from fastapi.responses import JSONResponse  # type: ignore[import-untyped]

        def make_handler(code: int) -> Callable[[Any, Any], Any]:
            def handler(request: Any, exc: Any) -> Any:  # noqa: ARG001
                if code >= 500:
                    logger.error("http.error", status=code, error=repr(exc))
                return JSONResponse(status_code=code, content=self.body_for(exc))

            return handler

        for exc_type, status in self._map:
            app.add_exception_handler(exc_type, make_handler(status))


__all__ = ["FastAPIExceptionMapper"]
