"""Query executor – compile, log, run and check the shape of the result."""
from __future__ import annotations

from typing import Any, Literal as TypingLiteral, Protocol, runtime_checkable

from arango_plugin.aql.fragment import Aql
from arango_plugin.kernel.errors import ExecutionError, NotFoundError, UniquenessViolationError
from arango_plugin.observability.logging import SensitiveFieldsFilter, get_logger

Expectation = TypingLiteral["exactly_one", "at_most_one", "at_least_one"]


@runtime_checkable
class ArangoConnectorPort(Protocol):
    """Port: runs compiled AQL and returns every result row."""

    async def execute(self, query: str, bind_vars: dict[str, Any]) -> list[Any]: ...


class QueryExecutor:
    """Runs :class:`Aql` fragments through a connector.

    Any failure raised by the connector is wrapped in :class:`ExecutionError`
    with the original exception attached.  Nothing is retried.
    """

    def __init__(
        self,
        connector: ArangoConnectorPort,
        *,
        redactor: SensitiveFieldsFilter | None = None,
    ) -> None:
        self._connector = connector
        self._redactor = redactor or SensitiveFieldsFilter()
        self._log = get_logger(__name__)

    @property
    def connector(self) -> ArangoConnectorPort:
        return self._connector

    async def run(self, query: Aql, *, operation: str) -> list[Any]:
        compiled = query.compile()
        self._log.debug(
            "aql.query",
            operation=operation,
            aql=compiled.debug_text(self._redactor.redact_value),
        )
        try:
            rows = await self._connector.execute(compiled.query, compiled.bind_vars)
        except Exception as exc:
            self._log.error("aql.failed", operation=operation, error=str(exc))
            raise ExecutionError(operation, f"Execute AQL ERROR: {exc}", cause=exc) from exc
        return list(rows)


def validate_count(
    rows: list[Any],
    expectation: Expectation,
    *,
    operation: str,
    resource: str = "record",
    identifier: Any = None,
) -> list[Any]:
    """Check *rows* against *expectation* and return them unchanged.

    More rows than allowed raises :class:`UniquenessViolationError`; none where
    at least one is needed raises :class:`NotFoundError`.
    """
    if expectation in ("exactly_one", "at_most_one") and len(rows) > 1:
        raise UniquenessViolationError(operation, len(rows))
    if expectation in ("exactly_one", "at_least_one") and not rows:
        raise NotFoundError(resource, identifier)
    return rows


def first_or_none(rows: list[Any]) -> Any:
    return rows[0] if rows else None


__all__ = ["ArangoConnectorPort", "Expectation", "QueryExecutor", "first_or_none", "validate_count"]
