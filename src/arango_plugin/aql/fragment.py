"""AQL fragments – template text, literals and bind parameters.

Query text is assembled from exactly three kinds of parts:

* template text written in code (the ``template`` argument of :func:`aql`);
* :class:`Literal` – identifiers, operators and keywords inlined verbatim,
  accepted only when they match a strict token grammar;
* :class:`Bind` – values shipped separately as ``@valueN`` bind parameters.

Any other object handed to :func:`aql` or :func:`join` raises ``TypeError``,
so request data can never be interpolated into query text.

Usage::

    query = aql(
        "FOR t IN $collection FILTER t._id == $id RETURN t",
        collection=literal("user"),
        id=bind(user_id),
    )
    compiled = query.compile()
    compiled.query      # 'FOR t IN user FILTER t._id == @value0 RETURN t'
    compiled.bind_vars  # {'value0': user_id}
"""
from __future__ import annotations

import dataclasses
import json
import re
from typing import Any, Callable, Final, Iterable, Union

from arango_plugin.kernel.errors import ValidationError

_IDENTIFIER: Final = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*$")
_DEPTH: Final = re.compile(r"^\d+(?:\.\.\d+)?$")
_PLACEHOLDER: Final = re.compile(
    r"\$(?:(?P<escaped>\$)|(?P<named>[_A-Za-z][_A-Za-z0-9]*)|\{(?P<braced>[_A-Za-z][_A-Za-z0-9]*)\})"
)
_BIND_REFERENCE: Final = re.compile(r"@(value\d+)\b")

#: Comparison operators that may be inlined into a FILTER expression.
COMPARISON_OPERATORS: Final = frozenset(
    {"==", "!=", "<", "<=", ">", ">=", "IN", "NOT IN", "LIKE", "=~", "!~"}
)


def is_safe_literal(text: str) -> bool:
    """Return ``True`` when *text* may be inlined into query text."""
    if not isinstance(text, str):
        return False
    return bool(
        _IDENTIFIER.match(text)
        or text in COMPARISON_OPERATORS
        or _DEPTH.match(text)
    )


@dataclasses.dataclass(frozen=True, slots=True)
class Literal:
    """Query text inlined verbatim (collection / attribute names, operators)."""

    text: str

    def __post_init__(self) -> None:
        if not is_safe_literal(self.text):
            raise ValidationError(
                f"Unsafe AQL literal: {self.text!r}",
                errors=[{"loc": ["literal"], "msg": "not an identifier, operator or depth", "type": "unsafe_literal"}],
            )


@dataclasses.dataclass(frozen=True, eq=False, slots=True)
class Bind:
    """A value passed to the server as a bind parameter, never inlined."""

    value: Any


Part = Union[str, Literal, Bind]
Fragment = Union["Aql", Literal, Bind, None]


@dataclasses.dataclass(frozen=True)
class CompiledAql:
    """Final query text plus its bind parameters, ready for the driver."""

    query: str
    bind_vars: dict[str, Any]

    def debug_text(self, redact: Callable[[Any], Any] | None = None) -> str:
        """Return the query with bind values substituted back, for logs only."""

        def substitute(match: re.Match[str]) -> str:
            name = match.group(1)
            if name not in self.bind_vars:
                return match.group(0)
            value = self.bind_vars[name]
            if redact is not None:
                value = redact(value)
            return json.dumps(value, ensure_ascii=False, default=str)

        return _BIND_REFERENCE.sub(substitute, self.query)


class Aql:
    """An immutable, composable piece of AQL."""

    __slots__ = ("_parts",)

    def __init__(self, parts: Iterable[Part] = ()) -> None:
        self._parts: tuple[Part, ...] = tuple(
            p for p in parts if not (isinstance(p, str) and p == "")
        )

    @property
    def parts(self) -> tuple[Part, ...]:
        return self._parts

    def __bool__(self) -> bool:
        return bool(self._parts)

    def __add__(self, other: object) -> "Aql":
        if not isinstance(other, Aql):
            return NotImplemented
        return Aql(self._parts + other._parts)

    def __repr__(self) -> str:
        return f"Aql({self.compile().query!r})"

    def compile(self) -> CompiledAql:
        """Render text and assign ``valueN`` names; a reused :class:`Bind` keeps one name."""
        names: dict[int, str] = {}
        bind_vars: dict[str, Any] = {}
        chunks: list[str] = []
        for part in self._parts:
            if isinstance(part, str):
                chunks.append(part)
            elif isinstance(part, Literal):
                chunks.append(part.text)
            else:
                name = names.get(id(part))
                if name is None:
                    name = f"value{len(names)}"
                    names[id(part)] = name
                    bind_vars[name] = part.value
                chunks.append("@" + name)
        return CompiledAql("".join(chunks), bind_vars)


def literal(text: str) -> Literal:
    """Mark *text* for inlining; raises :class:`ValidationError` if unsafe."""
    return Literal(text)


def bind(value: Any) -> Bind:
    """Mark *value* as a bind parameter."""
    return Bind(value)


def _as_parts(name: str, fragment: Any) -> tuple[Part, ...]:
    if fragment is None:
        return ()
    if isinstance(fragment, Aql):
        return fragment.parts
    if isinstance(fragment, (Literal, Bind)):
        return (fragment,)
    raise TypeError(
        f"AQL placeholder ${name} got {type(fragment).__name__}; "
        "wrap values with bind() and identifiers with literal()"
    )


def aql(template: str, /, **fragments: Fragment) -> Aql:
    """Build an :class:`Aql` from *template*, filling ``$name`` placeholders.

    ``$$`` renders a literal dollar sign.  ``None`` renders nothing.
    """
    parts: list[Part] = []
    pos = 0
    for match in _PLACEHOLDER.finditer(template):
        parts.append(template[pos:match.start()])
        pos = match.end()
        if match.group("escaped") is not None:
            parts.append("$")
            continue
        name = match.group("named") or match.group("braced")
        if name not in fragments:
            raise KeyError(f"AQL template placeholder ${name} has no value")
        parts.extend(_as_parts(name, fragments[name]))
    parts.append(template[pos:])
    return Aql(parts)


def join(fragments: Iterable[Fragment], separator: str = "") -> Aql:
    """Concatenate *fragments* with template-text *separator*, skipping empty ones."""
    parts: list[Part] = []
    for fragment in fragments:
        fragment_parts = _as_parts("join", fragment)
        if not fragment_parts:
            continue
        if parts and separator:
            parts.append(separator)
        parts.extend(fragment_parts)
    return Aql(parts)


def literal_list(names: Iterable[str], separator: str = ", ") -> Aql:
    """Comma-separated literal identifiers, e.g. for a ``WITH`` clause."""
    return join((literal(n) for n in names), separator)


__all__ = [
    "COMPARISON_OPERATORS",
    "Aql",
    "Bind",
    "CompiledAql",
    "Literal",
    "aql",
    "bind",
    "is_safe_literal",
    "join",
    "literal",
    "literal_list",
]
