"""Identifier case conversion used to derive collection names."""

from __future__ import annotations

import re
from typing import Final

_UPPER: Final = re.compile(r"[A-Z]")
_SEPARATED: Final = re.compile(r"[_-]([a-zA-Z])")
_LINKED: Final = re.compile(r"2([a-zA-Z])")


def underline_case(text: str) -> str:
    """``testTest`` / ``TestTest`` -> ``test_test``."""
    result = _UPPER.sub(lambda m: "_" + m.group(0).lower(), text)
    return result[1:] if result.startswith("_") else result


def lower_first(text: str) -> str:
    return text[:1].lower() + text[1:]


def upper_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def lower_camelize(text: str) -> str:
    """``test-test`` / ``test_test`` -> ``testTest``; ``user2role`` -> ``user2Role``."""
    result = _SEPARATED.sub(lambda m: m.group(1).upper(), text)
    result = _LINKED.sub(lambda m: "2" + m.group(1).upper(), result)
    return lower_first(result)


def upper_camelize(text: str) -> str:
    return upper_first(lower_camelize(text))


__all__ = ["lower_camelize", "lower_first", "underline_case", "upper_camelize", "upper_first"]
