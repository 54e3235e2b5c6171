from __future__ import annotations

import re
from numbers import Number
from typing import Any, Callable

from .base import Document, Query, Sort

_MISSING = object()


def resolve_field(document: Document, path: str) -> Any:
    """Look up a dotted field path. Returns ``_MISSING`` when any segment is absent."""
    value: Any = document
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _comparable(a: Any, b: Any) -> bool:
    if a is _MISSING or a is None or b is None:
        return False
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool)
    if isinstance(a, Number) and isinstance(b, Number):
        return True
    return type(a) is type(b)


def _equals(value: Any, expected: Any) -> bool:
    if value is _MISSING:
        return expected is None
    if isinstance(value, list) and not isinstance(expected, list):
        return expected in value
    return value == expected


def _regex(value: Any, pattern: Any, options: str) -> bool:
    if not isinstance(value, str):
        return False
    flags = re.IGNORECASE if "i" in options else 0
    if isinstance(pattern, re.Pattern):
        return pattern.search(value) is not None
    return re.search(pattern, value, flags) is not None


_COMPARISONS: dict[str, Callable[[Any, Any], bool]] = {
    "$gt": lambda a, b: a > b,
    "$gte": lambda a, b: a >= b,
    "$lt": lambda a, b: a < b,
    "$lte": lambda a, b: a <= b,
}


def _apply_operators(value: Any, condition: dict[str, Any]) -> bool:
    for op, arg in condition.items():
        if op == "$options":
            continue
        if op == "$eq":
            ok = _equals(value, arg)
        elif op == "$ne":
            ok = not _equals(value, arg)
        elif op in _COMPARISONS:
            ok = _comparable(value, arg) and _COMPARISONS[op](value, arg)
        elif op == "$in":
            ok = any(_equals(value, item) for item in arg)
        elif op == "$nin":
            ok = not any(_equals(value, item) for item in arg)
        elif op == "$exists":
            ok = (value is not _MISSING) == bool(arg)
        elif op == "$regex":
            ok = _regex(value, arg, condition.get("$options", ""))
        else:
            raise ValueError(f"Unsupported query operator: {op}")
        if not ok:
            return False
    return True


def matches(document: Document, query: Query | None) -> bool:
    """Evaluate a MongoDB-style filter against a single document."""
    if not query:
        return True
    for key, condition in query.items():
        if key == "$and":
            if not all(matches(document, sub) for sub in condition):
                return False
            continue
        if key == "$or":
            if not any(matches(document, sub) for sub in condition):
                return False
            continue

        value = resolve_field(document, key)
        if isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
            if not _apply_operators(value, condition):
                return False
        elif not _equals(value, condition):
            return False
    return True


def sort_documents(documents: list[Document], sort: Sort) -> list[Document]:
    """Stable multi-key sort; missing and None values order first ascending."""
    result = list(documents)
    for field, direction in reversed(list(sort)):
        def key(doc: Document, field: str = field) -> tuple[bool, Any]:
            value = resolve_field(doc, field)
            if value is _MISSING or value is None:
                return (False, 0)
            return (True, value)

        result.sort(key=key, reverse=direction < 0)
    return result
