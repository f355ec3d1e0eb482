"""Conversion of raw column values into display strings.

Each declared PostgreSQL type maps to one rendering strategy. Types without a
dedicated strategy use ``FallbackRenderer``. No strategy raises: a value the
strategy cannot handle is handed to the fallback, and the fallback always
produces a string.
"""

from __future__ import annotations

import json
import uuid
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

NULL_CELL = " "
UNPARSED_PREFIX = "unparsed:"
ARRAY_NULL = "NULL"

_ARRAY_SPECIAL = frozenset('{},"\\')


class ValueRenderer(ABC):
    """Strategy turning one non-null raw value into its display string."""

    @abstractmethod
    def render(self, raw: Any) -> str:
        raise NotImplementedError


class FallbackRenderer(ValueRenderer):
    """Best-effort string decode used for every type without a strategy.

    Values psycopg loads into Python containers are written back in the
    server's text form: booleans as ``t``/``f``, lists as array literals and
    mappings as JSON.
    """

    def render(self, raw: Any) -> str:
        if isinstance(raw, str):
            return raw
        if isinstance(raw, (bytes, bytearray, memoryview)):
            data = bytes(raw)
            try:
                return data.decode("utf-8")
            except UnicodeDecodeError:
                return f"{UNPARSED_PREFIX}{data.hex()}"
        if isinstance(raw, bool):
            return _bool_text(raw)
        if isinstance(raw, list):
            return _array_literal(raw, self)
        if isinstance(raw, dict):
            return _json_text(raw)
        return str(raw)


FALLBACK = FallbackRenderer()


class TextRenderer(ValueRenderer):
    def render(self, raw: Any) -> str:
        if isinstance(raw, str):
            return raw
        return FALLBACK.render(raw)


class UuidRenderer(ValueRenderer):
    """Canonical hyphenated lowercase form."""

    def render(self, raw: Any) -> str:
        if isinstance(raw, uuid.UUID):
            return str(raw)
        if isinstance(raw, str):
            try:
                return str(uuid.UUID(raw))
            except ValueError:
                return FALLBACK.render(raw)
        return FALLBACK.render(raw)


class IntegerRenderer(ValueRenderer):
    def render(self, raw: Any) -> str:
        # bool is an int subclass but never a valid integer column value
        if isinstance(raw, int) and not isinstance(raw, bool):
            return str(raw)
        return FALLBACK.render(raw)


class BooleanRenderer(ValueRenderer):
    """``t``/``f``, as psql prints booleans."""

    def render(self, raw: Any) -> str:
        if isinstance(raw, bool):
            return _bool_text(raw)
        return FALLBACK.render(raw)


class JsonRenderer(ValueRenderer):
    """Serialise loaded ``json``/``jsonb`` documents back to JSON text.

    psycopg parses every document, so a ``str`` here is a JSON string scalar
    and keeps its quotes.
    """

    def render(self, raw: Any) -> str:
        if isinstance(raw, (bytes, bytearray, memoryview)):
            return FALLBACK.render(raw)
        return _json_text(raw)


class ArrayRenderer(ValueRenderer):
    """PostgreSQL array literal, each element rendered by ``element``."""

    def __init__(self, element: ValueRenderer) -> None:
        self.element = element

    def render(self, raw: Any) -> str:
        if isinstance(raw, list):
            return _array_literal(raw, self.element)
        return FALLBACK.render(raw)


def _bool_text(raw: bool) -> str:
    return "t" if raw else "f"


def _json_text(raw: Any) -> str:
    return json.dumps(raw, ensure_ascii=False, default=str)


def _array_literal(items: list[Any], element: ValueRenderer) -> str:
    parts = []
    for item in items:
        if item is None:
            parts.append(ARRAY_NULL)
        elif isinstance(item, list):
            parts.append(_array_literal(item, element))
        else:
            parts.append(_quote_array_element(element.render(item)))
    return "{" + ",".join(parts) + "}"


def _quote_array_element(text: str) -> str:
    if text and text.upper() != ARRAY_NULL and not any(ch in _ARRAY_SPECIAL or ch.isspace() for ch in text):
        return text
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


_TEXT = TextRenderer()
_UUID = UuidRenderer()
_INTEGER = IntegerRenderer()
_BOOLEAN = BooleanRenderer()
_JSON = JsonRenderer()

RENDERERS: Mapping[str, ValueRenderer] = {
    "text": _TEXT,
    "varchar": _TEXT,
    "bpchar": _TEXT,
    "char": _TEXT,
    "name": _TEXT,
    "citext": _TEXT,
    "unknown": _TEXT,
    "uuid": _UUID,
    "int2": _INTEGER,
    "int4": _INTEGER,
    "int8": _INTEGER,
    "bool": _BOOLEAN,
    "json": _JSON,
    "jsonb": _JSON,
}


def renderer_for(declared_type: str) -> ValueRenderer:
    """Return the strategy registered for a declared type, or the fallback.

    ``name[]`` array types render their elements with the strategy of ``name``.
    """
    key = declared_type.lower()
    if key.endswith("[]"):
        return ArrayRenderer(renderer_for(key[:-2]))
    return RENDERERS.get(key, FALLBACK)


def render_value(declared_type: str, raw: Any) -> str:
    """Render one raw value of the given declared type for display."""
    if raw is None:
        return NULL_CELL
    return renderer_for(declared_type).render(raw)
