"""Turn raw field edits into the set of field updates to merge."""

from __future__ import annotations

import json
import re
import unicodedata
from typing import Any, Mapping

from .drivers import default_port

_PORT_PATTERN = re.compile(r"[+-]?[0-9]+")
_IDENTIFIER_CATEGORIES = frozenset({"Lu", "Ll", "Lt", "Lm", "Lo", "Mn", "Mc", "Nd", "Pc"})

RESERVED_WORDS = frozenset(
    {
        "after",
        "and",
        "catch",
        "do",
        "else",
        "end",
        "false",
        "fn",
        "in",
        "nil",
        "not",
        "or",
        "rescue",
        "true",
        "when",
    }
)


def is_valid_variable_name(name: object) -> bool:
    """Whether the name can be bound as an Elixir variable."""

    if not isinstance(name, str) or not name:
        return False
    head = name[0]
    if not (head == "_" or (head.isalpha() and head.islower())):
        return False
    if not all(unicodedata.category(char) in _IDENTIFIER_CATEGORIES for char in name[1:]):
        return False
    return name not in RESERVED_WORDS


def parse_port(value: object) -> int | None:
    """Strict base-10 parse of the whole value; anything else is no port."""

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _PORT_PATTERN.fullmatch(value):
        return int(value)
    return None


def parse_credentials(value: object, current: Mapping[str, Any]) -> dict[str, Any]:
    """Accept a mapping or a JSON object string; keep the current map otherwise."""

    if isinstance(value, Mapping):
        return {str(key): item for key, item in value.items()}
    if isinstance(value, str):
        if not value.strip():
            return {}
        try:
            parsed = json.loads(value)
        except ValueError:
            return dict(current)
        if isinstance(parsed, dict):
            return parsed
    return dict(current)


def normalize(fields: Mapping[str, Any], field: str, value: Any) -> dict[str, Any]:
    """Return the updates produced by setting ``field`` to ``value``.

    ``fields`` is the current wire-keyed field mapping. The result always
    contains at least one entry and the function never raises: bad input is
    mapped to a safe value so the caller can report it back to the editor.
    """

    if field == "port":
        return {"port": parse_port(value)}
    if field == "type":
        return {"type": value, "port": default_port(value)}
    if field == "variable":
        if is_valid_variable_name(value):
            return {"variable": value}
        return {"variable": fields.get("variable")}
    if field == "credentials":
        return {"credentials": parse_credentials(value, fields.get("credentials") or {})}
    return {field: value}


__all__ = [
    "RESERVED_WORDS",
    "is_valid_variable_name",
    "normalize",
    "parse_credentials",
    "parse_port",
]
