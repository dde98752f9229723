"""Minimal Elixir term tree used to describe generated snippets."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence, Tuple, Union

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\f": "\\f",
    "\v": "\\v",
    "\b": "\\b",
    "\a": "\\a",
    "\x1b": "\\e",
    "\0": "\\0",
}


@dataclass(frozen=True, slots=True)
class Raw:
    """Token printed verbatim (variables, atoms, aliases, literals)."""

    text: str


@dataclass(frozen=True, slots=True)
class Pair:
    """Keyword (``key: value``) or map (``"key" => value``) entry."""

    prefix: str
    value: "Term"


@dataclass(frozen=True, slots=True)
class Container:
    """Delimited, comma separated items: lists, tuples, maps and call arguments."""

    open: str
    items: Tuple["Term", ...]
    close: str


@dataclass(frozen=True, slots=True)
class Match:
    """``left = right``."""

    left: "Term"
    right: "Term"


@dataclass(frozen=True, slots=True)
class Pipe:
    """``stage |> stage |> ...``."""

    stages: Tuple["Term", ...]


Term = Union[Raw, Pair, Container, Match, Pipe]


def var(name: str) -> Raw:
    return Raw(name)


def atom(name: str) -> Raw:
    return Raw(f":{name}")


def alias(name: str) -> Raw:
    return Raw(name)


def tuple_of(*items: Term) -> Container:
    return Container("{", items, "}")


def list_of(*items: Term) -> Container:
    return Container("[", items, "]")


def keyword(entries: Iterable[tuple[str, Term]]) -> tuple[Pair, ...]:
    return tuple(Pair(f"{key}: ", value) for key, value in entries)


def keyword_list(entries: Iterable[tuple[str, Term]]) -> Container:
    """Keyword list in the given entry order."""

    return Container("[", keyword(entries), "]")


def call(name: str, *args: Term) -> Container:
    return Container(f"{name}(", args, ")")


def match(left: Term, right: Term) -> Match:
    return Match(left, right)


def pipe(*stages: Term) -> Pipe:
    return Pipe(stages)


def quote_string(value: str) -> str:
    """Double-quoted Elixir string literal."""

    chunks = ['"']
    for index, char in enumerate(value):
        if char in _ESCAPES:
            chunks.append(_ESCAPES[char])
        elif char == "#" and value[index + 1 : index + 2] == "{":
            chunks.append("\\#")
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            chunks.append(f"\\u{ord(char):04X}")
        else:
            chunks.append(char)
    chunks.append('"')
    return "".join(chunks)


def _float_literal(value: float) -> str:
    if not math.isfinite(value):
        return "nil"
    text = repr(value)
    mantissa, _, exponent = text.partition("e")
    if "." not in mantissa:
        mantissa = f"{mantissa}.0"
    if exponent:
        return f"{mantissa}e{int(exponent)}"
    return mantissa


def literal(value: Any) -> Term:
    """Escape a plain Python value into the equivalent Elixir term."""

    if value is None:
        return Raw("nil")
    if isinstance(value, bool):
        return Raw("true" if value else "false")
    if isinstance(value, int):
        return Raw(str(value))
    if isinstance(value, float):
        return Raw(_float_literal(value))
    if isinstance(value, str):
        return Raw(quote_string(value))
    if isinstance(value, Mapping):
        entries = sorted(((str(key), item) for key, item in value.items()), key=lambda entry: entry[0])
        return Container(
            "%{",
            tuple(Pair(f"{quote_string(key)} => ", literal(item)) for key, item in entries),
            "}",
        )
    if isinstance(value, Sequence):
        return Container("[", tuple(literal(item) for item in value), "]")
    return Raw(quote_string(str(value)))


__all__ = [
    "Container",
    "Match",
    "Pair",
    "Pipe",
    "Raw",
    "Term",
    "alias",
    "atom",
    "call",
    "keyword",
    "keyword_list",
    "list_of",
    "literal",
    "match",
    "pipe",
    "quote_string",
    "tuple_of",
    "var",
]
