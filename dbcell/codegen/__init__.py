"""Elixir source generation for connection cells."""

from __future__ import annotations

from .formatter import DEFAULT_LINE_LENGTH, Formatter
from .generator import generate, to_terms
from .terms import literal, quote_string

__all__ = [
    "DEFAULT_LINE_LENGTH",
    "Formatter",
    "generate",
    "literal",
    "quote_string",
    "to_terms",
]
